"""Watch service for hashtrack."""

from datetime import datetime
import os
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field
from rich.console import Console
from watchfiles import Change, awatch

from hashtrack.config import ProjectConfig
from hashtrack.ignore_utils import normalize_extensions, should_ignore_path
from hashtrack.shutdown import ShutdownHandler
from hashtrack.sync.sync_service import SyncService
from hashtrack.sync.utils import SyncReport

console = Console()


class WatchEvent(BaseModel):
    timestamp: datetime
    path: str
    action: str  # new, modified, deleted, sync
    status: str  # success, error
    checksum: Optional[str] = None
    error: Optional[str] = None


class WatchServiceState(BaseModel):
    # Service status
    running: bool = False
    start_time: datetime = Field(default_factory=datetime.now)
    pid: int = Field(default_factory=os.getpid)

    # Stats
    error_count: int = 0
    last_error: Optional[datetime] = None
    last_scan: Optional[datetime] = None

    # File counts
    synced_files: int = 0

    # Recent activity
    recent_events: List[WatchEvent] = Field(default_factory=list)

    def add_event(
        self,
        path: str,
        action: str,
        status: str,
        checksum: Optional[str] = None,
        error: Optional[str] = None,
    ) -> WatchEvent:
        event = WatchEvent(
            timestamp=datetime.now(),
            path=path,
            action=action,
            status=status,
            checksum=checksum,
            error=error,
        )
        self.recent_events.insert(0, event)
        self.recent_events = self.recent_events[:100]  # Keep last 100
        return event

    def record_error(self, error: str):
        self.error_count += 1
        self.add_event(path="", action="sync", status="error", error=error)
        self.last_error = datetime.now()


class WatchService:
    def __init__(
        self,
        sync_service: SyncService,
        config: ProjectConfig,
        directory: Path,
        shutdown: Optional[ShutdownHandler] = None,
    ):
        self.sync_service = sync_service
        self.config = config
        self.directory = directory
        self.shutdown = shutdown
        self.ignore = normalize_extensions(config.ignore_extensions)
        self.state = WatchServiceState()
        self.status_path = config.home / "watch-status.json"
        self.status_path.parent.mkdir(parents=True, exist_ok=True)

    async def run(self):
        """Sync once, then re-sync the directory whenever files change"""
        self.state.running = True
        self.state.start_time = datetime.now()
        await self.handle_changes()

        console.print(f"\n[cyan]Watching {self.directory} for changes...[/cyan]")
        try:
            async for changes in awatch(
                self.directory,
                watch_filter=self.filter_changes,
                debounce=self.config.sync_delay,
                recursive=True,
                stop_event=self.shutdown.event if self.shutdown else None,
            ):
                logger.debug(f"{len(changes)} filesystem changes")
                # just sync the whole dir
                await self.handle_changes()

        except Exception as e:
            self.state.record_error(str(e))
            await self.write_status()
            raise
        finally:
            self.state.running = False
            await self.write_status()

    async def write_status(self):
        """Write current state to status file"""
        self.status_path.write_text(self.state.model_dump_json(indent=2))

    def filter_changes(self, change: Change, path: str) -> bool:
        """Skip ignored extensions and hashtrack's own files"""
        resolved = Path(path).resolve()
        for internal in self.config.internal_paths:
            if resolved.is_relative_to(internal.resolve()):
                return False
        return not should_ignore_path(path, self.ignore)

    async def handle_changes(self) -> SyncReport:
        """Re-sync the watched directory and record what changed"""
        logger.debug(f"handling change in directory: {self.directory} ...")
        report = await self.sync_service.sync(self.directory)
        self.state.last_scan = datetime.now()
        self.state.synced_files = report.total

        for path in sorted(report.new):
            event = self.state.add_event(
                path=path, action="new", status="success", checksum=report.checksums[path]
            )
            console.print(
                f"{event.timestamp.isoformat(timespec='minutes')} New:\t\t [green]{path}[/green] ({event.checksum[:8]})"
            )
        for path in sorted(report.modified):
            event = self.state.add_event(
                path=path, action="modified", status="success", checksum=report.checksums[path]
            )
            console.print(
                f"{event.timestamp.isoformat(timespec='minutes')} Modified:\t [yellow]{path}[/yellow] ({event.checksum[:8]})"
            )
        for path in sorted(report.deleted):
            event = self.state.add_event(path=path, action="deleted", status="success")
            console.print(f"{event.timestamp.isoformat(timespec='minutes')} Deleted:\t [red]{path}[/red]")

        await self.write_status()
        return report

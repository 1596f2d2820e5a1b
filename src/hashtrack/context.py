"""Application context: the store, tracking map and shutdown handler for one run."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Coroutine, TypeVar

from loguru import logger

from hashtrack.config import ProjectConfig
from hashtrack.db import DatabaseType
from hashtrack.shutdown import ShutdownHandler, ShutdownRequested
from hashtrack.store import StoreSession
from hashtrack.sync.file_change_scanner import FileChangeScanner
from hashtrack.sync.sync_service import SyncService
from hashtrack.sync.tracking import TrackingMap


T = TypeVar("T")


@dataclass
class AppContext:
    config: ProjectConfig
    store: StoreSession
    tracking: TrackingMap
    shutdown: ShutdownHandler

    @property
    def scanner(self) -> FileChangeScanner:
        return FileChangeScanner(
            self.store,
            tracking=self.tracking,
            ignore_extensions=self.config.ignore_extensions,
            max_workers=self.config.hash_workers,
            chunk_size=self.config.chunk_size,
            exclude_paths=self.config.internal_paths,
        )

    @property
    def sync_service(self) -> SyncService:
        return SyncService(scanner=self.scanner, store=self.store)


@asynccontextmanager
async def init_db(
    config: ProjectConfig,
    db_type: DatabaseType = DatabaseType.FILESYSTEM,
    install_signal_handlers: bool = True,
) -> AsyncGenerator[AppContext, None]:
    """
    Open the store and start shutdown handling for the duration of the block.

    Exits the process if the store cannot be opened. On SIGINT/SIGTERM, or
    when ctx.shutdown.trigger() is called, the store is closed, the task
    running the block is cancelled and ShutdownRequested is raised out of
    the block. Leaving the block closes the store if that has not happened
    already.
    """
    store = await StoreSession(config.database_path, db_type).open()
    shutdown = ShutdownHandler(store)
    shutdown.start(main_task=asyncio.current_task())
    if install_signal_handlers:
        shutdown.install_signal_handlers()

    ctx = AppContext(config=config, store=store, tracking=TrackingMap(), shutdown=shutdown)
    try:
        yield ctx
    except asyncio.CancelledError:
        if not shutdown.event.is_set():
            raise
        # cancelled by the shutdown handler, reported below as ShutdownRequested
        asyncio.current_task().uncancel()
    finally:
        await shutdown.stop()
        if await store.close():
            logger.debug("Store closed at end of run")

    if shutdown.event.is_set():
        raise ShutdownRequested(shutdown.reason, shutdown.exit_code)


def run(main: Coroutine[Any, Any, T]) -> T:
    """asyncio.run, turning a shutdown request into a non-zero process exit."""
    try:
        return asyncio.run(main)
    except ShutdownRequested as e:
        logger.info(f"Stopped: {e}")
        raise SystemExit(e.exit_code) from None

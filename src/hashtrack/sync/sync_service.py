"""Service for reconciling the store with the filesystem."""

from pathlib import Path
from typing import Union

from loguru import logger

from hashtrack.store import StoreNotOpenError, StoreSession
from hashtrack.sync.file_change_scanner import FileChangeScanner
from hashtrack.sync.hash_record import HashRecord
from hashtrack.sync.utils import SyncReport


class SyncService:
    """Records the current digests of a directory tree and removes vanished files."""

    def __init__(self, scanner: FileChangeScanner, store: StoreSession):
        self.scanner = scanner
        self.store = store

    async def sync(self, directory: Union[str, Path]) -> SyncReport:
        """
        Scan directory, persist new and changed digests, delete removed paths.

        Raises:
            StoreNotOpenError: If the store is not open
            ScanError: If the scan fails; nothing is written in that case
        """
        if not self.store.is_open:
            raise StoreNotOpenError(f"Store at {self.store.db_path} is not open")

        records = await self.scanner.scan_directory(directory)
        db_state = await self.scanner.get_db_state(directory)
        report = SyncReport()

        # Handle deletions first
        for path in sorted(set(db_state) - set(records)):
            logger.debug(f"Removing {path}")
            await HashRecord(path=path, digest=db_state[path]).delete(self.store)
            report.deleted.add(path)

        for path, record in records.items():
            report.checksums[path] = record.checksum
            if await record.update(self.store):
                if path in db_state:
                    report.modified.add(path)
                else:
                    report.new.add(path)
                logger.debug(f"Recorded {path} ({record.checksum[:8]})")
            else:
                report.unchanged.add(path)

        logger.info(
            f"Synced {directory}: {len(report.new)} new, {len(report.modified)} modified, "
            f"{len(report.deleted)} deleted, {len(report.unchanged)} unchanged"
        )
        return report

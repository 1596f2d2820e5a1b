"""Service for detecting changes between the filesystem and the store."""

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from loguru import logger

from hashtrack.store import StoreSession
from hashtrack.sync.hash_record import HashRecord, key_path, path_key
from hashtrack.sync.scanner import hash_dir
from hashtrack.sync.tracking import TrackingMap
from hashtrack.sync.utils import SyncReport
from hashtrack.utils.file_utils import DEFAULT_CHUNK_SIZE


def root_prefix(root: Union[str, Path]) -> bytes:
    """Key prefix shared by every path under root."""
    return path_key(os.path.join(os.fspath(root), ""))


class FileChangeScanner:
    """
    Detects changes between the filesystem and the store without writing.
    The filesystem is treated as the source of truth.
    """

    def __init__(
        self,
        store: StoreSession,
        tracking: Optional[TrackingMap] = None,
        ignore_extensions: Iterable[str] = (),
        max_workers: int = 4,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        exclude_paths: Iterable[Union[str, Path]] = (),
    ):
        self.store = store
        self.tracking = tracking
        self.ignore_extensions = list(ignore_extensions)
        self.max_workers = max_workers
        self.chunk_size = chunk_size
        self.exclude_paths = list(exclude_paths)

    async def scan_directory(self, directory: Union[str, Path]) -> Dict[str, HashRecord]:
        """Digest every non-ignored file under directory."""
        logger.debug(f"Scanning directory: {directory}")
        return await hash_dir(
            directory,
            ignore_extensions=self.ignore_extensions,
            tracking=self.tracking,
            max_workers=self.max_workers,
            chunk_size=self.chunk_size,
            exclude=self.exclude_paths,
        )

    async def get_db_state(self, directory: Union[str, Path]) -> Dict[str, bytes]:
        """Stored digests for directory itself and the paths under it, keyed by path."""
        stored = await self.store.find_by_prefix(root_prefix(directory))
        # a file recorded at the root path itself, before it became a directory
        root_key = path_key(os.fspath(directory))
        digest = await self.store.get(root_key)
        if digest is not None:
            stored[root_key] = digest
        return {key_path(key): value for key, value in stored.items()}

    def compare(self, current: Dict[str, HashRecord], db_state: Dict[str, bytes]) -> SyncReport:
        """Classify every path as new, modified, unchanged or deleted."""
        report = SyncReport()

        for path, record in current.items():
            if path not in db_state:
                report.new.add(path)
            elif record.digest != db_state[path]:
                report.modified.add(path)
            else:
                report.unchanged.add(path)
            report.checksums[path] = record.checksum

        report.deleted = set(db_state) - set(current)
        return report

    async def find_changes(self, directory: Union[str, Path]) -> SyncReport:
        """
        Find changes between the filesystem and the store.

        Args:
            directory: Directory to check

        Returns:
            SyncReport detailing changes
        """
        current = await self.scan_directory(directory)
        db_state = await self.get_db_state(directory)
        report = self.compare(current, db_state)

        logger.debug(f"Changes found: {report.total_changes}")
        logger.debug(f"  New: {len(report.new)}")
        logger.debug(f"  Modified: {len(report.modified)}")
        logger.debug(f"  Deleted: {len(report.deleted)}")
        return report

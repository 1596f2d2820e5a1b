from .file_change_scanner import FileChangeScanner
from .hash_record import HashRecord
from .scanner import ScanError, hash_dir, walk_directory
from .sync_service import SyncService
from .tracking import TrackingMap

__all__ = [
    "FileChangeScanner",
    "HashRecord",
    "ScanError",
    "SyncService",
    "TrackingMap",
    "hash_dir",
    "walk_directory",
]

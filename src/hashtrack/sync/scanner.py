"""Directory walk and digest pass."""

import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from loguru import logger

from hashtrack.ignore_utils import normalize_extensions, should_ignore_path
from hashtrack.sync.hash_record import HashRecord
from hashtrack.sync.tracking import TrackingMap
from hashtrack.utils.file_utils import DEFAULT_CHUNK_SIZE, DigestError, compute_digest


class ScanError(Exception):
    """Raised when a scan cannot complete. No partial results are returned."""

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Scan failed at {path}: {error}")


def _raise_walk_error(error: OSError) -> None:
    raise ScanError(error.filename or "", error) from error


def walk_directory(
    root: Union[str, Path],
    ignore_extensions: Iterable[str] = (),
    exclude: Iterable[Union[str, Path]] = (),
) -> List[str]:
    """
    Recursively list the regular files under root, skipping ignored extensions.

    Paths are root joined with the walked entries, so they are absolute
    only if root is. Output is sorted. Files and directories whose real
    path is listed in exclude are left out; an excluded directory is not
    descended into.

    Raises:
        ScanError: If root or any subdirectory cannot be listed
    """
    root = os.fspath(root)
    ignore = normalize_extensions(ignore_extensions)
    excluded = {os.path.realpath(p) for p in exclude}
    if not os.path.isdir(root):
        raise ScanError(root, NotADirectoryError(f"Not a directory: {root}"))

    files: List[str] = []
    skipped = 0
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        if excluded:
            dirnames[:] = [
                name
                for name in dirnames
                if os.path.realpath(os.path.join(dirpath, name)) not in excluded
            ]
        dirnames.sort()
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not os.path.isfile(path):
                continue
            if should_ignore_path(path, ignore):
                skipped += 1
                continue
            if excluded and os.path.realpath(path) in excluded:
                skipped += 1
                continue
            files.append(path)

    logger.debug(f"Found {len(files)} files under {root} ({skipped} skipped)")
    # per-directory order is not global order: "a/x" would sort after "a.txt"
    return sorted(files)


async def hash_dir(
    root: Union[str, Path],
    *,
    ignore_extensions: Iterable[str] = (),
    tracking: Optional[TrackingMap] = None,
    max_workers: int = 4,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    exclude: Iterable[Union[str, Path]] = (),
) -> Dict[str, HashRecord]:
    """
    Walk root and digest every file that is not ignored.

    Digests are computed on a pool of worker threads; each finished record
    is also written to the tracking map when one is given. Paths in exclude
    are skipped as in walk_directory. A file that
    disappears between the walk and its digest is skipped with a warning.

    Returns:
        Mapping of path to HashRecord

    Raises:
        ScanError: If the walk fails or a listed file cannot be read
    """
    paths = await asyncio.to_thread(walk_directory, root, ignore_extensions, exclude)

    def digest_one(path: str) -> Optional[HashRecord]:
        try:
            record = HashRecord(path=path, digest=compute_digest(path, chunk_size))
        except DigestError as e:
            if isinstance(e.error, FileNotFoundError):
                logger.warning(f"File disappeared during scan, skipping: {path}")
                if tracking is not None:
                    tracking.discard(path)
                return None
            raise ScanError(path, e.error) from e
        if tracking is not None:
            tracking.set(record)
        return record

    loop = asyncio.get_running_loop()
    pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="hashtrack-digest")
    try:
        results = await asyncio.gather(
            *(loop.run_in_executor(pool, digest_one, path) for path in paths)
        )
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    records = {record.path: record for record in results if record is not None}
    logger.debug(f"Hashed {len(records)} files under {root}")
    return records

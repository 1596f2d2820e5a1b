"""Utilities for file operations."""

import asyncio
import hashlib
from pathlib import Path
from typing import Union

from loguru import logger

DIGEST_SIZE = hashlib.sha224().digest_size  # 28 bytes
DEFAULT_CHUNK_SIZE = 64 * 1024


class FileError(Exception):
    """Base exception for file operations."""

    pass


class DigestError(FileError):
    """Raised when a file cannot be opened or read while computing its digest."""

    def __init__(self, path: Union[str, Path], error: OSError):
        self.path = str(path)
        self.error = error
        super().__init__(f"Failed to digest {self.path}: {error}")


def compute_digest(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute the SHA-224 digest of a file, reading it in chunks.

    Args:
        path: File to hash
        chunk_size: Bytes read per chunk

    Returns:
        The 28 byte digest

    Raises:
        DigestError: If the file cannot be opened or a read fails. No
            partial digest is ever returned.
    """
    h = hashlib.sha224()
    try:
        with open(path, "rb") as f:
            while chunk := f.read(chunk_size):
                h.update(chunk)
    except OSError as e:
        logger.debug(f"Failed to digest {path}: {e}")
        raise DigestError(path, e) from e
    return h.digest()


async def compute_checksum(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Hex digest of a file, computed off the event loop.

    Raises:
        DigestError: If the file cannot be read
    """
    digest = await asyncio.to_thread(compute_digest, path, chunk_size)
    return digest.hex()

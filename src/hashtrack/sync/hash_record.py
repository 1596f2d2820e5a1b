"""The (path, digest) record for one tracked file."""

import os
from dataclasses import dataclass, replace
from typing import Optional, TYPE_CHECKING

from loguru import logger

from hashtrack.utils.file_utils import DEFAULT_CHUNK_SIZE, DigestError, compute_digest

if TYPE_CHECKING:  # pragma: no cover
    from hashtrack.store import StoreSession


def path_key(path: str) -> bytes:
    """Store key for a path."""
    return os.fsencode(path)


def key_path(key: bytes) -> str:
    """Path for a store key."""
    return os.fsdecode(key)


@dataclass(frozen=True)
class HashRecord:
    """A file path and the digest of its contents as of the last recalculation."""

    path: str
    digest: bytes

    @property
    def key(self) -> bytes:
        return path_key(self.path)

    @property
    def checksum(self) -> str:
        """Hex form of the digest."""
        return self.digest.hex()

    @classmethod
    def from_path(cls, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Optional["HashRecord"]:
        """Digest the file at path. Returns None if it cannot be read."""
        try:
            return cls(path=path, digest=compute_digest(path, chunk_size))
        except DigestError:
            return None

    def recalculate(self, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Optional["HashRecord"]:
        """
        Digest the file at path and return a new record for it.

        This record is never modified. On an open or read failure None is
        returned and the caller keeps the previous record.
        """
        try:
            digest = compute_digest(path, chunk_size)
        except DigestError as e:
            logger.debug(f"Recalculate failed: {e}")
            return None
        return replace(self, path=path, digest=digest)

    async def update(self, store: Optional["StoreSession"]) -> bool:
        """
        Persist the digest if the store has none or a different one for this path.

        Returns:
            True if the digest was written ("changed"), False if the stored
            value already matches or the store is not open.
        """
        if store is None or not store.is_open:
            return False
        stored = await store.get(self.key)
        if stored == self.digest:
            return False
        await store.put(self.key, self.digest)
        return True

    async def delete(self, store: Optional["StoreSession"]) -> None:
        """Remove this path from the store. Deleting an absent key is fine."""
        if store is None or not store.is_open:
            return
        await store.delete(self.key)

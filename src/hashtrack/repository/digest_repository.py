"""Repository exposing the digest table as a byte-keyed key-value store."""

from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hashtrack.db import scoped_session
from hashtrack.models import StoredDigest


def prefix_upper_bound(prefix: bytes) -> Optional[bytes]:
    """Smallest byte string greater than every string starting with prefix.

    Returns None when no such bound exists (prefix is empty or all 0xff).
    """
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return None
    return stripped[:-1] + bytes([stripped[-1] + 1])


class DigestRepository:
    """Get/put/delete by raw byte key. Every call is its own committed session."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def get(self, key: bytes) -> Optional[bytes]:
        """Return the stored value, or None if the key is absent."""
        async with scoped_session(self.session_maker) as session:
            result = await session.execute(
                select(StoredDigest.value).where(StoredDigest.key == key)
            )
            return result.scalar_one_or_none()

    async def put(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite the value under key."""
        stmt = insert(StoredDigest).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[StoredDigest.key], set_={"value": stmt.excluded.value}
        )
        async with scoped_session(self.session_maker) as session:
            await session.execute(stmt)

    async def delete(self, key: bytes) -> bool:
        """Remove key. Returns True if a row was removed; absent keys are not an error."""
        async with scoped_session(self.session_maker) as session:
            result = await session.execute(delete(StoredDigest).where(StoredDigest.key == key))
            return result.rowcount > 0

    async def keys(self) -> List[bytes]:
        async with scoped_session(self.session_maker) as session:
            result = await session.execute(select(StoredDigest.key).order_by(StoredDigest.key))
            return list(result.scalars().all())

    async def find_by_prefix(self, prefix: bytes) -> Dict[bytes, bytes]:
        """All key-value pairs whose key starts with prefix."""
        query = select(StoredDigest.key, StoredDigest.value).where(StoredDigest.key >= prefix)
        upper = prefix_upper_bound(prefix)
        if upper is not None:
            query = query.where(StoredDigest.key < upper)
        async with scoped_session(self.session_maker) as session:
            result = await session.execute(query)
            return {key: value for key, value in result.all()}

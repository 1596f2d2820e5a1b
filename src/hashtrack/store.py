"""Lifecycle of the persistent digest store."""

from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from hashtrack.db import DatabaseType, create_engine, create_tables
from hashtrack.repository import DigestRepository


class StoreNotOpenError(RuntimeError):
    """Raised when an operation needs an open store and none is available."""

    pass


class StoreSession:
    """
    Owns the key-value store for one application run.

    The store is opened once and closed exactly once, either by the main
    flow or by the shutdown handler. Operations on a session that is not
    open are no-ops: reads return nothing and writes are dropped.
    """

    def __init__(self, db_path: Path, db_type: DatabaseType = DatabaseType.FILESYSTEM):
        self.db_path = db_path
        self.db_type = db_type
        self._engine: Optional[AsyncEngine] = None
        self._repository: Optional[DigestRepository] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._repository is not None and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def open(self) -> "StoreSession":
        """
        Open the store, creating it if absent.

        A store that cannot be opened is fatal: the failure is logged and
        the process exits with status 1.
        """
        if self._closed:
            raise RuntimeError("Store session was already closed")
        if self._repository is not None:
            return self

        engine = None
        try:
            if self.db_type == DatabaseType.FILESYSTEM:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(self.db_path, self.db_type)
            await create_tables(engine)
        except Exception as e:
            if engine is not None:
                await engine.dispose()
            logger.critical(f"Failed to open store at {self.db_path}: {e}")
            raise SystemExit(1) from e

        self._engine = engine
        self._repository = DigestRepository(async_sessionmaker(engine, expire_on_commit=False))
        logger.debug(f"Opened store at {self.db_path}")
        return self

    async def close(self) -> bool:
        """Close the store. Returns False if it was already closed or never opened."""
        if self._closed or self._engine is None:
            self._closed = True
            return False
        # mark first so a concurrent caller cannot close twice
        self._closed = True
        engine, self._engine = self._engine, None
        self._repository = None
        await engine.dispose()
        logger.debug(f"Closed store at {self.db_path}")
        return True

    async def get(self, key: bytes) -> Optional[bytes]:
        if not self.is_open:
            return None
        return await self._repository.get(key)

    async def put(self, key: bytes, value: bytes) -> None:
        if not self.is_open:
            logger.debug(f"Store not open, dropping put for {key!r}")
            return
        await self._repository.put(key, value)

    async def delete(self, key: bytes) -> None:
        if not self.is_open:
            logger.debug(f"Store not open, dropping delete for {key!r}")
            return
        await self._repository.delete(key)

    async def keys(self) -> List[bytes]:
        if not self.is_open:
            return []
        return await self._repository.keys()

    async def find_by_prefix(self, prefix: bytes) -> Dict[bytes, bytes]:
        if not self.is_open:
            return {}
        return await self._repository.find_by_prefix(prefix)

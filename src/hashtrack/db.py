from contextlib import asynccontextmanager
from enum import Enum, auto
from pathlib import Path
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlalchemy.pool import StaticPool

from hashtrack.models import Base


class DatabaseType(Enum):
    """Types of supported databases."""

    MEMORY = auto()
    FILESYSTEM = auto()

    @classmethod
    def get_db_url(cls, db_path: Path, db_type: "DatabaseType") -> str:
        """Get SQLAlchemy URL for database path."""
        if db_type == cls.MEMORY:
            logger.info("Using in-memory SQLite database")
            return "sqlite+aiosqlite://"

        return f"sqlite+aiosqlite:///{db_path}"


def create_engine(db_path: Path, db_type: DatabaseType = DatabaseType.FILESYSTEM) -> AsyncEngine:
    """Create an async engine, keeping a single connection for in-memory databases."""
    db_url = DatabaseType.get_db_url(db_path, db_type)
    logger.debug(f"Creating engine for db_url: {db_url}")
    if db_type == DatabaseType.MEMORY:
        # every connection to sqlite:// is a new empty database
        return create_async_engine(
            db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
    return create_async_engine(db_url, connect_args={"check_same_thread": False})


@asynccontextmanager
async def scoped_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a session with proper lifecycle management.

    Commits on success, rolls back on error.

    Args:
        session_maker: Session maker to create sessions from
    """
    session = session_maker()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def create_tables(engine: AsyncEngine) -> None:
    """Initialize database with required tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


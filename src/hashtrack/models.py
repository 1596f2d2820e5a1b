"""SQLAlchemy models for the digest store."""

from sqlalchemy import LargeBinary
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all models"""

    pass


class StoredDigest(Base):
    """One key-value pair: a file path (as bytes) and its last recorded digest."""

    __tablename__ = "stored_digest"

    key: Mapped[bytes] = mapped_column(LargeBinary, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        return f"StoredDigest(key={self.key!r}, value={self.value.hex()})"

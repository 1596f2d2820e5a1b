"""Configuration management for hashtrack."""

from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DATABASE_NAME = "hashtrack.db"
DATA_DIR_NAME = "data"


class ProjectConfig(BaseSettings):
    """Configuration for a hashtrack store and its scans."""

    # Default to ~/.hashtrack but allow override with env var
    home: Path = Field(
        default_factory=lambda: Path.home() / ".hashtrack",
        description="Base path for hashtrack files",
    )

    db_path: Optional[Path] = Field(
        default=None,
        description="Explicit store location, defaults to <home>/data/hashtrack.db",
    )

    ignore_extensions: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="File extensions (without the dot) excluded from scans",
    )

    hash_workers: int = Field(default=4, ge=1, description="Threads used to digest files")
    chunk_size: int = Field(default=64 * 1024, ge=1, description="Bytes read per digest chunk")
    sync_delay: int = Field(default=500, ge=0, description="Watch debounce in milliseconds")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HASHTRACK_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def database_path(self) -> Path:
        """Get SQLite database path."""
        if self.db_path is not None:
            return self.db_path
        return self.home / DATA_DIR_NAME / DATABASE_NAME

    @property
    def internal_paths(self) -> List[Path]:
        """Files and directories hashtrack writes to, kept out of scans and watches."""
        db = self.database_path
        sidecars = [db.with_name(db.name + suffix) for suffix in ("-journal", "-wal", "-shm")]
        return [self.home, db, *sidecars]

    @field_validator("ignore_extensions", mode="before")
    @classmethod
    def split_extensions(cls, v):
        """Accept a comma separated string, and drop leading dots."""
        if isinstance(v, str):
            v = v.split(",")
        return [str(ext).strip().lstrip(".") for ext in v if str(ext).strip()]

    @field_validator("home")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Ensure home path exists."""
        if not v.exists():
            v.mkdir(parents=True)
        return v


# Default config for the CLI
config = ProjectConfig()

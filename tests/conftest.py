"""Common test fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from hashtrack.config import ProjectConfig
from hashtrack.context import AppContext, init_db
from hashtrack.db import DatabaseType
from hashtrack.store import StoreSession


@pytest.fixture
def project_config(tmp_path) -> ProjectConfig:
    """Test configuration rooted in a temp directory."""
    return ProjectConfig(
        home=tmp_path / "hashtrack-home",
        ignore_extensions=["tmp", "log"],
        hash_workers=2,
    )


@pytest.fixture
def scan_dir(tmp_path) -> Path:
    """Empty directory to scan."""
    directory = tmp_path / "tree"
    directory.mkdir()
    return directory


@pytest_asyncio.fixture
async def store(tmp_path) -> AsyncGenerator[StoreSession, None]:
    """An open store backed by a temp file."""
    store = await StoreSession(tmp_path / "data" / "store.db").open()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def app_context(project_config) -> AsyncGenerator[AppContext, None]:
    async with init_db(
        project_config,
        db_type=DatabaseType.MEMORY,
        install_signal_handlers=False,
    ) as ctx:
        yield ctx


"""Tests for the watch service."""

from pathlib import Path

import pytest
import pytest_asyncio
from watchfiles import Change

from hashtrack.context import AppContext
from hashtrack.sync.watch_service import WatchService, WatchServiceState


@pytest_asyncio.fixture
async def watch_service(app_context: AppContext, project_config, scan_dir: Path):
    return WatchService(
        sync_service=app_context.sync_service,
        config=project_config,
        directory=scan_dir,
        shutdown=app_context.shutdown,
    )


@pytest.mark.asyncio
async def test_handle_changes_records_events(watch_service: WatchService, scan_dir: Path):
    (scan_dir / "a.txt").write_text("one")

    report = await watch_service.handle_changes()

    assert report.new == {str(scan_dir / "a.txt")}
    assert watch_service.state.synced_files == 1
    assert watch_service.state.last_scan is not None
    event = watch_service.state.recent_events[0]
    assert event.path == str(scan_dir / "a.txt")
    assert event.action == "new"
    assert event.status == "success"
    assert event.checksum == report.checksums[str(scan_dir / "a.txt")]


@pytest.mark.asyncio
async def test_handle_changes_modified_and_deleted(watch_service: WatchService, scan_dir: Path):
    (scan_dir / "a.txt").write_text("one")
    (scan_dir / "b.txt").write_text("two")
    await watch_service.handle_changes()

    (scan_dir / "a.txt").write_text("changed")
    (scan_dir / "b.txt").unlink()
    await watch_service.handle_changes()

    actions = {(e.path, e.action) for e in watch_service.state.recent_events[:2]}
    assert actions == {
        (str(scan_dir / "a.txt"), "modified"),
        (str(scan_dir / "b.txt"), "deleted"),
    }


@pytest.mark.asyncio
async def test_status_file_written(watch_service: WatchService, scan_dir: Path):
    (scan_dir / "a.txt").write_text("one")
    await watch_service.handle_changes()

    state = WatchServiceState.model_validate_json(watch_service.status_path.read_text())
    assert state.synced_files == 1


@pytest.mark.asyncio
async def test_filter_changes(watch_service: WatchService, scan_dir: Path):
    assert watch_service.filter_changes(Change.added, str(scan_dir / "a.txt"))
    assert not watch_service.filter_changes(Change.added, str(scan_dir / "b.tmp"))
    assert not watch_service.filter_changes(Change.modified, str(watch_service.status_path))


def test_record_error():
    state = WatchServiceState()
    state.record_error("boom")

    assert state.error_count == 1
    assert state.last_error is not None
    assert state.recent_events[0].error == "boom"


@pytest.mark.asyncio
async def test_filter_changes_skips_store_files(watch_service: WatchService):
    db = watch_service.config.database_path

    assert not watch_service.filter_changes(Change.modified, str(db))
    assert not watch_service.filter_changes(Change.added, f"{db}-journal")

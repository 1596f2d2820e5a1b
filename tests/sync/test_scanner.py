"""Tests for directory walk and digest pass."""

import hashlib
import os
from pathlib import Path

import pytest

from hashtrack.sync import scanner
from hashtrack.sync.scanner import ScanError, hash_dir, walk_directory
from hashtrack.sync.tracking import TrackingMap
from hashtrack.utils.file_utils import DigestError


def create_test_file(path: Path, content: str = "test content") -> None:
    """Create a test file with given content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_walk_applies_extension_filter(scan_dir: Path):
    for name in ["a.txt", "b.tmp", "c.log", "d"]:
        create_test_file(scan_dir / name)

    files = walk_directory(scan_dir, ignore_extensions=["tmp", "log"])

    assert files == [str(scan_dir / "a.txt"), str(scan_dir / "d")]


def test_walk_is_recursive_and_sorted(scan_dir: Path):
    create_test_file(scan_dir / "z.txt")
    create_test_file(scan_dir / "notes" / "deep" / "n.md")
    create_test_file(scan_dir / "a.txt")

    files = walk_directory(scan_dir)

    assert files == sorted(
        [
            str(scan_dir / "a.txt"),
            str(scan_dir / "notes" / "deep" / "n.md"),
            str(scan_dir / "z.txt"),
        ]
    )


def test_walk_skips_excluded_paths(scan_dir: Path):
    create_test_file(scan_dir / "a.txt")
    create_test_file(scan_dir / "store.db")
    create_test_file(scan_dir / ".hashtrack" / "watch-status.json")
    create_test_file(scan_dir / ".hashtrack" / "hashtrack-cli.log")

    files = walk_directory(
        scan_dir, exclude=[scan_dir / ".hashtrack", scan_dir / "store.db", scan_dir / "missing"]
    )

    assert files == [str(scan_dir / "a.txt")]


def test_walk_empty_directory(scan_dir: Path):
    assert walk_directory(scan_dir) == []


def test_walk_missing_root(tmp_path: Path):
    with pytest.raises(ScanError):
        walk_directory(tmp_path / "nope")


def test_walk_root_is_a_file(tmp_path: Path):
    path = tmp_path / "file.txt"
    create_test_file(path)
    with pytest.raises(ScanError):
        walk_directory(path)


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs permission checks")
def test_walk_unreadable_subdirectory_fails(scan_dir: Path):
    create_test_file(scan_dir / "ok.txt")
    locked = scan_dir / "locked"
    create_test_file(locked / "secret.txt")
    locked.chmod(0o000)
    try:
        with pytest.raises(ScanError):
            walk_directory(scan_dir)
    finally:
        locked.chmod(0o755)


@pytest.mark.asyncio
async def test_hash_dir(scan_dir: Path):
    create_test_file(scan_dir / "x.txt", "hello")
    create_test_file(scan_dir / "y.txt", "world")
    create_test_file(scan_dir / "skip.tmp", "ignored")

    records = await hash_dir(scan_dir, ignore_extensions=["tmp"], max_workers=2)

    assert set(records) == {str(scan_dir / "x.txt"), str(scan_dir / "y.txt")}
    x = records[str(scan_dir / "x.txt")]
    assert x.path == str(scan_dir / "x.txt")
    assert x.digest == hashlib.sha224(b"hello").digest()


@pytest.mark.asyncio
async def test_hash_dir_fills_tracking_map(scan_dir: Path):
    for i in range(10):
        create_test_file(scan_dir / f"f{i}.txt", f"content {i}")
    tracking = TrackingMap()

    records = await hash_dir(scan_dir, tracking=tracking, max_workers=4)

    assert len(tracking) == 10
    assert tracking.snapshot() == records


@pytest.mark.asyncio
async def test_hash_dir_skips_file_deleted_mid_scan(scan_dir: Path, monkeypatch):
    create_test_file(scan_dir / "kept.txt")
    vanished = str(scan_dir / "vanished.txt")
    real_walk = scanner.walk_directory

    def walk_with_vanished(root, ignore_extensions=(), exclude=()):
        return real_walk(root, ignore_extensions, exclude) + [vanished]

    monkeypatch.setattr(scanner, "walk_directory", walk_with_vanished)

    records = await hash_dir(scan_dir)

    assert list(records) == [str(scan_dir / "kept.txt")]


@pytest.mark.asyncio
async def test_hash_dir_read_error_aborts_scan(scan_dir: Path, monkeypatch):
    create_test_file(scan_dir / "good.txt")
    bad = scan_dir / "bad.txt"
    create_test_file(bad)
    real_digest = scanner.compute_digest

    def failing_digest(path, chunk_size):
        if path == str(bad):
            raise DigestError(path, PermissionError(13, "Permission denied"))
        return real_digest(path, chunk_size)

    monkeypatch.setattr(scanner, "compute_digest", failing_digest)

    with pytest.raises(ScanError) as exc:
        await hash_dir(scan_dir)
    assert exc.value.path == str(bad)


@pytest.mark.asyncio
async def test_hash_dir_missing_root(tmp_path: Path):
    with pytest.raises(ScanError):
        await hash_dir(tmp_path / "nope")

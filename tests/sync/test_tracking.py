"""Tests for the tracking map and its read/write lock."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from hashtrack.sync.hash_record import HashRecord
from hashtrack.sync.tracking import RWLock, TrackingMap


def test_set_get_discard():
    tracking = TrackingMap()
    record = HashRecord(path="/a", digest=b"\x00" * 28)

    tracking.set(record)
    assert tracking.get("/a") == record
    assert "/a" in tracking
    assert len(tracking) == 1

    tracking.discard("/a")
    tracking.discard("/a")
    assert tracking.get("/a") is None
    assert len(tracking) == 0


def test_snapshot_is_a_copy():
    tracking = TrackingMap()
    tracking.set(HashRecord(path="/a", digest=b"\x00" * 28))

    snapshot = tracking.snapshot()
    tracking.set(HashRecord(path="/b", digest=b"\x00" * 28))

    assert list(snapshot) == ["/a"]


def test_concurrent_writers():
    tracking = TrackingMap()

    def write(i):
        tracking.set(HashRecord(path=f"/f{i}", digest=bytes([i % 256]) * 28))
        return tracking.get(f"/f{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(write, range(200)))

    assert len(tracking) == 200
    assert all(r is not None for r in results)


def test_readers_share_the_lock():
    lock = RWLock()
    both_inside = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read_locked():
            # both readers must be inside at once for the barrier to pass
            both_inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert not both_inside.broken


def test_writer_excludes_readers():
    lock = RWLock()
    events = []
    writer_inside = threading.Event()

    def writer():
        with lock.write_locked():
            writer_inside.set()
            time.sleep(0.1)
            events.append("writer done")

    def reader():
        writer_inside.wait(timeout=5)
        with lock.read_locked():
            events.append("reader")

    w = threading.Thread(target=writer)
    r = threading.Thread(target=reader)
    w.start()
    r.start()
    w.join(timeout=5)
    r.join(timeout=5)

    assert events == ["writer done", "reader"]

"""Process-wide cache of the hash records produced in the current run."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from hashtrack.sync.hash_record import HashRecord


class RWLock:
    """Many concurrent readers or one writer. Writers are preferred once waiting."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TrackingMap:
    """
    path -> HashRecord for records touched in this run.

    Not authoritative; the store is. Safe to use from the digest worker threads.
    """

    def __init__(self):
        self._lock = RWLock()
        self._records: Dict[str, HashRecord] = {}

    def get(self, path: str) -> Optional[HashRecord]:
        with self._lock.read_locked():
            return self._records.get(path)

    def set(self, record: HashRecord) -> None:
        with self._lock.write_locked():
            self._records[record.path] = record

    def discard(self, path: str) -> None:
        with self._lock.write_locked():
            self._records.pop(path, None)

    def snapshot(self) -> Dict[str, HashRecord]:
        with self._lock.read_locked():
            return dict(self._records)

    def __contains__(self, path: str) -> bool:
        with self._lock.read_locked():
            return path in self._records

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._records)

"""In-memory run history and quarantine registry.

History is the source of truth for flakiness; everything in flaky.py is
derived from snapshots taken here. Both structures are safe to share between
concurrent callers: writers lock per test id, readers copy before scoring.
"""

from __future__ import annotations

import logging
import threading
from bisect import insort
from collections.abc import Iterable
from datetime import datetime, timezone

from ...constants import HISTORY_CAPACITY
from .models import RunRecord, TestRunResult

logger = logging.getLogger(__name__)


class RunRing:
    """
    Fixed-capacity ring of run results for one test, in timestamp order.

    Slots are preallocated. A result newer than every stored run is written
    at the head; an older one (a backfilled run) is inserted at its
    chronological position, after any runs with the same timestamp. Once
    full, the run with the oldest timestamp is the one dropped. ``evicted``
    counts the dropped runs.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._slots: list[TestRunResult | None] = [None] * capacity
        self._head = 0  # next slot to write
        self._size = 0
        self.evicted = 0

    def __len__(self) -> int:
        return self._size

    def append(self, result: TestRunResult) -> None:
        latest = self.latest()
        if latest is None or result.timestamp >= latest.timestamp:
            self._push(result)
            return

        runs = self.snapshot()
        insort(runs, result, key=lambda r: r.timestamp)
        if len(runs) > self.capacity:
            runs.pop(0)
            self.evicted += 1
        self._reset(runs)

    def _push(self, result: TestRunResult) -> None:
        if self._size == self.capacity:
            self.evicted += 1
        else:
            self._size += 1
        self._slots[self._head] = result
        self._head = (self._head + 1) % self.capacity

    def _reset(self, runs: list[TestRunResult]) -> None:
        self._slots = [*runs, *[None] * (self.capacity - len(runs))]
        self._size = len(runs)
        self._head = self._size % self.capacity

    def snapshot(self) -> list[TestRunResult]:
        """Return the stored results, oldest first."""
        start = (self._head - self._size) % self.capacity
        return [
            self._slots[(start + offset) % self.capacity]
            for offset in range(self._size)
        ]

    def latest(self) -> TestRunResult | None:
        if self._size == 0:
            return None
        return self._slots[(self._head - 1) % self.capacity]


class RunHistoryStore:
    """Per-test-id bounded run history, keyed by a caller-supplied stable id."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self._capacity = capacity
        self._rings: dict[str, RunRing] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._files: dict[str, str] = {}
        self._names: dict[str, str] = {}
        self._store_lock = threading.Lock()

    def _ring_for(self, test_id: str) -> tuple[RunRing, threading.Lock]:
        with self._store_lock:
            ring = self._rings.get(test_id)
            if ring is None:
                ring = self._rings[test_id] = RunRing(self._capacity)
                self._locks[test_id] = threading.Lock()
            return ring, self._locks[test_id]

    def record(self, records: Iterable[RunRecord], now: datetime | None = None) -> int:
        """Append one result per record; returns the number recorded."""
        now = now or datetime.now(timezone.utc)
        count = 0

        for record in records:
            ring, lock = self._ring_for(record.test_id)
            with lock:
                ring.append(TestRunResult(
                    timestamp=as_utc(record.timestamp or now),
                    passed=record.passed,
                    duration=record.duration,
                    error=record.error,
                ))
            with self._store_lock:
                if record.file:
                    self._files[record.test_id] = record.file
                if record.test_name:
                    self._names[record.test_id] = record.test_name
            count += 1

        return count

    def test_ids(self) -> list[str]:
        with self._store_lock:
            return sorted(self._rings)

    def snapshot(self, test_id: str) -> list[TestRunResult]:
        """Copy of one test's history, oldest first (empty when untracked)."""
        with self._store_lock:
            ring = self._rings.get(test_id)
            lock = self._locks.get(test_id)
        if ring is None:
            return []
        with lock:
            return ring.snapshot()

    def snapshot_all(self) -> dict[str, list[TestRunResult]]:
        return {test_id: self.snapshot(test_id) for test_id in self.test_ids()}

    def evicted(self, test_id: str) -> int:
        with self._store_lock:
            ring = self._rings.get(test_id)
        return ring.evicted if ring else 0

    def file_of(self, test_id: str) -> str | None:
        with self._store_lock:
            return self._files.get(test_id)

    def name_of(self, test_id: str) -> str | None:
        with self._store_lock:
            return self._names.get(test_id)

    def latest_durations_by_file(self) -> dict[str, float]:
        """Sum of the latest recorded duration of each test, grouped by file."""
        totals: dict[str, float] = {}
        for test_id in self.test_ids():
            file = self.file_of(test_id)
            runs = self.snapshot(test_id)
            if file and runs:
                totals[file] = totals.get(file, 0.0) + runs[-1].duration
        return totals


class QuarantineRegistry:
    """
    Test ids excluded from must-run/should-run selection.

    Changed only through ``add`` and ``release``; history is never touched.
    """

    def __init__(self):
        self._reasons: dict[str, str] = {}
        self._lock = threading.Lock()

    def __contains__(self, test_id: str) -> bool:
        with self._lock:
            return test_id in self._reasons

    def __len__(self) -> int:
        with self._lock:
            return len(self._reasons)

    def add(self, test_id: str, reason: str) -> bool:
        """Quarantine a test. Returns False if it already was (first reason kept)."""
        with self._lock:
            if test_id in self._reasons:
                return False
            self._reasons[test_id] = reason
        logger.info("Quarantined test %s: %s", test_id, reason)
        return True

    def release(self, test_id: str) -> bool:
        """Lift a quarantine. Returns False if the test was not quarantined."""
        with self._lock:
            removed = self._reasons.pop(test_id, None) is not None
        if removed:
            logger.info("Released test %s from quarantine", test_id)
        return removed

    def items(self) -> dict[str, str]:
        with self._lock:
            return dict(self._reasons)


def as_utc(timestamp: datetime) -> datetime:
    """Naive timestamps are taken as UTC so all runs stay comparable."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp

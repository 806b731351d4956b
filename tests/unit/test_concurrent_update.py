from __future__ import annotations

import threading
from typing import Any

import pytest
from bson import ObjectId

from docbench.errors import InvalidArgumentError, WriteError
from docbench.operations import concurrent_update
from docbench.operations.concurrent_update import ConcurrentUpdateOperation

WORKERS = 4
DOCS = 3
FAILING_DELTA = 2
BARRIER_TIMEOUT = 5.0


class _RecordingUpdate:
    """Stands in for update_documents and remembers every call."""

    def __init__(self, barrier: threading.Barrier | None = None) -> None:
        self.barrier = barrier
        self.calls: list[tuple[int, list[ObjectId]]] = []
        self._lock = threading.Lock()

    def __call__(self, collection: Any, ids: list[ObjectId], delta: int, clock: Any) -> dict:
        del collection, clock
        if self.barrier is not None:
            # Only passes when every worker is in flight at the same time.
            self.barrier.wait(timeout=BARRIER_TIMEOUT)
        with self._lock:
            self.calls.append((delta, ids))
        return {"operation": "update", "docs": len(ids), "duration_seconds": 0.001}


@pytest.fixture
def harvested(monkeypatch) -> list[ObjectId]:
    ids = [ObjectId() for _ in range(DOCS + 2)]
    monkeypatch.setattr(concurrent_update, "harvest_ids", lambda collection, batch_size: ids)
    return ids


def test_dispatches_one_call_per_worker_with_one_based_deltas(monkeypatch, harvested):
    fake = _RecordingUpdate(barrier=threading.Barrier(WORKERS))
    monkeypatch.setattr(concurrent_update, "update_documents", fake)

    result = ConcurrentUpdateOperation(workers=WORKERS, docs=DOCS).execute(object())

    assert sorted(delta for delta, _ in fake.calls) == list(range(1, WORKERS + 1))
    assert all(ids == harvested[:DOCS] for _, ids in fake.calls)
    assert result["extra"]["completed"] == WORKERS
    assert sorted(result["extra"]["call_durations"]) == list(range(1, WORKERS + 1))
    assert result["docs"] == DOCS * WORKERS


def test_fail_fast_raises_first_worker_error(monkeypatch, harvested):
    release = threading.Event()
    calls: list[int] = []

    def fake(collection, ids, delta, clock):
        calls.append(delta)
        if delta == FAILING_DELTA:
            raise WriteError("update", "bulk write failed: boom")
        release.wait(timeout=BARRIER_TIMEOUT)
        return {"docs": len(ids), "duration_seconds": 0.001}

    monkeypatch.setattr(concurrent_update, "update_documents", fake)

    try:
        with pytest.raises(WriteError, match="boom"):
            ConcurrentUpdateOperation(workers=WORKERS, docs=DOCS).execute(object())
        # returned while siblings were still blocked
        assert not release.is_set()
    finally:
        release.set()


def test_wait_all_lets_every_worker_finish_before_raising(monkeypatch, harvested):
    fake = _RecordingUpdate()

    def failing(collection, ids, delta, clock):
        result = fake(collection, ids, delta, clock)
        if delta == FAILING_DELTA:
            raise WriteError("update", "bulk write failed: boom")
        return result

    monkeypatch.setattr(concurrent_update, "update_documents", failing)

    with pytest.raises(WriteError):
        ConcurrentUpdateOperation(workers=WORKERS, docs=DOCS, fail_fast=False).execute(object())

    assert sorted(delta for delta, _ in fake.calls) == list(range(1, WORKERS + 1))


def test_docs_beyond_harvest_is_rejected(monkeypatch, harvested):
    fake = _RecordingUpdate()
    monkeypatch.setattr(concurrent_update, "update_documents", fake)

    with pytest.raises(InvalidArgumentError):
        ConcurrentUpdateOperation(workers=WORKERS, docs=len(harvested) + 1).execute(object())

    assert fake.calls == []


def test_zero_workers_dispatches_nothing(monkeypatch, harvested):
    fake = _RecordingUpdate()
    monkeypatch.setattr(concurrent_update, "update_documents", fake)

    result = ConcurrentUpdateOperation(workers=0, docs=DOCS).execute(object())

    assert fake.calls == []
    assert result["docs"] == 0
    assert result["extra"]["completed"] == 0
    assert result["extra"]["call_durations"] == {}


def test_negative_workers_is_rejected():
    with pytest.raises(InvalidArgumentError):
        ConcurrentUpdateOperation(workers=-1, docs=DOCS)

"""
Bulk update: increment `count` and stamp `last_updated` on a set of documents.

A single bulk_write carries one UpdateMany whose filter is `_id $in ids`. The
write is cumulative, so running it N times adds N deltas to every selected
document. `SequentialUpdateOperation` runs it repeatedly on the calling thread
with delta = 0, 1, ..., runs - 1.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence

from bson import ObjectId
from pymongo import UpdateMany
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.errors import InvalidArgumentError, WriteError
from docbench.operations.abstract import AbstractBenchmarkOperation, OperationResult
from docbench.operations.harvest import harvest_ids
from docbench.utils.logging import get_logger

log = get_logger(__name__)


def build_update(ids: Sequence[ObjectId], delta: int, now: int) -> UpdateMany:
    return UpdateMany(
        {"_id": {"$in": list(ids)}},
        {"$inc": {"count": delta}, "$set": {"last_updated": now}},
    )


def update_documents(
    collection: Collection,
    ids: Sequence[ObjectId],
    delta: int,
    clock: Callable[[], float] = time.time,
) -> OperationResult:
    """
    Apply one bulk update to `ids`.

    Raises
    ------
    WriteError
        If the server rejects the bulk write.
    """
    log.debug("updating data...", extra={"delta": delta, "docs": len(ids)})
    request = build_update(ids, delta, int(clock()))
    start = time.perf_counter()
    try:
        result = collection.bulk_write([request])
    except PyMongoError as exc:
        raise WriteError("update", f"bulk write failed: {exc}", exc) from exc
    duration = time.perf_counter() - start

    log.info(
        f"{delta})  {duration:.3f}s taken for updating {len(ids)}",
        extra={"delta": delta, "docs": len(ids), "duration_seconds": duration},
    )
    return OperationResult(
        operation="update",
        docs=len(ids),
        duration_seconds=duration,
        extra={
            "delta": delta,
            "matched": result.matched_count,
            "modified": result.modified_count,
        },
    )


def select_ids(ids: Sequence[ObjectId], docs: int, operation: str) -> List[ObjectId]:
    """The leading `docs` identifiers; every update call works on this same slice."""
    if docs < 0:
        raise InvalidArgumentError(operation, f"--docs must be >= 0, got {docs}")
    if docs > len(ids):
        raise InvalidArgumentError(
            operation, f"--docs={docs} exceeds the {len(ids)} documents in the collection"
        )
    return list(ids[:docs])


class SequentialUpdateOperation(AbstractBenchmarkOperation):
    """
    Harvest ids, then run `runs` updates one after another on the same slice.
    """

    name: str = "update"
    description: str = "Sequential bulk updates, delta = 0..runs-1."

    def __init__(
        self,
        runs: int,
        docs: int,
        harvest_batch_size: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if runs < 0:
            raise InvalidArgumentError(self.name, f"--no must be >= 0, got {runs}")
        self.runs = runs
        self.docs = docs
        self.harvest_batch_size = harvest_batch_size
        self.clock = clock

    def execute(self, collection: Collection) -> OperationResult:
        ids = select_ids(harvest_ids(collection, self.harvest_batch_size), self.docs, self.name)

        call_durations: List[float] = []
        start = time.perf_counter()
        for delta in range(self.runs):
            result = update_documents(collection, ids, delta, clock=self.clock)
            call_durations.append(result["duration_seconds"])
        duration = time.perf_counter() - start

        log.info(f">>>> {duration:.3f}s is the total time taken", extra={"runs": self.runs})
        return OperationResult(
            operation=self.name,
            docs=len(ids) * self.runs,
            duration_seconds=duration,
            notes=f"runs={self.runs} docs={len(ids)}",
            extra={"runs": self.runs, "call_durations": call_durations},
        )


__all__ = [
    "SequentialUpdateOperation",
    "build_update",
    "select_ids",
    "update_documents",
]

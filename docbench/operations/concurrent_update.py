"""
Concurrent update dispatcher.

Fans out `workers` bulk updates onto a thread pool and joins on all of them.
Every worker gets the same leading slice of harvested ids and a distinct delta
in 1..workers, so after a clean run each selected document's `count` has grown
by workers * (workers + 1) / 2 whatever order the workers finished in.

The pymongo client is thread-safe and the id slice is never mutated, so no
locking is needed on our side. The server serializes the writes.

Failure handling
----------------
fail_fast=True (default): the first worker error observed is raised right away.
Workers that have not started are cancelled; ones already in flight are not
waited for and their results are not reported.

fail_fast=False: every worker runs to completion, then the first error (by
delta) is raised and the number of failed workers is logged.
"""

from __future__ import annotations

import time
from concurrent.futures import ALL_COMPLETED, FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional

from pymongo.collection import Collection

from docbench.errors import InvalidArgumentError
from docbench.operations.abstract import AbstractBenchmarkOperation, OperationResult
from docbench.operations.harvest import harvest_ids
from docbench.operations.update import select_ids, update_documents
from docbench.utils.logging import get_logger

log = get_logger(__name__)


class ConcurrentUpdateOperation(AbstractBenchmarkOperation):
    """
    Run `workers` bulk updates at once against the same `docs` documents.
    """

    name: str = "async-update"
    description: str = "Thread-pool fan-out of bulk updates, delta = 1..workers."

    def __init__(
        self,
        workers: int,
        docs: int,
        fail_fast: bool = True,
        harvest_batch_size: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if workers < 0:
            raise InvalidArgumentError(self.name, f"--no must be >= 0, got {workers}")
        self.workers = workers
        self.docs = docs
        self.fail_fast = fail_fast
        self.harvest_batch_size = harvest_batch_size
        self.clock = clock

    def execute(self, collection: Collection) -> OperationResult:
        ids = select_ids(harvest_ids(collection, self.harvest_batch_size), self.docs, self.name)

        # ThreadPoolExecutor rejects max_workers=0
        if self.workers == 0:
            log.info(">>>> 0.000s is the total time taken", extra={"workers": 0})
            return OperationResult(
                operation=self.name,
                docs=0,
                duration_seconds=0.0,
                notes=f"workers=0 docs={len(ids)}",
                extra={"workers": 0, "completed": 0, "call_durations": {}},
            )

        executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="update")
        start = time.perf_counter()
        futures: Dict[Future, int] = {
            executor.submit(update_documents, collection, ids, delta, self.clock): delta
            for delta in range(1, self.workers + 1)
        }
        done, pending = wait(
            futures, return_when=FIRST_EXCEPTION if self.fail_fast else ALL_COMPLETED
        )
        duration = time.perf_counter() - start

        failed = sorted(
            (future for future in done if future.exception() is not None),
            key=lambda future: futures[future],
        )
        if failed:
            executor.shutdown(wait=False, cancel_futures=True)
            log.error(
                f"{len(failed)} of {self.workers} update workers failed",
                extra={"failed": len(failed), "pending": len(pending)},
            )
            raise failed[0].exception()  # type: ignore[misc]
        executor.shutdown(wait=True)

        completion_order: List[int] = [futures[future] for future in done]
        call_durations = {
            futures[future]: future.result()["duration_seconds"] for future in done
        }
        log.info(f">>>> {duration:.3f}s is the total time taken", extra={"workers": self.workers})
        return OperationResult(
            operation=self.name,
            docs=len(ids) * self.workers,
            duration_seconds=duration,
            notes=f"workers={self.workers} docs={len(ids)}",
            extra={
                "workers": self.workers,
                "completed": len(completion_order),
                "call_durations": call_durations,
            },
        )


__all__ = ["ConcurrentUpdateOperation"]

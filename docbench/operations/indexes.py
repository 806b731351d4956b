"""
Index setup: the unique compound index and the timestamp index, in one request.
"""

from __future__ import annotations

import time
from typing import List

from pymongo import ASCENDING, DESCENDING, IndexModel
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.errors import WriteError
from docbench.operations.abstract import AbstractBenchmarkOperation, OperationResult
from docbench.utils.logging import get_logger

log = get_logger(__name__)


def benchmark_indexes() -> List[IndexModel]:
    return [
        IndexModel(
            [
                ("field_a", DESCENDING),
                ("field_b", DESCENDING),
                ("field_1", ASCENDING),
                ("field_2", ASCENDING),
                ("timestamp", DESCENDING),
            ],
            unique=True,
        ),
        IndexModel([("timestamp", DESCENDING)]),
    ]


class SetupIndexesOperation(AbstractBenchmarkOperation):
    """
    Declare both indexes with a single create_indexes call.

    Re-running with identical definitions is a no-op on the server. Existing
    documents that collide on the unique tuple make the request fail.
    """

    name: str = "setup"
    description: str = "create_indexes: unique compound + timestamp."

    def execute(self, collection: Collection) -> OperationResult:
        start = time.perf_counter()
        try:
            names = collection.create_indexes(benchmark_indexes())
        except PyMongoError as exc:
            raise WriteError(self.name, f"create index failed: {exc}", exc) from exc
        duration = time.perf_counter() - start

        log.info(f"Successfully created: {names}", extra={"indexes": names})
        return OperationResult(
            operation=self.name,
            docs=0,
            duration_seconds=duration,
            extra={"indexes": names},
        )


__all__ = ["SetupIndexesOperation", "benchmark_indexes"]

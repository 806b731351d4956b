from __future__ import annotations

import time

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.errors import WriteError
from docbench.operations.abstract import AbstractBenchmarkOperation, OperationResult
from docbench.utils.logging import get_logger

log = get_logger(__name__)


class DropOperation(AbstractBenchmarkOperation):
    """Remove the whole collection, indexes included. No confirmation."""

    name: str = "drop"
    description: str = "Drop the benchmark collection."

    def execute(self, collection: Collection) -> OperationResult:
        start = time.perf_counter()
        try:
            collection.drop()
        except PyMongoError as exc:
            raise WriteError(self.name, f"drop failed: {exc}", exc) from exc
        duration = time.perf_counter() - start

        log.info("Dropped collection.", extra={"collection": collection.full_name})
        return OperationResult(operation=self.name, docs=0, duration_seconds=duration)


__all__ = ["DropOperation"]

"""
Bulk insert: write a batch of generated documents in a single insert_many call.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Sequence

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.errors import WriteError
from docbench.operations.abstract import AbstractBenchmarkOperation, OperationResult
from docbench.utils.logging import get_logger

log = get_logger(__name__)


class InsertOperation(AbstractBenchmarkOperation):
    """
    Insert every document in one request.

    The batch is all-or-nothing only as far as insert_many makes it so; after a
    failure nothing here works out which documents landed.
    """

    name: str = "insert"
    description: str = "Single insert_many of generated documents."

    def __init__(self, documents: Sequence[Dict[str, Any]]) -> None:
        self.documents = documents

    def execute(self, collection: Collection) -> OperationResult:
        documents = list(self.documents)
        if not documents:
            # insert_many refuses an empty batch
            log.info("Nothing to insert")
            return OperationResult(operation=self.name, docs=0, duration_seconds=0.0)

        log.info("Inserting...", extra={"docs": len(documents)})
        start = time.perf_counter()
        try:
            result = collection.insert_many(documents)
        except PyMongoError as exc:
            raise WriteError(self.name, f"insert_many failed: {exc}", exc) from exc
        duration = time.perf_counter() - start

        inserted = len(result.inserted_ids)
        log.info(
            f">>>> Inserted {inserted} docs in {duration:.3f}s",
            extra={"docs": inserted, "duration_seconds": duration},
        )
        return OperationResult(
            operation=self.name,
            docs=inserted,
            duration_seconds=duration,
        )


__all__ = ["InsertOperation"]

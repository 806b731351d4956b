"""
Operations package for docbench.

Re-exports the abstract interfaces and the concrete operations so callers can
import from `docbench.operations` directly.
"""

from docbench.operations.abstract import (
    AbstractBenchmarkOperation,
    BenchmarkOperation,
    OperationResult,
)
from docbench.operations.concurrent_update import ConcurrentUpdateOperation
from docbench.operations.drop import DropOperation
from docbench.operations.harvest import harvest_ids, iter_id_batches
from docbench.operations.indexes import SetupIndexesOperation
from docbench.operations.insert import InsertOperation
from docbench.operations.update import SequentialUpdateOperation, update_documents

__all__ = [
    # Abstracts
    "AbstractBenchmarkOperation",
    "BenchmarkOperation",
    "OperationResult",
    # Concrete operations
    "ConcurrentUpdateOperation",
    "DropOperation",
    "InsertOperation",
    "SequentialUpdateOperation",
    "SetupIndexesOperation",
    # Building blocks
    "harvest_ids",
    "iter_id_batches",
    "update_documents",
]

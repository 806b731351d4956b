"""
docbench - timing harness for bulk writes against a MongoDB collection.

Each CLI command issues one kind of request and reports how long it took:

- bulk insert of generated documents
- index creation (unique compound + timestamp)
- collection drop
- repeated bulk updates, sequentially or from a thread pool

Every operation is a thin pass-through to pymongo; the harness only times it.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from docbench.config import Settings, load_settings
from docbench.domain.models import Record, generate_records
from docbench.errors import (
    BenchError,
    ConnectivityError,
    InvalidArgumentError,
    ReadError,
    WriteError,
)
from docbench.infrastructure.mongo_factory import connect, get_collection, mongo_client
from docbench.operations import (
    BenchmarkOperation,
    ConcurrentUpdateOperation,
    DropOperation,
    InsertOperation,
    OperationResult,
    SequentialUpdateOperation,
    SetupIndexesOperation,
    harvest_ids,
    update_documents,
)
from docbench.orchestrator import run_operation
from docbench.utils.logging import configure_logging, get_logger
from docbench.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "load_settings",
    # Domain
    "Record",
    "generate_records",
    # Errors
    "BenchError",
    "ConnectivityError",
    "InvalidArgumentError",
    "ReadError",
    "WriteError",
    # Connection
    "connect",
    "get_collection",
    "mongo_client",
    # Operations
    "BenchmarkOperation",
    "ConcurrentUpdateOperation",
    "DropOperation",
    "InsertOperation",
    "OperationResult",
    "SequentialUpdateOperation",
    "SetupIndexesOperation",
    "harvest_ids",
    "update_documents",
    # Orchestration
    "run_operation",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
]

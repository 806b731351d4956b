"""
Operation interfaces and result contracts for docbench.

Each CLI command maps to one operation. Operations implement BenchmarkOperation
and return an OperationResult so the orchestrator and reporter can treat them
uniformly.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, Optional, Protocol, TypedDict, runtime_checkable

from pymongo.collection import Collection


class OperationResult(TypedDict, total=False):
    """
    Metrics returned by an operation.

    `duration_seconds` covers the database work the operation times itself;
    the orchestrator adds process-level measurements around it.
    """

    operation: str
    docs: int
    duration_seconds: float
    throughput_docs_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    notes: Optional[str]
    extra: Dict[str, Any]


@runtime_checkable
class BenchmarkOperation(Protocol):
    """
    Common interface for benchmark operations.

    Attributes
    ----------
    name : str
        Machine-friendly identifier, matching the CLI command.
    description : str
        Human-friendly summary.
    """

    name: str
    description: str

    def execute(self, collection: Collection) -> OperationResult:
        """
        Run the operation against `collection` and return its metrics.

        Raises
        ------
        BenchError
            On any driver or argument failure. Nothing is retried.
        """
        ...


class AbstractBenchmarkOperation(abc.ABC):
    """
    ABC helper for class-based operations.

    Subclasses set `name` and `description` and implement `execute`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def execute(self, collection: Collection) -> OperationResult:  # pragma: no cover - interface only
        """Run the operation and return metrics."""
        raise NotImplementedError


__all__ = [
    "OperationResult",
    "BenchmarkOperation",
    "AbstractBenchmarkOperation",
]

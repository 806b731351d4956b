"""
Error taxonomy for docbench.

Components raise these instead of terminating the process; the CLI decides how
to report them and which exit status to use. Every error is treated as permanent.
"""

from __future__ import annotations

from typing import Optional


class BenchError(Exception):
    """Base class for every failure surfaced by a benchmark operation."""

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
        self.cause = cause


class ConnectivityError(BenchError):
    """Connection refused, ping failure, or an unusable TLS trust store."""


class WriteError(BenchError):
    """Insert, index creation, bulk update or drop rejected by the server."""


class ReadError(BenchError):
    """Query or cursor materialization failure."""


class InvalidArgumentError(BenchError):
    """Caller-supplied parameters that cannot be satisfied."""


__all__ = [
    "BenchError",
    "ConnectivityError",
    "WriteError",
    "ReadError",
    "InvalidArgumentError",
]

"""
Cross-cutting helpers for docbench: logging and profiling.
"""

from docbench.utils.logging import configure_logging, get_logger
from docbench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]

"""
Domain package for docbench.

Holds the document shape written to the benchmark collection and the generator
that synthesizes it. No I/O lives here.
"""

from docbench.domain.models import Record, generate_records

__all__ = [
    "Record",
    "generate_records",
]

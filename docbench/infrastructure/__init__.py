"""
Infrastructure package for docbench.

Owns the MongoDB client lifecycle: TLS trust setup, connect-and-ping, and the
scoped client handed to operations. Operations only ever see a Collection.
"""

from docbench.infrastructure.mongo_factory import (
    build_tls_options,
    connect,
    get_collection,
    mongo_client,
)

__all__ = [
    "build_tls_options",
    "connect",
    "get_collection",
    "mongo_client",
]

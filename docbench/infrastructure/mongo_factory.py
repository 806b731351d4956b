"""
MongoDB connection factory for docbench.

One client is opened per CLI invocation, checked with a ping, shared by every
operation in that invocation (pymongo clients are thread-safe), and closed when
the invocation ends. Outside trusted/local mode the server certificate is
verified against a CA bundle that must exist and parse before we connect.
"""

from __future__ import annotations

import ssl
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.config import Settings
from docbench.errors import ConnectivityError
from docbench.utils.logging import get_logger

log = get_logger(__name__)


def build_tls_options(settings: Settings) -> Dict[str, Any]:
    """
    Return the TLS keyword arguments for MongoClient.

    Trusted mode needs none. Otherwise the CA bundle is loaded eagerly so that a
    missing or malformed file is reported before any network traffic.

    Raises
    ------
    ConnectivityError
        If the bundle cannot be read or contains no usable certificates.
    """
    if settings.mongo_trusted:
        return {}

    ca_file = Path(settings.mongo_ca_file)
    try:
        context = ssl.create_default_context(cafile=str(ca_file))
    except (OSError, ssl.SSLError) as exc:
        raise ConnectivityError("tls", f"failed loading CA bundle {ca_file}: {exc}", exc) from exc
    if not context.get_ca_certs():
        raise ConnectivityError("tls", f"failed parsing pem file {ca_file}")

    return {"tls": True, "tlsCAFile": str(ca_file)}


def _client_options(settings: Settings) -> Dict[str, Any]:
    options = build_tls_options(settings)
    if settings.mongo_server_selection_timeout_ms is not None:
        options["serverSelectionTimeoutMS"] = settings.mongo_server_selection_timeout_ms
    return options


def connect(settings: Settings) -> MongoClient:
    """
    Open a client and confirm the server answers a ping.

    Raises
    ------
    ConnectivityError
        If the client cannot be built or the ping fails.
    """
    options = _client_options(settings)
    try:
        client: MongoClient = MongoClient(settings.mongo_uri, **options)
    except PyMongoError as exc:
        raise ConnectivityError("connect", f"mongo connection failed: {exc}", exc) from exc

    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        raise ConnectivityError("connect", f"mongo ping failed: {exc}", exc) from exc

    log.info("Mongo connection success", extra={"tls": bool(options.get("tls"))})
    return client


@contextmanager
def mongo_client(settings: Settings) -> Generator[MongoClient, None, None]:
    """
    Scoped client: connect on entry, always close on exit.

    Example
    -------
        with mongo_client(settings) as client:
            collection = get_collection(client, settings)
            collection.drop()
    """
    client = connect(settings)
    try:
        yield client
    finally:
        client.close()
        log.debug("Mongo connection closed")


def get_collection(client: MongoClient, settings: Settings) -> Collection:
    """The benchmark collection for this configuration."""
    return client[settings.db_name][settings.collection_name]


__all__ = [
    "build_tls_options",
    "connect",
    "get_collection",
    "mongo_client",
]

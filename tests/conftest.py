"""
Pytest configuration for docbench.

Provides fixtures for:
- Settings pointing at a throwaway collection
- A live MongoDB client for integration tests (skipped when unreachable)
- A clean collection per integration test
"""

from __future__ import annotations

import os
from typing import Generator

import pytest
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.config import Settings

TEST_DB_NAME = "docbench-test"
TEST_COLLECTION_NAME = "collection-test"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings with test-specific overrides.

    MONGO_URI can be set in CI to point at a non-local server.
    """
    return Settings(
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_trusted=True,
        mongo_server_selection_timeout_ms=2000,
        db_name=TEST_DB_NAME,
        collection_name=TEST_COLLECTION_NAME,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def mongo_available(test_settings: Settings) -> bool:
    """
    Check whether a MongoDB server answers a ping.
    """
    client: MongoClient = MongoClient(test_settings.mongo_uri, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture(scope="session")
def live_client(
    test_settings: Settings, mongo_available: bool
) -> Generator[MongoClient, None, None]:
    """
    Session-scoped client for integration tests.
    """
    if not mongo_available:
        pytest.skip("MongoDB not available")

    client: MongoClient = MongoClient(test_settings.mongo_uri, serverSelectionTimeoutMS=2000)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture(scope="function")
def clean_collection(
    live_client: MongoClient, test_settings: Settings
) -> Generator[Collection, None, None]:
    """
    An empty benchmark collection, dropped again after the test.
    """
    collection = live_client[test_settings.db_name][test_settings.collection_name]
    collection.drop()
    yield collection
    collection.drop()

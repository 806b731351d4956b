"""
Configuration settings for docbench.

Uses Pydantic Settings to load environment variables for the MongoDB connection,
logging, and benchmark defaults. A Settings instance is built once by the CLI and
handed to every component that needs it.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Connection
    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_trusted: bool = Field(True, alias="MONGO_TRUSTED")
    mongo_ca_file: str = Field("./rds-combined-ca-bundle.pem", alias="MONGO_CA_FILE")
    mongo_server_selection_timeout_ms: Optional[int] = Field(
        None, alias="MONGO_SERVER_SELECTION_TIMEOUT_MS"
    )

    # Target namespace (fixed, never exposed as CLI flags)
    db_name: str = Field("db-t01", alias="DB_NAME")
    collection_name: str = Field("collection-t01", alias="COLLECTION_NAME")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    results_dir: str = Field("results", alias="RESULTS_DIR")

    # Benchmark defaults
    insert_docs: int = Field(1_000_000, alias="BENCHMARK_INSERT_DOCS")
    update_runs: int = Field(4, alias="BENCHMARK_UPDATE_RUNS")
    update_docs: int = Field(4, alias="BENCHMARK_UPDATE_DOCS")
    harvest_batch_size: Optional[int] = Field(None, gt=0, alias="BENCHMARK_HARVEST_BATCH_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """
    Build the Settings for a CLI invocation, parsing the environment only once.
    """
    return Settings()


__all__ = ["Settings", "load_settings"]

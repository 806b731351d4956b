from time import sleep

import pytest
from bson import ObjectId
from pydantic import ValidationError

from docbench import config
from docbench.domain.models import Record, generate_records
from docbench.utils import profiler

FIXED_NOW = 1_700_000_000.7
GENERATED = 45


def test_settings_defaults(monkeypatch):
    for name in ("MONGO_URI", "MONGO_TRUSTED", "DB_NAME", "COLLECTION_NAME", "BENCHMARK_INSERT_DOCS"):
        monkeypatch.delenv(name, raising=False)
    settings = config.Settings(_env_file=None)
    assert settings.mongo_uri == "mongodb://localhost:27017"
    assert settings.mongo_trusted is True
    assert settings.mongo_ca_file == "./rds-combined-ca-bundle.pem"
    assert settings.db_name == "db-t01"
    assert settings.collection_name == "collection-t01"
    assert settings.insert_docs == 1_000_000
    assert settings.update_runs == 4
    assert settings.update_docs == 4
    assert settings.harvest_batch_size is None


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db.example:27018")
    monkeypatch.setenv("MONGO_TRUSTED", "false")
    settings = config.Settings(_env_file=None)
    assert settings.mongo_uri == "mongodb://db.example:27018"
    assert settings.mongo_trusted is False


@pytest.mark.parametrize("value", ["0", "-1"])
def test_settings_reject_non_positive_harvest_batch_size(monkeypatch, value):
    monkeypatch.setenv("BENCHMARK_HARVEST_BATCH_SIZE", value)
    with pytest.raises(ValidationError):
        config.Settings(_env_file=None)


def test_settings_accept_positive_harvest_batch_size():
    settings = config.Settings(_env_file=None, harvest_batch_size=500)
    assert settings.harvest_batch_size == 500


def test_generate_records_positions_are_contiguous():
    documents = generate_records(GENERATED, clock=lambda: FIXED_NOW)
    assert [d["field_1"] for d in documents] == list(range(1, GENERATED + 1))


def test_generate_records_derived_fields():
    for doc in generate_records(GENERATED, clock=lambda: FIXED_NOW):
        assert doc["field_2"] == doc["field_1"] - 1
        assert doc["field_a"] == str(doc["field_1"])
        assert doc["field_b"] == str(doc["field_1"] - 1)
        assert doc["count"] == doc["field_1"] % 20
        assert doc["timestamp"] == int(FIXED_NOW)
        assert doc["last_updated"] == 0


def test_generate_records_match_record_shape():
    for doc in generate_records(GENERATED, clock=lambda: FIXED_NOW):
        record = Record.from_document(doc)
        assert record.to_document() == doc
        assert list(record.to_document()) == list(doc)


def test_generate_records_are_plain_dicts():
    doc = generate_records(1)[0]
    assert type(doc) is dict
    assert isinstance(doc["_id"], ObjectId)


def test_generate_records_ids_are_unique():
    documents = generate_records(GENERATED)
    assert len({d["_id"] for d in documents}) == GENERATED


def test_generate_records_zero_and_negative():
    assert generate_records(0) == []
    with pytest.raises(ValueError):
        generate_records(-1)


def test_record_to_document_uses_underscore_id():
    record = Record.at_position(20, timestamp=5)
    doc = record.to_document()
    assert isinstance(doc["_id"], ObjectId)
    assert "id" not in doc
    assert doc == {
        "_id": record.id,
        "field_1": 20,
        "field_2": 19,
        "field_a": "20",
        "field_b": "19",
        "timestamp": 5,
        "count": 0,
        "last_updated": 0,
    }


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.peak_rss_bytes and stats.peak_rss_bytes > 0
    assert isinstance(stats.cpu_percent, float)


def test_profile_block_records_stats_when_block_raises():
    with pytest.raises(RuntimeError):
        with profiler.profile_block("boom") as stats:
            raise RuntimeError("boom")
    assert stats.end_ts >= stats.start_ts
    assert stats.label == "boom"

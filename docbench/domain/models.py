"""
Domain model for the benchmark collection.

Every document written by docbench has the same fixed shape. The integer and
string fields are derived from a sequence position so that the unique compound
index never sees a collision within one generated batch.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, List

from bson import ObjectId
from pydantic import BaseModel, Field

COUNT_MODULUS = 20


class Record(BaseModel):
    """
    A single document in the benchmark collection.
    """

    id: ObjectId = Field(default_factory=ObjectId, description="Client-generated identifier.")
    field_1: int = Field(..., description="Sequence position.")
    field_2: int = Field(..., description="Sequence position minus one.")
    field_a: str = Field(..., description="Decimal text of field_1.")
    field_b: str = Field(..., description="Decimal text of field_2.")
    timestamp: int = Field(..., description="Creation time, seconds since epoch.")
    count: int = Field(..., description="Position modulo 20, rewritten by updates.")
    last_updated: int = Field(0, description="Last update time, seconds since epoch.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def at_position(cls, position: int, timestamp: int) -> "Record":
        return cls.from_document(build_document(position, timestamp))

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Record":
        """Validate a raw collection document against the record shape."""
        fields = {key: value for key, value in doc.items() if key != "_id"}
        return cls(id=doc["_id"], **fields)

    def to_document(self) -> Dict[str, Any]:
        """BSON-ready mapping, with the identifier stored as `_id`."""
        doc = self.model_dump(exclude={"id"})
        return {"_id": self.id, **doc}


def build_document(position: int, timestamp: int) -> Dict[str, Any]:
    """Plain BSON mapping for one position, in the same shape as `Record.to_document`."""
    return {
        "_id": ObjectId(),
        "field_1": position,
        "field_2": position - 1,
        "field_a": str(position),
        "field_b": str(position - 1),
        "timestamp": timestamp,
        "count": position % COUNT_MODULUS,
        "last_updated": 0,
    }


def generate_records(
    n: int = 1_000_000, clock: Callable[[], float] = time.time
) -> List[Dict[str, Any]]:
    """
    Build `n` insert-ready documents for positions 1..n inclusive.

    Returns plain dicts; `Record.from_document` gives a validated view of one.
    The timestamp is read from `clock` per document at second granularity, so
    documents built within the same second share it.
    """
    if n < 0:
        raise ValueError(f"record count must be >= 0, got {n}")
    return [build_document(position, int(clock())) for position in range(1, n + 1)]


__all__ = ["COUNT_MODULUS", "Record", "build_document", "generate_records"]

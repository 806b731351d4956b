"""
Identifier harvesting: collect the `_id` of every document in the collection.

The default path is a full scan with no filter and no projection, materialized
in memory before the ids are extracted. That only works for collections that
fit in memory. The batched variant (pass `batch_size`) projects `_id` only and
walks the cursor in chunks; it exists as an explicit opt-in.
"""

from __future__ import annotations

import time
from typing import Iterator, List, Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from docbench.errors import ReadError
from docbench.utils.logging import get_logger

log = get_logger(__name__)


def iter_id_batches(collection: Collection, batch_size: int) -> Iterator[List[ObjectId]]:
    """
    Yield identifiers in retrieval order, `batch_size` at a time.

    Raises
    ------
    ValueError
        If batch_size is not positive.
    ReadError
        If the query or cursor iteration fails.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be > 0, got {batch_size}")

    batch: List[ObjectId] = []
    try:
        cursor = collection.find({}, {"_id": 1}, batch_size=batch_size)
        for doc in cursor:
            batch.append(doc["_id"])
            if len(batch) >= batch_size:
                yield batch
                batch = []
    except PyMongoError as exc:
        raise ReadError("harvest", f"cursor iteration failed: {exc}", exc) from exc
    if batch:
        yield batch


def harvest_ids(collection: Collection, batch_size: Optional[int] = None) -> List[ObjectId]:
    """
    Return every identifier in the collection, in retrieval order.

    Parameters
    ----------
    collection : Collection
        Collection to scan.
    batch_size : int | None
        None (the default) fetches full documents and materializes them all at
        once. A positive value switches to the cursor-batched variant.
    """
    start = time.perf_counter()
    if batch_size is None:
        try:
            documents = list(collection.find({}))
        except PyMongoError as exc:
            raise ReadError("harvest", f"find failed: {exc}", exc) from exc
        ids = [doc["_id"] for doc in documents]
    else:
        ids = [oid for batch in iter_id_batches(collection, batch_size) for oid in batch]

    duration = time.perf_counter() - start
    log.info(
        f"{duration:.3f}s taken for fetching {len(ids)} documents.",
        extra={"docs": len(ids), "duration_seconds": duration, "batch_size": batch_size},
    )
    return ids


__all__ = ["harvest_ids", "iter_id_batches"]

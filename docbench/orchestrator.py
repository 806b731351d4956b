"""
Runs a benchmark operation under the profiler, merges metrics, and persists results.

Usage:
    from docbench.orchestrator import run_operation

    result = run_operation(DropOperation(), collection)

When persisting, results are saved under `results_dir`:
- `<results_dir>/latest.json` (last run)
- `<results_dir>/run-<operation>-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pymongo.collection import Collection

from docbench.errors import BenchError
from docbench.operations.abstract import BenchmarkOperation, OperationResult
from docbench.utils.logging import get_logger
from docbench.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)


def _round_float(value: float, decimals: int = 3) -> float:
    return round(value, decimals)


def _merge_result(result: OperationResult, stats: ProfileStats) -> dict:
    """Combine the operation's own timing with the profiler's process metrics."""
    merged = dict(result)
    merged.setdefault("docs", 0)
    merged.setdefault("duration_seconds", stats.duration_seconds)
    merged["duration_seconds"] = _round_float(merged["duration_seconds"])
    merged["throughput_docs_per_sec"] = (
        _round_float(merged["docs"] / merged["duration_seconds"], 2)
        if merged["duration_seconds"]
        else 0.0
    )
    if merged.get("peak_rss_bytes") is None:
        merged["peak_rss_bytes"] = stats.peak_rss_bytes
    if merged.get("cpu_percent") is None and stats.cpu_percent is not None:
        merged["cpu_percent"] = _round_float(stats.cpu_percent, 1)
    merged["profile"] = {
        "label": stats.label,
        "wall_seconds": _round_float(stats.duration_seconds),
        "peak_rss_bytes": stats.peak_rss_bytes,
        "cpu_percent": _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
    }
    return merged


def _persist_result(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{payload['operation']}-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True, default=str)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_operation(
    operation: BenchmarkOperation,
    collection: Collection,
    persist: bool = False,
    results_dir: Optional[Path | str] = None,
) -> dict:
    """
    Execute one operation and return its merged metrics.

    Parameters
    ----------
    operation : BenchmarkOperation
        The operation to run.
    collection : Collection
        Target collection, shared for the whole invocation.
    persist : bool
        Whether to write the result as JSON.
    results_dir : Path | str | None
        Directory for JSON artifacts; defaults to `results`.

    Raises
    ------
    BenchError
        Whatever the operation raised. Failures are logged, never absorbed.
    """
    log.info(f"[OPERATION START] {operation.name}", extra={"operation": operation.name})
    with profile_block(operation.name) as stats:
        try:
            result = operation.execute(collection)
        except BenchError:
            log.error(f"[OPERATION FAILED] {operation.name}", extra={"operation": operation.name})
            raise

    merged = _merge_result(result, stats)
    merged["operation"] = operation.name
    log.info(
        f"[OPERATION COMPLETE] {operation.name}",
        extra={
            "operation": operation.name,
            "docs": merged["docs"],
            "duration": merged["duration_seconds"],
        },
    )

    if persist:
        payload = {"timestamp": datetime.now(timezone.utc).isoformat(), **merged}
        _persist_result(payload, Path(results_dir or "results"))

    return merged


__all__ = ["run_operation"]

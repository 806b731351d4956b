from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _format_bytes(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render operation results as a rich table, one row per operation.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(title="docbench results", box=box.ROUNDED)
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("Docs", justify="right", style="magenta")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (docs/s)", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    table.add_column("Notes", style="dim")

    for res in results:
        cpu = res.get("cpu_percent")
        table.add_row(
            res.get("operation", "Unknown"),
            f"{res.get('docs', 0):,}",
            f"{res.get('duration_seconds', 0.0):.3f}",
            f"{res.get('throughput_docs_per_sec', 0.0):,.2f}",
            _format_bytes(res.get("peak_rss_bytes")),
            f"{cpu:.1f}" if cpu is not None else "N/A",
            res.get("notes") or "",
        )

    console.print(table)


__all__ = ["print_results"]

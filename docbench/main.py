from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

import typer
from pydantic import ValidationError

from docbench.config import Settings, load_settings
from docbench.domain.models import generate_records
from docbench.errors import BenchError
from docbench.infrastructure.mongo_factory import get_collection, mongo_client
from docbench.operations import (
    BenchmarkOperation,
    ConcurrentUpdateOperation,
    DropOperation,
    InsertOperation,
    SequentialUpdateOperation,
    SetupIndexesOperation,
)
from docbench.orchestrator import run_operation
from docbench.reporter import print_results
from docbench.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Bulk insert/update benchmarks against a MongoDB collection.")
log = get_logger(__name__)


@dataclass
class CliState:
    settings: Settings
    persist: bool = False
    report: bool = True


@app.callback()
def configure(
    ctx: typer.Context,
    persist: bool = typer.Option(
        False, "--persist", help="Write the result as JSON under RESULTS_DIR."
    ),
    report: bool = typer.Option(
        True, "--report/--no-report", help="Print a results table when the command finishes."
    ),
) -> None:
    """
    Load settings once and share them with the selected command.
    """
    try:
        settings = load_settings()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    ctx.obj = CliState(settings=settings, persist=persist, report=report)


def _run(state: CliState, build: Callable[[], BenchmarkOperation]) -> None:
    """
    Connect, run one operation, and always close the client.

    Any BenchError is logged and turned into exit status 1.
    """
    settings = state.settings
    try:
        operation = build()
        log.info("Connecting Mongo.")
        with mongo_client(settings) as client:
            result = run_operation(
                operation,
                get_collection(client, settings),
                persist=state.persist,
                results_dir=settings.results_dir,
            )
    except BenchError as exc:
        log.error(f"{exc.operation} failed: {exc.message}")
        raise typer.Exit(code=1) from exc

    if state.report:
        print_results([result])


@app.command()
def info(ctx: typer.Context) -> None:
    """
    Show effective configuration values.
    """
    settings = ctx.obj.settings
    typer.echo(
        f"URI={settings.mongo_uri} trusted={settings.mongo_trusted} "
        f"namespace={settings.db_name}.{settings.collection_name} | "
        f"insert_docs={settings.insert_docs} update_runs={settings.update_runs} "
        f"update_docs={settings.update_docs}"
    )


@app.command()
def setup(ctx: typer.Context) -> None:
    """
    Create the unique compound index and the timestamp index.
    """
    _run(ctx.obj, SetupIndexesOperation)


@app.command()
def insert(
    ctx: typer.Context,
    docs: Optional[int] = typer.Option(
        None, "--docs", "-d", min=0, help="No. of documents to be inserted (default 1,000,000)."
    ),
) -> None:
    """
    Generate documents and insert them with one bulk request.
    """
    state: CliState = ctx.obj
    total = state.settings.insert_docs if docs is None else docs

    def build() -> InsertOperation:
        start = time.perf_counter()
        documents = generate_records(total)
        log.info(
            f"Generated {len(documents)} docs in {time.perf_counter() - start:.3f}s",
            extra={"docs": len(documents)},
        )
        return InsertOperation(documents)

    _run(state, build)


@app.command()
def drop(ctx: typer.Context) -> None:
    """
    Drop the collection.
    """
    _run(ctx.obj, DropOperation)


@app.command()
def update(
    ctx: typer.Context,
    runs: Optional[int] = typer.Option(
        None, "--no", "-n", min=0, help="No. of times to be executed (default 4)."
    ),
    docs: Optional[int] = typer.Option(
        None, "--docs", "-d", min=0, help="No. of documents to be updated (default 4)."
    ),
) -> None:
    """
    Update the same documents repeatedly, one bulk write after another.
    """
    state: CliState = ctx.obj
    settings = state.settings
    _run(
        state,
        lambda: SequentialUpdateOperation(
            runs=settings.update_runs if runs is None else runs,
            docs=settings.update_docs if docs is None else docs,
            harvest_batch_size=settings.harvest_batch_size,
        ),
    )


@app.command("async-update")
def async_update(
    ctx: typer.Context,
    workers: Optional[int] = typer.Option(
        None, "--no", "-n", min=0, help="No. of threads to be executed (default 4)."
    ),
    docs: Optional[int] = typer.Option(
        None, "--docs", "-d", min=0, help="No. of documents to be updated (default 4)."
    ),
    wait_all: bool = typer.Option(
        False, "--wait-all", help="Let every worker finish before reporting a failure."
    ),
) -> None:
    """
    Update the same documents from several threads at once and wait for all of them.
    """
    state: CliState = ctx.obj
    settings = state.settings
    _run(
        state,
        lambda: ConcurrentUpdateOperation(
            workers=settings.update_runs if workers is None else workers,
            docs=settings.update_docs if docs is None else docs,
            fail_fast=not wait_all,
            harvest_batch_size=settings.harvest_batch_size,
        ),
    )


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
import sys
from typing import Optional

import typer

from orgmigrate.config import get_settings
from orgmigrate.domain.tables import CLEARING_ORDER, CREATION_ORDER
from orgmigrate.infrastructure.db_factory import build_dsn
from orgmigrate.infrastructure.gateway import MemoryGateway
from orgmigrate.orchestrator import run_migration
from orgmigrate.reporter import print_report
from orgmigrate.source_reader import JsonSourceReader
from orgmigrate.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Load organization source data into the normalized relational store.")
log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"env={settings.app_env} clearing={'on' if settings.is_development else 'off'} | "
        f"source={settings.source_path}"
    )


@app.command()
def tables() -> None:
    """
    List destination tables in creation and clearing order.
    """
    typer.echo("Creation order: " + ", ".join(str(t) for t in CREATION_ORDER))
    typer.echo("Clearing order: " + ", ".join(str(t) for t in CLEARING_ORDER))


@app.command()
def run(
    env: Optional[str] = typer.Option(
        None,
        "--env",
        "-e",
        help="Environment name (default from APP_ENV). Only 'development' clears existing tables.",
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Path to the JSON source document (default from SOURCE_PATH).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Migrate into an in-memory store instead of Postgres.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the run report as JSON instead of a table.",
    ),
    persist: bool = typer.Option(
        True,
        "--persist/--no-persist",
        help="Save the run report under RESULTS_DIR.",
    ),
) -> None:
    """
    Run the full migration and print the summary.

    Exits 0 when the run completes, even if some aggregates failed, and 1 when
    the run itself could not proceed.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    reader = JsonSourceReader(source or settings.source_path)
    gateway = MemoryGateway() if dry_run else None
    target = "memory" if dry_run else build_dsn(settings).rsplit("@", 1)[-1]
    typer.echo(f"Migrating {reader.path} -> {target} (env={env or settings.app_env}).")

    try:
        report = run_migration(environment=env, gateway=gateway, source=reader, persist=persist)
    except Exception as exc:  # noqa: BLE001 - any run-level failure maps to exit code 1
        log.exception("[RUN FAILED]")
        typer.echo(f"Migration failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(report.as_dict(), indent=2))
    else:
        print_report(report)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

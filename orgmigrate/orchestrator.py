"""
Batch orchestrator: runs a full migration and produces the run report.

Usage (example from CLI):
    from orgmigrate.orchestrator import run_migration

    report = run_migration(environment="development")
    print(report.organizations, report.errors)

A run reads the source once, clears every destination table when (and only
when) the environment is "development", migrates the organization aggregates
one at a time in source order, then migrates the testimonials. Aggregate and
testimonial failures are folded into the report; only a source that cannot be
read aborts the run.

Reports can be saved to `results/` (see ``persist_report``):
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import dataclasses
import json
import random
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from orgmigrate.config import get_settings, is_development
from orgmigrate.domain.source import TestimonialSource
from orgmigrate.domain.tables import CLEARING_ORDER, NIL_UUID, Table
from orgmigrate.errors import GatewayError
from orgmigrate.infrastructure.db_factory import PostgresGateway
from orgmigrate.infrastructure.gateway import NotEqual, PersistenceGateway
from orgmigrate.mapping import draw_featured, map_testimonial
from orgmigrate.migrator import AggregateResult, migrate_organization
from orgmigrate.source_reader import JsonSourceReader, SourceReader, parse_testimonial, record_label
from orgmigrate.utils.logging import get_logger
from orgmigrate.utils.profiler import profile_block

log = get_logger(__name__)


@dataclass(frozen=True)
class RunReport:
    """
    Counts and errors of one pipeline invocation.

    Counters only include aggregates that migrated completely.
    """

    organizations: int = 0
    programs: int = 0
    media_items: int = 0
    testimonials: int = 0
    amenities: int = 0
    errors: Tuple[str, ...] = ()
    clearing_warnings: Tuple[str, ...] = ()
    environment: Optional[str] = None
    cleared: bool = False
    started_at: Optional[str] = None
    duration_seconds: float = 0.0
    peak_rss_bytes: Optional[int] = field(default=None, compare=False)

    def with_aggregate(self, result: AggregateResult) -> "RunReport":
        if not result.succeeded:
            return dataclasses.replace(self, errors=self.errors + (result.error,))
        return dataclasses.replace(
            self,
            organizations=self.organizations + 1,
            programs=self.programs + result.programs,
            media_items=self.media_items + result.media_items,
            amenities=self.amenities + result.amenities,
        )

    def with_testimonials(self, migrated: int, errors: Iterable[str]) -> "RunReport":
        return dataclasses.replace(
            self,
            testimonials=self.testimonials + migrated,
            errors=self.errors + tuple(errors),
        )

    def as_dict(self) -> Dict[str, Any]:
        payload = dataclasses.asdict(self)
        payload["errors"] = list(self.errors)
        payload["clearing_warnings"] = list(self.clearing_warnings)
        return payload


def clear_existing_data(
    gateway: PersistenceGateway, tables: Iterable[Table] = CLEARING_ORDER
) -> List[str]:
    """
    Empty every destination table, children before parents.

    A missing table is skipped; any other failure becomes a warning and the
    next table is still attempted.
    """
    tables = tuple(tables)
    log.info("Clearing existing data", extra={"tables": len(tables)})
    warnings: List[str] = []
    for table in tables:
        try:
            gateway.delete_where(str(table), NotEqual("id", NIL_UUID))
        except GatewayError as exc:
            if exc.table_missing:
                log.info("Table missing, nothing to clear", extra={"table": str(table)})
                continue
            warning = f"Warning clearing {table}: {exc}"
            log.warning(warning, extra={"table": str(table)})
            warnings.append(warning)
    return warnings


def migrate_testimonials(
    gateway: PersistenceGateway,
    testimonials: Iterable[TestimonialSource],
    rng: random.Random,
    experience_date: Optional[date] = None,
) -> Tuple[int, List[str]]:
    """Insert testimonials one by one; a failure only skips that testimonial."""
    experience_date = experience_date or datetime.now(timezone.utc).date()
    migrated = 0
    errors: List[str] = []
    for source in testimonials:
        name = record_label(source, "unknown volunteer", keys=("name", "id"))
        try:
            testimonial = parse_testimonial(source)
            row = map_testimonial(testimonial, draw_featured(rng), experience_date)
            gateway.insert(str(Table.TESTIMONIALS), [row])
            migrated += 1
        except Exception as exc:  # noqa: BLE001 - failures are isolated per testimonial
            error = f"Failed to migrate testimonial from {name}: {exc}"
            log.error(error, extra={"testimonial": record_label(source, name, keys=("id",))})
            errors.append(error)
    return migrated, errors


def persist_report(report: RunReport, results_dir: Path) -> Path:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    payload = report.as_dict()
    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Run report persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})
    return latest_path


def _execute(
    environment: Optional[str],
    gateway: PersistenceGateway,
    source: SourceReader,
    rng: random.Random,
) -> RunReport:
    # The source is read before anything is cleared.
    organizations = source.organizations()
    testimonials = source.testimonials()

    report = RunReport(
        environment=environment,
        started_at=datetime.now(timezone.utc).isoformat(),
    )
    if is_development(environment):
        warnings = clear_existing_data(gateway)
        report = dataclasses.replace(report, cleared=True, clearing_warnings=tuple(warnings))

    total = len(organizations)
    for position, record in enumerate(organizations, start=1):
        name = record_label(record, "unnamed organization")
        log.info(f"[ORGANIZATION {position}/{total}] {name}", extra={"organization": name})
        report = report.with_aggregate(migrate_organization(gateway, record, timestamp=report.started_at))

    log.info("Migrating testimonials", extra={"testimonials": len(testimonials)})
    migrated, errors = migrate_testimonials(gateway, testimonials, rng)
    return report.with_testimonials(migrated, errors)


def run_migration(
    environment: Optional[str] = None,
    gateway: Optional[PersistenceGateway] = None,
    source: Optional[SourceReader] = None,
    rng: Optional[random.Random] = None,
    persist: bool = False,
    results_dir: Path | str | None = None,
) -> RunReport:
    """
    Run the whole pipeline and return its report.

    Parameters
    ----------
    environment : str | None
        Deployment environment; defaults to settings.app_env. Tables are only
        cleared when this is "development".
    gateway : PersistenceGateway | None
        Target store. Defaults to a PostgresGateway built from settings, which
        is closed when the run ends.
    source : SourceReader | None
        Source of aggregates and testimonials. Defaults to the JSON document
        at settings.source_path.
    rng : random.Random | None
        Drives the testimonial featured flag. Defaults to a generator seeded
        with settings.testimonial_seed.
    persist : bool
        Whether to write the report to ``results_dir`` as JSON.

    Raises
    ------
    SourceError
        If the source cannot be read; nothing is written in that case.
    """
    settings = get_settings()
    environment = settings.app_env if environment is None else environment
    source = source or JsonSourceReader(settings.source_path)
    rng = rng or random.Random(settings.testimonial_seed)

    owns_gateway = gateway is None
    if gateway is None:
        gateway = PostgresGateway.connect()

    log.info("[RUN START] Migrating source data", extra={"environment": environment})
    try:
        with profile_block("migration") as stats:
            report = _execute(environment, gateway, source, rng)
    finally:
        if owns_gateway:
            gateway.close()

    report = dataclasses.replace(
        report,
        duration_seconds=round(stats.duration_seconds, 2),
        peak_rss_bytes=stats.peak_rss_bytes,
    )
    log.info(
        "[RUN COMPLETE] Migration finished",
        extra={
            "organizations": report.organizations,
            "programs": report.programs,
            "media_items": report.media_items,
            "testimonials": report.testimonials,
            "amenities": report.amenities,
            "errors": len(report.errors),
            "duration": report.duration_seconds,
        },
    )

    if persist:
        persist_report(report, Path(results_dir or settings.results_dir))
    return report


__all__ = [
    "RunReport",
    "clear_existing_data",
    "migrate_testimonials",
    "persist_report",
    "run_migration",
]

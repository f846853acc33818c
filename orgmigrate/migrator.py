"""
Aggregate migrator: writes one organization and everything it owns.

The write sequence is an explicit state machine::

    PENDING -> ORGANIZATION_WRITTEN -> PROGRAMS_WRITTEN -> ANIMALS_WRITTEN
            -> LOGISTICS_WRITTEN -> MEDIA_WRITTEN -> METADATA_WRITTEN -> DONE

with FAILED reachable from any non-terminal state. Each phase may only be
entered from its predecessor and needs the organization id returned by the
store in the first phase; child rows always carry the id the store returned
for their parent insert. A raw source record is validated first, while the
state is still PENDING, so a malformed record fails with nothing written.

A failure anywhere stops the aggregate: nothing is retried and rows already
written stay in place. The failure comes back as an AggregateResult carrying
``"Failed to migrate {name}: {cause}"`` and zero counts, so one bad aggregate
never affects the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from orgmigrate import mapping
from orgmigrate.domain.source import OrganizationRecord, OrganizationSource
from orgmigrate.domain.tables import Table
from orgmigrate.errors import GatewayError, PhaseOrderError
from orgmigrate.infrastructure.gateway import PersistenceGateway, Record
from orgmigrate.source_reader import parse_organization, record_label
from orgmigrate.utils.logging import get_logger

log = get_logger(__name__)


class Phase(str, Enum):
    PENDING = "pending"
    ORGANIZATION_WRITTEN = "organization_written"
    PROGRAMS_WRITTEN = "programs_written"
    ANIMALS_WRITTEN = "animals_written"
    LOGISTICS_WRITTEN = "logistics_written"
    MEDIA_WRITTEN = "media_written"
    METADATA_WRITTEN = "metadata_written"
    DONE = "done"
    FAILED = "failed"


PHASE_SEQUENCE: Tuple[Phase, ...] = (
    Phase.PENDING,
    Phase.ORGANIZATION_WRITTEN,
    Phase.PROGRAMS_WRITTEN,
    Phase.ANIMALS_WRITTEN,
    Phase.LOGISTICS_WRITTEN,
    Phase.MEDIA_WRITTEN,
    Phase.METADATA_WRITTEN,
    Phase.DONE,
)


@dataclass(frozen=True)
class AggregateResult:
    """Outcome of one aggregate; counts are zero unless it succeeded."""

    name: str
    phase: Phase
    programs: int = 0
    media_items: int = 0
    amenities: int = 0
    error: Optional[str] = None
    failed_after: Optional[Phase] = None

    @property
    def succeeded(self) -> bool:
        return self.phase is Phase.DONE


class AggregateMigration:
    """
    Write sequence for a single organization aggregate.

    Use ``run()`` for the full sequence; the ``write_*`` methods are public so
    the ordering guard can be exercised directly.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        record: OrganizationSource,
        timestamp: Optional[str] = None,
    ) -> None:
        self.gateway = gateway
        self.source = record
        self.name = record_label(record, "unnamed organization")
        self.record: Optional[OrganizationRecord] = (
            record if isinstance(record, OrganizationRecord) else None
        )
        self.timestamp = timestamp or datetime.now(timezone.utc).isoformat()
        self.state = Phase.PENDING
        self.organization_id: Optional[str] = None
        self.program_ids: List[str] = []
        self._programs = 0
        self._media_items = 0
        self._amenities = 0

    # -- plumbing -----------------------------------------------------------

    def _enter(self, phase: Phase) -> None:
        if self.record is None:
            raise PhaseOrderError(f"{phase.value} needs a validated organization record")
        expected = PHASE_SEQUENCE[PHASE_SEQUENCE.index(phase) - 1]
        if self.state is not expected:
            raise PhaseOrderError(
                f"cannot write {phase.value} from state {self.state.value} "
                f"(expected {expected.value})"
            )
        if phase is not Phase.ORGANIZATION_WRITTEN and self.organization_id is None:
            raise PhaseOrderError(f"{phase.value} needs the organization id")

    def _complete(self, phase: Phase) -> None:
        self.state = phase
        log.debug(
            f"[PHASE] {phase.value}",
            extra={"organization": self.name, "phase": phase.value},
        )

    def _insert(self, table: Table, rows: Sequence[Record]) -> List[Record]:
        if not rows:
            return []
        created = self.gateway.insert(str(table), rows)
        if len(created) != len(rows):
            raise GatewayError(
                f"{table} returned {len(created)} rows for {len(rows)} inserted", str(table)
            )
        return created

    def _insert_one(self, table: Table, row: Record) -> str:
        """Insert a parent row and return the id the store assigned to it."""
        created = self._insert(table, [row])[0]
        if created.get("id") is None:
            raise GatewayError(f"{table} insert returned no id", str(table))
        return str(created["id"])

    # -- phases -------------------------------------------------------------

    def parse_record(self) -> None:
        """Validate a raw source record; the state stays PENDING."""
        if self.record is None:
            self.record = parse_organization(self.source)

    def write_organization(self) -> None:
        self._enter(Phase.ORGANIZATION_WRITTEN)
        self.organization_id = self._insert_one(
            Table.ORGANIZATIONS, mapping.map_organization(self.record, self.timestamp)
        )
        self._complete(Phase.ORGANIZATION_WRITTEN)

    def write_programs(self) -> None:
        self._enter(Phase.PROGRAMS_WRITTEN)
        rows = mapping.map_programs(self.record.programs, self.organization_id)
        for program, row in zip(self.record.programs, rows):
            program_id = self._insert_one(Table.PROGRAMS, row)
            self.program_ids.append(program_id)
            self._insert(
                Table.PROGRAM_ACTIVITIES,
                mapping.map_program_activities(program.activities, program_id),
            )
            self._insert(
                Table.PROGRAM_SCHEDULE_ITEMS,
                mapping.map_schedule_items(program.typical_day, program_id),
            )
            self._insert(Table.PROGRAM_INCLUSIONS, mapping.map_inclusions(program.cost, program_id))
            self._insert(
                Table.PROGRAM_LEARNING_OUTCOMES,
                mapping.map_learning_outcomes(program.learning_outcomes, program_id),
            )
            self._insert(
                Table.PROGRAM_HIGHLIGHTS, mapping.map_highlights(program.highlights, program_id)
            )
            self._insert(
                Table.PROGRAM_START_DATES,
                mapping.map_program_start_dates(program.schedule.start_dates, program_id),
            )
            self._programs += 1
        self._complete(Phase.PROGRAMS_WRITTEN)

    def write_animals(self) -> None:
        self._enter(Phase.ANIMALS_WRITTEN)
        animals = self.record.animal_types
        for animal, row in zip(animals, mapping.map_animal_types(animals, self.organization_id)):
            animal_type_id = self._insert_one(Table.ANIMAL_TYPES, row)
            self._insert(Table.ANIMAL_SPECIES, mapping.map_animal_species(animal, animal_type_id))
            self._insert(
                Table.ANIMAL_CARE_ACTIVITIES,
                mapping.map_care_activities(animal.care_activities, animal_type_id),
            )
            self._insert(
                Table.ANIMAL_SUCCESS_STORIES,
                mapping.map_success_stories(animal.success_stories, animal_type_id),
            )
        self._complete(Phase.ANIMALS_WRITTEN)

    def write_logistics(self) -> None:
        """Accommodation, meals, transport, internet, requirements, languages."""
        self._enter(Phase.LOGISTICS_WRITTEN)
        record, organization_id = self.record, self.organization_id

        accommodation_id = self._insert_one(
            Table.ACCOMMODATIONS, mapping.map_accommodation(record.accommodation, organization_id)
        )
        amenities = self._insert(
            Table.ACCOMMODATION_AMENITIES,
            mapping.map_amenities(record.accommodation.amenities, accommodation_id),
        )
        self._amenities += len(amenities)

        meal_plan_id = self._insert_one(
            Table.MEAL_PLANS, mapping.map_meal_plan(record.meals, organization_id)
        )
        self._insert(
            Table.DIETARY_OPTIONS,
            mapping.map_dietary_options(record.meals.dietary_options, meal_plan_id),
        )

        self._insert(
            Table.TRANSPORTATION,
            [mapping.map_transportation(record.transportation, organization_id)],
        )
        self._insert(
            Table.INTERNET_ACCESS,
            [mapping.map_internet_access(record.internet_access, organization_id)],
        )
        self._insert(
            Table.AGE_REQUIREMENTS,
            [mapping.map_age_requirement(record.age_requirement, organization_id)],
        )
        self._insert(
            Table.SKILL_REQUIREMENTS,
            mapping.map_skill_requirements(record.skill_requirements, organization_id),
        )
        self._insert(
            Table.HEALTH_REQUIREMENTS,
            mapping.map_health_requirements(record.health_requirements, organization_id),
        )
        self._insert(Table.LANGUAGES, mapping.map_languages(record.languages, organization_id))
        self._write_application_process()
        self._complete(Phase.LOGISTICS_WRITTEN)

    def _write_application_process(self) -> None:
        process = self.record.application_process
        if process is None:
            return
        process_id = self._insert_one(
            Table.APPLICATION_PROCESSES,
            mapping.map_application_process(process, self.organization_id),
        )
        for step, row in zip(process.steps, mapping.map_application_steps(process.steps, process_id)):
            step_id = self._insert_one(Table.APPLICATION_STEPS, row)
            self._insert(
                Table.APPLICATION_DOCUMENTS,
                mapping.map_application_documents(step.documents, step_id),
            )

    def write_media(self) -> None:
        self._enter(Phase.MEDIA_WRITTEN)
        media = self._insert(
            Table.MEDIA_ITEMS,
            mapping.map_media_items(self.record.gallery.images, self.organization_id),
        )
        self._media_items += len(media)
        self._complete(Phase.MEDIA_WRITTEN)

    def write_metadata(self) -> None:
        """Certifications, tags and the statistics row."""
        self._enter(Phase.METADATA_WRITTEN)
        record, organization_id = self.record, self.organization_id
        self._insert(
            Table.ORGANIZATION_CERTIFICATIONS,
            mapping.map_certifications(record.certifications, organization_id),
        )
        self._insert(Table.ORGANIZATION_TAGS, mapping.map_tags(record.tags, organization_id))
        self._insert(
            Table.ORGANIZATION_STATISTICS,
            [mapping.map_statistics(record.statistics, organization_id)],
        )
        self._complete(Phase.METADATA_WRITTEN)

    # -- driver -------------------------------------------------------------

    def _steps(self) -> Tuple[Callable[[], None], ...]:
        return (
            self.parse_record,
            self.write_organization,
            self.write_programs,
            self.write_animals,
            self.write_logistics,
            self.write_media,
            self.write_metadata,
        )

    def run(self) -> AggregateResult:
        name = self.name
        log.info(f"[AGGREGATE START] {name}", extra={"organization": name})
        try:
            for step in self._steps():
                step()
            self._enter(Phase.DONE)
            self._complete(Phase.DONE)
        except Exception as exc:  # noqa: BLE001 - failures are isolated per aggregate
            failed_after = self.state
            self.state = Phase.FAILED
            error = f"Failed to migrate {name}: {exc}"
            log.error(
                f"[AGGREGATE FAILED] {error}",
                extra={"organization": name, "phase": failed_after.value},
            )
            return AggregateResult(
                name=name, phase=Phase.FAILED, error=error, failed_after=failed_after
            )

        log.info(
            f"[AGGREGATE SUCCESS] {name}",
            extra={
                "organization": name,
                "programs": self._programs,
                "media_items": self._media_items,
                "amenities": self._amenities,
            },
        )
        return AggregateResult(
            name=name,
            phase=Phase.DONE,
            programs=self._programs,
            media_items=self._media_items,
            amenities=self._amenities,
        )


def migrate_organization(
    gateway: PersistenceGateway,
    record: OrganizationSource,
    timestamp: Optional[str] = None,
) -> AggregateResult:
    """Migrate one aggregate; never raises."""
    return AggregateMigration(gateway, record, timestamp=timestamp).run()


__all__ = [
    "PHASE_SEQUENCE",
    "AggregateMigration",
    "AggregateResult",
    "Phase",
    "migrate_organization",
]

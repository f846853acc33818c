"""
Destination table catalogue.

CREATION_ORDER lists every table the loader writes, parents before children.
CLEARING_ORDER is its reverse, prefixed with the dependent tables the loader
never writes but which still reference organizations, so that a store
enforcing foreign keys on delete can be emptied table by table.
"""
from __future__ import annotations

from enum import Enum
from typing import Tuple

NIL_UUID = "00000000-0000-0000-0000-000000000000"


class Table(str, Enum):
    ORGANIZATIONS = "organizations"
    PROGRAMS = "programs"
    PROGRAM_ACTIVITIES = "program_activities"
    PROGRAM_SCHEDULE_ITEMS = "program_schedule_items"
    PROGRAM_INCLUSIONS = "program_inclusions"
    PROGRAM_LEARNING_OUTCOMES = "program_learning_outcomes"
    PROGRAM_HIGHLIGHTS = "program_highlights"
    PROGRAM_START_DATES = "program_start_dates"
    ANIMAL_TYPES = "animal_types"
    ANIMAL_SPECIES = "animal_species"
    ANIMAL_CARE_ACTIVITIES = "animal_care_activities"
    ANIMAL_SUCCESS_STORIES = "animal_success_stories"
    ACCOMMODATIONS = "accommodations"
    ACCOMMODATION_AMENITIES = "accommodation_amenities"
    MEAL_PLANS = "meal_plans"
    DIETARY_OPTIONS = "dietary_options"
    TRANSPORTATION = "transportation"
    INTERNET_ACCESS = "internet_access"
    AGE_REQUIREMENTS = "age_requirements"
    SKILL_REQUIREMENTS = "skill_requirements"
    HEALTH_REQUIREMENTS = "health_requirements"
    LANGUAGES = "languages"
    APPLICATION_PROCESSES = "application_processes"
    APPLICATION_STEPS = "application_steps"
    APPLICATION_DOCUMENTS = "application_documents"
    MEDIA_ITEMS = "media_items"
    ORGANIZATION_CERTIFICATIONS = "organization_certifications"
    ORGANIZATION_TAGS = "organization_tags"
    ORGANIZATION_STATISTICS = "organization_statistics"
    TESTIMONIALS = "testimonials"
    # Referenced by the application, never written by the loader.
    CONTACT_SUBMISSIONS = "contact_submissions"
    VOLUNTEER_APPLICATIONS = "volunteer_applications"

    def __str__(self) -> str:
        return self.value


CREATION_ORDER: Tuple[Table, ...] = (
    Table.ORGANIZATIONS,
    Table.PROGRAMS,
    Table.PROGRAM_ACTIVITIES,
    Table.PROGRAM_SCHEDULE_ITEMS,
    Table.PROGRAM_INCLUSIONS,
    Table.PROGRAM_LEARNING_OUTCOMES,
    Table.PROGRAM_HIGHLIGHTS,
    Table.PROGRAM_START_DATES,
    Table.ANIMAL_TYPES,
    Table.ANIMAL_SPECIES,
    Table.ANIMAL_CARE_ACTIVITIES,
    Table.ANIMAL_SUCCESS_STORIES,
    Table.ACCOMMODATIONS,
    Table.ACCOMMODATION_AMENITIES,
    Table.MEAL_PLANS,
    Table.DIETARY_OPTIONS,
    Table.TRANSPORTATION,
    Table.INTERNET_ACCESS,
    Table.AGE_REQUIREMENTS,
    Table.SKILL_REQUIREMENTS,
    Table.HEALTH_REQUIREMENTS,
    Table.LANGUAGES,
    Table.APPLICATION_PROCESSES,
    Table.APPLICATION_STEPS,
    Table.APPLICATION_DOCUMENTS,
    Table.MEDIA_ITEMS,
    Table.ORGANIZATION_CERTIFICATIONS,
    Table.ORGANIZATION_TAGS,
    Table.ORGANIZATION_STATISTICS,
    Table.TESTIMONIALS,
)

CLEARING_ORDER: Tuple[Table, ...] = (
    Table.VOLUNTEER_APPLICATIONS,
    Table.CONTACT_SUBMISSIONS,
) + tuple(reversed(CREATION_ORDER))


__all__ = ["CLEARING_ORDER", "CREATION_ORDER", "NIL_UUID", "Table"]

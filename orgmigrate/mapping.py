"""
Entity mappers: source aggregate slices -> flat destination rows.

One function per destination table. Collection mappers take
``(items, parent_id, start_index=0)`` and return a list of rows whose
``order_index`` is the position in the *source* list offset by
``start_index``. Start dates, certifications and tags land in tables without
an order column, so their mappers take ``(items, parent_id)`` only.
One-to-one mappers return a single row. Mappers never touch the store and
never raise on empty input, they return an empty list instead.
Fields missing from the source are written as ``None``.
"""
from __future__ import annotations

import random
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from orgmigrate.domain.source import (
    AccommodationRecord,
    AgeRequirementRecord,
    AnimalCareRecord,
    ApplicationProcessRecord,
    ApplicationStepRecord,
    GalleryImage,
    HealthRequirementsRecord,
    InternetAccessRecord,
    MealsRecord,
    OrganizationRecord,
    ProgramCost,
    ProgramRecord,
    SkillRequirementsRecord,
    StatisticsRecord,
    TestimonialRecord,
    TransportationRecord,
)
from orgmigrate.heuristics import (
    categorize_activity,
    categorize_amenity,
    categorize_dietary_option,
    hours_to_days,
    parse_duration_hours,
)

Record = Dict[str, Any]

HERO_IMAGE_COUNT = 3
FEATURED_IMAGE_COUNT = 6
FEATURED_TESTIMONIAL_THRESHOLD = 0.7
SCHEDULE_SEPARATOR = " - "
TESTIMONIAL_RATING = 5
TESTIMONIAL_DURATION_WEEKS = 4


def _format_coordinate(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    text = repr(number)
    if "e" in text or "E" in text:
        return format(Decimal(text), "f")
    return text


def format_point(coordinates: Optional[Tuple[float, float]]) -> Optional[str]:
    """
    Serialize ``[lat, lng]`` to the point literal ``"(lat,lng)"``.

    Numbers are written the way JSON wrote them: ``[10, -84]`` gives
    ``"(10,-84)"`` and never ``"(10.0,-84.0)"``, and small values are spelled
    out in positional notation (``0.00001``, not ``1e-05``).
    """
    if coordinates is None:
        return None
    latitude, longitude = coordinates
    return f"({_format_coordinate(latitude)},{_format_coordinate(longitude)})"


def _with_id(row: Record, source_id: Optional[str]) -> Record:
    # Rows without a source id get one from the store.
    if source_id is not None:
        row = {"id": source_id, **row}
    return row


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------


def map_organization(org: OrganizationRecord, timestamp: str) -> Record:
    location = org.location
    return _with_id(
        {
            "name": org.name,
            "slug": org.slug,
            "tagline": org.tagline,
            "mission": org.mission,
            "logo": org.logo,
            "hero_image": org.hero_image,
            "website": org.website,
            "email": org.email,
            "phone": org.phone,
            "year_founded": org.year_founded,
            "verified": org.verified,
            "country": location.country,
            "region": location.region,
            "city": location.city,
            "address": location.address,
            "coordinates": format_point(location.coordinates),
            "timezone": location.timezone,
            "nearest_airport": location.nearest_airport,
            "status": org.status,
            "featured": org.featured,
            "last_updated": org.last_updated,
            "created_at": timestamp,
            "updated_at": timestamp,
        },
        org.id,
    )


# ---------------------------------------------------------------------------
# Programs and their children
# ---------------------------------------------------------------------------


def map_programs(programs: Sequence[ProgramRecord], organization_id: str) -> List[Record]:
    """The first program in source order is the primary one."""
    return [
        _with_id(
            {
                "organization_id": organization_id,
                "title": program.title,
                "description": program.description,
                "is_primary": index == 0,
                "duration_min_weeks": program.duration.min,
                "duration_max_weeks": program.duration.max,
                "hours_per_day": program.schedule.hours_per_day,
                "days_per_week": program.schedule.days_per_week,
                "seasonality": program.schedule.seasonality,
                "cost_amount": program.cost.amount,
                "cost_currency": program.cost.currency,
                "cost_period": program.cost.period,
                "status": "active",
            },
            program.id,
        )
        for index, program in enumerate(programs)
    ]


def map_program_activities(
    activities: Sequence[str], program_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "program_id": program_id,
            "activity_name": activity,
            "activity_type": categorize_activity(activity),
            "order_index": start_index + index,
        }
        for index, activity in enumerate(activities)
    ]


def split_schedule_item(item: str) -> Tuple[str, Optional[str]]:
    """Split ``"6:30 AM - Morning feeding"`` on the first separator only."""
    time_slot, separator, activity = item.partition(SCHEDULE_SEPARATOR)
    if not separator:
        return item.strip(), None
    return time_slot.strip(), activity.strip()


def map_schedule_items(
    typical_day: Sequence[str], program_id: str, start_index: int = 0
) -> List[Record]:
    rows = []
    for index, item in enumerate(typical_day):
        time_slot, activity = split_schedule_item(item)
        rows.append(
            {
                "program_id": program_id,
                "time_slot": time_slot,
                "activity_description": activity,
                "order_index": start_index + index,
            }
        )
    return rows


def map_inclusions(cost: ProgramCost, program_id: str, start_index: int = 0) -> List[Record]:
    """Included then excluded items, sharing one index space."""
    rows = [
        {
            "program_id": program_id,
            "inclusion_type": "included",
            "item_name": item,
            "order_index": start_index + index,
        }
        for index, item in enumerate(cost.includes)
    ]
    offset = start_index + len(cost.includes)
    rows.extend(
        {
            "program_id": program_id,
            "inclusion_type": "excluded",
            "item_name": item,
            "order_index": offset + index,
        }
        for index, item in enumerate(cost.excludes)
    )
    return rows


def map_learning_outcomes(
    outcomes: Sequence[str], program_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "program_id": program_id,
            "outcome_description": outcome,
            "order_index": start_index + index,
        }
        for index, outcome in enumerate(outcomes)
    ]


def map_highlights(
    highlights: Sequence[str], program_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "program_id": program_id,
            "highlight_text": highlight,
            "order_index": start_index + index,
        }
        for index, highlight in enumerate(highlights)
    ]


def map_program_start_dates(start_dates: Sequence[str], program_id: str) -> List[Record]:
    return [
        {"program_id": program_id, "start_date": start_date, "is_available": True}
        for start_date in start_dates
    ]


# ---------------------------------------------------------------------------
# Animal care
# ---------------------------------------------------------------------------


def map_animal_types(
    animal_types: Sequence[AnimalCareRecord], organization_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "organization_id": organization_id,
            "animal_type": animal.animal_type,
            "description": animal.description,
            "conservation_status": animal.conservation_status,
            "current_count": animal.current_animals,
            "featured_image": animal.image,
            "order_index": start_index + index,
        }
        for index, animal in enumerate(animal_types)
    ]


def species_count(current_animals: Optional[int], species_total: int) -> Optional[int]:
    """
    Even share of the animal count per species. Integer division: the
    remainder is dropped, not allocated.
    """
    if current_animals is None or species_total <= 0:
        return None
    return current_animals // species_total


def map_animal_species(animal: AnimalCareRecord, animal_type_id: str) -> List[Record]:
    if not animal.species:
        return []
    count = species_count(animal.current_animals, len(animal.species))
    return [
        {
            "animal_type_id": animal_type_id,
            "species_name": species,
            "conservation_status": animal.conservation_status,
            "current_count": count,
        }
        for species in animal.species
    ]


def map_care_activities(
    activities: Sequence[str], animal_type_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "animal_type_id": animal_type_id,
            "activity_name": activity,
            "order_index": start_index + index,
        }
        for index, activity in enumerate(activities)
    ]


def map_success_stories(
    stories: Sequence[str], animal_type_id: str, start_index: int = 0
) -> List[Record]:
    rows = []
    for index, story in enumerate(stories):
        order_index = start_index + index
        rows.append(
            {
                "animal_type_id": animal_type_id,
                "story_title": f"Success Story {order_index + 1}",
                "story_description": story,
                "order_index": order_index,
            }
        )
    return rows


# ---------------------------------------------------------------------------
# Accommodation, meals and logistics
# ---------------------------------------------------------------------------


def map_accommodation(accommodation: AccommodationRecord, organization_id: str) -> Record:
    return {
        "organization_id": organization_id,
        "provided": accommodation.provided,
        "accommodation_type": accommodation.type,
        "description": accommodation.description,
    }


def map_amenities(
    amenities: Sequence[str], accommodation_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "accommodation_id": accommodation_id,
            "amenity_name": amenity,
            "amenity_category": categorize_amenity(amenity),
            "order_index": start_index + index,
        }
        for index, amenity in enumerate(amenities)
    ]


def map_meal_plan(meals: MealsRecord, organization_id: str) -> Record:
    return {
        "organization_id": organization_id,
        "provided": meals.provided,
        "meal_type": meals.type,
        "description": meals.description,
    }


def map_dietary_options(
    options: Sequence[str], meal_plan_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "meal_plan_id": meal_plan_id,
            "option_name": option,
            "option_category": categorize_dietary_option(option),
            "order_index": start_index + index,
        }
        for index, option in enumerate(options)
    ]


def map_transportation(transportation: TransportationRecord, organization_id: str) -> Record:
    return {
        "organization_id": organization_id,
        "airport_pickup": transportation.airport_pickup,
        "local_transport": transportation.local_transport,
        "description": transportation.description,
    }


def map_internet_access(internet: InternetAccessRecord, organization_id: str) -> Record:
    return {
        "organization_id": organization_id,
        "available": internet.available,
        "quality": internet.quality,
        "description": internet.description,
    }


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------


def map_age_requirement(age: AgeRequirementRecord, organization_id: str) -> Record:
    return {"organization_id": organization_id, "min_age": age.min, "max_age": age.max}


def map_skill_requirements(
    skills: SkillRequirementsRecord, organization_id: str, start_index: int = 0
) -> List[Record]:
    """Required and preferred skills each keep their own index sequence."""
    rows = []
    for requirement_type, names in (("required", skills.required), ("preferred", skills.preferred)):
        rows.extend(
            {
                "organization_id": organization_id,
                "requirement_type": requirement_type,
                "skill_name": name,
                "order_index": start_index + index,
            }
            for index, name in enumerate(names)
        )
    return rows


def map_health_requirements(
    health: HealthRequirementsRecord, organization_id: str, start_index: int = 0
) -> List[Record]:
    entries = [
        ("vaccination", vaccination, f"{vaccination} vaccination required", True)
        for vaccination in health.vaccinations
    ]
    if health.medical_clearance:
        entries.append(
            ("medical_clearance", "Medical clearance", "Medical clearance from a physician required", True)
        )
    if health.insurance:
        entries.append(("insurance", "Travel insurance", "Valid travel insurance required", True))
    if health.physical_fitness:
        entries.append(("fitness", "Physical fitness", health.physical_fitness, False))

    return [
        {
            "organization_id": organization_id,
            "requirement_type": requirement_type,
            "requirement_name": name,
            "requirement_description": description,
            "is_mandatory": mandatory,
            "order_index": start_index + index,
        }
        for index, (requirement_type, name, description, mandatory) in enumerate(entries)
    ]


def map_languages(
    languages: Sequence[str], organization_id: str, start_index: int = 0
) -> List[Record]:
    """The first language listed is required; the rest are conversational."""
    rows = []
    for index, language in enumerate(languages):
        primary = index == 0
        rows.append(
            {
                "organization_id": organization_id,
                "language_name": language,
                "proficiency_level": "required" if primary else "conversational",
                "is_required": primary,
                "order_index": start_index + index,
            }
        )
    return rows


def map_application_process(process: ApplicationProcessRecord, organization_id: str) -> Record:
    fee = process.fee
    return {
        "organization_id": organization_id,
        "processing_time_days": hours_to_days(parse_duration_hours(process.processing_time)),
        "application_fee_amount": fee.amount if fee else None,
        "application_fee_currency": fee.currency if fee else None,
        "fee_refundable": fee.refundable if fee else None,
    }


def map_application_steps(
    steps: Sequence[ApplicationStepRecord], application_process_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "application_process_id": application_process_id,
            "step_number": step.step,
            "step_title": step.title,
            "step_description": step.description,
            "time_required_hours": parse_duration_hours(step.time_required),
            "is_mandatory": True,
            "order_index": start_index + index,
        }
        for index, step in enumerate(steps)
    ]


def map_application_documents(
    documents: Sequence[str], application_step_id: str, start_index: int = 0
) -> List[Record]:
    return [
        {
            "application_step_id": application_step_id,
            "document_name": document,
            "is_required": True,
            "order_index": start_index + index,
        }
        for index, document in enumerate(documents)
    ]


# ---------------------------------------------------------------------------
# Media and metadata
# ---------------------------------------------------------------------------


def map_media_items(
    images: Sequence[GalleryImage], organization_id: str, start_index: int = 0
) -> List[Record]:
    """The first three images are hero images; the first six are featured."""
    rows = []
    for index, image in enumerate(images):
        position = start_index + index
        rows.append(
            {
                "organization_id": organization_id,
                "item_type": image.type,
                "url": image.url,
                "thumbnail_url": image.thumbnail,
                "caption": image.caption,
                "alt_text": image.alt_text,
                "credit": image.credit,
                "category": "hero" if position < HERO_IMAGE_COUNT else "gallery",
                "featured": position < FEATURED_IMAGE_COUNT,
                "order_index": position,
            }
        )
    return rows


def map_certifications(certifications: Sequence[str], organization_id: str) -> List[Record]:
    return [
        {"organization_id": organization_id, "certification_name": certification}
        for certification in certifications
    ]


def map_tags(tags: Sequence[str], organization_id: str) -> List[Record]:
    return [{"organization_id": organization_id, "tag_name": tag} for tag in tags]


def map_statistics(statistics: StatisticsRecord, organization_id: str) -> Record:
    # Review counters are derived downstream; the loader always writes zeros.
    return {
        "organization_id": organization_id,
        "volunteers_hosted": statistics.volunteers_hosted,
        "years_operating": statistics.years_operating,
        "animals_rescued": statistics.animals_rescued,
        "conservation_impact": statistics.conservation_impact,
        "total_reviews": 0,
        "average_rating": 0,
        "repeat_volunteers": 0,
    }


# ---------------------------------------------------------------------------
# Testimonials
# ---------------------------------------------------------------------------


def draw_featured(rng: random.Random) -> bool:
    """Roughly 30% of testimonials are featured."""
    return rng.random() > FEATURED_TESTIMONIAL_THRESHOLD


def map_testimonial(
    testimonial: TestimonialRecord, featured: bool, experience_date: date
) -> Record:
    return {
        "organization_id": testimonial.organization_id,
        "volunteer_name": testimonial.name,
        "volunteer_country": testimonial.location,
        "avatar_url": testimonial.avatar,
        "rating": TESTIMONIAL_RATING,
        "quote": testimonial.quote,
        "program_name": testimonial.organization_name,
        "duration_weeks": TESTIMONIAL_DURATION_WEEKS,
        "experience_date": experience_date.isoformat(),
        "verified": True,
        "featured": featured,
        "moderation_status": "approved",
    }


__all__ = [
    "Record",
    "draw_featured",
    "format_point",
    "map_accommodation",
    "map_age_requirement",
    "map_amenities",
    "map_animal_species",
    "map_animal_types",
    "map_application_documents",
    "map_application_process",
    "map_application_steps",
    "map_care_activities",
    "map_certifications",
    "map_dietary_options",
    "map_health_requirements",
    "map_highlights",
    "map_inclusions",
    "map_internet_access",
    "map_languages",
    "map_learning_outcomes",
    "map_meal_plan",
    "map_media_items",
    "map_organization",
    "map_program_activities",
    "map_program_start_dates",
    "map_programs",
    "map_schedule_items",
    "map_skill_requirements",
    "map_statistics",
    "map_success_stories",
    "map_tags",
    "map_testimonial",
    "map_transportation",
    "species_count",
    "split_schedule_item",
]

from __future__ import annotations

import random
from datetime import date

import pytest

from orgmigrate import mapping
from orgmigrate.domain.source import (
    AnimalCareRecord,
    ApplicationProcessRecord,
    GalleryImage,
    HealthRequirementsRecord,
    ProgramCost,
    SkillRequirementsRecord,
    StatisticsRecord,
    TestimonialRecord,
)

TIMESTAMP = "2025-01-01T00:00:00+00:00"
PARENT = "parent-id"


def test_organization_row_flattens_location(sample_document) -> None:
    org = sample_document.organizations[0]
    row = mapping.map_organization(org, TIMESTAMP)

    assert row["id"] == "toucan-rescue-ranch"
    assert row["coordinates"] == "(10.0169,-84.1638)"
    assert row["country"] == "Costa Rica"
    assert row["nearest_airport"].startswith("Juan Santamar")
    assert row["created_at"] == row["updated_at"] == TIMESTAMP


def test_organization_without_source_id_leaves_id_to_store(make_organization) -> None:
    org = make_organization(org_id=None, slug="no-id", location={})
    row = mapping.map_organization(org, TIMESTAMP)

    assert "id" not in row
    assert row["coordinates"] is None


@pytest.mark.parametrize(
    "coordinates, expected",
    [
        ((1.5, -2.25), "(1.5,-2.25)"),
        ((10.0169, -84.1638), "(10.0169,-84.1638)"),
        ((10, -84), "(10,-84)"),
        ((10.0, -84.0), "(10,-84)"),
        ((0.00001, 1.5), "(0.00001,1.5)"),
        ((-0.000123, 0), "(-0.000123,0)"),
    ],
)
def test_format_point(coordinates, expected) -> None:
    assert mapping.format_point(coordinates) == expected


def test_format_point_without_coordinates() -> None:
    assert mapping.format_point(None) is None


def test_integral_coordinates_from_source(make_organization) -> None:
    org = make_organization(location={"country": "Costa Rica", "coordinates": [10, -84]})
    assert mapping.map_organization(org, TIMESTAMP)["coordinates"] == "(10,-84)"


def test_only_first_program_is_primary(sample_document) -> None:
    org = sample_document.organizations[0]
    rows = mapping.map_programs(org.programs, PARENT)

    assert [r["is_primary"] for r in rows] == [True, False]
    assert all(r["organization_id"] == PARENT and r["status"] == "active" for r in rows)
    assert rows[1]["duration_max_weeks"] is None


def test_activities_are_categorized_in_order() -> None:
    rows = mapping.map_program_activities(["Feed sloths", "Guide a tour", "Plant trees"], PARENT)

    assert [r["activity_type"] for r in rows] == ["care", "education", "other"]
    assert [r["order_index"] for r in rows] == [0, 1, 2]


@pytest.mark.parametrize(
    "item, expected",
    [
        ("6:30 AM - Morning feeding", ("6:30 AM", "Morning feeding")),
        ("1:00 PM - Data entry - field notes", ("1:00 PM", "Data entry - field notes")),
        ("Free afternoon", ("Free afternoon", None)),
    ],
)
def test_split_schedule_item(item, expected) -> None:
    assert mapping.split_schedule_item(item) == expected


def test_schedule_items_keep_source_positions() -> None:
    rows = mapping.map_schedule_items(["7 AM - A", "8 AM - B"], PARENT, start_index=3)
    assert [(r["time_slot"], r["order_index"]) for r in rows] == [("7 AM", 3), ("8 AM", 4)]


def test_inclusions_share_one_index_space() -> None:
    cost = ProgramCost(includes=["Meals", "Bed", "Pickup"], excludes=["Flights", "Visa"])
    rows = mapping.map_inclusions(cost, PARENT)

    assert [(r["inclusion_type"], r["order_index"]) for r in rows] == [
        ("included", 0),
        ("included", 1),
        ("included", 2),
        ("excluded", 3),
        ("excluded", 4),
    ]


def test_excluded_only_starts_at_zero() -> None:
    rows = mapping.map_inclusions(ProgramCost(excludes=["Flights"]), PARENT)
    assert rows == [
        {"program_id": PARENT, "inclusion_type": "excluded", "item_name": "Flights", "order_index": 0}
    ]


def test_start_dates_are_available() -> None:
    rows = mapping.map_program_start_dates(["Every Monday"], PARENT)
    assert rows == [{"program_id": PARENT, "start_date": "Every Monday", "is_available": True}]


@pytest.mark.parametrize(
    "current, total, expected",
    [(45, 3, 15), (10, 3, 3), (28, 2, 14), (None, 2, None), (5, 0, None)],
)
def test_species_count_floors(current, total, expected) -> None:
    assert mapping.species_count(current, total) == expected


def test_species_rows_split_count_evenly() -> None:
    animal = AnimalCareRecord(animal_type="Toucans", species=["A", "B", "C"], current_animals=10)
    rows = mapping.map_animal_species(animal, PARENT)

    assert [r["current_count"] for r in rows] == [3, 3, 3]
    assert [r["species_name"] for r in rows] == ["A", "B", "C"]


def test_no_species_yields_no_rows() -> None:
    animal = AnimalCareRecord(animal_type="Mixed", current_animals=12)
    assert mapping.map_animal_species(animal, PARENT) == []


def test_success_story_titles_are_one_based() -> None:
    rows = mapping.map_success_stories(["Released", "Bred"], PARENT)
    assert [r["story_title"] for r in rows] == ["Success Story 1", "Success Story 2"]


def test_amenities_and_dietary_options_are_categorized(sample_document) -> None:
    org = sample_document.organizations[0]
    amenities = mapping.map_amenities(org.accommodation.amenities, PARENT)
    dietary = mapping.map_dietary_options(["Vegan", "Nut allergy friendly", "Halal"], PARENT)

    assert [r["amenity_category"] for r in amenities] == [
        "basic",
        "basic",
        "kitchen",
        "entertainment",
        "comfort",
        "other",
    ]
    assert [r["option_category"] for r in dietary] == ["dietary_restriction", "allergy", "other"]


def test_skill_lists_have_independent_indices() -> None:
    skills = SkillRequirementsRecord(required=["English", "Fitness"], preferred=["Spanish"])
    rows = mapping.map_skill_requirements(skills, PARENT)

    assert [(r["requirement_type"], r["order_index"]) for r in rows] == [
        ("required", 0),
        ("required", 1),
        ("preferred", 0),
    ]


def test_skill_indices_are_offset_per_list() -> None:
    skills = SkillRequirementsRecord(required=["English"], preferred=["Spanish", "First aid"])
    rows = mapping.map_skill_requirements(skills, PARENT, start_index=3)

    assert [(r["requirement_type"], r["order_index"]) for r in rows] == [
        ("required", 3),
        ("preferred", 3),
        ("preferred", 4),
    ]


def test_unordered_tables_get_no_order_index() -> None:
    rows = (
        mapping.map_program_start_dates(["Every Monday"], PARENT)
        + mapping.map_certifications(["GFAS"], PARENT)
        + mapping.map_tags(["wildlife", "rescue"], PARENT)
    )

    assert len(rows) == 4
    assert all("order_index" not in row for row in rows)
    assert [row["tag_name"] for row in rows[2:]] == ["wildlife", "rescue"]


def test_health_requirements_order_and_mandatory_flags() -> None:
    health = HealthRequirementsRecord(
        vaccinations=["Tetanus", "Rabies"],
        medical_clearance=True,
        insurance=True,
        physical_fitness="Able to hike",
    )
    rows = mapping.map_health_requirements(health, PARENT)

    assert [r["requirement_type"] for r in rows] == [
        "vaccination",
        "vaccination",
        "medical_clearance",
        "insurance",
        "fitness",
    ]
    assert [r["order_index"] for r in rows] == [0, 1, 2, 3, 4]
    assert rows[0]["requirement_description"] == "Tetanus vaccination required"
    assert [r["is_mandatory"] for r in rows] == [True, True, True, True, False]


def test_first_language_is_required() -> None:
    rows = mapping.map_languages(["Spanish", "English", "French"], PARENT)

    assert [r["proficiency_level"] for r in rows] == ["required", "conversational", "conversational"]
    assert [r["is_required"] for r in rows] == [True, False, False]


def test_application_process_rows(sample_document) -> None:
    process = sample_document.organizations[0].application_process
    row = mapping.map_application_process(process, PARENT)
    steps = mapping.map_application_steps(process.steps, "process-id")
    documents = mapping.map_application_documents(process.steps[0].documents, "step-id")

    assert row["processing_time_days"] == 5
    assert row["application_fee_amount"] is None
    assert [s["step_number"] for s in steps] == [1, 2, 3]
    assert steps[0]["time_required_hours"] == pytest.approx(0.25)
    assert steps[2]["time_required_hours"] == pytest.approx(48.0)
    assert [d["document_name"] for d in documents] == ["Passport copy", "Recent photo"]


def test_application_process_with_fee() -> None:
    process = ApplicationProcessRecord.model_validate(
        {"processingTime": "2 weeks", "fee": {"amount": 25, "currency": "USD", "refundable": False}}
    )
    row = mapping.map_application_process(process, PARENT)

    assert row["processing_time_days"] == 14
    assert row["application_fee_amount"] == 25
    assert row["fee_refundable"] is False


def test_media_hero_and_featured_boundaries() -> None:
    images = [GalleryImage(url=f"https://img.example/{i}.jpg") for i in range(8)]
    rows = mapping.map_media_items(images, PARENT)

    assert [r["category"] for r in rows] == ["hero"] * 3 + ["gallery"] * 5
    assert [r["featured"] for r in rows] == [True] * 6 + [False] * 2
    assert [r["order_index"] for r in rows] == list(range(8))


def test_statistics_review_counters_are_zero() -> None:
    row = mapping.map_statistics(StatisticsRecord(volunteers_hosted=100), PARENT)

    assert row["volunteers_hosted"] == 100
    assert row["total_reviews"] == row["average_rating"] == row["repeat_volunteers"] == 0


def test_testimonial_defaults() -> None:
    testimonial = TestimonialRecord.model_validate(
        {
            "name": "Sarah Johnson",
            "location": "United States",
            "organizationId": "org-1",
            "organizationName": "Toucan Rescue Ranch",
            "quote": "Life-changing.",
            "avatar": "https://avatars.example/sarah.jpg",
        }
    )
    row = mapping.map_testimonial(testimonial, featured=True, experience_date=date(2025, 3, 1))

    assert row["rating"] == 5
    assert row["duration_weeks"] == 4
    assert row["verified"] is True
    assert row["moderation_status"] == "approved"
    assert row["program_name"] == "Toucan Rescue Ranch"
    assert row["experience_date"] == "2025-03-01"
    assert row["featured"] is True


def test_draw_featured_is_reproducible() -> None:
    seeded_a, seeded_b = random.Random(7), random.Random(7)
    assert [mapping.draw_featured(seeded_a) for _ in range(20)] == [
        mapping.draw_featured(seeded_b) for _ in range(20)
    ]

    rng = random.Random(99)
    draws = [mapping.draw_featured(rng) for _ in range(2000)]
    # About 30% of draws should exceed the 0.7 threshold.
    assert 0.25 < sum(draws) / len(draws) < 0.35


def test_empty_collections_map_to_empty_lists() -> None:
    assert mapping.map_program_activities([], PARENT) == []
    assert mapping.map_inclusions(ProgramCost(), PARENT) == []
    assert mapping.map_languages([], PARENT) == []
    assert mapping.map_media_items([], PARENT) == []
    assert mapping.map_health_requirements(HealthRequirementsRecord(), PARENT) == []

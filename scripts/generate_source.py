"""
Synthetic source document generator for the migration pipeline.

Implements deterministic pseudo-random organization aggregates and writes them
as a JSON source document, useful for load-testing a migration against a
scratch database.
"""

from __future__ import annotations

import json
import random
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import typer

app = typer.Typer(help="Generate a synthetic JSON source document of organization aggregates.")

ANIMALS = {
    "Sea Turtles": ["Green Turtle", "Leatherback Turtle", "Hawksbill Turtle"],
    "Elephants": ["Asian Elephant"],
    "Orangutans": ["Bornean Orangutan", "Sumatran Orangutan"],
    "Big Cats": ["Lion", "Leopard", "Cheetah", "Caracal"],
    "Sloths": ["Two-toed Sloth", "Three-toed Sloth"],
}
COUNTRIES = [
    ("Costa Rica", "America/Costa_Rica", (9.7489, -83.7534)),
    ("Thailand", "Asia/Bangkok", (15.87, 100.9925)),
    ("Kenya", "Africa/Nairobi", (-0.0236, 37.9062)),
    ("Indonesia", "Asia/Jakarta", (-0.7893, 113.9213)),
]
ACTIVITIES = [
    "Feed rescued animals",
    "Guide visitor tours",
    "Repair enclosures",
    "Record research data",
    "Plant native trees",
]
AMENITIES = ["WiFi", "Shared bathroom", "Kitchen access", "Games room", "Swimming pool", "Hammocks"]
DIETARY = ["Vegetarian", "Vegan", "Gluten-free", "Nut allergy friendly", "Halal"]


def _organization(rng: random.Random, index: int) -> Dict[str, Any]:
    country, timezone, (lat, lng) = rng.choice(COUNTRIES)
    animal_names = rng.sample(sorted(ANIMALS), k=rng.randint(1, 3))
    slug = f"sanctuary-{index:05d}"
    programs: List[Dict[str, Any]] = []
    for p in range(rng.randint(1, 3)):
        programs.append(
            {
                "id": f"{slug}-program-{p}",
                "title": f"Volunteer Program {p + 1}",
                "typicalDay": [f"{7 + h}:00 AM - {rng.choice(ACTIVITIES)}" for h in range(4)],
                "duration": {"min": rng.randint(1, 4), "max": rng.choice([None, 12, 24])},
                "cost": {
                    "amount": round(rng.uniform(0, 1500), 2),
                    "currency": "USD",
                    "period": rng.choice(["week", "month"]),
                    "includes": ["Accommodation", "Meals"][: rng.randint(0, 2)],
                    "excludes": ["Flights", "Insurance"][: rng.randint(0, 2)],
                },
                "schedule": {
                    "hoursPerDay": rng.randint(4, 8),
                    "daysPerWeek": rng.randint(4, 6),
                    "startDates": ["Every Monday"],
                },
                "activities": rng.sample(ACTIVITIES, k=3),
                "learningOutcomes": ["Animal husbandry"],
                "highlights": ["Hands-on conservation work"],
            }
        )

    return {
        "id": slug,
        "name": f"Sanctuary {index}",
        "slug": slug,
        "email": f"volunteer@{slug}.example",
        "yearFounded": rng.randint(1980, 2020),
        "verified": rng.choice([True, False]),
        "location": {
            "country": country,
            "region": "Region",
            "city": "City",
            "coordinates": [round(lat + rng.uniform(-1, 1), 4), round(lng + rng.uniform(-1, 1), 4)],
            "timezone": timezone,
        },
        "programs": programs,
        "animalTypes": [
            {
                "animalType": name,
                "species": ANIMALS[name],
                "conservationStatus": "Vulnerable",
                "careActivities": ["Daily feeding"],
                "currentAnimals": rng.randint(0, 120),
                "successStories": ["Released animals thriving"],
            }
            for name in animal_names
        ],
        "accommodation": {"provided": True, "type": "shared_room", "amenities": rng.sample(AMENITIES, k=3)},
        "meals": {"provided": True, "type": "all_meals", "dietaryOptions": rng.sample(DIETARY, k=2)},
        "languages": ["English"] + rng.sample(["Spanish", "Thai", "Swahili"], k=1),
        "transportation": {"airportPickup": rng.choice([True, False]), "localTransport": True},
        "internetAccess": {"available": True, "quality": rng.choice(["good", "basic", "limited"])},
        "ageRequirement": {"min": 18},
        "skillRequirements": {"required": ["English"], "preferred": ["First aid"]},
        "healthRequirements": {"vaccinations": ["Tetanus"], "insurance": True},
        "gallery": {
            "images": [
                {"url": f"https://images.example/{slug}/{i}.jpg", "caption": f"Photo {i + 1}"}
                for i in range(rng.randint(0, 8))
            ]
        },
        "statistics": {"volunteersHosted": rng.randint(0, 5000), "yearsOperating": rng.randint(1, 40)},
        "status": "active",
        "featured": rng.random() > 0.8,
        "tags": animal_names,
    }


def generate_document(organizations: int, testimonials: int, seed: int) -> Dict[str, Any]:
    rng = random.Random(seed)
    orgs = [_organization(rng, i) for i in range(organizations)]
    quotes = [
        {
            "id": f"test-{i}",
            "name": f"Volunteer {i}",
            "location": rng.choice(COUNTRIES)[0],
            "organizationId": rng.choice(orgs)["id"] if orgs else None,
            "quote": "An unforgettable experience.",
        }
        for i in range(testimonials)
    ]
    return {"organizations": orgs, "testimonials": quotes}


@app.command()
def main(
    organizations: int = typer.Option(
        100,
        "--organizations",
        "-n",
        help="Number of organization aggregates to generate.",
    ),
    testimonials: int = typer.Option(
        20,
        "--testimonials",
        "-t",
        help="Number of testimonials to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("data/generated_source.json"),
        "--output",
        "-o",
        help="Where to write the JSON source document.",
    ),
) -> None:
    """
    Generate a synthetic source document.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    document = generate_document(organizations, testimonials, seed)
    with output.open("w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)
    typer.echo(
        f"Wrote {organizations:,} organizations and {testimonials:,} testimonials "
        f"-> {output} in {time.perf_counter() - start:.2f}s (seed={seed})"
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)

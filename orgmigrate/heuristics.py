"""
Keyword heuristics that classify free-text labels.

Each kind owns a fixed, ordered table of (category, keywords). Matching is a
case-insensitive substring test and the first matching group wins; a label
that matches nothing is ``other``. The functions here are pure and never
raise.
"""
from __future__ import annotations

import math
import re
from enum import Enum
from typing import Dict, Optional, Tuple

OTHER = "other"


class CategoryKind(str, Enum):
    ACTIVITY = "activity"
    AMENITY = "amenity"
    DIETARY = "dietary"


KeywordTable = Tuple[Tuple[str, Tuple[str, ...]], ...]

# Order matters - first match wins.
KEYWORD_TABLES: Dict[CategoryKind, KeywordTable] = {
    CategoryKind.ACTIVITY: (
        ("care", ("feed", "care", "medical")),
        ("education", ("education", "tour", "visitor")),
        ("construction", ("build", "maintain", "repair")),
        ("research", ("research", "data", "record")),
    ),
    CategoryKind.AMENITY: (
        ("basic", ("wifi", "internet", "bed", "bathroom")),
        ("entertainment", ("tv", "entertainment", "games")),
        ("kitchen", ("kitchen", "fridge", "cooking")),
        ("comfort", ("pool", "gym", "spa")),
    ),
    CategoryKind.DIETARY: (
        ("dietary_restriction", ("vegetarian", "vegan", "gluten")),
        ("allergy", ("allergy", "nut", "dairy")),
    ),
}


def categories(kind: CategoryKind) -> Tuple[str, ...]:
    """The closed category set for ``kind``, ``other`` included."""
    return tuple(category for category, _ in KEYWORD_TABLES[kind]) + (OTHER,)


def categorize(kind: CategoryKind, label: Optional[str]) -> str:
    if not label:
        return OTHER
    lowered = str(label).lower()
    for category, keywords in KEYWORD_TABLES[kind]:
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER


def categorize_activity(label: Optional[str]) -> str:
    return categorize(CategoryKind.ACTIVITY, label)


def categorize_amenity(label: Optional[str]) -> str:
    return categorize(CategoryKind.AMENITY, label)


def categorize_dietary_option(label: Optional[str]) -> str:
    return categorize(CategoryKind.DIETARY, label)


_HOURS_PER_UNIT = {
    "minute": 1 / 60,
    "min": 1 / 60,
    "hour": 1.0,
    "hr": 1.0,
    "day": 24.0,
    "week": 24.0 * 7,
    "month": 24.0 * 30,
}

_DURATION_RE = re.compile(
    r"(?P<low>\d+(?:\.\d+)?)"
    r"(?:\s*(?:-|to)\s*(?P<high>\d+(?:\.\d+)?))?"
    r"\s*(?:business\s+|working\s+)?"
    r"(?P<unit>minute|min|hour|hr|day|week|month)s?\b",
    re.IGNORECASE,
)


def parse_duration_hours(text: Optional[str]) -> Optional[float]:
    """
    Read a free-text duration such as "15 minutes", "1-2 days" or
    "3-5 business days" and return its upper bound in hours.

    Returns None when no number followed by a known unit is found.
    """
    if not text:
        return None
    match = _DURATION_RE.search(str(text))
    if match is None:
        return None
    amount = float(match.group("high") or match.group("low"))
    return amount * _HOURS_PER_UNIT[match.group("unit").lower()]


def hours_to_days(hours: Optional[float]) -> Optional[int]:
    """Whole days, rounded up."""
    if hours is None:
        return None
    return int(math.ceil(hours / 24.0))


__all__ = [
    "KEYWORD_TABLES",
    "OTHER",
    "CategoryKind",
    "categories",
    "categorize",
    "categorize_activity",
    "categorize_amenity",
    "categorize_dietary_option",
    "hours_to_days",
    "parse_duration_hours",
]

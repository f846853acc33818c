"""
Domain package for the migration pipeline.

Exports the source aggregate models and the destination table catalogue.
Keep this package focused on data definitions and validation concerns.
"""

from orgmigrate.domain.source import (
    OrganizationRecord,
    ProgramRecord,
    SourceDocument,
    SourceEnvelope,
    TestimonialRecord,
)
from orgmigrate.domain.tables import CLEARING_ORDER, CREATION_ORDER, NIL_UUID, Table

__all__ = [
    "CLEARING_ORDER",
    "CREATION_ORDER",
    "NIL_UUID",
    "OrganizationRecord",
    "ProgramRecord",
    "SourceDocument",
    "SourceEnvelope",
    "Table",
    "TestimonialRecord",
]

"""
Exception hierarchy for the migration pipeline.

Only SourceError is allowed to escape a run; everything else, RecordError for
a malformed record included, is caught at the aggregate or testimonial boundary
and recorded in the run report.
"""

from __future__ import annotations

from typing import Optional


class MigrationError(Exception):
    """Base class for all pipeline errors."""


class GatewayError(MigrationError):
    """A persistence gateway insert or delete failed."""

    def __init__(self, message: str, table: Optional[str] = None) -> None:
        super().__init__(message)
        self.table = table
        self.message = message

    @property
    def table_missing(self) -> bool:
        return "does not exist" in self.message


class SourceError(MigrationError):
    """The source document could not be read or validated."""


class RecordError(MigrationError):
    """One source record failed validation; only that record is skipped."""


class PhaseOrderError(MigrationError):
    """A migrator phase ran out of order or without its parent id."""


__all__ = ["GatewayError", "MigrationError", "PhaseOrderError", "RecordError", "SourceError"]

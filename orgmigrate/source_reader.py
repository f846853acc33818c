"""
Source reader: loads the organization aggregates and the testimonial list.

The source is a JSON document ``{"organizations": [...], "testimonials": [...]}``.
Reading checks only the outer shape; a file that cannot be read, or whose
top level is not that shape, raises SourceError, the only error class allowed
to abort a run. Each record is validated later, inside the boundary that
migrates it (``parse_organization`` / ``parse_testimonial``), so a malformed
record fails on its own with RecordError.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Type, TypeVar, Union, runtime_checkable

from pydantic import BaseModel, ValidationError

from orgmigrate.domain.source import (
    OrganizationRecord,
    OrganizationSource,
    SourceDocument,
    SourceEnvelope,
    TestimonialRecord,
    TestimonialSource,
)
from orgmigrate.errors import RecordError, SourceError
from orgmigrate.utils.logging import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class SourceReader(Protocol):
    def organizations(self) -> List[OrganizationSource]:
        ...

    def testimonials(self) -> List[TestimonialSource]:
        ...


def read_source(path: Path | str) -> SourceEnvelope:
    source_path = Path(path)
    try:
        with source_path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise SourceError(f"Cannot read source document {source_path}: {exc}") from exc

    try:
        envelope = SourceEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise SourceError(f"Invalid source document {source_path}: {exc}") from exc

    log.info(
        "Source document loaded",
        extra={
            "path": str(source_path),
            "organizations": len(envelope.organizations),
            "testimonials": len(envelope.testimonials),
        },
    )
    return envelope


def _summarize(exc: ValidationError) -> str:
    """``"name: Field required; programs.0.title: Field required"``"""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<record>'}: {error['msg']}"
        for error in exc.errors()
    )


def _parse(model: Type[ModelT], record: Any, kind: str) -> ModelT:
    if isinstance(record, model):
        return record
    try:
        return model.model_validate(record)
    except ValidationError as exc:
        raise RecordError(f"invalid {kind} record: {_summarize(exc)}") from exc


def parse_organization(record: OrganizationSource) -> OrganizationRecord:
    return _parse(OrganizationRecord, record, "organization")


def parse_testimonial(record: TestimonialSource) -> TestimonialRecord:
    return _parse(TestimonialRecord, record, "testimonial")


def record_label(record: Any, fallback: str, keys: Sequence[str] = ("name", "slug", "id")) -> str:
    """
    Best available display name for a record, valid or not: the first
    non-empty of ``keys``, else ``fallback``.
    """
    for key in keys:
        value = record.get(key) if isinstance(record, Mapping) else getattr(record, key, None)
        if value:
            return str(value)
    return fallback


class JsonSourceReader:
    """Reads a JSON source document lazily, once."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._envelope: Optional[SourceEnvelope] = None

    def _load(self) -> SourceEnvelope:
        if self._envelope is None:
            self._envelope = read_source(self.path)
        return self._envelope

    def organizations(self) -> List[OrganizationSource]:
        return list(self._load().organizations)

    def testimonials(self) -> List[TestimonialSource]:
        return list(self._load().testimonials)


class StaticSourceReader:
    """Serves an already-built document."""

    def __init__(self, document: Union[SourceDocument, SourceEnvelope]) -> None:
        self._document = document

    def organizations(self) -> List[OrganizationSource]:
        return list(self._document.organizations)

    def testimonials(self) -> List[TestimonialSource]:
        return list(self._document.testimonials)


__all__ = [
    "JsonSourceReader",
    "SourceReader",
    "StaticSourceReader",
    "parse_organization",
    "parse_testimonial",
    "read_source",
    "record_label",
]

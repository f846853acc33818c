"""
Pytest configuration for the migration pipeline.

Provides fixtures for:
- Source aggregates (the bundled sample document and a small builder)
- A fresh in-memory persistence gateway per test
- Database connection management for integration tests
"""

from __future__ import annotations

import os
import random
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import psycopg
import pytest
from psycopg.rows import dict_row

from orgmigrate.config import Settings, get_settings
from orgmigrate.domain.source import OrganizationRecord, SourceDocument
from orgmigrate.infrastructure.db_factory import PostgresGateway
from orgmigrate.infrastructure.gateway import MemoryGateway
from orgmigrate.source_reader import StaticSourceReader, read_source

SAMPLE_SOURCE = Path(__file__).parent.parent / "data" / "sample_source.json"


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_source_path() -> Path:
    return SAMPLE_SOURCE


@pytest.fixture
def sample_document() -> SourceDocument:
    envelope = read_source(SAMPLE_SOURCE)
    return SourceDocument(organizations=envelope.organizations, testimonials=envelope.testimonials)


@pytest.fixture
def memory_gateway() -> MemoryGateway:
    return MemoryGateway()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_organization() -> Callable[..., OrganizationRecord]:
    """
    Build a minimal but complete organization aggregate; keyword arguments
    override top-level camelCase source keys.
    """

    def _make(org_id: str = "org-1", name: str = "Org One", **overrides: Any) -> OrganizationRecord:
        payload: Dict[str, Any] = {
            "id": org_id,
            "name": name,
            "slug": org_id,
            "email": f"{org_id}@example.org",
            "location": {"country": "Costa Rica", "coordinates": [10.0169, -84.1638]},
            "programs": [
                {
                    "id": f"{org_id}-p1",
                    "title": "Primary Program",
                    "typicalDay": ["6:30 AM - Feeding"],
                    "cost": {"includes": ["Meals"], "excludes": ["Flights"]},
                    "activities": ["Feed animals"],
                },
                {"id": f"{org_id}-p2", "title": "Second Program"},
            ],
            "animalTypes": [
                {"animalType": "Sloths", "species": ["Two-toed", "Three-toed"], "currentAnimals": 9}
            ],
            "accommodation": {"provided": True, "amenities": ["WiFi", "Pool"]},
            "meals": {"provided": True, "dietaryOptions": ["Vegan"]},
            "languages": ["Spanish", "English"],
            "gallery": {"images": [{"url": f"https://img.example/{org_id}/{i}.jpg"} for i in range(2)]},
            "statistics": {"volunteersHosted": 10},
            "tags": ["wildlife"],
        }
        payload.update(overrides)
        return OrganizationRecord.model_validate(payload)

    return _make


@pytest.fixture
def make_reader() -> Callable[..., StaticSourceReader]:
    def _make(organizations=(), testimonials=()) -> StaticSourceReader:
        return StaticSourceReader(
            SourceDocument(organizations=list(organizations), testimonials=list(testimonials))
        )

    return _make


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "wildlife_volunteering"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def pg_gateway(
    test_dsn: str, db_connection_available: bool
) -> Generator[PostgresGateway, None, None]:
    """
    A PostgresGateway over a scratch `gateway_probe` table, dropped afterwards.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    gateway = PostgresGateway(
        psycopg.connect(test_dsn, autocommit=True, row_factory=dict_row)
    )
    with psycopg.connect(test_dsn, autocommit=True) as admin:
        admin.execute(
            """
            CREATE TABLE IF NOT EXISTS gateway_probe (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                name TEXT NOT NULL,
                coordinates POINT,
                order_index INTEGER
            )
            """
        )
        admin.execute("TRUNCATE gateway_probe")
    try:
        yield gateway
    finally:
        gateway.close()
        with psycopg.connect(test_dsn, autocommit=True) as admin:
            admin.execute("DROP TABLE IF EXISTS gateway_probe;")

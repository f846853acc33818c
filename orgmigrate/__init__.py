"""
orgmigrate - relational loader for wildlife volunteering organization data.

Takes nested, document-shaped organization records (programs, animal care,
accommodation, requirements, media) and writes them into a normalized
multi-table store in foreign-key order:

- Keyword heuristics that classify free-text labels
- Pure mappers from source slices to destination rows
- A per-aggregate migrator with an explicit phase state machine
- A batch orchestrator that clears (development only), migrates and reports

The store is reached through a small persistence gateway (insert and
delete-where), with PostgreSQL and in-memory implementations.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from orgmigrate.config import Settings, get_settings
from orgmigrate.errors import GatewayError, MigrationError, PhaseOrderError, SourceError
from orgmigrate.infrastructure import MemoryGateway, PersistenceGateway, PostgresGateway
from orgmigrate.migrator import AggregateResult, Phase, migrate_organization
from orgmigrate.orchestrator import RunReport, run_migration
from orgmigrate.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "GatewayError",
    "MigrationError",
    "PhaseOrderError",
    "SourceError",
    # Persistence
    "MemoryGateway",
    "PersistenceGateway",
    "PostgresGateway",
    # Migration
    "AggregateResult",
    "Phase",
    "RunReport",
    "migrate_organization",
    "run_migration",
    # Logging
    "configure_logging",
    "get_logger",
]

"""
Infrastructure package for the migration pipeline.

Centralizes store access behind the persistence gateway contract. Keep this
layer focused on I/O, decoupled from mapping and orchestration logic.
"""

from orgmigrate.infrastructure.db_factory import PostgresGateway, build_dsn, get_sync_connection
from orgmigrate.infrastructure.gateway import MemoryGateway, NotEqual, PersistenceGateway

__all__ = [
    "MemoryGateway",
    "NotEqual",
    "PersistenceGateway",
    "PostgresGateway",
    "build_dsn",
    "get_sync_connection",
]

"""
Utilities package for the migration pipeline.

Exports shared helpers for logging and profiling. Keep this package free of
domain-specific logic.
"""

from orgmigrate.utils.logging import configure_logging, get_logger
from orgmigrate.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]

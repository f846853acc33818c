"""
Run profiling for the migration pipeline.

Measures wall-clock time with perf_counter and process RSS/CPU with psutil so
a run report can say how long a load took and how heavy it was.

Usage:
    from orgmigrate.utils.profiler import profile_block

    with profile_block("migration-run") as stats:
        run()

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Profile a block of code.

    RSS is sampled on entry and exit only; the load is I/O bound, so there is
    no sampler thread.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    # cpu_percent needs a priming call
    process.cpu_percent(interval=None)
    rss_before = process.memory_info().rss

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stats.peak_rss_bytes = max(rss_before, process.memory_info().rss)
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]

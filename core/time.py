"""
Time utilities for SWAPSIM.

Wall-clock helpers for timestamps and monotonic helpers for latency.
"""

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Get current UTC datetime as ISO string."""
    return now_utc().isoformat()


def monotonic_ms() -> int:
    """Monotonic clock in milliseconds, for measuring latency."""
    return int(time.monotonic() * 1000)


def elapsed_ms(start_ms: int) -> int:
    """Milliseconds since a monotonic_ms() reading."""
    return monotonic_ms() - start_ms

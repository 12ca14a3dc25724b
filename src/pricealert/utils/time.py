from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

ONE_DAY_MS = 24 * 60 * 60 * 1000

def utc_now_ms() -> int:
    """Unix epoch milliseconds (int)."""
    return time.time_ns() // 1_000_000

def utc_dt_ms(ts_ms: int) -> datetime:
    """Epoch milliseconds -> timezone-aware UTC datetime."""
    s, ms = divmod(int(ts_ms), 1000)
    return datetime.fromtimestamp(s, tz=timezone.utc) + timedelta(milliseconds=ms)

def iso_utc(ts_ms: int) -> str:
    """Epoch milliseconds -> ISO-8601 UTC string with millisecond precision, e.g. 2024-02-01T14:32:01.123Z"""
    return utc_dt_ms(ts_ms).isoformat(timespec="milliseconds").replace("+00:00", "Z")

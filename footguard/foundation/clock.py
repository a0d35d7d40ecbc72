"""Timezone-aware clock utilities.

All timestamps in footguard MUST be UTC-aware.  This module is the single
source of "now"; components that need the time take a ``Clock`` so tests
can inject a fixed one instead of patching.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch, the wire representation of time."""
    return int(round(ensure_utc(value).timestamp() * 1000))


def from_epoch_ms(value: int | float) -> datetime:
    """Inverse of ``to_epoch_ms``.  Raises ValueError outside the datetime range."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"timestamp must be finite, got {value}")
    try:
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"timestamp out of range: {value}") from exc

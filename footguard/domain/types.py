"""Shared pydantic field types for the wire format."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from footguard.foundation.clock import ensure_utc, from_epoch_ms, to_epoch_ms


def _coerce_epoch_ms(v: Any) -> Any:
    if isinstance(v, bool):
        raise ValueError("timestamp must be epoch milliseconds or ISO-8601")
    if isinstance(v, (int, float)):
        return from_epoch_ms(v)
    return v


# UTC datetime in memory, epoch milliseconds on the wire.
EpochMillis = Annotated[
    datetime,
    BeforeValidator(_coerce_epoch_ms),
    AfterValidator(ensure_utc),
    PlainSerializer(to_epoch_ms, return_type=int),
]

# Integer score clamped by construction to the 0–100 range.
Score = Annotated[int, Field(ge=0, le=100)]

# camelCase keys on the wire, snake_case attributes in Python, immutable.
WIRE_MODEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}

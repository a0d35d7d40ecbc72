"""Abstract base for wire-format reading adapters.

Each adapter understands exactly one versioned schema and turns a raw
payload dict into a validated SensorReading.

Rules:
    1. Adapters must NOT mutate the incoming payload dict.
    2. adapt() must return a valid SensorReading or raise InvalidReading.
    3. No field-name guessing: a key either belongs to the schema or is ignored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from footguard.domain.reading import SensorReading

SCHEMA_KEY = "schema"


class ReadingAdapter(ABC):
    """Base class for converting one wire schema into SensorReadings."""

    @property
    @abstractmethod
    def schema_name(self) -> str:
        """Versioned schema tag, e.g. ``footguard.reading/v1``."""
        ...

    def can_handle(self, raw: dict[str, Any]) -> bool:
        """True if *raw* is tagged with this adapter's schema."""
        return raw.get(SCHEMA_KEY) == self.schema_name

    @abstractmethod
    def adapt(self, raw: dict[str, Any]) -> SensorReading:
        """Translate *raw* into a validated SensorReading.

        Raises:
            InvalidReading: If the payload does not satisfy the schema.
        """
        ...

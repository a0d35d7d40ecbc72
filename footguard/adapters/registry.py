"""ReadingParser — routes raw payloads to the adapter for their schema.

The ``schema`` tag selects the adapter.  An untagged payload goes to the
default adapter (the full schema).  An unknown tag is rejected; there is
no fallback that guesses at field names.
"""

from __future__ import annotations

import logging
from typing import Any

from footguard.adapters.base import SCHEMA_KEY, ReadingAdapter
from footguard.adapters.compact import CompactReadingAdapter
from footguard.adapters.full import FullReadingAdapter
from footguard.domain.reading import InvalidReading, SensorReading

logger = logging.getLogger(__name__)


class ParserStats:
    """Per-schema ingestion counters for observability."""

    __slots__ = ("schema_name", "accepted_count", "rejected_count")

    def __init__(self, schema_name: str) -> None:
        self.schema_name = schema_name
        self.accepted_count: int = 0
        self.rejected_count: int = 0

    def to_dict(self) -> dict:
        return {
            "schema": self.schema_name,
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
        }


class UnknownSchemaError(InvalidReading):
    """Raised when a payload's schema tag matches no registered adapter."""

    def __init__(self, schema: Any, known: list[str]) -> None:
        self.schema = schema
        super().__init__(
            f"Unknown reading schema {schema!r}",
            [{"field": SCHEMA_KEY, "message": f"Expected one of {known}"}],
        )


class ReadingParser:
    """Registry of reading adapters with schema routing and stats.

    Usage:
        parser = ReadingParser.with_defaults()
        reading = parser.parse(raw_payload)
    """

    def __init__(self, default: ReadingAdapter | None = None) -> None:
        self._adapters: list[ReadingAdapter] = []
        self._stats: dict[str, ParserStats] = {}
        self._default = default
        if default is not None:
            self.register(default)

    @classmethod
    def with_defaults(cls) -> "ReadingParser":
        parser = cls(default=FullReadingAdapter())
        parser.register(CompactReadingAdapter())
        return parser

    def register(self, adapter: ReadingAdapter) -> None:
        self._adapters.append(adapter)
        self._stats[adapter.schema_name] = ParserStats(adapter.schema_name)
        logger.info("Registered reading adapter: %s", adapter.schema_name)

    def parse(self, raw: Any) -> SensorReading:
        """Validate *raw* into a SensorReading.

        Raises:
            UnknownSchemaError: If the schema tag is not registered.
            InvalidReading: If the payload is not an object or fails validation.
        """
        if not isinstance(raw, dict):
            raise InvalidReading(
                "reading payload must be a JSON object",
                [{"field": "<root>", "message": f"got {type(raw).__name__}"}],
            )

        adapter = self._select(raw)
        stats = self._stats[adapter.schema_name]
        try:
            reading = adapter.adapt(raw)
        except InvalidReading as exc:
            stats.rejected_count += 1
            logger.warning("Adapter '%s' rejected payload: %s", adapter.schema_name, exc.reason)
            raise
        stats.accepted_count += 1
        logger.debug("Adapter '%s' accepted reading at %s", adapter.schema_name, reading.timestamp.isoformat())
        return reading

    def _select(self, raw: dict[str, Any]) -> ReadingAdapter:
        if SCHEMA_KEY not in raw and self._default is not None:
            return self._default
        for adapter in self._adapters:
            if adapter.can_handle(raw):
                return adapter
        logger.warning("Rejected payload with unknown schema %r", raw.get(SCHEMA_KEY))
        raise UnknownSchemaError(raw.get(SCHEMA_KEY), self.schema_names)

    @property
    def schema_names(self) -> list[str]:
        return [a.schema_name for a in self._adapters]

    @property
    def stats(self) -> list[dict]:
        return [s.to_dict() for s in self._stats.values()]

    @property
    def total_accepted(self) -> int:
        return sum(s.accepted_count for s in self._stats.values())

    @property
    def total_rejected(self) -> int:
        return sum(s.rejected_count for s in self._stats.values())

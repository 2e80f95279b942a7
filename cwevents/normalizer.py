"""Batch normalization of CloudWatch FilterLogEvents results."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from cwevents.config import Config
from cwevents.event import Event, new_event
from cwevents.ordering import sort_by_creation_time

logger = logging.getLogger(__name__)


@dataclass
class NormalizerStats:
    total: int = 0
    structured: int = 0
    fallback: int = 0
    level_counts: dict[str, int] = field(default_factory=dict)


class EventNormalizer:
    """Turns raw FilteredLogEvent mappings for one log group into Events.

    Views that take a format, separator or indent are exposed here with the
    configured values filled in.
    """

    def __init__(self, group: str, config: Config | None = None):
        self.group = group
        self.config = config or Config()
        self.stats = NormalizerStats()

    def normalize(self, raw_records: Iterable[Mapping[str, Any]]) -> list[Event]:
        events = [new_event(raw, self.group) for raw in raw_records]
        for event in events:
            self._record(event)

        if self.config.sort_events:
            sort_by_creation_time(events)

        logger.debug(
            "Normalized %d events for %s (%d structured, %d plain)",
            len(events),
            self.group,
            sum(1 for e in events if e.record.structured),
            sum(1 for e in events if not e.record.structured),
        )
        return events

    def normalize_page(self, page: Mapping[str, Any]) -> list[Event]:
        """Normalize the ``events`` list of one FilterLogEvents response page."""
        return self.normalize(page.get("events") or [])

    def _record(self, event: Event) -> None:
        self.stats.total += 1
        if event.record.structured:
            self.stats.structured += 1
        else:
            self.stats.fallback += 1
        level = str(event.level)
        self.stats.level_counts[level] = self.stats.level_counts.get(level, 0) + 1

    def reset_stats(self) -> None:
        self.stats = NormalizerStats()

    def short_time(self, event: Event) -> str:
        return event.time_short(self.config.short_time_format)

    def flat(self, event: Event) -> dict[str, Any]:
        return event.data_flat(separator=self.config.flatten_separator)

    def pretty(self, event: Event) -> str:
        return event.pretty_print(indent=self.config.pretty_indent)

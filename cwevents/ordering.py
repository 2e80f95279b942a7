"""Chronological ordering of events by CloudWatch creation time."""

from typing import Iterable

from cwevents.event import Event


def by_creation_time(event: Event):
    return event.creation_time


def compare_by_creation_time(a: Event, b: Event) -> int:
    """-1, 0 or 1 by creation time, for use with functools.cmp_to_key."""
    if a.creation_time < b.creation_time:
        return -1
    if a.creation_time > b.creation_time:
        return 1
    return 0


def sort_by_creation_time(events: list[Event]) -> None:
    """Stable in-place sort; events with equal times keep their input order."""
    events.sort(key=by_creation_time)


def sorted_by_creation_time(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=by_creation_time)

"""Event entity — a parsed log record plus CloudWatch retrieval metadata."""

import json
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from cwevents.flatten import flatten_data
from cwevents.levels import Level
from cwevents.record import LogRecord, SourceInfo, is_zero_time, parse_record

SHORT_TIME_FORMAT = "%m-%d %H:%M:%S"

TASK_UUID_PATTERN = re.compile(
    r"^[A-Za-z0-9]{8}-[A-Za-z0-9]{4}-[A-Za-z0-9]{4}-[A-Za-z0-9]{4}-[A-Za-z0-9]{12}$"
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_aws_timestamp(millis: int | None) -> datetime:
    """Convert CloudWatch epoch milliseconds to an aware UTC datetime.

    None (field missing from the API response) maps to the epoch.
    """
    if millis is None:
        return EPOCH
    seconds, remainder = divmod(int(millis), 1000)
    return EPOCH + timedelta(seconds=seconds, milliseconds=remainder)


@dataclass(frozen=True)
class Event:
    record: LogRecord
    stream: str = ""
    group: str = ""
    id: str = ""
    ingest_time: datetime = EPOCH
    creation_time: datetime = EPOCH

    # Record fields, readable straight off the event

    @property
    def level(self) -> Level:
        return self.record.level

    @property
    def time(self) -> datetime | None:
        return self.record.time

    @property
    def source(self) -> SourceInfo:
        return self.record.source

    @property
    def message(self) -> str:
        return self.record.message

    @property
    def data(self) -> Mapping[str, str]:
        return self.record.data

    # Views

    def task_short(self) -> str:
        """First segment of a task UUID stream name; other names unchanged."""
        if TASK_UUID_PATTERN.match(self.stream):
            return self.stream.split("-", 1)[0]
        return self.stream

    def time_short(self, time_format: str = SHORT_TIME_FORMAT) -> str:
        """Record time in the local time zone, e.g. ``11-14 22:13:20``."""
        return (self.time or self.creation_time).astimezone().strftime(time_format)

    def data_flat(self, separator: str = ".") -> dict[str, Any]:
        return flatten_data(self.data, separator=separator)

    def to_dict(self) -> dict[str, Any]:
        source = self.source
        return {
            "level": str(self.level),
            "time": self.time.isoformat() if self.time else None,
            "source": {"function": source.function, "file": source.file, "line": source.line},
            "msg": self.message,
            "data": dict(self.data),
            "stream": self.stream,
            "group": self.group,
            "id": self.id,
            "ingest_time": self.ingest_time.isoformat(),
            "creation_time": self.creation_time.isoformat(),
        }

    def pretty_print(self, indent: int = 2) -> str:
        """Indented JSON for diagnostics. Falls back to repr(), never raises."""
        try:
            return json.dumps(self.to_dict(), indent=indent)
        except (TypeError, ValueError, AttributeError):
            return repr(self)


def new_event(raw: Mapping[str, Any], group: str) -> Event:
    """Build an Event from one CloudWatch FilteredLogEvent mapping.

    Missing keys degrade to empty strings and epoch times. When the message
    carries no time of its own, the CloudWatch creation timestamp is used.
    """
    message = raw.get("message")
    record = parse_record("" if message is None else message)

    creation_time = parse_aws_timestamp(raw.get("timestamp"))
    if is_zero_time(record.time):
        record = replace(record, time=creation_time)

    return Event(
        record=record,
        stream=raw.get("logStreamName") or "",
        group=group,
        id=raw.get("eventId") or "",
        ingest_time=parse_aws_timestamp(raw.get("ingestionTime")),
        creation_time=creation_time,
    )

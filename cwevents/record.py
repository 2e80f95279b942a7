"""Record parser for the structured-log convention.

Decoding runs in two phases:
  1. Split the message into an ordered ``key -> raw JSON text`` mapping.
     Anything that is not a single JSON object fails here.
  2. Decode the reserved keys (level, time, source, msg) into typed fields
     and fold every other key into ``data`` as a string.

A failure in either phase makes parse_record() fall back to a plain-text
record: level INFO, the raw text as message, no time, empty data.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Mapping

from cwevents.levels import DEFAULT_LEVEL, Level, parse_level

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset({"level", "time", "source", "msg"})

_WS = re.compile(r"[ \t\n\r]*")
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2}|\s\d{2}:\d{2}:\d{2})\.(\d+)")


class RecordError(ValueError):
    """Base class for record decoding failures."""


class MalformedMessageError(RecordError):
    """The message is not a single JSON object."""


class MalformedFieldError(RecordError):
    """A reserved key is present but its value has the wrong shape."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"malformed {key!r}: {reason}")
        self.key = key


@dataclass(frozen=True)
class SourceInfo:
    function: str = ""
    file: str = ""
    line: int = 0


@dataclass(frozen=True)
class LogRecord:
    level: Level = DEFAULT_LEVEL
    time: datetime | None = None
    source: SourceInfo = field(default_factory=SourceInfo)
    message: str = ""
    data: Mapping[str, str] = field(default_factory=dict, hash=False)
    structured: bool = field(default=True, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)

# Only measures value extents; numbers stay text so no digit limit applies
_scanner = json.JSONDecoder(parse_constant=_reject_constant, parse_int=str, parse_float=str)


def _load(raw: str):
    try:
        return _decoder.decode(raw)
    except (ValueError, RecursionError) as e:
        raise MalformedMessageError(str(e)) from e


# ---------------------------------------------------------------------------
# Phase one: raw split
# ---------------------------------------------------------------------------


def _skip_ws(text: str, pos: int) -> int:
    return _WS.match(text, pos).end()


def _scan_value(text: str, pos: int) -> int:
    """Return the offset just past the JSON value starting at *pos*."""
    try:
        _, end = _scanner.raw_decode(text, pos)
    except (ValueError, RecursionError) as e:
        raise MalformedMessageError(str(e)) from e
    return end


def split_raw_object(text: str) -> dict[str, str]:
    """Split a JSON object into ``{key: raw value text}``, keeping key order.

    Each value is the exact slice of *text* it was read from. Repeated keys
    keep the last value.
    """
    if not isinstance(text, str):
        raise MalformedMessageError(f"expected str, got {type(text).__name__}")

    pos = _skip_ws(text, 0)
    if not text.startswith("{", pos):
        raise MalformedMessageError("not a JSON object")
    pos = _skip_ws(text, pos + 1)

    fields: dict[str, str] = {}
    if text.startswith("}", pos):
        pos += 1
    else:
        while True:
            if not text.startswith('"', pos):
                raise MalformedMessageError(f"expected field name at offset {pos}")
            key_end = _scan_value(text, pos)
            key = _load(text[pos:key_end])
            pos = _skip_ws(text, key_end)
            if not text.startswith(":", pos):
                raise MalformedMessageError(f"expected ':' at offset {pos}")
            pos = _skip_ws(text, pos + 1)

            value_end = _scan_value(text, pos)
            fields[key] = text[pos:value_end]
            pos = _skip_ws(text, value_end)

            if text.startswith("}", pos):
                pos += 1
                break
            if not text.startswith(",", pos):
                raise MalformedMessageError(f"expected ',' or '}}' at offset {pos}")
            pos = _skip_ws(text, pos + 1)

    if _skip_ws(text, pos) != len(text):
        raise MalformedMessageError("trailing data after JSON object")
    return fields


# ---------------------------------------------------------------------------
# Phase two: reserved field decoders
# ---------------------------------------------------------------------------


def _decode_level(raw: str) -> Level:
    try:
        return parse_level(_load(raw))
    except ValueError as e:
        raise MalformedFieldError("level", str(e)) from e


def parse_time(value: str) -> datetime:
    """Parse an RFC 3339 / ISO 8601 timestamp into an aware datetime.

    Fractional seconds longer than microseconds are truncated; a missing
    offset is read as UTC.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_zero_time(value: datetime | None) -> bool:
    """True for a missing time or the year-1 UTC instant Go emits for unset times."""
    if value is None:
        return True
    return value.utcoffset() == timedelta(0) and value.replace(tzinfo=None) == datetime.min


def _decode_time(raw: str) -> datetime | None:
    value = _load(raw)
    if not isinstance(value, str):
        raise MalformedFieldError("time", f"expected string, got {type(value).__name__}")
    try:
        parsed = parse_time(value)
    except ValueError as e:
        raise MalformedFieldError("time", str(e)) from e
    return None if is_zero_time(parsed) else parsed


def _decode_source(raw: str) -> SourceInfo:
    value = _load(raw)
    if not isinstance(value, dict):
        raise MalformedFieldError("source", f"expected object, got {type(value).__name__}")

    function = value.get("function")
    file = value.get("file")
    function = "" if function is None else function
    file = "" if file is None else file
    line = value.get("line")
    if not isinstance(function, str) or not isinstance(file, str):
        raise MalformedFieldError("source", "function and file must be strings")
    if line is None:
        line = 0
    elif isinstance(line, bool) or not isinstance(line, int):
        raise MalformedFieldError("source", f"line must be an integer, got {line!r}")
    return SourceInfo(function=function, file=file, line=line)


def _decode_message(raw: str) -> str:
    value = _load(raw)
    if not isinstance(value, str):
        raise MalformedFieldError("msg", f"expected string, got {type(value).__name__}")
    return value


_RESERVED_DECODERS = {
    "level": _decode_level,
    "time": _decode_time,
    "source": _decode_source,
    "msg": _decode_message,
}

_FIELD_NAMES = {"level": "level", "time": "time", "source": "source", "msg": "message"}


def payload_value(raw: str) -> str:
    """Render a non-reserved field as a string.

    JSON strings are unquoted and null becomes "". Numbers keep their
    literal text ("2.50" stays "2.50"); objects, arrays and booleans keep
    their raw JSON text.
    """
    if raw.startswith('"'):
        return _load(raw)
    if raw == "null":
        return ""
    return raw


def decode_structured(text: str) -> LogRecord:
    """Strictly decode a structured-log message. Raises RecordError."""
    fields = split_raw_object(text)

    typed = {}
    data: dict[str, str] = {}
    for key, raw in fields.items():
        if key in RESERVED_KEYS:
            # null leaves time, source and msg unset but is not a level name
            if raw == "null" and key != "level":
                continue
            typed[_FIELD_NAMES[key]] = _RESERVED_DECODERS[key](raw)
        else:
            data[key] = payload_value(raw)

    return LogRecord(data=data, **typed)


def fallback_record(text: str) -> LogRecord:
    """Plain-text record for messages outside the structured convention."""
    return LogRecord(level=DEFAULT_LEVEL, message=text, structured=False)


def parse_record(text: str | bytes) -> LogRecord:
    """Parse a log message, never raising.

    Any malformed reserved field degrades the whole message to the
    plain-text fallback, not just that field.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    try:
        return decode_structured(text)
    except RecordError as e:
        logger.debug("Falling back to plain-text record: %s", e)
        return fallback_record(text)

"""Severity levels of the structured-log convention."""

from enum import Enum


class Level(Enum):
    EMERG = "EMERG"
    ALERT = "ALERT"
    CRIT = "CRIT"
    ERROR = "ERROR"
    WARN = "WARN"
    NOTICE = "NOTICE"
    INFO = "INFO"
    DEBUG = "DEBUG"
    TRACE = "TRACE"
    FATAL = "FATAL"

    def __str__(self) -> str:
        return self.value


DEFAULT_LEVEL = Level.INFO

# Spellings emitted by other logging libraries
_ALIASES = {
    "WARNING": Level.WARN,
    "CRITICAL": Level.CRIT,
    "EMERGENCY": Level.EMERG,
    "ERR": Level.ERROR,
}


def parse_level(name: str) -> Level:
    """Map a level name (case-insensitive) to a Level.

    Raises ValueError for anything that is not a known name or alias.
    """
    if not isinstance(name, str):
        raise ValueError(f"level must be a string, got {type(name).__name__}")
    key = name.strip().upper()
    if key in Level.__members__:
        return Level[key]
    if key in _ALIASES:
        return _ALIASES[key]
    raise ValueError(f"unknown level: {name!r}")

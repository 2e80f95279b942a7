"""Configuration module — frozen dataclass built from defaults, YAML, then environment."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [CWEVENTS] %(levelname)s %(name)s %(message)s"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    short_time_format: str = "%m-%d %H:%M:%S"
    pretty_indent: int = 2
    flatten_separator: str = "."
    sort_events: bool = True
    log_level: str = "WARNING"


_ENV_VARS = {
    "short_time_format": "CWEVENTS_SHORT_TIME_FORMAT",
    "pretty_indent": "CWEVENTS_PRETTY_INDENT",
    "flatten_separator": "CWEVENTS_FLATTEN_SEPARATOR",
    "sort_events": "CWEVENTS_SORT_EVENTS",
    "log_level": "CWEVENTS_LOG_LEVEL",
}

_CONVERTERS = {
    "pretty_indent": int,
    "sort_events": _parse_bool,
}


def load_yaml(path: str) -> dict:
    """Read the ``cwevents`` section (or the whole mapping) of a YAML file.

    A missing file yields an empty dict. Invalid YAML is logged and ignored.
    """
    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, e)
        return {}

    if not isinstance(loaded, dict):
        return {}
    section = loaded.get("cwevents", loaded)
    return section if isinstance(section, dict) else {}


def load_config(path: str | None = None) -> Config:
    """Build Config: dataclass defaults, overlaid by YAML, overlaid by env vars.

    The YAML path defaults to the ``CWEVENTS_CONFIG`` environment variable.
    Bad numeric values raise ValueError.
    """
    path = path or os.environ.get("CWEVENTS_CONFIG")
    known = {f.name for f in fields(Config)}

    values = {}
    if path:
        for key, value in load_yaml(path).items():
            if key in known:
                values[key] = value
            else:
                logger.warning("Ignoring unknown config key: %s", key)

    for key, env_var in _ENV_VARS.items():
        raw = os.environ.get(env_var)
        if raw is not None:
            values[key] = raw

    for key, convert in _CONVERTERS.items():
        if key in values:
            values[key] = convert(values[key])

    return Config(**values)


def setup_logging(config: Config) -> None:
    """Configure root logging for scripts that embed this package."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )

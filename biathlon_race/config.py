"""Competition configuration loaded from a JSON file."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from os import PathLike
from typing import Any

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})(?:\.(\d+))?")

_INT_FIELDS = (
    ("laps", "laps"),
    ("lapLen", "lap_len"),
    ("penaltyLen", "penalty_len"),
    ("firingLines", "firing_lines"),
)


class ConfigError(ValueError):
    """Raised when a configuration cannot be read or understood."""


def parse_clock(text: str) -> datetime:
    """Parse ``HH:MM:SS`` with an optional fractional second into a datetime.

    The date part is fixed to 1900-01-01, so only the time of day matters.
    """
    match = _CLOCK_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"cannot parse {text!r} as HH:MM:SS")
    hours, minutes, seconds = (int(group) for group in match.group(1, 2, 3))
    if hours > 23:
        raise ValueError(f"hour out of range in {text!r}")
    if minutes > 59:
        raise ValueError(f"minute out of range in {text!r}")
    if seconds > 59:
        raise ValueError(f"second out of range in {text!r}")
    fraction = match.group(4) or ""
    microseconds = int(fraction[:6].ljust(6, "0")) if fraction else 0
    return datetime(1900, 1, 1, hours, minutes, seconds, microseconds)


def parse_start(text: Any) -> datetime:
    """Parse the ``start`` value of a configuration."""
    if isinstance(text, str):
        try:
            return parse_clock(text)
        except ValueError:
            pass
    raise ConfigError(f"invalid 'start' format: {text}")


def parse_start_delta(text: Any) -> timedelta:
    """Parse the ``startDelta`` value; fractions of a second are dropped."""
    if isinstance(text, str):
        try:
            moment = parse_clock(text)
        except ValueError:
            pass
        else:
            return timedelta(
                hours=moment.hour, minutes=moment.minute, seconds=moment.second
            )
    raise ConfigError(f"invalid 'startDelta' format: {text}")


@dataclass(frozen=True)
class Config:
    """Settings of a biathlon competition."""

    laps: int = 0
    lap_len: int = 0
    penalty_len: int = 0
    firing_lines: int = 0
    start: datetime | None = None
    start_delta: timedelta = timedelta(0)

    @classmethod
    def from_mapping(cls, data: Any) -> Config:
        """Build a configuration from decoded JSON; missing keys keep defaults."""
        if not isinstance(data, Mapping):
            raise ConfigError("parsing config: expected a JSON object")
        values: dict[str, Any] = {}
        for key, attr in _INT_FIELDS:
            value = data.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(
                    f"parsing config: field {key!r} must be an integer, got {value!r}"
                )
            values[attr] = value
        try:
            if data.get("start") is not None:
                values["start"] = parse_start(data["start"])
            if data.get("startDelta") is not None:
                values["start_delta"] = parse_start_delta(data["startDelta"])
        except ConfigError as err:
            raise ConfigError(f"parsing config: {err}") from err
        return cls(**values)


def load_config(path: str | PathLike[str]) -> Config:
    """Read and parse the configuration file at ``path``.

    Raises ``OSError`` if the file cannot be opened and ``ConfigError``
    if its content is not a valid configuration.
    """
    with open(path, encoding="utf-8") as handle:
        text = handle.read()
    try:
        data, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except json.JSONDecodeError as err:
        raise ConfigError(f"parsing config: {err}") from err
    return Config.from_mapping(data)
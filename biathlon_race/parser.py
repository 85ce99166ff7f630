"""Parsing event lines of the form ``[HH:MM:SS] eventID competitorID [extra...]``."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import TextIO

from .config import parse_clock
from .event import Event
from .logger import log_error

_INT_RE = re.compile(r"[+-]?[0-9]+")


class ParseError(ValueError):
    """Raised when an event line cannot be parsed."""


def _to_int(text: str, what: str) -> int:
    if _INT_RE.fullmatch(text) is None:
        raise ParseError(f"invalid {what}: parsing {text!r}: invalid syntax")
    return int(text)


def parse_event_line(line: str) -> Event:
    """Parse one input line into an event."""
    parts = line.split()
    if len(parts) < 3:
        raise ParseError(f"invalid line: {line}")
    stamp, event_id, competitor_id, *extra = parts
    try:
        timestamp = parse_clock(stamp.strip("[]"))
    except ValueError as err:
        raise ParseError(f"invalid timestamp: {err}") from err
    return Event(
        timestamp=timestamp,
        kind=_to_int(event_id, "event id"),
        competitor_id=_to_int(competitor_id, "competitor id"),
        extra=tuple(extra),
    )


def parse_events(lines: Iterable[str], log: TextIO) -> Iterator[Event]:
    """Yield events parsed from ``lines``; bad lines and read errors are logged."""
    iterator = iter(lines)
    while True:
        try:
            raw = next(iterator)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as err:
            log_error(log, "scanner", err)
            return
        line = raw.removesuffix("\n").removesuffix("\r")
        try:
            event = parse_event_line(line)
        except ParseError as err:
            log_error(log, "parseEventLine", err)
            continue
        yield event
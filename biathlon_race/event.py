"""Competition events and their human-readable form."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class EventKind(IntEnum):
    """Identifiers of incoming (1-11) and outgoing (32-33) events."""

    REGISTERED = 1
    SET_START_TIME = 2
    ON_START_LINE = 3
    STARTED_RACE = 4
    STARTED_FIRING_RANGE = 5
    SHOT_HIT = 6
    FINISHED_FIRING_RANGE = 7
    STARTED_PENALTY_LAPS = 8
    FINISHED_PENALTY_LAPS = 9
    FINISHED_LAP = 10
    CANT_CONTINUE = 11
    DISQUALIFIED = 32
    FINISHED_RACE = 33


def format_clock(moment: datetime) -> str:
    """Format a moment as ``HH:MM:SS.mmm``, truncating to milliseconds."""
    return f"{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}"


@dataclass(frozen=True)
class Event:
    """Something that happened to a competitor at a given moment."""

    timestamp: datetime
    kind: int
    competitor_id: int
    extra: tuple[str, ...] = ()

    def __str__(self) -> str:
        ts = format_clock(self.timestamp)
        cid = self.competitor_id
        match self.kind:
            case EventKind.REGISTERED:
                return f"[{ts}] The competitor({cid}) registered"
            case EventKind.SET_START_TIME:
                return (
                    f"[{ts}] The start time for the competitor({cid}) "
                    f"was set by a draw to {self.extra[0]}"
                )
            case EventKind.ON_START_LINE:
                return f"[{ts}] The competitor({cid}) is on the start line"
            case EventKind.STARTED_RACE:
                return f"[{ts}] The competitor({cid}) has started"
            case EventKind.STARTED_FIRING_RANGE:
                return f"[{ts}] The competitor({cid}) is on the firing range({self.extra[0]})"
            case EventKind.SHOT_HIT:
                return f"[{ts}] The target({self.extra[0]}) has been hit by competitor({cid})"
            case EventKind.FINISHED_FIRING_RANGE:
                return f"[{ts}] The competitor({cid}) left the firing range"
            case EventKind.STARTED_PENALTY_LAPS:
                return f"[{ts}] The competitor({cid}) entered the penalty laps"
            case EventKind.FINISHED_PENALTY_LAPS:
                return f"[{ts}] The competitor({cid}) left the penalty laps"
            case EventKind.FINISHED_LAP:
                return f"[{ts}] The competitor({cid}) ended the main lap"
            case EventKind.CANT_CONTINUE:
                comment = " ".join(self.extra)
                return f"[{ts}] The competitor({cid}) can't continue: {comment}"
            case EventKind.DISQUALIFIED:
                return f"[{ts}] The competitor({cid}) is disqualified"
            case EventKind.FINISHED_RACE:
                return f"[{ts}] The competitor({cid}) has finished"
            case _:
                return f"[{ts}] IMPOSSIBLE EVENT {self.kind} for competitor({cid})"
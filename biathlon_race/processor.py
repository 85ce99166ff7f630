"""Tracking each competitor's state as events arrive."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TextIO

from .config import Config, parse_clock
from .event import Event, EventKind
from .logger import log_error, log_event

NUMBER_OF_TARGETS = 5
"""Number of targets on one firing line."""


class UpdateError(ValueError):
    """Raised when an event cannot be applied to a competitor's state."""


class CompetitorStatus(Enum):
    """Where a competitor stands in the race."""

    ACTIVE = 0
    DISQUALIFIED = 1
    CANT_CONTINUE = 2
    FINISHED = 3


@dataclass
class Lap:
    """One main lap; the first also counts the delay after the scheduled start."""

    start_time: datetime
    finish_time: datetime | None = None
    duration: timedelta = timedelta(0)


@dataclass
class Penalty:
    """A stay on the penalty laps that is in progress."""

    start_time: datetime | None = None
    finish_time: datetime | None = None
    duration: timedelta = timedelta(0)


@dataclass
class CompetitorState:
    """Everything known about one competitor."""

    competitor_id: int = 0
    scheduled_start_time: datetime | None = None
    actual_start_time: datetime | None = None
    total_race_duration: timedelta = timedelta(0)
    laps: list[Lap] = field(default_factory=list)
    current_penalty: Penalty = field(default_factory=Penalty)
    total_penalty_time: timedelta = timedelta(0)
    total_penalty_laps: int = 0
    total_hits: int = 0
    current_hits: int = 0
    status: CompetitorStatus = CompetitorStatus.ACTIVE
    last_seen_time: datetime | None = None

    def is_done(self) -> bool:
        """Whether further events for this competitor are ignored."""
        return self.status is not CompetitorStatus.ACTIVE

    def apply(self, config: Config, event: Event) -> None:
        """Update the state from an incoming event."""
        match event.kind:
            case EventKind.SET_START_TIME:
                self.set_start_time(event)
            case EventKind.STARTED_RACE:
                self.start_race(config, event)
            case EventKind.SHOT_HIT:
                self.hit_target()
            case EventKind.STARTED_PENALTY_LAPS:
                self.start_penalty(event)
            case EventKind.FINISHED_PENALTY_LAPS:
                self.finish_penalty(event)
            case EventKind.FINISHED_LAP:
                self.finish_lap(config, event)
            case EventKind.CANT_CONTINUE:
                self.cant_continue(event)

    def set_start_time(self, event: Event) -> None:
        """Record the start time drawn for the competitor."""
        if not event.extra:
            raise UpdateError("invalid start time: no time given")
        try:
            self.scheduled_start_time = parse_clock(event.extra[0])
        except ValueError as err:
            raise UpdateError(f"invalid start time: {err}") from err

    def start_race(self, config: Config, event: Event) -> None:
        """Record the actual start and open the first lap.

        A start before the scheduled time or after the allowed delta,
        or without any scheduled time, disqualifies the competitor.
        """
        started = event.timestamp
        self.actual_start_time = started
        scheduled = self.scheduled_start_time
        if scheduled is None:
            self.status = CompetitorStatus.DISQUALIFIED
            self.laps.append(Lap(start_time=started))
            return
        deadline = scheduled + config.start_delta
        if started < scheduled or started > deadline:
            self.status = CompetitorStatus.DISQUALIFIED
        self.laps.append(Lap(start_time=started, duration=started - scheduled))

    def finish_lap(self, config: Config, event: Event) -> None:
        """Close the current lap; after the last one the race is finished."""
        if not self.laps:
            raise UpdateError("trying to finish a lap that was never started")
        lap = self.laps[-1]
        lap.finish_time = event.timestamp
        lap.duration += event.timestamp - lap.start_time
        if len(self.laps) == config.laps:
            self.status = CompetitorStatus.FINISHED
            self.total_race_duration += sum(
                (done.duration for done in self.laps), timedelta(0)
            )
        else:
            self.laps.append(Lap(start_time=event.timestamp))

    def hit_target(self) -> None:
        """Count one hit target."""
        self.current_hits += 1
        self.total_hits += 1

    def start_penalty(self, event: Event) -> None:
        """Begin penalty laps, one for each target missed on this line."""
        self.current_penalty.start_time = event.timestamp
        self.total_penalty_laps += NUMBER_OF_TARGETS - self.current_hits
        self.current_hits = 0

    def finish_penalty(self, event: Event) -> None:
        """Leave the penalty laps and add their time to the total."""
        started = self.current_penalty.start_time
        if started is None:
            raise UpdateError("trying to finish penalty laps that were never started")
        self.total_penalty_time += event.timestamp - started
        self.current_penalty = Penalty()

    def cant_continue(self, event: Event) -> None:
        """Mark the competitor as unable to go on."""
        self.status = CompetitorStatus.CANT_CONTINUE
        self.last_seen_time = event.timestamp

    def outgoing_event(self, incoming: Event) -> Event | None:
        """The disqualification or finish event caused by ``incoming``, if any."""
        if self.status is CompetitorStatus.DISQUALIFIED:
            kind = EventKind.DISQUALIFIED
        elif self.status is CompetitorStatus.FINISHED:
            kind = EventKind.FINISHED_RACE
        else:
            return None
        return Event(
            timestamp=incoming.timestamp,
            kind=kind,
            competitor_id=incoming.competitor_id,
            extra=incoming.extra,
        )


def get_or_create_state(
    summary: dict[int, CompetitorState], competitor_id: int
) -> CompetitorState:
    """Return the competitor's state, creating it on first sight."""
    state = summary.get(competitor_id)
    if state is None:
        state = CompetitorState(competitor_id=competitor_id)
        summary[competitor_id] = state
    return state


def process_events(
    out: TextIO, config: Config, events: Iterable[Event]
) -> dict[int, CompetitorState]:
    """Log every event, update the states and log the events they cause."""
    summary: dict[int, CompetitorState] = {}
    for event in events:
        log_event(out, event)
        state = get_or_create_state(summary, event.competitor_id)
        if state.is_done():
            continue
        try:
            state.apply(config, event)
        except UpdateError as err:
            log_error(out, "update failed", err)
            continue
        outgoing = state.outgoing_event(event)
        if outgoing is not None:
            log_event(out, outgoing)
    return summary
"""Final results table of the competition."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TextIO

from .config import Config
from .processor import NUMBER_OF_TARGETS, CompetitorState, CompetitorStatus

_EMPTY = "{,}"


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``HH:MM:SS.mmm``, truncating to milliseconds."""
    total = duration // timedelta(microseconds=1)
    sign = -1 if total < 0 else 1
    millis_total = abs(total) // 1000
    hours, rest = divmod(millis_total, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return (
        f"{sign * hours:02d}:{sign * minutes:02d}:"
        f"{sign * seconds:02d}.{sign * millis:03d}"
    )


def calculate_average_speed(distance: int, duration: timedelta) -> float:
    """Metres per second over ``duration``; zero for an empty duration."""
    seconds = duration.total_seconds()
    if seconds == 0:
        return 0.0
    return distance / seconds


@dataclass(frozen=True)
class Result:
    """A competitor's line in the final report."""

    state: CompetitorState
    lap_len: int
    penalty_len: int
    firing_lines: int

    def _status_label(self) -> str:
        match self.state.status:
            case CompetitorStatus.DISQUALIFIED:
                return "NotStarted"
            case CompetitorStatus.CANT_CONTINUE:
                return "NotFinished"
            case CompetitorStatus.FINISHED:
                return format_duration(self.state.total_race_duration)
            case _:
                return ""

    def _laps_text(self) -> str:
        pieces = []
        for lap in self.state.laps:
            if not lap.duration:
                pieces.append(_EMPTY)
            else:
                speed = calculate_average_speed(self.lap_len, lap.duration)
                pieces.append(f"{{{format_duration(lap.duration)}, {speed:.3f}}}")
        return ", ".join(pieces)

    def _penalty_text(self) -> str:
        state = self.state
        if not state.total_penalty_time:
            return _EMPTY
        speed = calculate_average_speed(
            self.penalty_len * state.total_penalty_laps, state.total_penalty_time
        )
        return f"{{{format_duration(state.total_penalty_time)}, {speed:.3f}}}"

    def __str__(self) -> str:
        state = self.state
        return (
            f"[{self._status_label()}] {state.competitor_id} "
            f"[{self._laps_text()}] {self._penalty_text()} "
            f"{state.total_hits}/{self.firing_lines * NUMBER_OF_TARGETS}"
        )


def generate_report(
    out: TextIO, config: Config, summary: dict[int, CompetitorState]
) -> None:
    """Write the results: not started, then not finished, then finishers."""
    not_started: list[Result] = []
    cant_continue: list[Result] = []
    finished: list[Result] = []
    for state in summary.values():
        result = Result(
            state=state,
            lap_len=config.lap_len,
            penalty_len=config.penalty_len,
            firing_lines=config.firing_lines,
        )
        match state.status:
            case CompetitorStatus.DISQUALIFIED:
                not_started.append(result)
            case CompetitorStatus.CANT_CONTINUE:
                cant_continue.append(result)
            case CompetitorStatus.FINISHED:
                finished.append(result)

    not_started.sort(key=lambda r: r.state.scheduled_start_time or datetime.min)
    cant_continue.sort(key=lambda r: r.state.last_seen_time or datetime.min)
    finished.sort(key=lambda r: r.state.total_race_duration)

    for result in (*not_started, *cant_continue, *finished):
        print(result, file=out)
import io
from datetime import datetime, timedelta

import pytest

from biathlon_race.config import Config, parse_clock
from biathlon_race.event import Event, EventKind
from biathlon_race.processor import (
    CompetitorState,
    CompetitorStatus,
    Penalty,
    UpdateError,
    get_or_create_state,
    process_events,
)


def _at(text):
    return parse_clock(text)


def _event(kind, competitor_id=1, timestamp=None, extra=()):
    if timestamp is None:
        timestamp = _at("00:00:00")
    return Event(timestamp=timestamp, kind=kind, competitor_id=competitor_id, extra=tuple(extra))


@pytest.fixture
def race_config():
    return Config(
        laps=2,
        lap_len=3500,
        penalty_len=150,
        firing_lines=2,
        start=_at("09:00:00"),
        start_delta=timedelta(seconds=30),
    )


def test_should_skip_active():
    assert CompetitorState().is_done() is False


def test_should_skip_disqualified():
    assert CompetitorState(status=CompetitorStatus.DISQUALIFIED).is_done() is True


def test_get_or_create_state():
    summary = {}
    state = get_or_create_state(summary, 1)
    assert state.competitor_id == 1
    assert get_or_create_state(summary, 1) is state
    assert len(summary) == 1


def test_handle_started_penalty_laps():
    state = CompetitorState(current_hits=3)
    state.start_penalty(_event(EventKind.STARTED_PENALTY_LAPS, timestamp=datetime.now()))
    assert state.total_penalty_laps == 2
    assert state.current_hits == 0
    assert state.current_penalty.start_time is not None


def test_outgoing_disqualified():
    state = CompetitorState(status=CompetitorStatus.DISQUALIFIED)
    event = state.outgoing_event(_event(EventKind.STARTED_RACE, competitor_id=1, timestamp=datetime.now()))
    assert event.kind == EventKind.DISQUALIFIED
    assert event.competitor_id == 1


def test_outgoing_finished():
    state = CompetitorState(status=CompetitorStatus.FINISHED)
    event = state.outgoing_event(_event(EventKind.FINISHED_LAP, competitor_id=2, timestamp=datetime.now()))
    assert event.kind == EventKind.FINISHED_RACE
    assert event.competitor_id == 2


def test_outgoing_none_for_active():
    assert CompetitorState().outgoing_event(_event(EventKind.REGISTERED)) is None


def test_process_basic_race_completion(race_config):
    events = [
        _event(EventKind.SET_START_TIME, extra=["09:00:00"]),
        _event(EventKind.STARTED_RACE, timestamp=_at("09:00:30")),
        _event(EventKind.FINISHED_LAP, timestamp=_at("09:10:00")),
        _event(EventKind.FINISHED_LAP, timestamp=_at("09:20:00")),
    ]
    summary = process_events(io.StringIO(), race_config, events)
    assert len(summary) == 1
    state = summary[1]
    assert len(state.laps) == 2
    assert state.status is CompetitorStatus.FINISHED
    assert state.total_race_duration == timedelta(minutes=20)


def test_process_penalty_laps(race_config):
    events = [
        _event(EventKind.STARTED_PENALTY_LAPS, timestamp=_at("09:00:30")),
        _event(EventKind.FINISHED_PENALTY_LAPS, timestamp=_at("09:10:30")),
    ]
    summary = process_events(io.StringIO(), race_config, events)
    assert len(summary) == 1
    state = summary[1]
    assert state.total_penalty_laps == 5
    assert state.current_hits == 0
    assert state.total_penalty_time == timedelta(minutes=10)


def test_process_cant_continue(race_config):
    later = datetime.now() + timedelta(minutes=10)
    events = [_event(EventKind.CANT_CONTINUE, timestamp=later, extra=["Took", "wrong", "turn"])]
    summary = process_events(io.StringIO(), race_config, events)
    assert len(summary) == 1
    assert summary[1].status is CompetitorStatus.CANT_CONTINUE
    assert summary[1].last_seen_time == later


def test_process_impossible_event(race_config):
    out = io.StringIO()
    summary = process_events(out, race_config, [_event(-1, timestamp=datetime.now())])
    assert len(summary) == 1
    assert "IMPOSSIBLE" in out.getvalue()


def test_update_set_start_time():
    config = Config(laps=3, start_delta=timedelta(seconds=30))
    state = CompetitorState()
    state.apply(config, _event(EventKind.SET_START_TIME, extra=["09:00:00"]))
    assert state.scheduled_start_time == _at("09:00:00")


def test_update_start_race_late():
    config = Config(laps=3, start_delta=timedelta(seconds=30))
    state = CompetitorState(scheduled_start_time=_at("09:00:00"))
    state.apply(config, _event(EventKind.STARTED_RACE, timestamp=_at("09:01:30")))
    assert state.status is CompetitorStatus.DISQUALIFIED


def test_update_start_race_in_time():
    config = Config(laps=3, start_delta=timedelta(seconds=30))
    state = CompetitorState(scheduled_start_time=_at("09:00:00"))
    state.apply(config, _event(EventKind.STARTED_RACE, timestamp=_at("09:00:20")))
    assert state.status is CompetitorStatus.ACTIVE
    assert state.laps[0].duration == timedelta(seconds=20)


def test_update_start_race_early():
    config = Config(laps=3, start_delta=timedelta(seconds=30))
    state = CompetitorState(scheduled_start_time=_at("09:00:00"))
    state.apply(config, _event(EventKind.STARTED_RACE, timestamp=_at("08:59:59")))
    assert state.status is CompetitorStatus.DISQUALIFIED


def test_update_hit_target():
    state = CompetitorState()
    state.apply(Config(laps=3), _event(EventKind.SHOT_HIT))
    assert state.total_hits == 1
    assert state.current_hits == 1


def test_finish_penalty_complete():
    start = datetime.now()
    state = CompetitorState(
        current_penalty=Penalty(start_time=start),
        total_penalty_time=timedelta(minutes=10),
    )
    state.finish_penalty(_event(EventKind.FINISHED_PENALTY_LAPS, timestamp=start + timedelta(minutes=5)))
    assert state.total_penalty_time == timedelta(minutes=15)
    assert state.current_penalty == Penalty()


def test_finish_penalty_never_started():
    with pytest.raises(UpdateError):
        CompetitorState().finish_penalty(_event(EventKind.FINISHED_PENALTY_LAPS, timestamp=datetime.now()))


def test_finish_lap_never_started():
    with pytest.raises(UpdateError):
        CompetitorState().finish_lap(Config(laps=1), _event(EventKind.FINISHED_LAP))


def test_handle_cant_continue():
    now = datetime.now()
    state = CompetitorState()
    state.cant_continue(_event(EventKind.CANT_CONTINUE, timestamp=now))
    assert state.status is CompetitorStatus.CANT_CONTINUE
    assert state.last_seen_time == now


def test_handle_cant_continue_multiple_times():
    state = CompetitorState(status=CompetitorStatus.CANT_CONTINUE)
    state.cant_continue(_event(EventKind.CANT_CONTINUE, timestamp=datetime.now()))
    assert state.status is CompetitorStatus.CANT_CONTINUE


def test_handle_invalid_set_start_time():
    with pytest.raises(UpdateError, match="invalid"):
        CompetitorState().set_start_time(_event(EventKind.SET_START_TIME, extra=["invalid"]))


def test_process_skips_disqualified_competitor():
    out = io.StringIO()
    events = [
        _event(EventKind.STARTED_RACE, timestamp=datetime.now()),
        _event(EventKind.FINISHED_LAP, timestamp=datetime.now()),
    ]
    summary = process_events(out, Config(laps=1), events)
    assert summary[1].status is CompetitorStatus.DISQUALIFIED
    assert "disqualified" in out.getvalue()
    assert summary[1].laps[0].finish_time is None


def test_process_logs_update_error():
    out = io.StringIO()
    events = [_event(EventKind.SET_START_TIME, extra=["invalid_time"])]
    summary = process_events(out, Config(laps=1), events)
    text = out.getvalue()
    assert "update failed" in text
    assert summary[1].competitor_id == 1
    assert "disqualified" not in text
    assert "finished" not in text
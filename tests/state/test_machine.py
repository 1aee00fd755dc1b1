"""Tests for core session state machine logic."""

from datetime import datetime, timezone

import pytest

from fasting_app.data.history import HistoryEntry
from fasting_app.data.plans import lookup, resolve
from fasting_app.errors import InvalidTimestamp, SessionAlreadyActive
from fasting_app.state.machine import (
    change_plan,
    clear_history,
    end_session,
    import_start,
    repeat_fast,
    reset_session,
    start_session,
)
from fasting_app.state.models import IDLE_SESSION, AppState, Session, SessionState

HOUR_MS = 3_600_000


def utc_ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


class TestStartSession:
    """Test starting a fast."""

    def test_start_sets_target_from_plan(self):
        now = utc_ms(2024, 1, 1, 8, 0)

        state, transition = start_session(AppState(), now, lookup("16:8"))

        assert state.is_fasting
        assert state.session.start_time == now
        assert state.session.target_end_time == utc_ms(2024, 1, 2, 0, 0)
        assert transition.from_state == SessionState.IDLE
        assert transition.to_state == SessionState.FASTING
        assert transition.trigger == "start"
        assert transition.timestamp == now

    def test_start_keeps_history(self):
        entry = HistoryEntry(start=1, end=2, duration=1)
        state, _ = start_session(AppState(history=(entry,)), 10, lookup("16:8"))
        assert state.history == (entry,)

    def test_double_start_overwrites_by_default(self):
        first, _ = start_session(AppState(), 1_000, lookup("16:8"))

        second, transition = start_session(first, 5_000, lookup("16:8"))

        assert second.session.start_time == 5_000
        assert second.session.target_end_time == 5_000 + 16 * HOUR_MS
        assert transition.from_state == SessionState.FASTING

    def test_double_start_rejected_when_restart_disabled(self):
        first, _ = start_session(AppState(), 1_000, lookup("16:8"))

        with pytest.raises(SessionAlreadyActive) as exc_info:
            start_session(first, 5_000, lookup("16:8"), allow_restart=False)

        assert exc_info.value.start_time == 1_000


class TestEndSession:
    """Test ending a fast."""

    def test_end_records_history(self):
        now = utc_ms(2024, 1, 1, 8, 0)
        state, _ = start_session(AppState(), now, lookup("16:8"))

        ended, transition = end_session(state, now + 16 * HOUR_MS)

        assert ended.state == SessionState.IDLE
        assert ended.session == IDLE_SESSION
        assert ended.history[0] == HistoryEntry(
            start=now, end=now + 16 * HOUR_MS, duration=16 * HOUR_MS
        )
        assert transition.entry == ended.history[0]
        assert transition.to_state == SessionState.IDLE

    def test_end_when_idle_is_noop(self):
        state = AppState()
        ended, transition = end_session(state, 1_000)
        assert ended is state
        assert transition is None

    def test_end_twice_only_records_once(self):
        state, _ = start_session(AppState(), 0, lookup("16:8"))
        once, _ = end_session(state, 1_000)
        twice, transition = end_session(once, 2_000)
        assert len(twice.history) == 1
        assert transition is None

    def test_end_before_start_clamps_duration(self):
        state, _ = start_session(AppState(), 10_000, lookup("16:8"))
        ended, _ = end_session(state, 5_000)
        assert ended.history[0].duration == 0

    def test_history_bounded(self):
        history = tuple(HistoryEntry(start=i, end=i + 1, duration=1) for i in range(200))
        state = AppState(history=history, session=Session(start_time=500, target_end_time=600))

        ended, _ = end_session(state, 900)

        assert len(ended.history) == 200
        assert ended.history[0].start == 500
        assert history[-1] not in ended.history

    def test_custom_history_limit(self):
        state = AppState(session=Session(start_time=0, target_end_time=1))
        ended, _ = end_session(state, 10, history_limit=1)
        assert len(ended.history) == 1


class TestResetSession:
    def test_reset_discards_session_without_history(self):
        state, _ = start_session(AppState(), 0, lookup("16:8"))
        reset, transition = reset_session(state)
        assert reset.session == IDLE_SESSION
        assert reset.history == ()
        assert transition.trigger == "reset"

    def test_reset_when_idle(self):
        reset, _ = reset_session(AppState())
        assert reset == AppState()


class TestChangePlan:
    """Test plan selection."""

    def test_idle_change_only_stores_plan(self):
        state, _ = change_plan(AppState(), lookup("18:6"))
        assert state.preset == "18:6"
        assert not state.is_fasting

    def test_fasting_change_retargets_from_start(self):
        start = utc_ms(2024, 1, 1, 8, 0)
        state, _ = start_session(AppState(), start, lookup("16:8"))

        changed, transition = change_plan(state, lookup("20:4"))

        assert changed.preset == "20:4"
        assert changed.session.start_time == start
        assert changed.session.target_end_time == start + 20 * HOUR_MS
        assert transition.to_state == SessionState.FASTING


class TestImportStart:
    """Test starting from free-text input."""

    def test_import_start_uses_parsed_time(self):
        state, transition = import_start(AppState(), "2024-01-01T08:00:00Z", lookup("16:8"))
        assert state.session.start_time == utc_ms(2024, 1, 1, 8, 0)
        assert state.session.target_end_time == utc_ms(2024, 1, 2, 0, 0)
        assert transition.trigger == "import_start"

    def test_import_start_invalid_text(self):
        with pytest.raises(InvalidTimestamp):
            import_start(AppState(), "not a date", lookup("16:8"))


class TestRepeatFast:
    """Test repeating a past fast."""

    def test_repeat_selects_synthetic_plan(self):
        entry = HistoryEntry(start=0, end=int(13.4 * HOUR_MS), duration=int(13.4 * HOUR_MS))

        state, transition = repeat_fast(AppState(history=(entry,)), entry, 1_000)

        assert state.preset == "13:11"
        assert state.session.start_time == 1_000
        assert state.session.target_end_time == 1_000 + 13 * HOUR_MS
        assert transition.trigger == "repeat"
        assert resolve(state.preset).fast_hours == 13

    def test_repeat_uses_synthetic_hours_not_registry(self):
        entry = HistoryEntry(start=0, end=0, duration=16 * HOUR_MS)
        state, _ = repeat_fast(AppState(), entry, 0)
        # "16:8" is also a registry id; the target still comes from the entry
        assert state.session.target_end_time == 16 * HOUR_MS


class TestClearHistory:
    def test_clear(self):
        entry = HistoryEntry(start=1, end=2, duration=1)
        assert clear_history(AppState(history=(entry,))).history == ()

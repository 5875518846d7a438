"""
Tests for sessions, the session manager and the game clock.
"""

import threading
import time

import pytest

from ..engine_core.action import Action, GameEvent
from ..session import GameClock, Session, SessionManager, SessionState
from .conftest import near_won_state


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()


@pytest.fixture
def manager():
    manager = SessionManager(clock_interval=0.01)
    yield manager
    for session_id in list(manager._sessions):
        manager.end_session(session_id)


@pytest.fixture
def slow_manager():
    """Clock ticks far apart, so elapsed time stays put during a test."""
    manager = SessionManager(clock_interval=60)
    yield manager
    for session_id in list(manager._sessions):
        manager.end_session(session_id)


class TestSessionManager:

    def test_create_session_deals_game(self, slow_manager):
        session = slow_manager.create_session()

        assert session.state == SessionState.ACTIVE
        assert session.game_state.stock.count == 24
        assert session.history.is_empty
        assert session.sound_enabled
        assert slow_manager.get_session(session.session_id) is session

    def test_seeded_sessions_match(self, slow_manager):
        first = slow_manager.create_session(seed=17)
        second = slow_manager.create_session(seed=17)
        assert first.game_state == second.game_state
        assert first.session_id != second.session_id

    def test_seeded_reset_deals_a_different_game(self, slow_manager):
        """The first deal and reset deals share one random source."""
        session = slow_manager.create_session(seed=17)
        opening = session.game_state
        session.dispatch(Action.reset())
        assert session.game_state != opening

    def test_get_unknown_session(self, slow_manager):
        assert slow_manager.get_session("missing") is None

    def test_end_session(self, slow_manager):
        session = slow_manager.create_session()

        assert slow_manager.end_session(session.session_id)
        assert slow_manager.get_session(session.session_id) is None
        assert session.state == SessionState.ABANDONED
        assert not slow_manager.end_session(session.session_id)

    def test_list_active_sessions(self, slow_manager):
        a = slow_manager.create_session()
        b = slow_manager.create_session()
        slow_manager.end_session(a.session_id)
        assert slow_manager.list_active_sessions() == [b.session_id]

    def test_cleanup_stale_sessions(self, slow_manager):
        old = slow_manager.create_session()
        fresh = slow_manager.create_session()
        old.created_at -= 7200

        assert slow_manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert slow_manager.get_session(old.session_id) is None
        assert slow_manager.get_session(fresh.session_id) is fresh


class TestSessionDispatch:

    def test_accepted_action_updates_session(self, slow_manager):
        session = slow_manager.create_session(seed=3)
        result = session.dispatch(Action.draw())

        assert result.success
        assert session.game_state is result.new_state
        assert session.history is result.history
        assert session.can_undo
        assert session.last_events == [GameEvent.DRAW]

    def test_rejected_action_keeps_state(self, slow_manager):
        session = slow_manager.create_session(seed=3)
        before = session.game_state

        result = session.dispatch(Action.undo())

        assert not result.success
        assert session.game_state is before
        assert not session.clock.running

    def test_win_marks_session_won(self, slow_manager):
        session = slow_manager.create_session()
        session.game_state = near_won_state("waste")

        result = session.dispatch(Action.waste_to_foundation())

        assert result.success
        assert session.state == SessionState.WON
        assert session.is_active()
        assert GameEvent.VICTORY in session.last_events
        assert not session.clock.running

    def test_dispatch_after_close_rejected(self, slow_manager):
        session = slow_manager.create_session()
        slow_manager.end_session(session.session_id)

        result = session.dispatch(Action.draw())
        assert not result.success
        assert result.reason == "Session has ended"

    def test_snapshot_pairs_state_with_history(self, slow_manager):
        session = slow_manager.create_session(seed=3)
        result = session.dispatch(Action.draw())

        state, history = session.snapshot()
        assert state is result.new_state
        assert history is result.history
        assert history.peek().move_count == state.move_count - 1

    def test_set_sound(self, slow_manager):
        session = slow_manager.create_session()
        session.set_sound(False)
        assert not session.sound_enabled

    def test_concurrent_draws_are_serialized(self, slow_manager):
        """Every draw lands exactly once."""
        session = slow_manager.create_session(seed=8)

        threads = [
            threading.Thread(target=lambda: [session.dispatch(Action.draw()) for _ in range(5)])
            for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.game_state.move_count == 20
        assert session.game_state.waste.count == 20


class TestSessionClock:

    def test_clock_idle_until_first_move(self, slow_manager):
        session = slow_manager.create_session()
        assert not session.clock.running

    def test_first_move_starts_clock(self, slow_manager):
        session = slow_manager.create_session()
        session.dispatch(Action.draw())
        assert session.clock.running

    def test_clock_counts_seconds(self, manager):
        session = manager.create_session()
        session.dispatch(Action.draw())
        assert wait_for(lambda: session.game_state.elapsed_seconds >= 3)

    def test_reset_stops_clock(self, slow_manager):
        session = slow_manager.create_session()
        session.dispatch(Action.draw())
        session.dispatch(Action.reset())

        assert not session.clock.running
        assert session.game_state.elapsed_seconds == 0

    def test_tick_stops_when_won(self, slow_manager):
        session = slow_manager.create_session()
        session.game_state = near_won_state("waste")
        session.dispatch(Action.draw())
        session.dispatch(Action.undo())
        epoch = session.clock_epoch
        session.dispatch(Action.waste_to_foundation())

        elapsed = session.game_state.elapsed_seconds
        assert session.tick(epoch) is False
        assert session.tick(session.clock_epoch) is False
        assert session.game_state.elapsed_seconds == elapsed

    def test_tick_advances_running_clock(self, slow_manager):
        session = slow_manager.create_session()
        session.dispatch(Action.draw())

        assert session.tick(session.clock_epoch) is True
        assert session.game_state.elapsed_seconds == 1

    def test_tick_before_first_move(self, slow_manager):
        """No clock run has started, so nothing is counted."""
        session = slow_manager.create_session()
        assert session.tick(session.clock_epoch) is False
        assert session.game_state.elapsed_seconds == 0

    def test_tick_after_close(self, slow_manager):
        session = slow_manager.create_session()
        session.dispatch(Action.draw())
        epoch = session.clock_epoch
        session.close()
        assert session.tick(epoch) is False

    def test_tick_from_previous_game_after_reset(self, slow_manager):
        """A tick that was already waiting on the lock never reaches the new deal."""
        session = slow_manager.create_session()
        session.dispatch(Action.draw())
        epoch = session.clock_epoch
        outcomes = []

        with session._lock:
            waiting_tick = threading.Thread(target=lambda: outcomes.append(session.tick(epoch)))
            waiting_tick.start()
            session.dispatch(Action.reset())
        waiting_tick.join(timeout=2)

        assert outcomes == [False]
        assert session.game_state.elapsed_seconds == 0
        assert session.game_state.move_count == 0
        assert not session.clock.running

    def test_stale_tick_after_clock_restarts(self, slow_manager):
        """Ticks carry the run they belong to; a restarted clock refuses old ones."""
        session = slow_manager.create_session()
        session.dispatch(Action.draw())
        old_epoch = session.clock_epoch

        session.dispatch(Action.reset())
        session.dispatch(Action.draw())

        assert session.clock.running
        assert session.tick(old_epoch) is False
        assert session.tick(session.clock_epoch) is True
        assert session.game_state.elapsed_seconds == 1


class TestGameClock:

    def test_no_second_ticker(self):
        clock = GameClock(on_tick=lambda: True, interval=60)
        try:
            assert clock.start()
            assert not clock.start()
            assert clock.running
        finally:
            clock.stop()
        assert not clock.running

    def test_restart_after_stop(self):
        clock = GameClock(on_tick=lambda: True, interval=60)
        clock.start()
        clock.stop()
        try:
            assert clock.start()
        finally:
            clock.stop()

    def test_stops_when_callback_returns_false(self):
        ticks = []

        def on_tick():
            ticks.append(1)
            return len(ticks) < 3

        clock = GameClock(on_tick=on_tick, interval=0.01)
        clock.start()
        assert wait_for(lambda: not clock.running)
        assert len(ticks) == 3

    def test_start_arguments_reach_callback(self):
        seen = []

        def on_tick(epoch):
            seen.append(epoch)
            return False

        clock = GameClock(on_tick=on_tick, interval=0.01)
        clock.start(7)
        assert wait_for(lambda: seen == [7])

    def test_stop_when_idle(self):
        GameClock(on_tick=lambda: True).stop()


def test_session_direct_construction():
    """A Session can be built around any state."""
    session = Session(session_id="s1", created_at=0.0, game_state=near_won_state())
    assert session.state == SessionState.ACTIVE
    assert session.clock.interval == 1.0

"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Player starts a session -> a fresh game is dealt (in-memory only)
2. During the game:
   - The presentation layer dispatches actions
   - The engine validates and applies them
   - The session clock counts elapsed seconds
3. Game won -> clock stops for good; reset deals a new game
4. Session ended -> ALL state deleted

PERSISTENCE RULES:
- NO database
- Game state and undo history are session-scoped only
- The sound preference is the only user setting, kept on the session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import threading
import time
import uuid

from ..engine_core.state import GameState
from ..engine_core.action import Action, ActionType, ActionResult, GameEvent
from ..engine_core.history import History
from ..engine_core.reducer import Reducer
from ..engine_core.deal import deal_new_game
from .clock import GameClock


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    WON = "won"  # All foundations complete
    ABANDONED = "abandoned"  # Session ended before the game was won


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The current game state and its undo history
    - The elapsed-time clock
    - The player's sound preference

    Every dispatch and clock tick is serialized by the session lock.
    """
    session_id: str
    created_at: float
    game_state: GameState
    history: History = field(default_factory=History)

    state: SessionState = SessionState.ACTIVE
    sound_enabled: bool = True
    seed: int | None = None
    rng: Any = None  # random.Random shared by the first deal and resets

    # Events from the last accepted action (for sound/visual collaborators)
    last_events: list[GameEvent] = field(default_factory=list)

    clock_interval: float = 1.0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.RLock()
        self._reducer = Reducer(rng=self.rng)
        self.clock = GameClock(on_tick=self.tick, interval=self.clock_interval)
        # Bumped on every clock stop; a tick from an older run is refused
        self.clock_epoch = 0
        self._clock_on = False

    def is_active(self) -> bool:
        """Check if session is still being played."""
        return self.state in {SessionState.ACTIVE, SessionState.WON}

    @property
    def can_undo(self) -> bool:
        return not self.history.is_empty

    def snapshot(self) -> tuple[GameState, History]:
        """Current game state and history, read together."""
        with self._lock:
            return self.game_state, self.history

    def dispatch(self, action: Action) -> ActionResult:
        """
        Apply one action to this session's game.

        The clock starts with the first action of a game and stops
        when the game is won or reset. All clock changes happen under
        the session lock, so no tick lands on a freshly dealt game.
        """
        with self._lock:
            if self.state == SessionState.ABANDONED:
                return ActionResult.rejected(self.game_state, self.history, "Session has ended")

            is_reset = action.action_type == ActionType.RESET_GAME
            if is_reset:
                self._stop_clock()

            result = self._reducer.apply(self.game_state, action, self.history)
            self.game_state = result.new_state
            self.history = result.history
            if not result.success:
                return result

            self.last_events = list(result.events)
            self.state = SessionState.WON if self.game_state.is_won else SessionState.ACTIVE

            if is_reset:
                logger.info("Session %s dealt a new game", self.session_id)
            elif self.state == SessionState.WON:
                self._stop_clock()
                logger.info(
                    "Session %s won in %d moves, %d seconds",
                    self.session_id, self.game_state.move_count, self.game_state.elapsed_seconds,
                )
            else:
                self._start_clock()
            return result

    def tick(self, epoch: int) -> bool:
        """
        Advance elapsed time by one second for the clock run `epoch`.

        Returns False once the clock should stop: the run was stopped,
        or the game is no longer in progress.
        """
        with self._lock:
            if not self._clock_on or epoch != self.clock_epoch:
                return False
            if self.state != SessionState.ACTIVE or self.game_state.is_won:
                return False
            self.game_state = self.game_state.with_elapsed_seconds(
                self.game_state.elapsed_seconds + 1
            )
            return True

    def set_sound(self, enabled: bool):
        with self._lock:
            self.sound_enabled = enabled

    def close(self):
        """Stop the clock and drop game data."""
        with self._lock:
            self._stop_clock()
            self.state = SessionState.ABANDONED
            self.history = History()
            self.last_events = []

    def _start_clock(self):
        # Caller holds the lock
        if self._clock_on and self.clock.running:
            return
        self._clock_on = True
        self.clock.start(self.clock_epoch)

    def _stop_clock(self):
        # Caller holds the lock
        self.clock_epoch += 1
        self._clock_on = False
        self.clock.stop()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a freshly dealt game
    - Track active sessions
    - Clean up stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, clock_interval: float = 1.0):
        self._sessions: dict[str, Session] = {}
        self.clock_interval = clock_interval

    def create_session(self, seed: int | None = None) -> Session:
        """
        Create a new game session.

        Args:
            seed: Optional seed for a reproducible deal (and reset deals)

        Returns:
            New Session with a dealt game
        """
        session_id = str(uuid.uuid4())
        rng = random.Random(seed) if seed is not None else None

        session = Session(
            session_id=session_id,
            created_at=time.time(),
            game_state=deal_new_game(rng=rng),
            seed=seed,
            rng=rng,
            clock_interval=self.clock_interval,
        )

        self._sessions[session_id] = session
        logger.info("Created session %s (seed=%s)", session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory. Returns False if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.close()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions older than max_age.

        Called periodically to free memory. Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

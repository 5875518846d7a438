"""
History - Bounded undo log of prior game states.

Oldest snapshots are evicted first. History is an immutable value:
push/pop/clear return new History objects.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import GameState


MAX_HISTORY = 20


@dataclass(frozen=True)
class History:
    """The most recent pre-move snapshots, oldest first."""
    snapshots: tuple[GameState, ...] = ()
    limit: int = MAX_HISTORY

    def __len__(self) -> int:
        return len(self.snapshots)

    @property
    def is_empty(self) -> bool:
        return len(self.snapshots) == 0

    def peek(self) -> GameState | None:
        """The snapshot undo would restore, if any."""
        return self.snapshots[-1] if self.snapshots else None

    def push(self, state: GameState) -> History:
        """Return new history with state recorded, evicting the oldest past the limit."""
        snapshots = self.snapshots + (state,)
        if len(snapshots) > self.limit:
            snapshots = snapshots[-self.limit:]
        return History(snapshots=snapshots, limit=self.limit)

    def pop(self) -> tuple[GameState | None, History]:
        """Return (most recent snapshot, new history)."""
        if not self.snapshots:
            return None, self
        return self.snapshots[-1], History(snapshots=self.snapshots[:-1], limit=self.limit)

    def clear(self) -> History:
        return History(limit=self.limit)

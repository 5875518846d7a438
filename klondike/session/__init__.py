"""
Session Module - Manages ephemeral game sessions.

A session represents one player's table:
- Created when the player starts a game
- Holds the current game state and undo history
- Runs the elapsed-time clock
- Destroyed when the player leaves

Sessions are EPHEMERAL:
- No persistence to database
- Reset deals a new game inside the same session
"""

from .manager import SessionManager, Session, SessionState
from .clock import GameClock

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameClock",
]

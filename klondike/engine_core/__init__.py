"""
Engine Core - Deterministic Klondike state management.

The engine is the runtime that:
1. Builds, shuffles and deals a deck
2. Manages immutable GameState snapshots
3. Checks move legality
4. Applies actions via the reducer
5. Keeps a bounded undo history
"""

from .state import Card, Color, GameState, Pile, Suit
from .action import Action, ActionType, ActionResult, GameEvent
from .deck import build_deck, shuffle
from .deal import deal_new_game
from .history import History, MAX_HISTORY
from .rules import can_move_to_foundation, can_move_to_tableau, check_win, is_valid_run
from .reducer import Reducer, apply_action

__all__ = [
    "Card",
    "Color",
    "GameState",
    "Pile",
    "Suit",
    "Action",
    "ActionType",
    "ActionResult",
    "GameEvent",
    "build_deck",
    "shuffle",
    "deal_new_game",
    "History",
    "MAX_HISTORY",
    "can_move_to_foundation",
    "can_move_to_tableau",
    "check_win",
    "is_valid_run",
    "Reducer",
    "apply_action",
]

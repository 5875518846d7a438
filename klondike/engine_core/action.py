"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player moves (draw, waste/tableau/foundation moves)
2. Game control (reset, undo)

All state changes flow through actions. Actions carry only primitive
indices, never card references, so they can be serialized and replayed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """The closed set of actions the reducer accepts."""
    # Player moves
    DRAW_CARD = "draw_card"
    MOVE_WASTE_TO_FOUNDATION = "move_waste_to_foundation"
    MOVE_WASTE_TO_TABLEAU = "move_waste_to_tableau"
    MOVE_TABLEAU_TO_FOUNDATION = "move_tableau_to_foundation"
    MOVE_TABLEAU_TO_TABLEAU = "move_tableau_to_tableau"

    # Game control
    RESET_GAME = "reset_game"
    UNDO = "undo"


# Which index fields each action type carries
ACTION_FIELDS: dict[ActionType, tuple[str, ...]] = {
    ActionType.DRAW_CARD: (),
    ActionType.MOVE_WASTE_TO_FOUNDATION: (),
    ActionType.MOVE_WASTE_TO_TABLEAU: ("to_col",),
    ActionType.MOVE_TABLEAU_TO_FOUNDATION: ("from_col",),
    ActionType.MOVE_TABLEAU_TO_TABLEAU: ("from_col", "to_col", "card_index"),
    ActionType.RESET_GAME: (),
    ActionType.UNDO: (),
}


class GameEvent(Enum):
    """Semantic events for sound and visual collaborators."""
    DRAW = "draw"
    SHUFFLE = "shuffle"  # Waste recycled into stock
    DROP = "drop"
    FLIP = "flip"
    VICTORY = "victory"
    UNDO = "undo"
    DEAL = "deal"


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    - Serializable via to_dict / from_dict
    """
    action_type: ActionType
    from_col: int | None = None
    to_col: int | None = None
    card_index: int | None = None

    @classmethod
    def draw(cls) -> Action:
        """Factory for drawing from the stock (or recycling the waste)."""
        return cls(action_type=ActionType.DRAW_CARD)

    @classmethod
    def waste_to_foundation(cls) -> Action:
        return cls(action_type=ActionType.MOVE_WASTE_TO_FOUNDATION)

    @classmethod
    def waste_to_tableau(cls, to_col: int) -> Action:
        return cls(action_type=ActionType.MOVE_WASTE_TO_TABLEAU, to_col=to_col)

    @classmethod
    def tableau_to_foundation(cls, from_col: int) -> Action:
        return cls(action_type=ActionType.MOVE_TABLEAU_TO_FOUNDATION, from_col=from_col)

    @classmethod
    def tableau_to_tableau(cls, from_col: int, to_col: int, card_index: int) -> Action:
        """Factory for moving the run starting at card_index to another column."""
        return cls(
            action_type=ActionType.MOVE_TABLEAU_TO_TABLEAU,
            from_col=from_col,
            to_col=to_col,
            card_index=card_index,
        )

    @classmethod
    def reset(cls) -> Action:
        return cls(action_type=ActionType.RESET_GAME)

    @classmethod
    def undo(cls) -> Action:
        return cls(action_type=ActionType.UNDO)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict: {"type": ..., <index fields>}."""
        data: dict[str, Any] = {"type": self.action_type.value}
        for name in ACTION_FIELDS[self.action_type]:
            data[name] = getattr(self, name)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        """
        Parse a serialized action.

        Raises ValueError for unknown types or missing/non-integer indices.
        """
        try:
            action_type = ActionType(data["type"])
        except KeyError:
            raise ValueError("Action is missing 'type'")
        except ValueError:
            raise ValueError(f"Unknown action type: {data['type']}")

        params: dict[str, int] = {}
        for name in ACTION_FIELDS[action_type]:
            value = data.get(name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{action_type.value} requires integer '{name}'")
            params[name] = value

        return cls(action_type=action_type, **params)

    def describe(self) -> str:
        """Human-readable description, 1-based columns."""
        def one_based(index: int | None) -> str:
            return "?" if index is None else str(index + 1)

        t = self.action_type
        if t == ActionType.MOVE_WASTE_TO_TABLEAU:
            return f"waste to column {one_based(self.to_col)}"
        if t == ActionType.MOVE_TABLEAU_TO_FOUNDATION:
            return f"column {one_based(self.from_col)} to foundation"
        if t == ActionType.MOVE_TABLEAU_TO_TABLEAU:
            return (
                f"column {one_based(self.from_col)} (card {one_based(self.card_index)}) "
                f"to column {one_based(self.to_col)}"
            )
        return t.value.replace("_", " ")


@dataclass
class ActionResult:
    """
    Result of applying an action.

    new_state and history are always populated. When the action is
    rejected they are the very objects that were passed in, so callers
    can detect rejection by identity as well as by `success`.
    """
    success: bool
    new_state: Any  # GameState
    history: Any  # History
    reason: str | None = None

    # For sound / visual collaborators
    events: list[GameEvent] = field(default_factory=list)
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes

    @classmethod
    def rejected(cls, state: Any, history: Any, reason: str) -> ActionResult:
        """Create a no-op result carrying the unchanged state."""
        return cls(success=False, new_state=state, history=history, reason=reason)

    @classmethod
    def accepted(
        cls,
        state: Any,
        history: Any,
        events: list[GameEvent] | None = None,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            history=history,
            events=events or [],
            state_changes=changes or [],
        )

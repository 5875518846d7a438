"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action, history) -> ActionResult
- Validates before applying; a rejected action is a no-op that hands
  back the very same state and history objects, never an exception
- Every accepted move records the pre-move state in history,
  increments the move count and re-checks for a win
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
import logging

from .state import GameState, Pile, NUM_COLUMNS
from .action import Action, ActionType, ActionResult, GameEvent
from .history import History
from .rules import can_move_to_foundation, can_move_to_tableau, is_valid_run
from .deal import deal_new_game


logger = logging.getLogger(__name__)

Handler = Callable[[GameState, Action, History], ActionResult]


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState and History.
    rng is only used when dealing a new game on reset.
    """
    rng: Any = None

    def apply(
        self,
        state: GameState,
        action: Action,
        history: History | None = None,
    ) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state and history, or the
        unchanged ones if the action was rejected.
        """
        if history is None:
            history = History()

        handler = self._get_handler(action.action_type)
        result = handler(state, action, history)
        if not result.success:
            logger.debug("Rejected %s: %s", action.describe(), result.reason)
        return result

    def _get_handler(self, action_type: ActionType) -> Handler:
        """Get the handler function for an action type."""
        return self.handlers()[action_type]

    def handlers(self) -> dict[ActionType, Handler]:
        """One handler per action type."""
        return {
            ActionType.DRAW_CARD: self._handle_draw,
            ActionType.MOVE_WASTE_TO_FOUNDATION: self._handle_waste_to_foundation,
            ActionType.MOVE_WASTE_TO_TABLEAU: self._handle_waste_to_tableau,
            ActionType.MOVE_TABLEAU_TO_FOUNDATION: self._handle_tableau_to_foundation,
            ActionType.MOVE_TABLEAU_TO_TABLEAU: self._handle_tableau_to_tableau,
            ActionType.RESET_GAME: self._handle_reset,
            ActionType.UNDO: self._handle_undo,
        }

    def _moved(
        self,
        before: GameState,
        after: GameState,
        history: History,
        events: list[GameEvent],
        change: str,
    ) -> ActionResult:
        """Bookkeeping shared by every accepted move."""
        new_state = after._copy_with(move_count=before.move_count + 1)
        if new_state.is_won and not before.is_won:
            events = events + [GameEvent.VICTORY]
        return ActionResult.accepted(
            new_state,
            history.push(before),
            events=events,
            changes=[change],
        )

    # =========================================================================
    # Game control
    # =========================================================================

    def _handle_reset(self, state: GameState, action: Action, history: History) -> ActionResult:
        """Discard the current game and its history; deal a fresh one."""
        return ActionResult.accepted(
            deal_new_game(rng=self.rng),
            history.clear(),
            events=[GameEvent.DEAL],
            changes=["Dealt a new game"],
        )

    def _handle_undo(self, state: GameState, action: Action, history: History) -> ActionResult:
        """Restore the most recent snapshot. Not a move; pushes nothing."""
        previous, new_history = history.pop()
        if previous is None:
            return ActionResult.rejected(state, history, "Nothing to undo")
        return ActionResult.accepted(
            previous,
            new_history,
            events=[GameEvent.UNDO],
            changes=["Undid last move"],
        )

    # =========================================================================
    # Moves
    # =========================================================================

    def _handle_draw(self, state: GameState, action: Action, history: History) -> ActionResult:
        """Draw one card to the waste, or turn the waste over into the stock."""
        if state.stock.is_empty:
            after = state._copy_with(stock=state.waste.reversed_face_down(), waste=Pile())
            return self._moved(
                state, after, history,
                [GameEvent.SHUFFLE], "Turned the waste over into the stock",
            )

        card, new_stock = state.stock.pop()
        card = card.turned_up()
        after = state._copy_with(stock=new_stock, waste=state.waste.push(card))
        return self._moved(state, after, history, [GameEvent.DRAW], f"Drew {card}")

    def _handle_waste_to_foundation(
        self, state: GameState, action: Action, history: History
    ) -> ActionResult:
        card = state.waste.top_card
        if card is None:
            return ActionResult.rejected(state, history, "Waste is empty")
        foundation = state.foundation_for(card.suit)
        if not can_move_to_foundation(card, foundation):
            return ActionResult.rejected(state, history, f"{card} cannot go to the foundation")

        _, new_waste = state.waste.pop()
        after = state._copy_with(waste=new_waste).with_foundation(card.suit, foundation.push(card))
        return self._moved(
            state, after, history,
            [GameEvent.DROP], f"Moved {card} from waste to foundation",
        )

    def _handle_waste_to_tableau(
        self, state: GameState, action: Action, history: History
    ) -> ActionResult:
        to_col = action.to_col
        if not self._valid_column(to_col):
            return ActionResult.rejected(state, history, f"Invalid column: {to_col}")
        card = state.waste.top_card
        if card is None:
            return ActionResult.rejected(state, history, "Waste is empty")
        target = state.column(to_col)
        if not can_move_to_tableau(card, target):
            return ActionResult.rejected(state, history, f"{card} cannot go on column {to_col + 1}")

        _, new_waste = state.waste.pop()
        after = state._copy_with(waste=new_waste).with_column(to_col, target.push(card))
        return self._moved(
            state, after, history,
            [GameEvent.DROP], f"Moved {card} from waste to column {to_col + 1}",
        )

    def _handle_tableau_to_foundation(
        self, state: GameState, action: Action, history: History
    ) -> ActionResult:
        from_col = action.from_col
        if not self._valid_column(from_col):
            return ActionResult.rejected(state, history, f"Invalid column: {from_col}")
        card, remaining = state.column(from_col).pop()
        if card is None:
            return ActionResult.rejected(state, history, f"Column {from_col + 1} is empty")
        if not card.face_up:
            return ActionResult.rejected(state, history, f"{card} is face-down")
        foundation = state.foundation_for(card.suit)
        if not can_move_to_foundation(card, foundation):
            return ActionResult.rejected(state, history, f"{card} cannot go to the foundation")

        flipped, remaining = remaining.flip_top_up()
        after = state.with_column(from_col, remaining).with_foundation(
            card.suit, foundation.push(card)
        )
        events = [GameEvent.DROP, GameEvent.FLIP] if flipped else [GameEvent.DROP]
        return self._moved(
            state, after, history,
            events, f"Moved {card} from column {from_col + 1} to foundation",
        )

    def _handle_tableau_to_tableau(
        self, state: GameState, action: Action, history: History
    ) -> ActionResult:
        from_col, to_col, card_index = action.from_col, action.to_col, action.card_index
        if not self._valid_column(from_col) or not self._valid_column(to_col):
            return ActionResult.rejected(state, history, f"Invalid columns: {from_col}, {to_col}")
        if from_col == to_col:
            return ActionResult.rejected(state, history, "Source and destination are the same column")

        source = state.column(from_col)
        if card_index is None or not 0 <= card_index < source.count:
            return ActionResult.rejected(
                state, history, f"No card at index {card_index} in column {from_col + 1}"
            )

        remaining, run = source.split(card_index)
        # Source cards must be a face-up run; the predicate only checks the target
        if not is_valid_run(run):
            return ActionResult.rejected(
                state, history, f"Cards from index {card_index} are not a face-up run"
            )
        target = state.column(to_col)
        if not can_move_to_tableau(run[0], target):
            return ActionResult.rejected(state, history, f"{run[0]} cannot go on column {to_col + 1}")

        flipped, remaining = remaining.flip_top_up()
        after = state.with_column(from_col, remaining).with_column(to_col, target.extend(run))
        events = [GameEvent.DROP, GameEvent.FLIP] if flipped else [GameEvent.DROP]
        return self._moved(
            state, after, history,
            events, f"Moved {len(run)} card(s) from column {from_col + 1} to column {to_col + 1}",
        )

    def _valid_column(self, index: int | None) -> bool:
        return index is not None and 0 <= index < NUM_COLUMNS


def apply_action(
    state: GameState,
    action: Action,
    history: History | None = None,
    rng: Any = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng)
    return reducer.apply(state, action, history)

"""
Hint Prompts - Prompts for the text-generation hint advisor.

The model only ever sees a plain-text summary of the visible board:
top of the waste, the top card of each foundation and the face-up
cards in each tableau column. Its answer is shown to the player as-is
and never parsed back into game state.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..engine_core.state import GameState, Suit


@dataclass
class BoardSummary:
    """Visible board, reduced to strings."""
    waste_top: str
    foundation: list[str]
    tableau: list[str]

    def as_text(self) -> str:
        return (
            f"Waste Pile top: {self.waste_top}\n"
            f"Foundations: {', '.join(self.foundation)}\n"
            f"Tableau: {'; '.join(self.tableau)}"
        )


class HintPrompts:
    """Collection of prompts for the hint advisor."""

    @staticmethod
    def board_summary(state: GameState) -> BoardSummary:
        """Summarize the parts of the board a player can see."""
        waste_top = state.waste.top_card
        foundation = []
        for suit in Suit:
            top = state.foundation_for(suit).top_card
            foundation.append(f"{suit.value}: {top.label if top else '0'}")

        tableau = []
        for i, column in enumerate(state.tableau):
            if column.is_empty:
                shown = "Empty"
            else:
                shown = ", ".join(str(card) for card in column.face_up_cards())
            tableau.append(f"Col {i + 1}: {shown}")

        return BoardSummary(
            waste_top=str(waste_top) if waste_top else "Empty",
            foundation=foundation,
            tableau=tableau,
        )

    @staticmethod
    def advice(summary: BoardSummary) -> str:
        """Prompt asking for the next move or some encouragement."""
        return f"""You are a helpful Solitaire assistant for a senior player. Here is the current game state:
{summary.as_text()}

Please suggest the best next move or give a friendly piece of encouragement. Keep the tone warm, patient, and easy to understand. Max 2 sentences."""

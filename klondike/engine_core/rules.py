"""
Move Legality Rules - Pure predicates over cards and piles.

No side effects. The reducer calls these before every mutation.
"""

from __future__ import annotations
from typing import Mapping, Sequence

from .state import ACE, KING, CARDS_PER_SUIT, Card, Pile, Suit


def can_move_to_foundation(card: Card, pile: Pile) -> bool:
    """
    A card may land on a foundation pile if the pile is empty and the
    card is an Ace, or if it continues the pile's suit one rank higher.
    """
    top = pile.top_card
    if top is None:
        return card.rank == ACE
    return card.suit == top.suit and card.rank == top.rank + 1


def can_move_to_tableau(card: Card, column: Pile) -> bool:
    """
    A card may land on a tableau column if the column is empty and the
    card is a King, or if the column's top card is face-up, of the
    opposite color and exactly one rank higher.

    Whether the moving card itself is face-up is not checked here.
    """
    top = column.top_card
    if top is None:
        return card.rank == KING
    return top.face_up and card.color != top.color and card.rank == top.rank - 1


def is_valid_run(cards: Sequence[Card]) -> bool:
    """True if cards are all face-up, descending by one, alternating colors."""
    if not cards:
        return False
    if not all(card.face_up for card in cards):
        return False
    for lower, upper in zip(cards, cards[1:]):
        if upper.rank != lower.rank - 1 or upper.color == lower.color:
            return False
    return True


def check_win(foundation: Mapping[Suit, Pile]) -> bool:
    """True iff every one of the four foundation piles holds 13 cards."""
    return all(
        suit in foundation and foundation[suit].count == CARDS_PER_SUIT
        for suit in Suit
    )

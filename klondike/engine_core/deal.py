"""
Deal - Lays out a shuffled deck into the opening Klondike position.

Setup steps:
1. Build and shuffle a full deck
2. Deal the tableau in rounds: round i gives one card to each column j >= i,
   and the card a column receives in its own round is turned face-up
3. The remaining 24 cards become the face-down stock
4. Waste and foundations start empty
"""

from __future__ import annotations
from typing import Any

from .deck import build_deck, shuffle
from .state import GameState, Pile, Suit, NUM_COLUMNS


def deal_new_game(rng: Any = None) -> GameState:
    """
    Deal a fresh game.

    Args:
        rng: Optional random.Random for reproducible deals

    Returns:
        GameState with 28 cards on the tableau and 24 in the stock
    """
    deck = shuffle(build_deck(rng=rng), rng=rng)

    columns: list[list] = [[] for _ in range(NUM_COLUMNS)]
    next_card = 0
    for round_idx in range(NUM_COLUMNS):
        for col_idx in range(round_idx, NUM_COLUMNS):
            card = deck[next_card]
            next_card += 1
            if round_idx == col_idx:
                card = card.turned_up()
            columns[col_idx].append(card)

    stock = Pile(cards=tuple(card.turned_down() for card in deck[next_card:]))

    return GameState(
        stock=stock,
        waste=Pile(),
        foundation={suit: Pile() for suit in Suit},
        tableau=tuple(Pile(cards=tuple(column)) for column in columns),
        move_count=0,
        elapsed_seconds=0,
    )

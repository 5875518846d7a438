"""
Pytest fixtures for Klondike tests.
"""

from __future__ import annotations
import random

import pytest

from ..engine_core.state import Card, GameState, Pile, Suit, NUM_COLUMNS
from ..engine_core.deal import deal_new_game
from ..engine_core.history import History


def card(suit: Suit, rank: int, face_up: bool = True) -> Card:
    """Build a test card with a readable id."""
    return Card(card_id=f"{suit.value}-{rank}-test", suit=suit, rank=rank, face_up=face_up)


def make_state(
    stock: list[Card] | None = None,
    waste: list[Card] | None = None,
    foundation: dict[Suit, list[Card]] | None = None,
    tableau: list[list[Card]] | None = None,
    move_count: int = 0,
    elapsed_seconds: int = 0,
) -> GameState:
    """Build a partial board; missing piles are empty."""
    columns = [list(column) for column in (tableau or [])]
    columns += [[] for _ in range(NUM_COLUMNS - len(columns))]
    foundation = foundation or {}
    return GameState(
        stock=Pile(cards=tuple(stock or [])),
        waste=Pile(cards=tuple(waste or [])),
        foundation={suit: Pile(cards=tuple(foundation.get(suit, []))) for suit in Suit},
        tableau=tuple(Pile(cards=tuple(column)) for column in columns),
        move_count=move_count,
        elapsed_seconds=elapsed_seconds,
    )


def full_suit(suit: Suit, up_to: int = 13) -> list[Card]:
    return [card(suit, rank) for rank in range(1, up_to + 1)]


def near_won_state(last_card_in: str = "waste") -> GameState:
    """51 cards on the foundations; the King of spades is in the waste or column 1."""
    foundation = {
        Suit.HEARTS: full_suit(Suit.HEARTS),
        Suit.DIAMONDS: full_suit(Suit.DIAMONDS),
        Suit.CLUBS: full_suit(Suit.CLUBS),
        Suit.SPADES: full_suit(Suit.SPADES, up_to=12),
    }
    king = card(Suit.SPADES, 13)
    if last_card_in == "waste":
        return make_state(waste=[king], foundation=foundation, move_count=140)
    return make_state(tableau=[[king]], foundation=foundation, move_count=140)


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def dealt_state(rng: random.Random) -> GameState:
    """A freshly dealt, seeded game."""
    return deal_new_game(rng=rng)


@pytest.fixture
def empty_history() -> History:
    return History()


@pytest.fixture
def run_state() -> GameState:
    """
    Column 1: 2♦ (down), 9♠ 8♥ 7♣ (up) - a three-card run over a hidden card
    Column 2: 10♥ (up)
    Column 3: K♣ (down), 4♠ (up)
    Column 4: empty
    """
    return make_state(
        stock=[card(Suit.CLUBS, 2, face_up=False), card(Suit.HEARTS, 3, face_up=False)],
        waste=[card(Suit.HEARTS, 1)],
        tableau=[
            [
                card(Suit.DIAMONDS, 2, face_up=False),
                card(Suit.SPADES, 9),
                card(Suit.HEARTS, 8),
                card(Suit.CLUBS, 7),
            ],
            [card(Suit.HEARTS, 10)],
            [card(Suit.CLUBS, 13, face_up=False), card(Suit.SPADES, 4)],
            [],
        ],
    )

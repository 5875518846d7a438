"""
Game State - Cards, piles and the complete Klondike snapshot.

Design principles:
- Immutable: every structure is a frozen dataclass over tuples,
  all mutations return new objects
- Snapshots held in undo history can never be aliased by later moves
- Serializable: plain values only, no references between piles
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator


NUM_COLUMNS = 7
CARDS_PER_SUIT = 13

ACE = 1
JACK = 11
QUEEN = 12
KING = 13

RANK_LABELS = {
    1: "A",
    2: "2",
    3: "3",
    4: "4",
    5: "5",
    6: "6",
    7: "7",
    8: "8",
    9: "9",
    10: "10",
    11: "J",
    12: "Q",
    13: "K",
}


class Color(Enum):
    """Card colors."""
    RED = "red"
    BLACK = "black"


class Suit(Enum):
    """The four suits, in foundation order."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def color(self) -> Color:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


@dataclass(frozen=True)
class Card:
    """
    A single playing card and its orientation.

    card_id is unique within one deal. Turning a card over returns
    a new Card; nothing is changed in place.
    """
    card_id: str
    suit: Suit
    rank: int
    face_up: bool = False

    @property
    def color(self) -> Color:
        return self.suit.color

    @property
    def label(self) -> str:
        return RANK_LABELS[self.rank]

    def turned_up(self) -> Card:
        """Return this card face-up."""
        if self.face_up:
            return self
        return replace(self, face_up=True)

    def turned_down(self) -> Card:
        """Return this card face-down."""
        if not self.face_up:
            return self
        return replace(self, face_up=False)

    def short_name(self) -> str:
        return f"{self.label}{self.suit.symbol}"

    def __str__(self) -> str:
        return f"{self.label} of {self.suit.value}"


@dataclass(frozen=True)
class Pile:
    """
    An ordered stack of cards. The top of the pile is the end of the tuple.

    Used for stock, waste, each foundation and each tableau column.
    """
    cards: tuple[Card, ...] = ()

    @property
    def top_card(self) -> Card | None:
        """Get the top card of the pile."""
        return self.cards[-1] if self.cards else None

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    @property
    def count(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index):
        return self.cards[index]

    def push(self, card: Card) -> Pile:
        """Return new pile with card added on top."""
        return Pile(cards=self.cards + (card,))

    def extend(self, cards: tuple[Card, ...]) -> Pile:
        """Return new pile with cards added on top, order preserved."""
        return Pile(cards=self.cards + tuple(cards))

    def pop(self) -> tuple[Card | None, Pile]:
        """Return (removed top card, new pile)."""
        if not self.cards:
            return None, self
        return self.cards[-1], Pile(cards=self.cards[:-1])

    def split(self, index: int) -> tuple[Pile, tuple[Card, ...]]:
        """Return (pile truncated to index, cards from index to top)."""
        return Pile(cards=self.cards[:index]), self.cards[index:]

    def flip_top_up(self) -> tuple[bool, Pile]:
        """
        Turn the top card face-up if it is face-down.

        Returns (whether a card was flipped, new pile).
        """
        top = self.top_card
        if top is None or top.face_up:
            return False, self
        return True, Pile(cards=self.cards[:-1] + (top.turned_up(),))

    def reversed_face_down(self) -> Pile:
        """Return the pile turned over: order reversed, every card face-down."""
        return Pile(cards=tuple(card.turned_down() for card in reversed(self.cards)))

    def face_up_cards(self) -> tuple[Card, ...]:
        return tuple(card for card in self.cards if card.face_up)


SUIT_ORDER: tuple[Suit, ...] = tuple(Suit)


def _empty_foundation() -> tuple[Pile, ...]:
    return tuple(Pile() for _ in SUIT_ORDER)


def _empty_tableau() -> tuple[Pile, ...]:
    return tuple(Pile() for _ in range(NUM_COLUMNS))


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer, which always builds
    a new GameState.

    foundation holds one pile per suit in SUIT_ORDER. A mapping of
    suit to pile is accepted on construction and stored as a tuple,
    so a state never holds a mutable container.
    """
    stock: Pile = field(default_factory=Pile)
    waste: Pile = field(default_factory=Pile)
    foundation: tuple[Pile, ...] = field(default_factory=_empty_foundation)
    tableau: tuple[Pile, ...] = field(default_factory=_empty_tableau)

    move_count: int = 0
    elapsed_seconds: int = 0

    def __post_init__(self):
        if isinstance(self.foundation, Mapping):
            piles = tuple(self.foundation.get(suit, Pile()) for suit in SUIT_ORDER)
            object.__setattr__(self, "foundation", piles)
        elif not isinstance(self.foundation, tuple):
            object.__setattr__(self, "foundation", tuple(self.foundation))
        if not isinstance(self.tableau, tuple):
            object.__setattr__(self, "tableau", tuple(self.tableau))

    @property
    def is_won(self) -> bool:
        """True once all four foundations are complete."""
        from .rules import check_win
        return check_win(self.foundation_map())

    def foundation_for(self, suit: Suit) -> Pile:
        return self.foundation[SUIT_ORDER.index(suit)]

    def foundation_map(self) -> dict[Suit, Pile]:
        """A fresh suit -> pile dict; changing it does not touch the state."""
        return dict(zip(SUIT_ORDER, self.foundation))

    def column(self, index: int) -> Pile:
        return self.tableau[index]

    def all_cards(self) -> list[Card]:
        """Every card in the game, in stock/waste/foundation/tableau order."""
        cards = list(self.stock.cards) + list(self.waste.cards)
        for pile in self.foundation:
            cards.extend(pile.cards)
        for column in self.tableau:
            cards.extend(column.cards)
        return cards

    def with_foundation(self, suit: Suit, pile: Pile) -> GameState:
        """Return new state with one foundation pile replaced."""
        new_foundation = list(self.foundation)
        new_foundation[SUIT_ORDER.index(suit)] = pile
        return self._copy_with(foundation=tuple(new_foundation))

    def with_column(self, index: int, pile: Pile) -> GameState:
        """Return new state with one tableau column replaced."""
        new_tableau = list(self.tableau)
        new_tableau[index] = pile
        return self._copy_with(tableau=tuple(new_tableau))

    def with_elapsed_seconds(self, seconds: int) -> GameState:
        return self._copy_with(elapsed_seconds=seconds)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            stock=kwargs.get("stock", self.stock),
            waste=kwargs.get("waste", self.waste),
            foundation=kwargs.get("foundation", self.foundation),
            tableau=kwargs.get("tableau", self.tableau),
            move_count=kwargs.get("move_count", self.move_count),
            elapsed_seconds=kwargs.get("elapsed_seconds", self.elapsed_seconds),
        )

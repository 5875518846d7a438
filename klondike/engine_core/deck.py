"""
Deck - Builds and shuffles the 52-card deck.
"""

from __future__ import annotations
import random
from typing import Any, Sequence

from .state import Card, Suit, RANK_LABELS


def make_deal_tag(rng: Any = None) -> str:
    """Random tag that keeps card ids distinct across concurrent deals."""
    source = rng or random
    return f"{source.getrandbits(24):06x}"


def build_deck(tag: str | None = None, rng: Any = None) -> list[Card]:
    """
    Build a full deck: one face-down card per (suit, rank).

    Card ids are "{suit}-{rank}-{tag}", unique within the deck.
    """
    if tag is None:
        tag = make_deal_tag(rng)
    return [
        Card(card_id=f"{suit.value}-{rank}-{tag}", suit=suit, rank=rank)
        for suit in Suit
        for rank in RANK_LABELS
    ]


def shuffle(deck: Sequence[Card], rng: Any = None) -> list[Card]:
    """
    Return a uniformly shuffled copy of the deck (Fisher-Yates).

    For each index i from last down to 1, swap element i with a
    uniformly chosen element at index j <= i. The input is not modified.

    rng is any random.Random-compatible source; defaults to the
    module-level generator.
    """
    source = rng or random
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled

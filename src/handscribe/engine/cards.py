"""Cards, card slots, and the pool of cards already used in a hand.

A card slot is any place in the hand that can hold a card: a hero hole
card, a board card on some round, a card drawn in a draw round, or a card
in a villain's hand. The pool is always rebuilt from the live hand; nothing
is cached between edits.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from handscribe.engine.history import HandHistory

__all__ = ["RANKS", "SUITS", "Card", "UNSET", "SlotKind", "CardSlot", "CardPool"]

RANKS = "AKQJT98765432"
SUITS = "shdc"


@dataclass(frozen=True)
class Card:
    """A playing card. Either field may be empty while the card is being picked."""

    rank: str = ""
    suit: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.rank) and bool(self.suit)

    @property
    def key(self) -> tuple[str, str]:
        return (self.suit, self.rank)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


UNSET = Card()


class SlotKind(Enum):
    HERO = "hero"
    BOARD = "board"
    DRAWN = "drawn"
    VILLAIN = "villain"


@dataclass(frozen=True)
class CardSlot:
    """Address of one card in a hand.

    ``owner`` is the round index for board and drawn cards, the villain
    index for villain cards, and unused for hero cards.
    """

    kind: SlotKind
    index: int
    owner: int = 0

    @classmethod
    def hero(cls, index: int) -> CardSlot:
        return cls(SlotKind.HERO, index)

    @classmethod
    def board(cls, round_index: int, index: int) -> CardSlot:
        return cls(SlotKind.BOARD, index, round_index)

    @classmethod
    def drawn(cls, round_index: int, index: int) -> CardSlot:
        return cls(SlotKind.DRAWN, index, round_index)

    @classmethod
    def villain(cls, villain_index: int, index: int) -> CardSlot:
        return cls(SlotKind.VILLAIN, index, villain_index)


def iter_slots(history: HandHistory) -> Iterator[tuple[CardSlot, Card]]:
    """Yield every card slot in the hand with its current card.

    Hero discards are references to hero cards, so they are not slots.
    """
    for i, card in enumerate(history.hero_cards):
        yield CardSlot.hero(i), card
    for r, rnd in enumerate(history.rounds):
        for i, card in enumerate(rnd.community_cards):
            yield CardSlot.board(r, i), card
        for i, card in enumerate(rnd.drawn_cards):
            yield CardSlot.drawn(r, i), card
    for v, villain in enumerate(history.villains):
        for i, card in enumerate(villain.cards):
            yield CardSlot.villain(v, i), card


class CardPool:
    """Availability view over the fully-set cards of one hand version."""

    def __init__(self, assigned: dict[CardSlot, Card]) -> None:
        self._assigned = {slot: card for slot, card in assigned.items() if card.is_set}

    @classmethod
    def from_history(cls, history: HandHistory) -> CardPool:
        return cls(dict(iter_slots(history)))

    def used_cards(self, excluding: CardSlot | None = None) -> set[tuple[str, str]]:
        """Return ``(suit, rank)`` pairs in use, ignoring the slot being edited."""
        return {card.key for slot, card in self._assigned.items() if slot != excluding}

    def is_available(self, suit: str, rank: str, excluding: CardSlot | None = None) -> bool:
        """True if no other slot holds ``(suit, rank)``.

        A pair with an empty field is always available; it cannot collide.
        """
        if not suit or not rank:
            return True
        return (suit, rank) not in self.used_cards(excluding)

    def holder_of(self, suit: str, rank: str) -> CardSlot | None:
        for slot, card in self._assigned.items():
            if card.key == (suit, rank):
                return slot
        return None

    def available_ranks(self, suit: str, excluding: CardSlot | None = None) -> list[str]:
        return [r for r in RANKS if self.is_available(suit, r, excluding)]

    def available_suits(self, rank: str, excluding: CardSlot | None = None) -> list[str]:
        return [s for s in SUITS if self.is_available(s, rank, excluding)]

"""Card shorthand parsing.

Players type cards as rank then suit (``As``, ``Td``, ``9c``). Ranks are
case-insensitive on input and stored upper-case; suits are stored
lower-case. Anything else is rejected with a message meant to be shown
next to the input.
"""

import re
from dataclasses import dataclass

from handscribe.engine.cards import RANKS, SUITS, Card

__all__ = ["CardParseResult", "parse_card", "parse_cards", "INVALID_CARD_MESSAGE"]

INVALID_CARD_MESSAGE = "Invalid card input. Please enter valid cards (e.g. As, Kh)."

_CARD_RE = re.compile(rf"^([{RANKS}])([{SUITS}])$", re.IGNORECASE)
_SEPARATORS_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class CardParseResult:
    """Result of parsing card shorthand."""

    success: bool
    card: Card | None = None
    cards: tuple[Card, ...] = ()
    error: str | None = None


def parse_card(text: str) -> CardParseResult:
    """Parse a single card such as ``As``. An empty string is an unset card."""
    stripped = (text or "").strip()
    if not stripped:
        return CardParseResult(success=True, card=Card(), cards=(Card(),))
    match = _CARD_RE.match(stripped)
    if not match:
        return CardParseResult(success=False, error=INVALID_CARD_MESSAGE)
    card = Card(rank=match.group(1).upper(), suit=match.group(2).lower())
    return CardParseResult(success=True, card=card, cards=(card,))


def parse_cards(text: str) -> CardParseResult:
    """Parse several cards, either run together (``AsKh``) or separated."""
    stripped = _SEPARATORS_RE.sub("", text or "")
    if len(stripped) % 2:
        return CardParseResult(success=False, error=INVALID_CARD_MESSAGE)
    cards = []
    for i in range(0, len(stripped), 2):
        result = parse_card(stripped[i:i + 2])
        if not result.success:
            return result
        cards.append(result.card)
    return CardParseResult(success=True, cards=tuple(cards))

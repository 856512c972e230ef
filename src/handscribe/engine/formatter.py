"""Canonical text serialization of a hand.

Layout::

    SB: 1, BB: 2, Ante: 0, ES: 200
    Players: 6
    Hero: BTN, AsKh
    Preflop:
    UTG: f
    ...

    Flop:
    Qd7c2s (7)

    SB: c
    ...

Every round gets a header and one line per entry, followed by a blank
line. Action lines keep the space after the abbreviation even when there is
no amount. Board cards are followed by the pot carried in from the previous
round. Draw rounds list each seat's change count and the hero's discards
and draws before the actions. Villain hands come last.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from handscribe.engine.actions import Action
from handscribe.engine.cards import Card

if TYPE_CHECKING:
    from handscribe.engine.history import HandHistory, Round

__all__ = ["format_hand_history", "format_action", "format_cards"]


def format_cards(cards: Iterable[Card], sep: str = "") -> str:
    return sep.join(str(card) for card in cards)


def format_action(action: Action) -> str:
    abbr = action.kind.abbreviation if action.kind is not None else ""
    amount = action.amount if action.amount else ""
    return f"{action.position}: {abbr} {amount}"


def _format_round(history: HandHistory, index: int, rnd: Round) -> list[str]:
    lines = [f"{rnd.name}:"]
    if any(card.is_set for card in rnd.community_cards):
        carried = history.rounds[index - 1].pot if index > 0 else rnd.pot
        lines.append(f"{format_cards(rnd.community_cards)} ({carried})")
        lines.append("")
    if rnd.is_draw:
        for position, count in rnd.player_changes:
            lines.append(f"{position}: {count}")
        lines.append(f"Hero discards: {format_cards(history.discarded_cards(index), ', ')}")
        lines.append(f"Hero draws: {format_cards(rnd.drawn_cards, ', ')}")
    lines.extend(format_action(action) for action in rnd.actions)
    lines.append("")
    return lines


def format_hand_history(history: HandHistory) -> str:
    """Render the hand as the canonical text block."""
    lines = [
        f"SB: {history.small_blind}, BB: {history.big_blind}, "
        f"Ante: {history.ante}, ES: {history.effective_stack}",
        f"Players: {history.table_size}",
        f"Hero: {history.hero_position or ''}, {format_cards(history.hero_cards)}",
    ]
    for index, rnd in enumerate(history.rounds):
        lines.extend(_format_round(history, index, rnd))
    # a villain whose seat was removed by a resize has no line until reseated
    for villain in history.villains:
        if villain.position is None:
            continue
        lines.append(f"Villain {villain.position}: {format_cards(villain.cards)}")
    return "\n".join(lines) + "\n"

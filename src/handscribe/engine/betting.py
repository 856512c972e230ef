"""Betting round engine.

Operations here work on one round's tuple of ``Action`` entries and return a
new tuple; nothing is mutated in place. ``resolve_round`` is the single pass
that derives everything an entry depends on (legal kinds, call amounts,
fixed-limit bet sizes) from the entries before it, and is re-run for the
whole round after every edit.

Fixed-limit sizing:
- The bet unit is the small bet (= big blind) for the first two rounds and
  the big bet (= 2x big blind) afterwards.
- A bet or raise goes to ``max(current_bet + unit, unit)``.
- The number of raises is counted but never capped.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from handscribe.engine.actions import Action, ActionKind
from handscribe.engine.base import ActionIndexError, IllegalActionError
from handscribe.engine.legality import legal_actions, validate_kind
from handscribe.engine.positions import acting_order
from handscribe.engine.pot import active_after

__all__ = [
    "ResolvedRound",
    "bet_unit",
    "carried_in_bet",
    "fixed_limit_amount",
    "resolve_round",
    "append_next_actors",
    "set_action",
    "set_amount",
    "delete_action",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRound:
    """A round after the derivation pass."""

    actions: tuple[Action, ...]
    current_bet: int  # total-to-call at the end of the round
    bet_count: int  # bets and raises made; informational only


# ------------------------------------------------------------------
# Sizing
# ------------------------------------------------------------------

def bet_unit(big_blind: int, round_index: int) -> int:
    """Small bet for the first two rounds, big bet after that."""
    if round_index <= 1:
        return big_blind
    return big_blind * 2


def fixed_limit_amount(current_bet: int, big_blind: int, round_index: int) -> int:
    """Total a fixed-limit bet or raise goes to."""
    unit = bet_unit(big_blind, round_index)
    return max(current_bet + unit, unit)


def carried_in_bet(big_blind: int, round_index: int) -> int:
    """Total-to-call when a round opens: the big blind pre-flop, else nothing."""
    return big_blind if round_index == 0 else 0


# ------------------------------------------------------------------
# Derivation pass
# ------------------------------------------------------------------

def resolve_round(
    actions: Sequence[Action],
    round_index: int,
    big_blind: int,
    fixed_limit: bool,
) -> ResolvedRound:
    """Recompute legal kinds and amounts for every entry in the round.

    - Call pays the nearest earlier bet or raise, else the carried-in bet.
    - Fixed-limit bets and raises are sized from the running current bet.
    - No-limit bets and raises keep the amount the player entered.
    - Fold, Check, All In and blank entries carry no amount.
    """
    opening = carried_in_bet(big_blind, round_index)
    current_bet = opening
    last_aggressive: int | None = None
    bet_count = 0
    resolved: list[Action] = []

    for action in actions:
        legal = tuple(legal_actions(resolved, action.position, round_index == 0))
        kind = action.kind

        if kind is ActionKind.CALL:
            amount = last_aggressive if last_aggressive is not None else opening
        elif kind is not None and kind.is_aggressive:
            if fixed_limit:
                amount = fixed_limit_amount(current_bet, big_blind, round_index)
            else:
                amount = action.amount
            current_bet = amount
            last_aggressive = amount
            bet_count += 1
        else:
            amount = 0

        resolved.append(replace(action, amount=amount, legal=legal))

    return ResolvedRound(tuple(resolved), current_bet, bet_count)


# ------------------------------------------------------------------
# Edits
# ------------------------------------------------------------------

def _check_index(actions: Sequence[Action], index: int) -> None:
    if not 0 <= index < len(actions):
        raise ActionIndexError(f"Action index {index} out of range (round has {len(actions)})")


def append_next_actors(
    actions: Sequence[Action],
    hand_actions_so_far: Sequence[Action],
    table_size: int,
    round_index: int,
) -> tuple[Action, ...]:
    """Append one blank entry per seat still in the hand, in acting order.

    ``hand_actions_so_far`` is every entry of the hand up to and including
    this round. Existing entries are kept, so calling this again adds
    another orbit after betting is reopened.
    """
    still_in = set(active_after(hand_actions_so_far))
    order = acting_order(table_size, round_index)
    new_entries = tuple(Action(pos) for pos in order if pos in still_in)
    logger.debug(
        "Round %d: appending %d actors (%s)",
        round_index, len(new_entries), ", ".join(a.position for a in new_entries),
    )
    return tuple(actions) + new_entries


def set_action(
    actions: Sequence[Action],
    index: int,
    kind: ActionKind | None,
) -> tuple[Action, ...]:
    """Set the kind of entry ``index``. Amounts are filled in by ``resolve_round``.

    ``kind`` must be one of the entry's legal kinds; None blanks the entry.
    """
    _check_index(actions, index)
    target = actions[index]
    result = validate_kind(target, kind)
    if not result.legal:
        raise IllegalActionError(result.reason)
    updated = list(actions)
    # Entered amounts restart at 0 on every kind edit
    updated[index] = target.with_kind(kind, amount=0)
    return tuple(updated)


def set_amount(
    actions: Sequence[Action],
    index: int,
    amount: int,
    fixed_limit: bool,
) -> tuple[Action, ...]:
    """Enter the total for a no-limit bet or raise."""
    _check_index(actions, index)
    target = actions[index]
    if fixed_limit:
        raise IllegalActionError("Bet sizes are fixed in limit games")
    if target.kind is None or not target.kind.is_aggressive:
        raise IllegalActionError(
            f"Only a bet or raise takes an amount ({target.position} has "
            f"{target.kind.value if target.kind else 'no action'})"
        )
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise IllegalActionError(f"Amount must be a non-negative integer, got {amount!r}")
    updated = list(actions)
    updated[index] = replace(target, amount=amount)
    return tuple(updated)


def delete_action(actions: Sequence[Action], index: int) -> tuple[Action, ...]:
    _check_index(actions, index)
    return tuple(a for i, a in enumerate(actions) if i != index)

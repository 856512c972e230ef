"""Pot accumulation across rounds and active-seat tracking.

Each round's pot is the running total through the end of that round. The
first round is seeded with the forced bets (blinds and antes); later rounds
start from the previous round's pot.

All In entries carry no amount and contribute nothing, so pots after an
all-in understate the real total. Side pots are not modelled.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from handscribe.engine.actions import Action, ActionKind
from handscribe.engine.variants import AntePolicy

__all__ = ["seed_pot", "round_pot", "pot_chain", "active_after"]


def seed_pot(
    small_blind: int,
    big_blind: int,
    ante: int,
    table_size: int,
    ante_policy: AntePolicy = AntePolicy.PER_SEAT,
) -> int:
    """Forced chips credited before anyone acts."""
    if ante_policy is AntePolicy.PER_SEAT:
        ante_total = ante * table_size
    else:
        ante_total = ante
    return small_blind + big_blind + ante_total


def round_pot(
    actions: Sequence[Action],
    small_blind: int,
    big_blind: int,
    ante: int,
    table_size: int,
    previous_pot: int = 0,
    ante_policy: AntePolicy = AntePolicy.PER_SEAT,
) -> int:
    """Return the pot through the end of a round.

    A ``previous_pot`` of 0 marks the first round: the pot is seeded with the
    blinds and antes, and a call from SB or BB only adds the part above the
    blind that seat already posted.
    """
    first_round = previous_pot == 0
    if first_round:
        total = seed_pot(small_blind, big_blind, ante, table_size, ante_policy)
    else:
        total = previous_pot

    for action in actions:
        if action.kind is None:
            continue
        if action.kind.is_aggressive:
            total += action.amount
        elif action.kind is ActionKind.CALL:
            if first_round and action.position == "SB":
                total += action.amount - small_blind
            elif first_round and action.position == "BB":
                total += action.amount - big_blind
            else:
                total += action.amount
    return total


def pot_chain(
    rounds_actions: Iterable[Sequence[Action]],
    small_blind: int,
    big_blind: int,
    ante: int,
    table_size: int,
    ante_policy: AntePolicy = AntePolicy.PER_SEAT,
) -> list[int]:
    """Cumulative pot for each round, each chained from the one before."""
    pots: list[int] = []
    previous = 0
    for actions in rounds_actions:
        previous = round_pot(
            actions, small_blind, big_blind, ante, table_size, previous, ante_policy
        )
        pots.append(previous)
    return pots


def active_after(actions: Iterable[Action]) -> list[str]:
    """Seats still in the hand, in the order they first appear.

    A seat is active if it has an entry and its latest entry is not a fold.
    Blank entries count as being dealt in.
    """
    last_kind: dict[str, ActionKind | None] = {}
    for action in actions:
        last_kind[action.position] = action.kind
    return [pos for pos, kind in last_kind.items() if kind is not ActionKind.FOLD]

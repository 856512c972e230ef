"""Which actions a seat may take next in a round.

Legality depends on the whole round up to the seat's entry, not just the
entry before it, so callers recompute it for every entry after any edit.
"""

from __future__ import annotations

from collections.abc import Sequence

from handscribe.engine.actions import Action, ActionKind
from handscribe.engine.base import ValidationResult

__all__ = ["legal_actions", "legal_actions_for_round", "faces_bet", "validate_kind"]

_FACING_BET = (ActionKind.FOLD, ActionKind.CALL, ActionKind.RAISE, ActionKind.ALL_IN)
_UNOPENED = (ActionKind.FOLD, ActionKind.CHECK, ActionKind.BET, ActionKind.ALL_IN)


def faces_bet(
    prior_actions: Sequence[Action],
    position: str,
    is_first_decision_point: bool = False,
) -> bool:
    """True if another seat has bet or raised earlier in the round.

    On the first round the blinds are standing bets even though they are
    never recorded as actions.
    """
    if is_first_decision_point:
        return True
    return any(
        a.position != position and a.kind is not None and a.kind.is_aggressive
        for a in prior_actions
    )


def legal_actions(
    prior_actions: Sequence[Action],
    position: str,
    is_first_decision_point: bool = False,
) -> list[ActionKind]:
    """Return the legal kinds for ``position``, Fold first and All In last."""
    if faces_bet(prior_actions, position, is_first_decision_point):
        return list(_FACING_BET)
    return list(_UNOPENED)


def legal_actions_for_round(
    actions: Sequence[Action],
    is_first_round: bool,
) -> list[tuple[ActionKind, ...]]:
    """Legal kinds for every entry, each computed from the entries before it."""
    return [
        tuple(legal_actions(actions[:i], action.position, is_first_round))
        for i, action in enumerate(actions)
    ]


def validate_kind(action: Action, kind: ActionKind | None) -> ValidationResult:
    """Check ``kind`` against the entry's derived legal set. None always passes."""
    if kind is None or not action.legal or kind in action.legal:
        return ValidationResult(legal=True)
    allowed = ", ".join(k.value for k in action.legal)
    return ValidationResult(
        legal=False,
        reason=f"{kind.value} is not legal for {action.position} here (allowed: {allowed})",
    )

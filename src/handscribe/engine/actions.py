"""Action records for one betting round."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

__all__ = ["ActionKind", "Action", "ABBREVIATIONS"]


class ActionKind(Enum):
    """What a seat did. Values match the labels shown to the player."""

    FOLD = "Fold"
    CHECK = "Check"
    CALL = "Call"
    BET = "Bet"
    RAISE = "Raise"
    ALL_IN = "All In"

    @property
    def is_aggressive(self) -> bool:
        return self in (ActionKind.BET, ActionKind.RAISE)

    @property
    def abbreviation(self) -> str:
        return ABBREVIATIONS[self]

    @classmethod
    def parse(cls, value: str | ActionKind) -> ActionKind:
        """Accept an ActionKind, its label, its member name, or its abbreviation.

        Hyphens and underscores match spaces, so ``All-In`` and ``all_in``
        both mean All In.
        """
        if isinstance(value, ActionKind):
            return value
        text = value.strip()
        words = text.replace("-", " ").replace("_", " ").lower()
        for kind in cls:
            if words == kind.value.lower():
                return kind
        # "c" is ambiguous between Check and Call, so only unambiguous ones
        for kind, abbr in ABBREVIATIONS.items():
            if abbr != "c" and text.lower() == abbr.lower():
                return kind
        raise ValueError(f"Unknown action: {value!r}")


ABBREVIATIONS: dict[ActionKind, str] = {
    ActionKind.FOLD: "f",
    ActionKind.CHECK: "c",
    ActionKind.CALL: "c",
    ActionKind.BET: "b",
    ActionKind.RAISE: "r",
    ActionKind.ALL_IN: "AI",
}


@dataclass(frozen=True)
class Action:
    """One seat's entry in a round.

    ``kind`` is None for a blank entry still waiting for input. ``amount``
    is the total chips the seat has put in for this action, not the raise
    increment; it is 0 for Fold, Check, All In and blanks. ``legal`` is the
    derived set of kinds this seat may choose given the entries before it.
    """

    position: str
    kind: ActionKind | None = None
    amount: int = 0
    legal: tuple[ActionKind, ...] = ()

    @property
    def is_blank(self) -> bool:
        return self.kind is None

    @property
    def is_legal(self) -> bool:
        return self.kind is None or self.kind in self.legal

    def with_kind(self, kind: ActionKind | None, amount: int = 0) -> Action:
        return replace(self, kind=kind, amount=amount)

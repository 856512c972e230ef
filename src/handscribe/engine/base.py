"""Shared result records and the error hierarchy for hand edits.

Every edit to a hand either returns a new ``HandHistory`` or raises one of
the errors below before anything is changed. Soft outcomes that leave the
hand usable (a malformed card string, no seat left for a villain) come back
as an ``EditResult`` with a message instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from handscribe.engine.history import HandHistory


@dataclass(frozen=True)
class ValidationResult:
    """Result of checking an input against the hand's rules."""

    legal: bool
    reason: str | None = None


@dataclass(frozen=True)
class EditResult:
    """A new hand version plus an optional advisory for the caller."""

    history: HandHistory
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.message is None


class HandHistoryError(ValueError):
    """Base class for rejected edits."""


class InvalidTableSizeError(HandHistoryError):
    pass


class InvalidPositionError(HandHistoryError):
    pass


class InvalidStakeError(HandHistoryError):
    pass


class InvalidCardError(HandHistoryError):
    pass


class DuplicateCardError(HandHistoryError):
    """Raised when a card is already held by another slot."""


class IllegalActionError(HandHistoryError):
    pass


class ActionIndexError(HandHistoryError, IndexError):
    """Raised for a round or action index outside the hand."""

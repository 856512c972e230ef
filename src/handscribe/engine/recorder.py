"""HandRecorder — one editing session over a hand.

The recorder holds the current ``HandHistory`` version and every earlier
one. Each edit builds a new version from the current one; a rejected edit
raises and leaves the current version in place. ``undo`` steps back one
version.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from handscribe.engine.actions import ActionKind
from handscribe.engine.base import EditResult
from handscribe.engine.cards import CardSlot
from handscribe.engine.history import HandHistory, new_hand
from handscribe.engine.variants import GameFamily

logger = logging.getLogger(__name__)


class HandRecorder:
    """Edit session with a version log.

    Parameters
    ----------
    game : GameFamily
        The game being recorded.
    table_size : int
        Seats at the table, 2-9.
    small_blind, big_blind, ante, effective_stack : int
        Initial stakes. See ``HandHistory.set_stakes`` for defaults.
    """

    def __init__(
        self,
        game: GameFamily,
        table_size: int = 6,
        small_blind: int = 0,
        big_blind: int | None = None,
        ante: int | None = None,
        effective_stack: int = 0,
    ) -> None:
        self._versions: list[HandHistory] = [
            new_hand(
                game,
                table_size=table_size,
                small_blind=small_blind,
                big_blind=big_blind,
                ante=ante,
                effective_stack=effective_stack,
            )
        ]
        self._messages: list[str] = []

    @property
    def history(self) -> HandHistory:
        return self._versions[-1]

    @property
    def versions(self) -> list[HandHistory]:
        return list(self._versions)

    @property
    def messages(self) -> list[str]:
        """Advisories returned by edits so far, oldest first."""
        return list(self._messages)

    def apply(self, edit: Callable[[HandHistory], HandHistory | EditResult]) -> str | None:
        """Run ``edit`` on the current version and keep the result.

        Returns the advisory message if the edit produced one.
        """
        result = edit(self.history)
        message = None
        if isinstance(result, EditResult):
            message = result.message
            result = result.history
        if message:
            self._messages.append(message)
        if result is not self.history:
            self._versions.append(result)
        return message

    def undo(self) -> HandHistory:
        """Drop the latest version. The initial version is never dropped."""
        if len(self._versions) > 1:
            self._versions.pop()
        else:
            logger.debug("Nothing to undo")
        return self.history

    def text(self) -> str:
        return self.history.to_text()

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_stakes(self, **stakes: int) -> None:
        self.apply(lambda h: h.set_stakes(**stakes))

    def set_ante_to_big_blind(self) -> None:
        self.apply(lambda h: h.set_ante_to_big_blind())

    def set_table_size(self, table_size: int) -> None:
        self.apply(lambda h: h.set_table_size(table_size))

    def set_hero_position(self, position: str | None) -> None:
        self.apply(lambda h: h.set_hero_position(position))

    def append_next_actors(self, round_index: int) -> None:
        self.apply(lambda h: h.append_next_actors(round_index))

    def set_action(
        self,
        round_index: int,
        index: int,
        kind: ActionKind | str | None,
        amount: int | None = None,
    ) -> None:
        self.apply(lambda h: h.set_action(round_index, index, kind, amount))

    def set_amount(self, round_index: int, index: int, amount: int) -> None:
        self.apply(lambda h: h.set_amount(round_index, index, amount))

    def delete_action(self, round_index: int, index: int) -> None:
        self.apply(lambda h: h.delete_action(round_index, index))

    def set_card(self, slot: CardSlot, rank: str = "", suit: str = "") -> None:
        self.apply(lambda h: h.set_card(slot, rank, suit))

    def set_card_text(self, slot: CardSlot, text: str) -> str | None:
        return self.apply(lambda h: h.set_card_text(slot, text))

    def add_villain_hand(self) -> str | None:
        return self.apply(lambda h: h.add_villain_hand())

    def set_villain_position(self, villain_index: int, position: str) -> None:
        self.apply(lambda h: h.set_villain_position(villain_index, position))

    def remove_villain_hand(self, villain_index: int) -> None:
        self.apply(lambda h: h.remove_villain_hand(villain_index))

    def toggle_discard(self, round_index: int, card_index: int, discarded: bool) -> None:
        self.apply(lambda h: h.toggle_discard(round_index, card_index, discarded))

    def add_drawn_card(self, round_index: int) -> None:
        self.apply(lambda h: h.add_drawn_card(round_index))

    def set_player_changes(self, round_index: int, position: str, count: int) -> None:
        self.apply(lambda h: h.set_player_changes(round_index, position, count))

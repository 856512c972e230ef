"""HandHistory — the composed record of one reconstructed hand.

A ``HandHistory`` is an immutable value. Every edit method returns a new,
fully recomputed version and leaves the one it was called on untouched, so
older versions can be kept for undo. Invalid edits raise a
``HandHistoryError`` before anything is built.

Derived state (legal kinds, call amounts, fixed-limit sizes, round pots,
the current bet) is never edited directly; ``recompute`` rebuilds all of it
from the entered data after every change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from handscribe.core.parser import parse_card
from handscribe.engine import betting
from handscribe.engine.actions import Action, ActionKind
from handscribe.engine.base import (
    ActionIndexError,
    DuplicateCardError,
    EditResult,
    HandHistoryError,
    InvalidCardError,
    InvalidPositionError,
    InvalidStakeError,
)
from handscribe.engine.cards import RANKS, SUITS, UNSET, Card, CardPool, CardSlot, SlotKind
from handscribe.engine.positions import active_positions, validate_table_size
from handscribe.engine.pot import active_after, round_pot
from handscribe.engine.variants import GameFamily, RoundLayout

__all__ = ["Round", "VillainHand", "HandHistory", "new_hand", "recompute"]

logger = logging.getLogger(__name__)

NO_VILLAIN_SEAT = "No active non-hero positions remain for a villain hand."

DEFAULT_TABLE_SIZE = 6


@dataclass(frozen=True)
class Round:
    """One betting street or draw round.

    ``discards`` are indices into the hero's hand; ``player_changes`` maps a
    seat to how many cards it exchanged (draw rounds only).
    """

    name: str
    actions: tuple[Action, ...] = ()
    community_cards: tuple[Card, ...] = ()
    is_draw: bool = False
    discards: tuple[int, ...] = ()
    drawn_cards: tuple[Card, ...] = ()
    player_changes: tuple[tuple[str, int], ...] = ()
    # derived
    pot: int = 0
    current_bet: int = 0
    bet_count: int = 0

    @property
    def changes(self) -> dict[str, int]:
        return dict(self.player_changes)

    @classmethod
    def from_layout(cls, layout: RoundLayout) -> Round:
        return cls(
            name=layout.name,
            community_cards=(UNSET,) * layout.board_cards,
            is_draw=layout.is_draw,
        )


@dataclass(frozen=True)
class VillainHand:
    position: str | None
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class HandHistory:
    game: GameFamily
    small_blind: int = 0
    big_blind: int = 0
    ante: int = 0
    effective_stack: int = 0
    table_size: int = DEFAULT_TABLE_SIZE
    hero_position: str | None = None
    hero_cards: tuple[Card, ...] = ()
    rounds: tuple[Round, ...] = ()
    villains: tuple[VillainHand, ...] = field(default_factory=tuple)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def positions(self) -> list[str]:
        return active_positions(self.table_size)

    @property
    def current_bet(self) -> int:
        """Total-to-call carried out of the latest round that has entries."""
        for rnd in reversed(self.rounds):
            if rnd.actions:
                return rnd.current_bet
        return betting.carried_in_bet(self.big_blind, 0)

    @property
    def pot(self) -> int:
        return self.rounds[-1].pot if self.rounds else 0

    @property
    def small_bet(self) -> int:
        return self.big_blind

    @property
    def big_bet(self) -> int:
        return self.big_blind * 2

    def all_actions(self, through_round: int | None = None) -> list[Action]:
        rounds = self.rounds if through_round is None else self.rounds[: through_round + 1]
        return [a for rnd in rounds for a in rnd.actions]

    def active_seats(self, through_round: int | None = None) -> list[str]:
        """Seats that have not folded, in table order."""
        still_in = set(active_after(self.all_actions(through_round)))
        return [pos for pos in self.positions if pos in still_in]

    def available_villain_positions(self) -> list[str]:
        taken = {v.position for v in self.villains}
        return [
            pos for pos in self.active_seats()
            if pos != self.hero_position and pos not in taken
        ]

    def card_pool(self) -> CardPool:
        return CardPool.from_history(self)

    def is_card_available(self, suit: str, rank: str, excluding: CardSlot | None = None) -> bool:
        return self.card_pool().is_available(suit, rank, excluding)

    def card_at(self, slot: CardSlot) -> Card:
        return self._slot_cards(slot)[slot.index]

    def discarded_cards(self, round_index: int) -> list[Card]:
        return [self.hero_cards[i] for i in self._round(round_index).discards]

    def to_text(self) -> str:
        from handscribe.engine.formatter import format_hand_history

        return format_hand_history(self)

    # ------------------------------------------------------------------
    # Stakes and table
    # ------------------------------------------------------------------

    def set_stakes(
        self,
        small_blind: int | None = None,
        big_blind: int | None = None,
        ante: int | None = None,
        effective_stack: int | None = None,
    ) -> HandHistory:
        """Change any of the stakes. A lone small blind sets the big blind to twice it."""
        values = {
            "small_blind": small_blind,
            "big_blind": big_blind,
            "ante": ante,
            "effective_stack": effective_stack,
        }
        for name, value in values.items():
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int) or value < 0
            ):
                raise InvalidStakeError(f"{name} must be a non-negative integer, got {value!r}")

        changes = {k: v for k, v in values.items() if v is not None}
        if small_blind is not None and big_blind is None:
            changes["big_blind"] = small_blind * 2
        if ante is None and "big_blind" in changes:
            implied = self.game.ante_for(changes["big_blind"])
            if implied is not None:
                changes["ante"] = implied
        logger.debug("Stakes changed: %s", changes)
        return recompute(replace(self, **changes))

    def set_ante_to_big_blind(self) -> HandHistory:
        return recompute(replace(self, ante=self.big_blind))

    def set_table_size(self, table_size: int) -> HandHistory:
        """Resize the table.

        The first round is reseeded with one blank entry per seat, later rounds
        lose their entries, and hero or villain seats that no longer exist are
        cleared.
        """
        validate_table_size(table_size)
        positions = active_positions(table_size)
        rounds = [replace(rnd, actions=()) for rnd in self.rounds]
        rounds[0] = replace(rounds[0], actions=tuple(Action(pos) for pos in positions))
        rounds = [
            replace(rnd, player_changes=tuple((pos, 0) for pos in positions)) if rnd.is_draw else rnd
            for rnd in rounds
        ]
        hero = self.hero_position if self.hero_position in positions else None
        villains = tuple(
            v if v.position in positions else replace(v, position=None) for v in self.villains
        )
        logger.debug("Table size %d -> %d", self.table_size, table_size)
        return recompute(
            replace(
                self,
                table_size=table_size,
                hero_position=hero,
                rounds=tuple(rounds),
                villains=villains,
            )
        )

    def set_hero_position(self, position: str | None) -> HandHistory:
        if position is not None and position not in self.positions:
            raise InvalidPositionError(
                f"{position!r} is not a seat at a {self.table_size}-handed table"
            )
        return recompute(replace(self, hero_position=position))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def append_next_actors(self, round_index: int) -> HandHistory:
        rnd = self._round(round_index)
        actions = betting.append_next_actors(
            rnd.actions, self.all_actions(round_index), self.table_size, round_index
        )
        return self._with_actions(round_index, actions)

    def set_action(
        self,
        round_index: int,
        index: int,
        kind: ActionKind | str | None,
        amount: int | None = None,
    ) -> HandHistory:
        """Set an entry's kind, and for a no-limit bet or raise its amount."""
        if isinstance(kind, str):
            kind = ActionKind.parse(kind)
        actions = betting.set_action(self._round(round_index).actions, index, kind)
        history = self._with_actions(round_index, actions)
        if amount is not None:
            history = history.set_amount(round_index, index, amount)
        return history

    def set_amount(self, round_index: int, index: int, amount: int) -> HandHistory:
        actions = betting.set_amount(
            self._round(round_index).actions, index, amount, self.game.fixed_limit
        )
        return self._with_actions(round_index, actions)

    def delete_action(self, round_index: int, index: int) -> HandHistory:
        actions = betting.delete_action(self._round(round_index).actions, index)
        return self._with_actions(round_index, actions)

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def set_card(self, slot: CardSlot, rank: str = "", suit: str = "") -> HandHistory:
        """Put a card in a slot. Empty rank or suit leaves that field unset."""
        rank = rank.upper()
        suit = suit.lower()
        if rank and rank not in RANKS:
            raise InvalidCardError(f"Invalid rank {rank!r}; expected one of {RANKS}")
        if suit and suit not in SUITS:
            raise InvalidCardError(f"Invalid suit {suit!r}; expected one of {SUITS}")
        self._slot_cards(slot)  # validates the slot
        pool = self.card_pool()
        if not pool.is_available(suit, rank, excluding=slot):
            holder = pool.holder_of(suit, rank)
            raise DuplicateCardError(f"{rank}{suit} is already used ({holder.kind.value} card)")
        return self._with_card(slot, Card(rank=rank, suit=suit))

    def clear_card(self, slot: CardSlot) -> HandHistory:
        return self._with_card(slot, UNSET)

    def set_card_text(self, slot: CardSlot, text: str) -> EditResult:
        """Set a card from shorthand such as ``As``.

        Malformed or duplicate input clears the slot and returns a message
        instead of raising.
        """
        parsed = parse_card(text)
        if not parsed.success:
            logger.warning("Card input %r rejected: %s", text, parsed.error)
            return EditResult(self.clear_card(slot), parsed.error)
        try:
            return EditResult(self.set_card(slot, parsed.card.rank, parsed.card.suit))
        except DuplicateCardError as exc:
            logger.warning("Card input %r rejected: %s", text, exc)
            return EditResult(self.clear_card(slot), str(exc))

    # ------------------------------------------------------------------
    # Villains
    # ------------------------------------------------------------------

    def add_villain_hand(self) -> EditResult:
        available = self.available_villain_positions()
        if not available:
            logger.warning(NO_VILLAIN_SEAT)
            return EditResult(self, NO_VILLAIN_SEAT)
        villain = VillainHand(available[0], (UNSET,) * self.game.hand_size)
        return EditResult(recompute(replace(self, villains=self.villains + (villain,))))

    def set_villain_position(self, villain_index: int, position: str) -> HandHistory:
        self._villain(villain_index)
        current = self.villains[villain_index].position
        if position != current and position not in self.available_villain_positions():
            raise InvalidPositionError(f"{position!r} cannot hold a villain hand")
        villains = list(self.villains)
        villains[villain_index] = replace(villains[villain_index], position=position)
        return recompute(replace(self, villains=tuple(villains)))

    def remove_villain_hand(self, villain_index: int) -> HandHistory:
        self._villain(villain_index)
        villains = tuple(v for i, v in enumerate(self.villains) if i != villain_index)
        return recompute(replace(self, villains=villains))

    # ------------------------------------------------------------------
    # Draw rounds
    # ------------------------------------------------------------------

    def toggle_discard(self, round_index: int, card_index: int, discarded: bool) -> HandHistory:
        rnd = self._draw_round(round_index)
        if not 0 <= card_index < len(self.hero_cards):
            raise InvalidCardError(f"Hero has no card {card_index}")
        discards = set(rnd.discards)
        if discarded:
            discards.add(card_index)
        else:
            discards.discard(card_index)
        return self._with_round(round_index, replace(rnd, discards=tuple(sorted(discards))))

    def add_drawn_card(self, round_index: int) -> HandHistory:
        rnd = self._draw_round(round_index)
        return self._with_round(round_index, replace(rnd, drawn_cards=rnd.drawn_cards + (UNSET,)))

    def set_player_changes(self, round_index: int, position: str, count: int) -> HandHistory:
        rnd = self._draw_round(round_index)
        if position not in self.positions:
            raise InvalidPositionError(f"{position!r} is not at the table")
        if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= self.game.hand_size:
            raise HandHistoryError(
                f"Change count must be between 0 and {self.game.hand_size}, got {count!r}"
            )
        changes = rnd.changes
        changes[position] = count
        ordered = tuple((pos, changes.get(pos, 0)) for pos in self.positions)
        return self._with_round(round_index, replace(rnd, player_changes=ordered))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _round(self, round_index: int) -> Round:
        if not 0 <= round_index < len(self.rounds):
            raise ActionIndexError(f"Round {round_index} does not exist ({len(self.rounds)} rounds)")
        return self.rounds[round_index]

    def _draw_round(self, round_index: int) -> Round:
        rnd = self._round(round_index)
        if not rnd.is_draw:
            raise HandHistoryError(f"{rnd.name} is not a draw round")
        return rnd

    def _villain(self, villain_index: int) -> VillainHand:
        if not 0 <= villain_index < len(self.villains):
            raise ActionIndexError(f"Villain hand {villain_index} does not exist")
        return self.villains[villain_index]

    def _with_round(self, round_index: int, rnd: Round) -> HandHistory:
        rounds = list(self.rounds)
        rounds[round_index] = rnd
        return recompute(replace(self, rounds=tuple(rounds)))

    def _with_actions(self, round_index: int, actions: tuple[Action, ...]) -> HandHistory:
        return self._with_round(round_index, replace(self._round(round_index), actions=actions))

    def _slot_cards(self, slot: CardSlot) -> tuple[Card, ...]:
        if slot.kind is SlotKind.HERO:
            cards = self.hero_cards
        elif slot.kind is SlotKind.BOARD:
            cards = self._round(slot.owner).community_cards
        elif slot.kind is SlotKind.DRAWN:
            cards = self._round(slot.owner).drawn_cards
        else:
            cards = self._villain(slot.owner).cards
        if not 0 <= slot.index < len(cards):
            raise InvalidCardError(f"No card slot {slot.index} for {slot.kind.value}")
        return cards

    def _with_card(self, slot: CardSlot, card: Card) -> HandHistory:
        cards = list(self._slot_cards(slot))
        cards[slot.index] = card
        cards = tuple(cards)
        if slot.kind is SlotKind.HERO:
            return recompute(replace(self, hero_cards=cards))
        if slot.kind is SlotKind.VILLAIN:
            villains = list(self.villains)
            villains[slot.owner] = replace(villains[slot.owner], cards=cards)
            return recompute(replace(self, villains=tuple(villains)))
        rnd = self.rounds[slot.owner]
        if slot.kind is SlotKind.BOARD:
            rnd = replace(rnd, community_cards=cards)
        else:
            rnd = replace(rnd, drawn_cards=cards)
        return self._with_round(slot.owner, rnd)


def recompute(history: HandHistory) -> HandHistory:
    """Rebuild every derived field: legality, amounts, bet counts and the pot chain.

    Total over any hand the edit methods can produce; it never raises.
    """
    rounds: list[Round] = []
    previous_pot = 0
    for i, rnd in enumerate(history.rounds):
        resolved = betting.resolve_round(
            rnd.actions, i, history.big_blind, history.game.fixed_limit
        )
        pot = round_pot(
            resolved.actions,
            history.small_blind,
            history.big_blind,
            history.ante,
            history.table_size,
            previous_pot,
            history.game.ante_policy,
        )
        rounds.append(
            replace(
                rnd,
                actions=resolved.actions,
                pot=pot,
                current_bet=resolved.current_bet,
                bet_count=resolved.bet_count,
            )
        )
        previous_pot = pot
    return replace(history, rounds=tuple(rounds))


def new_hand(
    game: GameFamily,
    table_size: int = DEFAULT_TABLE_SIZE,
    small_blind: int = 0,
    big_blind: int | None = None,
    ante: int | None = None,
    effective_stack: int = 0,
) -> HandHistory:
    """Create an empty hand with the first round seeded for every seat.

    Stakes follow ``set_stakes``: an omitted big blind is twice the small
    blind, and an omitted ante follows the game's big-blind ratio if it has one.
    """
    validate_table_size(table_size)
    rounds = [Round.from_layout(layout) for layout in game.round_layouts]
    history = HandHistory(
        game=game,
        table_size=table_size,
        hero_cards=(UNSET,) * game.hand_size,
        rounds=tuple(rounds),
    )
    history = history.set_table_size(table_size)
    return history.set_stakes(
        small_blind=small_blind,
        big_blind=big_blind,
        ante=ante,
        effective_stack=effective_stack,
    )

"""Game families and the presets for each supported game.

Flop, draw and stud games share the same betting engine. A ``GameFamily``
describes only what differs: how many rounds there are, what cards each
round carries, the hero's hand size, the betting structure, and how the
ante is counted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

__all__ = [
    "GameKind",
    "AntePolicy",
    "RoundLayout",
    "GameFamily",
    "GAME_PRESETS",
    "get_game",
]


class GameKind(Enum):
    FLOP = "flop"
    DRAW = "draw"
    STUD = "stud"


class AntePolicy(Enum):
    """How the ante is credited to the first round's pot.

    PER_SEAT: every seat antes, so the seed adds ``ante * table_size``.
    FLAT: a single ante (e.g. a big-blind ante) adds ``ante`` once.
    """

    PER_SEAT = "per_seat"
    FLAT = "flat"


@dataclass(frozen=True)
class RoundLayout:
    """Static shape of one round."""

    name: str
    board_cards: int = 0
    is_draw: bool = False


_FLOP_ROUNDS = (
    RoundLayout("Preflop"),
    RoundLayout("Flop", board_cards=3),
    RoundLayout("Turn", board_cards=1),
    RoundLayout("River", board_cards=1),
)

_STUD_ROUNDS = tuple(
    RoundLayout(name)
    for name in ("3rd Street", "4th Street", "5th Street", "6th Street", "7th Street")
)


@dataclass(frozen=True)
class GameFamily:
    """Everything the engine needs to know about a game."""

    name: str
    kind: GameKind
    hand_size: int
    fixed_limit: bool
    draw_rounds: int = 0
    ante_policy: AntePolicy = AntePolicy.PER_SEAT
    ante_big_blind_ratio: float | None = None

    @property
    def round_layouts(self) -> tuple[RoundLayout, ...]:
        if self.kind is GameKind.FLOP:
            return _FLOP_ROUNDS
        if self.kind is GameKind.STUD:
            return _STUD_ROUNDS
        draws = tuple(
            RoundLayout(f"Draw {i + 1}", is_draw=True) for i in range(self.draw_rounds)
        )
        return (RoundLayout("Pre-Draw"),) + draws

    @property
    def round_names(self) -> list[str]:
        return [layout.name for layout in self.round_layouts]

    def ante_for(self, big_blind: int) -> int | None:
        """Ante implied by the big blind, or None when the ante is entered freely."""
        if self.ante_big_blind_ratio is None:
            return None
        return round(big_blind * self.ante_big_blind_ratio)

    def with_ante_policy(self, policy: AntePolicy) -> GameFamily:
        return replace(self, ante_policy=policy)


_PRESET_LIST = [
    GameFamily("Limit Texas Hold'em", GameKind.FLOP, hand_size=2, fixed_limit=True),
    GameFamily(
        "No Limit Texas Hold'em",
        GameKind.FLOP,
        hand_size=2,
        fixed_limit=False,
        ante_policy=AntePolicy.FLAT,
        ante_big_blind_ratio=1.0,
    ),
    GameFamily("Pot Limit Omaha", GameKind.FLOP, hand_size=4, fixed_limit=False),
    GameFamily(
        "Fixed Limit Omaha High Low Eight or Better",
        GameKind.FLOP,
        hand_size=4,
        fixed_limit=True,
    ),
    GameFamily("Limit 2-7 Triple Draw", GameKind.DRAW, hand_size=5, fixed_limit=True, draw_rounds=3),
    GameFamily("Limit Badugi", GameKind.DRAW, hand_size=4, fixed_limit=True, draw_rounds=3),
    GameFamily(
        "No Limit 2-7 Single Draw",
        GameKind.DRAW,
        hand_size=5,
        fixed_limit=False,
        draw_rounds=1,
        ante_big_blind_ratio=1.5,
    ),
    GameFamily("Razz", GameKind.STUD, hand_size=7, fixed_limit=True),
    GameFamily("7 Card Stud High", GameKind.STUD, hand_size=7, fixed_limit=True),
    GameFamily("Stud High Low Eight or Better", GameKind.STUD, hand_size=7, fixed_limit=True),
]

GAME_PRESETS: dict[str, GameFamily] = {game.name: game for game in _PRESET_LIST}


def get_game(name: str) -> GameFamily:
    """Look up a preset by name (case-insensitive)."""
    for game_name, game in GAME_PRESETS.items():
        if game_name.lower() == name.strip().lower():
            return game
    raise KeyError(f"Unknown game: {name!r}. Known games: {', '.join(GAME_PRESETS)}")

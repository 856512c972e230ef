"""Recorder configuration loader."""

import yaml
from dataclasses import dataclass, field, replace
from pathlib import Path

from handscribe.engine.variants import AntePolicy, GameFamily, get_game


@dataclass
class StakesConfig:
    small_blind: int = 0
    big_blind: int | None = None  # None = twice the small blind
    ante: int | None = None  # None = the game's default
    effective_stack: int = 0


@dataclass
class GameOverride:
    ante_policy: AntePolicy | None = None
    ante_big_blind_ratio: float | None = None


@dataclass
class RecorderConfig:
    default_game: str = "Limit Texas Hold'em"
    table_size: int = 6
    ante_policy: AntePolicy | None = None  # applies to every game unless overridden
    stakes: StakesConfig = field(default_factory=StakesConfig)
    games: dict[str, GameOverride] = field(default_factory=dict)

    def game(self, name: str | None = None) -> GameFamily:
        """Return the preset for ``name`` with configured overrides applied."""
        base = get_game(name or self.default_game)
        policy = self.ante_policy
        override = None
        for game_name, candidate in self.games.items():
            if game_name.lower() == base.name.lower():
                override = candidate
        if override and override.ante_policy is not None:
            policy = override.ante_policy
        game = base.with_ante_policy(policy) if policy is not None else base
        if override and override.ante_big_blind_ratio is not None:
            game = replace(game, ante_big_blind_ratio=override.ante_big_blind_ratio)
        return game


def _ante_policy(value: str | None) -> AntePolicy | None:
    if value is None:
        return None
    try:
        return AntePolicy(value)
    except ValueError:
        choices = ", ".join(p.value for p in AntePolicy)
        raise ValueError(f"Unknown ante_policy {value!r} (expected one of: {choices})") from None


def load_config(path: Path) -> RecorderConfig:
    """Load recorder config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    r = raw.get("recorder", {})
    s = raw.get("stakes", {})

    games = {}
    for name, g in (raw.get("games") or {}).items():
        get_game(name)  # reject typos early
        g = g or {}
        games[name] = GameOverride(
            ante_policy=_ante_policy(g.get("ante_policy")),
            ante_big_blind_ratio=g.get("ante_big_blind_ratio"),
        )

    return RecorderConfig(
        default_game=r.get("default_game", "Limit Texas Hold'em"),
        table_size=r.get("table_size", 6),
        ante_policy=_ante_policy(r.get("ante_policy")),
        stakes=StakesConfig(
            small_blind=s.get("small_blind", 0),
            big_blind=s.get("big_blind"),
            ante=s.get("ante"),
            effective_stack=s.get("effective_stack", 0),
        ),
        games=games,
    )

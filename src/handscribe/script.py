"""Hand scripts — a YAML description of a hand, replayed through the recorder.

A script names the game, stakes and table, the hero's seat and cards, the
entries of each round, and any villain hands::

    game: Limit Texas Hold'em
    table_size: 6
    stakes: {small_blind: 1, big_blind: 2, effective_stack: 200}
    hero: {position: BTN, cards: AsKh}
    rounds:
      - actions:
          - {position: UTG, action: fold}
          - {position: BTN, action: raise}
      - board: Qd7c2s
        actions:
          - {position: BB, action: check}
    villains:
      - {position: BB, cards: QcQh}

Scripts are validated against ``schemas/hand_script.json`` before replay.
Each scripted entry fills the next blank entry for that seat; when a round
runs out of blank entries another orbit is appended. Blank entries left at
the end of a scripted round are removed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jsonschema
import yaml

from handscribe.config import RecorderConfig
from handscribe.core.parser import parse_cards
from handscribe.core.schemas import load_packaged_schema
from handscribe.engine.actions import ActionKind
from handscribe.engine.base import HandHistoryError
from handscribe.engine.cards import CardSlot
from handscribe.engine.recorder import HandRecorder

__all__ = ["ScriptError", "load_script", "validate_script", "replay_script"]

logger = logging.getLogger(__name__)


class ScriptError(ValueError):
    """A hand script is malformed or describes an impossible hand."""


def validate_script(data: dict) -> dict:
    schema = load_packaged_schema("hand_script")
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ScriptError(f"Schema validation at {where}: {e.message}") from e
    return data


def load_script(path: Path) -> dict:
    """Load and validate a hand script from YAML."""
    with open(path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ScriptError(f"{path}: expected a mapping at the top level")
    return validate_script(raw)


def _cards(text: str, where: str) -> list:
    parsed = parse_cards(text)
    if not parsed.success:
        raise ScriptError(f"{where}: {parsed.error} (got {text!r})")
    return list(parsed.cards)


def _fill_cards(recorder: HandRecorder, slots: list[CardSlot], text: str, where: str) -> None:
    cards = _cards(text, where)
    if len(cards) > len(slots):
        raise ScriptError(f"{where}: {len(cards)} cards given, only {len(slots)} slots")
    for slot, card in zip(slots, cards):
        recorder.set_card(slot, card.rank, card.suit)


def _next_entry(recorder: HandRecorder, round_index: int, position: str, start: int) -> int | None:
    actions = recorder.history.rounds[round_index].actions
    for j in range(start, len(actions)):
        if actions[j].position == position and actions[j].is_blank:
            return j
    return None


def _replay_actions(recorder: HandRecorder, round_index: int, actions: list[dict]) -> None:
    cursor = 0
    for n, entry in enumerate(actions):
        where = f"rounds/{round_index}/actions/{n}"
        position = entry["position"]
        try:
            kind = ActionKind.parse(entry["action"])
        except ValueError as e:
            raise ScriptError(f"{where}: {e}") from e

        index = _next_entry(recorder, round_index, position, cursor)
        if index is None:
            recorder.append_next_actors(round_index)
            index = _next_entry(recorder, round_index, position, cursor)
        if index is None:
            raise ScriptError(f"{where}: {position} is not due to act in this round")

        recorder.set_action(round_index, index, kind, entry.get("amount"))
        cursor = index + 1

    blanks = [
        j for j, a in enumerate(recorder.history.rounds[round_index].actions) if a.is_blank
    ]
    for j in reversed(blanks):
        recorder.delete_action(round_index, j)


def _replay_round(recorder: HandRecorder, round_index: int, data: dict) -> None:
    rnd = recorder.history.rounds[round_index]
    where = f"rounds/{round_index}"
    if "board" in data:
        slots = [CardSlot.board(round_index, i) for i in range(len(rnd.community_cards))]
        _fill_cards(recorder, slots, data["board"], f"{where}/board")
    for card_index in data.get("discards", []):
        recorder.toggle_discard(round_index, card_index, True)
    if "draws" in data:
        start = len(rnd.drawn_cards)
        drawn = _cards(data["draws"], f"{where}/draws")
        for _ in drawn:
            recorder.add_drawn_card(round_index)
        slots = [CardSlot.drawn(round_index, start + i) for i in range(len(drawn))]
        _fill_cards(recorder, slots, data["draws"], f"{where}/draws")
    for position, count in (data.get("changes") or {}).items():
        recorder.set_player_changes(round_index, position, count)
    if data.get("actions"):
        _replay_actions(recorder, round_index, data["actions"])


def replay_script(script: dict, config: RecorderConfig | None = None) -> HandRecorder:
    """Build a recorder and apply every edit the script describes."""
    config = config or RecorderConfig()
    game = config.game(script.get("game"))
    stakes = {**vars(config.stakes), **script.get("stakes", {})}
    if "small_blind" in script.get("stakes", {}) and "big_blind" not in script.get("stakes", {}):
        stakes["big_blind"] = None

    try:
        recorder = HandRecorder(
            game,
            table_size=script.get("table_size", config.table_size),
            **stakes,
        )
        hero = script.get("hero", {})
        if "position" in hero:
            recorder.set_hero_position(hero["position"])
        if "cards" in hero:
            slots = [CardSlot.hero(i) for i in range(game.hand_size)]
            _fill_cards(recorder, slots, hero["cards"], "hero/cards")

        rounds = script.get("rounds", [])
        if len(rounds) > len(recorder.history.rounds):
            raise ScriptError(
                f"{game.name} has {len(recorder.history.rounds)} rounds, script has {len(rounds)}"
            )
        for i, data in enumerate(rounds):
            _replay_round(recorder, i, data)

        for v, villain in enumerate(script.get("villains", [])):
            message = recorder.add_villain_hand()
            if message:
                raise ScriptError(f"villains/{v}: {message}")
            if recorder.history.villains[v].position != villain["position"]:
                recorder.set_villain_position(v, villain["position"])
            if "cards" in villain:
                slots = [CardSlot.villain(v, i) for i in range(game.hand_size)]
                _fill_cards(recorder, slots, villain["cards"], f"villains/{v}/cards")
    except HandHistoryError as e:
        raise ScriptError(str(e)) from e

    logger.info("Replayed %s hand with %d versions", game.name, len(recorder.versions))
    return recorder

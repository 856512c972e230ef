"""Shared test fixtures for handscribe."""

import pytest
from pathlib import Path

from handscribe.engine.history import new_hand
from handscribe.engine.variants import get_game

ROOT = Path(__file__).resolve().parent.parent
HANDS_DIR = ROOT / "hands"


@pytest.fixture
def limit_holdem():
    return get_game("Limit Texas Hold'em")


@pytest.fixture
def nl_holdem():
    return get_game("No Limit Texas Hold'em")


@pytest.fixture
def hand(limit_holdem):
    """6-handed limit hold'em at 1/2 with nothing entered yet."""
    return new_hand(limit_holdem, table_size=6, small_blind=1, big_blind=2, effective_stack=200)


@pytest.fixture
def nl_hand():
    """6-handed pot-limit omaha (freely entered amounts, per-seat ante) at 1/2."""
    return new_hand(get_game("Pot Limit Omaha"), table_size=6, small_blind=1, big_blind=2)


@pytest.fixture
def draw_hand():
    """3-handed 2-7 triple draw at 5/10."""
    return new_hand(get_game("Limit 2-7 Triple Draw"), table_size=3, small_blind=5, big_blind=10)


@pytest.fixture
def tmp_output(tmp_path):
    """Provide a temporary output directory for test runs."""
    return tmp_path / "output"

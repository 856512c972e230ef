"""Seat labels for 2-9 handed tables.

Seats are named from a fixed ten-seat universe listed in pre-flop acting
order. Shorter tables do not drop seats uniformly, so 6-9 handed tables use
literal slices rather than a formula.
"""

from __future__ import annotations

from handscribe.engine.base import InvalidTableSizeError

__all__ = [
    "POSITION_UNIVERSE",
    "MIN_TABLE_SIZE",
    "MAX_TABLE_SIZE",
    "active_positions",
    "post_flop_order",
    "acting_order",
    "validate_table_size",
]

POSITION_UNIVERSE: tuple[str, ...] = (
    "UTG",
    "UTG+1",
    "UTG+2",
    "UTG+3",
    "MP",
    "HJ",
    "CO",
    "BTN",
    "SB",
    "BB",
)

MIN_TABLE_SIZE = 2
MAX_TABLE_SIZE = 9

_FIXED_SLICES: dict[int, tuple[str, ...]] = {
    6: ("UTG",) + POSITION_UNIVERSE[-5:],
    7: ("UTG", "UTG+1") + POSITION_UNIVERSE[-5:],
    8: ("UTG", "UTG+1", "MP", "HJ", "CO", "BTN", "SB", "BB"),
    9: ("UTG", "UTG+1", "UTG+2", "MP", "HJ", "CO", "BTN", "SB", "BB"),
}


def validate_table_size(table_size: int) -> None:
    """Raise InvalidTableSizeError unless ``table_size`` is an int in 2-9."""
    if isinstance(table_size, bool) or not isinstance(table_size, int):
        raise InvalidTableSizeError(f"Table size must be an integer, got {table_size!r}")
    if not MIN_TABLE_SIZE <= table_size <= MAX_TABLE_SIZE:
        raise InvalidTableSizeError(
            f"Table size must be between {MIN_TABLE_SIZE} and {MAX_TABLE_SIZE}, got {table_size}"
        )


def active_positions(table_size: int) -> list[str]:
    """Return the seats in play for ``table_size``, in pre-flop acting order."""
    validate_table_size(table_size)
    if table_size <= 5:
        return list(POSITION_UNIVERSE[-table_size:])
    return list(_FIXED_SLICES[table_size])


def post_flop_order(table_size: int) -> list[str]:
    """Return the post-flop acting order: the last two pre-flop seats move to the front."""
    positions = active_positions(table_size)
    return positions[-2:] + positions[:-2]


def acting_order(table_size: int, round_index: int) -> list[str]:
    """Pre-flop order for the first round, post-flop order afterwards."""
    if round_index == 0:
        return active_positions(table_size)
    return post_flop_order(table_size)

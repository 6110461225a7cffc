"""
Objects - The pieces that can occupy a tile.

Units belong to a team and can move and attack. Walls block movement
and line of sight but can be shot down.
"""

from __future__ import annotations
from enum import IntEnum


class Piece(IntEnum):
    """Kind of object on a tile. Values are stable for the map format."""
    NOTHING = 0
    WALL = 1
    MELEE = 2
    BLASTER = 3
    SNIPER = 4
    LASER = 5


# Movement points spent per tile moved
MP_COST: dict[Piece, int] = {
    Piece.MELEE: 1,
    Piece.BLASTER: 2,
    Piece.SNIPER: 2,
    Piece.LASER: 3,
}

# Action points spent per attack
AP_COST: dict[Piece, int] = {
    Piece.MELEE: 1,
    Piece.BLASTER: 1,
    Piece.SNIPER: 2,
    Piece.LASER: 3,
}

# Attack range in tiles
RANGE: dict[Piece, int] = {
    Piece.MELEE: 1,
    Piece.BLASTER: 3,
    Piece.SNIPER: 10,
    Piece.LASER: 25,
}


def is_unit(piece: Piece) -> bool:
    return piece >= Piece.MELEE


def mp_cost(piece: Piece) -> int:
    return MP_COST.get(piece, 0)


def ap_cost(piece: Piece) -> int:
    return AP_COST.get(piece, 0)


def unit_range(piece: Piece) -> int:
    return RANGE.get(piece, 0)

"""
Shared measurements for the strategy cases.
"""

from __future__ import annotations

from ..map import Map
from ..objects import is_unit, unit_range
from ..rules import units_in_sight
from ..state import GameState


def lost_allies(before: GameState, after: GameState, team: int) -> int:
    """Allies of team present in before but gone in after."""
    return max(0, before.units_of(team) - after.units_of(team))


def allies_at_risk(m: Map, team: int) -> int:
    """Units of team that at least one visible enemy can reach."""
    at_risk = 0
    for pos, owner, piece in m.objects():
        if owner != team or not is_unit(piece):
            continue
        for enemy_pos, distance in units_in_sight(m, pos):
            if distance <= unit_range(m.read(enemy_pos)[1]):
                at_risk += 1
                break
    return at_risk

"""
Strategy - A small turn-based tactics game.

Two or more teams of units take turns on a grid. On its turn a team
spends movement points (MP) moving units and action points (AP)
attacking tiles in line of sight and range. The last team with units
left wins; a game that runs past its turn limit goes to the largest
surviving team.
"""

from .action import Action, ActionTag
from .map import Coord, Map, MapFormatError, dumps, loads
from .objects import Piece, ap_cost, is_unit, mp_cost, unit_range
from .rules import (
    GameStatus,
    allies_and_enemies_in_range,
    distance_to_closest_enemy,
    game_status,
    has_turn_ended,
    is_over,
    line_of_sight,
    max_turns,
    objects_in_sight,
    possible_actions,
    possible_attacks,
    possible_moves,
    take_action,
    units_in_sight,
)
from .state import GameState, count_teams

__all__ = [
    "Action",
    "ActionTag",
    "Coord",
    "Map",
    "MapFormatError",
    "dumps",
    "loads",
    "Piece",
    "ap_cost",
    "is_unit",
    "mp_cost",
    "unit_range",
    "GameStatus",
    "allies_and_enemies_in_range",
    "distance_to_closest_enemy",
    "game_status",
    "has_turn_ended",
    "is_over",
    "line_of_sight",
    "max_turns",
    "objects_in_sight",
    "possible_actions",
    "possible_attacks",
    "possible_moves",
    "take_action",
    "units_in_sight",
    "GameState",
    "count_teams",
]

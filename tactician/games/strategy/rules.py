"""
Rules - Pure functions that read and transform tactics game states.

Nothing here mutates its arguments. take_action is the only way to get
from one state to the next, and possible_actions lists every action a
controller may try (some of which can still fail when applied).
"""

from __future__ import annotations
from enum import Enum
import math

from ...search.policies import Attempt
from .action import Action, ActionTag
from .map import Coord, Map
from .objects import Piece, ap_cost, is_unit, mp_cost, unit_range
from .state import GameState, count_teams

# Orthogonal steps, in the order moves are offered
NEIGHBOURS: tuple[Coord, ...] = ((1, 0), (0, -1), (-1, 0), (0, 1))


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    TIED = "tied"


# =============================================================================
# Game status
# =============================================================================

def max_turns(m: Map) -> int:
    """Turn limit after which the largest surviving team wins."""
    return m.width * m.height * 2


def game_status(state: GameState) -> tuple[GameStatus, int | None]:
    """
    (status, winning team) for a state.

    Past the turn limit the team with the most units wins, or the game
    is tied if several teams share the most. Otherwise the last team
    with units left wins, and no teams at all is a tie.
    """
    if state.turn_number > max_turns(state.map):
        most = max((count for _, count in state.teams), default=0)
        leaders = [team for team, count in state.teams if count == most]
        if len(leaders) == 1:
            return GameStatus.WON, leaders[0]
        return GameStatus.TIED, None

    if len(state.teams) == 1:
        return GameStatus.WON, state.teams[0][0]
    if not state.teams:
        return GameStatus.TIED, None
    return GameStatus.IN_PROGRESS, None


def is_over(state: GameState) -> bool:
    return game_status(state)[0] is not GameStatus.IN_PROGRESS


def has_turn_ended(start: GameState, state: GameState) -> bool:
    """True once the game is over, the team has changed or a new round began."""
    return (
        is_over(state)
        or state.current_team != start.current_team
        or state.turn_number != start.turn_number
    )


# =============================================================================
# Sight and range
# =============================================================================

def line_of_sight(m: Map, origin: Coord, target: Coord) -> list[Coord]:
    """
    Tiles on the Bresenham line from origin to target, both included.

    Returns an empty list when any tile strictly between the two holds
    an object. A line from a tile to itself is that single tile.
    """
    ox, oy = origin
    tx, ty = target
    start, end = origin, target
    steep = abs(ty - oy) >= abs(tx - ox)
    swapped = (oy > ty) if steep else (ox > tx)
    if swapped:
        start, end = target, origin

    (sx, sy), (ex, ey) = start, end
    dx, dy = ex - sx, ey - sy
    line: list[Coord] = []

    if not steep:
        step = 1
        if dy < 0:
            step, dy = -1, -dy
        d = 2 * dy - dx
        y = sy
        for x in range(sx, ex + 1):
            line.append((x, y))
            if d > 0:
                y += step
                d -= 2 * dx
            d += 2 * dy
    else:
        step = 1
        if dx < 0:
            step, dx = -1, -dx
        d = 2 * dx - dy
        x = sx
        for y in range(sy, ey + 1):
            line.append((x, y))
            if d > 0:
                x += step
                d -= 2 * dy
            d += 2 * dx

    for tile in line:
        if tile != origin and tile != target and m.read(tile)[1] != Piece.NOTHING:
            return []

    if swapped:
        line.reverse()
    return line


def objects_in_sight(m: Map, unit: Coord) -> list[tuple[Coord, int]]:
    """
    Every object visible from a unit, with its distance in tiles.

    Includes the unit itself at distance 0. Empty when there is no
    unit at the given tile.
    """
    if not m.is_valid(unit) or not is_unit(m.read(unit)[1]):
        return []

    seen = []
    for pos, _, _ in m.objects():
        line = line_of_sight(m, unit, pos)
        if line:
            seen.append((pos, len(line) - 1))
    return seen


def units_in_sight(m: Map, unit: Coord) -> list[tuple[Coord, int]]:
    """Enemy units visible from a unit, with their distances."""
    if not m.is_valid(unit):
        return []
    team, piece = m.read(unit)
    if not is_unit(piece):
        return []

    seen = []
    for pos, other_team, other in m.objects():
        if other_team != team and is_unit(other):
            line = line_of_sight(m, unit, pos)
            if line:
                seen.append((pos, len(line) - 1))
    return seen


def allies_and_enemies_in_range(state: GameState, team: int) -> tuple[int, int]:
    """
    (allies in range of an enemy, enemies in range of an ally) for a team.

    Each unit is counted once however many opponents can reach it.
    """
    m = state.map
    exposed_allies: set[Coord] = set()
    reachable_enemies: set[Coord] = set()

    for pos, owner, piece in m.objects():
        if owner != team or not is_unit(piece):
            continue
        reach = unit_range(piece)
        for enemy_pos, distance in units_in_sight(m, pos):
            if distance <= reach:
                reachable_enemies.add(enemy_pos)
            if distance <= unit_range(m.read(enemy_pos)[1]):
                exposed_allies.add(pos)

    return len(exposed_allies), len(reachable_enemies)


def distance_to_closest_enemy(m: Map, team: int) -> float:
    """
    Straight-line distance between the closest ally/enemy pair.

    Returns 0.0 when either side has no units.
    """
    allies = [pos for pos, owner, piece in m.objects() if owner == team and is_unit(piece)]
    enemies = [pos for pos, owner, piece in m.objects() if owner != team and is_unit(piece)]
    if not allies or not enemies:
        return 0.0
    return min(
        math.hypot(ax - ex, ay - ey)
        for ax, ay in allies
        for ex, ey in enemies
    )


# =============================================================================
# Action enumeration
# =============================================================================

def possible_moves(state: GameState) -> list[Action]:
    """Moves of the selected unit onto empty orthogonal neighbours."""
    m = state.map
    if not m.is_valid(state.selection):
        return []

    x, y = state.selection
    moves = []
    for dx, dy in NEIGHBOURS:
        pos = (x + dx, y + dy)
        if m.is_valid(pos) and m.read(pos)[1] == Piece.NOTHING:
            moves.append(Action.move(pos))
    return moves


def possible_attacks(state: GameState) -> list[Action]:
    """Attacks by the selected allied unit on every other object in sight and range."""
    m = state.map
    if not m.is_valid(state.selection):
        return []

    team, piece = m.read(state.selection)
    if team != state.current_team or not is_unit(piece):
        return []

    reach = unit_range(piece)
    return [
        Action.attack(pos)
        for pos, distance in objects_in_sight(m, state.selection)
        if 0 < distance <= reach
    ]


def possible_actions(state: GameState) -> list[Action]:
    """
    Every action worth trying from a state.

    Order is fixed: end turn first, then selections (or deselection of
    the current unit) in tile order, then moves, then attacks.
    """
    actions = [Action.end_turn()]

    for pos, team, piece in state.map.objects():
        if team != state.current_team or not is_unit(piece):
            continue
        if pos != state.selection:
            actions.append(Action.select(pos))
        else:
            actions.append(Action.cancel_selection())

    actions.extend(possible_moves(state))
    actions.extend(possible_attacks(state))
    return actions


# =============================================================================
# Transitions
# =============================================================================

def take_action(state: GameState, action: Action) -> Attempt:
    """
    Apply an action to a state.

    Returns Attempt(True, new_state) on success and Attempt(False, state)
    when the action is not legal. Finished games accept no actions.
    """
    if is_over(state):
        return Attempt.failure(state)

    handler = _HANDLERS.get(action.tag)
    if handler is None:
        return Attempt.failure(state)
    return handler(state, action)


def _move_unit(state: GameState, action: Action) -> Attempt:
    m = state.map
    team, piece = m.read(state.selection)
    target = action.location

    if (
        not is_unit(piece)
        or team != state.current_team
        or state.remaining_mp < mp_cost(piece)
        or not m.is_valid(target)
        or m.read(target)[1] != Piece.NOTHING
        or _manhattan(state.selection, target) != 1
    ):
        return Attempt.failure(state)

    ok, moved = m.update(target, piece, team)
    if not ok:
        return Attempt.failure(state)
    ok, moved = moved.update(state.selection, Piece.NOTHING)
    if not ok:
        return Attempt.failure(state)

    return Attempt.success(state.evolve(
        map=moved,
        selection=target,
        remaining_mp=state.remaining_mp - mp_cost(piece),
    ))


def _attack(state: GameState, action: Action) -> Attempt:
    m = state.map
    team, piece = m.read(state.selection)
    target = action.location

    if (
        not is_unit(piece)
        or team != state.current_team
        or state.remaining_ap < ap_cost(piece)
        or not m.is_valid(target)
    ):
        return Attempt.failure(state)

    line = line_of_sight(m, state.selection, target)
    if not line or len(line) > unit_range(piece) + 1:
        return Attempt.failure(state)

    ok, attacked = m.update(target, Piece.NOTHING)
    if not ok:
        return Attempt.failure(state)

    new_state = state.with_map(attacked).evolve(
        remaining_ap=state.remaining_ap - ap_cost(piece),
    )
    if target == state.selection or is_over(new_state):
        new_state = new_state.evolve(selection=None)
    return Attempt.success(new_state)


def _select_unit(state: GameState, action: Action) -> Attempt:
    team, piece = state.map.read(action.location)
    if team != state.current_team or not is_unit(piece):
        return Attempt.failure(state)
    return Attempt.success(state.evolve(selection=action.location))


def _cancel_selection(state: GameState, action: Action) -> Attempt:
    return Attempt.success(state.evolve(selection=None))


def _end_turn(state: GameState, action: Action) -> Attempt:
    teams = count_teams(state.map)
    turn_number = state.turn_number

    later = [team for team, _ in teams if team > state.current_team]
    if later:
        current_team = later[0]
    else:
        turn_number += 1
        current_team = teams[0][0] if teams else state.current_team

    return Attempt.success(state.evolve(
        teams=teams,
        current_team=current_team,
        selection=None,
        remaining_mp=state.map.starting_mp,
        remaining_ap=state.map.starting_ap,
        turn_number=turn_number,
    ))


def _manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


_HANDLERS = {
    ActionTag.MOVE_UNIT: _move_unit,
    ActionTag.ATTACK: _attack,
    ActionTag.SELECT_UNIT: _select_unit,
    ActionTag.CANCEL_SELECTION: _cancel_selection,
    ActionTag.END_TURN: _end_turn,
}

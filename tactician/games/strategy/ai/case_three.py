"""
Case Three - Scalar penalties that funnel the search.

Each action is asked a short list of questions (is this attack useful,
does this move bring us closer, did we waste resources) and every
failed question adds a penalty. Actions that pass cost nothing, so the
search follows free actions first.

Movement switches between offense and defense: when the team has
fewer than three allies per four enemies it tries to break line of
sight, otherwise it closes in on the nearest enemy.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ....controllers.base import ControllerType
from ....controllers.search import SearchController
from ....search.cost import ScalarCost
from ....search.policies import DecisionPolicies
from ..action import Action, ActionTag
from ..objects import Piece, is_unit, unit_range
from ..rules import (
    allies_and_enemies_in_range,
    distance_to_closest_enemy,
    has_turn_ended,
    possible_actions,
    take_action,
    units_in_sight,
)
from ..state import GameState
from ....controllers.tuning import apply_settings, config_values, reject_unknown

# Below this ally/enemy ratio the mover plays defensively
DEFENSE_RATIO = 0.75


@dataclass
class Penalties:
    """Penalties applied by case three. Tunable between decisions."""
    # Logic penalties
    character_choice: int = 1
    unused_mp: int = 5
    unused_ap: int = 10
    friendly_fire: int = 25
    missed_shot: int = 25

    # Playstyle penalties: defensive
    exposed_to_enemy: int = 5
    unnecessary_risk: int = 5

    # Playstyle penalties: offensive
    poor_targeting: int = 1
    not_engaging: int = 5
    enemy_left_alive: int = 5


class CaseThree(SearchController):
    """Question-driven scalar penalties with a zero heuristic."""

    controller_type = ControllerType.ASTAR_THREE
    identity = ScalarCost.minimum()
    infinity = ScalarCost.maximum()

    def __init__(self, penalties: Penalties | None = None, reopen_closed: bool = False):
        super().__init__(reopen_closed=reopen_closed)
        self.penalties = penalties or Penalties()

    def policies(self, state: GameState) -> DecisionPolicies:
        return DecisionPolicies(
            actions_of=possible_actions,
            is_goal=has_turn_ended,
            heuristic=self.heuristic,
            weigh=self.weigh,
            apply=take_action,
        )

    def heuristic(self, state: GameState) -> ScalarCost:
        return self.identity

    def weigh(
        self,
        start: GameState,
        before: GameState,
        after: GameState,
        action: Action,
    ) -> ScalarCost:
        team = start.current_team
        if action.tag in (ActionTag.SELECT_UNIT, ActionTag.CANCEL_SELECTION):
            # Switching units is fine but must not be free or it loops
            return ScalarCost(self.penalties.character_choice)
        if action.tag is ActionTag.ATTACK:
            return ScalarCost(self._weigh_attack(team, before, after, action))
        if action.tag is ActionTag.MOVE_UNIT:
            return ScalarCost(self._weigh_move(team, before, after))
        if action.tag is ActionTag.END_TURN:
            return ScalarCost(self._weigh_end_turn(team, start, before))
        return self.identity

    def _weigh_attack(self, team: int, before: GameState, after: GameState, action: Action) -> int:
        owner, piece = before.map.read(action.location)
        p = self.penalties

        if is_unit(piece):
            return p.friendly_fire if owner == team else 0
        if piece == Piece.NOTHING:
            return p.missed_shot

        # Shooting a wall while an enemy is in sight
        if units_in_sight(before.map, before.selection):
            return p.not_engaging
        # Shooting a wall that reveals nobody
        if not units_in_sight(after.map, after.selection):
            return p.poor_targeting
        return 0

    def _weigh_move(self, team: int, before: GameState, after: GameState) -> int:
        p = self.penalties
        _, piece = before.map.read(before.selection)
        reach = unit_range(piece)

        seen_before = units_in_sight(before.map, before.selection)
        seen_after = units_in_sight(after.map, after.selection)

        allies = before.units_of(team)
        enemies = before.enemies_of(team)
        ratio = allies / enemies if enemies else 1.0

        if ratio >= DEFENSE_RATIO:
            return self._weigh_offense(team, before, after, reach, seen_before, seen_after)

        threats_before = self._threats(before, seen_before)
        threats_after = self._threats(after, seen_after)
        if threats_before == 0:
            return p.exposed_to_enemy if threats_after > 1 else 0
        if threats_before == 1:
            if threats_after == 0:
                return p.not_engaging
            if threats_after >= threats_before:
                return p.exposed_to_enemy
        # Against more than one threat repositioning rarely helps
        return 0

    def _weigh_offense(
        self,
        team: int,
        before: GameState,
        after: GameState,
        reach: int,
        seen_before: list,
        seen_after: list,
    ) -> int:
        p = self.penalties

        if not seen_before:
            if seen_after:
                return 0
            # Nobody in sight: at least get closer
            if (
                distance_to_closest_enemy(after.map, team)
                >= distance_to_closest_enemy(before.map, team)
            ):
                return p.not_engaging
            return 0

        closest_before = min(distance for _, distance in seen_before)
        closest_after = min((distance for _, distance in seen_after), default=None)

        if closest_before <= reach:
            if closest_after is not None and closest_after <= reach:
                # Already in range: getting closer only adds risk
                return p.unnecessary_risk if closest_after < closest_before else 0
            return p.not_engaging

        if closest_after is not None and closest_after >= closest_before:
            return p.not_engaging
        return 0

    def _threats(self, state: GameState, seen: list) -> int:
        """Visible enemies whose range covers the selected unit."""
        return sum(
            1 for pos, distance in seen
            if unit_range(state.map.read(pos)[1]) >= distance
        )

    def _weigh_end_turn(self, team: int, start: GameState, before: GameState) -> int:
        p = self.penalties
        killed = max(0, start.enemies_of(team) - before.enemies_of(team))

        # Only expect kills on enemies that were reachable at the start
        _, reachable = allies_and_enemies_in_range(start, team)
        expected = min(reachable, before.units_of(team), start.remaining_ap)
        missed = max(0, expected - killed)

        return (
            before.remaining_mp * p.unused_mp
            + before.remaining_ap * p.unused_ap
            + missed * p.enemy_left_alive
        )

    def tuning(self) -> dict[str, Any]:
        return config_values(self.penalties)

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        reject_unknown(settings, set(config_values(self.penalties)), self.get_name())
        apply_settings(self.penalties, settings)
        return self.tuning()

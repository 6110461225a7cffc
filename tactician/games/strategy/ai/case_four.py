"""
Case Four - Resource-priced actions with a predictive heuristic.

Every action costs what it spends (MP, AP, a flat selection fee) plus
penalties for pointless attacks. The heuristic predicts the work left
this turn from the starting position: exposed allies to save, enemies
to eliminate or expose, and distance still to close. It is not
admissible, so plans are good rather than optimal.

With the "move or kill" goal enabled a turn only counts as finished
when an enemy died or the team ended closer to the enemy than it began.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import math

from ....controllers.base import ControllerType
from ....controllers.search import SearchController
from ....search.cost import ScalarCost
from ....search.policies import DecisionPolicies
from ..action import Action, ActionTag
from ..objects import Piece
from ..rules import (
    allies_and_enemies_in_range,
    distance_to_closest_enemy,
    has_turn_ended,
    possible_actions,
    take_action,
)
from ..state import GameState
from ....controllers.tuning import apply_settings, config_values, reject_unknown


@dataclass
class ActionPenalties:
    """Price of each kind of action."""
    optional_action: int = 1
    select_unit: int = 3
    spent_mp: int = 1
    spent_ap: int = 2
    turn_ended: int = 2
    attacked_nothing: int = 20
    attacked_friendly: int = 20


@dataclass
class Predictions:
    """Predicted cost of the work left in a turn."""
    ally_needs_saving: int = 2
    allies_further_exposed: int = 4
    enemy_needs_eliminating: int = 10
    enemy_needs_exposing: int = 2
    need_to_move_closer: int = 2


class TurnHeuristic:
    """
    Heuristic bound to the state a search started from.

    The starting exposure is measured once so each estimate can tell
    whether allies are worse off than when the turn began.
    """

    def __init__(
        self,
        start: GameState,
        penalties: ActionPenalties,
        predictions: Predictions,
        use_distance: bool,
    ):
        self.start = start
        self.team = start.current_team
        self.penalties = penalties
        self.predictions = predictions
        self.use_distance = use_distance
        self.enemy_count = start.enemies_of(self.team)
        self.allies_in_range, self.enemies_in_range = allies_and_enemies_in_range(
            start, self.team
        )

    def __call__(self, state: GameState) -> ScalarCost:
        p = self.predictions
        value = 0

        # A unit will have to be chosen before anything happens
        if not has_turn_ended(self.start, state) and state.selection is None:
            value += self.penalties.select_unit

        exposed, reachable = allies_and_enemies_in_range(state, self.team)
        value += exposed * p.ally_needs_saving
        if exposed > self.allies_in_range:
            value += p.allies_further_exposed

        value += reachable * p.enemy_needs_eliminating
        if self.enemy_count > reachable:
            value += (self.enemy_count - reachable) * p.enemy_needs_exposing

        if self.use_distance:
            distance = distance_to_closest_enemy(state.map, self.team)
            value += math.floor(distance) * p.need_to_move_closer

        return ScalarCost(value)


class CaseFour(SearchController):
    """Spending-based costs with a per-search predictive heuristic."""

    controller_type = ControllerType.ASTAR_FOUR
    identity = ScalarCost.minimum()
    infinity = ScalarCost.maximum()

    def __init__(
        self,
        penalties: ActionPenalties | None = None,
        predictions: Predictions | None = None,
        goal_move_or_kill: bool = True,
        reopen_closed: bool = False,
    ):
        super().__init__(reopen_closed=reopen_closed)
        self.penalties = penalties or ActionPenalties()
        self.predictions = predictions or Predictions()
        self.goal_move_or_kill = goal_move_or_kill

    def policies(self, state: GameState) -> DecisionPolicies:
        return DecisionPolicies(
            actions_of=possible_actions,
            is_goal=self.is_goal,
            heuristic=TurnHeuristic(
                state, self.penalties, self.predictions, self.goal_move_or_kill,
            ),
            weigh=self.weigh,
            apply=take_action,
        )

    def is_goal(self, start: GameState, state: GameState) -> bool:
        if not has_turn_ended(start, state):
            return False
        if not self.goal_move_or_kill:
            return True

        team = start.current_team
        if state.enemies_of(team) < start.enemies_of(team):
            return True
        return (
            distance_to_closest_enemy(state.map, team)
            < distance_to_closest_enemy(start.map, team)
        )

    def weigh(
        self,
        start: GameState,
        before: GameState,
        after: GameState,
        action: Action,
    ) -> ScalarCost:
        p = self.penalties
        value = p.optional_action

        if action.tag in (ActionTag.SELECT_UNIT, ActionTag.CANCEL_SELECTION):
            value += p.select_unit
        elif action.tag is ActionTag.MOVE_UNIT:
            value += (before.remaining_mp - after.remaining_mp) * p.spent_mp
        elif action.tag is ActionTag.ATTACK:
            value += (before.remaining_ap - after.remaining_ap) * p.spent_ap
            owner, piece = before.map.read(action.location)
            if piece == Piece.NOTHING:
                value += p.attacked_nothing
            elif piece != Piece.WALL and owner == before.current_team:
                value += p.attacked_friendly
        elif action.tag is ActionTag.END_TURN:
            # Whatever is left over counts as spent
            value += p.turn_ended
            value += before.remaining_mp * p.spent_mp + before.remaining_ap * p.spent_ap

        return ScalarCost(value)

    def tuning(self) -> dict[str, Any]:
        return {
            "goal_move_or_kill": self.goal_move_or_kill,
            **config_values(self.penalties),
            **config_values(self.predictions),
        }

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        settings = dict(settings)
        known = {"goal_move_or_kill"}
        known |= set(config_values(self.penalties)) | set(config_values(self.predictions))
        reject_unknown(settings, known, self.get_name())

        if "goal_move_or_kill" in settings:
            goal = settings.pop("goal_move_or_kill")
            if not isinstance(goal, bool):
                raise ValueError("goal_move_or_kill must be a boolean")
        else:
            goal = self.goal_move_or_kill

        # Validate against copies so a bad value leaves both configs untouched
        penalties = ActionPenalties(**config_values(self.penalties))
        predictions = Predictions(**config_values(self.predictions))
        apply_settings(penalties, settings)
        apply_settings(predictions, settings)

        self.penalties, self.predictions, self.goal_move_or_kill = penalties, predictions, goal
        return self.tuning()

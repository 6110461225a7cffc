"""
Case Two - Case one plus a price on wasted resources.

Ending the turn is charged for every movement and action point left
unspent, and the whole end-turn cost can be scaled up to make the
controller use its turn before giving it away.
"""

from __future__ import annotations
from typing import Any

from ....controllers.base import ControllerType
from ....controllers.search import SearchController
from ....controllers.tuning import reject_unknown
from ....search.policies import DecisionPolicies
from ..action import Action, ActionTag
from ..rules import has_turn_ended, possible_actions, take_action
from ..state import GameState
from .common import allies_at_risk, lost_allies
from .costs import ResourceCost
from .personality import Personality, get_personality


class CaseTwo(SearchController):
    """Personality-weighted search that penalizes unused MP and AP."""

    controller_type = ControllerType.ASTAR_TWO
    identity = ResourceCost.minimum()
    infinity = ResourceCost.maximum()

    def __init__(
        self,
        personality: Personality | str = "balanced",
        end_turn_multiplier: int = 1,
        reopen_closed: bool = False,
    ):
        super().__init__(reopen_closed=reopen_closed)
        if isinstance(personality, str):
            personality = get_personality(personality)
        self.personality = personality
        self.end_turn_multiplier = end_turn_multiplier

    def policies(self, state: GameState) -> DecisionPolicies:
        return DecisionPolicies(
            actions_of=possible_actions,
            is_goal=has_turn_ended,
            heuristic=self.heuristic,
            weigh=self.weigh,
            apply=take_action,
            less_than=self.personality.weights,
        )

    def comparator(self) -> Any:
        return self.personality.weights

    def heuristic(self, state: GameState) -> ResourceCost:
        return self.identity

    def weigh(
        self,
        start: GameState,
        before: GameState,
        after: GameState,
        action: Action,
    ) -> ResourceCost:
        team = before.current_team
        cost = ResourceCost(
            remaining_enemies=after.enemies_of(team),
            lost_allies=lost_allies(before, after, team),
            allies_at_risk=allies_at_risk(after.map, team),
        )
        if action.tag is ActionTag.END_TURN:
            cost = ResourceCost(
                remaining_enemies=cost.remaining_enemies,
                lost_allies=cost.lost_allies,
                allies_at_risk=cost.allies_at_risk,
                unused_mp=before.remaining_mp,
                unused_ap=before.remaining_ap,
            ) * self.end_turn_multiplier
        return cost

    def tuning(self) -> dict[str, Any]:
        return {
            "personality": self.personality.name,
            "end_turn_multiplier": self.end_turn_multiplier,
            **self.personality.multipliers(),
        }

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        settings = dict(settings)
        reject_unknown(
            settings,
            {"personality", "end_turn_multiplier", *ResourceCost.minimum().components()},
            self.get_name(),
        )

        multiplier = settings.pop("end_turn_multiplier", self.end_turn_multiplier)
        if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier < 0:
            raise ValueError("end_turn_multiplier must be a non-negative integer")

        if "personality" in settings:
            personality = get_personality(settings.pop("personality"))
        else:
            personality = self.personality.copy()
        for component, value in settings.items():
            personality.set_multiplier(component, value)
        personality.require_weight(ResourceCost.minimum().components())

        self.personality, self.end_turn_multiplier = personality, multiplier
        return self.tuning()

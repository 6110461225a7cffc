"""
Case One - Personality-weighted vector costs, no heuristic.

Every state reached is judged on enemies left alive, allies lost,
allies exposed to enemy fire and enemies nobody can reach. The
personality decides which of those matters most.
"""

from __future__ import annotations
from typing import Any

from ....controllers.base import ControllerType
from ....controllers.search import SearchController
from ....controllers.tuning import reject_unknown
from ....search.policies import DecisionPolicies
from ..action import Action
from ..rules import allies_and_enemies_in_range, has_turn_ended, possible_actions, take_action
from ..state import GameState
from .common import allies_at_risk, lost_allies
from .costs import StrategyCost
from .personality import Personality, get_personality


class CaseOne(SearchController):
    """Plans a whole turn, stopping as soon as the turn has ended."""

    controller_type = ControllerType.ASTAR_ONE
    identity = StrategyCost.minimum()
    infinity = StrategyCost.maximum()

    def __init__(self, personality: Personality | str = "balanced", reopen_closed: bool = False):
        super().__init__(reopen_closed=reopen_closed)
        if isinstance(personality, str):
            personality = get_personality(personality)
        self.personality = personality

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

    def heuristic(self, state: GameState) -> StrategyCost:
        return self.identity

    def weigh(
        self,
        start: GameState,
        before: GameState,
        after: GameState,
        action: Action,
    ) -> StrategyCost:
        team = before.current_team
        enemies = after.enemies_of(team)
        _, enemies_in_range = allies_and_enemies_in_range(after, team)
        return StrategyCost(
            remaining_enemies=enemies,
            lost_allies=lost_allies(before, after, team),
            allies_at_risk=allies_at_risk(after.map, team),
            enemies_out_of_range=max(0, enemies - enemies_in_range),
        )

    def tuning(self) -> dict[str, Any]:
        return {"personality": self.personality.name, **self.personality.multipliers()}

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        settings = dict(settings)
        reject_unknown(
            settings, {"personality", *StrategyCost.minimum().components()}, self.get_name(),
        )

        # Changes are made on a copy and only kept if every value is valid
        if "personality" in settings:
            personality = get_personality(settings.pop("personality"))
        else:
            personality = self.personality.copy()
        for component, value in settings.items():
            personality.set_multiplier(component, value)
        personality.require_weight(StrategyCost.minimum().components())

        self.personality = personality
        return self.tuning()

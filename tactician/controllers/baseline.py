"""
Baseline Controllers - Decisions without search.

Used for:
- Testing
- Baseline comparison against the search-driven controllers
- Seats that should never do anything interesting
"""

from __future__ import annotations
from typing import Any
import random

from ..search.policies import ActionsOf, Apply, IsGoal
from ..search.random_walk import random_decide
from .base import Controller, ControllerType, Decision


class RandomController(Controller):
    """Plays random applicable actions until the goal is reached."""

    controller_type = ControllerType.RANDOM

    def __init__(
        self,
        actions_of: ActionsOf,
        is_goal: IsGoal,
        apply: Apply,
        seed: int | None = None,
    ):
        self.actions_of = actions_of
        self.is_goal = is_goal
        self.apply = apply
        self.rng = random.Random(seed)

    def decide(self, state: Any) -> Decision:
        found, actions = random_decide(
            state, self.actions_of, self.is_goal, self.apply, self.rng,
        )
        return Decision(
            found=found,
            actions=actions,
            explanation="Selected randomly" if found else "Random walk hit a dead end",
            states_processed=len(actions),
        )


class IdleController(Controller):
    """Always plays the same fixed actions (typically just ending the turn)."""

    controller_type = ControllerType.IDLE

    def __init__(self, actions: list[Any]):
        self.actions = list(actions)

    def decide(self, state: Any) -> Decision:
        return Decision(
            found=True,
            actions=list(self.actions),
            explanation="Idle",
        )

"""
Random Walk - Baseline decision procedure without cost evaluation.

Shuffles the legal actions of the current state, takes the first one
that applies, and repeats until a goal state is reached. Useful as an
opponent for exercising the search-driven controllers.
"""

from __future__ import annotations
from typing import Any
import logging
import random

from .astar import SearchResult
from .policies import ActionsOf, Apply, IsGoal

logger = logging.getLogger(__name__)


def random_decide(
    state: Any,
    actions_of: ActionsOf,
    is_goal: IsGoal,
    apply: Apply,
    rng: random.Random | None = None,
    max_steps: int = 10_000,
) -> SearchResult:
    """
    Walk randomly from state until is_goal(state, current) holds.

    Returns (False, []) when some visited state has no applicable
    action or the walk exceeds max_steps.
    """
    rng = rng or random.Random()
    current = state
    actions: list[Any] = []

    while not is_goal(state, current):
        if len(actions) >= max_steps:
            logger.debug("Random walk gave up after %d step(s)", max_steps)
            return SearchResult(False, [])

        candidates = list(actions_of(current))
        rng.shuffle(candidates)

        for action in candidates:
            ok, successor = apply(current, action)
            if ok:
                actions.append(action)
                current = successor
                break
        else:
            logger.debug("Random walk reached a dead end after %d step(s)", len(actions))
            return SearchResult(False, [])

    return SearchResult(True, actions)

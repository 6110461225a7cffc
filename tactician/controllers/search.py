"""
Search Controller - Base for controllers backed by the A* engine.

Subclasses provide the decision policies for a start state and the
cost sentinels; this base runs the search and reports on it.
"""

from __future__ import annotations
from abc import abstractmethod
from typing import Any
import logging
import time

from ..search.astar import AStar
from ..search.cost import ScalarCost, VectorCost, WeightedProjection
from ..search.policies import DecisionPolicies
from .base import Controller, Decision

logger = logging.getLogger(__name__)


class SearchController(Controller):
    """
    A controller that plans with best-first search.

    Each instance owns its own engine, so introspection always reflects
    this controller's most recent decision.
    """

    def __init__(self, reopen_closed: bool = False):
        self.astar: AStar = AStar(reopen_closed=reopen_closed)

    @property
    @abstractmethod
    def identity(self) -> Any:
        """Cost of doing nothing."""

    @property
    @abstractmethod
    def infinity(self) -> Any:
        """Cost greater than any real path."""

    @abstractmethod
    def policies(self, state: Any) -> DecisionPolicies:
        """Decision policies for a search starting at state."""

    def decide(self, state: Any) -> Decision:
        started = time.perf_counter()
        found, actions = self.astar.search_with(
            state, self.identity, self.infinity, self.policies(state),
        )
        elapsed = time.perf_counter() - started

        logger.info(
            "%s %s after %d state(s) in %.3fs (%d action(s))",
            self.get_name(),
            "found a plan" if found else "found no plan",
            self.astar.states_processed,
            elapsed,
            len(actions),
        )
        return Decision(
            found=found,
            actions=actions,
            explanation=self.explain(found, actions),
            states_processed=self.astar.states_processed,
            open_states=self.astar.open_count,
        )

    def explain(self, found: bool, actions: list[Any]) -> str:
        if not found:
            return "No goal state reachable"
        return ", ".join(self.describe_action(a) for a in actions) or "Already at goal"

    def describe_action(self, action: Any) -> str:
        describe = getattr(action, "describe", None)
        return describe() if callable(describe) else repr(action)

    def comparator(self) -> Any:
        """The cost comparator in use (None for natural ordering)."""
        return None

    # =========================================================================
    # Introspection
    # =========================================================================

    def states_processed(self) -> int:
        return self.astar.states_processed

    def open_states_remaining(self) -> int:
        return self.astar.open_count

    def scalarize(self, cost: Any) -> float:
        """Single number for a cost, used for averages in debug output."""
        if isinstance(cost, ScalarCost):
            return float(cost.value)
        if isinstance(cost, VectorCost):
            comparator = self.comparator()
            if isinstance(comparator, WeightedProjection):
                return comparator.project(cost)
            return float(sum(cost.components().values()))
        return float(cost)

    def describe_cost(self, cost: Any) -> Any:
        if isinstance(cost, ScalarCost):
            return cost.value
        if isinstance(cost, VectorCost):
            return cost.components()
        return cost

    def debug_info(self) -> dict[str, Any]:
        info = super().debug_info()

        current = self.astar.current_action()
        if current is not None:
            action, cost = current
            info["current_action"] = self.describe_action(action)
            info["current_cost"] = self.describe_cost(cost)
        else:
            info["current_action"] = None
            info["current_cost"] = None

        fscores = self.astar.fscores()
        if fscores:
            values = [self.scalarize(cost) for cost in fscores.values()]
            info["average_cost"] = sum(values) / len(values)
            info["free_paths"] = sum(1 for cost in fscores.values() if cost == self.identity)
        else:
            info["average_cost"] = None
            info["free_paths"] = 0

        info["tuning"] = self.tuning()
        return info

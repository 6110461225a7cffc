"""
Pytest fixtures for Tactician tests.
"""

from __future__ import annotations
from typing import Any

import pytest

from ..games.strategy import GameState, Map, Piece
from ..search import AStar, Attempt, ScalarCost, SearchResult


class WeightedGraph:
    """
    An explicit graph for driving the engine in tests.

    Actions are the names of the node to move to, so a plan reads as
    the list of nodes visited after the start. Edge weights are ints
    (wrapped in ScalarCost) or ready-made cost objects.
    """

    def __init__(
        self,
        edges: dict[str, list[tuple[str, Any]]],
        goals: set[str],
        heuristic: dict[str, Any] | None = None,
        zero: Any = None,
    ):
        self.edges = {
            node: [(target, self._cost(weight)) for target, weight in targets]
            for node, targets in edges.items()
        }
        self.goals = goals
        self.zero = zero if zero is not None else ScalarCost()
        self.estimates = {
            node: self._cost(value) for node, value in (heuristic or {}).items()
        }
        self.weighed: list[tuple[str, str]] = []

    @staticmethod
    def _cost(weight: Any) -> Any:
        return ScalarCost(weight) if isinstance(weight, int) else weight

    def actions_of(self, node: str) -> list[str]:
        return [target for target, _ in self.edges.get(node, [])]

    def is_goal(self, start: str, node: str) -> bool:
        return node in self.goals

    def heuristic(self, node: str) -> Any:
        return self.estimates.get(node, self.zero)

    def weigh(self, start: str, before: str, after: str, action: str) -> Any:
        self.weighed.append((before, after))
        for target, cost in self.edges[before]:
            if target == action:
                return cost
        raise AssertionError(f"No edge {before} -> {action}")

    def apply(self, node: str, action: str) -> Attempt:
        if any(target == action for target, _ in self.edges.get(node, [])):
            return Attempt.success(action)
        return Attempt.failure(node)

    def search(
        self,
        astar: AStar | None = None,
        start: str = "S",
        identity: Any = None,
        infinity: Any = None,
        less_than: Any = None,
    ) -> SearchResult:
        astar = astar or AStar()
        extra = {} if less_than is None else {"less_than": less_than}
        return astar.search(
            start,
            identity if identity is not None else ScalarCost.minimum(),
            infinity if infinity is not None else ScalarCost.maximum(),
            self.actions_of,
            self.is_goal,
            self.heuristic,
            self.weigh,
            self.apply,
            **extra,
        )

    def path_cost(self, start: str, path: list[str]) -> int:
        total, node = 0, start
        for target in path:
            total += dict(self.edges[node])[target].value
            node = target
        return total


@pytest.fixture
def make_graph():
    """Factory for explicit weighted graphs."""
    return WeightedGraph


def place(m: Map, *objects: tuple[tuple[int, int], Piece, int]) -> Map:
    """Put (coord, piece, team) objects on a map."""
    for coord, piece, team in objects:
        ok, m = m.update(coord, piece, team)
        assert ok, f"Could not place {piece.name} at {coord}"
    return m


@pytest.fixture
def duel_state() -> GameState:
    """
    3x3 map, one melee unit per team in opposite corners.

    Team 0 at (0, 2), team 1 at (2, 0); 2 MP and 1 AP per turn.
    """
    m = place(
        Map(width=3, height=3, starting_mp=2, starting_ap=1),
        ((0, 2), Piece.MELEE, 0),
        ((2, 0), Piece.MELEE, 1),
    )
    return GameState.new(m)


@pytest.fixture
def adjacent_state() -> GameState:
    """
    3x3 map where team 0's melee unit stands next to team 1's.

    Team 0 at (1, 1), team 1 at (2, 1); team 1 also has a blaster at (2, 2).
    """
    m = place(
        Map(width=3, height=3, starting_mp=1, starting_ap=1),
        ((1, 1), Piece.MELEE, 0),
        ((2, 1), Piece.MELEE, 1),
        ((2, 2), Piece.BLASTER, 1),
    )
    return GameState.new(m)


@pytest.fixture
def walled_state() -> GameState:
    """
    4x1 corridor: team 0 sniper, a wall, empty tile, team 1 melee.
    """
    m = place(
        Map(width=4, height=1, starting_mp=0, starting_ap=2),
        ((0, 0), Piece.SNIPER, 0),
        ((1, 0), Piece.WALL, 0),
        ((3, 0), Piece.MELEE, 1),
    )
    return GameState.new(m)

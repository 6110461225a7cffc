"""
A* Search - Generic best-first decision procedure.

For a state n, g(n) is the cheapest known cost from the start and
f(n) = g(n) + h(n) orders the frontier:

    frontier := [start]; g[start] := identity; f[start] := h(start)
    while frontier is not empty
        current := first frontier member with the lowest f
        if is_goal(start, current): return path to current
        move current from frontier to closed
        for each action of current
            neighbour := apply(current, action); skip failures and closed
            tentative := g[current] + weigh(start, current, neighbour, action)
            if tentative < g[neighbour]:
                record history, g and f; queue neighbour if not queued
    return failure

Deviation from textbook A*: closed states are never re-opened, even if
a cheaper route to them is found later. Pass reopen_closed=True for the
strict behaviour.

The frontier is an insertion-ordered list, so ties on f are broken by
discovery order (first found wins) and repeated runs are reproducible.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Generic, NamedTuple, TypeVar
import logging

from .cost import natural_less
from .errors import CorruptHistoryError, SearchNotStartedError
from .policies import (
    ActionsOf, Apply, DecisionPolicies, Heuristic, IsGoal, LessThan, Weigh,
)

S = TypeVar("S")
A = TypeVar("A")
C = TypeVar("C")

logger = logging.getLogger(__name__)


class SearchStatus(Enum):
    """Lifecycle of one search invocation."""
    IDLE = "idle"
    RUNNING = "running"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class SearchResult(NamedTuple):
    """Outcome of a search. Unpacks as (found, actions)."""
    found: bool
    actions: list[Any]


class AStar(Generic[S, A, C]):
    """
    Best-first search over an implicit state graph.

    One instance belongs to one decision owner. Every call to start()
    or search() discards the previous run's tables; the introspection
    accessors read whatever the last completed step left behind.

    Usage:
        astar = AStar()
        found, actions = astar.search(
            start, ScalarCost.minimum(), ScalarCost.maximum(),
            actions_of, is_goal, heuristic, weigh, apply,
        )
        astar.states_processed  # closed-set size
    """

    def __init__(self, reopen_closed: bool = False):
        self.reopen_closed = reopen_closed
        self._policies: DecisionPolicies | None = None
        self._status = SearchStatus.IDLE
        self._result = SearchResult(False, [])
        self._reset(None, None, None)

    def _reset(self, start: S | None, identity: C | None, infinity: C | None):
        self._start = start
        self._identity = identity
        self._infinity = infinity
        self._remaining: list[S] = []
        self._queued: set[S] = set()
        self._evaluated: set[S] = set()
        self._g_score: dict[S, C] = {}
        self._f_score: dict[S, C] = {}
        self._history: dict[S, tuple[S, A]] = {}
        self._current: tuple[A, C] | None = None

    # =========================================================================
    # Running
    # =========================================================================

    def search(
        self,
        start: S,
        identity: C,
        infinity: C,
        actions_of: ActionsOf,
        is_goal: IsGoal,
        heuristic: Heuristic,
        weigh: Weigh,
        apply: Apply,
        less_than: LessThan = natural_less,
    ) -> SearchResult:
        """Run a search to completion and return (found, actions)."""
        self.start(
            start, identity, infinity,
            actions_of, is_goal, heuristic, weigh, apply, less_than,
        )
        while self.step() is SearchStatus.RUNNING:
            pass
        return self.result

    def search_with(
        self,
        start: S,
        identity: C,
        infinity: C,
        policies: DecisionPolicies,
    ) -> SearchResult:
        """Run a search using a bundled set of policies."""
        return self.search(
            start, identity, infinity,
            policies.actions_of,
            policies.is_goal,
            policies.heuristic,
            policies.weigh,
            policies.apply,
            policies.less_than,
        )

    def start(
        self,
        start: S,
        identity: C,
        infinity: C,
        actions_of: ActionsOf,
        is_goal: IsGoal,
        heuristic: Heuristic,
        weigh: Weigh,
        apply: Apply,
        less_than: LessThan = natural_less,
    ) -> None:
        """Prepare a fresh step-wise search from the starting state."""
        self._policies = DecisionPolicies(
            actions_of=actions_of,
            is_goal=is_goal,
            heuristic=heuristic,
            weigh=weigh,
            apply=apply,
            less_than=less_than,
        )
        self._reset(start, identity, infinity)
        self._remaining = [start]
        self._queued = {start}
        self._g_score[start] = identity
        self._f_score[start] = heuristic(start)
        self._result = SearchResult(False, [])
        self._status = SearchStatus.RUNNING
        logger.debug("Search started from %r", start)

    def step(self) -> SearchStatus:
        """
        Perform one select / goal-test / expand iteration.

        Returns the status after the step. Calling step() on a finished
        search is a no-op that returns the final status.
        """
        if self._status is SearchStatus.IDLE or self._policies is None:
            raise SearchNotStartedError("step() called before start()")
        if self._status is not SearchStatus.RUNNING:
            return self._status

        if not self._remaining:
            return self._exhaust()

        policies = self._policies
        index = self._select()
        current = self._remaining[index]

        link = self._history.get(current)
        if link is not None:
            self._current = (link[1], self._f_score.get(current, self._infinity))

        if policies.is_goal(self._start, current):
            actions = self._reconstruct(current)
            self._result = SearchResult(True, actions)
            self._status = SearchStatus.FOUND
            logger.debug(
                "Goal found after %d state(s): %d action(s)",
                len(self._evaluated), len(actions),
            )
            return self._status

        del self._remaining[index]
        self._queued.discard(current)
        self._evaluated.add(current)

        # Collect valid neighbours before relaxing any of them
        neighbours: list[tuple[S, A]] = []
        for action in policies.actions_of(current):
            ok, successor = policies.apply(current, action)
            if not ok:
                continue
            if successor in self._evaluated and not self.reopen_closed:
                continue
            neighbours.append((successor, action))

        g_current = self._g_score.get(current, self._infinity)
        for successor, action in neighbours:
            self._relax(current, successor, action, g_current)

        if not self._remaining:
            return self._exhaust()
        return self._status

    def _select(self) -> int:
        """Index of the first frontier member with the lowest fScore."""
        less_than = self._policies.less_than
        best_index = 0
        best = self._f_score.get(self._remaining[0], self._infinity)
        for index in range(1, len(self._remaining)):
            score = self._f_score.get(self._remaining[index], self._infinity)
            if less_than(score, best):
                best_index, best = index, score
        return best_index

    def _relax(self, current: S, successor: S, action: A, g_current: C):
        policies = self._policies
        tentative = g_current + policies.weigh(
            self._start, current, successor, action
        )
        if not policies.less_than(
            tentative, self._g_score.get(successor, self._infinity)
        ):
            return

        # This path to the neighbour is better than any previous one
        self._history[successor] = (current, action)
        self._g_score[successor] = tentative
        self._f_score[successor] = tentative + policies.heuristic(successor)

        if successor in self._evaluated:
            # Only reachable with reopen_closed
            self._evaluated.discard(successor)
        if successor not in self._queued:
            self._remaining.append(successor)
            self._queued.add(successor)

    def _exhaust(self) -> SearchStatus:
        self._result = SearchResult(False, [])
        self._status = SearchStatus.EXHAUSTED
        logger.debug(
            "Search exhausted after %d state(s) without reaching a goal",
            len(self._evaluated),
        )
        return self._status

    def _reconstruct(self, goal: S) -> list[A]:
        """Walk history back from the goal to the start, oldest action first."""
        actions: list[A] = []
        node = goal
        while node != self._start:
            link = self._history.get(node)
            if link is None or len(actions) > len(self._history):
                raise CorruptHistoryError(node, len(actions))
            node, action = link
            actions.append(action)
        actions.reverse()
        return actions

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def result(self) -> SearchResult:
        """Result of the last finished search ((False, []) while running)."""
        found, actions = self._result
        return SearchResult(found, list(actions))

    @property
    def states_processed(self) -> int:
        """Number of states finalized (closed) so far."""
        return len(self._evaluated)

    @property
    def open_count(self) -> int:
        """Number of states discovered but not yet finalized."""
        return len(self._remaining)

    @property
    def remaining(self) -> list[S]:
        return list(self._remaining)

    def current_action(self) -> tuple[A, C] | None:
        """The action leading to the last selected state, with its fScore."""
        return self._current

    def fscores(self) -> dict[S, C]:
        return dict(self._f_score)

    def gscores(self) -> dict[S, C]:
        return dict(self._g_score)

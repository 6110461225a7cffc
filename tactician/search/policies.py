"""
Decision Policies - The contract between the search engine and a game.

A domain adapter supplies five pure functions and a comparator:
- actions_of(state) -> sequence of actions (finite)
- is_goal(start, state) -> bool
- heuristic(state) -> cost estimate to goal
- weigh(start, from_state, to_state, action) -> transition cost
- apply(state, action) -> Attempt(ok, new_state)
- less_than(cost_a, cost_b) -> bool

Policies must not mutate their arguments and must be deterministic for
reproducible search traces. Heuristics need not be admissible; an
inadmissible heuristic yields a valid but not necessarily optimal plan.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Sequence, TypeVar

from .cost import natural_less

S = TypeVar("S")
A = TypeVar("A")
C = TypeVar("C")


class Attempt(NamedTuple):
    """Outcome of applying an action. Unpacks as (ok, state)."""
    ok: bool
    state: Any

    @classmethod
    def success(cls, state: Any) -> Attempt:
        return cls(True, state)

    @classmethod
    def failure(cls, state: Any) -> Attempt:
        """Failed attempt; carries the unchanged input state."""
        return cls(False, state)


ActionsOf = Callable[[S], Sequence[A]]
IsGoal = Callable[[S, S], bool]
Heuristic = Callable[[S], C]
Weigh = Callable[[S, S, S, A], C]
Apply = Callable[[S, A], Attempt]
LessThan = Callable[[C, C], bool]


@dataclass(frozen=True)
class DecisionPolicies:
    """
    The five policies plus comparator, bundled for one domain.

    Each field is an independent callable; adapters build one bundle
    per decision owner (closures may capture caller-owned config).
    """
    actions_of: ActionsOf
    is_goal: IsGoal
    heuristic: Heuristic
    weigh: Weigh
    apply: Apply
    less_than: LessThan = natural_less

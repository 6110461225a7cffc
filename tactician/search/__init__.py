"""
Search - The generic best-first decision engine.

The engine knows nothing about any game. A domain supplies five
policies plus a comparator, and the engine returns the cheapest action
sequence it can find from a start state to a goal state.
"""

from .astar import AStar, SearchResult, SearchStatus
from .cost import (
    MAX_PENALTY,
    ScalarCost,
    VectorCost,
    WeightedProjection,
    natural_less,
    total,
)
from .errors import CorruptHistoryError, SearchError, SearchNotStartedError
from .policies import Attempt, DecisionPolicies, LessThan
from .random_walk import random_decide

__all__ = [
    "AStar",
    "SearchResult",
    "SearchStatus",
    "MAX_PENALTY",
    "ScalarCost",
    "VectorCost",
    "WeightedProjection",
    "natural_less",
    "total",
    "CorruptHistoryError",
    "SearchError",
    "SearchNotStartedError",
    "Attempt",
    "DecisionPolicies",
    "LessThan",
    "random_decide",
]

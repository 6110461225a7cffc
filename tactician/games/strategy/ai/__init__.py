"""
Strategy AI - Search-driven controllers for the tactics game.

Four cases, each a different way of pricing actions:
- CaseOne: vector costs compared by a personality
- CaseTwo: case one plus a price on unused resources
- CaseThree: scalar penalties for failing tactical questions
- CaseFour: spending-based costs with a predictive heuristic
"""

from .case_four import ActionPenalties, CaseFour, Predictions, TurnHeuristic
from .case_one import CaseOne
from .case_three import CaseThree, Penalties
from .case_two import CaseTwo
from .costs import ResourceCost, StrategyCost
from .personality import (
    AGGRESSIVE,
    BALANCED,
    CAUTIOUS,
    PERSONALITIES,
    RECKLESS,
    Personality,
    create_random_personality,
    get_personality,
)

__all__ = [
    "ActionPenalties",
    "CaseFour",
    "Predictions",
    "TurnHeuristic",
    "CaseOne",
    "CaseThree",
    "Penalties",
    "CaseTwo",
    "ResourceCost",
    "StrategyCost",
    "AGGRESSIVE",
    "BALANCED",
    "CAUTIOUS",
    "PERSONALITIES",
    "RECKLESS",
    "Personality",
    "create_random_personality",
    "get_personality",
]

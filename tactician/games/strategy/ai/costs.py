"""
Strategy Costs - Vector costs used by the personality-driven cases.

Remember that these are COST systems: larger components are ruled out
first, and a personality decides how components trade off.
"""

from __future__ import annotations
from dataclasses import dataclass

from ....search.cost import VectorCost


@dataclass(frozen=True)
class StrategyCost(VectorCost):
    """Penalties weighed by the first case."""
    # Enemies still alive (prioritises winning)
    remaining_enemies: int = 0
    # Allies lost this action (prioritises staying alive)
    lost_allies: int = 0
    # Allies an enemy could hit (prioritises staying hidden)
    allies_at_risk: int = 0
    # Enemies no ally can hit (prioritises closing in)
    enemies_out_of_range: int = 0


@dataclass(frozen=True)
class ResourceCost(VectorCost):
    """Penalties weighed by the second case."""
    remaining_enemies: int = 0
    lost_allies: int = 0
    allies_at_risk: int = 0
    # Resources left over when the turn ends
    unused_mp: int = 0
    unused_ap: int = 0

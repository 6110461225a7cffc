"""
Strategy Personalities - Configurable play styles.

A personality is a set of multipliers over cost components. The same
search with a different personality prefers different plans:
- Aggressive personalities care most about enemies left alive
- Cautious personalities care most about allies lost or exposed
- Reckless personalities barely care about their own units
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable
import copy
import random

from ....search.cost import WeightedProjection

# Resources left at the end of a turn are weighed heavily by default
DEFAULT_MULTIPLIERS: dict[str, float] = {
    "remaining_enemies": 1.0,
    "lost_allies": 1.0,
    "allies_at_risk": 1.0,
    "enemies_out_of_range": 1.0,
    "unused_mp": 5.0,
    "unused_ap": 5.0,
}


@dataclass
class Personality:
    """
    A strategy personality that defines play style.

    The weights double as the comparator handed to the search engine,
    so tuning them changes the next decision immediately.
    """
    name: str
    description: str = ""
    weights: WeightedProjection = field(
        default_factory=lambda: WeightedProjection(dict(DEFAULT_MULTIPLIERS))
    )

    # Metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> Personality:
        return copy.deepcopy(self)

    def multipliers(self) -> dict[str, float]:
        return dict(self.weights.multipliers)

    def set_multiplier(self, component: str, value: float):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"Multiplier for {component} must be a non-negative number")
        multipliers = {**self.weights.multipliers, component: float(value)}
        if not any(multipliers.values()):
            raise ValueError("At least one multiplier must be positive")
        self.weights.multipliers[component] = float(value)

    def require_weight(self, components: Iterable[str]):
        """Raise ValueError unless one of components has a positive multiplier."""
        components = list(components)
        if not any(self.weights.weight(name) for name in components):
            raise ValueError(
                f"At least one of {', '.join(components)} must have a positive multiplier"
            )


def _weights(**overrides: float) -> WeightedProjection:
    multipliers = dict(DEFAULT_MULTIPLIERS)
    multipliers.update(overrides)
    return WeightedProjection(multipliers)


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Weighs every concern equally",
    weights=_weights(),
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Chases kills and closes distance, accepts exposure",
    weights=_weights(
        remaining_enemies=3.0,
        allies_at_risk=0.5,
        enemies_out_of_range=2.0,
    ),
)


CAUTIOUS = Personality(
    name="Cautious",
    description="Keeps units alive and out of enemy range",
    weights=_weights(
        lost_allies=5.0,
        allies_at_risk=3.0,
        enemies_out_of_range=0.5,
    ),
)


RECKLESS = Personality(
    name="Reckless",
    description="Ignores its own losses entirely",
    weights=_weights(
        remaining_enemies=5.0,
        lost_allies=0.2,
        allies_at_risk=0.0,
    ),
)


# All predefined personalities
PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "cautious": CAUTIOUS,
    "reckless": RECKLESS,
}


def get_personality(name: str) -> Personality:
    """A private copy of a predefined personality."""
    try:
        return PERSONALITIES[name.lower()].copy()
    except KeyError:
        raise ValueError(
            f"Unknown personality {name!r} (choose from {', '.join(PERSONALITIES)})"
        ) from None


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    Create a personality with random variations.

    Args:
        name: Name for the personality
        base: Base personality to vary from (default: BALANCED)
        variance: How much to vary (0-1)
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    base = base or BALANCED

    def vary(value: float) -> float:
        """Apply random variation to a value."""
        delta = value * variance * (rng.random() * 2 - 1)
        return max(0.0, value + delta)

    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        weights=WeightedProjection({
            component: vary(value)
            for component, value in base.weights.multipliers.items()
        }),
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )

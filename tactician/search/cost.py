"""
Cost Models - Value types the search engine accumulates and compares.

A cost must support:
- Addition (costs only accumulate)
- Scaling by a non-negative integer
- Ordering through a comparator (natural "<" by default)
- A minimum/identity value and a maximum/"infinity" value

Remember that these are COST systems: larger values are ruled out first.
Components saturate at MAX_PENALTY so that maximum + x == maximum.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, TypeVar

C = TypeVar("C")

MAX_PENALTY = 2**32 - 1


def _saturate(value: int) -> int:
    return min(value, MAX_PENALTY)


def natural_less(a: Any, b: Any) -> bool:
    """Default comparator: the cost type's own ordering."""
    return a < b


def total(costs: Iterable[C], identity: C) -> C:
    """Sum costs starting from the identity value."""
    result = identity
    for cost in costs:
        result = result + cost
    return result


@dataclass(frozen=True, order=True)
class ScalarCost:
    """A single non-negative integer penalty with natural ordering."""
    value: int = 0

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Cost cannot be negative: {self.value}")

    def __add__(self, other: ScalarCost) -> ScalarCost:
        return ScalarCost(_saturate(self.value + other.value))

    def __mul__(self, multiplier: int) -> ScalarCost:
        return ScalarCost(_saturate(self.value * multiplier))

    __rmul__ = __mul__

    @classmethod
    def minimum(cls) -> ScalarCost:
        return cls(0)

    @classmethod
    def maximum(cls) -> ScalarCost:
        return cls(MAX_PENALTY)


@dataclass(frozen=True)
class VectorCost:
    """
    Base for costs made of named non-negative integer penalties.

    Subclasses declare their components as integer dataclass fields:

        @dataclass(frozen=True)
        class RiskCost(VectorCost):
            enemies_left: int = 0
            allies_lost: int = 0

    Addition and scaling are component-wise. Vectors have no natural
    ordering; compare them with a WeightedProjection or another comparator.
    """

    def components(self) -> dict[str, int]:
        """Component name -> value, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __add__(self, other: VectorCost) -> VectorCost:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot add {type(other).__name__} to {type(self).__name__}"
            )
        return type(self)(**{
            name: _saturate(value + getattr(other, name))
            for name, value in self.components().items()
        })

    def __mul__(self, multiplier: int) -> VectorCost:
        return type(self)(**{
            name: _saturate(value * multiplier)
            for name, value in self.components().items()
        })

    __rmul__ = __mul__

    @classmethod
    def minimum(cls) -> VectorCost:
        return cls(**{f.name: 0 for f in fields(cls)})

    @classmethod
    def maximum(cls) -> VectorCost:
        return cls(**{f.name: MAX_PENALTY for f in fields(cls)})


@dataclass
class WeightedProjection:
    """
    Comparator that projects vector costs onto a weighted scalar.

    Each component is multiplied by its multiplier (1.0 when absent) and
    the sums are compared. Swapping multipliers yields a different
    decision "personality" without touching the cost type or the search.
    Multipliers may be tuned in place between searches.
    """
    multipliers: dict[str, float] = field(default_factory=dict)

    def weight(self, component: str) -> float:
        return self.multipliers.get(component, 1.0)

    def project(self, cost: VectorCost) -> float:
        """Weighted scalar value of a vector cost."""
        return sum(
            value * self.weight(name)
            for name, value in cost.components().items()
        )

    def __call__(self, a: VectorCost, b: VectorCost) -> bool:
        return self.project(a) < self.project(b)


"""
Controller - Interface for non-player decision-making.

A Controller takes a game state and returns a Decision: the whole
sequence of actions it wants to play, start to finish. Controllers also
expose debugging introspection so hosts can show how hard the decision
was (states processed, frontier size, current best guess).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ControllerType(Enum):
    """Kinds of controller a seat can be given."""
    HUMAN = "human"
    IDLE = "idle"
    RANDOM = "random"
    ASTAR_ONE = "astar_one"
    ASTAR_TWO = "astar_two"
    ASTAR_THREE = "astar_three"
    ASTAR_FOUR = "astar_four"
    TICTACTOE = "tictactoe"


@dataclass
class Decision:
    """
    A decision made by a controller.

    Contains:
    - Whether a goal was reached
    - The actions to play, oldest first
    - Explanation (for UI/debugging)
    - Search effort (for debugging)
    """
    found: bool
    actions: list[Any] = field(default_factory=list)
    explanation: str = ""

    # Search effort
    states_processed: int = 0
    open_states: int = 0

    @classmethod
    def failed(cls, explanation: str) -> Decision:
        return cls(found=False, explanation=explanation)


class Controller(ABC):
    """
    Abstract base class for controllers.

    Implementations range from fixed scripts to full best-first search.
    Introspection defaults to zero for controllers that do not search.
    """

    controller_type: ControllerType

    @abstractmethod
    def decide(self, state: Any) -> Decision:
        """
        Plan the actions to take from a state.

        Args:
            state: Current game state

        Returns:
            Decision with the planned actions
        """
        pass

    def states_processed(self) -> int:
        return 0

    def open_states_remaining(self) -> int:
        return 0

    def debug_info(self) -> dict[str, Any]:
        """Introspection snapshot for hosts and the debug endpoint."""
        return {
            "controller": self.get_name(),
            "states_processed": self.states_processed(),
            "open_states": self.open_states_remaining(),
        }

    def tuning(self) -> dict[str, Any]:
        """Current tunable settings (empty when nothing can be tuned)."""
        return {}

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        """
        Update tunable settings in place and return the new settings.

        Raises ValueError for unknown settings.
        """
        if settings:
            raise ValueError(f"{self.get_name()} has no tunable settings")
        return {}

    def get_name(self) -> str:
        """Get the controller's name/identifier."""
        return self.__class__.__name__

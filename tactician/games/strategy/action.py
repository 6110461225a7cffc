"""
Actions - The things a controller can do on its turn.

A turn is a sequence of actions ending with END_TURN:
1. Select a unit (or cancel the selection)
2. Move the selected unit one tile at a time (spends MP)
3. Attack a tile in sight and in range (spends AP)
4. End the turn (restores MP/AP and passes play on)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .map import Coord


class ActionTag(Enum):
    """Types of actions in the tactics game."""
    END_TURN = "end_turn"
    CANCEL_SELECTION = "cancel_selection"
    SELECT_UNIT = "select_unit"
    MOVE_UNIT = "move_unit"
    ATTACK = "attack"


ACTION_NAMES: dict[ActionTag, str] = {
    ActionTag.END_TURN: "End turn",
    ActionTag.CANCEL_SELECTION: "Deselect unit",
    ActionTag.SELECT_UNIT: "Select unit",
    ActionTag.MOVE_UNIT: "Move unit",
    ActionTag.ATTACK: "Attack",
}


@dataclass(frozen=True)
class Action:
    """
    An action and the tile it targets.

    location is None for END_TURN and CANCEL_SELECTION.
    """
    tag: ActionTag = ActionTag.END_TURN
    location: Coord | None = None

    @classmethod
    def end_turn(cls) -> Action:
        return cls(ActionTag.END_TURN)

    @classmethod
    def cancel_selection(cls) -> Action:
        return cls(ActionTag.CANCEL_SELECTION)

    @classmethod
    def select(cls, location: Coord) -> Action:
        return cls(ActionTag.SELECT_UNIT, tuple(location))

    @classmethod
    def move(cls, location: Coord) -> Action:
        return cls(ActionTag.MOVE_UNIT, tuple(location))

    @classmethod
    def attack(cls, location: Coord) -> Action:
        return cls(ActionTag.ATTACK, tuple(location))

    def describe(self) -> str:
        """Human-readable form, e.g. 'Move unit (2, 3)'."""
        name = ACTION_NAMES[self.tag]
        if self.location is None:
            return name
        x, y = self.location
        return f"{name} ({x}, {y})"

    def to_dict(self) -> dict:
        return {
            "tag": self.tag.value,
            "location": list(self.location) if self.location is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Action:
        location = data.get("location")
        return cls(
            tag=ActionTag(data["tag"]),
            location=tuple(location) if location is not None else None,
        )

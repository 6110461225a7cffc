"""
Game Adapters - What the session host needs to know about a game.

The host is game-agnostic. Each adapter answers the same questions for
its game: who is to move, is the game over, how to apply an action and
how to convert actions and states to plain dictionaries for the API.

Seats are identified by strings: team numbers ("0", "1") for the
tactics game, "X" and "O" for tic-tac-toe.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any

from ..games import GameKind
from ..games.strategy import (
    Action,
    ActionTag,
    GameState,
    GameStatus,
    Map,
    game_status,
    loads,
    max_turns,
    take_action,
)
from ..games.tictactoe import Board, Player, game_over, make_move
from ..search.policies import Attempt


class GameAdapter(ABC):
    """Host-facing view of one game's rules."""

    kind: GameKind

    @abstractmethod
    def initial_state(self, map_text: str | None = None, width: int = 5, height: int = 5) -> Any:
        """Starting state (map options are ignored by games without maps)."""

    @abstractmethod
    def seats(self, state: Any) -> list[str]:
        """Every seat taking part in the game."""

    @abstractmethod
    def seat_of(self, state: Any) -> str:
        """Seat that moves next."""

    @abstractmethod
    def apply(self, state: Any, action: Any) -> Attempt:
        pass

    @abstractmethod
    def is_over(self, state: Any) -> bool:
        pass

    @abstractmethod
    def winner(self, state: Any) -> str | None:
        """Winning seat, or None for a tie or a game in progress."""

    @abstractmethod
    def parse_action(self, data: dict[str, Any]) -> Any:
        """Build an action from its dictionary form. Raises ValueError."""

    @abstractmethod
    def action_to_dict(self, action: Any) -> dict[str, Any]:
        pass

    @abstractmethod
    def describe(self, action: Any) -> str:
        pass

    @abstractmethod
    def state_to_dict(self, state: Any) -> dict[str, Any]:
        pass


class StrategyAdapter(GameAdapter):
    kind = GameKind.STRATEGY

    def initial_state(self, map_text: str | None = None, width: int = 5, height: int = 5) -> GameState:
        if map_text is not None:
            m = loads(map_text)
        else:
            m = Map.default(width, height)
        return GameState.new(m)

    def seats(self, state: GameState) -> list[str]:
        return [str(team) for team, _ in state.teams]

    def seat_of(self, state: GameState) -> str:
        return str(state.current_team)

    def apply(self, state: GameState, action: Action) -> Attempt:
        return take_action(state, action)

    def is_over(self, state: GameState) -> bool:
        return game_status(state)[0] is not GameStatus.IN_PROGRESS

    def winner(self, state: GameState) -> str | None:
        status, team = game_status(state)
        return str(team) if status is GameStatus.WON else None

    def parse_action(self, data: dict[str, Any]) -> Action:
        try:
            tag = ActionTag(data["tag"])
        except (KeyError, ValueError):
            raise ValueError(f"Unknown action tag: {data.get('tag')!r}") from None

        location = data.get("location")
        if tag in (ActionTag.END_TURN, ActionTag.CANCEL_SELECTION):
            return Action(tag)
        if location is None or len(location) != 2:
            raise ValueError(f"{tag.value} needs a location [x, y]")
        return Action(tag, (int(location[0]), int(location[1])))

    def action_to_dict(self, action: Action) -> dict[str, Any]:
        return action.to_dict()

    def describe(self, action: Action) -> str:
        return action.describe()

    def state_to_dict(self, state: GameState) -> dict[str, Any]:
        m = state.map
        status, _ = game_status(state)
        return {
            "width": m.width,
            "height": m.height,
            "starting_mp": m.starting_mp,
            "starting_ap": m.starting_ap,
            "objects": [
                {"x": x, "y": y, "team": team, "piece": piece.name.lower()}
                for (x, y), team, piece in m.objects()
            ],
            "teams": {str(team): count for team, count in state.teams},
            "current_team": state.current_team,
            "selection": list(state.selection) if state.selection is not None else None,
            "remaining_mp": state.remaining_mp,
            "remaining_ap": state.remaining_ap,
            "turn_number": state.turn_number,
            "max_turns": max_turns(m),
            "status": status.value,
            "winner": self.winner(state),
        }


class TicTacToeAdapter(GameAdapter):
    kind = GameKind.TICTACTOE

    def initial_state(self, map_text: str | None = None, width: int = 5, height: int = 5) -> Board:
        return Board()

    def seats(self, state: Board) -> list[str]:
        return [Player.X.value, Player.O.value]

    def seat_of(self, state: Board) -> str:
        return state.current.value

    def apply(self, state: Board, action: tuple[int, int]) -> Attempt:
        return make_move(state, action)

    def is_over(self, state: Board) -> bool:
        return game_over(state)[0]

    def winner(self, state: Board) -> str | None:
        over, winner = game_over(state)
        if over and winner is not Player.N:
            return winner.value
        return None

    def parse_action(self, data: dict[str, Any]) -> tuple[int, int]:
        location = data.get("location")
        if location is None or len(location) != 2:
            raise ValueError("A move needs a location [x, y]")
        return (int(location[0]), int(location[1]))

    def action_to_dict(self, action: tuple[int, int]) -> dict[str, Any]:
        return {"location": list(action)}

    def describe(self, action: tuple[int, int]) -> str:
        x, y = action
        return f"Place ({x}, {y})"

    def state_to_dict(self, state: Board) -> dict[str, Any]:
        over, _ = game_over(state)
        return {
            "board": state.render().splitlines(),
            "current": state.current.value,
            "turn_number": state.turn_number,
            "status": "over" if over else "in_progress",
            "winner": self.winner(state),
        }


ADAPTERS: dict[GameKind, GameAdapter] = {
    GameKind.STRATEGY: StrategyAdapter(),
    GameKind.TICTACTOE: TicTacToeAdapter(),
}


def get_adapter(game: GameKind | str) -> GameAdapter:
    return ADAPTERS[GameKind(game)]

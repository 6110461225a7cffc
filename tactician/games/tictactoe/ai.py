"""
Tic-Tac-Toe AI - One-move search with threat penalties.

Each move is priced by the position it leaves behind:
- Leaving the opponent one move from winning is expensive, and every
  additional such line is more expensive still
- Setting up our own near-wins earns a reduction
- Any move that does not win costs at least the base penalty

The goal is simply "one move has been made", so the search returns the
single cheapest move.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ...controllers.base import ControllerType
from ...controllers.search import SearchController
from ...search.cost import ScalarCost
from ...search.policies import DecisionPolicies
from ...controllers.tuning import apply_settings, config_values, reject_unknown
from .state import Board, Move, game_over, make_move, near_wins, valid_moves


@dataclass
class MovePenalties:
    """Penalties (and reductions) applied to a move. Tunable between decisions."""
    # These are BAD
    opponent_near_win: int = 10
    opponent_near_win_additional: int = 20
    unoccupied: int = 1

    # Here's some reductions
    near_win_initial_bonus: int = 2
    near_win_additional_bonus: int = 5


class TicTacToeCase(SearchController):
    """Picks the move that leaves the opponent the fewest chances."""

    controller_type = ControllerType.TICTACTOE
    identity = ScalarCost.minimum()
    infinity = ScalarCost.maximum()

    def __init__(self, penalties: MovePenalties | None = None, reopen_closed: bool = False):
        super().__init__(reopen_closed=reopen_closed)
        self.penalties = penalties or MovePenalties()

    def policies(self, state: Board) -> DecisionPolicies:
        return DecisionPolicies(
            actions_of=valid_moves,
            is_goal=self.is_goal,
            heuristic=self.heuristic,
            weigh=self.weigh,
            apply=make_move,
        )

    def is_goal(self, start: Board, state: Board) -> bool:
        return state.moves_made() > start.moves_made()

    def heuristic(self, state: Board) -> ScalarCost:
        return self.identity

    def weigh(self, start: Board, before: Board, after: Board, move: Move) -> ScalarCost:
        p = self.penalties
        mover = before.current

        over, winner = game_over(after)
        if over and winner is mover:
            return self.identity

        penalty = 0
        threats = near_wins(after, mover.opponent)
        if threats:
            penalty += p.opponent_near_win + (threats - 1) * p.opponent_near_win_additional

        bonus = 0
        chances = near_wins(after, mover)
        if chances:
            bonus += p.near_win_initial_bonus + (chances - 1) * p.near_win_additional_bonus

        return ScalarCost(max(0, penalty - bonus) + p.unoccupied)

    def describe_action(self, action: Any) -> str:
        x, y = action
        return f"Place ({x}, {y})"

    def tuning(self) -> dict[str, Any]:
        return config_values(self.penalties)

    def tune(self, settings: dict[str, Any]) -> dict[str, Any]:
        reject_unknown(settings, set(config_values(self.penalties)), self.get_name())
        apply_settings(self.penalties, settings)
        return self.tuning()

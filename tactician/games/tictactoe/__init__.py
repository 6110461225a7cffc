"""
Tic-Tac-Toe - The classic 3x3 game, used to exercise the search engine.
"""

from .ai import MovePenalties, TicTacToeCase
from .state import (
    BOARD_SIZE,
    FIRST_PLAYER,
    Board,
    Move,
    Player,
    game_over,
    make_move,
    near_wins,
    valid_moves,
)

__all__ = [
    "MovePenalties",
    "TicTacToeCase",
    "BOARD_SIZE",
    "FIRST_PLAYER",
    "Board",
    "Move",
    "Player",
    "game_over",
    "make_move",
    "near_wins",
    "valid_moves",
]

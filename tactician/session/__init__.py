"""
Session - Hosts games between humans and controllers.
"""

from .adapters import ADAPTERS, GameAdapter, StrategyAdapter, TicTacToeAdapter, get_adapter
from .game_loop import GameLoop, LoopBusyError, LoopState, TurnResult
from .manager import Session, SessionManager, SessionState

__all__ = [
    "ADAPTERS",
    "GameAdapter",
    "StrategyAdapter",
    "TicTacToeAdapter",
    "get_adapter",
    "GameLoop",
    "LoopBusyError",
    "LoopState",
    "TurnResult",
    "Session",
    "SessionManager",
    "SessionState",
]

"""
Games - Domain adapters that plug into the search engine.

Each game provides immutable states, an action type and pure rules
(action enumeration, application and goal tests), plus controllers
that price actions for the engine.
"""

from enum import Enum


class GameKind(Enum):
    """Games a session can host."""
    STRATEGY = "strategy"
    TICTACTOE = "tictactoe"

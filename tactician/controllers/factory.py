"""
Controller Factory - Builds the controller for a seat.

Game modules are imported lazily so that controllers stay importable
without pulling every game in.
"""

from __future__ import annotations
from typing import Any

from ..games import GameKind
from .base import Controller, ControllerType

STRATEGY_TYPES = (
    ControllerType.IDLE,
    ControllerType.RANDOM,
    ControllerType.ASTAR_ONE,
    ControllerType.ASTAR_TWO,
    ControllerType.ASTAR_THREE,
    ControllerType.ASTAR_FOUR,
)

TICTACTOE_TYPES = (
    ControllerType.RANDOM,
    ControllerType.TICTACTOE,
)


def available_types(game: GameKind | str) -> list[ControllerType]:
    """Controller types a seat in this game can take (HUMAN included)."""
    game = GameKind(game)
    types = STRATEGY_TYPES if game is GameKind.STRATEGY else TICTACTOE_TYPES
    return [ControllerType.HUMAN, *types]


def create_controller(
    game: GameKind | str,
    controller_type: ControllerType | str,
    **config: Any,
) -> Controller | None:
    """
    Create a controller for a game.

    Args:
        game: Which game the seat plays
        controller_type: Kind of controller
        **config: Controller-specific settings (seed, personality, ...)

    Returns:
        The controller, or None for HUMAN seats

    Raises:
        ValueError: Unknown type, or a type the game does not support
    """
    game = GameKind(game)
    controller_type = ControllerType(controller_type)

    if controller_type is ControllerType.HUMAN:
        return None
    if controller_type not in available_types(game):
        raise ValueError(
            f"Controller {controller_type.value!r} is not available for {game.value}"
        )

    if game is GameKind.STRATEGY:
        return _create_strategy_controller(controller_type, config)
    return _create_tictactoe_controller(controller_type, config)


def _create_strategy_controller(controller_type: ControllerType, config: dict[str, Any]) -> Controller:
    from ..games.strategy import Action, has_turn_ended, possible_actions, take_action
    from ..games.strategy.ai import CaseFour, CaseOne, CaseThree, CaseTwo
    from .baseline import IdleController, RandomController

    if controller_type is ControllerType.IDLE:
        return IdleController([Action.end_turn()])
    if controller_type is ControllerType.RANDOM:
        return RandomController(
            possible_actions, has_turn_ended, take_action, seed=config.get("seed"),
        )

    reopen_closed = config.get("reopen_closed", False)
    if controller_type is ControllerType.ASTAR_ONE:
        controller = CaseOne(config.get("personality", "balanced"), reopen_closed=reopen_closed)
    elif controller_type is ControllerType.ASTAR_TWO:
        controller = CaseTwo(
            config.get("personality", "balanced"),
            end_turn_multiplier=config.get("end_turn_multiplier", 1),
            reopen_closed=reopen_closed,
        )
    elif controller_type is ControllerType.ASTAR_THREE:
        controller = CaseThree(reopen_closed=reopen_closed)
    else:
        controller = CaseFour(reopen_closed=reopen_closed)

    tuning = config.get("tuning")
    if tuning:
        controller.tune(tuning)
    return controller


def _create_tictactoe_controller(controller_type: ControllerType, config: dict[str, Any]) -> Controller:
    from ..games.tictactoe import TicTacToeCase, game_over, make_move, valid_moves
    from .baseline import RandomController

    if controller_type is ControllerType.RANDOM:
        def one_move_made(start, board):
            return board.moves_made() > start.moves_made() or game_over(board)[0]

        return RandomController(valid_moves, one_move_made, make_move, seed=config.get("seed"))

    controller = TicTacToeCase(reopen_closed=config.get("reopen_closed", False))
    tuning = config.get("tuning")
    if tuning:
        controller.tune(tuning)
    return controller

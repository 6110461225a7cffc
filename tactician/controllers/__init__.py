"""
Controllers - Who decides what a seat does.

A controller turns a game state into a Decision. Hosts hold one
controller per AI seat; HUMAN seats have none.
"""

from .base import Controller, ControllerType, Decision
from .baseline import IdleController, RandomController
from .factory import available_types, create_controller
from .search import SearchController

__all__ = [
    "Controller",
    "ControllerType",
    "Decision",
    "IdleController",
    "RandomController",
    "available_types",
    "create_controller",
    "SearchController",
]

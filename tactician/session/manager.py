"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Host creates a session (game, map, one controller type per seat)
2. During play:
   - Human seats submit actions one at a time
   - AI seats are asked for a whole turn at once
   - Every accepted action pushes a new state onto the history
3. Game ends or the host deletes the session; nothing is persisted

Seats without a configured controller are HUMAN.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..controllers import Controller, ControllerType, create_controller
from ..games import GameKind
from .adapters import GameAdapter, get_adapter

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    AI_THINKING = "ai_thinking"  # A controller is deciding
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Host deleted it


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The game adapter and state history (oldest first)
    - One controller per AI seat
    - A readable log of every accepted action

    State is NOT persisted.
    """
    session_id: str
    game: GameKind
    adapter: GameAdapter
    created_at: float

    state: SessionState = SessionState.ACTIVE
    history: list[Any] = field(default_factory=list)

    # Seat -> controller type / controller (None for HUMAN)
    seat_types: dict[str, ControllerType] = field(default_factory=dict)
    controllers: dict[str, Controller | None] = field(default_factory=dict)

    action_log: list[str] = field(default_factory=list)

    # Session metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def game_state(self) -> Any:
        return self.history[-1]

    @property
    def current_seat(self) -> str:
        return self.adapter.seat_of(self.game_state)

    def controller_for(self, seat: str) -> Controller | None:
        return self.controllers.get(seat)

    def is_human_turn(self) -> bool:
        return not self.is_over() and self.controller_for(self.current_seat) is None

    def is_over(self) -> bool:
        return self.adapter.is_over(self.game_state)

    def is_active(self) -> bool:
        return self.state in {SessionState.ACTIVE, SessionState.AI_THINKING}

    def winner(self) -> str | None:
        return self.adapter.winner(self.game_state)

    def push_state(self, state: Any):
        self.history.append(state)
        if self.is_over():
            self.state = SessionState.GAME_OVER

    def log_action(self, seat: str, action: Any):
        seat_type = self.seat_types.get(seat, ControllerType.HUMAN)
        entry = (
            f"{len(self.history) - 1}> {seat} ({seat_type.value}): "
            f"{self.adapter.describe(action)}"
        )
        self.action_log.append(entry)
        logger.info("[%s] %s", self.session_id[:8], entry)

    def apply_human_action(self, action: Any) -> bool:
        """Apply an action for the human seat to move. False if illegal."""
        if not self.is_human_turn():
            raise ValueError(f"It is not a human seat's turn (seat {self.current_seat})")

        seat = self.current_seat
        ok, new_state = self.adapter.apply(self.game_state, action)
        if not ok:
            return False
        self.push_state(new_state)
        self.log_action(seat, action)
        return True


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their controllers
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        game: GameKind | str,
        controllers: dict[str, ControllerType | str] | None = None,
        map_text: str | None = None,
        width: int = 5,
        height: int = 5,
        controller_config: dict[str, dict[str, Any]] | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            game: Which game to host
            controllers: Seat -> controller type; missing seats are HUMAN
            map_text: Map in text format (tactics game only)
            width: Default map width when no map text is given
            height: Default map height when no map text is given
            controller_config: Seat -> controller settings

        Returns:
            New Session ready to play

        Raises:
            MapFormatError: The map text is malformed
            ValueError: Unknown seat or unsupported controller
        """
        game = GameKind(game)
        adapter = get_adapter(game)
        initial = adapter.initial_state(map_text, width, height)

        seats = adapter.seats(initial)
        controllers = controllers or {}
        controller_config = controller_config or {}

        unknown = sorted(set(controllers) - set(seats))
        if unknown:
            raise ValueError(
                f"Unknown seat(s) {', '.join(unknown)} (seats are {', '.join(seats)})"
            )

        seat_types: dict[str, ControllerType] = {}
        seat_controllers: dict[str, Controller | None] = {}
        for seat in seats:
            seat_type = ControllerType(controllers.get(seat, ControllerType.HUMAN))
            seat_types[seat] = seat_type
            seat_controllers[seat] = create_controller(
                game, seat_type, **controller_config.get(seat, {}),
            )

        session = Session(
            session_id=str(uuid.uuid4()),
            game=game,
            adapter=adapter,
            created_at=time.time(),
            history=[initial],
            seat_types=seat_types,
            controllers=seat_controllers,
        )
        if session.is_over():
            session.state = SessionState.GAME_OVER

        self._sessions[session.session_id] = session
        logger.info(
            "Created %s session %s with seats %s",
            game.value,
            session.session_id,
            {seat: t.value for seat, t in seat_types.items()},
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory. Returns False if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if reason != "completed" or not session.is_over():
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End finished sessions older than max_age_seconds.

        Returns the IDs removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove

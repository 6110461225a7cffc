"""
API Service - Business logic layer between API and session host.

The service:
1. Translates API requests to session calls
2. Manages sessions and their game loops
3. Maps domain failures to structured error codes
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from .. import __version__
from ..games.strategy import MapFormatError
from ..session import GameLoop, LoopBusyError, Session, SessionManager, SessionState
from .schemas import (
    # Requests
    ActionRequest,
    AdvanceRequest,
    CreateSessionRequest,
    TuningRequest,
    # Responses
    ActionResponse,
    AdvanceResponse,
    DebugResponse,
    HealthResponse,
    SessionResponse,
    TuningResponse,
    # Shared
    SeatInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)

logger = logging.getLogger(__name__)


class APIError(Exception):
    """A request that failed with a structured error code."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create a session with an AI opponent
        response = service.create_session(CreateSessionRequest(
            game="tictactoe", controllers={"O": "tictactoe"},
        ))

        # Play a human move, then let the AI answer
        service.submit_action(response.session_id, ActionRequest(location=[1, 1]))
        service.advance(response.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    environment: str = "development"

    # Finished sessions older than this are dropped when a new one starts
    session_ttl_seconds: int = 3600

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises:
            APIError: INVALID_MAP or INVALID_CONTROLLER
        """
        for stale_id in self.session_manager.cleanup_stale_sessions(self.session_ttl_seconds):
            loop = self._game_loops.pop(stale_id, None)
            if loop is not None:
                loop.shutdown()

        try:
            session = self.session_manager.create_session(
                game=request.game,
                controllers=request.controllers,
                map_text=request.map_text,
                width=request.width,
                height=request.height,
                controller_config=request.controller_config,
            )
        except MapFormatError as e:
            raise APIError(
                ErrorCode.INVALID_MAP, str(e), details={"line": e.line},
            ) from e
        except ValueError as e:
            raise APIError(ErrorCode.INVALID_CONTROLLER, str(e)) from e

        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse:
        return self._session_to_response(self._require_session(session_id))

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session and release its game loop."""
        loop = self._game_loops.pop(session_id, None)
        if loop is not None:
            loop.shutdown()
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Play
    # =========================================================================

    def submit_action(self, session_id: str, request: ActionRequest) -> ActionResponse:
        """
        Apply a human action.

        Raises:
            APIError: SESSION_NOT_FOUND or INVALID_ACTION
        """
        session = self._require_session(session_id)
        if not session.is_human_turn():
            raise APIError(
                ErrorCode.INVALID_ACTION,
                f"Seat {session.current_seat} is not controlled by a human",
                status_code=409,
            )

        try:
            action = session.adapter.parse_action(request.model_dump())
        except (TypeError, ValueError) as e:
            raise APIError(ErrorCode.INVALID_ACTION, str(e)) from e

        description = session.adapter.describe(action)
        if not session.apply_human_action(action):
            raise APIError(
                ErrorCode.INVALID_ACTION,
                f"Illegal action: {description}",
                details={"action": session.adapter.action_to_dict(action)},
            )

        return ActionResponse(
            session_id=session_id,
            success=True,
            action=description,
            session=self._session_to_response(session),
        )

    def advance(self, session_id: str, request: AdvanceRequest | None = None) -> AdvanceResponse:
        """
        Let AI seats play until a human seat is to move or the game ends.

        Raises:
            APIError: SESSION_NOT_FOUND, or VALIDATION_ERROR (409) while AI
                seats of this session are already playing
        """
        session = self._require_session(session_id)
        loop = self._game_loops[session_id]
        max_decisions = request.max_decisions if request else None

        try:
            result = loop.run_until_human(max_decisions=max_decisions)
        except LoopBusyError as e:
            raise APIError(
                ErrorCode.VALIDATION_ERROR,
                "AI seats are already playing",
                status_code=409,
            ) from e
        return AdvanceResponse(
            session_id=session_id,
            success=result.success,
            loop_state=result.loop_state.value,
            actions=result.actions,
            decisions=result.decisions,
            states_processed=result.states_processed,
            errors=result.errors,
            warnings=result.warnings,
            session=self._session_to_response(session),
        )

    # =========================================================================
    # Introspection and tuning
    # =========================================================================

    def debug(self, session_id: str, seat: str | None = None) -> DebugResponse:
        """Introspection for a seat's controller (default: the seat to move)."""
        session = self._require_session(session_id)
        seat, controller = self._require_controller(session, seat)

        info = controller.debug_info()
        return DebugResponse(
            session_id=session_id,
            seat=seat,
            controller_type=session.seat_types[seat].value,
            states_processed=info.get("states_processed", 0),
            open_states=info.get("open_states", 0),
            current_action=info.get("current_action"),
            current_cost=info.get("current_cost"),
            average_cost=info.get("average_cost"),
            free_paths=info.get("free_paths", 0),
            tuning=controller.tuning(),
        )

    def tune(self, session_id: str, request: TuningRequest) -> TuningResponse:
        """
        Update a controller's settings between decisions.

        Raises:
            APIError: SESSION_NOT_FOUND, INVALID_CONTROLLER or VALIDATION_ERROR
        """
        session = self._require_session(session_id)
        seat, controller = self._require_controller(session, request.seat)

        loop = self._game_loops[session_id]
        try:
            with loop.idle():
                tuning = controller.tune(request.settings)
        except LoopBusyError as e:
            raise APIError(
                ErrorCode.VALIDATION_ERROR,
                "Cannot tune while a decision is in progress",
                status_code=409,
            ) from e
        except ValueError as e:
            raise APIError(ErrorCode.VALIDATION_ERROR, str(e)) from e

        logger.info("Tuned seat %s of session %s: %s", seat, session_id, request.settings)
        return TuningResponse(session_id=session_id, seat=seat, tuning=tuning)

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="tactician",
            version=__version__,
            environment=self.environment,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_session(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise APIError(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} not found",
                status_code=404,
            )
        return session

    def _require_controller(self, session: Session, seat: str | None):
        seat = seat if seat is not None else session.current_seat
        if seat not in session.seat_types:
            raise APIError(ErrorCode.INVALID_CONTROLLER, f"Unknown seat {seat}")

        controller = session.controller_for(seat)
        if controller is None:
            raise APIError(
                ErrorCode.INVALID_CONTROLLER,
                f"Seat {seat} is controlled by a human",
            )
        return seat, controller

    def _session_status(self, session: Session) -> SessionStatus:
        if session.state is SessionState.ABANDONED:
            return SessionStatus.ABANDONED
        if session.is_over():
            return SessionStatus.GAME_OVER
        if session.state is SessionState.AI_THINKING:
            return SessionStatus.AI_THINKING
        if session.is_human_turn():
            return SessionStatus.YOUR_TURN
        return SessionStatus.ACTIVE

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        current = session.current_seat
        seats = [
            SeatInfo(
                seat=seat,
                controller_type=seat_type.value,
                is_human=session.controller_for(seat) is None,
                is_current_turn=seat == current and not session.is_over(),
            )
            for seat, seat_type in session.seat_types.items()
        ]

        return SessionResponse(
            session_id=session.session_id,
            game=session.game,
            status=self._session_status(session),
            seats=seats,
            current_seat=None if session.is_over() else current,
            winner=session.winner(),
            game_state=session.adapter.state_to_dict(session.game_state),
            action_log=list(session.action_log),
            created_at=session.created_at,
        )

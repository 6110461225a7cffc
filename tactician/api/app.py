"""
FastAPI Application - REST API for hosted games.

Endpoints:
    POST   /api/v1/sessions                 Create game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session and game state
    DELETE /api/v1/sessions/{id}            End session
    POST   /api/v1/sessions/{id}/actions    Submit a human action
    POST   /api/v1/sessions/{id}/advance    Let AI seats play
    GET    /api/v1/sessions/{id}/debug      Search introspection
    PUT    /api/v1/sessions/{id}/tuning     Live controller tuning
    GET    /api/v1/health                   Health check

Play Flow:
    1. POST /sessions with a controller type per AI seat
    2. POST /advance lets AI seats play until a human seat is to move
    3. POST /actions submits human actions one at a time
    4. Repeat 2-3 until the session status is game_over

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional
import logging
import os

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..log import configure_logging
from .schemas import (
    # Request models
    ActionRequest,
    AdvanceRequest,
    CreateSessionRequest,
    TuningRequest,
    # Response models
    ActionResponse,
    AdvanceResponse,
    DebugResponse,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    SessionListResponse,
    SessionResponse,
    TuningResponse,
    # Enums
    ErrorCode,
)
from .service import APIError, APIService

# Environment configuration
TACTICIAN_ENV = os.getenv("TACTICIAN_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SESSION_TTL_SECONDS = int(os.getenv("TACTICIAN_SESSION_TTL", "3600"))

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    configure_logging()

    app = FastAPI(
        title="Tactician API",
        description="""
Turn-based games against search-driven controllers.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ACTION` | Action is malformed, illegal or out of turn |
| `INVALID_MAP` | Map text could not be parsed |
| `INVALID_CONTROLLER` | Unknown seat or controller |
| `VALIDATION_ERROR` | Settings could not be applied |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        environment=TACTICIAN_ENV, session_ttl_seconds=SESSION_TTL_SECONDS,
    )
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
        logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
        return make_error_response(exc.error_code, exc.message, exc.status_code, exc.details)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid map or controller"},
        },
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Seats left out of `controllers` are played by humans. Strategy
        seats are team numbers ("0", "1"); tic-tac-toe seats are "X" and "O".
        """
        return api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> SessionResponse:
        """Get the current status and game state of a session."""
        return api_service.get_session(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed or illegal action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Not a human seat's turn"},
        },
        tags=["Game Loop"],
        summary="Submit a human action",
    )
    async def submit_action(session_id: str, body: ActionRequest) -> ActionResponse:
        """
        Apply one action for the human seat to move.

        **Request Body (strategy):**
        ```json
        {"tag": "move_unit", "location": [1, 3]}
        ```

        **Request Body (tic-tac-toe):**
        ```json
        {"location": [1, 1]}
        ```
        """
        return api_service.submit_action(session_id, body)

    # Sync handler: runs in the threadpool
    @app.post(
        "/api/v1/sessions/{session_id}/advance",
        response_model=AdvanceResponse,
        responses={404: {"model": ErrorResponse, "description": "Session not found"}},
        tags=["Game Loop"],
        summary="Let AI seats play",
    )
    def advance(
        session_id: str,
        body: Optional[AdvanceRequest] = None,
    ) -> AdvanceResponse:
        """Run AI seats until a human seat is to move or the game ends."""
        return api_service.advance(session_id, body)

    # =========================================================================
    # Introspection Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/debug",
        response_model=DebugResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Seat has no controller"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Introspection"],
        summary="Search introspection for a seat",
    )
    async def debug(
        session_id: str,
        seat: Annotated[Optional[str], Query(description="Seat (default: seat to move)")] = None,
    ) -> DebugResponse:
        """States processed, frontier size and cost statistics of the last search."""
        return api_service.debug(session_id, seat)

    @app.put(
        "/api/v1/sessions/{session_id}/tuning",
        response_model=TuningResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown or invalid setting"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Introspection"],
        summary="Tune a seat's controller",
    )
    async def tune(session_id: str, body: TuningRequest) -> TuningResponse:
        """
        Change a controller's personality, multipliers or penalties.

        Settings take effect from the controller's next decision.
        """
        return api_service.tune(session_id, body)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return api_service.health()

    return app


# For running directly: uvicorn tactician.api.app:app
app = create_app()

"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the session host.
Game states travel as plain dictionaries produced by each game's
adapter, so one set of schemas serves every game.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_ACTION: Action is malformed, illegal, or not the caller's turn
- INVALID_MAP: Map text could not be parsed
- INVALID_CONTROLLER: Unknown seat, controller type or controller setting
- VALIDATION_ERROR: Request is well-formed but cannot be applied
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..games import GameKind


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    AI_THINKING = "ai_thinking"
    YOUR_TURN = "your_turn"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    INVALID_MAP = "INVALID_MAP"
    INVALID_CONTROLLER = "INVALID_CONTROLLER"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class SeatInfo(BaseModel):
    """One seat at the table."""
    seat: str
    controller_type: str = Field(description="human, random, astar_one, ...")
    is_human: bool
    is_current_turn: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    game: GameKind = Field(GameKind.STRATEGY, description="strategy or tictactoe")
    controllers: dict[str, str] = Field(
        default_factory=dict,
        description="Seat -> controller type; seats left out are human",
    )
    map_text: Optional[str] = Field(None, description="Map in text format (strategy only)")
    width: int = Field(5, ge=1, le=64, description="Default map width")
    height: int = Field(5, ge=1, le=64, description="Default map height")
    controller_config: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Seat -> controller settings (seed, personality, tuning, ...)",
    )


class ActionRequest(BaseModel):
    """A human action."""
    tag: Optional[str] = Field(
        None,
        description="end_turn, cancel_selection, select_unit, move_unit, attack (strategy only)",
    )
    location: Optional[list[int]] = Field(
        None, min_length=2, max_length=2, description="[x, y]",
    )


class AdvanceRequest(BaseModel):
    """Request to let AI seats play."""
    max_decisions: Optional[int] = Field(
        None, ge=1, description="Stop after this many AI decisions",
    )


class TuningRequest(BaseModel):
    """Live tuning of a seat's controller."""
    seat: Optional[str] = Field(None, description="Seat to tune; defaults to the seat to move")
    settings: dict[str, Any] = Field(..., description="Setting name -> new value")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    game: GameKind
    status: SessionStatus
    seats: list[SeatInfo] = Field(default_factory=list)
    current_seat: Optional[str] = None
    winner: Optional[str] = None
    game_state: dict[str, Any] = Field(default_factory=dict)
    action_log: list[str] = Field(default_factory=list)
    created_at: float = 0.0
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response after a human action."""
    session_id: str
    success: bool
    action: str = Field(..., description="Readable description of the action")
    session: SessionResponse
    api_version: str = "v1"


class AdvanceResponse(BaseModel):
    """Response after AI seats have played."""
    session_id: str
    success: bool
    loop_state: str
    actions: list[str] = Field(default_factory=list)
    decisions: int = 0
    states_processed: int = 0
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    session: SessionResponse
    api_version: str = "v1"


class DebugResponse(BaseModel):
    """Search introspection for one seat's controller."""
    session_id: str
    seat: str
    controller_type: str
    states_processed: int = 0
    open_states: int = 0
    current_action: Optional[str] = None
    current_cost: Optional[Any] = None
    average_cost: Optional[float] = None
    free_paths: int = 0
    tuning: dict[str, Any] = Field(default_factory=dict)
    api_version: str = "v1"


class TuningResponse(BaseModel):
    """Settings in effect after tuning."""
    session_id: str
    seat: str
    tuning: dict[str, Any]
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str

"""
API Module - HTTP interface to the session host.

Clients:
1. Create a session, choosing a controller for each AI seat
2. Submit human actions and let AI seats play
3. Inspect and tune controllers between decisions

All state is session-scoped and in memory.
"""

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
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    SessionListResponse,
    SessionResponse,
    TuningResponse,
    # Shared
    SeatInfo,
    ErrorCode,
    SessionStatus,
)
from .service import APIError, APIService

__all__ = [
    # Requests
    "ActionRequest",
    "AdvanceRequest",
    "CreateSessionRequest",
    "TuningRequest",
    # Responses
    "ActionResponse",
    "AdvanceResponse",
    "DebugResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "HealthResponse",
    "SessionListResponse",
    "SessionResponse",
    "TuningResponse",
    # Shared
    "SeatInfo",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIError",
    "APIService",
]

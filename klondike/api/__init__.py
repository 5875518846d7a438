"""
API Module - Presentation layer interface.

Exposes the engine via REST API. A presentation layer:
1. Creates a game session (a dealt game)
2. Dispatches actions and renders the returned state
3. Plays sounds/animations for the returned event names
4. Asks for hints
5. Ends the session when the player leaves

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    ActionBody,
    ActionRequest,
    CreateSessionRequest,
    PreferencesRequest,
    # Responses
    ActionResponse,
    ErrorResponse,
    GameStateResponse,
    HintResponse,
    PreferencesResponse,
    SessionResponse,
    # Shared
    CardInfo,
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionBody",
    "ActionRequest",
    "CreateSessionRequest",
    "PreferencesRequest",
    # Responses
    "ActionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "HintResponse",
    "PreferencesResponse",
    "SessionResponse",
    # Shared
    "CardInfo",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]

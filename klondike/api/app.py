"""
FastAPI Application - REST API for presentation layers.

Endpoints:
    GET    /api/v1/health                       Health check
    POST   /api/v1/sessions                     Deal a new game session
    GET    /api/v1/sessions                     List active sessions
    GET    /api/v1/sessions/{id}                Get session status
    DELETE /api/v1/sessions/{id}                End session
    GET    /api/v1/sessions/{id}/state          Get game state
    POST   /api/v1/sessions/{id}/actions        Dispatch one action
    POST   /api/v1/sessions/{id}/hint           Ask for a hint
    PUT    /api/v1/sessions/{id}/preferences    Set sound preference

Action Flow:
    1. POST /actions with a JSON action, e.g. {"type": "draw_card"}
    2. Legal moves return accepted=true, the new state and event names
       (draw, shuffle, drop, flip, victory, undo, deal) for sound/visuals
    3. Illegal moves return accepted=false with the unchanged state

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

from .. import __version__

# Environment configuration
KLONDIKE_ENV = os.getenv("KLONDIKE_ENV", "development")
KLONDIKE_SESSION_TTL = int(os.getenv("KLONDIKE_SESSION_TTL", "86400"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import Body, FastAPI, Query, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        ActionBody,
        CreateSessionRequest,
        PreferencesRequest,
        # Response models
        ActionResponse,
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        HintResponse,
        PreferencesResponse,
        SessionListResponse,
        SessionResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Klondike Engine API",
        description="""
Single-deck Klondike Solitaire engine.

## Actions

| type | fields |
|------|--------|
| `draw_card` | |
| `move_waste_to_foundation` | |
| `move_waste_to_tableau` | `to_col` |
| `move_tableau_to_foundation` | `from_col` |
| `move_tableau_to_tableau` | `from_col`, `to_col`, `card_index` |
| `reset_game` | |
| `undo` | |

Illegal moves are not errors: they return `accepted=false` and the unchanged state.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ACTION` | Action could not be parsed |
| `VALIDATION_ERROR` | Request body is invalid |
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

    api_service = service or APIService()
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

    def error_for(response: ErrorResponse) -> JSONResponse:
        status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return make_error_response(response.error_code, response.error, status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug("Invalid request to %s: %s", request.url.path, exc.errors())
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [str(err.get("msg")) for err in exc.errors()]},
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        api_service.session_manager.cleanup_stale_sessions(KLONDIKE_SESSION_TTL)
        return HealthResponse(
            status="ok",
            service="klondike-engine",
            version=__version__,
            environment=KLONDIKE_ENV,
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Deal a new game session",
    )
    async def create_session(
        body: Annotated[Optional[CreateSessionRequest], Body()] = None,
    ) -> SessionResponse:
        """Create a session with a freshly dealt game. Pass `seed` for a reproducible deal."""
        return api_service.create_session(body or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_for(response)
        return response

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
        """End a game session and release its state."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.put(
        "/api/v1/sessions/{session_id}/preferences",
        response_model=PreferencesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Set sound preference",
    )
    async def set_preferences(
        session_id: str,
        body: PreferencesRequest,
    ) -> Union[PreferencesResponse, JSONResponse]:
        response = api_service.set_preferences(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_for(response)
        return response

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_for(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action could not be parsed"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            422: {"model": ErrorResponse, "description": "Invalid action body"},
        },
        tags=["Game"],
        summary="Dispatch one action",
    )
    async def dispatch_action(
        session_id: str,
        action: ActionBody,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply one action to the session's game.

        **Request Body:**
        ```json
        {"type": "move_tableau_to_tableau", "from_col": 2, "to_col": 5, "card_index": 1}
        ```
        """
        response = api_service.dispatch(session_id, action.to_dict())
        if isinstance(response, ErrorResponse):
            return error_for(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/hint",
        response_model=HintResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Ask for a hint",
    )
    def get_hint(session_id: str) -> Union[HintResponse, JSONResponse]:
        """
        Ask the hint advisor about the current board.

        Runs in the threadpool since the model call blocks. Model
        failures come back as a friendly fallback hint, not an error.
        """
        response = api_service.get_hint(session_id)
        if isinstance(response, ErrorResponse):
            return error_for(response)
        return response

    return app


# For running directly: uvicorn klondike.api.app:app
app = create_app()

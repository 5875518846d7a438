"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Asks the hint advisor for hints
4. Formats responses for the presentation layer

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .schemas import (
    # Requests
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
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.action import Action
from ..engine_core.history import History
from ..engine_core.state import Card, GameState, Pile, Suit
from ..hints import HintAdvisor
from ..session import Session, SessionManager


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest())
        response = service.dispatch(session.session_id, {"type": "draw_card"})
        hint = service.get_hint(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    hint_advisor: HintAdvisor = field(default_factory=HintAdvisor)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Deal a new game in a new session."""
        session = self.session_manager.create_session(seed=request.seed)
        session.set_sound(request.sound_enabled)
        return self._session_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._game_state_response(*session.snapshot())

    def dispatch(self, session_id: str, action_data: dict[str, Any]) -> ActionResponse | ErrorResponse:
        """
        Apply a serialized action to a session's game.

        Illegal moves are not errors: the response has accepted=false
        and the unchanged state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        try:
            action = Action.from_dict(action_data)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        result = session.dispatch(action)
        return ActionResponse(
            session_id=session_id,
            accepted=result.success,
            reason=result.reason,
            events=[event.value for event in result.events],
            changes=result.state_changes,
            sound_enabled=session.sound_enabled,
            game_state=self._game_state_response(result.new_state, result.history),
        )

    def get_hint(self, session_id: str) -> HintResponse | ErrorResponse:
        """Ask for a hint about the current board. Never fails once the session exists."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        state, _ = session.snapshot()
        result = self.hint_advisor.advise(state)
        return HintResponse(
            session_id=session_id,
            hint=result.text,
            is_fallback=result.is_fallback,
            cached=result.cached,
        )

    def set_preferences(
        self, session_id: str, request: PreferencesRequest
    ) -> PreferencesResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        session.set_sound(request.sound_enabled)
        return PreferencesResponse(session_id=session_id, sound_enabled=session.sound_enabled)

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            created_at=session.created_at,
            sound_enabled=session.sound_enabled,
            game_state=self._game_state_response(*session.snapshot()),
        )

    def _game_state_response(self, state: GameState, history: History) -> GameStateResponse:
        return GameStateResponse(
            stock=self._cards(state.stock),
            waste=self._cards(state.waste),
            foundation={suit.value: self._cards(state.foundation_for(suit)) for suit in Suit},
            tableau=[self._cards(column) for column in state.tableau],
            move_count=state.move_count,
            elapsed_seconds=state.elapsed_seconds,
            is_won=state.is_won,
            can_undo=not history.is_empty,
            history_size=len(history),
        )

    def _cards(self, pile: Pile) -> list[CardInfo]:
        return [self._card(card) for card in pile]

    def _card(self, card: Card) -> CardInfo:
        return CardInfo(
            card_id=card.card_id,
            suit=card.suit.value,
            rank=card.rank,
            label=card.label,
            color=card.color.value,
            face_up=card.face_up,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

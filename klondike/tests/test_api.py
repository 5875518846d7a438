"""
Tests for API layer.

Tests:
- API service methods
- HTTP endpoints via TestClient
- Session lifecycle via API
- Error handling
"""

import logging
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    PreferencesRequest,
    SessionStatus,
)
from ..api.service import APIService
from ..api.app import create_app
from ..hints import FALLBACK_HINT, HintAdvisor
from ..session import SessionManager
from .conftest import near_won_state


class FakeClient:
    """Model client that always answers the same."""

    def __init__(self, text="Look for an Ace in the waste."):
        self.text = text
        self.calls = 0
        self.models = self

    def generate_content(self, model, contents):
        self.calls += 1
        return SimpleNamespace(text=self.text)


class BrokenClient:
    def __init__(self):
        self.models = self

    def generate_content(self, model, contents):
        raise ConnectionError("network down")


def make_service(client=None):
    return APIService(
        session_manager=SessionManager(clock_interval=60),
        hint_advisor=HintAdvisor(client=client or FakeClient()),
    )


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        service = make_service()
        yield service
        for session_id in service.list_sessions():
            service.end_session(session_id)

    def test_create_session(self, service):
        """Creating a session deals a game."""
        response = service.create_session(CreateSessionRequest(seed=4))

        assert response.session_id
        assert response.status == SessionStatus.ACTIVE
        assert response.sound_enabled
        assert len(response.game_state.stock) == 24
        assert [len(column) for column in response.game_state.tableau] == [1, 2, 3, 4, 5, 6, 7]
        assert set(response.game_state.foundation) == {"hearts", "diamonds", "clubs", "spades"}

    def test_create_session_sound_off(self, service):
        response = service.create_session(CreateSessionRequest(sound_enabled=False))
        assert not response.sound_enabled

    def test_get_session(self, service):
        created = service.create_session(CreateSessionRequest())
        response = service.get_session(created.session_id)
        assert response.session_id == created.session_id

    def test_get_missing_session(self, service):
        response = service.get_session("nope")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_dispatch_draw(self, service):
        created = service.create_session(CreateSessionRequest(seed=4))
        response = service.dispatch(created.session_id, {"type": "draw_card"})

        assert response.accepted
        assert response.events == ["draw"]
        assert response.game_state.move_count == 1
        assert len(response.game_state.waste) == 1
        assert response.game_state.waste[0].face_up
        assert response.game_state.can_undo

    def test_dispatch_illegal_move(self, service):
        """Illegal moves come back as accepted=false, not as errors."""
        created = service.create_session(CreateSessionRequest(seed=4))
        response = service.dispatch(created.session_id, {"type": "move_waste_to_foundation"})

        assert not response.accepted
        assert response.reason == "Waste is empty"
        assert response.game_state.move_count == 0

    def test_dispatch_reports_the_resulting_state(self, service, monkeypatch):
        """A tick landing right after the move does not leak into the response."""
        created = service.create_session(CreateSessionRequest(seed=4))
        session = service.session_manager.get_session(created.session_id)
        apply = session.dispatch

        def dispatch_then_tick(action):
            result = apply(action)
            session.game_state = session.game_state.with_elapsed_seconds(99)
            return result

        monkeypatch.setattr(session, "dispatch", dispatch_then_tick)
        response = service.dispatch(created.session_id, {"type": "draw_card"})

        assert response.accepted
        assert response.game_state.move_count == 1
        assert response.game_state.elapsed_seconds == 0
        assert response.game_state.history_size == 1

    @pytest.mark.parametrize("data", [
        {},
        {"type": "fly_away"},
        {"type": "move_waste_to_tableau"},
        {"type": "move_waste_to_tableau", "to_col": "3"},
        {"type": "move_tableau_to_foundation", "from_col": True},
    ])
    def test_dispatch_unparseable(self, service, data):
        created = service.create_session(CreateSessionRequest())
        response = service.dispatch(created.session_id, data)

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_ACTION

    def test_dispatch_missing_session(self, service):
        response = service.dispatch("nope", {"type": "draw_card"})
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_won_session_status(self, service):
        created = service.create_session(CreateSessionRequest())
        session = service.session_manager.get_session(created.session_id)
        session.game_state = near_won_state("waste")

        response = service.dispatch(created.session_id, {"type": "move_waste_to_foundation"})

        assert response.game_state.is_won
        assert "victory" in response.events
        assert service.get_session(created.session_id).status == SessionStatus.WON

    def test_set_preferences(self, service):
        created = service.create_session(CreateSessionRequest())
        response = service.set_preferences(created.session_id, PreferencesRequest(sound_enabled=False))

        assert not response.sound_enabled
        draw = service.dispatch(created.session_id, {"type": "draw_card"})
        assert not draw.sound_enabled

    def test_get_hint(self, service):
        created = service.create_session(CreateSessionRequest())
        response = service.get_hint(created.session_id)

        assert response.hint == "Look for an Ace in the waste."
        assert not response.is_fallback

    def test_hint_fallback(self):
        service = make_service(client=BrokenClient())
        created = service.create_session(CreateSessionRequest())
        response = service.get_hint(created.session_id)

        assert response.hint == FALLBACK_HINT
        assert response.is_fallback
        service.end_session(created.session_id)

    def test_end_session(self, service):
        created = service.create_session(CreateSessionRequest())
        assert service.end_session(created.session_id)
        assert not service.end_session(created.session_id)
        assert created.session_id not in service.list_sessions()


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def service(self):
        service = make_service()
        yield service
        for session_id in service.list_sessions():
            service.end_session(session_id)

    @pytest.fixture
    def client(self, service):
        return TestClient(create_app(service))

    @pytest.fixture
    def session_id(self, client):
        response = client.post("/api/v1/sessions", json={"seed": 21})
        return response.json()["session_id"]

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "klondike-engine"

    def test_app_leaves_logging_config_alone(self, service, monkeypatch):
        """Building the app never installs root handlers."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        create_app(service)

        assert calls == []

    def test_create_session_without_body(self, client):
        response = client.post("/api/v1/sessions")

        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_seeded_sessions_deal_the_same_game(self, client):
        first = client.post("/api/v1/sessions", json={"seed": 9}).json()
        second = client.post("/api/v1/sessions", json={"seed": 9}).json()

        def layout(data):
            return [[c["suit"] + str(c["rank"]) for c in column] for column in data["game_state"]["tableau"]]

        assert layout(first) == layout(second)

    def test_list_sessions(self, client, session_id):
        data = client.get("/api/v1/sessions").json()
        assert session_id in data["sessions"]
        assert data["count"] == len(data["sessions"])

    def test_get_session(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_get_missing_session(self, client):
        response = client.get("/api/v1/sessions/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_get_state(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}/state")

        assert response.status_code == 200
        data = response.json()
        assert len(data["stock"]) == 24
        assert data["move_count"] == 0
        assert not data["is_won"]
        assert not data["can_undo"]

    def test_draw_then_undo(self, client, session_id):
        url = f"/api/v1/sessions/{session_id}/actions"

        drawn = client.post(url, json={"type": "draw_card"}).json()
        assert drawn["accepted"]
        assert drawn["events"] == ["draw"]
        assert drawn["game_state"]["move_count"] == 1

        undone = client.post(url, json={"type": "undo"}).json()
        assert undone["accepted"]
        assert undone["events"] == ["undo"]
        assert undone["game_state"]["move_count"] == 0
        assert len(undone["game_state"]["stock"]) == 24

    def test_illegal_move_is_200(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"type": "move_tableau_to_tableau", "from_col": 0, "to_col": 0, "card_index": 0},
        )

        assert response.status_code == 200
        assert not response.json()["accepted"]
        assert response.json()["reason"]

    @pytest.mark.parametrize("body", [
        {"type": "teleport"},
        {"type": "move_waste_to_tableau", "to_col": 7},
        {"type": "move_tableau_to_foundation"},
        {"type": "move_tableau_to_tableau", "from_col": 0, "to_col": 1, "card_index": -1},
        {},
    ])
    def test_invalid_body_is_422(self, client, session_id, body):
        response = client.post(f"/api/v1/sessions/{session_id}/actions", json=body)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_action_on_missing_session(self, client):
        response = client.post("/api/v1/sessions/nope/actions", json={"type": "draw_card"})
        assert response.status_code == 404

    def test_reset(self, client, session_id):
        url = f"/api/v1/sessions/{session_id}/actions"
        client.post(url, json={"type": "draw_card"})

        data = client.post(url, json={"type": "reset_game"}).json()

        assert data["accepted"]
        assert data["events"] == ["deal"]
        assert data["game_state"]["move_count"] == 0
        assert not data["game_state"]["can_undo"]

    def test_preferences(self, client, session_id):
        response = client.put(
            f"/api/v1/sessions/{session_id}/preferences", json={"sound_enabled": False}
        )

        assert response.status_code == 200
        assert response.json()["sound_enabled"] is False
        assert client.get(f"/api/v1/sessions/{session_id}").json()["sound_enabled"] is False

    def test_preferences_missing_session(self, client):
        response = client.put("/api/v1/sessions/nope/preferences", json={"sound_enabled": True})
        assert response.status_code == 404

    def test_hint(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/hint")

        assert response.status_code == 200
        assert response.json()["hint"] == "Look for an Ace in the waste."

    def test_hint_missing_session(self, client):
        assert client.post("/api/v1/sessions/nope/hint").status_code == 404

    def test_delete_session(self, client, session_id):
        response = client.delete(f"/api/v1/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["success"]
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404

    def test_delete_missing_session(self, client):
        response = client.delete("/api/v1/sessions/nope")
        assert response.status_code == 200
        assert not response.json()["success"]

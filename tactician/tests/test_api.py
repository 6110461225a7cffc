"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- Error handling
- HTTP endpoints through the FastAPI test client
"""

import threading

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    ActionRequest,
    AdvanceRequest,
    CreateSessionRequest,
    ErrorCode,
    SessionStatus,
    TuningRequest,
)
from ..api.service import APIError, APIService
from ..controllers import Controller, ControllerType, Decision
from ..games.tictactoe import TicTacToeCase
from ..session import SessionState

# 3x3, one melee unit per team side by side; 1 MP and 1 AP per turn
SIDE_BY_SIDE = "3,3\n1,1\n{\n(4,0,2)\n(5,1,2)\n}\n"


class SlowController(Controller):
    """Thinks until released."""

    controller_type = ControllerType.TICTACTOE

    def __init__(self):
        self.release = threading.Event()

    def decide(self, state):
        self.release.wait(timeout=5)
        return Decision(found=True, actions=[(0, 0)])


@pytest.fixture
def service():
    """Create a fresh API service."""
    return APIService()


@pytest.fixture
def client(service):
    """Test client bound to the service fixture."""
    return TestClient(create_app(service))


class MeddlingCase(TicTacToeCase):
    """Calls back into the service from inside its own search."""

    def __init__(self, meddle):
        super().__init__()
        self.meddle = meddle
        self.outcomes = []

    def weigh(self, start, before, after, move):
        if not self.outcomes:
            try:
                self.meddle()
                self.outcomes.append("accepted")
            except APIError as e:
                self.outcomes.append(e.status_code)
        return super().weigh(start, before, after, move)


def ai_first_tictactoe(service, controller):
    """A session where X is played by the given controller and O is human."""
    session_id = service.create_session(
        CreateSessionRequest(game="tictactoe", controllers={"X": "tictactoe"})
    ).session_id
    service.session_manager.get_session(session_id).controllers["X"] = controller
    return session_id


def tictactoe_vs_ai(service):
    response = service.create_session(
        CreateSessionRequest(game="tictactoe", controllers={"O": "tictactoe"})
    )
    return response.session_id


class TestSessions:
    """Tests for creating, reading and ending sessions."""

    def test_create_tictactoe_session(self, service):
        response = service.create_session(
            CreateSessionRequest(game="tictactoe", controllers={"O": "tictactoe"})
        )

        assert response.status is SessionStatus.YOUR_TURN
        assert response.current_seat == "X"
        assert [(s.seat, s.controller_type, s.is_human) for s in response.seats] == [
            ("X", "human", True),
            ("O", "tictactoe", False),
        ]
        assert response.game_state["board"] == [". . .", ". . .", ". . ."]

    def test_create_strategy_session_from_map(self, service):
        response = service.create_session(
            CreateSessionRequest(map_text=SIDE_BY_SIDE, controllers={"1": "astar_four"})
        )

        state = response.game_state
        assert (state["width"], state["height"]) == (3, 3)
        assert state["teams"] == {"0": 1, "1": 1}
        assert state["status"] == "in_progress"

    def test_invalid_map(self, service):
        with pytest.raises(APIError) as exc_info:
            service.create_session(CreateSessionRequest(map_text="3,3\n1,1\n{\n(99,0,2)\n}\n"))

        assert exc_info.value.error_code is ErrorCode.INVALID_MAP
        assert exc_info.value.details == {"line": 4}

    def test_invalid_controller(self, service):
        with pytest.raises(APIError) as exc_info:
            service.create_session(
                CreateSessionRequest(game="tictactoe", controllers={"O": "astar_one"})
            )
        assert exc_info.value.error_code is ErrorCode.INVALID_CONTROLLER

    def test_get_nonexistent_session(self, service):
        with pytest.raises(APIError) as exc_info:
            service.get_session("nonexistent-id")

        assert exc_info.value.error_code is ErrorCode.SESSION_NOT_FOUND
        assert exc_info.value.status_code == 404

    def test_end_session(self, service):
        session_id = tictactoe_vs_ai(service)

        assert service.end_session(session_id)
        assert session_id not in service.list_sessions()
        with pytest.raises(APIError):
            service.get_session(session_id)
        assert not service.end_session(session_id)

    def test_list_sessions(self, service):
        ids = [tictactoe_vs_ai(service) for _ in range(3)]
        assert service.list_sessions() == ids

    def test_old_finished_sessions_dropped_on_create(self, service):
        """Creating a session clears finished sessions past their lifetime."""
        finished = service.session_manager.get_session(tictactoe_vs_ai(service))
        playing = service.session_manager.get_session(tictactoe_vs_ai(service))
        for session in (finished, playing):
            session.created_at -= service.session_ttl_seconds + 60
        finished.state = SessionState.GAME_OVER

        tictactoe_vs_ai(service)

        assert finished.session_id not in service._game_loops
        with pytest.raises(APIError):
            service.get_session(finished.session_id)
        assert service.get_session(playing.session_id).session_id == playing.session_id


class TestPlay:
    """Tests for human actions and AI advancement."""

    def test_human_action(self, service):
        session_id = tictactoe_vs_ai(service)
        response = service.submit_action(session_id, ActionRequest(location=[1, 1]))

        assert response.success
        assert response.action == "Place (1, 1)"
        assert response.session.current_seat == "O"
        assert response.session.status is SessionStatus.ACTIVE

    def test_illegal_action(self, service):
        session_id = service.create_session(CreateSessionRequest(game="tictactoe")).session_id
        service.submit_action(session_id, ActionRequest(location=[1, 1]))

        with pytest.raises(APIError) as exc_info:
            service.submit_action(session_id, ActionRequest(location=[1, 1]))

        assert exc_info.value.error_code is ErrorCode.INVALID_ACTION
        assert exc_info.value.message == "Illegal action: Place (1, 1)"
        assert exc_info.value.details == {"action": {"location": [1, 1]}}

    def test_action_out_of_turn(self, service):
        session_id = tictactoe_vs_ai(service)
        service.submit_action(session_id, ActionRequest(location=[1, 1]))

        with pytest.raises(APIError) as exc_info:
            service.submit_action(session_id, ActionRequest(location=[0, 0]))
        assert exc_info.value.status_code == 409

    def test_malformed_strategy_action(self, service):
        session_id = service.create_session(CreateSessionRequest(map_text=SIDE_BY_SIDE)).session_id

        with pytest.raises(APIError) as exc_info:
            service.submit_action(session_id, ActionRequest(tag="fly"))
        assert exc_info.value.error_code is ErrorCode.INVALID_ACTION

        with pytest.raises(APIError):
            service.submit_action(session_id, ActionRequest(tag="move_unit"))

    def test_advance_lets_the_ai_answer(self, service):
        session_id = tictactoe_vs_ai(service)
        service.submit_action(session_id, ActionRequest(location=[0, 0]))

        response = service.advance(session_id)

        assert response.success
        assert response.decisions == 1
        assert response.loop_state == "waiting_human_action"
        assert len(response.actions) == 1
        assert response.actions[0].startswith("2> O (tictactoe): Place")
        assert response.session.status is SessionStatus.YOUR_TURN

    def test_advance_with_decision_limit(self, service):
        session_id = service.create_session(
            CreateSessionRequest(controllers={"0": "idle", "1": "idle"})
        ).session_id

        response = service.advance(session_id, AdvanceRequest(max_decisions=2))

        assert response.decisions == 2
        assert response.warnings == ["Stopped after 2 decision(s)"]

    def test_human_wins_strategy_game(self, service):
        session_id = service.create_session(
            CreateSessionRequest(map_text=SIDE_BY_SIDE, controllers={"1": "idle"})
        ).session_id

        service.submit_action(session_id, ActionRequest(tag="select_unit", location=[1, 1]))
        response = service.submit_action(session_id, ActionRequest(tag="attack", location=[2, 1]))

        session = response.session
        assert session.status is SessionStatus.GAME_OVER
        assert session.winner == "0"
        assert session.current_seat is None
        assert not any(seat.is_current_turn for seat in session.seats)


class TestIntrospection:
    """Tests for debug and tuning."""

    def test_debug_after_decision(self, service):
        session_id = tictactoe_vs_ai(service)
        service.submit_action(session_id, ActionRequest(location=[0, 0]))
        service.advance(session_id)

        response = service.debug(session_id, "O")

        assert response.controller_type == "tictactoe"
        assert response.states_processed > 0
        assert response.tuning["unoccupied"] == 1

    def test_debug_human_seat(self, service):
        session_id = tictactoe_vs_ai(service)

        with pytest.raises(APIError) as exc_info:
            service.debug(session_id)
        assert exc_info.value.error_code is ErrorCode.INVALID_CONTROLLER

    def test_debug_unknown_seat(self, service):
        session_id = tictactoe_vs_ai(service)
        with pytest.raises(APIError):
            service.debug(session_id, "Z")

    def test_tune(self, service):
        session_id = tictactoe_vs_ai(service)

        response = service.tune(session_id, TuningRequest(seat="O", settings={"unoccupied": 2}))

        assert response.seat == "O"
        assert response.tuning["unoccupied"] == 2

    def test_tune_invalid_setting(self, service):
        session_id = tictactoe_vs_ai(service)

        with pytest.raises(APIError) as exc_info:
            service.tune(session_id, TuningRequest(seat="O", settings={"unoccupied": -2}))
        assert exc_info.value.error_code is ErrorCode.VALIDATION_ERROR

    def test_tune_strategy_personality(self, service):
        session_id = service.create_session(
            CreateSessionRequest(controllers={"1": "astar_one"})
        ).session_id

        response = service.tune(
            session_id, TuningRequest(seat="1", settings={"personality": "cautious"}),
        )
        assert response.tuning["personality"] == "Cautious"

    def test_no_tuning_while_thinking(self, service):
        session_id = service.create_session(
            CreateSessionRequest(game="tictactoe", controllers={"X": "tictactoe"})
        ).session_id
        session = service.session_manager.get_session(session_id)
        controller = SlowController()
        session.controllers["X"] = controller
        loop = service._game_loops[session_id]
        try:
            loop.advance()
            with pytest.raises(APIError) as exc_info:
                service.tune(session_id, TuningRequest(seat="X", settings={}))
            assert exc_info.value.status_code == 409
            assert service.get_session(session_id).status is SessionStatus.AI_THINKING
        finally:
            controller.release.set()
            service.end_session(session_id)

    def test_no_tuning_during_advance(self, service):
        """A tuning request arriving mid-decision is refused and changes nothing."""
        case = MeddlingCase(lambda: service.tune(
            session_id, TuningRequest(seat="X", settings={"unoccupied": 7}),
        ))
        session_id = ai_first_tictactoe(service, case)

        response = service.advance(session_id)

        assert response.success
        assert response.decisions == 1
        assert case.outcomes == [409]
        assert case.penalties.unoccupied == 1
        assert service.tune(
            session_id, TuningRequest(seat="X", settings={"unoccupied": 7}),
        ).tuning["unoccupied"] == 7

    def test_no_second_advance_during_advance(self, service):
        """Only one caller at a time may drive a session's AI seats."""
        case = MeddlingCase(lambda: service.advance(session_id))
        session_id = ai_first_tictactoe(service, case)

        response = service.advance(session_id)

        assert case.outcomes == [409]
        assert response.decisions == 1
        assert len(service.session_manager.get_session(session_id).action_log) == 1

    def test_busy_loop_reports_thinking(self, service):
        seen = []
        case = MeddlingCase(lambda: seen.append(service.get_session(session_id).status))
        session_id = ai_first_tictactoe(service, case)

        service.advance(session_id)

        assert seen == [SessionStatus.AI_THINKING]

    def test_health(self, service):
        health = service.health()

        assert health.status == "healthy"
        assert health.service == "tactician"


class TestHTTP:
    """Tests for the HTTP endpoints."""

    def test_full_round(self, client):
        created = client.post(
            "/api/v1/sessions",
            json={"game": "tictactoe", "controllers": {"O": "tictactoe"}},
        )
        assert created.status_code == 200
        session_id = created.json()["session_id"]
        assert created.json()["status"] == "your_turn"

        played = client.post(f"/api/v1/sessions/{session_id}/actions", json={"location": [1, 1]})
        assert played.status_code == 200
        assert played.json()["action"] == "Place (1, 1)"

        advanced = client.post(f"/api/v1/sessions/{session_id}/advance")
        assert advanced.status_code == 200
        assert advanced.json()["decisions"] == 1
        assert advanced.json()["session"]["current_seat"] == "X"

        debug = client.get(f"/api/v1/sessions/{session_id}/debug", params={"seat": "O"})
        assert debug.status_code == 200
        assert debug.json()["states_processed"] > 0

        ended = client.delete(f"/api/v1/sessions/{session_id}")
        assert ended.json() == {"success": True, "session_id": session_id}

    def test_session_not_found(self, client):
        response = client.get("/api/v1/sessions/missing")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "SESSION_NOT_FOUND"
        assert body["api_version"] == "v1"

    def test_invalid_map(self, client):
        response = client.post("/api/v1/sessions", json={"map_text": "3;3\n"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_MAP"
        assert response.json()["details"] == {"line": 1}

    def test_request_validation(self, client):
        session_id = client.post("/api/v1/sessions", json={"game": "tictactoe"}).json()["session_id"]

        response = client.post(
            f"/api/v1/sessions/{session_id}/advance", json={"max_decisions": 0},
        )
        assert response.status_code == 422

        response = client.post("/api/v1/sessions", json={"game": "chess"})
        assert response.status_code == 422

    def test_tuning_errors(self, client):
        session_id = client.post(
            "/api/v1/sessions", json={"controllers": {"1": "astar_three"}},
        ).json()["session_id"]

        response = client.put(
            f"/api/v1/sessions/{session_id}/tuning",
            json={"seat": "1", "settings": {"bravery": 3}},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

        response = client.put(
            f"/api/v1/sessions/{session_id}/tuning",
            json={"seat": "1", "settings": {"missed_shot": 9}},
        )
        assert response.status_code == 200
        assert response.json()["tuning"]["missed_shot"] == 9

    def test_list_sessions(self, client):
        client.post("/api/v1/sessions", json={"game": "tictactoe"})

        response = client.get("/api/v1/sessions")
        assert response.json()["count"] == 1

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

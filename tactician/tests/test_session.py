"""
Tests for sessions and the game loop.

Tests:
- Session creation, lookup and cleanup
- Human actions and the action log
- AI seats playing through the game loop, blocking and polled
- Failures: bad plans, crashing controllers, cancelled decisions
"""

import threading
import time

import pytest

from ..controllers import Controller, ControllerType, Decision, IdleController
from ..games.strategy import MapFormatError
from ..session import GameLoop, LoopBusyError, LoopState, SessionManager, SessionState


class BlockingController(Controller):
    """Thinks until released."""

    controller_type = ControllerType.RANDOM

    def __init__(self):
        self.release = threading.Event()

    def decide(self, state):
        self.release.wait(timeout=5)
        return Decision(found=True, actions=[(0, 0)])


class CrashingController(Controller):
    controller_type = ControllerType.RANDOM

    def decide(self, state):
        raise RuntimeError("boom")


class LostController(Controller):
    controller_type = ControllerType.RANDOM

    def decide(self, state):
        return Decision.failed("No goal state reachable")


@pytest.fixture
def manager():
    return SessionManager()


def wait_for(loop, predicate, timeout=10.0):
    """Poll the loop until a result satisfies predicate."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = loop.poll()
        if result is not None and predicate(result):
            return result
        time.sleep(0.01)
    pytest.fail("Game loop did not reach the expected state in time")


class TestSessionManager:
    """Tests for creating and tracking sessions."""

    def test_create_tictactoe(self, manager):
        session = manager.create_session("tictactoe", {"O": "tictactoe"})

        assert session.seat_types == {"X": ControllerType.HUMAN, "O": ControllerType.TICTACTOE}
        assert session.controller_for("X") is None
        assert session.current_seat == "X"
        assert session.is_human_turn()
        assert manager.get_session(session.session_id) is session

    def test_create_strategy_with_default_map(self, manager):
        session = manager.create_session("strategy", {"1": "astar_two"}, width=6, height=6)

        assert session.game_state.map.size == (6, 6)
        assert list(session.seat_types) == ["0", "1"]
        assert session.current_seat == "0"

    def test_create_from_map_text(self, manager):
        session = manager.create_session("strategy", map_text="3,3\n1,1\n{\n(0,0,2)\n(8,1,2)\n}\n")
        assert session.game_state.teams == ((0, 1), (1, 1))

    def test_unknown_seat(self, manager):
        with pytest.raises(ValueError, match="Unknown seat"):
            manager.create_session("strategy", {"2": "idle"})

    def test_unsupported_controller(self, manager):
        with pytest.raises(ValueError):
            manager.create_session("strategy", {"0": "tictactoe"})

    def test_bad_map(self, manager):
        with pytest.raises(MapFormatError):
            manager.create_session("strategy", map_text="5,5\nbad\n")

    def test_end_session(self, manager):
        session = manager.create_session("tictactoe")

        assert manager.end_session(session.session_id)
        assert session.state is SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager):
        first = manager.create_session("tictactoe")
        second = manager.create_session("tictactoe")
        second.state = SessionState.GAME_OVER

        assert manager.list_active_sessions() == [first.session_id]
        assert len(manager.list_sessions()) == 2

    def test_cleanup_removes_old_finished_sessions(self, manager):
        finished = manager.create_session("tictactoe")
        playing = manager.create_session("tictactoe")
        for session in (finished, playing):
            session.created_at -= 7200
        finished.state = SessionState.GAME_OVER

        manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert manager.get_session(finished.session_id) is None
        assert manager.get_session(playing.session_id) is playing


class TestHumanActions:
    """Tests for actions submitted by human seats."""

    def test_accepted_action_is_logged(self, manager):
        session = manager.create_session("tictactoe")

        assert session.apply_human_action((1, 1))
        assert len(session.history) == 2
        assert session.action_log == ["1> X (human): Place (1, 1)"]
        assert session.current_seat == "O"

    def test_illegal_action_changes_nothing(self, manager):
        session = manager.create_session("tictactoe")
        session.apply_human_action((1, 1))

        assert not session.apply_human_action((1, 1))
        assert len(session.history) == 2
        assert len(session.action_log) == 1

    def test_not_a_human_turn(self, manager):
        session = manager.create_session("tictactoe", {"X": "tictactoe"})
        with pytest.raises(ValueError):
            session.apply_human_action((0, 0))


class TestRunUntilHuman:
    """Tests for the blocking loop."""

    def test_busy_while_deciding(self, manager):
        """A running blocking loop refuses to start anything else."""
        session = manager.create_session("tictactoe", {"X": "random"})
        loop = GameLoop(session)
        attempts = []

        class Reentrant(Controller):
            controller_type = ControllerType.RANDOM

            def decide(self, state):
                attempts.append(loop.is_thinking)
                attempts.append(session.state)
                for start in (loop.run_until_human, loop.advance, loop.idle().__enter__):
                    try:
                        start()
                    except LoopBusyError:
                        attempts.append("busy")
                return Decision(found=True, actions=[(1, 1)])

        session.controllers["X"] = Reentrant()
        result = loop.run_until_human()

        assert result.success
        assert attempts == [True, SessionState.AI_THINKING, "busy", "busy", "busy"]
        assert not loop.is_thinking
        assert session.state is SessionState.ACTIVE
        with loop.idle():
            assert loop.is_thinking
        assert not loop.is_thinking

    def test_ai_against_ai_plays_to_the_end(self, manager):
        session = manager.create_session(
            "tictactoe",
            {"X": "random", "O": "tictactoe"},
            controller_config={"X": {"seed": 3}},
        )
        result = GameLoop(session).run_until_human()

        assert result.success
        assert result.loop_state is LoopState.GAME_OVER
        assert session.state is SessionState.GAME_OVER
        assert 5 <= result.decisions <= 9
        assert result.actions == session.action_log
        assert result.winner == session.winner()

    def test_stops_for_human(self, manager):
        session = manager.create_session("tictactoe", {"O": "tictactoe"})
        loop = GameLoop(session)

        result = loop.run_until_human()
        assert result.loop_state is LoopState.WAITING_HUMAN_ACTION
        assert result.decisions == 0

        session.apply_human_action((0, 0))
        result = loop.run_until_human()

        assert result.decisions == 1
        assert result.loop_state is LoopState.WAITING_HUMAN_ACTION
        assert session.current_seat == "X"

    def test_decision_limit(self, manager):
        session = manager.create_session("strategy", {"0": "idle", "1": "idle"})
        result = GameLoop(session).run_until_human(max_decisions=3)

        assert result.success
        assert result.decisions == 3
        assert result.loop_state is LoopState.IDLE
        assert result.warnings == ["Stopped after 3 decision(s)"]
        # Turns count rounds: 0 -> 1 -> 0 (round 2) -> 1
        assert session.game_state.turn_number == 2

    def test_illegal_plan_fails(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        session.controllers["X"] = IdleController([(5, 5)])

        result = GameLoop(session).run_until_human()

        assert not result.success
        assert result.loop_state is LoopState.FAILED
        assert result.errors == ["Seat X planned an illegal action: Place (5, 5)"]
        assert len(session.history) == 1

    def test_no_plan_fails(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        session.controllers["X"] = LostController()

        result = GameLoop(session).run_until_human()

        assert result.loop_state is LoopState.FAILED
        assert "found no plan" in result.errors[0]

    def test_crashing_controller_fails(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        session.controllers["X"] = CrashingController()

        result = GameLoop(session).run_until_human()

        assert result.loop_state is LoopState.FAILED
        assert result.errors == ["Controller for seat X failed: boom"]


class TestPolledLoop:
    """Tests for advance/poll on a worker thread."""

    def test_polls_to_game_over(self, manager):
        session = manager.create_session("tictactoe", {"X": "tictactoe", "O": "tictactoe"})
        loop = GameLoop(session)
        try:
            started = loop.advance()
            assert started.loop_state is LoopState.AI_THINKING

            result = wait_for(loop, lambda r: r.loop_state is LoopState.GAME_OVER)
            assert result.success
            assert session.is_over()
            assert not loop.is_thinking
        finally:
            loop.shutdown()

    def test_poll_returns_none_while_thinking(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        controller = BlockingController()
        session.controllers["X"] = controller
        loop = GameLoop(session)
        try:
            loop.advance()
            assert loop.poll() is None
            assert session.state is SessionState.AI_THINKING

            controller.release.set()
            result = wait_for(loop, lambda r: True)
            assert result.actions == ["1> X (random): Place (0, 0)"]
            assert result.loop_state is LoopState.WAITING_HUMAN_ACTION
        finally:
            controller.release.set()
            loop.shutdown()

    def test_cancel(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        controller = BlockingController()
        session.controllers["X"] = controller
        loop = GameLoop(session)
        try:
            loop.advance()
            assert loop.is_thinking

            assert loop.cancel()
            assert not loop.is_thinking
            assert loop.state is LoopState.IDLE
            assert session.state is SessionState.ACTIVE
            assert len(session.history) == 1
            assert not loop.cancel()
        finally:
            controller.release.set()
            loop.shutdown()

    def test_blocking_run_refused_while_thinking(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        controller = BlockingController()
        session.controllers["X"] = controller
        loop = GameLoop(session)
        try:
            loop.advance()
            with pytest.raises(LoopBusyError):
                loop.run_until_human()
            with pytest.raises(LoopBusyError):
                with loop.idle():
                    pass
        finally:
            controller.release.set()
            loop.shutdown()

    def test_crash_on_worker_thread(self, manager):
        session = manager.create_session("tictactoe", {"X": "random"})
        session.controllers["X"] = CrashingController()
        loop = GameLoop(session)
        try:
            loop.advance()
            result = wait_for(loop, lambda r: True)
            assert result.loop_state is LoopState.FAILED
        finally:
            loop.shutdown()

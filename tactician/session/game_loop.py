"""
Game Loop - Drives AI seats between human moves.

The loop:
1. Check for game over
2. If a human seat is to move, wait for its action
3. Otherwise ask that seat's controller for a whole turn
4. Apply the planned actions one at a time, logging each
5. Repeat from 1

Decisions can be slow, so advance() runs them on a worker thread and
poll() applies finished ones. run_until_human() is the synchronous
variant for the CLI and tests. Controllers only ever see immutable
states, and all session mutation happens on the polling thread.
"""

from __future__ import annotations
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING
import logging
import threading

from .manager import SessionState

if TYPE_CHECKING:
    from ..controllers import Decision
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopBusyError(RuntimeError):
    """Raised when the loop is asked to act while a decision is running."""

    def __init__(self):
        super().__init__("A decision is already in progress")


class LoopState(Enum):
    """State of the game loop."""
    IDLE = "idle"
    AI_THINKING = "ai_thinking"
    WAITING_HUMAN_ACTION = "waiting_human_action"
    GAME_OVER = "game_over"
    FAILED = "failed"


@dataclass
class TurnResult:
    """
    Result of driving the loop.

    Lists every action applied and any errors that stopped play.
    """
    success: bool
    loop_state: LoopState

    # Actions applied, as readable strings
    actions: list[str] = field(default_factory=list)

    # Decisions applied and how many states they processed
    decisions: int = 0
    states_processed: int = 0

    # Errors/warnings
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    # Game over info
    winner: str | None = None

    def merge(self, other: TurnResult) -> TurnResult:
        """Combine with a later result; the later loop state wins."""
        return TurnResult(
            success=self.success and other.success,
            loop_state=other.loop_state,
            actions=self.actions + other.actions,
            decisions=self.decisions + other.decisions,
            states_processed=self.states_processed + other.states_processed,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
            winner=other.winner,
        )


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)

        # Non-blocking: start thinking, then poll until done
        loop.advance()
        while (result := loop.poll()) is None:
            ...

        # Blocking
        result = loop.run_until_human()
    """

    def __init__(self, session: Session, executor: Executor | None = None):
        self.session = session
        self._executor = executor
        self._owns_executor = executor is None
        self._pending: Future | None = None
        self._pending_seat: str | None = None
        # Held by run_until_human() and idle() for their whole duration
        self._busy = threading.Lock()
        self.state = LoopState.IDLE

    # =========================================================================
    # Asynchronous driving
    # =========================================================================

    def advance(self) -> TurnResult:
        """
        Start the next AI decision if one is due.

        Returns immediately; the result reports whether the loop is now
        thinking, waiting for a human or finished. Raises LoopBusyError
        while run_until_human() is playing.
        """
        if self._pending is not None:
            return self._status()
        if not self._busy.acquire(blocking=False):
            raise LoopBusyError()
        try:
            return self._start_decision()
        finally:
            self._busy.release()

    def _start_decision(self) -> TurnResult:
        stop = self._stop_reason()
        if stop is not None:
            return stop

        seat = self.session.current_seat
        controller = self.session.controller_for(seat)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="tactician-ai",
            )

        logger.debug("Seat %s is deciding", seat)
        self._pending = self._executor.submit(controller.decide, self.session.game_state)
        self._pending_seat = seat
        self.state = LoopState.AI_THINKING
        self.session.state = SessionState.AI_THINKING
        return self._status()

    def poll(self) -> TurnResult | None:
        """
        Apply a finished decision and start the next one.

        Returns None while the controller is still thinking.
        """
        if self._pending is None:
            return self.advance()
        if not self._pending.done():
            return None

        future, seat = self._pending, self._pending_seat
        self._pending, self._pending_seat = None, None
        self.session.state = SessionState.ACTIVE

        try:
            decision = future.result()
        except Exception as exc:
            return self._controller_failed(seat, exc)

        result = self._apply_decision(seat, decision)
        if not result.success:
            return result
        return result.merge(self.advance())

    def cancel(self) -> bool:
        """Discard the decision in progress. Returns False if none was pending."""
        if self._pending is None:
            return False
        self._pending.cancel()
        logger.info("Discarded pending decision for seat %s", self._pending_seat)
        self._pending, self._pending_seat = None, None
        self.session.state = SessionState.ACTIVE
        self.state = LoopState.IDLE
        return True

    @property
    def is_thinking(self) -> bool:
        return self._pending is not None or self._busy.locked()

    @contextmanager
    def idle(self):
        """
        Hold the loop while no decision is running.

        Controllers may be reconfigured inside the block. Raises
        LoopBusyError if a decision is in progress.
        """
        self._claim()
        try:
            yield self
        finally:
            self._busy.release()

    def shutdown(self):
        self.cancel()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    # =========================================================================
    # Synchronous driving
    # =========================================================================

    def run_until_human(self, max_decisions: int | None = None) -> TurnResult:
        """
        Let AI seats play until a human seat is to move or the game ends.

        Args:
            max_decisions: Stop after this many AI decisions (None = no limit)

        Raises:
            LoopBusyError: Another decision is running on this loop
        """
        self._claim()
        try:
            return self._run(max_decisions)
        finally:
            self._busy.release()

    def _run(self, max_decisions: int | None) -> TurnResult:
        total = TurnResult(success=True, loop_state=self.state)
        decisions = 0
        while max_decisions is None or decisions < max_decisions:
            stop = self._stop_reason()
            if stop is not None:
                return total.merge(stop)

            seat = self.session.current_seat
            decisions += 1
            self.state = LoopState.AI_THINKING
            self.session.state = SessionState.AI_THINKING
            try:
                decision = self.session.controller_for(seat).decide(self.session.game_state)
            except Exception as exc:
                return total.merge(self._controller_failed(seat, exc))
            finally:
                self.session.state = SessionState.ACTIVE

            result = self._apply_decision(seat, decision)
            total = total.merge(result)
            if not result.success:
                return total

        stop = self._stop_reason()
        if stop is not None:
            return total.merge(stop)

        self.state = LoopState.IDLE
        total.loop_state = self.state
        total.warnings.append(f"Stopped after {max_decisions} decision(s)")
        return total

    # =========================================================================
    # Helpers
    # =========================================================================

    def _claim(self):
        """Take the busy lock, refusing if any decision is running."""
        if not self._busy.acquire(blocking=False):
            raise LoopBusyError()
        if self._pending is not None:
            self._busy.release()
            raise LoopBusyError()

    def _stop_reason(self) -> TurnResult | None:
        """A result if play cannot continue without outside input."""
        if self.session.is_over():
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
            winner = self.session.winner()
            logger.info(
                "Game over: %s", f"seat {winner} wins" if winner is not None else "tied",
            )
            return TurnResult(success=True, loop_state=self.state, winner=winner)

        if self.session.is_human_turn():
            self.state = LoopState.WAITING_HUMAN_ACTION
            return TurnResult(success=True, loop_state=self.state)
        return None

    def _controller_failed(self, seat: str, exc: Exception) -> TurnResult:
        logger.exception("Controller for seat %s failed", seat)
        self.state = LoopState.FAILED
        return TurnResult(
            success=False,
            loop_state=self.state,
            errors=[f"Controller for seat {seat} failed: {exc}"],
        )

    def _status(self) -> TurnResult:
        return TurnResult(success=True, loop_state=self.state)

    def _apply_decision(self, seat: str, decision: Decision) -> TurnResult:
        """Apply planned actions in order, stopping at the first failure."""
        session = self.session
        result = TurnResult(
            success=True,
            loop_state=self.state,
            decisions=1,
            states_processed=decision.states_processed,
        )

        if not decision.found:
            self.state = LoopState.FAILED
            result.success = False
            result.loop_state = self.state
            result.errors.append(f"Seat {seat} found no plan: {decision.explanation}")
            logger.error("Pathfinding failed for seat %s", seat)
            return result

        state: Any = session.game_state
        for action in decision.actions:
            ok, new_state = session.adapter.apply(state, action)
            if not ok:
                self.state = LoopState.FAILED
                result.success = False
                result.loop_state = self.state
                result.errors.append(
                    f"Seat {seat} planned an illegal action: {session.adapter.describe(action)}"
                )
                logger.error("Seat %s planned an illegal action %r", seat, action)
                return result

            session.push_state(new_state)
            session.log_action(seat, action)
            result.actions.append(session.action_log[-1])
            state = new_state

        self.state = LoopState.IDLE
        result.loop_state = self.state
        return result

"""
Per-exercise session: countdown timer, hint reveals and the submission
state machine.

    NOT_STARTED --start--> RUNNING --submit--> SUBMITTED_ON_TIME
                                   --timeout-> TIMED_OUT
                                   --abandon-> ABANDONED

SUBMITTED_ON_TIME and TIMED_OUT are terminal and produce an attempt.
ABANDONED (the exercise was collapsed) stops the clock and produces none.
The countdown is cancelled before the attempt is assembled, so a late tick
can never produce a second attempt.
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from loguru import logger

from exercises.base import GradeResult
from exercises.config import ExerciseEngineConfig
from exercises.drag_drop import DragDropBoard
from exercises.grading import grade
from models import ExerciseAttempt, ExerciseDefinition
from scoring import assemble_attempt


class ExerciseState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUBMITTED_ON_TIME = "submitted_on_time"
    TIMED_OUT = "timed_out"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (ExerciseState.SUBMITTED_ON_TIME, ExerciseState.TIMED_OUT)


class Countdown:
    """Whole-second countdown that stops ticking once cancelled."""

    def __init__(self, seconds: int):
        self.remaining = seconds
        self.cancelled = False

    def tick(self, seconds: int = 1) -> bool:
        """Decrement the countdown. Returns True when it reaches zero."""
        if self.cancelled or self.remaining <= 0:
            return False
        self.remaining = max(0, self.remaining - seconds)
        return self.remaining == 0

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(frozen=True)
class HintReveal:
    index: int
    text: str
    shown_at: float


class ExerciseSession:
    """Drives one live attempt at one exercise.

    Events: start(), tick(), advance_to(), request_hint(), submit(), abandon().
    Time comes from an injectable monotonic `clock`; `now` provides the
    wall-clock timestamp stored on the attempt.
    """

    def __init__(
        self,
        exercise: ExerciseDefinition,
        learner_id: str,
        config: ExerciseEngineConfig | None = None,
        on_complete: Callable[[ExerciseAttempt], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.exercise = exercise
        self.learner_id = learner_id
        self.config = config or ExerciseEngineConfig()
        self.on_complete = on_complete
        self._clock = clock
        self._now = now

        self.state = ExerciseState.NOT_STARTED
        self.hints_used = 0
        self.countdown: Countdown | None = None
        self.attempt: ExerciseAttempt | None = None
        self.grade_result: GradeResult | None = None
        self._started_at: float | None = None
        self._ticks = 0
        self._last_hint: HintReveal | None = None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the clock. Only valid from NOT_STARTED."""
        if self.state != ExerciseState.NOT_STARTED:
            return False

        self.state = ExerciseState.RUNNING
        self._started_at = self._clock()
        if self.exercise.time_limit_seconds is not None:
            self.countdown = Countdown(self.exercise.time_limit_seconds)
        logger.debug(f"Started exercise {self.exercise.id!r}")
        return True

    def tick(self) -> ExerciseAttempt | None:
        """Advance the countdown by one tick.

        Returns:
            The timeout attempt if this tick exhausted the time limit.
        """
        if self.state != ExerciseState.RUNNING or self.countdown is None:
            return None

        self._ticks += 1
        if self.countdown.tick(self.config.session.tick_seconds):
            return self._time_out()
        return None

    def advance_to(self) -> ExerciseAttempt | None:
        """Deliver every tick owed since the session started.

        Lets a blocking front end catch the countdown up with the clock
        before accepting input.
        """
        if self.state != ExerciseState.RUNNING or self.countdown is None:
            return None

        step = self.config.session.tick_seconds
        owed = int((self._clock() - self._started_at) // step) - self._ticks
        for _ in range(max(0, owed)):
            attempt = self.tick()
            if attempt is not None:
                return attempt
        return None

    def request_hint(self) -> str | None:
        """Reveal the next hint. The hint count never goes back down."""
        if self.state != ExerciseState.RUNNING:
            return None
        if self.hints_used >= len(self.exercise.hints):
            return None

        text = self.exercise.hints[self.hints_used]
        self._last_hint = HintReveal(self.hints_used, text, self._clock())
        self.hints_used += 1
        return text

    def submit(self, raw_answer: Any) -> ExerciseAttempt | None:
        """Grade and finish the attempt.

        A submission arriving after the deadline becomes a timeout. Returns
        None when the session is not running (nothing to submit, or already
        finished).
        """
        if self.state != ExerciseState.RUNNING:
            logger.debug(
                f"Ignored submission for {self.exercise.id!r} in state {self.state.value}"
            )
            return None

        timeout_attempt = self.advance_to()
        if timeout_attempt is not None:
            return timeout_attempt

        if isinstance(raw_answer, DragDropBoard):
            raw_answer = raw_answer.snapshot()

        result = grade(self.exercise, raw_answer, self.config)
        return self._finish(ExerciseState.SUBMITTED_ON_TIME, raw_answer, result)

    def abandon(self) -> bool:
        """Stop a running session without producing an attempt."""
        if self.state != ExerciseState.RUNNING:
            return False
        if self.countdown is not None:
            self.countdown.cancel()
        self.state = ExerciseState.ABANDONED
        logger.debug(f"Abandoned exercise {self.exercise.id!r}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    @property
    def remaining_seconds(self) -> int | None:
        return self.countdown.remaining if self.countdown else None

    @property
    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, math.floor(self._clock() - self._started_at))

    def current_hint(self) -> str | None:
        """The most recent hint while it is still on display."""
        if self._last_hint is None:
            return None
        if self._clock() - self._last_hint.shown_at >= self.config.session.hint_display_seconds:
            return None
        return self._last_hint.text

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _time_out(self) -> ExerciseAttempt:
        logger.info(f"Exercise {self.exercise.id!r} timed out")
        return self._finish(ExerciseState.TIMED_OUT, None, GradeResult.incorrect("timed out"))

    def _finish(
        self,
        state: ExerciseState,
        raw_answer: Any,
        result: GradeResult,
    ) -> ExerciseAttempt:
        if self.countdown is not None:
            self.countdown.cancel()
        self.state = state
        self.grade_result = result

        timed_out = state == ExerciseState.TIMED_OUT
        elapsed = self.elapsed_seconds
        if timed_out and self.exercise.time_limit_seconds is not None:
            elapsed = max(elapsed, self.exercise.time_limit_seconds)

        self.attempt = assemble_attempt(
            self.exercise,
            is_fully_correct=result.is_fully_correct,
            partial_score=result.partial_score,
            hints_used=self.hints_used,
            elapsed_seconds=elapsed,
            raw_answer=raw_answer,
            learner_id=self.learner_id,
            timed_out=timed_out,
            penalty_ratio=self.config.scoring.hint_penalty_ratio,
            submitted_at=self._now(),
        )

        if self.on_complete is not None:
            self.on_complete(self.attempt)
        return self.attempt

"""
Exercise section for one lesson.

Owns the lesson's LessonExerciseProgress, opens one exercise at a time, and
routes every finished attempt into the progress aggregate and the attempt
sinks (persistence, analytics). Exercises are presented in catalog order.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable

from loguru import logger

from catalog import ExerciseCatalog
from exercises.config import ExerciseEngineConfig
from models import ExerciseAttempt, ExerciseDefinition, LessonExerciseProgress
from session import ExerciseSession

AttemptSink = Callable[[ExerciseAttempt], Any]


class ExerciseSection:
    """Sequences a lesson's exercises and aggregates their scores."""

    def __init__(
        self,
        lesson_slug: str,
        catalog: ExerciseCatalog,
        learner_id: str = "current-user",
        config: ExerciseEngineConfig | None = None,
        sinks: list[AttemptSink] | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.lesson_slug = lesson_slug
        self.exercises = catalog.get_exercises_for_lesson(lesson_slug)
        self.learner_id = learner_id
        self.config = config or ExerciseEngineConfig()
        self.sinks: list[AttemptSink] = list(sinks or [])
        self.progress = LessonExerciseProgress(lesson_slug=lesson_slug)
        self.expanded_exercise_id: str | None = None
        self._clock = clock
        self._now = now
        self._exercises_by_id = {ex.id: ex for ex in self.exercises}
        self._sessions: dict[str, ExerciseSession] = {}

    # ------------------------------------------------------------------
    # Expand / collapse
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """True when the lesson has no exercises (nothing to render)."""
        return not self.exercises

    def get_exercise(self, exercise_id: str) -> ExerciseDefinition | None:
        return self._exercises_by_id.get(exercise_id)

    def is_completed(self, exercise_id: str) -> bool:
        return exercise_id in self.progress.completed_exercise_ids

    def can_open(self, exercise_id: str) -> bool:
        if exercise_id not in self._exercises_by_id:
            return False
        return self.config.allow_resubmission or not self.is_completed(exercise_id)

    def toggle(self, exercise_id: str) -> ExerciseSession | None:
        """Expand an exercise (collapsing any other), or collapse it if open.

        Expanding starts a fresh session for the exercise. Collapsing stops
        an unfinished session's clock and discards it, so it never times out
        in the background; the finished session of a submitted exercise is
        kept.

        Returns:
            The session of the now-expanded exercise, or None if collapsed
            or the exercise cannot be opened.
        """
        if self.expanded_exercise_id == exercise_id:
            self._collapse()
            return None

        if not self.can_open(exercise_id):
            logger.debug(f"Exercise {exercise_id!r} cannot be opened")
            return None

        self._collapse()
        self.expanded_exercise_id = exercise_id
        session = self._new_session(self._exercises_by_id[exercise_id])
        self._sessions[exercise_id] = session
        session.start()
        return session

    def _collapse(self) -> None:
        exercise_id = self.expanded_exercise_id
        if exercise_id is None:
            return
        self.expanded_exercise_id = None
        session = self._sessions.get(exercise_id)
        if session is not None and session.abandon():
            del self._sessions[exercise_id]

    def session_for(self, exercise_id: str) -> ExerciseSession | None:
        return self._sessions.get(exercise_id)

    @property
    def active_session(self) -> ExerciseSession | None:
        if self.expanded_exercise_id is None:
            return None
        return self._sessions.get(self.expanded_exercise_id)

    def next_exercise(self) -> ExerciseDefinition | None:
        """First exercise, in catalog order, that has not been completed."""
        for exercise in self.exercises:
            if not self.is_completed(exercise.id):
                return exercise
        return None

    # ------------------------------------------------------------------
    # Routing to the active session
    # ------------------------------------------------------------------

    def submit(self, exercise_id: str, raw_answer: Any) -> ExerciseAttempt | None:
        session = self._sessions.get(exercise_id)
        if session is None:
            return None
        return session.submit(raw_answer)

    def request_hint(self, exercise_id: str) -> str | None:
        session = self._sessions.get(exercise_id)
        if session is None:
            return None
        return session.request_hint()

    def tick(self) -> ExerciseAttempt | None:
        """Tick the expanded exercise's session.

        Returns:
            The timeout attempt if this tick exhausted its time limit.
        """
        session = self.active_session
        if session is None:
            return None
        return session.tick()

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def record_attempt(self, attempt: ExerciseAttempt) -> bool:
        """Fold a finished attempt into the lesson's progress.

        Returns:
            True if the attempt was recorded.
        """
        if attempt.exercise_id not in self._exercises_by_id:
            logger.warning(
                f"Ignoring attempt for {attempt.exercise_id!r}: not in lesson {self.lesson_slug!r}"
            )
            return False

        if self.is_completed(attempt.exercise_id) and not self.config.allow_resubmission:
            logger.debug(f"Ignoring repeat attempt for {attempt.exercise_id!r}")
            return False

        self.progress.record(attempt.exercise_id, attempt.score)
        logger.info(
            f"Recorded {attempt.exercise_id!r}: {attempt.score}/"
            f"{self._exercises_by_id[attempt.exercise_id].points} points"
            f" (hints {attempt.hints_used}, {attempt.elapsed_seconds}s)"
        )

        for sink in self.sinks:
            try:
                sink(attempt)
            except Exception as e:
                logger.error(f"Attempt sink failed for {attempt.exercise_id!r}: {e}")
        return True

    def score_for(self, exercise_id: str) -> int:
        return self.progress.scores_by_exercise_id.get(exercise_id, 0)

    @property
    def total_score(self) -> int:
        return self.progress.total_score

    @property
    def max_score(self) -> int:
        return sum(ex.points for ex in self.exercises)

    @property
    def completion_fraction(self) -> float:
        if not self.exercises:
            return 0.0
        return len(self.progress.completed_exercise_ids) / len(self.exercises)

    @property
    def is_complete(self) -> bool:
        """True once every exercise in the lesson has an attempt."""
        return bool(self.exercises) and self.completion_fraction >= 1.0

    def summary(self) -> dict[str, Any]:
        return {
            "lesson_slug": self.lesson_slug,
            "completed": len(self.progress.completed_exercise_ids),
            "total": len(self.exercises),
            "score": self.total_score,
            "max_score": self.max_score,
            "completion_fraction": self.completion_fraction,
            "is_complete": self.is_complete,
        }

    def _new_session(self, exercise: ExerciseDefinition) -> ExerciseSession:
        return ExerciseSession(
            exercise,
            learner_id=self.learner_id,
            config=self.config,
            on_complete=self.record_attempt,
            clock=self._clock,
            now=self._now,
        )

"""
Attempt scoring: combine a grade, hint usage and elapsed time into an
immutable ExerciseAttempt.

    base    = partial_score if given else (points if fully correct else 0)
    penalty = floor(points * HINT_PENALTY_RATIO) per hint
    final   = clamp(base - hints_used * penalty, 0, points)
"""

import math
from datetime import datetime, timezone
from typing import Any

from models import ExerciseAttempt, ExerciseDefinition


# Constants
HINT_PENALTY_RATIO = 0.1     # 10% of the exercise's points per hint
TIMEOUT_FEEDBACK = "Time's up! Don't worry, you can try again."
DEFAULT_PARTIAL_FEEDBACK = "Partially correct!"


def _as_count(value: Any, upper: int | None = None) -> int:
    """Coerce a numeric input to a non-negative int, optionally capped."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or number < 0:
        return 0
    if math.isinf(number):
        return upper if upper is not None else 0
    count = int(number)
    if upper is not None:
        count = min(count, upper)
    return count


def hint_penalty(points: int, ratio: float = HINT_PENALTY_RATIO) -> int:
    """Points deducted per revealed hint."""
    return math.floor(max(0, points) * ratio)


def compute_final_score(
    points: int,
    is_fully_correct: bool,
    partial_score: int | None = None,
    hints_used: int = 0,
    penalty_ratio: float = HINT_PENALTY_RATIO,
) -> int:
    """Apply the hint penalty to the base score, clamped to [0, points]."""
    points = _as_count(points)
    if partial_score is not None:
        base_score = _as_count(partial_score, points)
    else:
        base_score = points if is_fully_correct else 0

    penalty = _as_count(hints_used) * hint_penalty(points, penalty_ratio)
    return max(0, min(points, base_score - penalty))


def assemble_attempt(
    definition: ExerciseDefinition,
    is_fully_correct: bool,
    partial_score: int | None,
    hints_used: int,
    elapsed_seconds: float,
    raw_answer: Any,
    learner_id: str,
    *,
    timed_out: bool = False,
    penalty_ratio: float = HINT_PENALTY_RATIO,
    submitted_at: datetime | None = None,
) -> ExerciseAttempt:
    """Build the attempt record for one submission.

    Deterministic for identical inputs (given `submitted_at`). Malformed
    numeric inputs are clamped rather than rejected.
    """
    if timed_out:
        is_fully_correct = False
        partial_score = None

    hints_used = _as_count(hints_used, len(definition.hints))
    score = compute_final_score(
        definition.points,
        is_fully_correct,
        partial_score,
        hints_used,
        penalty_ratio,
    )

    return ExerciseAttempt(
        exercise_id=definition.id,
        learner_id=learner_id,
        raw_answer=raw_answer,
        is_fully_correct=bool(is_fully_correct),
        score=score,
        elapsed_seconds=_as_count(elapsed_seconds),
        hints_used=hints_used,
        timed_out=timed_out,
        submitted_at=submitted_at or datetime.now(timezone.utc),
    )


def feedback_for(
    definition: ExerciseDefinition,
    attempt: ExerciseAttempt,
    partial_score: int | None = None,
) -> str:
    """Pick the feedback message for a graded attempt."""
    if attempt.timed_out:
        return TIMEOUT_FEEDBACK
    if attempt.is_fully_correct:
        return definition.feedback.correct
    if partial_score is not None:
        return definition.feedback.partial or DEFAULT_PARTIAL_FEEDBACK
    return definition.feedback.incorrect

"""Abstract base class and shared utilities for answer validators."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from models import ExerciseDefinition

E = TypeVar("E", bound=ExerciseDefinition)


class GradeResult(BaseModel):
    """Outcome of grading one raw answer.

    `partial_score` is None for variants without partial credit; otherwise it
    is already expressed in points (floor of points * fraction correct).
    """

    model_config = ConfigDict(frozen=True)

    is_fully_correct: bool
    partial_score: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def incorrect(cls, reason: str = "") -> "GradeResult":
        """An incorrect result with no partial credit."""
        details = {"reason": reason} if reason else {}
        return cls(is_fully_correct=False, partial_score=None, details=details)


class AnswerValidator(ABC, Generic[E]):
    """Abstract base class for answer validators.

    Each exercise variant implements this interface to grade a learner's raw
    answer against its definition. Validators are pure: no I/O, no state
    beyond the definition they were built with.

    To add a new exercise variant:
    1. Create a Pydantic model in models.py extending ExerciseDefinition
    2. Create a validator class extending AnswerValidator[YourExerciseModel]
    3. Implement grade()
    4. Register it in EXERCISE_VALIDATORS in exercises/grading.py
    """

    def __init__(self, exercise: E):
        """Initialize validator with an exercise definition."""
        self.exercise = exercise

    @abstractmethod
    def grade(self, raw_answer: Any) -> GradeResult:
        """Grade a raw answer.

        Args:
            raw_answer: The learner's answer, shaped per variant. May be
                malformed; implementations return an incorrect result
                rather than raising.

        Returns:
            The grade for this answer.
        """
        ...

    def partial(self, correct_count: int, total: int) -> int:
        """Partial credit for this exercise's points."""
        return partial_points(self.exercise.points, correct_count, total)


def partial_points(points: int, correct_count: int, total: int) -> int:
    """Return floor(points * correct_count / total), clamped to [0, points].

    Args:
        points: Maximum achievable points.
        correct_count: Number of correct sub-parts.
        total: Number of sub-parts.

    Returns:
        Partial points, 0 when there are no sub-parts.
    """
    if total <= 0 or points <= 0:
        return 0
    correct_count = max(0, min(correct_count, total))
    return (points * correct_count) // total


def parse_letter_input(user_input: str, max_options: int = 4) -> int | None:
    """Parse letter (A-F) or number (1-6) input to 0-based index.

    Args:
        user_input: Raw user input string.
        max_options: Maximum number of valid options.

    Returns:
        0-based index or None if input is invalid or out of bounds.
    """
    user_input = user_input.strip().upper()
    letter_map = {"A": 0, "B": 1, "C": 2, "D": 3, "E": 4, "F": 5}

    if user_input in letter_map:
        index = letter_map[user_input]
    elif user_input.isdigit():
        index = int(user_input) - 1
    else:
        return None

    if index < 0 or index >= max_options:
        return None

    return index

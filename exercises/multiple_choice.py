"""Multiple choice validator."""

from typing import Any

from exercises.base import AnswerValidator, GradeResult
from models import MultipleChoiceExercise


class MultipleChoiceValidator(AnswerValidator[MultipleChoiceExercise]):
    """Binary grading: the selected option's `is_correct` flag."""

    def grade(self, raw_answer: Any) -> GradeResult:
        if not isinstance(raw_answer, str):
            return GradeResult.incorrect("answer is not an option id")

        option = self.exercise.get_option(raw_answer)
        if option is None:
            return GradeResult.incorrect(f"unknown option {raw_answer!r}")

        return GradeResult(
            is_fully_correct=option.is_correct,
            details={
                "selected": option.id,
                "correct": self.exercise.correct_option.id,
            },
        )

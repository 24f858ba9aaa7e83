"""Code completion validator and template helpers."""

import re
from typing import Any

from exercises.base import AnswerValidator, GradeResult
from models import CodeBlank, CodeCompletionExercise

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def normalize(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


def blank_is_correct(blank: CodeBlank, answer: Any) -> bool:
    """True if the answer matches any accepted answer for the blank."""
    if not isinstance(answer, str):
        return False
    candidate = normalize(answer, blank.case_sensitive)
    return any(
        normalize(accepted, blank.case_sensitive) == candidate
        for accepted in blank.correct_answers
    )


def fill_template(exercise: CodeCompletionExercise, answers: dict[str, str]) -> str:
    """Render the template with answers substituted (blanks left as ____)."""

    def _replace(match: re.Match) -> str:
        value = answers.get(match.group(1))
        return value if isinstance(value, str) and value else "____"

    return PLACEHOLDER_RE.sub(_replace, exercise.template)


class CodeCompletionValidator(AnswerValidator[CodeCompletionExercise]):
    """Per-blank grading with partial credit."""

    def grade(self, raw_answer: Any) -> GradeResult:
        if not isinstance(raw_answer, dict):
            return GradeResult.incorrect("answer is not a blank mapping")

        blanks = self.exercise.blanks
        results = {
            blank.id: blank_is_correct(blank, raw_answer.get(blank.id))
            for blank in blanks
        }
        correct_count = sum(results.values())
        total = len(blanks)

        return GradeResult(
            is_fully_correct=total > 0 and correct_count == total,
            partial_score=self.partial(correct_count, total),
            details={"blanks": results, "correct_count": correct_count, "total": total},
        )

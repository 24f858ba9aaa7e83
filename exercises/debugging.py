"""Debugging validator.

Grading is heuristic: a fixed checklist of bug signatures is compared
against the buggy original and the learner's fixed code. Nothing is
executed, so a submission can satisfy a signature without actually fixing
the bug (and vice versa). This is a known limitation of the grader.
"""

import re
from dataclasses import dataclass
from typing import Any

from exercises.base import AnswerValidator, GradeResult
from models import DebuggingExercise


@dataclass(frozen=True)
class BugSignature:
    """A before/after pattern pair describing one class of bug fix.

    The fix counts when `fixed_pattern` matches the submission and the
    original matches (or does not match, per `original_must_match`)
    `original_pattern`, which defaults to `fixed_pattern`.
    """

    id: str
    description: str
    fixed_pattern: re.Pattern
    original_pattern: re.Pattern | None = None
    original_must_match: bool = False

    def is_fixed(self, original_code: str, submitted_code: str) -> bool:
        if not self.fixed_pattern.search(submitted_code):
            return False
        before = self.original_pattern or self.fixed_pattern
        return bool(before.search(original_code)) == self.original_must_match


BUG_SIGNATURES: tuple[BugSignature, ...] = (
    BugSignature(
        id="missing-error-handling",
        description="Missing error handling",
        fixed_pattern=re.compile(r"try\s*\{[\s\S]*?\}\s*catch"),
    ),
    BugSignature(
        id="incorrect-status-code",
        description="Incorrect HTTP status code",
        fixed_pattern=re.compile(re.escape(".status(201)")),
        original_pattern=re.compile(re.escape(".status(200)")),
        original_must_match=True,
    ),
    BugSignature(
        id="missing-validation",
        description="Missing input validation",
        fixed_pattern=re.compile(r"if\s*\(\s*!.*\)"),
    ),
    BugSignature(
        id="async-await-issue",
        description="Missing await keyword",
        fixed_pattern=re.compile(r"await"),
    ),
    BugSignature(
        id="json-parsing",
        description="Missing JSON parsing",
        fixed_pattern=re.compile(r"JSON\.parse|\.json\(\)"),
    ),
)


def detect_fixes(
    original_code: str,
    submitted_code: str,
    bug_count: int,
    signatures: tuple[BugSignature, ...] = BUG_SIGNATURES,
) -> dict[str, bool]:
    """Evaluate the first `bug_count` signatures.

    Returns:
        Mapping of signature id to whether it counts as fixed, in checklist order.
    """
    return {
        sig.id: sig.is_fixed(original_code, submitted_code)
        for sig in signatures[:bug_count]
    }


class DebuggingValidator(AnswerValidator[DebuggingExercise]):
    """Bug-signature grading with partial credit."""

    def __init__(
        self,
        exercise: DebuggingExercise,
        signatures: tuple[BugSignature, ...] = BUG_SIGNATURES,
    ):
        super().__init__(exercise)
        self.signatures = signatures

    def grade(self, raw_answer: Any) -> GradeResult:
        if not isinstance(raw_answer, str):
            return GradeResult.incorrect("answer is not source code")

        expected = self.exercise.expected_bug_count
        fixes = detect_fixes(self.exercise.buggy_code, raw_answer, expected, self.signatures)
        fixed_count = sum(fixes.values())

        return GradeResult(
            is_fully_correct=fixed_count >= expected,
            partial_score=self.partial(fixed_count, expected),
            details={"bugs": fixes, "fixed_count": fixed_count, "total": expected},
        )

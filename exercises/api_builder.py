"""API builder validator.

The learner's server code is never executed. Each test case is scored by a
code-quality heuristic that looks for the HTTP method, the endpoint and
common framework idioms. The heuristic is easy to game (mentioning "GET"
anywhere earns the method bonus); it approximates, it does not verify.
"""

import re
from typing import Any

from exercises.base import AnswerValidator, GradeResult
from exercises.config import ApiBuilderConfig
from models import ApiBuilderExercise, ApiTestCase

PATH_PARAM_RE = re.compile(r"/:\w+")


def endpoint_variants(endpoint_pattern: str) -> set[str]:
    """The endpoint as written plus its form with `/:param` segments dropped.

    Examples:
        "/api/users/:id" -> {"/api/users/:id", "/api/users"}
        "/:id" -> {"/:id", ""}, and the empty variant matches any code
    """
    return {endpoint_pattern, PATH_PARAM_RE.sub("", endpoint_pattern)}


def analyze_code(
    code: str,
    test_case: ApiTestCase,
    config: ApiBuilderConfig | None = None,
) -> float:
    """Heuristic code quality in [0, 1] for one test case."""
    config = config or ApiBuilderConfig()
    score = config.base_score

    if test_case.http_method.lower() in code.lower():
        score += config.method_weight

    if any(variant in code for variant in endpoint_variants(test_case.endpoint_pattern)):
        score += config.endpoint_weight

    if any(idiom in code for idiom in config.framework_idioms):
        score += config.framework_weight

    return min(round(score, 6), 1.0)


class ApiBuilderValidator(AnswerValidator[ApiBuilderExercise]):
    """Per-test-case heuristic grading with partial credit."""

    def __init__(self, exercise: ApiBuilderExercise, config: ApiBuilderConfig | None = None):
        super().__init__(exercise)
        self.config = config or ApiBuilderConfig()

    def grade(self, raw_answer: Any) -> GradeResult:
        if not isinstance(raw_answer, str):
            return GradeResult.incorrect("answer is not source code")

        results: dict[str, dict[str, Any]] = {}
        for test_case in self.exercise.test_cases:
            quality = analyze_code(raw_answer, test_case, self.config)
            results[test_case.id] = {
                "quality": quality,
                "passed": quality > self.config.pass_threshold,
                "method": test_case.http_method,
                "endpoint": test_case.endpoint_pattern,
                "expected_status": test_case.expected_status,
            }

        passed_count = sum(1 for r in results.values() if r["passed"])
        total = len(self.exercise.test_cases)

        return GradeResult(
            is_fully_correct=passed_count == total,
            partial_score=self.partial(passed_count, total),
            details={"tests": results, "passed_count": passed_count, "total": total},
        )

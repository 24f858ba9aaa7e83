"""Answer validators for the API tutor exercise engine.

One validator per exercise variant, all pure functions of
(definition, raw answer) -> GradeResult.

Validators:
- MultipleChoiceValidator: selected option id vs. the single correct option
- CodeCompletionValidator: per-blank normalized match, partial credit
- DragDropValidator: item -> zone placements vs. the correct mapping
- DebuggingValidator: fixed bug signatures vs. expected bug count
- ApiBuilderValidator: heuristic code-quality score per test case

Entry point:
- grade(): dispatches on the variant tag and never raises

Configuration:
- ExerciseEngineConfig: scoring, session and api-builder tunables
"""

from exercises.base import AnswerValidator, GradeResult, parse_letter_input, partial_points
from exercises.config import (
    ApiBuilderConfig,
    ExerciseEngineConfig,
    ScoringConfig,
    SessionConfig,
)
from exercises.api_builder import ApiBuilderValidator, analyze_code
from exercises.code_completion import CodeCompletionValidator, fill_template
from exercises.debugging import BUG_SIGNATURES, BugSignature, DebuggingValidator, detect_fixes
from exercises.drag_drop import DragDropBoard, DragDropValidator
from exercises.multiple_choice import MultipleChoiceValidator
from exercises.grading import EXERCISE_VALIDATORS, get_validator, grade

__all__ = [
    # Base
    "AnswerValidator",
    "GradeResult",
    "parse_letter_input",
    "partial_points",
    # Config
    "ApiBuilderConfig",
    "ExerciseEngineConfig",
    "ScoringConfig",
    "SessionConfig",
    # Validators
    "ApiBuilderValidator",
    "CodeCompletionValidator",
    "DebuggingValidator",
    "DragDropValidator",
    "MultipleChoiceValidator",
    # Helpers
    "analyze_code",
    "fill_template",
    "detect_fixes",
    "BugSignature",
    "BUG_SIGNATURES",
    "DragDropBoard",
    # Dispatch
    "EXERCISE_VALIDATORS",
    "get_validator",
    "grade",
]

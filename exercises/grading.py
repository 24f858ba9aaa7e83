"""Grading entry point: dispatch a raw answer to its variant's validator.

The grading boundary is total. Malformed answers, unknown ids and even
unexpected validator failures come back as an incorrect GradeResult.
"""

from typing import Any

from loguru import logger

from exercises.api_builder import ApiBuilderValidator
from exercises.base import AnswerValidator, GradeResult
from exercises.code_completion import CodeCompletionValidator
from exercises.config import ExerciseEngineConfig
from exercises.debugging import DebuggingValidator
from exercises.drag_drop import DragDropValidator
from exercises.multiple_choice import MultipleChoiceValidator
from models import (
    ApiBuilderExercise,
    CodeCompletionExercise,
    DebuggingExercise,
    DragDropExercise,
    ExerciseDefinition,
    ExerciseVariant,
    MultipleChoiceExercise,
)

# Registry of validator classes
EXERCISE_VALIDATORS: dict[ExerciseVariant, type[AnswerValidator]] = {
    ExerciseVariant.CODE_COMPLETION: CodeCompletionValidator,
    ExerciseVariant.API_BUILDER: ApiBuilderValidator,
    ExerciseVariant.DEBUGGING: DebuggingValidator,
    ExerciseVariant.MULTIPLE_CHOICE: MultipleChoiceValidator,
    ExerciseVariant.DRAG_DROP: DragDropValidator,
}

EXERCISE_MODELS: dict[ExerciseVariant, type[ExerciseDefinition]] = {
    ExerciseVariant.CODE_COMPLETION: CodeCompletionExercise,
    ExerciseVariant.API_BUILDER: ApiBuilderExercise,
    ExerciseVariant.DEBUGGING: DebuggingExercise,
    ExerciseVariant.MULTIPLE_CHOICE: MultipleChoiceExercise,
    ExerciseVariant.DRAG_DROP: DragDropExercise,
}


def variant_of(definition: ExerciseDefinition) -> ExerciseVariant | None:
    """Return the variant tag of a definition, or None if unsupported."""
    try:
        return ExerciseVariant(getattr(definition, "variant", None))
    except ValueError:
        return None


def get_validator(
    definition: ExerciseDefinition,
    config: ExerciseEngineConfig | None = None,
) -> AnswerValidator | None:
    """Build the validator for a definition, or None if its variant is unsupported."""
    variant = variant_of(definition)
    if variant is None or not isinstance(definition, EXERCISE_MODELS[variant]):
        return None

    validator_class = EXERCISE_VALIDATORS[variant]
    if isinstance(definition, ApiBuilderExercise):
        config = config or ExerciseEngineConfig()
        return ApiBuilderValidator(definition, config.api_builder)
    return validator_class(definition)


def grade(
    definition: ExerciseDefinition,
    raw_answer: Any,
    config: ExerciseEngineConfig | None = None,
) -> GradeResult:
    """Grade a raw answer against an exercise definition. Never raises."""
    validator = get_validator(definition, config)
    if validator is None:
        logger.warning(f"Cannot grade unsupported exercise {definition.id!r}")
        return GradeResult.incorrect("unsupported exercise")

    try:
        return validator.grade(raw_answer)
    except Exception as e:
        logger.warning(f"Grading failed for exercise {definition.id!r}: {e}")
        return GradeResult.incorrect("grading error")

"""
Exercise catalog: read-only mapping from lesson slug to the lesson's exercises,
in declaration order.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from models import AnyExercise, ExerciseDefinition, ExerciseVariant, UnsupportedExercise

DEFAULT_EXERCISES_PATH = Path(__file__).parent / "data" / "exercises.json"

_EXERCISE_ADAPTER: TypeAdapter = TypeAdapter(AnyExercise)
_KNOWN_VARIANTS = {variant.value for variant in ExerciseVariant}
_SHARED_FIELDS = set(ExerciseDefinition.model_fields)


class CatalogError(ValueError):
    """Raised when catalog data is inconsistent (e.g., duplicate exercise ids)."""


def parse_exercise(data: dict[str, Any], fallback_id: str = "unsupported") -> ExerciseDefinition:
    """Parse one exercise record.

    Records with an unrecognised variant tag become UnsupportedExercise and
    never fail to load: a missing id falls back to `fallback_id`, and shared
    fields that do not validate are dropped. Malformed records of a known
    variant raise pydantic's ValidationError.
    """
    variant = data.get("variant")
    if variant in _KNOWN_VARIANTS:
        return _EXERCISE_ADAPTER.validate_python(data)

    exercise_id = str(data.get("id") or fallback_id)
    logger.warning(f"Unsupported exercise variant {variant!r} for {exercise_id!r}")
    shared = {key: value for key, value in data.items() if key in _SHARED_FIELDS}
    shared["id"] = exercise_id
    shared.setdefault("title", exercise_id)
    try:
        return UnsupportedExercise(variant=str(variant), raw=dict(data), **shared)
    except ValidationError as e:
        logger.warning(f"Dropping invalid fields of unsupported exercise {exercise_id!r}: {e}")
        return UnsupportedExercise(
            id=exercise_id,
            title=exercise_id,
            variant=str(variant),
            raw=dict(data),
        )


class ExerciseCatalog:
    """Exercises grouped by lesson slug."""

    def __init__(self, exercises_by_lesson: dict[str, list[ExerciseDefinition]]):
        self._by_lesson = {slug: list(items) for slug, items in exercises_by_lesson.items()}
        self._by_id: dict[str, ExerciseDefinition] = {}

        for slug, items in self._by_lesson.items():
            for exercise in items:
                if exercise.id in self._by_id:
                    raise CatalogError(
                        f"Duplicate exercise id {exercise.id!r} (lesson {slug!r})"
                    )
                self._by_id[exercise.id] = exercise

    @classmethod
    def from_dict(cls, data: dict[str, list[dict[str, Any]]]) -> "ExerciseCatalog":
        return cls(
            {
                slug: [
                    parse_exercise(record, fallback_id=f"{slug}-{position}")
                    for position, record in enumerate(records)
                ]
                for slug, records in data.items()
            }
        )

    @classmethod
    def from_json(cls, path: Path = DEFAULT_EXERCISES_PATH) -> "ExerciseCatalog":
        """Load a catalog from a JSON file of {lesson_slug: [exercise, ...]}."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise CatalogError(f"{path}: expected an object keyed by lesson slug")
        catalog = cls.from_dict(data)
        logger.debug(f"Loaded {len(catalog)} exercises from {path}")
        return catalog

    def get_exercises_for_lesson(self, lesson_slug: str) -> list[ExerciseDefinition]:
        """Ordered exercises for a lesson; empty if the lesson has none."""
        return list(self._by_lesson.get(lesson_slug, []))

    def get_exercise_by_id(self, exercise_id: str) -> ExerciseDefinition | None:
        return self._by_id.get(exercise_id)

    def lesson_slugs(self) -> list[str]:
        return list(self._by_lesson)

    def __len__(self) -> int:
        return len(self._by_id)

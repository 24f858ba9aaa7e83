"""Tests for the exercise catalog."""

import json

import pytest
from pydantic import ValidationError

from catalog import DEFAULT_EXERCISES_PATH, CatalogError, ExerciseCatalog, parse_exercise
from models import (
    ApiBuilderExercise,
    DebuggingExercise,
    DragDropExercise,
    MultipleChoiceExercise,
    UnsupportedExercise,
)

QUIZ_RECORD = {
    "id": "quiz",
    "variant": "multiple-choice",
    "title": "Quiz",
    "points": 10,
    "question": "Pick one",
    "options": [
        {"id": "a", "text": "Right", "is_correct": True},
        {"id": "b", "text": "Wrong"},
    ],
}


class TestParseExercise:
    """Tests for parse_exercise."""

    def test_known_variant(self):
        exercise = parse_exercise(QUIZ_RECORD)
        assert isinstance(exercise, MultipleChoiceExercise)
        assert exercise.correct_option.id == "a"

    def test_unknown_variant_becomes_unsupported(self):
        record = {"id": "cross", "variant": "crossword", "points": 5, "grid": [[1, 2]]}
        exercise = parse_exercise(record)
        assert isinstance(exercise, UnsupportedExercise)
        assert exercise.variant == "crossword"
        assert exercise.title == "cross"
        assert exercise.points == 5
        assert exercise.raw["grid"] == [[1, 2]]

    def test_unknown_variant_without_id_uses_position(self):
        catalog = ExerciseCatalog.from_dict(
            {"rest": [QUIZ_RECORD, {"variant": "crossword", "title": "Puzzle"}]}
        )
        exercise = catalog.get_exercises_for_lesson("rest")[1]
        assert isinstance(exercise, UnsupportedExercise)
        assert exercise.id == "rest-1"
        assert exercise.title == "Puzzle"
        assert catalog.get_exercise_by_id("rest-1") is exercise

    def test_unknown_variant_with_invalid_fields_still_loads(self):
        record = {"id": "cross", "variant": "crossword", "points": -1, "time_limit_seconds": 0}
        exercise = parse_exercise(record)
        assert isinstance(exercise, UnsupportedExercise)
        assert exercise.id == "cross"
        assert exercise.points == 0
        assert exercise.time_limit_seconds is None
        assert exercise.raw["points"] == -1

    def test_malformed_known_variant_raises(self):
        record = dict(QUIZ_RECORD, options=[{"id": "a", "text": "Only", "is_correct": False}])
        with pytest.raises(ValidationError):
            parse_exercise(record)


class TestExerciseCatalog:
    """Tests for ExerciseCatalog lookups."""

    def test_lookup_preserves_order(self, sample_catalog):
        exercises = sample_catalog.get_exercises_for_lesson("introduction")
        assert [ex.id for ex in exercises] == ["api-basics-quiz", "api-request-code"]

    def test_catalog_miss_is_empty(self, sample_catalog):
        assert sample_catalog.get_exercises_for_lesson("graphql") == []

    def test_returned_list_is_a_copy(self, sample_catalog):
        sample_catalog.get_exercises_for_lesson("introduction").clear()
        assert len(sample_catalog.get_exercises_for_lesson("introduction")) == 2

    def test_lookup_by_id(self, sample_catalog):
        assert sample_catalog.get_exercise_by_id("rest-principles-drag-drop").points == 20
        assert sample_catalog.get_exercise_by_id("missing") is None

    def test_duplicate_ids_rejected(self, multiple_choice_exercise):
        with pytest.raises(CatalogError):
            ExerciseCatalog(
                {"one": [multiple_choice_exercise], "two": [multiple_choice_exercise]}
            )

    def test_from_json_requires_object(self, tmp_path):
        path = tmp_path / "exercises.json"
        path.write_text(json.dumps([QUIZ_RECORD]))
        with pytest.raises(CatalogError):
            ExerciseCatalog.from_json(path)

    def test_from_json(self, tmp_path):
        path = tmp_path / "exercises.json"
        path.write_text(json.dumps({"basics": [QUIZ_RECORD]}))
        catalog = ExerciseCatalog.from_json(path)
        assert catalog.lesson_slugs() == ["basics"]
        assert len(catalog) == 1


class TestBundledExercises:
    """The shipped exercise data loads and covers every variant."""

    @pytest.fixture
    def catalog(self):
        return ExerciseCatalog.from_json(DEFAULT_EXERCISES_PATH)

    def test_loads_all_exercises(self, catalog):
        assert len(catalog) == 5
        assert set(catalog.lesson_slugs()) == {"introduction", "rest-fundamentals", "http-methods"}

    def test_variants(self, catalog):
        rest = catalog.get_exercises_for_lesson("rest-fundamentals")
        assert isinstance(rest[0], DragDropExercise)
        assert isinstance(rest[1], ApiBuilderExercise)
        assert len(rest[1].test_cases) == 5
        debug = catalog.get_exercises_for_lesson("http-methods")
        assert isinstance(debug[0], DebuggingExercise)

    def test_no_unsupported_entries(self, catalog):
        for slug in catalog.lesson_slugs():
            for exercise in catalog.get_exercises_for_lesson(slug):
                assert not isinstance(exercise, UnsupportedExercise)

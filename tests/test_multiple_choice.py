"""Unit tests for multiple choice grading and letter input parsing."""

import pytest
from pydantic import ValidationError

from exercises.base import parse_letter_input
from exercises.multiple_choice import MultipleChoiceValidator
from models import MultipleChoiceExercise, MultipleChoiceOption


class TestMultipleChoiceValidator:
    """Tests for MultipleChoiceValidator.grade."""

    def test_correct_option_is_fully_correct(self, multiple_choice_exercise):
        """Selecting the single correct option grades as fully correct."""
        result = MultipleChoiceValidator(multiple_choice_exercise).grade("a")
        assert result.is_fully_correct is True
        assert result.partial_score is None
        assert result.details == {"selected": "a", "correct": "a"}

    def test_wrong_option_is_incorrect(self, multiple_choice_exercise):
        """A known but wrong option is incorrect and reports the right answer."""
        result = MultipleChoiceValidator(multiple_choice_exercise).grade("c")
        assert result.is_fully_correct is False
        assert result.partial_score is None
        assert result.details["correct"] == "a"

    @pytest.mark.parametrize("raw_answer", [None, 0, ["a"], {"id": "a"}, "z", ""])
    def test_malformed_or_unknown_answers_are_incorrect(
        self, multiple_choice_exercise, raw_answer
    ):
        """Non-string answers and unknown ids degrade to incorrect."""
        result = MultipleChoiceValidator(multiple_choice_exercise).grade(raw_answer)
        assert result.is_fully_correct is False
        assert result.partial_score is None


class TestMultipleChoiceDefinition:
    """Tests for MultipleChoiceExercise validation."""

    def test_requires_exactly_one_correct_option(self):
        with pytest.raises(ValidationError):
            MultipleChoiceExercise(
                id="bad",
                title="Two answers",
                question="?",
                options=(
                    MultipleChoiceOption(id="a", text="A", is_correct=True),
                    MultipleChoiceOption(id="b", text="B", is_correct=True),
                ),
            )

    def test_requires_at_least_two_options(self):
        with pytest.raises(ValidationError):
            MultipleChoiceExercise(
                id="bad",
                title="One option",
                question="?",
                options=(MultipleChoiceOption(id="a", text="A", is_correct=True),),
            )

    def test_correct_option_lookup(self, multiple_choice_exercise):
        assert multiple_choice_exercise.correct_option.id == "a"
        assert multiple_choice_exercise.get_option("b").text.startswith("Advanced")
        assert multiple_choice_exercise.get_option("missing") is None


class TestParseLetterInput:
    """Tests for parse_letter_input."""

    @pytest.mark.parametrize(
        "user_input, expected",
        [("a", 0), ("B", 1), (" c ", 2), ("4", 3), ("1", 0)],
    )
    def test_valid_inputs(self, user_input, expected):
        assert parse_letter_input(user_input, 4) == expected

    @pytest.mark.parametrize("user_input", ["e", "5", "0", "", "ab", "-1"])
    def test_invalid_inputs_return_none(self, user_input):
        assert parse_letter_input(user_input, 4) is None

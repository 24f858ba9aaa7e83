"""Integration tests for the command-line entry points in main.py.

These tests simulate user input through stdin by mocking Console.input().
"""

import io
from typing import Any

import httpx
import pytest
from rich.console import Console

import main
from catalog import ExerciseCatalog
from orchestrator import ExerciseSection
from playground import PlaygroundClient
from settings import Settings
from storage import get_attempt_repo
from ui import TutorUI


class InputSequence:
    """Callable providing sequential inputs for mocked Console.input().

    Tracks all prompts received for debugging failed tests.
    """

    def __init__(self, inputs: list[str]):
        self.inputs = inputs
        self.index = 0
        self.call_history: list[tuple[int, Any]] = []

    def __call__(self, prompt: Any = "") -> str:
        self.call_history.append((self.index, prompt))
        if self.index >= len(self.inputs):
            history = "\n".join(f"  {i}: {p}" for i, p in self.call_history)
            raise StopIteration(
                f"Ran out of inputs at call {self.index}.\n"
                f"Prompt: {prompt}\n"
                f"History:\n{history}"
            )
        result = self.inputs[self.index]
        self.index += 1
        return result

    @property
    def remaining(self) -> int:
        return len(self.inputs) - self.index


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep rich from wrapping table cells in captured output."""
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=tmp_path / "tutor.db", learner_id="tester")


@pytest.fixture
def study_runner(settings, monkeypatch):
    """Run `study <slug>` against a temporary database with scripted input."""
    monkeypatch.setattr("signal.signal", lambda *args, **kwargs: None)
    monkeypatch.setattr(Console, "clear", lambda self: None)

    def runner(slug: str, inputs: InputSequence):
        monkeypatch.setattr(Console, "input", inputs)
        args = main.create_parser().parse_args(["study", slug])
        main.run_study(args, settings)
        return get_attempt_repo(settings.database_path).get_for_learner("tester")

    return runner


class TestParser:
    """Tests for argument parsing."""

    def test_playground_defaults(self):
        args = main.create_parser().parse_args(["playground"])
        assert args.method == "GET"
        assert args.url is None
        assert args.header == []

    def test_playground_request(self):
        args = main.create_parser().parse_args(
            ["--log-level", "debug", "playground", "post", "https://x.test", "-H", "X-A: 1", "-d", "{}"]
        )
        assert args.log_level == "DEBUG"
        assert args.method == "POST"
        assert args.header == ["X-A: 1"]
        assert args.body == "{}"

    def test_cli_overrides_settings(self, tmp_path):
        args = main.create_parser().parse_args(["--db", str(tmp_path / "cli.db"), "seed"])
        settings = main.load_settings(args)
        assert settings.database_path == tmp_path / "cli.db"


class TestStudy:
    """Tests for the interactive exercise section."""

    def test_correct_multiple_choice(self, study_runner):
        inputs = InputSequence(
            [
                "",  # Overview - next exercise (the quiz)
                "a",  # Correct option
                "",  # Press Enter to continue
                "q",  # Leave the overview
            ]
        )
        attempts = study_runner("introduction", inputs)

        assert len(attempts) == 1
        assert attempts[0].exercise_id == "api-basics-quiz"
        assert attempts[0].is_fully_correct is True
        assert attempts[0].score == 10
        assert inputs.remaining == 0

    def test_hint_costs_points(self, study_runner):
        inputs = InputSequence(["", "h", "a", "", "q"])
        attempts = study_runner("introduction", inputs)

        assert attempts[0].hints_used == 1
        assert attempts[0].score == 9

    def test_code_completion_by_number(self, study_runner):
        inputs = InputSequence(
            [
                "2",
                "GET",
                "https://jsonplaceholder.typicode.com/users/1",
                "json",
                "error",
                "",
                "q",
            ]
        )
        attempts = study_runner("introduction", inputs)

        assert attempts[0].exercise_id == "api-request-code"
        assert attempts[0].score == 15

    def test_quitting_an_exercise_records_nothing(self, study_runner):
        inputs = InputSequence(["", "q", "", "q"])
        attempts = study_runner("introduction", inputs)
        assert attempts == []
        assert inputs.remaining == 0

    def test_drag_drop_moves(self, study_runner):
        inputs = InputSequence(
            [
                "",
                "stateless:stateless-desc",
                "cacheable:stateless-desc",  # Zone full, rejected
                "done",  # Items still unplaced, rejected
                "cacheable:layered-desc",
                "uniform-interface:uniform-desc",
                "client-server:client-server-desc",
                "layered-system:cacheable-desc",
                "code-on-demand:code-demand-desc",
                "done",
                "",
                "q",
            ]
        )
        attempts = study_runner("rest-fundamentals", inputs)

        assert len(attempts) == 1
        assert attempts[0].exercise_id == "rest-principles-drag-drop"
        assert attempts[0].is_fully_correct is False
        assert attempts[0].score == 13  # floor(20 * 4 / 6)
        assert attempts[0].raw_answer["stateless-desc"] == ["stateless"]
        assert inputs.remaining == 0

    def test_done_rejected_until_every_item_is_placed(self, study_runner, capsys):
        inputs = InputSequence(["", "stateless:stateless-desc", "done", "q", "", "q"])
        attempts = study_runner("rest-fundamentals", inputs)

        assert attempts == []
        assert "Place every item before submitting" in capsys.readouterr().out

    def test_unknown_lesson(self, study_runner, capsys):
        attempts = study_runner("graphql", InputSequence([]))
        assert attempts == []
        assert "No lesson with slug" in capsys.readouterr().out


class TestHintDisplay:
    """Tests for the hint shown above an open exercise."""

    HINT = "Match each principle to its meaning"

    def test_hint_hidden_once_display_window_passes(self, drag_drop_exercise, clock, fixed_now, monkeypatch):
        exercise = drag_drop_exercise.model_copy(update={"hints": (self.HINT,)})
        section = ExerciseSection(
            "rest-fundamentals",
            ExerciseCatalog({"rest-fundamentals": [exercise]}),
            clock=clock,
            now=fixed_now,
        )
        session = section.toggle(exercise.id)
        output = io.StringIO()
        ui = TutorUI(Console(file=output, width=200))

        inputs = InputSequence(["h", "nonsense", "q"])

        def slow_input(prompt: Any = "") -> str:
            value = inputs(prompt)
            clock.advance(11)
            return value

        monkeypatch.setattr(ui.console, "input", slow_input)

        assert main.run_exercise(ui, section, session, 1) is None
        # Drawn on the round after the request, gone 11 seconds later
        assert output.getvalue().count(self.HINT) == 1
        assert inputs.remaining == 0

    def test_hint_drawn_with_exercise(self, drag_drop_exercise):
        exercise = drag_drop_exercise.model_copy(update={"hints": (self.HINT,)})
        output = io.StringIO()
        ui = TutorUI(Console(file=output, width=200))

        ui.show_exercise(exercise, 1, 1, hints_used=1, hint=self.HINT)
        ui.show_exercise(exercise, 1, 1, hints_used=1)

        assert output.getvalue().count(self.HINT) == 1
        assert "Hint 1/1" in output.getvalue()


class TestLessonsCommand:
    """Tests for the lessons command."""

    def test_lists_seeded_lessons(self, settings, capsys):
        args = main.create_parser().parse_args(["lessons"])
        main.run_lessons(args, settings)
        out = capsys.readouterr().out
        assert "What are APIs?" in out
        assert "HTTP Methods" in out

    def test_search_without_matches(self, settings, capsys):
        args = main.create_parser().parse_args(["lessons", "--search", "zzzz"])
        main.run_lessons(args, settings)
        assert "No lessons found." in capsys.readouterr().out


class TestPlaygroundCommand:
    """Tests for the playground command."""

    def test_sends_request_with_headers(self, settings, monkeypatch, capsys):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={"id": 11})

        monkeypatch.setattr(
            main,
            "PlaygroundClient",
            lambda **kwargs: PlaygroundClient(transport=httpx.MockTransport(handler), **kwargs),
        )
        args = main.create_parser().parse_args(
            ["playground", "POST", "https://api.example.com/users", "-H", "X-Token: abc", "-d", '{"name": "Ada"}']
        )
        main.run_playground(args, settings)

        assert seen[0].headers["x-token"] == "abc"
        assert seen[0].content == b'{"name": "Ada"}'
        assert "201" in capsys.readouterr().out

    def test_lists_presets_without_url(self, settings, capsys):
        args = main.create_parser().parse_args(["playground"])
        main.run_playground(args, settings)
        assert "JSONPlaceholder" in capsys.readouterr().out

    def test_rejects_unknown_preset(self, settings, capsys):
        args = main.create_parser().parse_args(["playground", "--preset", "9"])
        main.run_playground(args, settings)
        assert "Preset must be between 1 and 4" in capsys.readouterr().out

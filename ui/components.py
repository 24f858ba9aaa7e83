import json
from typing import Any, Optional, List

from rich.console import Group
from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.syntax import Syntax
from rich.align import Align
from rich import box

from exercises.code_completion import fill_template
from exercises.drag_drop import DragDropBoard
from models import (
    ApiBuilderExercise,
    CodeCompletionExercise,
    DebuggingExercise,
    DragDropExercise,
    ExerciseAttempt,
    ExerciseDefinition,
    Lesson,
    MultipleChoiceExercise,
)
from playground import PlaygroundRequest, PlaygroundResponse
from ui.styles import (
    API_BLUE,
    ACCENT_AMBER,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    format_time,
    get_difficulty_style,
    get_method_style,
    get_status_style,
    get_timer_style,
)


def _progress_bar(percent: float, width: int = 30) -> str:
    """Create a text-based progress bar."""
    filled = int(width * percent / 100)
    remaining = width - filled
    bar = "█" * filled + "░" * remaining
    return f"[{bar}] {percent:.0f}%"


class ExercisePanel:
    """A styled panel for one exercise, rendered per variant."""

    SUBTITLES = {
        "multiple-choice": "Type a letter, 'h' for a hint, or 'q' to quit",
        "code-completion": "Fill each blank in turn ('h' hint, 'q' quit)",
        "drag-drop": "Move with item:zone, 'done' to submit, 'h' hint, 'q' quit",
        "debugging": "Enter the fixed code, end with '.' (':h' hint, ':q' quit)",
        "api-builder": "Enter your code, end with '.' (':h' hint, ':q' quit)",
    }

    def __init__(
        self,
        exercise: ExerciseDefinition,
        exercise_number: int = 0,
        total_exercises: int = 0,
        remaining_seconds: Optional[int] = None,
        hints_used: int = 0,
        board: Optional[DragDropBoard] = None,
        answers: Optional[dict[str, str]] = None,
    ):
        self.exercise = exercise
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises
        self.remaining_seconds = remaining_seconds
        self.hints_used = hints_used
        self.board = board
        self.answers = answers or {}

    def render(self) -> Panel:
        header = Text()
        if self.total_exercises > 0:
            header.append(
                f"Exercise {self.exercise_number}/{self.total_exercises}  ",
                Style(color=MUTED_GRAY),
            )
        header.append(
            self.exercise.difficulty.value.upper(),
            get_difficulty_style(self.exercise.difficulty.value),
        )
        header.append(f"  {self.exercise.points} pts", Style(color=ACCENT_AMBER))
        if self.remaining_seconds is not None and self.exercise.time_limit_seconds:
            header.append("  ⏱ ", Style(color=MUTED_GRAY))
            header.append(
                format_time(self.remaining_seconds),
                get_timer_style(self.remaining_seconds, self.exercise.time_limit_seconds),
            )
        if self.exercise.hints:
            header.append(
                f"  Hints {self.hints_used}/{len(self.exercise.hints)}",
                Style(color=MUTED_GRAY),
            )
        header.append("\n\n")
        header.append(self.exercise.title, Style(color=API_BLUE, bold=True))
        if self.exercise.description:
            header.append("\n")
            header.append(self.exercise.description, Style(color=TEXT_WHITE))

        body = self._render_body()
        variant = getattr(self.exercise, "variant", "")

        return Panel(
            Group(header, Text(), *body),
            title="API Tutor",
            subtitle=self.SUBTITLES.get(variant, "Press Enter to continue"),
            border_style=API_BLUE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _render_body(self) -> list[Any]:
        ex = self.exercise
        if isinstance(ex, MultipleChoiceExercise):
            content = Text()
            content.append(ex.question, Style(color=API_BLUE, bold=True))
            content.append("\n\n")
            for i, option in enumerate(ex.options):
                content.append(f"{chr(65 + i)}. ", Style(color=ACCENT_AMBER, bold=True))
                content.append(option.text, Style(color=TEXT_WHITE))
                content.append("\n")
            return [content]

        if isinstance(ex, CodeCompletionExercise):
            return [Syntax(fill_template(ex, self.answers), ex.language, line_numbers=True)]

        if isinstance(ex, DebuggingExercise):
            content = Text()
            content.append("Problem: ", Style(color=ERROR_RED, bold=True))
            content.append(ex.error_description + "\n", Style(color=TEXT_WHITE))
            content.append("Expected: ", Style(color=SUCCESS_GREEN, bold=True))
            content.append(ex.expected_behavior, Style(color=TEXT_WHITE))
            return [content, Text(), Syntax(ex.buggy_code, ex.language, line_numbers=True)]

        if isinstance(ex, ApiBuilderExercise):
            content = Text()
            content.append(ex.scenario + "\n\n", Style(color=TEXT_WHITE))
            content.append("Requirements:\n", Style(color=ACCENT_AMBER, bold=True))
            for requirement in ex.requirements:
                content.append(f"  • {requirement}\n", Style(color=TEXT_WHITE))
            parts: list[Any] = [content]
            if ex.starting_code:
                parts.append(Syntax(ex.starting_code, "javascript", line_numbers=True))
            return parts

        if isinstance(ex, DragDropExercise):
            return [self._render_board(ex)]

        notice = Text("This exercise type is not supported yet.", Style(color=MUTED_GRAY))
        return [notice]

    def _render_board(self, ex: DragDropExercise) -> Any:
        board = self.board or DragDropBoard(ex)
        table = Table(
            show_header=True,
            header_style=Style(color=API_BLUE, bold=True),
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        table.add_column("Zone", style=Style(color=ACCENT_AMBER, bold=True))
        table.add_column("Label", style=Style(color=TEXT_WHITE))
        table.add_column("Placed", style=Style(color=SUCCESS_GREEN))
        for zone in ex.drop_zones:
            placed = ", ".join(board.items_in(zone.id)) or "-"
            table.add_row(zone.id, zone.label, placed)

        available = Text()
        available.append("Available: ", Style(color=MUTED_GRAY))
        for item_id in board.available_items():
            item = ex.get_item(item_id)
            available.append(f"{item_id}", Style(color=ACCENT_AMBER, bold=True))
            available.append(f" ({item.content})  " if item else "  ", Style(color=TEXT_WHITE))

        instruction = Text(ex.instruction, Style(color=API_BLUE, bold=True))
        return Group(instruction, table, available)

    def __rich__(self) -> Panel:
        return self.render()


class HintPanel:
    """A compact panel for a revealed hint."""

    def __init__(self, hint: str, hint_number: int, total_hints: int):
        self.hint = hint
        self.hint_number = hint_number
        self.total_hints = total_hints

    def render(self) -> Panel:
        return Panel(
            Text(self.hint, Style(color=TEXT_WHITE)),
            title=f"💡 Hint {self.hint_number}/{self.total_hints}",
            border_style=ACCENT_AMBER,
            box=box.ROUNDED,
            padding=(0, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for a finished attempt."""

    def __init__(
        self,
        exercise: ExerciseDefinition,
        attempt: ExerciseAttempt,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.exercise = exercise
        self.attempt = attempt
        self.message = message
        self.details = details or {}

    def render(self) -> Panel:
        content = Text()

        if self.attempt.is_fully_correct:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append(self.message + "\n", Style(color=SUCCESS_GREEN, bold=True))
            border = SUCCESS_GREEN
        elif self.attempt.score > 0:
            content.append("◐ ", Style(color=ACCENT_AMBER, bold=True))
            content.append(self.message + "\n", Style(color=ACCENT_AMBER, bold=True))
            border = ACCENT_AMBER
        else:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append(self.message + "\n", Style(color=ERROR_RED, bold=True))
            border = ERROR_RED

        content.append("\n")
        content.append("Score: ", Style(color=MUTED_GRAY))
        content.append(
            f"{self.attempt.score}/{self.exercise.points}",
            Style(color=ACCENT_AMBER, bold=True),
        )
        content.append(
            f"   Time: {format_time(self.attempt.elapsed_seconds)}"
            f"   Hints: {self.attempt.hints_used}",
            Style(color=MUTED_GRAY),
        )

        for line in self._detail_lines():
            content.append("\n" + line, Style(color=MUTED_GRAY))

        if self.exercise.solution_explanation:
            content.append("\n\n")
            content.append("Explanation:\n", Style(color=ACCENT_AMBER, bold=True))
            content.append(self.exercise.solution_explanation, Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=border,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _detail_lines(self) -> list[str]:
        """Per-variant breakdown from the grader's details."""
        lines = []
        if "correct_count" in self.details:
            lines.append(f"Correct parts: {self.details['correct_count']}/{self.details['total']}")
        if "bugs" in self.details:
            lines.append(f"Bugs fixed: {self.details['fixed_count']}/{self.details['total']}")
            for bug_id, fixed in self.details["bugs"].items():
                lines.append(f"{'✓' if fixed else '✗'} {bug_id}")
        for test_id, test in self.details.get("tests", {}).items():
            mark = "✓" if test.get("passed") else "✗"
            lines.append(f"{mark} {test_id}: {test.get('method')} {test.get('endpoint')}")
        return lines

    def __rich__(self) -> Panel:
        return self.render()


class SectionOverview:
    """Table of a lesson's exercises with completion state and scores."""

    def __init__(self, rows: List[dict[str, Any]], title: str = "Practice Exercises"):
        self.rows = rows
        self.title = title

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=API_BLUE, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )

        table.add_column("#", justify="right", style=Style(color=MUTED_GRAY))
        table.add_column("Exercise", style=Style(color=TEXT_WHITE))
        table.add_column("Difficulty", justify="center")
        table.add_column("Time", justify="center", style=Style(color=MUTED_GRAY))
        table.add_column("Score", justify="right")

        for i, row in enumerate(self.rows, 1):
            limit = row.get("time_limit_seconds")
            score_text = (
                Text(f"{row['score']}/{row['points']}", style=Style(color=SUCCESS_GREEN, bold=True))
                if row.get("completed")
                else Text(f"-/{row['points']}", style=Style(color=MUTED_GRAY))
            )
            table.add_row(
                str(i),
                ("✓ " if row.get("completed") else "  ") + row["title"],
                Text(row["difficulty"], style=get_difficulty_style(row["difficulty"])),
                format_time(limit) if limit else "-",
                score_text,
            )

        return Panel(
            Align.center(table),
            title=self.title,
            border_style=ACCENT_AMBER,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SectionSummary:
    """End-of-section summary with progress bar and score."""

    def __init__(self, summary: dict[str, Any]):
        self.summary = summary

    def render(self) -> Panel:
        percent = self.summary.get("completion_fraction", 0.0) * 100

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")
        stats.add_row("Completed", f"{self.summary['completed']}/{self.summary['total']}")
        stats.add_row(
            "Score",
            Text(
                f"{self.summary['score']}/{self.summary['max_score']}",
                style=Style(color=ACCENT_AMBER, bold=True),
            ),
        )

        content = Text()
        if self.summary.get("is_complete"):
            content.append("Section Complete!\n\n", Style(color=API_BLUE, bold=True))
        else:
            content.append("Session Ended\n\n", Style(color=API_BLUE, bold=True))
        content.append(f"Progress: {_progress_bar(percent)}\n", Style(color=MUTED_GRAY))

        return Panel(
            Group(Align.center(content), Align.center(stats)),
            title="Section Summary",
            border_style=ACCENT_AMBER,
            box=box.HEAVY,
            padding=(1, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class LessonList:
    """Table of lessons."""

    def __init__(self, lessons: List[Lesson], title: str = "Lessons"):
        self.lessons = lessons
        self.title = title

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=API_BLUE, bold=True),
            border_style=MUTED_GRAY,
            box=box.HEAVY,
        )
        table.add_column("Slug", style=Style(color=ACCENT_AMBER, bold=True))
        table.add_column("Title", style=Style(color=TEXT_WHITE))
        table.add_column("Category", style=Style(color=INFO_BLUE))
        table.add_column("Level", justify="center")
        table.add_column("Minutes", justify="right", style=Style(color=MUTED_GRAY))

        for lesson in self.lessons:
            table.add_row(
                lesson.slug,
                lesson.title,
                lesson.category,
                lesson.level.value,
                str(lesson.duration_minutes),
            )

        return Panel(
            Align.center(table),
            title=self.title,
            border_style=API_BLUE,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class PlaygroundResponsePanel:
    """Status line, headers and pretty-printed body of a playground response."""

    MAX_BODY_CHARS = 4000

    def __init__(self, request: PlaygroundRequest, response: PlaygroundResponse):
        self.request = request
        self.response = response

    def render(self) -> Panel:
        status = Text()
        status.append(f"{self.request.method} ", get_method_style(self.request.method))
        status.append(self.request.url + "\n", Style(color=TEXT_WHITE))
        status.append(f"{self.response.status} {self.response.status_text}", get_status_style(self.response.status))
        status.append(f"   {self.response.duration_ms} ms", Style(color=MUTED_GRAY))

        if isinstance(self.response.data, (dict, list)):
            body_text = json.dumps(self.response.data, indent=2, ensure_ascii=False)
            lexer = "json"
        else:
            body_text = str(self.response.data or "")
            lexer = "text"
        if len(body_text) > self.MAX_BODY_CHARS:
            body_text = body_text[: self.MAX_BODY_CHARS] + "\n..."

        return Panel(
            Group(status, Text(), Syntax(body_text, lexer, word_wrap=True)),
            title="Response",
            border_style=get_status_style(self.response.status),
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()

from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich import box

from exercises.base import parse_letter_input
from exercises.drag_drop import DragDropBoard
from models import ExerciseAttempt, ExerciseDefinition, Lesson
from playground import PRESET_APIS, PlaygroundRequest, PlaygroundResponse
from ui.components import (
    ExercisePanel,
    FeedbackPanel,
    HintPanel,
    LessonList,
    PlaygroundResponsePanel,
    SectionOverview,
    SectionSummary,
)
from ui.styles import (
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    ACCENT_AMBER,
    create_welcome_banner,
    get_method_style,
)
from typing import Any, Optional, List

QUIT = "quit"
HINT = "hint"
DONE = "done"

CODE_TERMINATOR = "."


class TutorUI:
    """Main UI orchestrator for the API Tutor application."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_welcome(self, lesson: Lesson) -> None:
        """Display the lesson banner and objectives."""
        content = Text()
        content.append(create_welcome_banner())
        content.append("\n\n")
        content.append(lesson.title + "\n", style=f"bold {INFO_BLUE}")
        if lesson.description:
            content.append(lesson.description + "\n", style=MUTED_GRAY)
        if lesson.objectives:
            content.append("\nObjectives:\n", style=f"bold {ACCENT_AMBER}")
            for objective in lesson.objectives:
                content.append(f"  • {objective}\n")
        self.console.print(Panel(content, border_style=INFO_BLUE, box=box.HEAVY, padding=(1, 2)))

    def show_lessons(self, lessons: List[Lesson], title: str = "Lessons") -> None:
        self.console.print(LessonList(lessons, title=title))

    def show_section_overview(self, rows: List[dict[str, Any]]) -> None:
        self.console.print(SectionOverview(rows))
        self.console.print()

    def show_section_summary(self, summary: dict[str, Any]) -> None:
        """Display section completion summary."""
        self.console.print(SectionSummary(summary))

    def show_exercise(
        self,
        exercise: ExerciseDefinition,
        exercise_number: int,
        total_exercises: int,
        remaining_seconds: Optional[int] = None,
        hints_used: int = 0,
        board: Optional[DragDropBoard] = None,
        answers: Optional[dict[str, str]] = None,
        hint: Optional[str] = None,
    ) -> None:
        """Display an exercise panel, with the latest hint while it is on display."""
        panel = ExercisePanel(
            exercise=exercise,
            exercise_number=exercise_number,
            total_exercises=total_exercises,
            remaining_seconds=remaining_seconds,
            hints_used=hints_used,
            board=board,
            answers=answers,
        )
        self.console.print(panel)
        if hint:
            self.console.print(HintPanel(hint, hints_used, len(exercise.hints)))
        self.console.print()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _read(self, label: str) -> str:
        return self.console.input(Text(label, style=f"bold {MUTED_GRAY}")).strip()

    def _command(self, user_input: str) -> Optional[str]:
        lowered = user_input.lower()
        if lowered in ("q", ":q"):
            return QUIT
        if lowered in ("h", ":h"):
            return HINT
        return None

    def prompt_choice(self, num_options: int) -> int | str:
        """Get a letter choice from the user.

        Returns:
            0-based option index, QUIT or HINT.
        """
        while True:
            user_input = self._read("Your answer: ")

            command = self._command(user_input)
            if command:
                return command

            index = parse_letter_input(user_input, num_options)
            if index is not None:
                return index

            last = chr(64 + num_options)
            self.console.print(
                Text(f"Please enter a letter A-{last} (or 'h' for a hint, 'q' to quit)\n", style=ERROR_RED)
            )

    def prompt_exercise_number(self, total: int) -> int | str:
        """Pick an exercise from the overview.

        Returns:
            0-based exercise index, "" for the next open exercise, or QUIT.
        """
        while True:
            user_input = self._read("Exercise # (Enter for next, 'q' to quit): ")
            if not user_input:
                return ""
            if self._command(user_input) == QUIT:
                return QUIT
            if user_input.isdigit() and 1 <= int(user_input) <= total:
                return int(user_input) - 1
            self.console.print(Text(f"Please enter a number 1-{total}\n", style=ERROR_RED))

    def prompt_blank(self, blank_id: str, placeholder: str = "") -> str:
        """Get the answer for one code blank. Returns the text, QUIT or HINT."""
        label = f"{blank_id}"
        if placeholder:
            label += f" ({placeholder})"
        user_input = self._read(f"{label}: ")
        return self._command(user_input) or user_input

    def prompt_move(self) -> tuple[str, ...]:
        """Get a drag-drop command.

        Returns:
            ("move", item, zone), ("remove", item), (DONE,), (QUIT,), (HINT,),
            or () for unparseable input.
        """
        user_input = self._read("Move (item:zone): ")
        command = self._command(user_input)
        if command:
            return (command,)
        if user_input.lower() == DONE:
            return (DONE,)
        if user_input.lower().startswith("remove "):
            return ("remove", user_input[7:].strip())
        if ":" in user_input:
            item_id, zone_id = (part.strip() for part in user_input.split(":", 1))
            if item_id and zone_id:
                return ("move", item_id, zone_id)
        self.console.print(
            Text("Use item:zone, 'remove item', 'done', 'h' or 'q'\n", style=ERROR_RED)
        )
        return ()

    def prompt_code(self) -> str:
        """Read a multi-line code answer terminated by a lone '.'.

        ':h' on its own line requests a hint and ':q' quits; both return
        immediately with HINT or QUIT.
        """
        self.console.print(
            Text("Enter code. Finish with '.' on its own line (':h' hint, ':q' quit).", style=MUTED_GRAY)
        )
        lines: list[str] = []
        while True:
            line = self.console.input()
            stripped = line.strip()
            if stripped == CODE_TERMINATOR:
                return "\n".join(lines)
            if stripped in (":h", ":q"):
                return HINT if stripped == ":h" else QUIT
            lines.append(line)

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def show_feedback(
        self,
        exercise: ExerciseDefinition,
        attempt: ExerciseAttempt,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Display feedback for a finished attempt."""
        self.console.print(FeedbackPanel(exercise, attempt, message, details))
        self.console.print()

    def show_playground_response(
        self, request: PlaygroundRequest, response: PlaygroundResponse
    ) -> None:
        self.console.print(PlaygroundResponsePanel(request, response))

    def show_presets(self) -> None:
        """List the preset playground APIs."""
        table = Table(show_header=True, box=box.SIMPLE, border_style=MUTED_GRAY)
        table.add_column("Name")
        table.add_column("Method", justify="center")
        table.add_column("URL", style=MUTED_GRAY)
        for preset in PRESET_APIS:
            table.add_row(preset.name, Text(preset.method, style=get_method_style(preset.method)), preset.url)
        self.console.print(table)

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(Text("👋 Goodbye! Your attempts have been saved.", style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> None:
        """Wait for user to press Enter to continue."""
        self.console.input(Text("Press Enter to continue...", style=f"bold {MUTED_GRAY}"))

import argparse
import signal
import sys

from loguru import logger
from rich.console import Console

from catalog import CatalogError, ExerciseCatalog
from exercises import DragDropBoard, get_validator
from models import (
    ApiBuilderExercise,
    CodeCompletionExercise,
    DebuggingExercise,
    DragDropExercise,
    ExerciseAttempt,
    ExerciseDefinition,
    MultipleChoiceExercise,
)
from orchestrator import ExerciseSection
from playground import PRESET_APIS, PlaygroundClient, PlaygroundRequest
from scoring import feedback_for
from session import ExerciseSession
from settings import Settings, get_settings
from storage import get_attempt_repo, get_lesson_repo, init_schema, seed_database
from ui import DONE, HINT, QUIT, TutorUI

SUBMIT = "submit"
CONTINUE = "continue"


def configure_logging(level: str) -> None:
    """Route loguru to stderr at the requested level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="API Tutor")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"],
        help="Log level for stderr output (default: from settings, WARNING)",
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the SQLite database (default: data/tutor.db)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    lessons_parser = subparsers.add_parser("lessons", help="List lessons")
    lessons_parser.add_argument(
        "--search",
        "-s",
        type=str,
        default=None,
        help="Filter by keyword in title, description or tags",
    )
    lessons_parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        help="Only show lessons in this category",
    )

    study_parser = subparsers.add_parser("study", help="Practice a lesson's exercises")
    study_parser.add_argument("slug", type=str, help="Lesson slug (see 'lessons')")

    pg_parser = subparsers.add_parser("playground", help="Send an HTTP request")
    pg_parser.add_argument("method", nargs="?", type=str.upper, default="GET",
                           choices=["GET", "POST", "PUT", "DELETE", "PATCH"])
    pg_parser.add_argument("url", nargs="?", type=str, default=None)
    pg_parser.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        help="Request header as 'Name: value' (repeatable)",
    )
    pg_parser.add_argument("--body", "-d", type=str, default=None, help="Request body")
    pg_parser.add_argument(
        "--preset",
        "-p",
        type=int,
        default=None,
        help="Send preset API number N (run without a URL to list presets)",
    )

    subparsers.add_parser("seed", help="Load bundled lessons into the database")

    return parser


def load_settings(args) -> Settings:
    """Settings from the environment, with CLI overrides applied."""
    settings = get_settings()
    updates = {}
    if args.db:
        updates["db_path"] = args.db
    if args.log_level:
        updates["log_level"] = args.log_level
    return Settings(**{**settings.model_dump(), **updates}) if updates else settings


def ensure_seeded(settings: Settings) -> None:
    """Create the schema and load bundled lessons on first use."""
    init_schema(settings.database_path)
    if not get_lesson_repo(settings.database_path).get_all():
        logger.info("Lesson table empty; seeding from bundled content")
        seed_database(settings.database_path, settings.lessons_path)


# ============================================================================
# Commands
# ============================================================================


def run_seed(settings: Settings) -> None:
    ui = TutorUI(Console())
    count = seed_database(settings.database_path, settings.lessons_path)
    ui.show_success(f"Seeded {count} lessons into {settings.database_path}")


def run_lessons(args, settings: Settings) -> None:
    ui = TutorUI(Console())
    ensure_seeded(settings)
    repo = get_lesson_repo(settings.database_path)

    if args.search:
        lessons = repo.search(args.search)
        title = f"Lessons matching '{args.search}'"
    elif args.category:
        lessons = repo.get_by_category(args.category)
        title = f"{args.category} Lessons"
    else:
        lessons = repo.get_all()
        title = "Lessons"

    if not lessons:
        ui.show_info("No lessons found.")
        return
    ui.show_lessons(lessons, title=title)


def run_playground(args, settings: Settings) -> None:
    ui = TutorUI(Console())

    if args.preset is not None:
        if not 1 <= args.preset <= len(PRESET_APIS):
            ui.show_error(f"Preset must be between 1 and {len(PRESET_APIS)}")
            return
        preset = PRESET_APIS[args.preset - 1]
        request = PlaygroundRequest(method=preset.method, url=preset.url)
    elif args.url:
        headers = {}
        for header in args.header:
            name, _, value = header.partition(":")
            headers[name.strip()] = value.strip()
        request = PlaygroundRequest(method=args.method, url=args.url, body=args.body)
        if headers:
            request = request.model_copy(update={"headers": {**request.headers, **headers}})
    else:
        ui.show_presets()
        return

    with PlaygroundClient(timeout_seconds=settings.playground_timeout) as client:
        response = client.send(request)
    ui.show_playground_response(request, response)


def overview_rows(section: ExerciseSection) -> list[dict]:
    return [
        {
            "title": ex.title,
            "difficulty": ex.difficulty.value,
            "time_limit_seconds": ex.time_limit_seconds,
            "points": ex.points,
            "score": section.score_for(ex.id),
            "completed": section.is_completed(ex.id),
        }
        for ex in section.exercises
    ]


def collect_answer(
    ui: TutorUI,
    exercise: ExerciseDefinition,
    board: DragDropBoard | None,
    answers: dict[str, str],
) -> tuple[str, object]:
    """Read one round of input for an exercise.

    Returns:
        (status, value) where status is SUBMIT (value is the raw answer),
        CONTINUE (board changed, redraw), HINT or QUIT.
    """
    if isinstance(exercise, MultipleChoiceExercise):
        choice = ui.prompt_choice(len(exercise.options))
        if choice in (QUIT, HINT):
            return choice, None
        return SUBMIT, exercise.options[choice].id

    if isinstance(exercise, CodeCompletionExercise):
        for blank in exercise.blanks:
            if blank.id in answers:
                continue
            value = ui.prompt_blank(blank.id, blank.placeholder)
            if value in (QUIT, HINT):
                return value, None
            answers[blank.id] = value
        return SUBMIT, dict(answers)

    if isinstance(exercise, DragDropExercise) and board is not None:
        command = ui.prompt_move()
        if not command:
            return CONTINUE, None
        if command[0] in (QUIT, HINT):
            return command[0], None
        if command[0] == DONE:
            if board.available_items():
                ui.show_error("Place every item before submitting")
                return CONTINUE, None
            return SUBMIT, board
        if command[0] == "remove":
            board.remove(command[1])
        elif not board.move(command[1], command[2]):
            ui.show_error(f"Cannot place {command[1]!r} in {command[2]!r}")
        return CONTINUE, None

    if isinstance(exercise, (DebuggingExercise, ApiBuilderExercise)):
        code = ui.prompt_code()
        if code in (QUIT, HINT):
            return code, None
        return SUBMIT, code

    return QUIT, None


def run_exercise(
    ui: TutorUI,
    section: ExerciseSection,
    session: ExerciseSession,
    number: int,
) -> ExerciseAttempt | None:
    """Drive one exercise session in the terminal.

    Returns:
        The finished attempt, or None if the learner backed out.
    """
    exercise = session.exercise
    total = len(section.exercises)

    if get_validator(exercise) is None:
        ui.show_exercise(exercise, number, total)
        ui.show_info("This exercise type is not supported yet; skipping.")
        section.toggle(exercise.id)
        return None

    board = DragDropBoard(exercise) if isinstance(exercise, DragDropExercise) else None
    answers: dict[str, str] = {}

    while not session.is_finished:
        session.advance_to()
        if session.is_finished:
            break

        ui.show_exercise(
            exercise,
            number,
            total,
            remaining_seconds=session.remaining_seconds,
            hints_used=session.hints_used,
            board=board,
            answers=answers,
            hint=session.current_hint(),
        )
        status, value = collect_answer(ui, exercise, board, answers)

        if status == QUIT:
            section.toggle(exercise.id)
            return None
        if status == HINT:
            hint = section.request_hint(exercise.id)
            if hint is None:
                ui.show_info("No more hints available.")
        elif status == SUBMIT:
            section.submit(exercise.id, value)

    attempt = session.attempt
    result = session.grade_result
    partial = result.partial_score if result else None
    details = result.details if result else None
    ui.show_feedback(exercise, attempt, feedback_for(exercise, attempt, partial), details)
    section.toggle(exercise.id)
    return attempt


def create_sigint_handler(ui: TutorUI):
    """Create a SIGINT handler that exits cleanly (attempts are saved as they finish)."""

    def sigint_handler(signum, frame):
        ui.show_quit_message()
        sys.exit(0)

    return sigint_handler


def run_study(args, settings: Settings) -> None:
    """Run the interactive exercise section for one lesson."""
    console = Console()
    ui = TutorUI(console)

    ensure_seeded(settings)
    lesson = get_lesson_repo(settings.database_path).get_by_slug(args.slug)
    if lesson is None:
        ui.show_error(f"No lesson with slug {args.slug!r}. Try 'api-tutor lessons'.")
        return

    try:
        catalog = ExerciseCatalog.from_json(settings.exercises_path)
    except (OSError, CatalogError) as e:
        ui.show_error(f"Could not load exercises: {e}")
        return

    attempt_repo = get_attempt_repo(settings.database_path)
    section = ExerciseSection(
        lesson.slug,
        catalog,
        learner_id=settings.learner_id,
        config=settings.engine_config(),
        sinks=[attempt_repo.save],
    )

    ui.clear_screen()
    ui.show_welcome(lesson)
    if section.is_empty:
        ui.show_info("This lesson has no practice exercises.")
        return

    signal.signal(signal.SIGINT, create_sigint_handler(ui))

    while True:
        ui.show_section_overview(overview_rows(section))
        choice = ui.prompt_exercise_number(len(section.exercises))
        if choice == QUIT:
            break

        if choice == "":
            exercise = section.next_exercise()
            if exercise is None:
                break
        else:
            exercise = section.exercises[choice]

        session = section.toggle(exercise.id)
        if session is None:
            ui.show_info("That exercise is already complete.")
            continue

        ui.clear_screen()
        run_exercise(ui, section, session, section.exercises.index(exercise) + 1)
        ui.wait_for_continue()
        ui.clear_screen()

    ui.show_section_summary(section.summary())


def main():
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args()

    settings = load_settings(args)
    configure_logging(settings.log_level)

    if args.command == "lessons":
        run_lessons(args, settings)
    elif args.command == "study":
        run_study(args, settings)
    elif args.command == "playground":
        run_playground(args, settings)
    elif args.command == "seed":
        run_seed(settings)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

"""Load bundled lesson content into the SQLite database."""

import json
from pathlib import Path

from loguru import logger

from models import Lesson
from .connection import DEFAULT_DB_PATH, init_schema
from .sqlite import SQLiteLessonRepository

DEFAULT_LESSONS_PATH = Path(__file__).parent.parent / "data" / "lessons.json"


def load_lessons(json_path: Path = DEFAULT_LESSONS_PATH) -> list[Lesson]:
    """Parse a JSON array of lessons.

    Raises:
        pydantic.ValidationError: If a lesson record is malformed.
    """
    with open(json_path, encoding="utf-8") as f:
        items = json.load(f)
    return [Lesson.model_validate(item) for item in items]


def seed_database(
    db_path: Path = DEFAULT_DB_PATH,
    lessons_path: Path = DEFAULT_LESSONS_PATH,
) -> int:
    """Create the schema and upsert every lesson from `lessons_path`.

    Safe to run repeatedly; existing lessons are replaced.

    Returns:
        Number of lessons written.
    """
    if not lessons_path.exists():
        logger.warning(f"Skipping seed: {lessons_path} not found")
        return 0

    init_schema(db_path)
    repo = SQLiteLessonRepository(db_path)
    lessons = load_lessons(lessons_path)
    for lesson in lessons:
        repo.save(lesson)

    logger.info(f"Seeded {len(lessons)} lessons into {db_path}")
    return len(lessons)

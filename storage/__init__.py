"""Storage layer for API Tutor.

Provides repository interfaces and SQLite implementations for persisting
lesson content and exercise attempts.
"""

from pathlib import Path

from .base import AttemptRepository, LessonRepository
from .sqlite import SQLiteAttemptRepository, SQLiteLessonRepository
from .connection import get_connection, init_schema, DEFAULT_DB_PATH
from .seed import DEFAULT_LESSONS_PATH, load_lessons, seed_database

__all__ = [
    # Abstract interfaces
    "LessonRepository",
    "AttemptRepository",
    # SQLite implementations
    "SQLiteLessonRepository",
    "SQLiteAttemptRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Seeding
    "DEFAULT_LESSONS_PATH",
    "load_lessons",
    "seed_database",
    # Factory functions
    "get_lesson_repo",
    "get_attempt_repo",
]


def get_lesson_repo(db_path: Path = DEFAULT_DB_PATH) -> LessonRepository:
    """Get a LessonRepository instance."""
    return SQLiteLessonRepository(db_path)


def get_attempt_repo(db_path: Path = DEFAULT_DB_PATH) -> AttemptRepository:
    """Get an AttemptRepository instance."""
    return SQLiteAttemptRepository(db_path)

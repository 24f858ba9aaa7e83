"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "tutor.db"

SCHEMA_SQL = """
-- ==========================================================================
-- Lesson content
-- ==========================================================================

CREATE TABLE IF NOT EXISTS lessons (
    id TEXT PRIMARY KEY,
    slug TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL,
    level TEXT NOT NULL CHECK (level IN ('beginner', 'intermediate', 'advanced')),
    duration_minutes INTEGER NOT NULL DEFAULT 0,
    content TEXT NOT NULL DEFAULT '',
    objectives TEXT NOT NULL DEFAULT '[]',  -- JSON array of strings
    tags TEXT NOT NULL DEFAULT '[]',        -- JSON array of strings
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_lessons_category ON lessons(category);

CREATE TABLE IF NOT EXISTS code_examples (
    lesson_id TEXT NOT NULL,
    id TEXT NOT NULL,
    position INTEGER NOT NULL,
    language TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    code TEXT NOT NULL,
    output TEXT,
    PRIMARY KEY (lesson_id, id),
    FOREIGN KEY (lesson_id) REFERENCES lessons(id) ON DELETE CASCADE
);

-- ==========================================================================
-- Exercise attempts (append-only)
-- ==========================================================================

CREATE TABLE IF NOT EXISTS exercise_attempts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    exercise_id TEXT NOT NULL,
    learner_id TEXT NOT NULL,
    raw_answer TEXT,                        -- JSON-encoded answer
    is_fully_correct INTEGER NOT NULL,
    score INTEGER NOT NULL,
    elapsed_seconds INTEGER NOT NULL,
    hints_used INTEGER NOT NULL,
    timed_out INTEGER NOT NULL DEFAULT 0,
    submitted_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_attempts_exercise ON exercise_attempts(exercise_id);
CREATE INDEX IF NOT EXISTS idx_attempts_learner ON exercise_attempts(learner_id);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()

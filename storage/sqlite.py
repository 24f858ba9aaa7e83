"""SQLite implementations of repository interfaces."""

import json
from datetime import datetime
from pathlib import Path

from .base import AttemptRepository, LessonRepository
from .connection import get_connection, DEFAULT_DB_PATH
from models import CodeExample, ExerciseAttempt, Lesson, LessonLevel


class SQLiteLessonRepository(LessonRepository):
    """SQLite implementation of LessonRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_all(self) -> list[Lesson]:
        """Load all lessons in presentation order."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM lessons ORDER BY sort_order, slug")
            return [self._row_to_model(conn, row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_by_slug(self, slug: str) -> Lesson | None:
        """Load a single lesson by slug."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM lessons WHERE slug = ?", (slug,))
            row = cursor.fetchone()
            return self._row_to_model(conn, row) if row else None
        finally:
            conn.close()

    def get_by_category(self, category: str) -> list[Lesson]:
        """Load lessons in a category, in presentation order."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM lessons WHERE category = ? ORDER BY sort_order, slug",
                (category,),
            )
            return [self._row_to_model(conn, row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def search(self, keyword: str) -> list[Lesson]:
        """Case-insensitive search over title, description and tags."""
        needle = keyword.strip().lower()
        if not needle:
            return self.get_all()
        return [
            lesson
            for lesson in self.get_all()
            if needle in lesson.title.lower()
            or needle in lesson.description.lower()
            or any(needle in tag.lower() for tag in lesson.tags)
        ]

    def save(self, lesson: Lesson) -> None:
        """Insert or replace a lesson together with its code examples."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM code_examples WHERE lesson_id = ?", (lesson.id,))
            conn.execute(
                """INSERT OR REPLACE INTO lessons
                (id, slug, title, description, category, level, duration_minutes,
                 content, objectives, tags, sort_order)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    lesson.id,
                    lesson.slug,
                    lesson.title,
                    lesson.description,
                    lesson.category,
                    lesson.level.value,
                    lesson.duration_minutes,
                    lesson.content,
                    json.dumps(lesson.objectives),
                    json.dumps(lesson.tags),
                    lesson.order,
                ),
            )
            for position, example in enumerate(lesson.code_examples):
                conn.execute(
                    """INSERT INTO code_examples
                    (lesson_id, id, position, language, title, description, code, output)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        lesson.id,
                        example.id,
                        position,
                        example.language,
                        example.title,
                        example.description,
                        example.code,
                        example.output,
                    ),
                )
            conn.commit()
        finally:
            conn.close()

    def _row_to_model(self, conn, row) -> Lesson:
        """Convert a database row (plus its code examples) to a Lesson model."""
        cursor = conn.execute(
            "SELECT * FROM code_examples WHERE lesson_id = ? ORDER BY position",
            (row["id"],),
        )
        examples = [
            CodeExample(
                id=ex["id"],
                language=ex["language"],
                title=ex["title"],
                description=ex["description"],
                code=ex["code"],
                output=ex["output"],
            )
            for ex in cursor.fetchall()
        ]
        return Lesson(
            id=row["id"],
            slug=row["slug"],
            title=row["title"],
            description=row["description"],
            category=row["category"],
            level=LessonLevel(row["level"]),
            duration_minutes=row["duration_minutes"],
            content=row["content"],
            objectives=json.loads(row["objectives"]),
            tags=json.loads(row["tags"]),
            order=row["sort_order"],
            code_examples=examples,
        )


class SQLiteAttemptRepository(AttemptRepository):
    """SQLite implementation of AttemptRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def save(self, attempt: ExerciseAttempt) -> None:
        """Append an attempt record."""
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT INTO exercise_attempts
                (exercise_id, learner_id, raw_answer, is_fully_correct, score,
                 elapsed_seconds, hints_used, timed_out, submitted_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    attempt.exercise_id,
                    attempt.learner_id,
                    json.dumps(attempt.raw_answer, default=str),
                    int(attempt.is_fully_correct),
                    attempt.score,
                    attempt.elapsed_seconds,
                    attempt.hints_used,
                    int(attempt.timed_out),
                    attempt.submitted_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_for_exercise(self, exercise_id: str) -> list[ExerciseAttempt]:
        return self._query(
            "SELECT * FROM exercise_attempts WHERE exercise_id = ? ORDER BY id",
            (exercise_id,),
        )

    def get_for_learner(self, learner_id: str) -> list[ExerciseAttempt]:
        return self._query(
            "SELECT * FROM exercise_attempts WHERE learner_id = ? ORDER BY id",
            (learner_id,),
        )

    def get_best(self, learner_id: str, exercise_id: str) -> ExerciseAttempt | None:
        """Highest-scoring attempt, earliest on ties."""
        attempts = self._query(
            """SELECT * FROM exercise_attempts
            WHERE learner_id = ? AND exercise_id = ?
            ORDER BY score DESC, id ASC LIMIT 1""",
            (learner_id, exercise_id),
        )
        return attempts[0] if attempts else None

    def _query(self, sql: str, params: tuple) -> list[ExerciseAttempt]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(sql, params)
            return [self._row_to_attempt(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _row_to_attempt(self, row) -> ExerciseAttempt:
        """Convert a database row to an ExerciseAttempt model."""
        return ExerciseAttempt(
            exercise_id=row["exercise_id"],
            learner_id=row["learner_id"],
            raw_answer=json.loads(row["raw_answer"]) if row["raw_answer"] else None,
            is_fully_correct=bool(row["is_fully_correct"]),
            score=row["score"],
            elapsed_seconds=row["elapsed_seconds"],
            hints_used=row["hints_used"],
            timed_out=bool(row["timed_out"]),
            submitted_at=datetime.fromisoformat(row["submitted_at"]),
        )

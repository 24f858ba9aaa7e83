"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod

from models import ExerciseAttempt, Lesson


class LessonRepository(ABC):
    """Abstract interface for lesson content storage."""

    @abstractmethod
    def get_all(self) -> list[Lesson]:
        """Load all lessons in presentation order.

        Returns:
            List of lessons sorted by their `order` field.
        """
        pass

    @abstractmethod
    def get_by_slug(self, slug: str) -> Lesson | None:
        """Load a single lesson by slug.

        Args:
            slug: The lesson's URL slug.

        Returns:
            The lesson, or None if not found.
        """
        pass

    @abstractmethod
    def get_by_category(self, category: str) -> list[Lesson]:
        pass

    @abstractmethod
    def search(self, keyword: str) -> list[Lesson]:
        """Case-insensitive search over title, description and tags."""
        pass

    @abstractmethod
    def save(self, lesson: Lesson) -> None:
        """Insert or replace a lesson together with its code examples.

        Args:
            lesson: The lesson to save.
        """
        pass


class AttemptRepository(ABC):
    """Abstract interface for exercise attempt storage.

    Attempts are append-only; `save` can be passed straight to an
    ExerciseSection as an attempt sink.
    """

    @abstractmethod
    def save(self, attempt: ExerciseAttempt) -> None:
        pass

    @abstractmethod
    def get_for_exercise(self, exercise_id: str) -> list[ExerciseAttempt]:
        """All attempts at an exercise, oldest first."""
        pass

    @abstractmethod
    def get_for_learner(self, learner_id: str) -> list[ExerciseAttempt]:
        """All attempts by a learner, oldest first."""
        pass

    @abstractmethod
    def get_best(self, learner_id: str, exercise_id: str) -> ExerciseAttempt | None:
        """Highest-scoring attempt by a learner at an exercise.

        Args:
            learner_id: The learner.
            exercise_id: The exercise.

        Returns:
            The best attempt (earliest on ties), or None if never attempted.
        """
        pass

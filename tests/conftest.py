"""Shared pytest fixtures for the API Tutor test suite."""

import pytest
from datetime import datetime, timezone

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog import ExerciseCatalog
from models import (
    ApiBuilderExercise,
    ApiTestCase,
    CodeBlank,
    CodeCompletionExercise,
    CodeExample,
    DebuggingExercise,
    DragDropExercise,
    DragDropItem,
    DropZone,
    ExerciseFeedback,
    Lesson,
    LessonLevel,
    MultipleChoiceExercise,
    MultipleChoiceOption,
)
from storage import init_schema

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fixed_now():
    """Wall-clock provider returning a constant timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def multiple_choice_exercise() -> MultipleChoiceExercise:
    """Four-option quiz where option 'a' is correct."""
    return MultipleChoiceExercise(
        id="api-basics-quiz",
        title="API Fundamentals Quiz",
        points=10,
        time_limit_seconds=120,
        hints=("Think about what API stands for", "Remember the restaurant analogy"),
        question="What does API stand for?",
        options=(
            MultipleChoiceOption(id="a", text="Application Programming Interface", is_correct=True),
            MultipleChoiceOption(id="b", text="Advanced Programming Integration"),
            MultipleChoiceOption(id="c", text="Automated Process Interface"),
            MultipleChoiceOption(id="d", text="Application Protocol Interface"),
        ),
        feedback=ExerciseFeedback(correct="Excellent!", incorrect="Not quite."),
    )


@pytest.fixture
def code_completion_exercise() -> CodeCompletionExercise:
    """Fetch template with four blanks worth 15 points."""
    return CodeCompletionExercise(
        id="api-request-code",
        title="Complete the API Request",
        points=15,
        time_limit_seconds=180,
        hints=("Remember fetch", "Which method retrieves data?", "Parse the body"),
        template=(
            "// {{method}} request\n"
            "fetch('{{url}}')\n"
            "  .then(response => response.{{parse_method}}())\n"
            "  .catch(error => console.error({{error_param}}));"
        ),
        blanks=(
            CodeBlank(id="method", placeholder="HTTP method", correct_answers=frozenset({"GET"})),
            CodeBlank(
                id="url",
                placeholder="API URL",
                correct_answers=frozenset({
                    "https://jsonplaceholder.typicode.com/users/1",
                    "https://jsonplaceholder.typicode.com/users/1/",
                }),
            ),
            CodeBlank(id="parse_method", correct_answers=frozenset({"json"})),
            CodeBlank(id="error_param", correct_answers=frozenset({"error"}), case_sensitive=True),
        ),
        feedback=ExerciseFeedback(
            correct="Perfect!", incorrect="Try again.", partial="Good progress!"
        ),
    )


@pytest.fixture
def drag_drop_exercise() -> DragDropExercise:
    """Six REST principles, each matched to a one-slot zone."""
    principles = [
        ("stateless", "stateless-desc"),
        ("cacheable", "cacheable-desc"),
        ("uniform-interface", "uniform-desc"),
        ("client-server", "client-server-desc"),
        ("layered-system", "layered-desc"),
        ("code-on-demand", "code-demand-desc"),
    ]
    return DragDropExercise(
        id="rest-principles-drag-drop",
        title="REST Principles Matching",
        points=20,
        time_limit_seconds=240,
        items=tuple(
            DragDropItem(id=item_id, content=item_id.title(), category="principle")
            for item_id, _ in principles
        ),
        drop_zones=tuple(
            DropZone(id=zone_id, label=zone_id, accepts_category="principle", max_items=1)
            for _, zone_id in principles
        ),
        correct_mapping=dict(principles),
    )


@pytest.fixture
def debugging_exercise() -> DebuggingExercise:
    """Buggy Express handlers with four expected fixes."""
    return DebuggingExercise(
        id="debug-http-methods",
        title="Fix the HTTP Methods Bug",
        points=20,
        time_limit_seconds=300,
        buggy_code=(
            "app.get('/api/users', (req, res) => {\n"
            "  users.push(req.body);\n"
            "  res.status(200).json(req.body);\n"
            "});"
        ),
        expected_bug_count=4,
    )


@pytest.fixture
def api_builder_exercise() -> ApiBuilderExercise:
    """User CRUD API with five heuristic test cases worth 25 points."""
    return ApiBuilderExercise(
        id="rest-api-builder",
        title="Build a RESTful User API",
        points=25,
        time_limit_seconds=600,
        scenario="Build a user management API.",
        test_cases=(
            ApiTestCase(id="get-all", http_method="GET", endpoint_pattern="/api/users"),
            ApiTestCase(id="get-one", http_method="GET", endpoint_pattern="/api/users/:id"),
            ApiTestCase(id="create", http_method="POST", endpoint_pattern="/api/users", expected_status=201),
            ApiTestCase(id="update", http_method="PUT", endpoint_pattern="/api/users/:id"),
            ApiTestCase(id="delete", http_method="DELETE", endpoint_pattern="/api/users/:id", expected_status=204),
        ),
    )


@pytest.fixture
def untimed_exercise() -> MultipleChoiceExercise:
    """Quiz without a time limit or hints."""
    return MultipleChoiceExercise(
        id="untimed-quiz",
        title="Untimed",
        points=5,
        question="Which method creates a resource?",
        options=(
            MultipleChoiceOption(id="get", text="GET"),
            MultipleChoiceOption(id="post", text="POST", is_correct=True),
        ),
    )


@pytest.fixture
def sample_catalog(
    multiple_choice_exercise, code_completion_exercise, drag_drop_exercise
) -> ExerciseCatalog:
    """Catalog with two lessons; 'introduction' holds two exercises."""
    return ExerciseCatalog(
        {
            "introduction": [multiple_choice_exercise, code_completion_exercise],
            "rest-fundamentals": [drag_drop_exercise],
        }
    )


@pytest.fixture
def sample_lessons() -> list[Lesson]:
    """Three lessons in two categories, deliberately out of order."""
    return [
        Lesson(
            id="rest-fundamentals",
            slug="rest-fundamentals",
            title="REST API Principles",
            description="Master RESTful architecture.",
            category="REST",
            duration_minutes=25,
            tags=["rest", "architecture"],
            order=2,
        ),
        Lesson(
            id="intro-to-apis",
            slug="introduction",
            title="What are APIs?",
            description="Learn the fundamentals of APIs.",
            category="Introduction",
            duration_minutes=15,
            objectives=["Understand what an API is"],
            tags=["basics", "fundamentals"],
            order=1,
            code_examples=[
                CodeExample(
                    id="basic-api-call",
                    language="javascript",
                    title="Basic API Call Example",
                    code="fetch('/api/users/1')",
                    output="{ id: 1 }",
                ),
                CodeExample(id="second", language="python", code="print('hi')"),
            ],
        ),
        Lesson(
            id="rest-advanced",
            slug="rest-advanced",
            title="Advanced Design Patterns",
            description="Pagination and versioning.",
            category="REST",
            level=LessonLevel.ADVANCED,
            tags=["Pagination"],
            order=3,
        ),
    ]


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_tutor.db"
    init_schema(db_path)
    return db_path

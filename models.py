from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExerciseVariant(str, Enum):
    CODE_COMPLETION = "code-completion"
    API_BUILDER = "api-builder"
    DEBUGGING = "debugging"
    MULTIPLE_CHOICE = "multiple-choice"
    DRAG_DROP = "drag-drop"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class LessonLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# ============================================================================
# Exercise Definitions
# ============================================================================


class ExerciseFeedback(BaseModel):
    """Messages shown to the learner after grading."""

    model_config = ConfigDict(frozen=True)

    correct: str = "Correct!"
    incorrect: str = "Not quite right."
    partial: str | None = None


class ExerciseDefinition(BaseModel):
    """Fields shared by every exercise variant.

    Definitions are loaded once by the catalog and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    difficulty: Difficulty = Difficulty.EASY
    points: int = Field(default=0, ge=0)
    time_limit_seconds: int | None = Field(default=None, gt=0)
    hints: tuple[str, ...] = ()
    solution_explanation: str = ""
    feedback: ExerciseFeedback = Field(default_factory=ExerciseFeedback)

    @property
    def is_timed(self) -> bool:
        return self.time_limit_seconds is not None


class CodeBlank(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    placeholder: str = ""
    correct_answers: frozenset[str]
    case_sensitive: bool = False
    hint: str | None = None


class CodeCompletionExercise(ExerciseDefinition):
    """Fill the `{{blankId}}` placeholders of a code template."""

    variant: Literal["code-completion"] = "code-completion"
    template: str
    language: str = "javascript"
    blanks: tuple[CodeBlank, ...] = Field(min_length=1)
    expected_output: str | None = None

    def placeholder_for(self, blank_id: str) -> str:
        return "{{" + blank_id + "}}"


class ApiTestCase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    http_method: str
    endpoint_pattern: str
    expected_status: int = 200
    description: str = ""


class ApiBuilderExercise(ExerciseDefinition):
    """Write server code satisfying a scenario; graded heuristically."""

    variant: Literal["api-builder"] = "api-builder"
    scenario: str
    requirements: tuple[str, ...] = ()
    starting_code: str = ""
    test_cases: tuple[ApiTestCase, ...] = Field(min_length=1)
    allowed_methods: tuple[str, ...] = ()


class DebuggingExercise(ExerciseDefinition):
    """Fix the bugs in a snippet; graded against fixed bug signatures."""

    variant: Literal["debugging"] = "debugging"
    buggy_code: str
    language: str = "javascript"
    error_description: str = ""
    expected_behavior: str = ""
    expected_bug_count: int = Field(gt=0)


class MultipleChoiceOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    is_correct: bool = False
    explanation: str | None = None


class MultipleChoiceExercise(ExerciseDefinition):
    variant: Literal["multiple-choice"] = "multiple-choice"
    question: str
    options: tuple[MultipleChoiceOption, ...] = Field(min_length=2)
    explanation: str = ""

    @model_validator(mode="after")
    def _exactly_one_correct(self) -> "MultipleChoiceExercise":
        correct = [opt for opt in self.options if opt.is_correct]
        if len(correct) != 1:
            raise ValueError(
                f"Exercise {self.id} must have exactly one correct option, "
                f"found {len(correct)}"
            )
        return self

    @property
    def correct_option(self) -> MultipleChoiceOption:
        return next(opt for opt in self.options if opt.is_correct)

    def get_option(self, option_id: str) -> MultipleChoiceOption | None:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


class DragDropItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    content: str = ""
    category: str | None = None


class DropZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    accepts_category: str | None = None
    max_items: int | None = Field(default=None, gt=0)


class DragDropExercise(ExerciseDefinition):
    variant: Literal["drag-drop"] = "drag-drop"
    instruction: str = ""
    items: tuple[DragDropItem, ...] = Field(min_length=1)
    drop_zones: tuple[DropZone, ...] = Field(min_length=1)
    correct_mapping: dict[str, str]  # item id -> drop zone id

    @model_validator(mode="after")
    def _mapping_is_total(self) -> "DragDropExercise":
        item_ids = {item.id for item in self.items}
        zone_ids = {zone.id for zone in self.drop_zones}
        if set(self.correct_mapping) != item_ids:
            raise ValueError(
                f"Exercise {self.id}: correct_mapping must cover every item exactly once"
            )
        unknown = set(self.correct_mapping.values()) - zone_ids
        if unknown:
            raise ValueError(
                f"Exercise {self.id}: correct_mapping names unknown zones {sorted(unknown)}"
            )
        return self

    def get_item(self, item_id: str) -> DragDropItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_zone(self, zone_id: str) -> DropZone | None:
        for zone in self.drop_zones:
            if zone.id == zone_id:
                return zone
        return None


AnyExercise = Annotated[
    Union[
        CodeCompletionExercise,
        ApiBuilderExercise,
        DebuggingExercise,
        MultipleChoiceExercise,
        DragDropExercise,
    ],
    Field(discriminator="variant"),
]


class UnsupportedExercise(ExerciseDefinition):
    """Catalog entry whose variant tag is not recognised.

    Rendered as an "unsupported exercise" notice and never graded.
    """

    variant: str
    raw: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Attempts and Progress
# ============================================================================


class ExerciseAttempt(BaseModel):
    """Immutable record of one submission (or timeout) for one exercise."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    learner_id: str
    raw_answer: Any = None
    is_fully_correct: bool
    score: int = Field(ge=0)
    elapsed_seconds: int = Field(ge=0)
    hints_used: int = Field(ge=0)
    timed_out: bool = False
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LessonExerciseProgress(BaseModel):
    """Per-lesson aggregate owned by the exercise section for one session."""

    lesson_slug: str
    completed_exercise_ids: set[str] = Field(default_factory=set)
    scores_by_exercise_id: dict[str, int] = Field(default_factory=dict)

    def record(self, exercise_id: str, score: int) -> None:
        self.completed_exercise_ids.add(exercise_id)
        self.scores_by_exercise_id[exercise_id] = score

    @property
    def total_score(self) -> int:
        return sum(self.scores_by_exercise_id.values())


# ============================================================================
# Lesson Content
# ============================================================================


class CodeExample(BaseModel):
    id: str
    language: str
    title: str = "Code Example"
    description: str = ""
    code: str
    output: str | None = None


class Lesson(BaseModel):
    id: str
    slug: str
    title: str
    description: str = ""
    category: str = "General"
    level: LessonLevel = LessonLevel.BEGINNER
    duration_minutes: int = Field(default=0, ge=0)
    content: str = ""
    objectives: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)  # e.g., ["basics", "rest"]
    order: int = 0
    code_examples: list[CodeExample] = Field(default_factory=list)

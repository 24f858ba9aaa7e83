"""API Tutor UI Module - terminal interface for the exercise engine."""

from ui.app import TutorUI, QUIT, HINT, DONE
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
    API_BLUE,
    ACCENT_AMBER,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "TutorUI",
    "QUIT",
    "HINT",
    "DONE",
    "ExercisePanel",
    "FeedbackPanel",
    "HintPanel",
    "LessonList",
    "PlaygroundResponsePanel",
    "SectionOverview",
    "SectionSummary",
    "API_BLUE",
    "ACCENT_AMBER",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]

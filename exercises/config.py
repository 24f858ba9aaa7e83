"""Configuration for exercise grading, scoring and sessions.

These configuration models allow users to tune the exercise engine, such as
the hint penalty, the heuristic weights of the API builder grader, and
whether a completed exercise may be attempted again.
"""

from pydantic import BaseModel, Field, model_validator


class ScoringConfig(BaseModel):
    """Configuration for the attempt scorer."""

    hint_penalty_ratio: float = Field(default=0.1, ge=0.0, le=1.0)


class SessionConfig(BaseModel):
    """Configuration for per-exercise sessions."""

    hint_display_seconds: float = Field(default=10.0, gt=0)
    tick_seconds: int = Field(default=1, ge=1)


class ApiBuilderConfig(BaseModel):
    """Weights of the API builder code-quality heuristic."""

    base_score: float = Field(default=0.5, ge=0.0, le=1.0)
    method_weight: float = Field(default=0.2, ge=0.0)
    endpoint_weight: float = Field(default=0.2, ge=0.0)
    framework_weight: float = Field(default=0.1, ge=0.0)
    pass_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    framework_idioms: tuple[str, ...] = ("app.", "router.", "express")

    @model_validator(mode="after")
    def _idioms_not_empty(self) -> "ApiBuilderConfig":
        if not self.framework_idioms:
            raise ValueError("framework_idioms must name at least one idiom")
        return self


class ExerciseEngineConfig(BaseModel):
    """Master configuration for the exercise engine."""

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    api_builder: ApiBuilderConfig = Field(default_factory=ApiBuilderConfig)
    # Re-expanding a completed exercise starts a fresh attempt whose score
    # overwrites the previous one. When False, completed exercises are locked.
    allow_resubmission: bool = True

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .metrics_schema import Metrics, Stage, parse_stage
from .readiness_schema import ReadinessResult
from .risk_schema import RiskAnalysis
from .roadmap_schema import ActivatedPhase


class AssessmentRequest(BaseModel):
    """Metric vector plus lifecycle stage submitted for evaluation."""

    metrics: Metrics
    stage: Stage = Field(..., description="Pre-validation | Validation | Early Traction | Growth")

    @field_validator("stage", mode="before")
    @classmethod
    def resolve_stage(cls, v: object) -> Stage:
        return parse_stage(v)  # type: ignore[arg-type]


class ReadinessRequest(BaseModel):
    metrics: Metrics


class IdeaScoringRequest(BaseModel):
    """Free-text idea submitted for LLM scoring and full assessment."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(
        ...,
        min_length=50,
        max_length=5000,
        description="Business idea description: problem, solution, target users.",
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Title is required")
        return stripped

    @field_validator("description")
    @classmethod
    def description_not_trivial(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < 50:
            raise ValueError("Description must be at least 50 characters")
        return stripped


class StrategicAssessment(BaseModel):
    """Complete assessment returned by the orchestration layer.

    ``roadmap`` is ``None`` exactly when the readiness tier is Not Ready.
    """

    metrics: Metrics
    stage: Stage
    risk_analysis: RiskAnalysis
    readiness: ReadinessResult
    roadmap_status: Literal["generated", "blocked"]
    roadmap: Optional[List[ActivatedPhase]] = None
    roadmap_notice: Optional[str] = Field(
        default=None,
        description="Blocked message (Not Ready) or directional-roadmap notice (Conditionally Ready)",
    )


class StageModifiers(BaseModel):
    stage: Stage
    priority_modifiers: Dict[str, int]

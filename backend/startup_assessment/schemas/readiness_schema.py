from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReadinessTier(str, Enum):
    NOT_READY = "Not Ready"
    CONDITIONALLY_READY = "Conditionally Ready"
    EXECUTION_READY = "Execution Ready"


class MetricBreakdownRow(BaseModel):
    """One metric's contribution to the Readiness Index."""

    model_config = ConfigDict(frozen=True)

    metric: str = Field(..., description="snake_case metric key")
    label: str
    value: float
    weight: int = Field(..., description="Readiness weight (all six sum to 100)")
    contribution: float = Field(..., description="value * weight / 10, one decimal")
    meets_minimum: bool = Field(..., description="True when value >= 4")


class ImprovementSignal(BaseModel):
    """Which single metric move most advances the readiness tier."""

    model_config = ConfigDict(frozen=True)

    metric: str
    label: str
    current_value: float
    index_gain_per_point: float = Field(..., description="Index points gained per metric point")
    points_to_next_tier: float = Field(
        ...,
        description="Metric points needed in this dimension to reach the next index threshold",
    )


class ReadinessResult(BaseModel):
    """Roadmap Readiness Index (RRI) evaluation.

    ``tier`` gates roadmap generation: ``Not Ready`` suppresses it.
    """

    model_config = ConfigDict(frozen=True)

    index: float = Field(..., ge=0.0, le=100.0, description="Readiness Index, one decimal")
    tier: ReadinessTier
    gate_violations: List[str] = Field(
        default_factory=list,
        description="Hard-stop messages; any entry forces Not Ready",
    )
    structural_shortfalls: List[str] = Field(
        default_factory=list,
        description="Non-gate reasons for Not Ready (low index, too many weak metrics, low weighted average)",
    )
    metric_breakdown: List[MetricBreakdownRow] = Field(default_factory=list)
    improvement_signal: Optional[ImprovementSignal] = None

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Ordered risk classification: Low < Moderate < Elevated < High."""

    LOW = "Low"
    MODERATE = "Moderate"
    ELEVATED = "Elevated"
    HIGH = "High"

    @property
    def severity(self) -> int:
        """0 for Low up to 3 for High."""
        return _RISK_SEVERITY[self.value]


_RISK_SEVERITY = {"Low": 0, "Moderate": 1, "Elevated": 2, "High": 3}


class RiskDriver(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Driver headline, e.g. 'Revenue Model Uncertainty'")
    emphasized_term: str = Field(..., description="Word the dashboard highlights inside the label")


class CriticalWeakness(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Weakness title with the offending score embedded")
    description: str


class StructuralConstraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    description: str


class RiskAnalysis(BaseModel):
    """Risk & constraint analysis for one (Metrics, Stage) pair.

    Rebuilt on every evaluation; nothing here is stored.
    """

    model_config = ConfigDict(frozen=True)

    overall_risk: RiskLevel
    primary_drivers: List[RiskDriver] = Field(
        default_factory=list,
        description="Below-5 (and escalated below-4) drivers in fixed metric order",
    )
    critical_weaknesses: List[CriticalWeakness] = Field(
        default_factory=list,
        description="One entry per metric scoring 3 or lower",
    )
    structural_constraints: List[StructuralConstraint] = Field(
        default_factory=list,
        description="Compound metric/stage conditions, in declaration order",
    )

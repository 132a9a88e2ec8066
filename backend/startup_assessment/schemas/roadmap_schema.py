"""Roadmap schemas — phase catalog entries and activated phases.

Catalog entries are static configuration; activated phases are produced
fresh by every roadmap generation call and never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class PhaseType(str, Enum):
    MANDATORY = "mandatory"
    CONDITIONAL = "conditional"
    OPTIONAL = "optional"


class RoadmapPhase(BaseModel):
    """Locked catalog entry — one remediation workstream."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique phase key, e.g. 'problem-validation'")
    name: str
    objective: str
    actions: Tuple[str, ...] = Field(..., description="Ordered concrete actions")
    success_criteria: str
    risk_mitigated: str
    duration: str
    type: PhaseType
    base_priority: int = Field(
        ...,
        ge=1,
        description="Lower sorts earlier; also the catalog declaration order used for tie-breaks",
    )
    icon_key: str


class ActivatedPhase(RoadmapPhase):
    """A catalog phase whose activation rule fired for this evaluation."""

    sequence: int = Field(..., ge=1, description="1-based position after sorting")
    effective_priority: int = Field(..., description="base_priority + stage modifier")
    activation_reason: str = Field(..., description="Why the activation rule fired")

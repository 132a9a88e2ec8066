"""Structured Action Roadmap Engine.

Evaluates every Phase Library entry against (metrics, stage, risk level),
applies the stage priority modifiers, sorts by effective priority and
numbers the result 1..N.

Callers must not invoke this for a ``Not Ready`` readiness tier; see
``assessment_service.build_strategic_assessment``.
"""

from __future__ import annotations

from typing import List, Tuple, Union

from ..schemas.metrics_schema import Metrics, Stage, parse_stage
from ..schemas.risk_schema import RiskLevel
from ..schemas.roadmap_schema import ActivatedPhase, RoadmapPhase
from .phase_library import PHASE_ACTIVATION_RULES, PHASE_LIBRARY, stage_modifier


def generate_roadmap(
    metrics: Metrics,
    stage: Union[Stage, str],
    risk_level: RiskLevel,
) -> List[ActivatedPhase]:
    """Build the ordered roadmap.

    Ties on effective priority fall back to ``base_priority``, which is the
    catalog declaration order.

    Raises
    ------
    UnknownStageError
        If *stage* is not a recognised lifecycle stage.
    """
    stage = parse_stage(stage)
    risk_level = RiskLevel(risk_level)

    candidates: List[Tuple[int, RoadmapPhase, str]] = []
    for phase in PHASE_LIBRARY:
        reason = PHASE_ACTIVATION_RULES[phase.id](metrics, stage, risk_level)
        if not reason:
            continue
        effective_priority = phase.base_priority + stage_modifier(stage, phase.id)
        candidates.append((effective_priority, phase, reason))

    candidates.sort(key=lambda item: (item[0], item[1].base_priority))

    return [
        ActivatedPhase(
            **phase.model_dump(),
            sequence=position,
            effective_priority=effective_priority,
            activation_reason=reason,
        )
        for position, (effective_priority, phase, reason) in enumerate(candidates, start=1)
    ]

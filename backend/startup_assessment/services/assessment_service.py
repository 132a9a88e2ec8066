"""Strategic assessment orchestration.

Runs Risk Analyzer → Readiness Evaluator → (gated) Roadmap Generator for
one (metrics, stage) pair. Nothing is cached or stored; every call
recomputes from its inputs.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from ..constants import CONDITIONAL_ROADMAP_NOTICE, ROADMAP_BLOCKED_NOTICE
from ..schemas.assessment_schema import StrategicAssessment
from ..schemas.metrics_schema import Metrics, Stage, format_metric_value, parse_stage, validate_metrics
from ..schemas.readiness_schema import ReadinessTier
from .readiness_evaluator import compute_readiness
from .risk_analyzer import analyze_risk
from .roadmap_generator import generate_roadmap

logger = logging.getLogger(__name__)


def build_strategic_assessment(
    metrics: Union[Metrics, Mapping[str, Any]],
    stage: Union[Stage, str],
) -> StrategicAssessment:
    """Produce risk analysis, readiness and — when the tier allows — a roadmap.

    A ``Not Ready`` tier suppresses roadmap generation entirely:
    ``roadmap`` is ``None`` and ``roadmap_status`` is ``"blocked"``.

    Raises
    ------
    InvalidMetricsError
        If *metrics* is incomplete or out of range.
    UnknownStageError
        If *stage* is not recognised.
    """
    metrics = validate_metrics(metrics)
    stage = parse_stage(stage)

    risk_analysis = analyze_risk(metrics, stage)
    readiness = compute_readiness(metrics)

    print(
        f"📊 [ASSESSMENT] stage={stage.value} risk={risk_analysis.overall_risk.value} "
        f"rri={readiness.index} tier={readiness.tier.value}"
    )

    if readiness.tier == ReadinessTier.NOT_READY:
        logger.info(
            "Roadmap blocked: %d gate violation(s), %d structural shortfall(s)",
            len(readiness.gate_violations),
            len(readiness.structural_shortfalls),
        )
        return StrategicAssessment(
            metrics=metrics,
            stage=stage,
            risk_analysis=risk_analysis,
            readiness=readiness,
            roadmap_status="blocked",
            roadmap=None,
            roadmap_notice=ROADMAP_BLOCKED_NOTICE,
        )

    roadmap = generate_roadmap(metrics, stage, risk_analysis.overall_risk)
    print(f"🗺️ [ROADMAP] {len(roadmap)} phases activated: {[p.id for p in roadmap]}")

    notice = None
    if readiness.tier == ReadinessTier.CONDITIONALLY_READY:
        notice = CONDITIONAL_ROADMAP_NOTICE.format(index=format_metric_value(readiness.index))

    return StrategicAssessment(
        metrics=metrics,
        stage=stage,
        risk_analysis=risk_analysis,
        readiness=readiness,
        roadmap_status="generated",
        roadmap=roadmap,
        roadmap_notice=notice,
    )

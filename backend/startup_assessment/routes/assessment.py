"""Strategic Assessment Routes.

Endpoints:
  POST /assessment/evaluate   — Risk, readiness and gated roadmap for metrics + stage
  POST /assessment/risk       — Risk analysis only
  POST /assessment/readiness  — Readiness evaluation only
  POST /assessment/score      — LLM-score an idea description, then evaluate it
  GET  /assessment/phases     — Phase Library catalog
  GET  /assessment/stages     — Stages and their roadmap priority modifiers

The routes are thin — all business logic lives in service functions.
Nothing is persisted; every request recomputes.
"""

from __future__ import annotations

import logging
import time
from typing import List

from fastapi import APIRouter, HTTPException, status

from ..errors import MetricScoringError
from ..schemas.assessment_schema import (
    AssessmentRequest,
    IdeaScoringRequest,
    ReadinessRequest,
    StageModifiers,
    StrategicAssessment,
)
from ..schemas.metrics_schema import Stage
from ..schemas.readiness_schema import ReadinessResult
from ..schemas.risk_schema import RiskAnalysis
from ..schemas.roadmap_schema import RoadmapPhase
from ..services.assessment_service import build_strategic_assessment
from ..services.metric_scoring import score_idea_description
from ..services.phase_library import PHASE_LIBRARY, STAGE_PRIORITY_MODIFIERS
from ..services.readiness_evaluator import compute_readiness
from ..services.risk_analyzer import analyze_risk

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/assessment",
    tags=["Assessment"],
)


@router.post(
    "/evaluate",
    response_model=StrategicAssessment,
    summary="Evaluate Metrics",
    response_description="Risk analysis, readiness result and (unless Not Ready) the action roadmap",
)
def evaluate(request: AssessmentRequest) -> StrategicAssessment:
    """Run the full strategic assessment for a metric vector and stage."""
    return build_strategic_assessment(request.metrics, request.stage)


@router.post(
    "/risk",
    response_model=RiskAnalysis,
    summary="Analyze Risk",
)
def risk(request: AssessmentRequest) -> RiskAnalysis:
    return analyze_risk(request.metrics, request.stage)


@router.post(
    "/readiness",
    response_model=ReadinessResult,
    summary="Evaluate Readiness",
)
def readiness(request: ReadinessRequest) -> ReadinessResult:
    return compute_readiness(request.metrics)


@router.post(
    "/score",
    response_model=StrategicAssessment,
    summary="Score and Evaluate an Idea",
    response_description="Assessment built from LLM-produced metrics",
)
async def score_idea(request: IdeaScoringRequest) -> StrategicAssessment:
    """Score a free-text idea with the LLM, then run the deterministic assessment.

    Returns 502 when the LLM cannot produce a valid metric vector.
    """
    start_time = time.perf_counter()
    try:
        metrics, stage = await score_idea_description(
            title=request.title,
            description=request.description,
        )
    except MetricScoringError as exc:
        logger.warning("Metric scoring failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    assessment = build_strategic_assessment(metrics, stage)
    duration = (time.perf_counter() - start_time) * 1000
    print(f"[TIMING] score_idea: END — duration={duration:.0f}ms")
    return assessment


@router.get(
    "/phases",
    response_model=List[RoadmapPhase],
    summary="List Roadmap Phases",
)
def list_phases() -> List[RoadmapPhase]:
    return list(PHASE_LIBRARY)


@router.get(
    "/stages",
    response_model=List[StageModifiers],
    summary="List Stages",
    response_description="Each lifecycle stage with its phase priority modifiers",
)
def list_stages() -> List[StageModifiers]:
    return [
        StageModifiers(stage=stage, priority_modifiers=dict(STAGE_PRIORITY_MODIFIERS[stage]))
        for stage in Stage
    ]

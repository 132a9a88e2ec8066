# Schemas package
from .metrics_schema import Metrics, Stage, parse_stage, validate_metrics
from .risk_schema import RiskAnalysis, RiskLevel
from .readiness_schema import ReadinessResult, ReadinessTier
from .roadmap_schema import ActivatedPhase, PhaseType, RoadmapPhase
from .assessment_schema import AssessmentRequest, IdeaScoringRequest, StrategicAssessment

__all__ = [
    "Metrics",
    "Stage",
    "parse_stage",
    "validate_metrics",
    "RiskAnalysis",
    "RiskLevel",
    "ReadinessResult",
    "ReadinessTier",
    "ActivatedPhase",
    "PhaseType",
    "RoadmapPhase",
    "AssessmentRequest",
    "IdeaScoringRequest",
    "StrategicAssessment",
]

from .risk_analyzer import analyze_risk, calculate_risk_level
from .readiness_evaluator import compute_readiness
from .roadmap_generator import generate_roadmap
from .assessment_service import build_strategic_assessment

__all__ = [
    "analyze_risk",
    "calculate_risk_level",
    "compute_readiness",
    "generate_roadmap",
    "build_strategic_assessment",
]

"""Phase Library — twelve modular remediation phases.

Static, process-wide configuration:
  - ``PHASE_LIBRARY``            ordered catalog (base_priority 1..12)
  - ``PHASE_ACTIVATION_RULES``   phase id → activation predicate
  - ``STAGE_PRIORITY_MODIFIERS`` stage → {phase id: priority delta}

Each activation predicate is a pure function of (metrics, stage, risk
level) returning a human-readable activation reason, or ``None`` when the
phase does not apply. Conditions inside a predicate are checked in order;
the first that holds supplies the reason.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

from ..schemas.metrics_schema import Metrics, Stage, format_metric_value
from ..schemas.risk_schema import RiskLevel
from ..schemas.roadmap_schema import PhaseType, RoadmapPhase

ActivationRule = Callable[[Metrics, Stage, RiskLevel], Optional[str]]

_fmt = format_metric_value


# ── Catalog ─────────────────────────────────────────────────────────────

PHASE_LIBRARY: Tuple[RoadmapPhase, ...] = (
    RoadmapPhase(
        id="problem-validation",
        name="Validate Problem Hypothesis",
        objective="Confirm problem severity justifies behavioral change and switching costs.",
        actions=(
            "Conduct 20+ structured problem interviews with target segment",
            "Map existing solutions and workaround patterns",
            "Quantify cost-of-inaction for target personas",
        ),
        success_criteria="70%+ of interviewees confirm active solution-seeking behavior.",
        risk_mitigated="Problem Irrelevance",
        duration="2–4 weeks",
        type=PhaseType.MANDATORY,
        base_priority=1,
        icon_key="search",
    ),
    RoadmapPhase(
        id="icp-refinement",
        name="Refine ICP Definition",
        objective="Establish precise customer profile to enable channel optimization.",
        actions=(
            "Segment initial users by firmographics and behavior",
            "Identify highest-intent subsegment via engagement scoring",
            "Document ICP with quantifiable inclusion/exclusion criteria",
        ),
        success_criteria="ICP defined with 3+ measurable attributes and validated against pipeline.",
        risk_mitigated="ICP Misalignment",
        duration="2–3 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=2,
        icon_key="users",
    ),
    RoadmapPhase(
        id="demand-verification",
        name="Verify Market Demand",
        objective="Validate willingness-to-engage before committing development resources.",
        actions=(
            "Deploy landing page with value proposition A/B variants",
            "Run paid acquisition test across 2+ channels ($500–2k budget)",
            "Measure signup intent rate and cost-per-lead",
        ),
        success_criteria="Signup conversion >3% and CPL below industry benchmark.",
        risk_mitigated="Demand Collapse",
        duration="2–4 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=3,
        icon_key="chart",
    ),
    RoadmapPhase(
        id="positioning",
        name="Establish Competitive Positioning",
        objective="Define defensible value proposition that separates from incumbent solutions.",
        actions=(
            "Conduct competitive feature-gap analysis across top 5 alternatives",
            "Identify underserved need clusters from interview data",
            "Formulate positioning statement with quantifiable differentiation claim",
        ),
        success_criteria="Positioning validated by 60%+ target users as clearly distinct.",
        risk_mitigated="Competitive Saturation",
        duration="2–3 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=4,
        icon_key="target",
    ),
    RoadmapPhase(
        id="mvp-build",
        name="Build Minimum Viable Product",
        objective="Develop functional prototype to test core assumptions with real users.",
        actions=(
            "Scope MVP to 3–5 critical user flows only",
            "Build with fastest-to-market stack; avoid premature optimization",
            "Deploy to closed beta cohort of 20–50 users",
        ),
        success_criteria="Beta cohort achieves 40%+ weekly active retention at Day 14.",
        risk_mitigated="Validation Dependency",
        duration="4–8 weeks",
        type=PhaseType.MANDATORY,
        base_priority=5,
        icon_key="flask",
    ),
    RoadmapPhase(
        id="monetization-testing",
        name="Test Monetization Model",
        objective="Validate willingness-to-pay and establish baseline pricing.",
        actions=(
            "Design 2–3 pricing tiers with feature differentiation",
            "Run price sensitivity survey (Van Westendorp or Gabor-Granger)",
            "Deploy paywall to subset of active users; measure conversion",
        ),
        success_criteria="Trial-to-paid conversion >5% or pre-sale commitment from 10+ users.",
        risk_mitigated="Revenue Model Uncertainty",
        duration="3–5 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=6,
        icon_key="dollar",
    ),
    RoadmapPhase(
        id="traction-validation",
        name="Validate Traction Signals",
        objective="Confirm repeatable acquisition and engagement patterns.",
        actions=(
            "Initiate small-scale marketing campaign across validated channel",
            "Track cohort retention curves at Day 1, 7, 14, 30",
            "Measure organic referral coefficient and NPS",
        ),
        success_criteria="Month-over-month growth >15% with stable retention curve.",
        risk_mitigated="Engagement Depth Constraint",
        duration="4–6 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=7,
        icon_key="rocket",
    ),
    RoadmapPhase(
        id="unit-economics",
        name="Validate Unit Economics",
        objective="Confirm LTV:CAC ratio supports sustainable growth.",
        actions=(
            "Calculate blended CAC across all active channels",
            "Project 12-month LTV from current retention and ARPU",
            "Model payback period and contribution margin per cohort",
        ),
        success_criteria="LTV:CAC ratio >3:1 or clear trajectory toward it within 2 quarters.",
        risk_mitigated="Capital Dependency",
        duration="2–4 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=8,
        icon_key="briefcase",
    ),
    RoadmapPhase(
        id="scalability-assessment",
        name="Assess Scalability Architecture",
        objective="Identify infrastructure constraints before scaling investment.",
        actions=(
            "Load-test current architecture at 10x projected volume",
            "Audit operational bottlenecks in delivery pipeline",
            "Document scaling dependencies and cost-per-unit at scale",
        ),
        success_criteria="Architecture supports 10x growth without proportional cost increase.",
        risk_mitigated="Scalability Ceiling",
        duration="2–4 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=9,
        icon_key="cpu",
    ),
    RoadmapPhase(
        id="growth-optimization",
        name="Optimize Growth Channels",
        objective="Scale validated channels while maintaining unit economics.",
        actions=(
            "Double budget on top-performing acquisition channel",
            "Implement systematic A/B framework for funnel optimization",
            "Build referral or virality loop into core product experience",
        ),
        success_criteria="CAC decreases 20%+ while maintaining acquisition volume growth.",
        risk_mitigated="Commoditization Trajectory",
        duration="4–8 weeks",
        type=PhaseType.OPTIONAL,
        base_priority=10,
        icon_key="trending",
    ),
    RoadmapPhase(
        id="capital-strategy",
        name="Define Capital Strategy",
        objective="Determine funding approach aligned with validated metrics.",
        actions=(
            "Model 18-month runway scenarios (bootstrap vs. raise)",
            "Prepare data room with validated metrics and projections",
            "Identify optimal instrument (SAFE, equity, revenue-based)",
        ),
        success_criteria="Capital plan defined with clear milestone-based deployment schedule.",
        risk_mitigated="Capital Dependency",
        duration="2–4 weeks",
        type=PhaseType.OPTIONAL,
        base_priority=11,
        icon_key="dollar",
    ),
    RoadmapPhase(
        id="pivot-assessment",
        name="Evaluate Pivot Indicators",
        objective="Determine if current trajectory warrants strategic redirection.",
        actions=(
            "Audit all validation metrics against original thresholds",
            "Identify highest-signal adjacent opportunities from user data",
            "Model resource cost of pivot vs. persistence",
        ),
        success_criteria="Decision framework outputs clear persist/pivot/terminate signal.",
        risk_mitigated="Validation Dependency",
        duration="1–2 weeks",
        type=PhaseType.CONDITIONAL,
        base_priority=12,
        icon_key="refresh",
    ),
)

_PHASES_BY_ID: Mapping[str, RoadmapPhase] = MappingProxyType(
    {phase.id: phase for phase in PHASE_LIBRARY}
)


def get_phase(phase_id: str) -> RoadmapPhase:
    """Look up a catalog phase. Raises ``KeyError`` for unknown ids."""
    return _PHASES_BY_ID[phase_id]


# ── Stage priority modifiers ────────────────────────────────────────────
# Lower effective priority = earlier in sequence. Missing entries mean 0.

STAGE_PRIORITY_MODIFIERS: Mapping[Stage, Mapping[str, int]] = MappingProxyType({
    Stage.PRE_VALIDATION: MappingProxyType({
        "problem-validation": -5,
        "icp-refinement": -3,
        "demand-verification": -2,
        "positioning": -1,
        "mvp-build": 0,
    }),
    Stage.VALIDATION: MappingProxyType({
        "mvp-build": -5,
        "monetization-testing": -3,
        "traction-validation": -2,
        "positioning": -1,
    }),
    Stage.EARLY_TRACTION: MappingProxyType({
        "unit-economics": -5,
        "traction-validation": -4,
        "scalability-assessment": -3,
        "growth-optimization": -2,
        "monetization-testing": -1,
    }),
    Stage.GROWTH: MappingProxyType({
        "growth-optimization": -5,
        "capital-strategy": -4,
        "scalability-assessment": -3,
        "unit-economics": -2,
    }),
})


def stage_modifier(stage: Stage, phase_id: str) -> int:
    return STAGE_PRIORITY_MODIFIERS[stage].get(phase_id, 0)


# ── Activation rules ────────────────────────────────────────────────────

def _problem_validation(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.problem_severity < 6:
        return f"Problem Severity at {_fmt(m.problem_severity)} — below validation threshold."
    if stage == Stage.PRE_VALIDATION:
        return "Pre-validation stage requires problem confirmation."
    return None


def _icp_refinement(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.customer_clarity < 6:
        return f"Customer Clarity at {_fmt(m.customer_clarity)} — ICP insufficiently defined."
    return None


def _demand_verification(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.market_demand < 7:
        return f"Market Demand at {_fmt(m.market_demand)} — requires empirical verification."
    if stage == Stage.PRE_VALIDATION and m.market_demand < 9:
        return "Pre-validation stage; demand unconfirmed."
    return None


def _positioning(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.differentiation < 6:
        return f"Differentiation at {_fmt(m.differentiation)} — competitive positioning weak."
    return None


def _mvp_build(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if stage in (Stage.PRE_VALIDATION, Stage.VALIDATION):
        return f"{stage.value} stage — functional prototype required."
    return None


def _monetization_testing(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.monetization < 6:
        return f"Monetization at {_fmt(m.monetization)} — revenue model unvalidated."
    return None


def _traction_validation(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if stage in (Stage.VALIDATION, Stage.EARLY_TRACTION):
        return f"{stage.value} stage — traction signals required."
    if m.market_demand >= 7 and m.problem_severity < 6:
        return "High demand with moderate problem — engagement depth unconfirmed."
    return None


def _unit_economics(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if stage in (Stage.EARLY_TRACTION, Stage.GROWTH):
        return f"{stage.value} stage — unit economics must be validated."
    if m.monetization >= 6 and m.scalability >= 7:
        return "Monetization and scalability present — economics assessment needed."
    return None


def _scalability_assessment(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if m.scalability < 6:
        return f"Scalability at {_fmt(m.scalability)} — infrastructure constraints likely."
    if stage in (Stage.EARLY_TRACTION, Stage.GROWTH):
        return f"{stage.value} stage — scaling readiness assessment required."
    return None


def _growth_optimization(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if stage == Stage.GROWTH:
        return "Growth stage — channel optimization is primary objective."
    if stage == Stage.EARLY_TRACTION and m.market_demand >= 7 and m.differentiation >= 6:
        return "Strong demand with differentiation — growth levers available."
    return None


def _capital_strategy(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if stage == Stage.GROWTH:
        return "Growth stage — capital deployment planning required."
    if risk in (RiskLevel.HIGH, RiskLevel.ELEVATED):
        return f"{risk.value} risk — capital runway planning critical."
    if m.scalability >= 7 and m.monetization < 5:
        return "Scalable model without monetization — external capital likely needed."
    return None


def _pivot_assessment(m: Metrics, stage: Stage, risk: RiskLevel) -> Optional[str]:
    if risk == RiskLevel.HIGH:
        return "High risk profile — pivot evaluation warranted."
    if m.differentiation <= 3 and m.market_demand < 5:
        return "Critical weakness in both demand and differentiation."
    return None


PHASE_ACTIVATION_RULES: Mapping[str, ActivationRule] = MappingProxyType({
    "problem-validation": _problem_validation,
    "icp-refinement": _icp_refinement,
    "demand-verification": _demand_verification,
    "positioning": _positioning,
    "mvp-build": _mvp_build,
    "monetization-testing": _monetization_testing,
    "traction-validation": _traction_validation,
    "unit-economics": _unit_economics,
    "scalability-assessment": _scalability_assessment,
    "growth-optimization": _growth_optimization,
    "capital-strategy": _capital_strategy,
    "pivot-assessment": _pivot_assessment,
})


"""Risk & Constraint Analysis Engine.

Classifies overall risk from the six-metric vector and derives risk
drivers, critical weaknesses and structural constraints.

Rules
-----
- NO API calls
- NO LLMs
- Fixed, explainable threshold tables only
- Emission order follows the rule tables below, never dict iteration
"""

from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Tuple, Union

from ..constants import RISK_WEIGHTS
from ..schemas.metrics_schema import Metrics, Stage, format_metric_value, parse_stage
from ..schemas.risk_schema import (
    CriticalWeakness,
    RiskAnalysis,
    RiskDriver,
    RiskLevel,
    StructuralConstraint,
)

_RISK_WEIGHT_SUM = sum(RISK_WEIGHTS.values())


def calculate_weighted_average(metrics: Metrics) -> float:
    """Weighted mean with demand and monetization at 1.5x, divided by 7."""
    weighted_sum = (
        metrics.market_demand * RISK_WEIGHTS["market_demand"]
        + metrics.problem_severity * RISK_WEIGHTS["problem_severity"]
        + metrics.customer_clarity * RISK_WEIGHTS["customer_clarity"]
        + metrics.differentiation * RISK_WEIGHTS["differentiation"]
        + metrics.monetization * RISK_WEIGHTS["monetization"]
        + metrics.scalability * RISK_WEIGHTS["scalability"]
    )
    return weighted_sum / _RISK_WEIGHT_SUM


def calculate_risk_level(metrics: Metrics) -> RiskLevel:
    """Classify overall risk. Conditions are checked High → Low; first match wins."""
    values = metrics.scores()
    lowest = min(values)
    spread = max(values) - lowest
    below_five = sum(1 for v in values if v < 5)
    weighted_avg = calculate_weighted_average(metrics)

    if lowest <= 2 or below_five >= 3 or weighted_avg < 4:
        return RiskLevel.HIGH
    if lowest <= 3 or below_five >= 2 or spread >= 6 or weighted_avg < 5:
        return RiskLevel.ELEVATED
    if lowest < 5 or below_five >= 1 or spread >= 4 or weighted_avg < 6.5:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


# ── Risk drivers ──────────────────────────────────────────────────────

class _DriverRule(NamedTuple):
    metric: str
    label: str
    emphasized_term: str
    # Second, more severe driver emitted right after the first when value < 4.
    escalation: Optional[Tuple[str, str]]


_DRIVER_RULES: Tuple[_DriverRule, ...] = (
    _DriverRule("differentiation", "Competitive Saturation Risk", "Saturation",
                ("Limited Differentiation Risk", "Differentiation")),
    _DriverRule("monetization", "Revenue Model Uncertainty", "Revenue",
                ("Pricing Resistance Risk", "Resistance")),
    _DriverRule("market_demand", "Demand Validation Risk", "Demand",
                ("Market Collapse Exposure", "Collapse")),
    _DriverRule("problem_severity", "Weak Problem-Market Fit", "Problem-Market", None),
    _DriverRule("customer_clarity", "ICP Misalignment Threat", "Misalignment",
                ("Target Audience Ambiguity", "Ambiguity")),
    _DriverRule("scalability", "Scalability Ceiling Risk", "Scalability",
                ("Infrastructure Bottleneck Threat", "Bottleneck")),
)

DRIVER_THRESHOLD = 5.0
DRIVER_ESCALATION_THRESHOLD = 4.0


def derive_risk_drivers(metrics: Metrics) -> List[RiskDriver]:
    drivers: List[RiskDriver] = []
    for rule in _DRIVER_RULES:
        value = metrics.score(rule.metric)
        if value >= DRIVER_THRESHOLD:
            continue
        drivers.append(RiskDriver(label=rule.label, emphasized_term=rule.emphasized_term))
        if rule.escalation is not None and value < DRIVER_ESCALATION_THRESHOLD:
            label, term = rule.escalation
            drivers.append(RiskDriver(label=label, emphasized_term=term))
    return drivers


# ── Critical weaknesses ───────────────────────────────────────────────

WEAKNESS_THRESHOLD = 3.0

# (metric, title prefix, description) in emission order.
_WEAKNESS_RULES: Tuple[Tuple[str, str, str], ...] = (
    ("market_demand", "Demand Collapse",
     "Insufficient market pull to sustain acquisition economics at scale."),
    ("problem_severity", "Problem Irrelevance",
     "Problem severity does not justify switching costs or behavioral change."),
    ("customer_clarity", "ICP Undefined",
     "Target customer profile lacks specificity required for channel optimization."),
    ("differentiation", "Low Differentiation",
     "Insufficient unique value proposition to stand out from competitors."),
    ("monetization", "Monetization Failure",
     "No validated revenue mechanism; unit economics remain theoretical."),
    ("scalability", "Scalability Ceiling",
     "Architecture or model constraints prevent cost-efficient scaling beyond initial traction."),
)


def _weakness_title(metric: str, prefix: str, value: float) -> str:
    # Differentiation is reported as an upper bound, not the exact score.
    if metric == "differentiation":
        return f"{prefix} (<{math.ceil(value)})"
    return f"{prefix} ({format_metric_value(value)})"


def derive_critical_weaknesses(metrics: Metrics) -> List[CriticalWeakness]:
    weaknesses: List[CriticalWeakness] = []
    for metric, prefix, description in _WEAKNESS_RULES:
        value = metrics.score(metric)
        if value <= WEAKNESS_THRESHOLD:
            weaknesses.append(
                CriticalWeakness(
                    title=_weakness_title(metric, prefix, value),
                    description=description,
                )
            )
    return weaknesses


# ── Structural constraints ────────────────────────────────────────────

def derive_structural_constraints(metrics: Metrics, stage: Union[Stage, str]) -> List[StructuralConstraint]:
    """Evaluate six independent compound conditions in declaration order.

    Several may fire at once. The legacy ``"idea"`` stage label resolves to
    Pre-validation and triggers the validation dependency constraint.
    """
    stage = parse_stage(stage)
    m = metrics
    constraints: List[StructuralConstraint] = []

    if m.market_demand >= 8 and m.differentiation <= 5:
        constraints.append(StructuralConstraint(
            label="Competitive Density Constraint",
            description="High-demand market with low differentiation creates winner-take-all dynamics.",
        ))
    if m.scalability >= 7 and m.monetization < 5:
        constraints.append(StructuralConstraint(
            label="Capital Dependency Constraint",
            description="Scalable model without monetization validation requires sustained external funding.",
        ))
    if stage == Stage.PRE_VALIDATION:
        constraints.append(StructuralConstraint(
            label="Validation Dependency Constraint",
            description="All projections are pre-validation; data confidence remains below institutional threshold.",
        ))
    if m.customer_clarity < 5 and m.monetization < 5:
        constraints.append(StructuralConstraint(
            label="Go-to-Market Uncertainty",
            description="Unclear ICP combined with unvalidated pricing prevents reliable channel strategy.",
        ))
    if m.market_demand >= 7 and m.problem_severity < 5:
        constraints.append(StructuralConstraint(
            label="Engagement Depth Constraint",
            description="Market interest exists but problem lacks urgency; risk of shallow engagement.",
        ))
    if m.differentiation < 5 and m.scalability >= 7:
        constraints.append(StructuralConstraint(
            label="Commoditization Trajectory",
            description="Scalable but undifferentiated offering will compress margins under competition.",
        ))

    return constraints


def analyze_risk(metrics: Metrics, stage: Union[Stage, str]) -> RiskAnalysis:
    """Build the full risk analysis for one (metrics, stage) pair."""
    return RiskAnalysis(
        overall_risk=calculate_risk_level(metrics),
        primary_drivers=derive_risk_drivers(metrics),
        critical_weaknesses=derive_critical_weaknesses(metrics),
        structural_constraints=derive_structural_constraints(metrics, stage),
    )


"""Roadmap Readiness Engine.

Computes the Roadmap Readiness Index (RRI), applies hard-stop gates and
structural minimums, assigns a readiness tier and picks the improvement
signal — the single metric move that most advances the tier.

Rules
-----
- NO API calls
- NO LLMs
- Pure deterministic math
- Rounding is half-up to one decimal, matching the dashboard display
"""

from __future__ import annotations

import math
from typing import List, Optional

from ..constants import (
    CONDITIONAL_READY_THRESHOLD,
    EXECUTION_READY_THRESHOLD,
    IMPROVEMENT_HEADROOM_CEILING,
    METRIC_LABELS,
    READINESS_WEIGHTS,
    STRUCTURAL_MAX_BELOW_MIN,
    STRUCTURAL_MIN_METRIC,
    STRUCTURAL_MIN_WEIGHTED_AVG,
)
from ..schemas.metrics_schema import Metrics, format_metric_value
from ..schemas.readiness_schema import (
    ImprovementSignal,
    MetricBreakdownRow,
    ReadinessResult,
    ReadinessTier,
)
from .risk_analyzer import calculate_weighted_average


def round_half_up(value: float) -> float:
    """Round to one decimal with halves going up (toward +infinity)."""
    return math.floor(value * 10 + 0.5) / 10


def compute_raw_index(metrics: Metrics) -> float:
    """Σ value × weight over the six metrics (0-1000)."""
    return (
        metrics.customer_clarity * READINESS_WEIGHTS["customer_clarity"]
        + metrics.market_demand * READINESS_WEIGHTS["market_demand"]
        + metrics.differentiation * READINESS_WEIGHTS["differentiation"]
        + metrics.monetization * READINESS_WEIGHTS["monetization"]
        + metrics.problem_severity * READINESS_WEIGHTS["problem_severity"]
        + metrics.scalability * READINESS_WEIGHTS["scalability"]
    )


def find_gate_violations(metrics: Metrics) -> List[str]:
    """Hard stops — fatal blockers regardless of the index."""
    m = metrics
    fmt = format_metric_value
    violations: List[str] = []

    if m.customer_clarity < 3:
        violations.append(
            f"Customer Clarity ({fmt(m.customer_clarity)}) is below the minimum viable threshold of 3.0 "
            "— target customer is undefined. All roadmap phases require a defined ICP."
        )
    if m.market_demand < 2:
        violations.append(
            f"Market Demand ({fmt(m.market_demand)}) is below the minimum viable threshold of 2.0 "
            "— no market signal present. Execution without demand evidence is structurally unsound."
        )
    if m.problem_severity < 2:
        violations.append(
            f"Problem Severity ({fmt(m.problem_severity)}) is below the minimum viable threshold of 2.0 "
            "— no problem foundation. Roadmap intervention logic cannot be constructed."
        )
    if m.differentiation < 2 and m.monetization < 2:
        violations.append(
            f"Compound terminal weakness: Differentiation ({fmt(m.differentiation)}) and "
            f"Monetization ({fmt(m.monetization)}) are both critically low. No competitive position "
            "and no revenue mechanism — roadmap generation would produce invalid output."
        )

    return violations


def find_structural_shortfalls(metrics: Metrics, index: float) -> List[str]:
    """Non-gate conditions that also force Not Ready."""
    shortfalls: List[str] = []

    if index < CONDITIONAL_READY_THRESHOLD:
        shortfalls.append(
            f"Readiness Index ({format_metric_value(index)}) is below the "
            f"Conditionally Ready threshold of {CONDITIONAL_READY_THRESHOLD:.0f}."
        )

    below_minimum = sum(1 for v in metrics.scores() if v < STRUCTURAL_MIN_METRIC)
    if below_minimum >= STRUCTURAL_MAX_BELOW_MIN:
        shortfalls.append(
            f"{below_minimum} metrics are below the structural minimum of {STRUCTURAL_MIN_METRIC:.1f}; "
            f"at most {STRUCTURAL_MAX_BELOW_MIN - 1} are tolerated."
        )

    weighted_avg = calculate_weighted_average(metrics)
    if weighted_avg < STRUCTURAL_MIN_WEIGHTED_AVG:
        shortfalls.append(
            f"Weighted metric average ({weighted_avg:.2f}) is below the structural "
            f"minimum of {STRUCTURAL_MIN_WEIGHTED_AVG}."
        )

    return shortfalls


def build_metric_breakdown(metrics: Metrics) -> List[MetricBreakdownRow]:
    """One row per metric, highest weight first. ``sorted`` is stable, so
    equal weights keep weight-table order."""
    keys = sorted(READINESS_WEIGHTS, key=lambda k: READINESS_WEIGHTS[k], reverse=True)
    return [
        MetricBreakdownRow(
            metric=key,
            label=METRIC_LABELS[key],
            value=metrics.score(key),
            weight=READINESS_WEIGHTS[key],
            contribution=round_half_up(metrics.score(key) * READINESS_WEIGHTS[key] / 10),
            meets_minimum=metrics.score(key) >= STRUCTURAL_MIN_METRIC,
        )
        for key in keys
    ]


def pick_improvement_signal(
    breakdown: List[MetricBreakdownRow],
    tier: ReadinessTier,
    index: float,
) -> Optional[ImprovementSignal]:
    """Highest-weight metric that still has headroom (value < 9).

    ``points_to_next_tier`` is (threshold - index) / gain and goes negative
    when a gate rather than the index holds the tier down.
    """
    if tier == ReadinessTier.EXECUTION_READY:
        return None

    if tier == ReadinessTier.NOT_READY:
        threshold = CONDITIONAL_READY_THRESHOLD
    else:
        threshold = EXECUTION_READY_THRESHOLD
    index_gap = threshold - index

    best: Optional[ImprovementSignal] = None
    for row in breakdown:
        if row.value >= IMPROVEMENT_HEADROOM_CEILING:
            continue
        gain = round_half_up(row.weight / 10)
        if best is not None and gain <= best.index_gain_per_point:
            continue
        best = ImprovementSignal(
            metric=row.metric,
            label=row.label,
            current_value=row.value,
            index_gain_per_point=gain,
            points_to_next_tier=round_half_up(index_gap / (row.weight / 10)),
        )
    return best


def compute_readiness(metrics: Metrics) -> ReadinessResult:
    """Evaluate execution readiness.

    Tiering, first match wins:
      1. Not Ready — any gate violation, index < 45, three or more metrics
         below 4, or weighted average < 4.5
      2. Conditionally Ready — index < 70
      3. Execution Ready
    """
    index = round_half_up(compute_raw_index(metrics) / 10)
    gate_violations = find_gate_violations(metrics)
    shortfalls = find_structural_shortfalls(metrics, index)

    if gate_violations or shortfalls:
        tier = ReadinessTier.NOT_READY
    elif index < EXECUTION_READY_THRESHOLD:
        tier = ReadinessTier.CONDITIONALLY_READY
    else:
        tier = ReadinessTier.EXECUTION_READY

    breakdown = build_metric_breakdown(metrics)

    return ReadinessResult(
        index=index,
        tier=tier,
        gate_violations=gate_violations,
        structural_shortfalls=shortfalls,
        metric_breakdown=breakdown,
        improvement_signal=pick_improvement_signal(breakdown, tier, index),
    )

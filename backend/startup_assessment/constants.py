"""Centralized constants shared by the assessment engine and routes.

This module is the SINGLE SOURCE OF TRUTH for metric keys, display labels,
weight tables, tier thresholds and stage vocabulary. Reused by:
  - Risk Analyzer
  - Readiness Evaluator
  - Roadmap Generator
  - Metric scoring (LLM prompt)
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# ── Metric keys ─────────────────────────────────────────────────────────
# Declaration order. Driver/weakness emission and tie-breaks depend on it.

METRIC_KEYS: Tuple[str, ...] = (
    "market_demand",
    "problem_severity",
    "customer_clarity",
    "differentiation",
    "monetization",
    "scalability",
)

METRIC_LABELS: Mapping[str, str] = MappingProxyType({
    "market_demand": "Market Demand",
    "problem_severity": "Problem Severity",
    "customer_clarity": "Customer Clarity",
    "differentiation": "Differentiation",
    "monetization": "Monetization",
    "scalability": "Scalability",
})

METRIC_MIN: float = 0.0
METRIC_MAX: float = 10.0

# ── Risk weighting ──────────────────────────────────────────────────────
# Demand and monetization count 1.5x; divisor is the sum of weights (7).

RISK_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "market_demand": 1.5,
    "problem_severity": 1.0,
    "customer_clarity": 1.0,
    "differentiation": 1.0,
    "monetization": 1.5,
    "scalability": 1.0,
})

# ── Readiness Index weights ─────────────────────────────────────────────
# Must sum to 100. Each metric point contributes weight/10 index points.
# Ordered by weight descending; equal weights keep this order.

READINESS_WEIGHTS: Mapping[str, int] = MappingProxyType({
    "customer_clarity": 25,
    "market_demand": 20,
    "differentiation": 15,
    "monetization": 15,
    "problem_severity": 15,
    "scalability": 10,
})

READINESS_WEIGHT_TOTAL: int = 100

# ── Readiness thresholds ────────────────────────────────────────────────

CONDITIONAL_READY_THRESHOLD: float = 45.0   # index below → Not Ready
EXECUTION_READY_THRESHOLD: float = 70.0     # index below → Conditionally Ready
STRUCTURAL_MIN_METRIC: float = 4.0          # "meets minimum" line
STRUCTURAL_MAX_BELOW_MIN: int = 3           # this many metrics below 4 → Not Ready
STRUCTURAL_MIN_WEIGHTED_AVG: float = 4.5
IMPROVEMENT_HEADROOM_CEILING: float = 9.0   # metrics at/above are not suggested

# ── Lifecycle stages ────────────────────────────────────────────────────

STAGE_PRE_VALIDATION = "Pre-validation"
STAGE_VALIDATION = "Validation"
STAGE_EARLY_TRACTION = "Early Traction"
STAGE_GROWTH = "Growth"

# Lower-cased aliases accepted from callers and from the LLM phase label.
STAGE_ALIASES: Mapping[str, str] = MappingProxyType({
    "pre-validation": STAGE_PRE_VALIDATION,
    "prevalidation": STAGE_PRE_VALIDATION,
    "idea": STAGE_PRE_VALIDATION,
    "validation": STAGE_VALIDATION,
    "early traction": STAGE_EARLY_TRACTION,
    "early-traction": STAGE_EARLY_TRACTION,
    "mvp": STAGE_EARLY_TRACTION,
    "growth": STAGE_GROWTH,
    "scale": STAGE_GROWTH,
})

# ── Roadmap notices ─────────────────────────────────────────────────────

ROADMAP_BLOCKED_NOTICE = (
    "Roadmap generation blocked. One or more structural prerequisites have "
    "not been satisfied. Resolve gate violations in the Execution Readiness "
    "Framework."
)

CONDITIONAL_ROADMAP_NOTICE = (
    "Readiness Index {index}/100 — below the Execution Ready threshold of 70. "
    "This roadmap is directional. Execution confidence is constrained by weak "
    "signals. Validate inputs before committing resources."
)

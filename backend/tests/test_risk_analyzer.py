"""Risk Analyzer tests — risk level classification, drivers, weaknesses, constraints."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from startup_assessment.errors import UnknownStageError
from startup_assessment.schemas.metrics_schema import Metrics, Stage
from startup_assessment.schemas.risk_schema import RiskLevel
from startup_assessment.services.risk_analyzer import (
    analyze_risk,
    calculate_risk_level,
    calculate_weighted_average,
    derive_critical_weaknesses,
    derive_risk_drivers,
    derive_structural_constraints,
)


def _metrics(default=9.0, **overrides):
    values = {
        "market_demand": default,
        "problem_severity": default,
        "customer_clarity": default,
        "differentiation": default,
        "monetization": default,
        "scalability": default,
    }
    values.update(overrides)
    return Metrics(**values)


SCENARIO_A = dict(
    market_demand=8.5,
    problem_severity=6,
    customer_clarity=6.5,
    differentiation=4.5,
    monetization=7,
    scalability=7.5,
)


# ===================================================================== #
#  calculate_risk_level                                                   #
# ===================================================================== #

class TestRiskLevel:
    def test_scenario_a_is_moderate(self):
        assert calculate_risk_level(Metrics(**SCENARIO_A)) == RiskLevel.MODERATE

    def test_all_strong_is_low(self):
        assert calculate_risk_level(_metrics(9.0)) == RiskLevel.LOW

    def test_lowest_at_two_is_high(self):
        assert calculate_risk_level(_metrics(9.0, scalability=2)) == RiskLevel.HIGH

    def test_three_below_five_is_high(self):
        metrics = _metrics(9.0, differentiation=4.9, monetization=4.9, scalability=4.9)
        assert calculate_risk_level(metrics) == RiskLevel.HIGH

    def test_lowest_at_three_is_elevated(self):
        assert calculate_risk_level(_metrics(9.0, customer_clarity=3)) == RiskLevel.ELEVATED

    def test_two_below_five_is_elevated(self):
        metrics = _metrics(9.0, differentiation=4.5, scalability=4.5)
        assert calculate_risk_level(metrics) == RiskLevel.ELEVATED

    def test_spread_of_six_is_elevated(self):
        """Only one metric under 5 and lowest above 3 — the spread decides."""
        metrics = _metrics(10.0, scalability=4)
        assert calculate_risk_level(metrics) == RiskLevel.ELEVATED

    def test_lowest_exactly_five_can_be_low(self):
        metrics = _metrics(7.0, problem_severity=5)
        assert calculate_weighted_average(metrics) >= 6.5
        assert calculate_risk_level(metrics) == RiskLevel.LOW

    def test_low_weighted_average_is_moderate(self):
        # Everything at 6: no metric below 5, no spread, but average < 6.5.
        assert calculate_risk_level(_metrics(6.0)) == RiskLevel.MODERATE

    def test_weighted_average_counts_demand_and_monetization_more(self):
        metrics = _metrics(0.0, market_demand=7, monetization=7)
        assert calculate_weighted_average(metrics) == pytest.approx(21 / 7)

    def test_raising_lowest_metric_never_increases_severity(self):
        previous = None
        for step in range(0, 9):
            value = 3 + step * 0.5
            metrics = Metrics(
                market_demand=6, problem_severity=value, customer_clarity=7,
                differentiation=6, monetization=6, scalability=7,
            )
            severity = calculate_risk_level(metrics).severity
            if previous is not None:
                assert severity <= previous
            previous = severity

    def test_severity_ordering(self):
        levels = [RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.ELEVATED, RiskLevel.HIGH]
        assert [level.severity for level in levels] == [0, 1, 2, 3]


# ===================================================================== #
#  derive_risk_drivers                                                    #
# ===================================================================== #

class TestRiskDrivers:
    def test_scenario_a_drivers(self):
        labels = [d.label for d in derive_risk_drivers(Metrics(**SCENARIO_A))]
        assert labels == ["Competitive Saturation Risk"]
        assert "Revenue Model Uncertainty" not in labels

    def test_no_drivers_when_all_at_five(self):
        assert derive_risk_drivers(_metrics(5.0)) == []

    def test_full_emission_order_with_escalations(self):
        drivers = derive_risk_drivers(_metrics(3.5))
        assert [d.label for d in drivers] == [
            "Competitive Saturation Risk",
            "Limited Differentiation Risk",
            "Revenue Model Uncertainty",
            "Pricing Resistance Risk",
            "Demand Validation Risk",
            "Market Collapse Exposure",
            "Weak Problem-Market Fit",
            "ICP Misalignment Threat",
            "Target Audience Ambiguity",
            "Scalability Ceiling Risk",
            "Infrastructure Bottleneck Threat",
        ]

    def test_escalation_needs_value_below_four(self):
        labels = [d.label for d in derive_risk_drivers(_metrics(9.0, monetization=4))]
        assert labels == ["Revenue Model Uncertainty"]

    def test_problem_severity_has_no_escalation(self):
        drivers = derive_risk_drivers(_metrics(9.0, problem_severity=0))
        assert [(d.label, d.emphasized_term) for d in drivers] == [
            ("Weak Problem-Market Fit", "Problem-Market"),
        ]

    def test_emphasized_terms(self):
        drivers = derive_risk_drivers(_metrics(9.0, customer_clarity=3))
        assert [d.emphasized_term for d in drivers] == ["Misalignment", "Ambiguity"]


# ===================================================================== #
#  derive_critical_weaknesses                                             #
# ===================================================================== #

class TestCriticalWeaknesses:
    def test_none_above_three(self):
        assert derive_critical_weaknesses(_metrics(3.5)) == []

    def test_whole_number_rendered_without_decimal(self):
        weaknesses = derive_critical_weaknesses(_metrics(9.0, market_demand=3))
        assert len(weaknesses) == 1
        assert weaknesses[0].title == "Demand Collapse (3)"
        assert weaknesses[0].description.startswith("Insufficient market pull")

    def test_fractional_value_rendered(self):
        weaknesses = derive_critical_weaknesses(_metrics(9.0, monetization=2.5))
        assert weaknesses[0].title == "Monetization Failure (2.5)"

    def test_differentiation_reported_as_upper_bound(self):
        weaknesses = derive_critical_weaknesses(_metrics(9.0, differentiation=2.5))
        assert weaknesses[0].title == "Low Differentiation (<3)"

    def test_fixed_emission_order(self):
        titles = [w.title for w in derive_critical_weaknesses(_metrics(1.0))]
        assert titles == [
            "Demand Collapse (1)",
            "Problem Irrelevance (1)",
            "ICP Undefined (1)",
            "Low Differentiation (<1)",
            "Monetization Failure (1)",
            "Scalability Ceiling (1)",
        ]


# ===================================================================== #
#  derive_structural_constraints                                          #
# ===================================================================== #

class TestStructuralConstraints:
    def test_scenario_a_constraints(self):
        labels = [c.label for c in derive_structural_constraints(Metrics(**SCENARIO_A), Stage.PRE_VALIDATION)]
        assert labels == [
            "Competitive Density Constraint",
            "Validation Dependency Constraint",
            "Commoditization Trajectory",
        ]

    def test_idea_alias_counts_as_pre_validation(self):
        labels = [c.label for c in derive_structural_constraints(_metrics(9.0), "idea")]
        assert labels == ["Validation Dependency Constraint"]

    def test_growth_stage_has_no_validation_dependency(self):
        assert derive_structural_constraints(_metrics(9.0), Stage.GROWTH) == []

    def test_capital_dependency(self):
        metrics = _metrics(6.0, scalability=8, monetization=4)
        labels = [c.label for c in derive_structural_constraints(metrics, Stage.VALIDATION)]
        assert labels == ["Capital Dependency Constraint"]

    def test_go_to_market_and_engagement_depth(self):
        metrics = _metrics(6.0, customer_clarity=4, monetization=4, market_demand=7, problem_severity=4)
        labels = [c.label for c in derive_structural_constraints(metrics, Stage.VALIDATION)]
        assert labels == ["Go-to-Market Uncertainty", "Engagement Depth Constraint"]

    def test_unknown_stage_rejected(self):
        with pytest.raises(UnknownStageError):
            derive_structural_constraints(_metrics(9.0), "Seed")


# ===================================================================== #
#  analyze_risk                                                           #
# ===================================================================== #

class TestAnalyzeRisk:
    def test_aggregate(self):
        analysis = analyze_risk(Metrics(**SCENARIO_A), Stage.PRE_VALIDATION)
        assert analysis.overall_risk == RiskLevel.MODERATE
        assert len(analysis.primary_drivers) == 1
        assert analysis.critical_weaknesses == []
        assert len(analysis.structural_constraints) == 3

    def test_deterministic(self):
        metrics = _metrics(3.5, market_demand=8)
        first = analyze_risk(metrics, Stage.VALIDATION).model_dump()
        second = analyze_risk(metrics, Stage.VALIDATION).model_dump()
        assert first == second

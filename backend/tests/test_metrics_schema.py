"""Metric Model tests — validation, aliases, stage parsing, value formatting."""

import math
import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from pydantic import ValidationError

from startup_assessment.errors import AssessmentError, InvalidMetricsError, UnknownStageError
from startup_assessment.schemas.metrics_schema import (
    Metrics,
    Stage,
    format_metric_value,
    parse_stage,
    validate_metrics,
)


VALID = {
    "market_demand": 8.5,
    "problem_severity": 6,
    "customer_clarity": 6.5,
    "differentiation": 4.5,
    "monetization": 7,
    "scalability": 7.5,
}


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class TestMetrics:
    def test_valid_snake_case(self):
        metrics = validate_metrics(VALID)
        assert metrics.market_demand == 8.5
        assert metrics.scores() == (8.5, 6.0, 6.5, 4.5, 7.0, 7.5)

    def test_camel_case_accepted(self):
        metrics = validate_metrics({
            "marketDemand": 8.5,
            "problemSeverity": 6,
            "customerClarity": 6.5,
            "differentiation": 4.5,
            "monetization": 7,
            "scalability": 7.5,
        })
        assert metrics == validate_metrics(VALID)

    def test_dump_uses_snake_case(self):
        dumped = validate_metrics(VALID).model_dump()
        assert set(dumped) == set(VALID)

    def test_bounds_inclusive(self):
        validate_metrics({key: 0 for key in VALID})
        validate_metrics({key: 10 for key in VALID})

    @pytest.mark.parametrize("bad", [-0.1, 10.01, 11, float("nan"), float("inf"), "high"])
    def test_out_of_range_rejected_not_clamped(self, bad):
        with pytest.raises(InvalidMetricsError) as exc_info:
            validate_metrics({**VALID, "monetization": bad})
        assert any(p.startswith("monetization") for p in exc_info.value.problems)

    @pytest.mark.parametrize("coerced", [True, False, "6", "6.5"])
    def test_bool_and_numeric_string_rejected_not_coerced(self, coerced):
        with pytest.raises(InvalidMetricsError) as exc_info:
            validate_metrics({**VALID, "scalability": coerced})
        assert any(p.startswith("scalability") for p in exc_info.value.problems)

    def test_integers_accepted(self):
        metrics = validate_metrics({key: 7 for key in VALID})
        assert metrics.scores() == (7.0,) * 6

    def test_missing_field(self):
        data = dict(VALID)
        del data["scalability"]
        with pytest.raises(InvalidMetricsError) as exc_info:
            validate_metrics(data)
        assert len(exc_info.value.problems) == 1

    def test_unknown_field(self):
        with pytest.raises(InvalidMetricsError):
            validate_metrics({**VALID, "team_strength": 5})

    def test_non_mapping(self):
        with pytest.raises(InvalidMetricsError):
            validate_metrics([1, 2, 3, 4, 5, 6])

    def test_error_hierarchy(self):
        with pytest.raises(ValueError):
            validate_metrics({})
        assert issubclass(InvalidMetricsError, AssessmentError)

    def test_passthrough(self):
        metrics = Metrics(**VALID)
        assert validate_metrics(metrics) is metrics

    def test_frozen(self):
        metrics = Metrics(**VALID)
        with pytest.raises(ValidationError):
            metrics.monetization = 1

    def test_score_lookup(self):
        metrics = Metrics(**VALID)
        assert metrics.score("differentiation") == 4.5
        with pytest.raises(KeyError):
            metrics.score("team")
        assert metrics.as_dict() == {k: float(v) for k, v in VALID.items()}


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

class TestStage:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Pre-validation", Stage.PRE_VALIDATION),
            ("pre-validation", Stage.PRE_VALIDATION),
            ("idea", Stage.PRE_VALIDATION),
            ("Validation", Stage.VALIDATION),
            ("Early Traction", Stage.EARLY_TRACTION),
            ("mvp", Stage.EARLY_TRACTION),
            (" Growth ", Stage.GROWTH),
            ("scale", Stage.GROWTH),
            (Stage.GROWTH, Stage.GROWTH),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_stage(raw) == expected

    @pytest.mark.parametrize("raw", ["Seed", "", None, 3])
    def test_unknown(self, raw):
        with pytest.raises(UnknownStageError):
            parse_stage(raw)

    def test_unknown_stage_message(self):
        with pytest.raises(UnknownStageError, match="Seed"):
            parse_stage("Seed")


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatMetricValue:
    def test_whole_number(self):
        assert format_metric_value(3.0) == "3"
        assert format_metric_value(10) == "10"

    def test_fraction(self):
        assert format_metric_value(4.5) == "4.5"
        assert format_metric_value(66.7) == "66.7"

    def test_small_fractions_in_fixed_point(self):
        assert format_metric_value(5e-05) == "0.00005"
        assert format_metric_value(1.5e-05) == "0.000015"
        assert format_metric_value(1e-06) == "0.000001"

    def test_below_one_millionth_uses_exponent(self):
        assert format_metric_value(1e-07) == "1e-7"
        assert format_metric_value(2.5e-08) == "2.5e-8"

    def test_non_finite(self):
        assert format_metric_value(math.inf) == "inf"

"""Metric Model — the six-dimensional input vector and lifecycle stage.

Every assessment starts from a ``Metrics`` value and a ``Stage`` value.
Range checks happen here, before any computation: out-of-range values are
rejected, never clamped, so defects in whatever produced the scores stay
visible to the caller.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..constants import (
    METRIC_KEYS,
    METRIC_MAX,
    METRIC_MIN,
    STAGE_ALIASES,
    STAGE_EARLY_TRACTION,
    STAGE_GROWTH,
    STAGE_PRE_VALIDATION,
    STAGE_VALIDATION,
)
from ..errors import InvalidMetricsError, UnknownStageError


class Stage(str, Enum):
    """Declared lifecycle position of the idea."""

    PRE_VALIDATION = STAGE_PRE_VALIDATION
    VALIDATION = STAGE_VALIDATION
    EARLY_TRACTION = STAGE_EARLY_TRACTION
    GROWTH = STAGE_GROWTH


def parse_stage(value: Union[Stage, str]) -> Stage:
    """Resolve *value* to a ``Stage``.

    Accepts a ``Stage``, its exact value (``"Early Traction"``) or a
    case-insensitive alias (``"idea"``, ``"mvp"``, ``"scale"`` ...).

    Raises
    ------
    UnknownStageError
        If the value is not recognised. There is no fallback stage.
    """
    if isinstance(value, Stage):
        return value
    if not isinstance(value, str):
        raise UnknownStageError(value)
    try:
        return Stage(value)
    except ValueError:
        pass
    alias = STAGE_ALIASES.get(value.strip().lower())
    if alias is None:
        raise UnknownStageError(value)
    return Stage(alias)


def _score_field(description: str) -> Any:
    return Field(
        ...,
        ge=METRIC_MIN,
        le=METRIC_MAX,
        allow_inf_nan=False,
        strict=True,
        description=description,
    )


class Metrics(BaseModel):
    """Six qualitative scores, each on a 0-10 scale.

    Produced upstream (LLM scoring or a caller) and consumed unchanged by
    the Risk Analyzer, Readiness Evaluator and Roadmap Generator.
    camelCase keys (``marketDemand``) are accepted alongside snake_case.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=AliasGenerator(validation_alias=to_camel),
    )

    market_demand: float = _score_field("Strength of market pull for the idea")
    problem_severity: float = _score_field("How painful the problem is for the target user")
    customer_clarity: float = _score_field("Specificity of the ideal customer profile")
    differentiation: float = _score_field("Distinctness from existing alternatives")
    monetization: float = _score_field("Clarity and credibility of the revenue mechanism")
    scalability: float = _score_field("Ability to grow without proportional cost")

    def score(self, key: str) -> float:
        """Return the score for metric *key* (snake_case)."""
        if key not in METRIC_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def scores(self) -> Tuple[float, ...]:
        """All six scores in declaration order."""
        return tuple(getattr(self, key) for key in METRIC_KEYS)

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in METRIC_KEYS}


def validate_metrics(data: Union[Metrics, Mapping[str, Any]]) -> Metrics:
    """Build a ``Metrics`` value from a mapping, or pass one through.

    Raises
    ------
    InvalidMetricsError
        Missing field, unknown field, non-numeric, non-finite or
        out-of-range value. ``problems`` lists one entry per defect.
    """
    if isinstance(data, Metrics):
        return data
    if not isinstance(data, Mapping):
        raise InvalidMetricsError(
            f"Metrics must be a mapping, got {type(data).__name__}",
            [f"expected mapping, got {type(data).__name__}"],
        )
    try:
        return Metrics.model_validate(dict(data))
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise InvalidMetricsError(
            f"Invalid metrics ({len(problems)} problem(s)): " + "; ".join(problems),
            problems,
        ) from exc


def format_metric_value(value: float) -> str:
    """Render a score the way the dashboard prints numbers.

    Whole numbers lose the trailing ``.0`` (``3.0`` → ``"3"``); other values
    use the shortest round-tripping digits, in fixed-point from 1e-6 up to
    1e21 (``5e-05`` → ``"0.00005"``) and as ``1e-7`` style exponents outside it.
    """
    number = float(value)
    if not math.isfinite(number):
        return repr(number)
    magnitude = abs(number)
    if number.is_integer() and magnitude < 1e21:
        return str(int(number))
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(repr(number)), "f")
    mantissa, exponent = repr(number).split("e")
    return f"{mantissa}e{int(exponent):+d}"

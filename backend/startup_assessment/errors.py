"""Error taxonomy for the assessment engine.

All failures are local and synchronous; nothing here is retried.
"""

from __future__ import annotations

from typing import List, Optional


class AssessmentError(Exception):
    """Base class for every error raised by the assessment package."""


class InvalidMetricsError(AssessmentError, ValueError):
    """Metric payload is missing a field or holds a value outside [0, 10]."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems: List[str] = problems or []


class UnknownStageError(AssessmentError, ValueError):
    """Stage value is not one of the recognised lifecycle stages."""

    def __init__(self, value: object):
        super().__init__(f"Unknown stage {value!r}")
        self.value = value


class MetricScoringError(AssessmentError):
    """The external LLM could not produce a usable metric vector."""

"""OpenAI Structured Scoring for Idea Descriptions.

From the user's business description, obtain:
  - six qualitative metric scores on a 0-10 scale
  - the idea's current lifecycle phase

STRICT RULES:
  - OpenAI must ONLY output structured JSON
  - OpenAI must NOT produce risk, readiness or roadmap output; those are
    computed deterministically by the assessment engine
  - Retry once on failure (inside the client), then fail — no
    fallback scores, since made-up metrics would yield a made-up assessment
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from ..constants import METRIC_KEYS, METRIC_LABELS
from ..errors import InvalidMetricsError, MetricScoringError, UnknownStageError
from ..schemas.metrics_schema import Metrics, Stage, parse_stage, validate_metrics
from .openai_client import missing_keys, request_json_completion, require_api_key

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """You are a business analyst. You receive an entrepreneurial idea and must score it against fixed criteria.

You MUST respond with ONLY a valid JSON object. No markdown, no explanations, no comments.

RULES:
- Every score is a number from 0 to 10 (one decimal allowed)
- 0 means absent, 10 means exceptionally strong evidence
- Do NOT compute an overall score, risk level or plan
- If uncertain, score conservatively"""


def _build_user_prompt(*, title: str, description: str) -> str:
    criteria = "\n".join(f'  "{key}": <number 0-10: {METRIC_LABELS[key]}>,' for key in METRIC_KEYS)
    return f"""Score this business idea.

=== TITLE ===
{title}

=== BUSINESS DESCRIPTION ===
{description}

=== REQUIRED OUTPUT ===
Return ONLY this exact JSON structure. No other text.
{{
{criteria}
  "phase": "<idea | validation | mvp | growth | scale>"
}}"""


def parse_scoring_result(result: Dict[str, Any]) -> Tuple[Metrics, Stage]:
    """Turn the raw LLM JSON into validated ``Metrics`` and ``Stage``.

    Raises
    ------
    MetricScoringError
        Missing keys, out-of-range scores or an unknown phase label.
    """
    absent = missing_keys(result, list(METRIC_KEYS) + ["phase"])
    if absent:
        print(f"⚠️  [SCORING] Missing required keys: {absent}")
        raise MetricScoringError(f"LLM scoring response is missing required keys: {absent}")

    try:
        metrics = validate_metrics({key: result[key] for key in METRIC_KEYS})
    except InvalidMetricsError as exc:
        logger.warning("LLM returned invalid metrics: %s", exc.problems)
        raise MetricScoringError(f"LLM returned invalid metrics: {exc}") from exc

    try:
        stage = parse_stage(result["phase"])
    except UnknownStageError as exc:
        logger.warning("LLM returned unknown phase %r", result["phase"])
        raise MetricScoringError(f"LLM returned unknown phase {result['phase']!r}") from exc

    return metrics, stage


async def score_idea_description(*, title: str, description: str) -> Tuple[Metrics, Stage]:
    """Score a business description via OpenAI.

    Returns the validated metric vector and the lifecycle stage inferred
    from the LLM's phase label.

    Raises
    ------
    MetricScoringError
        No API key, no usable response, or a response that fails validation.
    """
    print(f"🧠 [SCORING] Scoring idea '{title}'")

    try:
        api_key = require_api_key()
    except EnvironmentError as exc:
        raise MetricScoringError("Metric scoring unavailable: OPENAI_API_KEY not set") from exc

    messages = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": _build_user_prompt(title=title, description=description)},
    ]

    result = await request_json_completion(messages, max_tokens=600, api_key=api_key)
    if result is None:
        raise MetricScoringError("Metric scoring failed: no usable response from OpenAI")

    metrics, stage = parse_scoring_result(result)

    print(f"✅ [SCORING] metrics={metrics.as_dict()}")
    print(f"✅ [SCORING] stage={stage.value}")

    return metrics, stage

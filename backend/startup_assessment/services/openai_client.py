"""Thin async client for OpenAI JSON-mode chat completions.

Only metric scoring talks to the LLM, and only through
``request_json_completion()``:
  - model, temperature, timeout and token cap come from ``OPENAI_*`` env vars
  - ``response_format`` is always ``json_object``
  - one retry on transport failure, non-200 status or undecodable content
  - the caller gets a decoded dict or ``None``, never a raw completion
"""

from __future__ import annotations

import json
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
_ATTEMPTS = 2

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


@dataclass(frozen=True)
class CompletionConfig:
    model: str
    temperature: float
    timeout: float
    max_tokens: int


def _float_from_env(name: str, fallback: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return fallback
    try:
        return float(raw)
    except ValueError:
        return fallback


def load_completion_config() -> CompletionConfig:
    """Read the ``OPENAI_*`` tuning variables. Low temperature keeps scores repeatable."""
    return CompletionConfig(
        model=(os.getenv("OPENAI_MODEL") or "gpt-4.1").strip(),
        temperature=_float_from_env("OPENAI_TEMPERATURE", 0.2),
        timeout=_float_from_env("OPENAI_REQUEST_TIMEOUT", 40.0),
        max_tokens=int(_float_from_env("OPENAI_MAX_COMPLETION_TOKENS", 1000)),
    )


def require_api_key() -> str:
    """Return ``OPENAI_API_KEY``. Raises EnvironmentError when it is unset or blank."""
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key:
        print("⚠️  [OPENAI] OPENAI_API_KEY is not configured")
        raise EnvironmentError("OPENAI_API_KEY environment variable not set")
    return api_key


def extract_json_object(raw: str) -> str:
    """Cut the outermost ``{...}`` out of model output.

    Tolerates a BOM, markdown fences, surrounding prose and trailing commas.
    Raises ValueError when there is no object to cut.
    """
    text = raw.lstrip("\ufeff").strip()
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        text = fenced.group(1)

    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise ValueError("model output contains no JSON object")
    return _TRAILING_COMMA.sub(r"\1", text[start:end + 1])


def missing_keys(parsed: Dict[str, Any], required: Sequence[str]) -> List[str]:
    return [key for key in required if key not in parsed]


def _decode_completion(body: Dict[str, Any]) -> Dict[str, Any]:
    usage = body.get("usage") or {}
    if usage:
        print(f"🧠 [OPENAI] usage total={usage.get('total_tokens', '?')}")

    content = (body["choices"][0]["message"]["content"] or "").strip()
    if not content:
        raise ValueError("empty completion content")
    decoded = json.loads(extract_json_object(content))
    if not isinstance(decoded, dict):
        raise ValueError("completion JSON is not an object")
    return decoded


async def request_json_completion(
    messages: List[Dict[str, str]],
    *,
    max_tokens: Optional[int] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """POST *messages* to chat completions and return the decoded JSON object.

    ``max_tokens``, ``api_key`` and ``model`` override the environment.
    Returns ``None`` once both attempts have failed.
    """
    config = load_completion_config()
    payload = {
        "model": model or config.model,
        "messages": messages,
        "max_tokens": max_tokens or config.max_tokens,
        "temperature": config.temperature,
        "response_format": {"type": "json_object"},
    }
    headers = {"Authorization": f"Bearer {api_key or require_api_key()}"}

    for attempt in range(1, _ATTEMPTS + 1):
        started = time.perf_counter()
        print(f"🧠 [OPENAI] {payload['model']} attempt {attempt}/{_ATTEMPTS}")
        try:
            async with httpx.AsyncClient(timeout=config.timeout) as client:
                response = await client.post(_COMPLETIONS_URL, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            print(f"❌ [OPENAI] {type(exc).__name__} after {time.perf_counter() - started:.1f}s")
            continue

        if response.status_code != 200:
            print(f"⚠️  [OPENAI] HTTP {response.status_code}: {response.text[:200]}")
            continue

        try:
            return _decode_completion(response.json())
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            print(f"❌ [OPENAI] Undecodable completion: {exc}")

    return None

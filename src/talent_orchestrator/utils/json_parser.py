"""Utility to extract a JSON object from agent responses."""

from __future__ import annotations

import json
import re

from talent_orchestrator.errors import UnparseableOutputError

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def extract_json(text: str, *, agent: str = "agent", job_id: str | None = None) -> dict:
    """Extract a JSON object from model text, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. The body of the first fenced code block
    3. First '{' to last '}' of the text

    Anything that is not a JSON object raises UnparseableOutputError.
    """
    text = (text or "").strip()

    for candidate in (text, _fenced_body(text), _brace_span(text)):
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise UnparseableOutputError(
        f"{agent} returned no JSON object: {text[:200]!r}",
        agent=agent,
        job_id=job_id,
    )


def _fenced_body(text: str) -> str | None:
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # Opening fence with no closing fence (output cut off after the object)
    if text.startswith("```"):
        return text.split("\n", 1)[1].strip() if "\n" in text else None
    return None


def _brace_span(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return None

"""Extract a JSON intent from free-form model output.

Models asked for JSON often wrap it in a fenced code block or surround it
with prose. The first JSON object found is returned as-is; it is still
untrusted and must go through IntentValidator.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", flags=re.DOTALL | re.IGNORECASE)

_decoder = json.JSONDecoder()


def _first_object(text: str) -> dict[str, Any] | None:
    """Return the first decodable JSON object embedded in text."""
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def extract_intent(output: str | None) -> dict[str, Any] | None:
    """Pull the intent object out of a model's text output.

    Args:
        output: Raw text returned by the model

    Returns:
        The first JSON object found, or None if there is none
    """
    if not output:
        return None

    for block in _FENCE_RE.findall(output):
        found = _first_object(block)
        if found is not None:
            return found

    return _first_object(output)

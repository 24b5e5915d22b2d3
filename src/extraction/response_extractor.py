# src/extraction/response_extractor.py — v1
"""Recover a JSON object from free-text model output.

Models are told to answer with bare JSON but regularly wrap it in prose or
a fenced code block. Lookup order:
  1. first "{" to last "}" span
  2. interior of a ``` / ```json fenced block
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from nutriguard.core.errors import ErrorCode, ExtractionError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_EXCERPT_CHARS = 500


def extract_json(raw_text: str) -> dict[str, Any]:
    """Parse the structured payload embedded in ``raw_text``.

    Raises:
        ExtractionError: NO_JSON if no candidate is found, INVALID_JSON if the
            candidate does not parse, INVALID_STRUCTURE if it is not an object.
    """
    text = (raw_text or "").strip()
    candidate = _find_candidate(text)
    if candidate is None:
        raise ExtractionError(
            ErrorCode.NO_JSON,
            "No valid JSON found in model response",
            details={"excerpt": text[:_EXCERPT_CHARS]},
        )

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.debug("Unparseable JSON candidate: %s", candidate[:_EXCERPT_CHARS])
        raise ExtractionError(
            ErrorCode.INVALID_JSON,
            f"Failed to parse JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            details={"parser_error": str(exc), "excerpt": candidate[:_EXCERPT_CHARS]},
        ) from exc

    if not isinstance(parsed, dict):
        raise ExtractionError(
            ErrorCode.INVALID_STRUCTURE,
            f"Expected a JSON object, got {type(parsed).__name__}",
            details={"excerpt": candidate[:_EXCERPT_CHARS]},
        )
    return parsed


def _find_candidate(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]

    match = _FENCE_RE.search(text)
    if match and match.group(1):
        return match.group(1)
    return None

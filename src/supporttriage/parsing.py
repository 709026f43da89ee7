"""Summary: Reply parsing and verdict normalization.

Importance: Turns whatever text a model returns into a valid ClassificationResult.
Alternatives: Reject malformed replies and fall back to the heuristic classifier.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from supporttriage.models import (
    CANONICAL_CATEGORIES,
    DEFAULT_PRIORITY,
    MAX_PRIORITY,
    MIN_PRIORITY,
    SENTIMENT_ANGRY,
    SENTIMENT_NEUTRAL,
    UNKNOWN_CATEGORY,
    ClassificationResult,
)

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def extract_json_text(content: str) -> str:
    """Summary: Pull the JSON payload out of a model reply.

    Importance: Models often wrap JSON in a fenced code block despite instructions.
    Alternatives: Scan for balanced braces anywhere in the reply.
    """

    match = _FENCED_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return content


def parse_reply(content: str) -> dict[str, Any]:
    """Summary: Parse a model reply into a dictionary.

    Importance: Never raises; unusable replies become an empty object for normalization.
    Alternatives: Raise on malformed JSON and let callers decide.
    """

    try:
        parsed = json.loads(extract_json_text(content), parse_constant=_reject_constant)
    except ValueError as exc:
        logger.warning("Failed to parse model JSON, using defaults: %s", exc)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Model JSON was %s, not an object; using defaults.", type(parsed).__name__)
        return {}
    return parsed


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {token}")


def normalize_result(parsed: dict[str, Any], strict_categories: bool = False) -> ClassificationResult:
    """Summary: Coerce a loosely-typed parsed object into a valid verdict.

    Importance: Guarantees every field is present and in range; applying it twice changes nothing.
    Alternatives: Validate with a strict schema and discard partial replies.
    """

    category = _normalize_category(parsed.get("category"), strict_categories)
    sentiment = SENTIMENT_ANGRY if parsed.get("sentiment") == SENTIMENT_ANGRY else SENTIMENT_NEUTRAL
    priority_score = normalize_priority(parsed.get("priority_score"))
    reasoning = parsed.get("reasoning")
    if isinstance(reasoning, str) and reasoning.strip():
        reasoning = reasoning.strip()
    else:
        reasoning = f"Category: {category}, Sentiment: {sentiment}, Priority: {priority_score}."
    return ClassificationResult(
        category=category,
        sentiment=sentiment,
        priority_score=priority_score,
        reasoning=reasoning,
    )


def normalize_priority(value: Any) -> int:
    """Summary: Coerce a priority value to an integer in range.

    Importance: Non-integers and out-of-range values collapse to the default priority.
    Alternatives: Clamp out-of-range values to the nearest bound.
    """

    number = _to_number(value)
    if number is None or not number.is_integer():
        return DEFAULT_PRIORITY
    score = int(number)
    if score < MIN_PRIORITY or score > MAX_PRIORITY:
        return DEFAULT_PRIORITY
    return score


def _normalize_category(value: Any, strict: bool) -> str:
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_CATEGORY
    category = value.strip()
    if not strict:
        return category
    # strict mode maps case variants onto canonical labels
    canonical = {name.lower(): name for name in CANONICAL_CATEGORIES}
    return canonical.get(category.lower(), UNKNOWN_CATEGORY)


def _to_number(value: Any) -> float | None:
    # booleans coerce like numbers: true is 1, false is 0
    if isinstance(value, bool):
        return float(value)
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number

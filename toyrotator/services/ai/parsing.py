"""Parsing of model output into tagged results."""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from toyrotator.models.toy import SkillTag, ToyCategory

T = TypeVar("T")

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

UNKNOWN_TOY = {
    "name": "Unknown Toy",
    "category": ToyCategory.OTHER.value,
    "skillTags": [],
    "confidence": 0.0,
}


@dataclass
class Parsed(Generic[T]):
    """Model output that passed validation."""
    value: T
    fallback = False


@dataclass
class Fallback(Generic[T]):
    """Substitute value used when the model output was unusable."""
    value: T
    reason: str
    fallback = True


AiResult = Union[Parsed[T], Fallback[T]]


def extract_json(raw: Optional[str]) -> Dict[str, Any]:
    """
    Pull a JSON object out of a model reply.

    Accepts a bare object, an object wrapped in ``` fences or an object
    surrounded by prose.

    Args:
        raw: Raw message content

    Returns:
        Decoded object

    Raises:
        ValueError: If no JSON object can be decoded
    """
    if not raw or not raw.strip():
        raise ValueError("empty response")

    candidates = [raw.strip()]
    fence = _FENCE_RE.search(raw)
    if fence:
        candidates.append(fence.group(1).strip())
    match = _OBJECT_RE.search(raw)
    if match:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise ValueError("no JSON object in response")


def parse_rotation_suggestion(
    raw: Optional[str],
    candidate_ids: List[str],
    display_count: int,
    fallback: Dict[str, Any],
) -> AiResult:
    """
    Validate a rotation suggestion.

    Unknown and duplicate ids are dropped and the list is capped at
    ``display_count``. An empty selection is treated as a failure.

    Args:
        raw: Raw message content
        candidate_ids: Toys the model was allowed to choose from
        display_count: Maximum number of toys
        fallback: Value returned when the reply is unusable

    Returns:
        Parsed suggestion or Fallback
    """
    try:
        data = extract_json(raw)
    except ValueError as e:
        return Fallback(fallback, str(e))

    allowed = set(candidate_ids)
    raw_ids = data.get("toyIds")
    if not isinstance(raw_ids, list):
        return Fallback(fallback, "toyIds missing")

    toy_ids = list(dict.fromkeys(i for i in raw_ids if isinstance(i, str) and i in allowed))
    toy_ids = toy_ids[:display_count]
    if not toy_ids:
        return Fallback(fallback, "no usable toyIds")

    return Parsed({
        "toyIds": toy_ids,
        "insightSummary": str(data.get("insightSummary") or ""),
        "reasoning": str(data.get("reasoning") or ""),
    })


def _clamp_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(max(confidence, 0.0), 1.0)


def _age_range(value: Any) -> Optional[Dict[str, int]]:
    if not isinstance(value, dict):
        return None
    try:
        low = max(int(value.get("minMonths")), 0)
        high = max(int(value.get("maxMonths")), 0)
    except (TypeError, ValueError):
        return None
    if high < low:
        low, high = high, low
    return {"minMonths": low, "maxMonths": high}


def parse_toy_recognition(raw: Optional[str]) -> AiResult:
    """
    Validate a toy recognition reply.

    Unknown categories become ``Other``, unknown skill tags are dropped and
    confidence is clamped to 0..1.

    Args:
        raw: Raw message content

    Returns:
        Parsed recognition or Fallback with ``UNKNOWN_TOY``
    """
    try:
        data = extract_json(raw)
    except ValueError as e:
        return Fallback(dict(UNKNOWN_TOY), str(e))

    name = str(data.get("name") or "").strip()
    if not name:
        return Fallback(dict(UNKNOWN_TOY), "name missing")

    categories = {c.value for c in ToyCategory}
    category = data.get("category")
    if category not in categories:
        category = ToyCategory.OTHER.value

    tags = {t.value for t in SkillTag}
    raw_tags = data.get("skillTags") if isinstance(data.get("skillTags"), list) else []
    skill_tags = list(dict.fromkeys(t for t in raw_tags if t in tags))

    result = {
        "name": name,
        "category": category,
        "skillTags": skill_tags,
        "confidence": _clamp_confidence(data.get("confidence")),
    }
    age_range = _age_range(data.get("ageRange"))
    if age_range:
        result["ageRange"] = age_range
    return Parsed(result)


def parse_space_analysis(raw: Optional[str], fallback: Dict[str, Any]) -> AiResult:
    """
    Validate a space analysis reply.

    Args:
        raw: Raw message content
        fallback: Value returned when the reply is unusable

    Returns:
        Parsed analysis or Fallback
    """
    try:
        data = extract_json(raw)
    except ValueError as e:
        return Fallback(fallback, str(e))

    observations = data.get("observations")
    if not isinstance(observations, list):
        return Fallback(fallback, "observations missing")
    observations = [str(o).strip() for o in observations if str(o).strip()]
    insights = str(data.get("insights") or "").strip()
    if not observations and not insights:
        return Fallback(fallback, "empty analysis")

    result: Dict[str, Any] = {"observations": observations, "insights": insights}
    capacity = data.get("displayCapacitySuggestion")
    if isinstance(capacity, (int, float)) and not isinstance(capacity, bool) and capacity > 0:
        result["displayCapacitySuggestion"] = int(round(capacity))
    return Parsed(result)

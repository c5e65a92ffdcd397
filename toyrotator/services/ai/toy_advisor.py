"""AI advice pipeline: rotation suggestions, toy recognition and space analysis."""

import base64
import binascii
import random
import re
from datetime import date
from typing import Any, Dict, List, Optional

from toyrotator.models.child import ChildProfile
from toyrotator.models.feedback import Feedback
from toyrotator.models.toy import Toy
from toyrotator.services.ai.openai_service import OpenAIService
from toyrotator.services.ai.parsing import (
    UNKNOWN_TOY,
    AiResult,
    Fallback,
    parse_rotation_suggestion,
    parse_space_analysis,
    parse_toy_recognition,
)
from toyrotator.services.ai.prompts import (
    RECOGNITION_SYSTEM_PROMPT,
    ROTATION_SYSTEM_PROMPT,
    SPACE_SYSTEM_PROMPT,
    build_recognition_prompt,
    build_rotation_prompt,
    build_space_prompt,
)
from toyrotator.utils.exceptions import InvalidArgumentError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)

_DATA_URL_RE = re.compile(r"^data:([^;,]*);base64,", re.IGNORECASE)

DEFAULT_IMAGE_MIME = "image/jpeg"

FALLBACK_ROTATION_INSIGHT = (
    "Here is a fresh mix of toys from your collection. "
    "Log how your child plays with them to get more personal suggestions."
)

FALLBACK_SPACE_INSIGHT = (
    "Sorry, we couldn't analyze this photo right now. "
    "Here are some general tips for setting up a rotation space."
)

BASIC_SPACE_OBSERVATIONS = [
    "Keep displayed toys on low, open shelves the child can reach on their own.",
    "Leave space between toys so each one is visible and easy to put back.",
    "Store resting toys out of sight in closed bins or another room.",
    "Group toys by type so the shelf stays simple to tidy.",
    "Check the area for small parts and secure heavy furniture to the wall.",
]

BASIC_SPACE_INSIGHT = (
    "A calm, uncluttered play space helps children focus. "
    "Start with a small number of toys and adjust based on how your child plays."
)


def decode_image(image_base64: str, max_bytes: int) -> str:
    """
    Validate a base64 image payload.

    Args:
        image_base64: Base64 string, optionally a ``data:image/*;base64,`` URL
        max_bytes: Largest accepted decoded size

    Returns:
        ``data:`` URL with the client's MIME type, JPEG when none was given

    Raises:
        InvalidArgumentError: If the payload is not an image in base64 or too large
    """
    payload = image_base64.strip()
    mime_type = DEFAULT_IMAGE_MIME
    prefix = _DATA_URL_RE.match(payload)
    if prefix:
        mime_type = prefix.group(1).strip().lower() or DEFAULT_IMAGE_MIME
        payload = payload[prefix.end():]
        if not mime_type.startswith("image/"):
            raise InvalidArgumentError("imageBase64 must be an image", {"mimeType": mime_type})
    payload = "".join(payload.split())
    if not payload:
        raise InvalidArgumentError("imageBase64 is empty")
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidArgumentError("imageBase64 is not valid base64")
    if len(decoded) > max_bytes:
        raise InvalidArgumentError(
            "Image is too large",
            {"maxBytes": max_bytes, "sizeBytes": len(decoded)},
        )
    return f"data:{mime_type};base64,{payload}"


def basic_space_analysis(display_count: int) -> Dict[str, Any]:
    """Static rule-based analysis used for the free tier and as fallback content."""
    return {
        "observations": list(BASIC_SPACE_OBSERVATIONS),
        "insights": BASIC_SPACE_INSIGHT,
        "displayCapacitySuggestion": display_count,
    }


class ToyAdvisor:
    """Runs the AI features and turns every model failure into a fallback."""

    def __init__(
        self,
        chat: OpenAIService,
        rng: Optional[random.Random] = None,
        default_display_count: int = 10,
    ):
        """
        Initialize the advisor.

        Args:
            chat: Chat completion service (anything with ``complete``)
            rng: Random source for fallback rotations
            default_display_count: Capacity suggested by the rule-based analysis
        """
        self.chat = chat
        self.rng = rng or random.Random()
        self.default_display_count = default_display_count

    def _ask(self, system_prompt: str, user_prompt: str, image_url: Optional[str] = None) -> Optional[str]:
        try:
            return self.chat.complete(system_prompt, user_prompt, image_url=image_url)
        except Exception as e:
            logger.warning("AI request failed, using fallback: %s", str(e))
            return None

    def fallback_rotation(self, toys: List[Toy], display_count: int) -> Dict[str, Any]:
        """Random sample of ``display_count`` candidates with a canned insight."""
        picked = self.rng.sample(toys, min(display_count, len(toys)))
        return {
            "toyIds": [toy.id for toy in picked],
            "insightSummary": FALLBACK_ROTATION_INSIGHT,
            "reasoning": "Random selection from available toys.",
        }

    def suggest_rotation(
        self,
        child: ChildProfile,
        toys: List[Toy],
        feedback: List[Feedback],
        today: date,
    ) -> AiResult:
        """
        Suggest the toys for the child's next rotation.

        Args:
            child: Child the rotation is for
            toys: Candidate toys (non-empty)
            feedback: Recent feedback for the child, newest first
            today: Current UTC date, used for the child's age

        Returns:
            Parsed suggestion or Fallback
        """
        display_count = child.rotation_settings.display_count
        age_months = child.age_in_months(today)
        prompt = build_rotation_prompt(child, age_months, toys, feedback, display_count)

        raw = self._ask(ROTATION_SYSTEM_PROMPT, prompt)
        fallback = self.fallback_rotation(toys, display_count)
        if raw is None:
            return Fallback(fallback, "request failed")

        result = parse_rotation_suggestion(raw, [toy.id for toy in toys], display_count, fallback)
        if result.fallback:
            logger.warning("Unusable rotation suggestion: %s", result.reason)
        return result

    def recognize_toy(self, image_url: str) -> AiResult:
        """
        Identify a toy from a photo.

        Args:
            image_url: Validated image from ``decode_image``

        Returns:
            Parsed recognition or Fallback
        """
        raw = self._ask(RECOGNITION_SYSTEM_PROMPT, build_recognition_prompt(), image_url)
        if raw is None:
            return Fallback(dict(UNKNOWN_TOY), "request failed")

        result = parse_toy_recognition(raw)
        if result.fallback:
            logger.warning("Unusable toy recognition: %s", result.reason)
        return result

    def analyze_space(self, image_url: str) -> AiResult:
        """
        Analyze a play-space photo.

        Args:
            image_url: Validated image from ``decode_image``

        Returns:
            Parsed analysis or Fallback with the rule-based observations
        """
        basic = basic_space_analysis(self.default_display_count)
        fallback = {**basic, "insights": FALLBACK_SPACE_INSIGHT}

        raw = self._ask(SPACE_SYSTEM_PROMPT, build_space_prompt(), image_url)
        if raw is None:
            return Fallback(fallback, "request failed")

        result = parse_space_analysis(raw, fallback)
        if result.fallback:
            logger.warning("Unusable space analysis: %s", result.reason)
        return result

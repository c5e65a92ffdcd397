"""
Feedback Model
Caregiver-logged engagement of a child with a toy during a rotation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from toyrotator.models.base import FirestoreModel


class EngagementLevel(str, Enum):
    """How the child reacted to the toy."""
    LIKED = "liked"
    NEUTRAL = "neutral"
    IGNORED = "ignored"


class Feedback(FirestoreModel):
    """Feedback document. Append-only."""

    id: Optional[str] = None
    toy_id: str
    rotation_id: str
    child_id: str
    engagement: EngagementLevel
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

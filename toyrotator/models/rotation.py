"""
Rotation Model
A time-boxed set of toys made available to one child.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from toyrotator.models.base import FirestoreModel


class RotationSource(str, Enum):
    MANUAL = "manual"
    AI = "ai"


class Rotation(FirestoreModel):
    """Rotation document (``households/{householdId}/rotations``)."""

    id: Optional[str] = None
    child_id: str
    start_date: str
    end_date: str
    toy_ids: List[str] = Field(default_factory=list)
    source: RotationSource = RotationSource.MANUAL
    insight_summary: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

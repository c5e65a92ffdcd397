"""
Child Model
Child profiles live under ``households/{householdId}/children``.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from toyrotator.models.base import FirestoreModel

ROTATION_DURATIONS = (1, 2, 3, 4, 7, 14, 30)
DEFAULT_DISPLAY_COUNT = 10
DEFAULT_DURATION_DAYS = 7


class RotationSettings(FirestoreModel):
    """How many toys a child sees at once and for how long."""

    display_count: int = DEFAULT_DISPLAY_COUNT
    duration_days: int = DEFAULT_DURATION_DAYS
    reminder_time: Optional[str] = None


class ChildProfile(FirestoreModel):
    """Child profile document."""

    id: Optional[str] = None
    name: str
    date_of_birth: str
    interests: List[str] = Field(default_factory=list)
    rotation_settings: RotationSettings = Field(default_factory=RotationSettings)
    active_rotation_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def age_in_months(self, today: date) -> Optional[int]:
        """Whole months since birth, or None when the stored date is unreadable."""
        try:
            born = date.fromisoformat(self.date_of_birth[:10])
        except ValueError:
            return None
        months = (today.year - born.year) * 12 + (today.month - born.month)
        if today.day < born.day:
            months -= 1
        return max(months, 0)

"""
Child Profile Request Schemas
"""

import re
from datetime import date
from typing import List, Optional

from pydantic import Field, field_validator

from toyrotator.models.child import ROTATION_DURATIONS
from toyrotator.schemas.base import CallableRequest

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class RotationSettingsInput(CallableRequest):
    """Partial rotation settings; omitted fields keep their current value."""

    display_count: Optional[int] = Field(default=None, ge=1, le=50)
    duration_days: Optional[int] = None
    reminder_time: Optional[str] = None

    @field_validator("duration_days")
    @classmethod
    def validate_duration(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in ROTATION_DURATIONS:
            raise ValueError(f"durationDays must be one of {list(ROTATION_DURATIONS)}")
        return v

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _TIME_RE.match(v):
            raise ValueError("reminderTime must be HH:MM")
        return v


class CreateChildProfileRequest(CallableRequest):
    name: str = Field(min_length=1, max_length=100)
    date_of_birth: date
    interests: List[str] = Field(default_factory=list)
    rotation_settings: Optional[RotationSettingsInput] = None

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("dateOfBirth cannot be in the future")
        return v


class UpdateChildProfileRequest(CallableRequest):
    child_id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    interests: Optional[List[str]] = None
    rotation_settings: Optional[RotationSettingsInput] = None


class ChildIdRequest(CallableRequest):
    child_id: str = Field(min_length=1)

"""
Rotation and Feedback Request Schemas
"""

from datetime import date
from typing import List, Optional

from pydantic import Field

from toyrotator.models.feedback import EngagementLevel
from toyrotator.models.rotation import RotationSource
from toyrotator.schemas.base import CallableRequest


class CreateRotationRequest(CallableRequest):
    child_id: str = Field(min_length=1)
    toy_ids: List[str] = Field(min_length=1)
    start_date: Optional[date] = None
    duration_days: Optional[int] = Field(default=None, ge=1, le=365)
    source: RotationSource = RotationSource.MANUAL
    insight_summary: str = Field(default="", max_length=2000)


class GetRotationsRequest(CallableRequest):
    child_id: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)


class LogFeedbackRequest(CallableRequest):
    toy_id: str = Field(min_length=1)
    rotation_id: str = Field(min_length=1)
    child_id: str = Field(min_length=1)
    engagement: EngagementLevel
    notes: Optional[str] = Field(default=None, max_length=1000)


class GetFeedbackRequest(CallableRequest):
    rotation_id: Optional[str] = None
    toy_id: Optional[str] = None
    child_id: Optional[str] = None
    limit: int = Field(default=50, ge=1, le=200)

"""
Toy Request Schemas
"""

from typing import List, Optional

from pydantic import Field

from toyrotator.models.toy import AgeRange, SkillTag, ToyCategory, ToySource, ToyStatus
from toyrotator.schemas.base import CallableRequest


class CreateToyRequest(CallableRequest):
    name: str = Field(min_length=1, max_length=120)
    category: ToyCategory
    skill_tags: List[SkillTag] = Field(default_factory=list)
    age_range: Optional[AgeRange] = None
    source: ToySource = ToySource.MANUAL
    status: ToyStatus = ToyStatus.RESTING
    image_url: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    child_id: Optional[str] = None


class UpdateToyRequest(CallableRequest):
    toy_id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    category: Optional[ToyCategory] = None
    skill_tags: Optional[List[SkillTag]] = None
    age_range: Optional[AgeRange] = None
    status: Optional[ToyStatus] = None
    image_url: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    child_id: Optional[str] = None


class ToyIdRequest(CallableRequest):
    toy_id: str = Field(min_length=1)


class GetToysRequest(CallableRequest):
    status: Optional[ToyStatus] = None

"""
Toy Model
Toys live under ``households/{householdId}/toys``. The enum values are
shared with the mobile client and must not change.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from toyrotator.models.base import FirestoreModel


class ToyCategory(str, Enum):
    """Built-in toy categories."""
    BUILDING = "Building & Construction"
    PRETEND_PLAY = "Pretend Play & Imagination"
    ARTS_CRAFTS = "Arts & Crafts"
    PUZZLES = "Puzzles & Problem Solving"
    VEHICLES = "Vehicles & Transport"
    DOLLS_FIGURES = "Dolls & Figures"
    MUSICAL = "Musical & Sound"
    OUTDOOR = "Outdoor & Active Play"
    BOOKS = "Books & Learning"
    SENSORY = "Sensory & Comfort"
    OTHER = "Other"


class SkillTag(str, Enum):
    """Built-in developmental skill tags."""
    FINE_MOTOR = "Fine Motor"
    GROSS_MOTOR = "Gross Motor"
    LANGUAGE = "Language & Communication"
    PROBLEM_SOLVING = "Problem Solving"
    CREATIVITY = "Creativity & Imagination"
    SOCIAL_EMOTIONAL = "Social & Emotional"
    SENSORY_EXPLORATION = "Sensory Exploration"
    CAUSE_EFFECT = "Cause & Effect"
    SPATIAL = "Spatial Awareness"
    MUSIC_RHYTHM = "Music & Rhythm"
    LITERACY = "Literacy & Reading"
    NUMERACY = "Numeracy & Math"
    SCIENCE = "Science & Discovery"
    SELF_CARE = "Self-Care & Independence"


class ToyStatus(str, Enum):
    ACTIVE = "active"
    RESTING = "resting"
    RETIRED = "retired"


class ToySource(str, Enum):
    MANUAL = "manual"
    AI = "ai"


class AgeRange(FirestoreModel):
    """Suitable age range in months."""

    min_months: int = Field(ge=0)
    max_months: int = Field(ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "AgeRange":
        if self.max_months < self.min_months:
            raise ValueError("maxMonths must be greater than or equal to minMonths")
        return self


class Toy(FirestoreModel):
    """Toy document."""

    id: Optional[str] = None
    name: str
    category: ToyCategory
    skill_tags: List[SkillTag] = Field(default_factory=list)
    status: ToyStatus = ToyStatus.RESTING
    source: ToySource = ToySource.MANUAL
    age_range: Optional[AgeRange] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
    child_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

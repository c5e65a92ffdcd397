"""
ToyRotator Models
Firestore document representations and data models.
"""

from toyrotator.models.base import FirestoreModel
from toyrotator.models.child import ChildProfile, RotationSettings, ROTATION_DURATIONS
from toyrotator.models.feedback import EngagementLevel, Feedback
from toyrotator.models.household import (
    Caregiver,
    CaregiverRole,
    Household,
    Invitation,
    InviteStatus,
)
from toyrotator.models.rotation import Rotation, RotationSource
from toyrotator.models.subscription import (
    AiFeature,
    AiUsageCounters,
    SubscriptionStatus,
    SubscriptionTier,
)
from toyrotator.models.toy import AgeRange, SkillTag, Toy, ToyCategory, ToySource, ToyStatus
from toyrotator.models.user import DeletionStatus, PushPlatform, PushToken, UserProfile

__all__ = [
    "FirestoreModel",
    "ChildProfile",
    "RotationSettings",
    "ROTATION_DURATIONS",
    "EngagementLevel",
    "Feedback",
    "Caregiver",
    "CaregiverRole",
    "Household",
    "Invitation",
    "InviteStatus",
    "Rotation",
    "RotationSource",
    "AiFeature",
    "AiUsageCounters",
    "SubscriptionStatus",
    "SubscriptionTier",
    "AgeRange",
    "SkillTag",
    "Toy",
    "ToyCategory",
    "ToySource",
    "ToyStatus",
    "DeletionStatus",
    "PushPlatform",
    "PushToken",
    "UserProfile",
]

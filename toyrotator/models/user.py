"""
User Model
Represents user profile data stored in Firestore.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from toyrotator.models.base import FirestoreModel
from toyrotator.models.subscription import SubscriptionStatus


class DeletionStatus(str, Enum):
    """Account deletion lifecycle."""
    ACTIVE = "active"
    SCHEDULED_FOR_DELETION = "scheduled_for_deletion"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PushPlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class PushToken(FirestoreModel):
    """Device push token registered by the client."""

    token: str
    platform: PushPlatform
    updated_at: Optional[datetime] = None


class UserProfile(FirestoreModel):
    """User profile document (``users/{uid}``)."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    status: Optional[AccountStatus] = None
    onboarding_completed: Optional[bool] = None
    subscription_status: Optional[SubscriptionStatus] = None
    household_id: Optional[str] = None
    push_token: Optional[PushToken] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deletion_status: Optional[DeletionStatus] = None
    deletion_scheduled_at: Optional[datetime] = None
    deletion_execution_date: Optional[str] = None

    @property
    def subscription(self) -> SubscriptionStatus:
        return self.subscription_status or SubscriptionStatus()

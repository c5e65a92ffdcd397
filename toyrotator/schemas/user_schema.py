"""
User Request Schemas
Payloads for profile, account deletion, push token and dev auth functions.
"""

from datetime import date
from typing import Any, Optional

from pydantic import Field, field_serializer, field_validator

from toyrotator.models.subscription import SubscriptionTier
from toyrotator.models.user import AccountStatus, PushPlatform
from toyrotator.schemas.base import CallableRequest


def _validate_email(v: str) -> str:
    if not v or "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v.lower()


def _reject_null(v: Any) -> Any:
    if v is None:
        raise ValueError("must not be null")
    return v


class SubscriptionUpdate(CallableRequest):
    """Tier mirrored by the client after an in-app purchase check.

    Usage counters are written by the server only. Trial dates accept an
    ISO date or an ISO timestamp and are stored as ``YYYY-MM-DD``.
    """

    tier: Optional[SubscriptionTier] = None
    trial_start_date: Optional[date] = None
    trial_end_date: Optional[date] = None
    active: Optional[bool] = None
    revenuecat_customer_id: Optional[str] = None

    @field_validator("tier", "active", mode="before")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        return _reject_null(v)

    @field_validator("trial_start_date", "trial_end_date", mode="before")
    @classmethod
    def date_part(cls, v: Any) -> Any:
        # Purchase providers send full timestamps
        if isinstance(v, str) and len(v) > 10 and v[10] in "T ":
            return v[:10]
        return v

    @field_serializer("trial_start_date", "trial_end_date")
    def iso_date(self, v: Optional[date]) -> Optional[str]:
        return v.isoformat() if v else None


class UpdateProfileRequest(CallableRequest):
    """Partial profile update."""

    display_name: Optional[str] = Field(default=None, max_length=100)
    status: Optional[AccountStatus] = None
    onboarding_completed: Optional[bool] = None
    subscription_status: Optional[SubscriptionUpdate] = None

    @field_validator("status", "onboarding_completed", "subscription_status", mode="before")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        return _reject_null(v)


class RegisterPushTokenRequest(CallableRequest):
    token: str = Field(min_length=1, description="Expo/FCM/APNs push token")
    platform: PushPlatform


class DevTokenRequest(CallableRequest):
    """Local dev mode sign-in."""

    email: str
    display_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

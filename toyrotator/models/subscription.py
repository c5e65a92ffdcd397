"""
Subscription Models
Defines subscription tiers and the AI usage counters mirrored on the user.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from toyrotator.models.base import FirestoreModel


class SubscriptionTier(str, Enum):
    """Subscription tier enumeration."""
    FREE = "free"
    TRIAL = "trial"
    PAID = "paid"


class AiFeature(str, Enum):
    """AI features gated by tier and usage counters."""
    ROTATION_SUGGESTION = "rotation_suggestion"
    TOY_RECOGNITION = "toy_recognition"
    SPACE_ANALYSIS = "space_analysis"


class UsageWindow(str, Enum):
    """Counter reset window."""
    DAILY = "daily"
    MONTHLY = "monthly"


# feature -> (count field, window marker field, window)
AI_FEATURE_COUNTERS = {
    AiFeature.ROTATION_SUGGESTION: (
        "rotationSuggestionsToday", "lastRotationSuggestionDate", UsageWindow.DAILY,
    ),
    AiFeature.TOY_RECOGNITION: (
        "toyRecognitionsThisMonth", "lastToyRecognitionMonth", UsageWindow.MONTHLY,
    ),
    AiFeature.SPACE_ANALYSIS: (
        "spaceAnalysesThisMonth", "lastSpaceAnalysisMonth", UsageWindow.MONTHLY,
    ),
}


def window_key(window: UsageWindow, today: date) -> str:
    """Marker stored next to a counter: YYYY-MM-DD for daily, YYYY-MM for monthly."""
    if window == UsageWindow.DAILY:
        return today.isoformat()
    return today.strftime("%Y-%m")


class AiUsageCounters(FirestoreModel):
    """Per-user AI usage counters."""

    rotation_suggestions_today: int = 0
    last_rotation_suggestion_date: Optional[str] = None
    toy_recognitions_this_month: int = 0
    last_toy_recognition_month: Optional[str] = None
    space_analyses_this_month: int = 0
    last_space_analysis_month: Optional[str] = None


class SubscriptionStatus(FirestoreModel):
    """Subscription state mirrored from the in-app purchase provider."""

    tier: SubscriptionTier = SubscriptionTier.FREE
    trial_start_date: Optional[str] = None
    trial_end_date: Optional[str] = None
    active: bool = True
    revenuecat_customer_id: Optional[str] = None
    ai_usage_counters: AiUsageCounters = Field(default_factory=AiUsageCounters)

    def effective_tier(self, today: date) -> SubscriptionTier:
        """Tier that actually applies today; lapsed trials and inactive plans count as free."""
        tier = SubscriptionTier(self.tier)
        if not self.active:
            return SubscriptionTier.FREE
        if tier == SubscriptionTier.TRIAL and self.trial_end_date:
            if date.fromisoformat(self.trial_end_date[:10]) < today:
                return SubscriptionTier.FREE
        return tier

"""
AI Usage Quota Service
Tier gating plus atomic check-and-increment of the per-user AI counters.
"""

from datetime import date
from typing import Any, Dict, Optional

from toyrotator.config import Settings, get_settings
from toyrotator.crud.base import run_transaction, utcnow
from toyrotator.models.subscription import (
    AI_FEATURE_COUNTERS,
    AiFeature,
    SubscriptionStatus,
    SubscriptionTier,
    UsageWindow,
    window_key,
)
from toyrotator.utils.exceptions import PermissionDeniedError, ResourceExhaustedError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)

_FEATURE_LABELS = {
    AiFeature.ROTATION_SUGGESTION: "AI rotation suggestions",
    AiFeature.TOY_RECOGNITION: "Toy recognition",
    AiFeature.SPACE_ANALYSIS: "AI space analysis",
}

_WINDOW_LABELS = {UsageWindow.DAILY: "for today", UsageWindow.MONTHLY: "for this month"}


class QuotaService:
    """Enforces per-tier AI usage limits on ``users/{uid}``."""

    def __init__(self, db: Any, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def limits(self, tier: SubscriptionTier) -> Dict[AiFeature, int]:
        """
        Usage limits per feature for a tier.

        Args:
            tier: Effective subscription tier

        Returns:
            Limit per feature; 0 means the feature is unavailable
        """
        s = self.settings
        if tier == SubscriptionTier.PAID:
            return {
                AiFeature.ROTATION_SUGGESTION: s.ai_rotation_daily_limit_paid,
                AiFeature.TOY_RECOGNITION: s.ai_recognition_monthly_limit_paid,
                AiFeature.SPACE_ANALYSIS: s.ai_space_monthly_limit_paid,
            }
        if tier == SubscriptionTier.TRIAL:
            return {
                AiFeature.ROTATION_SUGGESTION: s.ai_rotation_daily_limit_trial,
                AiFeature.TOY_RECOGNITION: s.ai_recognition_monthly_limit_trial,
                AiFeature.SPACE_ANALYSIS: s.ai_space_monthly_limit_trial,
            }
        return {feature: 0 for feature in AiFeature}

    def effective_tier(self, uid: str, today: Optional[date] = None) -> SubscriptionTier:
        """Tier applying to the user today; missing profiles are free."""
        snapshot = self.db.collection("users").document(uid).get()
        data = snapshot.to_dict() if snapshot.exists else {}
        return self._tier_of(data, today or utcnow().date())

    @staticmethod
    def _tier_of(user_data: Dict[str, Any], today: date) -> SubscriptionTier:
        subscription = SubscriptionStatus.model_validate(user_data.get("subscriptionStatus") or {})
        return subscription.effective_tier(today)

    def _check_access(self, tier: SubscriptionTier, feature: AiFeature) -> int:
        limit = self.limits(tier)[feature]
        if limit <= 0:
            raise PermissionDeniedError(
                f"{_FEATURE_LABELS[feature]} require a trial or paid subscription",
                {"tier": tier.value, "feature": feature.value},
            )
        return limit

    def require_access(self, uid: str, feature: AiFeature, today: Optional[date] = None) -> SubscriptionTier:
        """
        Reject callers whose tier has no access to a feature.

        Runs before any other validation of an AI request and writes nothing.

        Raises:
            PermissionDeniedError: If the effective tier has no allowance
        """
        tier = self.effective_tier(uid, today)
        self._check_access(tier, feature)
        return tier

    def consume(self, uid: str, feature: AiFeature, today: Optional[date] = None) -> int:
        """
        Check the limit and count one use of an AI feature.

        The read, check and increment happen in one transaction. A counter
        whose window marker is not the current day/month starts from zero.

        Args:
            uid: User ID
            feature: AI feature being used
            today: Override for the current UTC date

        Returns:
            Remaining uses in the current window

        Raises:
            PermissionDeniedError: If the tier has no access (nothing is written)
            ResourceExhaustedError: If the limit for the window is reached
        """
        today = today or utcnow().date()
        count_field, marker_field, window = AI_FEATURE_COUNTERS[feature]
        marker = window_key(window, today)
        user_ref = self.db.collection("users").document(uid)
        label = _FEATURE_LABELS[feature]

        def _consume(transaction):
            snapshot = user_ref.get(transaction=transaction)
            data = snapshot.to_dict() if snapshot.exists else {}
            limit = self._check_access(self._tier_of(data, today), feature)

            counters = (data.get("subscriptionStatus") or {}).get("aiUsageCounters") or {}
            used = counters.get(count_field, 0) if counters.get(marker_field) == marker else 0
            if used >= limit:
                raise ResourceExhaustedError(
                    f"{label} limit reached {_WINDOW_LABELS[window]}",
                    {"feature": feature.value, "limit": limit, "used": used},
                )

            prefix = "subscriptionStatus.aiUsageCounters"
            transaction.update(user_ref, {
                f"{prefix}.{count_field}": used + 1,
                f"{prefix}.{marker_field}": marker,
                "updatedAt": utcnow(),
            })
            return limit - used - 1

        remaining = run_transaction(self.db, _consume)
        logger.info(
            "AI usage recorded",
            extra={"extra_data": {"uid": uid, "feature": feature.value, "remaining": remaining}},
        )
        return remaining

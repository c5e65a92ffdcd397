"""QuotaService: tier gating and windowed counters."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from toyrotator.config import Settings
from toyrotator.models.subscription import AiFeature, SubscriptionStatus, SubscriptionTier
from toyrotator.services.local_store import LocalStore
from toyrotator.services.quota import QuotaService
from toyrotator.utils.exceptions import PermissionDeniedError, ResourceExhaustedError

TODAY = date(2025, 6, 15)


@pytest.fixture
def db():
    return LocalStore()


@pytest.fixture
def quota(db):
    return QuotaService(db, Settings())


def _user(db, uid="u1", **subscription):
    db.collection("users").document(uid).set({"uid": uid, "subscriptionStatus": subscription})
    return db.collection("users").document(uid)


def _counters(ref):
    return ref.get().to_dict()["subscriptionStatus"]["aiUsageCounters"]


def test_free_tier_is_denied_without_writes(db, quota):
    ref = _user(db, tier="free")
    before = ref.get().to_dict()

    with pytest.raises(PermissionDeniedError):
        quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)

    assert ref.get().to_dict() == before


def test_missing_profile_counts_as_free(db, quota):
    with pytest.raises(PermissionDeniedError):
        quota.consume("ghost", AiFeature.TOY_RECOGNITION, TODAY)
    assert not db.collection("users").document("ghost").get().exists


def test_daily_rotation_limit(db, quota):
    ref = _user(db, tier="paid")

    assert quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY) == 0
    with pytest.raises(ResourceExhaustedError):
        quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)

    assert _counters(ref)["rotationSuggestionsToday"] == 1
    assert _counters(ref)["lastRotationSuggestionDate"] == "2025-06-15"


def test_daily_counter_resets_next_day(db, quota):
    ref = _user(db, tier="trial", trialEndDate="2025-07-01")
    quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)

    quota.consume("u1", AiFeature.ROTATION_SUGGESTION, date(2025, 6, 16))

    assert _counters(ref)["rotationSuggestionsToday"] == 1
    assert _counters(ref)["lastRotationSuggestionDate"] == "2025-06-16"


def test_monthly_recognition_limit_for_trial(db, quota):
    ref = _user(db, tier="trial", trialEndDate="2025-07-01")

    for _ in range(10):
        quota.consume("u1", AiFeature.TOY_RECOGNITION, TODAY)
    with pytest.raises(ResourceExhaustedError) as exc:
        quota.consume("u1", AiFeature.TOY_RECOGNITION, date(2025, 6, 30))

    assert exc.value.details["limit"] == 10
    assert _counters(ref)["toyRecognitionsThisMonth"] == 10
    assert _counters(ref)["lastToyRecognitionMonth"] == "2025-06"


def test_monthly_counter_resets_in_new_month(db, quota):
    ref = _user(db, tier="paid", aiUsageCounters={
        "spaceAnalysesThisMonth": 20, "lastSpaceAnalysisMonth": "2025-05",
    })

    remaining = quota.consume("u1", AiFeature.SPACE_ANALYSIS, TODAY)

    assert remaining == 19
    assert _counters(ref)["spaceAnalysesThisMonth"] == 1


def test_counters_are_independent(db, quota):
    ref = _user(db, tier="paid")

    quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)
    quota.consume("u1", AiFeature.TOY_RECOGNITION, TODAY)

    counters = _counters(ref)
    assert counters["rotationSuggestionsToday"] == 1
    assert counters["toyRecognitionsThisMonth"] == 1
    assert "spaceAnalysesThisMonth" not in counters


def test_lapsed_trial_is_free(db, quota):
    _user(db, tier="trial", trialEndDate="2025-06-14")

    assert quota.effective_tier("u1", TODAY) == SubscriptionTier.FREE
    with pytest.raises(PermissionDeniedError):
        quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)


def test_inactive_subscription_is_free():
    status = SubscriptionStatus(tier="paid", active=False)

    assert status.effective_tier(TODAY) == SubscriptionTier.FREE


def test_limits_follow_settings(db, monkeypatch):
    monkeypatch.setenv("AI_RECOGNITION_MONTHLY_LIMIT_PAID", "2")
    quota = QuotaService(db, Settings())

    assert quota.limits(SubscriptionTier.PAID)[AiFeature.TOY_RECOGNITION] == 2
    assert quota.limits(SubscriptionTier.FREE)[AiFeature.TOY_RECOGNITION] == 0


def test_require_access_checks_tier_without_writes(db, quota):
    ref = _user(db, tier="free")
    before = ref.get().to_dict()

    with pytest.raises(PermissionDeniedError):
        quota.require_access("u1", AiFeature.ROTATION_SUGGESTION, TODAY)

    assert ref.get().to_dict() == before
    _user(db, "u2", tier="paid")
    assert quota.require_access("u2", AiFeature.ROTATION_SUGGESTION, TODAY) == SubscriptionTier.PAID


def test_concurrent_consumers_cannot_exceed_limit(db):
    settings = Settings()
    settings.ai_rotation_daily_limit_paid = 1
    quota = QuotaService(db, settings)
    ref = _user(db, tier="paid")
    barrier = threading.Barrier(8)

    def _attempt(_):
        barrier.wait()
        try:
            quota.consume("u1", AiFeature.ROTATION_SUGGESTION, TODAY)
            return "ok"
        except ResourceExhaustedError:
            return "exhausted"

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(_attempt, range(8)))

    assert results.count("ok") == 1
    assert results.count("exhausted") == 7
    assert _counters(ref)["rotationSuggestionsToday"] == 1

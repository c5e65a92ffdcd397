"""AI callables: gating, quotas, parsing and fallbacks end to end."""

import base64
import json

import pytest

from conftest import Caller, error_code
from toyrotator.config import get_settings
from toyrotator.services.ai.toy_advisor import BASIC_SPACE_OBSERVATIONS, FALLBACK_SPACE_INSIGHT

IMAGE = base64.b64encode(b"\x89PNG\r\n\x1a\nnot-really-a-png").decode()


def _household(caller, display_count=3, toy_count=5):
    child = caller.ok("addChildProfile", {
        "name": "Mia",
        "dateOfBirth": "2023-04-10",
        "interests": ["music"],
        "rotationSettings": {"displayCount": display_count},
    })
    toy_ids = [
        caller.ok("addToy", {"name": f"Toy {i}", "category": "Other"})["id"]
        for i in range(toy_count)
    ]
    return child["id"], toy_ids


def _user_doc(store, uid):
    snapshot = store.collection("users").document(uid).get()
    return snapshot.to_dict() if snapshot.exists else None


# ── Rotation suggestions ─────────────────────────────────────────────

def test_free_tier_suggestion_is_denied_without_writes(parent, store, chat):
    parent.ok("updateUserProfile", {})
    child_id, _ = _household(parent)
    before = _user_doc(store, parent.uid)

    response = parent.call("getAiRotationSuggestion", {"childId": child_id})

    assert response.status_code == 403
    assert error_code(response) == "permission-denied"
    assert _user_doc(store, parent.uid) == before
    assert chat.calls == []


def test_second_suggestion_same_day_is_exhausted(parent, chat):
    parent.set_tier("trial")
    child_id, toy_ids = _household(parent)
    chat.replies = [json.dumps({"toyIds": toy_ids[:3], "insightSummary": "Nice", "reasoning": "r"})]

    first = parent.ok("getAiRotationSuggestion", {"childId": child_id})
    second = parent.call("getAiRotationSuggestion", {"childId": child_id})

    assert first["fallback"] is False
    assert first["toyIds"] == toy_ids[:3]
    assert second.status_code == 429
    assert error_code(second) == "resource-exhausted"
    assert len(chat.calls) == 1


def test_suggestion_is_filtered_to_candidates_and_capped(parent, chat):
    parent.set_tier("paid")
    child_id, toy_ids = _household(parent, display_count=2)
    chat.replies = [json.dumps({
        "toyIds": ["ghost", toy_ids[4], toy_ids[0], toy_ids[1]],
        "insightSummary": "Focus on music",
        "reasoning": "Liked drums",
    })]

    data = parent.ok("getAiRotationSuggestion", {"childId": child_id})

    assert data == {
        "toyIds": [toy_ids[4], toy_ids[0]],
        "insightSummary": "Focus on music",
        "reasoning": "Liked drums",
        "fallback": False,
    }
    prompt = chat.calls[0]["user"]
    assert "Mia" in prompt and "music" in prompt


def test_suggestion_uses_given_candidates_and_skips_retired_toys(parent, chat):
    parent.set_tier("paid")
    child_id, toy_ids = _household(parent)
    parent.ok("deleteToy", {"toyId": toy_ids[1]})
    chat.replies = [RuntimeError("upstream down")]

    data = parent.ok("getAiRotationSuggestion", {"childId": child_id, "toyIds": toy_ids[:2]})

    assert data["fallback"] is True
    assert data["toyIds"] == [toy_ids[0]]


def test_suggestion_falls_back_on_api_error(parent, chat, store):
    parent.set_tier("paid")
    child_id, toy_ids = _household(parent, display_count=3, toy_count=5)
    chat.replies = [RuntimeError("timeout")]

    data = parent.ok("getAiRotationSuggestion", {"childId": child_id})

    assert data["fallback"] is True
    assert len(data["toyIds"]) == 3
    assert set(data["toyIds"]) <= set(toy_ids)
    assert data["insightSummary"]
    counters = _user_doc(store, parent.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["rotationSuggestionsToday"] == 1


def test_suggestion_falls_back_on_unparsable_output(parent, chat):
    parent.set_tier("paid")
    child_id, toy_ids = _household(parent, display_count=10, toy_count=2)
    chat.replies = ["I think the blocks are great!"]

    data = parent.ok("getAiRotationSuggestion", {"childId": child_id})

    assert data["fallback"] is True
    assert sorted(data["toyIds"]) == sorted(toy_ids)


def test_suggestion_for_unknown_child_consumes_nothing(parent, store):
    parent.set_tier("paid")
    _household(parent)

    response = parent.call("getAiRotationSuggestion", {"childId": "missing"})

    assert response.status_code == 404
    counters = _user_doc(store, parent.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["rotationSuggestionsToday"] == 0


def test_suggestion_without_candidates_is_invalid(parent):
    parent.set_tier("paid")
    child_id, _ = _household(parent, toy_count=0)

    response = parent.call("getAiRotationSuggestion", {"childId": child_id})

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"


def test_missing_api_key_is_internal_before_quota(no_ai_client, store):
    caller = Caller(no_ai_client, "parent@example.com")
    caller.set_tier("paid")
    child_id, _ = _household(caller)

    response = caller.call("getAiRotationSuggestion", {"childId": child_id})
    recognition = caller.call("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert response.status_code == 500
    assert error_code(response) == "internal"
    assert recognition.status_code == 500
    counters = _user_doc(store, caller.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["rotationSuggestionsToday"] == 0
    assert counters["toyRecognitionsThisMonth"] == 0


def test_free_tier_is_denied_before_request_checks(parent, chat, store):
    parent.ok("updateUserProfile", {})
    child_id, _ = _household(parent, toy_count=0)
    before = _user_doc(store, parent.uid)

    responses = [
        parent.call("getAiRotationSuggestion", {"childId": "missing"}),
        parent.call("getAiRotationSuggestion", {"childId": child_id}),
        parent.call("recognizeToyFromPhoto", {"imageBase64": "***not base64***"}),
    ]

    assert [r.status_code for r in responses] == [403, 403, 403]
    assert {error_code(r) for r in responses} == {"permission-denied"}
    assert _user_doc(store, parent.uid) == before
    assert chat.calls == []


def test_free_tier_without_api_key_is_permission_denied(no_ai_client):
    caller = Caller(no_ai_client, "parent@example.com")
    caller.ok("updateUserProfile", {})
    child_id, _ = _household(caller)

    suggestion = caller.call("getAiRotationSuggestion", {"childId": child_id})
    recognition = caller.call("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert error_code(suggestion) == "permission-denied"
    assert error_code(recognition) == "permission-denied"


# ── Toy recognition ──────────────────────────────────────────────────

def test_recognize_toy(parent, chat, store):
    parent.set_tier("trial")
    chat.replies = [json.dumps({
        "name": "Xylophone",
        "category": "Musical & Sound",
        "skillTags": ["Music & Rhythm", "Dancing"],
        "confidence": 0.92,
    })]

    data = parent.ok("recognizeToyFromPhoto", {"imageBase64": f"data:image/png;base64,{IMAGE}"})

    assert data == {
        "name": "Xylophone",
        "category": "Musical & Sound",
        "skillTags": ["Music & Rhythm"],
        "confidence": 0.92,
        "fallback": False,
    }
    assert chat.calls[0]["image"] == f"data:image/png;base64,{IMAGE}"
    counters = _user_doc(store, parent.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["toyRecognitionsThisMonth"] == 1


def test_recognize_toy_fallback(parent, chat):
    parent.set_tier("paid")
    chat.replies = ["{not json"]

    data = parent.ok("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert data == {
        "name": "Unknown Toy",
        "category": "Other",
        "skillTags": [],
        "confidence": 0.0,
        "fallback": True,
    }


def test_recognize_toy_free_tier_is_denied(parent, chat):
    response = parent.call("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert response.status_code == 403
    assert chat.calls == []


def test_invalid_base64_is_invalid_argument(parent, chat):
    parent.set_tier("paid")

    response = parent.call("recognizeToyFromPhoto", {"imageBase64": "***not base64***"})

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"
    assert chat.calls == []


def test_oversized_image_is_invalid_argument(parent, chat, monkeypatch):
    parent.set_tier("paid")
    monkeypatch.setattr(get_settings(), "max_image_bytes", 8)

    response = parent.call("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert response.status_code == 400
    assert response.json()["error"]["details"]["maxBytes"] == 8


def test_image_without_prefix_is_sent_as_jpeg(parent, chat):
    parent.set_tier("paid")
    chat.replies = [json.dumps({"name": "Ball", "category": "Other", "confidence": 0.5})]

    parent.ok("recognizeToyFromPhoto", {"imageBase64": IMAGE})

    assert chat.calls[0]["image"] == f"data:image/jpeg;base64,{IMAGE}"


def test_non_image_data_url_is_invalid_argument(parent, chat, store):
    parent.set_tier("paid")

    response = parent.call("recognizeToyFromPhoto", {"imageBase64": f"data:text/plain;base64,{IMAGE}"})

    assert response.status_code == 400
    assert response.json()["error"]["details"]["mimeType"] == "text/plain"
    assert chat.calls == []
    counters = _user_doc(store, parent.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["toyRecognitionsThisMonth"] == 0


# ── Space analysis ───────────────────────────────────────────────────

def test_free_space_analysis_is_rule_based(parent, chat, store):
    parent.ok("updateUserProfile", {})

    data = parent.ok("analyzeSpace", {"imageBase64": IMAGE})

    assert data["observations"] == BASIC_SPACE_OBSERVATIONS
    assert data["fallback"] is False
    assert chat.calls == []
    counters = _user_doc(store, parent.uid)["subscriptionStatus"]["aiUsageCounters"]
    assert counters["spaceAnalysesThisMonth"] == 0


def test_paid_space_analysis(parent, chat):
    parent.set_tier("paid")
    chat.replies = [json.dumps({
        "observations": ["Bright corner", "Toy bin overflowing"],
        "insights": "Move half the toys into storage.",
        "displayCapacitySuggestion": 8,
    })]

    data = parent.ok("analyzeSpace", {"imageBase64": IMAGE})

    assert data == {
        "observations": ["Bright corner", "Toy bin overflowing"],
        "insights": "Move half the toys into storage.",
        "displayCapacitySuggestion": 8,
        "fallback": False,
    }


def test_space_analysis_fallback_apologizes(parent, chat):
    parent.set_tier("paid")
    chat.replies = [RuntimeError("rate limited")]

    data = parent.ok("analyzeSpace", {"imageBase64": IMAGE})

    assert data["fallback"] is True
    assert data["insights"] == FALLBACK_SPACE_INSIGHT
    assert data["observations"] == BASIC_SPACE_OBSERVATIONS


@pytest.mark.parametrize("tier", ["trial", "paid"])
def test_space_analysis_monthly_limit(parent, chat, tier, monkeypatch):
    monkeypatch.setattr(get_settings(), f"ai_space_monthly_limit_{tier}", 1)
    parent.set_tier(tier)
    chat.replies = [json.dumps({"observations": ["ok"], "insights": "fine"})] * 2

    parent.ok("analyzeSpace", {"imageBase64": IMAGE})
    response = parent.call("analyzeSpace", {"imageBase64": IMAGE})

    assert response.status_code == 429

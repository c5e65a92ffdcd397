"""Feedback callables."""

from conftest import error_code


def _rotation(caller):
    child = caller.ok("addChildProfile", {"name": "Mia", "dateOfBirth": "2023-04-10"})
    toys = [caller.ok("addToy", {"name": n, "category": "Other"})["id"] for n in ("Ball", "Drum")]
    rotation = caller.ok("createRotation", {"childId": child["id"], "toyIds": toys})
    return child["id"], rotation["id"], toys


def test_log_and_filter_feedback_newest_first(parent):
    child_id, rotation_id, (ball, drum) = _rotation(parent)

    first = parent.ok("logFeedback", {
        "toyId": ball, "rotationId": rotation_id, "childId": child_id, "engagement": "liked",
    })
    second = parent.ok("logFeedback", {
        "toyId": drum, "rotationId": rotation_id, "childId": child_id,
        "engagement": "ignored", "notes": "Too loud",
    })

    assert first["engagement"] == "liked"
    assert "createdAt" in first

    everything = parent.ok("getFeedback", {"rotationId": rotation_id})
    assert [f["id"] for f in everything] == [second["id"], first["id"]]

    for_ball = parent.ok("getFeedback", {"toyId": ball})
    assert [f["id"] for f in for_ball] == [first["id"]]


def test_unknown_engagement_is_invalid(parent):
    child_id, rotation_id, (ball, _) = _rotation(parent)

    response = parent.call("logFeedback", {
        "toyId": ball, "rotationId": rotation_id, "childId": child_id, "engagement": "loved",
    })

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"


def test_get_feedback_without_filters(parent):
    child_id, rotation_id, (ball, _) = _rotation(parent)
    parent.ok("logFeedback", {
        "toyId": ball, "rotationId": rotation_id, "childId": child_id, "engagement": "neutral",
    })

    assert len(parent.ok("getFeedback")) == 1

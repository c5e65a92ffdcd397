"""Rotation callables and the single-active-rotation transaction."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

from conftest import error_code
from toyrotator.crud.rotation import RotationCRUD


def _setup(caller, toy_count=4, **child_fields):
    body = {"name": "Mia", "dateOfBirth": "2023-04-10"}
    body.update(child_fields)
    child = caller.ok("addChildProfile", body)
    toys = [
        caller.ok("addToy", {"name": f"Toy {i}", "category": "Other"})
        for i in range(toy_count)
    ]
    return child, [t["id"] for t in toys]


def _statuses(caller):
    return {t["id"]: t["status"] for t in caller.ok("getToys")}


def test_end_date_defaults_to_seven_days(parent):
    child, toy_ids = _setup(parent)

    rotation = parent.ok("createRotation", {
        "childId": child["id"], "toyIds": toy_ids[:2], "startDate": "2025-03-01",
    })

    assert rotation["startDate"] == "2025-03-01"
    assert rotation["endDate"] == "2025-03-08"
    assert rotation["isActive"] is True
    assert rotation["source"] == "manual"


def test_start_date_defaults_to_today(parent):
    child, toy_ids = _setup(parent)

    rotation = parent.ok("createRotation", {"childId": child["id"], "toyIds": toy_ids[:1]})

    start = date.fromisoformat(rotation["startDate"])
    assert abs((start - date.today()).days) <= 1
    assert date.fromisoformat(rotation["endDate"]) == start + timedelta(days=7)


def test_duration_comes_from_request_then_child_settings(parent):
    child, toy_ids = _setup(parent, rotationSettings={"durationDays": 14})

    from_child = parent.ok("createRotation", {
        "childId": child["id"], "toyIds": toy_ids[:1], "startDate": "2025-03-01",
    })
    from_request = parent.ok("createRotation", {
        "childId": child["id"], "toyIds": toy_ids[:1], "startDate": "2025-03-01", "durationDays": 3,
    })

    assert from_child["endDate"] == "2025-03-15"
    assert from_request["endDate"] == "2025-03-04"


def test_new_rotation_activates_selected_and_rests_previous_toys(parent):
    child, (a, b, c, d) = _setup(parent)

    parent.ok("createRotation", {"childId": child["id"], "toyIds": [a, b]})
    parent.ok("createRotation", {"childId": child["id"], "toyIds": [b, c]})

    assert _statuses(parent) == {a: "resting", b: "active", c: "active", d: "resting"}


def test_sequential_rotations_leave_one_active(parent, store):
    child, toy_ids = _setup(parent)

    parent.ok("createRotation", {"childId": child["id"], "toyIds": toy_ids[:2]})
    second = parent.ok("createRotation", {"childId": child["id"], "toyIds": toy_ids[2:]})

    rotations = parent.ok("getRotations", {"childId": child["id"]})
    assert len(rotations) == 2
    assert [r["id"] for r in rotations if r["isActive"]] == [second["id"]]

    current = parent.ok("getCurrentRotation", {"childId": child["id"]})
    assert current["id"] == second["id"]

    child_doc = store.collection(f"households/{parent.uid}/children").document(child["id"]).get()
    assert child_doc.to_dict()["activeRotationId"] == second["id"]


def test_concurrent_rotations_leave_one_active(parent, store):
    child, toy_ids = _setup(parent, toy_count=6)
    rotations = RotationCRUD(store, parent.uid)
    barrier = threading.Barrier(6)

    def _create(toy_id):
        barrier.wait()
        return rotations.create_rotation(child["id"], [toy_id])

    with ThreadPoolExecutor(max_workers=6) as pool:
        created = list(pool.map(_create, toy_ids))

    assert len({r.id for r in created}) == 6
    active = [r for r in parent.ok("getRotations", {"childId": child["id"]}) if r["isActive"]]
    assert len(active) == 1
    child_doc = store.collection(f"households/{parent.uid}/children").document(child["id"]).get()
    assert child_doc.to_dict()["activeRotationId"] == active[0]["id"]
    statuses = _statuses(parent)
    assert [t for t, s in statuses.items() if s == "active"] == active[0]["toyIds"]


def test_rotations_of_other_children_stay_active(parent):
    child, toy_ids = _setup(parent)
    sibling = parent.ok("addChildProfile", {"name": "Leo", "dateOfBirth": "2021-01-01"})

    parent.ok("createRotation", {"childId": child["id"], "toyIds": toy_ids[:2]})
    parent.ok("createRotation", {"childId": sibling["id"], "toyIds": toy_ids[2:]})

    assert parent.ok("getCurrentRotation", {"childId": child["id"]}) is not None
    assert parent.ok("getCurrentRotation", {"childId": sibling["id"]}) is not None


def test_duplicate_toy_ids_are_dropped_in_order(parent):
    child, (a, b, _, _) = _setup(parent)

    rotation = parent.ok("createRotation", {"childId": child["id"], "toyIds": [b, a, b]})

    assert rotation["toyIds"] == [b, a]


def test_unknown_child_is_not_found(parent):
    _, toy_ids = _setup(parent)

    response = parent.call("createRotation", {"childId": "missing", "toyIds": toy_ids})

    assert response.status_code == 404
    assert error_code(response) == "not-found"


def test_unknown_toy_is_invalid_and_writes_nothing(parent):
    child, toy_ids = _setup(parent)

    response = parent.call("createRotation", {"childId": child["id"], "toyIds": [toy_ids[0], "ghost"]})

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"
    assert response.json()["error"]["details"]["toyIds"] == ["ghost"]
    assert set(_statuses(parent).values()) == {"resting"}
    assert parent.ok("getRotations") == []


def test_empty_toy_ids_is_invalid(parent):
    child, _ = _setup(parent)

    response = parent.call("createRotation", {"childId": child["id"], "toyIds": []})

    assert response.status_code == 400


def test_get_current_rotation_is_null_without_rotation(parent):
    child, _ = _setup(parent)

    assert parent.ok("getCurrentRotation", {"childId": child["id"]}) is None


def test_get_rotations_newest_first_with_limit(parent):
    child, toy_ids = _setup(parent)
    created = [
        parent.ok("createRotation", {"childId": child["id"], "toyIds": [toy_id]})["id"]
        for toy_id in toy_ids
    ]

    rotations = parent.ok("getRotations", {"limit": 2})

    assert [r["id"] for r in rotations] == created[::-1][:2]


def test_ai_source_and_insight_are_stored(parent):
    child, toy_ids = _setup(parent)

    rotation = parent.ok("createRotation", {
        "childId": child["id"],
        "toyIds": toy_ids[:2],
        "source": "ai",
        "insightSummary": "Balanced mix of building and music.",
    })

    assert rotation["source"] == "ai"
    assert rotation["insightSummary"] == "Balanced mix of building and music."

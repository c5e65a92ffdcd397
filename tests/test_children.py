"""Child profile callables."""

from datetime import date, timedelta

from conftest import error_code


def _add_child(caller, **overrides):
    body = {"name": "Mia", "dateOfBirth": "2023-04-10", "interests": ["animals"]}
    body.update(overrides)
    return caller.ok("addChildProfile", body)


def test_add_child_applies_default_rotation_settings(parent):
    child = _add_child(parent)

    assert child["id"]
    assert child["name"] == "Mia"
    assert child["dateOfBirth"] == "2023-04-10"
    assert child["rotationSettings"] == {"displayCount": 10, "durationDays": 7}


def test_get_child_profiles_in_creation_order(parent):
    _add_child(parent, name="Mia")
    _add_child(parent, name="Leo")

    children = parent.ok("getChildProfiles")

    assert [c["name"] for c in children] == ["Mia", "Leo"]


def test_children_are_scoped_to_the_household(parent, make_caller):
    _add_child(parent)
    stranger = make_caller("stranger@example.com")

    assert stranger.ok("getChildProfiles") == []


def test_add_child_requires_name_and_birth_date(parent):
    response = parent.call("addChildProfile", {"name": "Mia"})

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"


def test_add_child_rejects_future_birth_date(parent):
    tomorrow = (date.today() + timedelta(days=2)).isoformat()

    response = parent.call("addChildProfile", {"name": "Mia", "dateOfBirth": tomorrow})

    assert response.status_code == 400


def test_add_child_rejects_unsupported_duration(parent):
    response = parent.call("addChildProfile", {
        "name": "Mia",
        "dateOfBirth": "2023-04-10",
        "rotationSettings": {"durationDays": 5},
    })

    assert response.status_code == 400


def test_update_merges_rotation_settings(parent):
    child = _add_child(parent, rotationSettings={"displayCount": 6, "durationDays": 14})

    updated = parent.ok("updateChildProfile", {
        "childId": child["id"],
        "rotationSettings": {"reminderTime": "18:30"},
    })

    assert updated["rotationSettings"] == {
        "displayCount": 6,
        "durationDays": 14,
        "reminderTime": "18:30",
    }
    assert updated["name"] == "Mia"


def test_update_without_child_id_is_invalid(parent):
    response = parent.call("updateChildProfile", {"name": "Leo"})

    assert response.status_code == 400
    assert error_code(response) == "invalid-argument"


def test_update_unknown_child_is_not_found(parent):
    response = parent.call("updateChildProfile", {"childId": "missing", "name": "Leo"})

    assert response.status_code == 404
    assert error_code(response) == "not-found"


def test_delete_child(parent):
    child = _add_child(parent)

    parent.ok("deleteChildProfile", {"childId": child["id"]})

    assert parent.ok("getChildProfiles") == []
    assert parent.call("deleteChildProfile", {"childId": child["id"]}).status_code == 404

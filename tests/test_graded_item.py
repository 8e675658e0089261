# tests/test_graded_item.py

import datetime

import pytest

from models.graded_item import (
    GradedItem,
    ItemStatus,
    ItemType,
    Link,
    Priority,
    coerce_enum,
)


def test_graded_item_to_dict(item_a):
    assert item_a.to_dict() == {
        "id": "a001",
        "course_id": "c001",
        "name": "Midterm Paper",
        "description": "Analysis of a Greek tragedy.",
        "due_date": "2025-10-20T23:59:00",
        "is_tbd": False,
        "weight": 60.0,
        "grade_received": 90.0,
        "priority": "High",
        "status": "Submitted",
        "type": "Midterm",
        "notes": "Cite at least three sources.",
        "links": [{"title": "Style guide", "url": "https://example.edu/style"}],
    }


def test_graded_item_from_dict(item_a):
    item = GradedItem.from_dict(item_a.to_dict())

    assert item == item_a
    assert item.priority is Priority.HIGH
    assert item.status is ItemStatus.SUBMITTED
    assert item.type is ItemType.MIDTERM
    assert item.links == (Link("Style guide", "https://example.edu/style"),)


def test_from_dict_accepts_javascript_timestamps():
    item = GradedItem.from_dict(
        {
            "id": "x1",
            "course_id": "c1",
            "name": "Quiz 1",
            "due_date": "2025-10-01T12:00:00.000Z",
            "weight": 5,
            "priority": "Low",
            "status": "Not Started",
            "type": "Quiz",
        }
    )

    assert item.due_date.tzinfo is not None
    assert item.description == ""
    assert item.grade_received is None
    assert item.links == ()


def test_ungraded_is_distinct_from_zero(ungraded_item):
    assert not ungraded_item.is_graded

    zero = ungraded_item.replace(grade_received=0)
    assert zero.is_graded
    assert zero.grade_received == 0.0


def test_replace_returns_new_item(item_a):
    updated = item_a.replace(weight=15, name="Revised Paper")

    assert updated.weight == 15.0
    assert updated.name == "Revised Paper"
    assert updated.id == item_a.id
    assert item_a.weight == 60.0
    assert item_a.name == "Midterm Paper"


def test_replace_accepts_link_dicts(item_a):
    updated = item_a.replace(links=[{"title": "Rubric", "url": "https://example.edu/r"}])

    assert updated.links == (Link("Rubric", "https://example.edu/r"),)


def test_replace_rejects_unknown_field(item_a):
    with pytest.raises(TypeError):
        item_a.replace(points_possible=50)


def test_replace_rejects_id_change(item_a):
    with pytest.raises(ValueError):
        item_a.replace(id="a999")


@pytest.mark.parametrize("weight", [-1, float("inf"), float("nan")])
def test_invalid_weight_rejected(item_a, weight):
    with pytest.raises(ValueError):
        item_a.replace(weight=weight)


@pytest.mark.parametrize("grade", [-0.5, 100.5])
def test_out_of_bounds_grade_rejected(item_a, grade):
    with pytest.raises(ValueError):
        item_a.replace(grade_received=grade)


def test_non_numeric_weight_rejected(item_a):
    with pytest.raises(TypeError):
        item_a.replace(weight="heavy")


def test_unknown_status_rejected_by_strict_constructor(item_a):
    with pytest.raises(ValueError):
        item_a.replace(status="Done")


def test_coerce_enum():
    assert coerce_enum(Priority, "High", Priority.MEDIUM) is Priority.HIGH
    assert coerce_enum(ItemStatus, "not started", ItemStatus.SUBMITTED) is ItemStatus.NOT_STARTED
    assert coerce_enum(ItemType, "Essay", ItemType.ASSIGNMENT) is ItemType.ASSIGNMENT
    assert coerce_enum(ItemType, None, ItemType.ASSIGNMENT) is ItemType.ASSIGNMENT


def test_from_import_coerces_unknown_enums():
    item = GradedItem.from_import(
        {
            "id": "ignored",
            "course_id": "ignored",
            "name": "Reading Response",
            "due_date": "2025-10-01T00:00:00",
            "weight": 5,
            "priority": "Urgent",
            "status": "Done",
            "type": "Essay",
        },
        id="new-1",
        course_id="c-new",
    )

    assert item.id == "new-1"
    assert item.course_id == "c-new"
    assert item.priority is Priority.MEDIUM
    assert item.status is ItemStatus.NOT_STARTED
    assert item.type is ItemType.ASSIGNMENT
    assert item.description == ""


def test_from_import_requires_weight():
    with pytest.raises(KeyError):
        GradedItem.from_import(
            {"name": "Quiz", "due_date": "2025-10-01T00:00:00"},
            id="new-1",
            course_id="c-new",
        )


def test_graded_item_to_str(item_a):
    assert str(item_a) == "MIDTERM: Midterm Paper - due 2025-10-20 at 23:59 (ID: a001)"


def test_due_date_accepts_datetime_and_string(item_a):
    from_string = item_a.replace(due_date="2025-10-20T23:59:00")

    assert from_string.due_date == datetime.datetime(2025, 10, 20, 23, 59)
    assert from_string == item_a

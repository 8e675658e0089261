# tests/test_trash_record.py

import pytest

from models.trash_record import CourseBundle, TrashKind, TrashRecord


def test_course_record_round_trip(sample_course, item_a, item_b, now):
    record = TrashRecord.for_course("t1", sample_course, [item_a, item_b], now)
    restored = TrashRecord.from_dict(record.to_dict())

    assert restored == record
    assert restored.kind is TrashKind.COURSE
    assert isinstance(restored.payload, CourseBundle)
    assert restored.payload.graded_items == (item_a, item_b)


def test_item_record_round_trip(item_a, now):
    record = TrashRecord.for_graded_item("t2", item_a, now)
    restored = TrashRecord.from_dict(record.to_dict())

    assert restored == record
    assert restored.payload == item_a


def test_entity_id_and_label(sample_course, item_a, now):
    course_record = TrashRecord.for_course("t1", sample_course, [], now)
    item_record = TrashRecord.for_graded_item("t2", item_a, now)

    assert course_record.entity_id == "c001"
    assert course_record.label == "THTR 274A Theatre History"
    assert item_record.entity_id == "a001"
    assert item_record.label == "Midterm Paper"


def test_payload_must_match_kind(sample_course, item_a, now):
    with pytest.raises(TypeError):
        TrashRecord("t1", TrashKind.COURSE, item_a, now)

    with pytest.raises(TypeError):
        TrashRecord("t1", TrashKind.GRADED_ITEM, CourseBundle(sample_course, []), now)


def test_unknown_kind_rejected(item_a, now):
    data = TrashRecord.for_graded_item("t2", item_a, now).to_dict()
    data["kind"] = "semester"

    with pytest.raises(ValueError):
        TrashRecord.from_dict(data)


def test_trash_record_to_dict(item_a, now):
    data = TrashRecord.for_graded_item("t2", item_a, now).to_dict()

    assert data["id"] == "t2"
    assert data["kind"] == "graded_item"
    assert data["payload"] == item_a.to_dict()
    assert data["deleted_at"] == "2025-09-15T09:00:00"

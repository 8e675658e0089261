# models/trash_record.py

"""
Represents a soft-deleted record awaiting restore or permanent removal.

A `TrashRecord` is a tagged variant: `kind` says which payload shape it carries.
- `TrashKind.COURSE` wraps a `CourseBundle`: the course plus every graded item it owned when deleted.
- `TrashKind.GRADED_ITEM` wraps a single `GradedItem`.

Payloads are snapshots. They hold the records exactly as they were at deletion time, so restoring
re-inserts them with their original ids.
"""

from __future__ import annotations

import datetime
from enum import Enum

from core.formatters import parse_timestamp
from models.course import Course
from models.graded_item import GradedItem


class TrashKind(str, Enum):
    COURSE = "course"
    GRADED_ITEM = "graded_item"


class CourseBundle:
    """A course and the graded items captured alongside it."""

    def __init__(self, course: Course, graded_items: list[GradedItem] | tuple[GradedItem, ...]):
        self._course = course
        self._graded_items = tuple(graded_items)

    @property
    def course(self) -> Course:
        return self._course

    @property
    def graded_items(self) -> tuple[GradedItem, ...]:
        return self._graded_items

    def to_dict(self) -> dict:
        return {
            "course": self._course.to_dict(),
            "graded_items": [item.to_dict() for item in self._graded_items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> CourseBundle:
        return cls(
            course=Course.from_dict(data["course"]),
            graded_items=[GradedItem.from_dict(item) for item in data["graded_items"]],
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CourseBundle):
            return NotImplemented
        return (
            self._course == other._course
            and self._graded_items == other._graded_items
        )

    def __repr__(self) -> str:
        return f"CourseBundle({self._course!r}, {len(self._graded_items)} items)"


class TrashRecord:

    def __init__(
        self,
        id: str,
        kind: TrashKind | str,
        payload: CourseBundle | GradedItem,
        deleted_at: datetime.datetime | str,
    ):
        self._id = id
        self._kind = TrashKind(kind)
        self._payload = TrashRecord.validate_payload_input(self._kind, payload)
        self._deleted_at = parse_timestamp(deleted_at)

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def kind(self) -> TrashKind:
        return self._kind

    @property
    def payload(self) -> CourseBundle | GradedItem:
        return self._payload

    @property
    def deleted_at(self) -> datetime.datetime:
        return self._deleted_at

    @property
    def entity_id(self) -> str:
        """The id of the wrapped course or graded item."""
        if isinstance(self._payload, CourseBundle):
            return self._payload.course.id
        return self._payload.id

    @property
    def label(self) -> str:
        if isinstance(self._payload, CourseBundle):
            return f"{self._payload.course.code} {self._payload.course.name}"
        return self._payload.name

    # === public classmethods ===

    @classmethod
    def for_course(
        cls,
        id: str,
        course: Course,
        graded_items: list[GradedItem] | tuple[GradedItem, ...],
        deleted_at: datetime.datetime,
    ) -> TrashRecord:
        return cls(id, TrashKind.COURSE, CourseBundle(course, graded_items), deleted_at)

    @classmethod
    def for_graded_item(
        cls, id: str, item: GradedItem, deleted_at: datetime.datetime
    ) -> TrashRecord:
        return cls(id, TrashKind.GRADED_ITEM, item, deleted_at)

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "kind": self._kind.value,
            "payload": self._payload.to_dict(),
            "deleted_at": self._deleted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> TrashRecord:
        kind = TrashKind(data["kind"])

        if kind is TrashKind.COURSE:
            payload = CourseBundle.from_dict(data["payload"])

        elif kind is TrashKind.GRADED_ITEM:
            payload = GradedItem.from_dict(data["payload"])

        else:
            raise ValueError(f"Unrecognized trash kind: {kind}")

        return cls(
            id=data["id"],
            kind=kind,
            payload=payload,
            deleted_at=data["deleted_at"],
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrashRecord):
            return NotImplemented
        return (
            self._id == other._id
            and self._kind == other._kind
            and self._payload == other._payload
            and self._deleted_at == other._deleted_at
        )

    def __repr__(self) -> str:
        return f"TrashRecord({self._id}, {self._kind.value}, {self.entity_id}, {self._deleted_at.isoformat()})"

    def __str__(self) -> str:
        return f"TRASH: {self._kind.value}: {self.label} (ID: {self._id})"

    # === data validators ===

    @staticmethod
    def validate_payload_input(
        kind: TrashKind, payload: object
    ) -> CourseBundle | GradedItem:
        """
        Ensures the payload shape matches the record's kind.

        Raises:
            TypeError: If the payload type does not match `kind`.
        """
        if kind is TrashKind.COURSE and isinstance(payload, CourseBundle):
            return payload

        if kind is TrashKind.GRADED_ITEM and isinstance(payload, GradedItem):
            return payload

        raise TypeError(
            f"A {kind.value} trash record cannot hold a {type(payload).__name__} payload."
        )

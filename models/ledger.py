# models/ledger.py

"""
The Ledger is the aggregate root of the program: every course, graded item, and trash record, plus
optional term bounds.

A `Ledger` is a value. Its collections are tuples, nothing mutates it after construction, and every
change produces a new `Ledger` through `replace()`. Only `LedgerStore` decides which `Ledger` is current;
everything else receives one and reads from it.

The serialized form produced by `to_dict()` round-trips exactly through `from_dict()`, which is the
backup/restore contract used by the snapshot store. Two ledgers are equal when they hold equal records
under the same ids, in any order.
"""

from __future__ import annotations

import datetime
from typing import Any

from core.formatters import format_timestamp, parse_timestamp
from models.course import Course
from models.graded_item import GradedItem, ItemStatus, ItemType, Link, Priority
from models.trash_record import TrashKind, TrashRecord
from models.types import RecordType


class Ledger:

    def __init__(
        self,
        courses: list[Course] | tuple[Course, ...] = (),
        graded_items: list[GradedItem] | tuple[GradedItem, ...] = (),
        trash: list[TrashRecord] | tuple[TrashRecord, ...] = (),
        term_start: datetime.datetime | str | None = None,
        term_end: datetime.datetime | str | None = None,
    ):
        self._courses: tuple[Course, ...] = tuple(courses)
        self._graded_items: tuple[GradedItem, ...] = tuple(graded_items)
        self._trash: tuple[TrashRecord, ...] = tuple(trash)
        self._term_start = parse_timestamp(term_start) if term_start else None
        self._term_end = parse_timestamp(term_end) if term_end else None

    # === properties ===

    @property
    def courses(self) -> tuple[Course, ...]:
        return self._courses

    @property
    def graded_items(self) -> tuple[GradedItem, ...]:
        return self._graded_items

    @property
    def trash(self) -> tuple[TrashRecord, ...]:
        return self._trash

    @property
    def term_start(self) -> datetime.datetime | None:
        return self._term_start

    @property
    def term_end(self) -> datetime.datetime | None:
        return self._term_end

    # === lookups ===

    def find_course(self, course_id: str) -> Course | None:
        return next((c for c in self._courses if c.id == course_id), None)

    def find_graded_item(self, item_id: str) -> GradedItem | None:
        return next((i for i in self._graded_items if i.id == item_id), None)

    def find_trash_record(self, trash_id: str) -> TrashRecord | None:
        return next((t for t in self._trash if t.id == trash_id), None)

    def items_for_course(self, course_id: str) -> tuple[GradedItem, ...]:
        return tuple(i for i in self._graded_items if i.course_id == course_id)

    def orphaned_items(self) -> tuple[GradedItem, ...]:
        """
        Returns live graded items whose course is not live.

        This happens when a lone item is restored after its course was deleted and never restored.
        The ledger keeps such items; display layers decide whether to hide them.
        """
        course_ids = {c.id for c in self._courses}
        return tuple(i for i in self._graded_items if i.course_id not in course_ids)

    def known_course_ids(self) -> set[str]:
        """Ids of every live course and every course held in trash."""
        known = {c.id for c in self._courses}

        for record in self._trash:
            if record.kind is TrashKind.COURSE:
                known.add(record.entity_id)

        return known

    # === derived copies ===

    def replace(self, **changes: Any) -> Ledger:
        current = {
            "courses": self._courses,
            "graded_items": self._graded_items,
            "trash": self._trash,
            "term_start": self._term_start,
            "term_end": self._term_end,
        }

        unknown = sorted(set(changes) - set(current))
        if unknown:
            raise TypeError(f"Unknown ledger field(s): {', '.join(unknown)}.")

        return Ledger(**{**current, **changes})

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "courses": [c.to_dict() for c in self._courses],
            "graded_items": [i.to_dict() for i in self._graded_items],
            "trash": [t.to_dict() for t in self._trash],
            "term_start": format_timestamp(self._term_start),
            "term_end": format_timestamp(self._term_end),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Ledger:
        """
        Rebuilds a `Ledger` from its serialized form.

        Raises:
            ValueError: If `data` is not a dictionary, or a collection is present but not a list.
            KeyError | TypeError | ValueError: If a nested record fails to deserialize.

        Notes:
            - Missing collections are treated as empty, so snapshots written before a collection existed still load.
        """
        if not isinstance(data, dict):
            raise ValueError("Expected the ledger snapshot to contain a dictionary.")

        def read_list(key: str) -> list[Any]:
            value = data.get(key) or []
            if not isinstance(value, list):
                raise ValueError(f"Expected '{key}' to contain a list.")
            return value

        return cls(
            courses=[Course.from_dict(c) for c in read_list("courses")],
            graded_items=[GradedItem.from_dict(i) for i in read_list("graded_items")],
            trash=[TrashRecord.from_dict(t) for t in read_list("trash")],
            term_start=data.get("term_start"),
            term_end=data.get("term_end"),
        )

    @classmethod
    def default(cls, now: datetime.datetime | None = None) -> Ledger:
        """
        Builds the seed ledger used when no usable snapshot exists.

        Two example courses with one graded item each, and a term spanning 30 days back to 90 days ahead.
        """
        now = now or datetime.datetime.now()
        day = datetime.timedelta(days=1)

        return cls(
            courses=[
                Course(
                    id="c1",
                    name="Introduction to Computer Science",
                    code="CS101",
                    color="#3b82f6",
                    target_grade=90,
                    credits=3,
                    term="Fall 2024",
                ),
                Course(
                    id="c2",
                    name="Calculus I",
                    code="MATH101",
                    color="#ef4444",
                    target_grade=85,
                    credits=4,
                    term="Fall 2024",
                ),
            ],
            graded_items=[
                GradedItem(
                    id="a1",
                    course_id="c2",
                    name="Problem Set 1",
                    description="Foundational exercises.",
                    due_date=now + 2 * day,
                    weight=5,
                    grade_received=95,
                    priority=Priority.LOW,
                    status=ItemStatus.SUBMITTED,
                    type=ItemType.ASSIGNMENT,
                    notes="Remember to check the derivative rules.",
                    links=[Link("Khan Academy Reference", "https://khanacademy.org")],
                ),
                GradedItem(
                    id="a2",
                    course_id="c1",
                    name="Assignment 1: Hello World",
                    description="Basic coding lab.",
                    due_date=now + 5 * day,
                    weight=10,
                    grade_received=100,
                    priority=Priority.MEDIUM,
                    status=ItemStatus.SUBMITTED,
                    type=ItemType.LAB,
                ),
            ],
            term_start=now - 30 * day,
            term_end=now + 90 * day,
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return (
            _by_id(self._courses) == _by_id(other._courses)
            and _by_id(self._graded_items) == _by_id(other._graded_items)
            and _by_id(self._trash) == _by_id(other._trash)
            and self._term_start == other._term_start
            and self._term_end == other._term_end
        )

    def __repr__(self) -> str:
        return (
            f"Ledger({len(self._courses)} courses, {len(self._graded_items)} graded items, "
            f"{len(self._trash)} in trash)"
        )


def _by_id(records: tuple[RecordType, ...]) -> dict[str, RecordType]:
    # ids are unique within each collection, so equality ignores ordering
    return {record.id: record for record in records}

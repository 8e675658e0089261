# models/graded_item.py

"""
The GradedItem model represents any graded component of a course: assignments, labs, quizzes, exams.

A `GradedItem` is read-only once constructed. Changes are expressed with `replace()`, which validates the
merged fields and returns a new instance, so a `Ledger` holding the old instance is never affected.

Key behaviors:
- `weight`: the item's percentage contribution to the course grade. Any finite, non-negative number;
  the engine never enforces that a course's weights sum to 100.
- `grade_received`: a percentage from 0 to 100, or None for "ungraded" (distinct from a grade of 0).
- `priority`, `status`, `type`: enum-valued fields. Strict construction rejects unknown values;
  `from_import()` coerces them to documented defaults instead.
"""

from __future__ import annotations

import datetime
import math
from enum import Enum
from typing import Any

from core.formatters import format_due_date_from_datetime, parse_timestamp


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ItemStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    NOT_SUBMITTED = "Not Submitted"
    SUBMITTED = "Submitted"


class ItemType(str, Enum):
    ASSIGNMENT = "Assignment"
    LAB = "Lab"
    QUIZ = "Quiz"
    MIDTERM = "Midterm"
    FINAL = "Final"
    OTHER = "Other"


# fields a user may change after creation; `id` and `course_id` are fixed
EDITABLE_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "due_date",
    "is_tbd",
    "weight",
    "grade_received",
    "priority",
    "status",
    "type",
    "notes",
    "links",
)


def coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    """
    Returns the `enum_cls` member matching `value`, or `default` if there is none.

    Matches on member value first ("Not Started"), then on member name ("NOT_STARTED").
    """
    try:
        return enum_cls(value)

    except (TypeError, ValueError):
        pass

    if isinstance(value, str):
        key = value.strip().upper().replace(" ", "_")
        if key in enum_cls.__members__:
            return enum_cls[key]

    return default


class Link:

    def __init__(self, title: str, url: str):
        self._title = title
        self._url = url

    @property
    def title(self) -> str:
        return self._title

    @property
    def url(self) -> str:
        return self._url

    def to_dict(self) -> dict:
        return {"title": self._title, "url": self._url}

    @classmethod
    def from_dict(cls, data: dict) -> Link:
        return cls(title=data["title"], url=data["url"])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self._title == other._title and self._url == other._url

    def __repr__(self) -> str:
        return f"Link({self._title!r}, {self._url!r})"


class GradedItem:

    def __init__(
        self,
        id: str,
        course_id: str,
        name: str,
        due_date: datetime.datetime | str,
        weight: float,
        description: str = "",
        grade_received: float | None = None,
        priority: Priority | str = Priority.MEDIUM,
        status: ItemStatus | str = ItemStatus.NOT_STARTED,
        type: ItemType | str = ItemType.ASSIGNMENT,
        notes: str | None = None,
        links: list[Link] | tuple[Link, ...] | None = None,
        is_tbd: bool = False,
    ):
        self._id = id
        self._course_id = course_id
        self._name = name
        self._description = description
        self._due_date = parse_timestamp(due_date)
        self._weight = GradedItem.validate_weight_input(weight)
        self._grade_received = GradedItem.validate_grade_input(grade_received)
        self._priority = Priority(priority)
        self._status = ItemStatus(status)
        self._type = ItemType(type)
        self._notes = notes
        self._links = GradedItem.validate_links_input(links)
        self._is_tbd = bool(is_tbd)

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def due_date(self) -> datetime.datetime:
        return self._due_date

    @property
    def due_date_iso(self) -> str:
        return self._due_date.isoformat()

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def grade_received(self) -> float | None:
        return self._grade_received

    @property
    def is_graded(self) -> bool:
        return self._grade_received is not None

    @property
    def priority(self) -> Priority:
        return self._priority

    @property
    def status(self) -> ItemStatus:
        return self._status

    @property
    def type(self) -> ItemType:
        return self._type

    @property
    def notes(self) -> str | None:
        return self._notes

    @property
    def links(self) -> tuple[Link, ...]:
        return self._links

    @property
    def is_tbd(self) -> bool:
        return self._is_tbd

    # === derived copies ===

    def fields(self) -> dict[str, Any]:
        """
        Returns the constructor arguments that reproduce this item, as Python values.
        """
        return {
            "id": self._id,
            "course_id": self._course_id,
            "name": self._name,
            "description": self._description,
            "due_date": self._due_date,
            "weight": self._weight,
            "grade_received": self._grade_received,
            "priority": self._priority,
            "status": self._status,
            "type": self._type,
            "notes": self._notes,
            "links": self._links,
            "is_tbd": self._is_tbd,
        }

    def replace(self, **changes: Any) -> GradedItem:
        """
        Returns a new `GradedItem` with the given fields changed.

        Raises:
            TypeError: If a change names an unknown field.
            ValueError: If a change targets `id`, or a changed value fails validation.
        """
        current = self.fields()

        unknown = sorted(set(changes) - set(current))
        if unknown:
            raise TypeError(f"Unknown graded item field(s): {', '.join(unknown)}.")

        if "id" in changes and changes["id"] != self._id:
            raise ValueError("The id of a graded item cannot be changed.")

        return GradedItem(**{**current, **changes})

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "course_id": self._course_id,
            "name": self._name,
            "description": self._description,
            "due_date": self.due_date_iso,
            "is_tbd": self._is_tbd,
            "weight": self._weight,
            "grade_received": self._grade_received,
            "priority": self._priority.value,
            "status": self._status.value,
            "type": self._type.value,
            "notes": self._notes,
            "links": [link.to_dict() for link in self._links],
        }

    @classmethod
    def from_dict(cls, data: dict) -> GradedItem:
        return cls(
            id=data["id"],
            course_id=data["course_id"],
            name=data["name"],
            description=data.get("description", ""),
            due_date=data["due_date"],
            weight=data["weight"],
            grade_received=data.get("grade_received"),
            priority=data["priority"],
            status=data["status"],
            type=data["type"],
            notes=data.get("notes"),
            links=data.get("links"),
            is_tbd=data.get("is_tbd", False),
        )

    @classmethod
    def from_import(cls, data: dict, id: str, course_id: str) -> GradedItem:
        """
        Builds a `GradedItem` from loosely-typed import data.

        Unlike `from_dict()`, the id and course id are supplied by the caller (any in `data` are ignored),
        a missing description becomes "", and unknown enum values are coerced to their import defaults:
        priority -> Medium, status -> Not Started, type -> Assignment.

        Raises:
            KeyError: If `name`, `due_date`, or `weight` is missing.
            TypeError | ValueError: If a present value fails validation.
        """
        return cls(
            id=id,
            course_id=course_id,
            name=data["name"],
            description=data.get("description") or "",
            due_date=data["due_date"],
            weight=data["weight"],
            grade_received=data.get("grade_received"),
            priority=coerce_enum(Priority, data.get("priority"), Priority.MEDIUM),
            status=coerce_enum(ItemStatus, data.get("status"), ItemStatus.NOT_STARTED),
            type=coerce_enum(ItemType, data.get("type"), ItemType.ASSIGNMENT),
            notes=data.get("notes"),
            links=data.get("links"),
            is_tbd=data.get("is_tbd", False),
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GradedItem):
            return NotImplemented
        return self.fields() == other.fields()

    def __repr__(self) -> str:
        return f"GradedItem({self._id}, {self._name}, {self._course_id}, {self._weight}, {self._grade_received})"

    def __str__(self) -> str:
        return f"{self._type.value.upper()}: {self._name} - due {format_due_date_from_datetime(self._due_date)} (ID: {self._id})"

    # === data validators ===

    @staticmethod
    def validate_weight_input(weight: Any) -> float:
        """
        Validates and normalizes input for a `GradedItem` weight.

        Accepts any input, and then:
            - Casts to float.
            - Ensures the number is finite.
            - Ensures it is non-negative.

        Raises:
            TypeError: If the input cannot be cast to float.
            ValueError: If the input is non-finite or less than zero.
        """
        try:
            weight = float(weight)

        except (TypeError, ValueError):
            raise TypeError("Invalid input. Weight must be a number.")

        if not math.isfinite(weight):
            raise ValueError("Invalid input. Weight must be a finite number.")

        if weight < 0:
            raise ValueError("Invalid input. Weight cannot be less than zero.")

        return weight

    @staticmethod
    def validate_grade_input(grade: Any) -> float | None:
        """
        Validates and normalizes input for a `GradedItem` grade.

        Accepts None as "ungraded", otherwise casts to a finite float between 0 and 100, inclusive.

        Raises:
            TypeError: If the input is not None and cannot be cast to float.
            ValueError: If the input is non-finite or out of bounds.
        """
        if grade is None:
            return None

        try:
            grade = float(grade)

        except (TypeError, ValueError):
            raise TypeError("Invalid input. Grade received must be a number or None.")

        if not math.isfinite(grade):
            raise ValueError("Invalid input. Grade received must be a finite number.")

        if grade < 0 or grade > 100:
            raise ValueError("Invalid input. Grade received must be between 0 and 100.")

        return grade

    @staticmethod
    def validate_links_input(links: Any) -> tuple[Link, ...]:
        """
        Normalizes links into an order-preserving tuple of `Link` objects.

        Accepts None, or any iterable of `Link` objects and {"title", "url"} dictionaries.

        Raises:
            TypeError: If an entry is neither a `Link` nor a dictionary with both keys.
        """
        if links is None:
            return ()

        normalized = []

        for link in links:
            if isinstance(link, Link):
                normalized.append(link)

            elif isinstance(link, dict) and "title" in link and "url" in link:
                normalized.append(Link.from_dict(link))

            else:
                raise TypeError("Invalid input. Links must have a title and a url.")

        return tuple(normalized)

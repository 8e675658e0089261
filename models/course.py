# models/course.py

"""
Represents an enrolled course and its weekly meeting schedule.

A `Course` owns no graded items directly; `GradedItem.course_id` points back at it. Like the other
records held by a `Ledger`, a `Course` is read-only and changed through `replace()`.

Notes:
- `color` is a display tag only and is never validated beyond being a string.
- Schedule blocks are kept in the order given; overlapping blocks are not rejected.
"""

from __future__ import annotations

import datetime
import math
from enum import Enum
from typing import Any

import core.config as config


class Weekday(str, Enum):
    MONDAY = "Mon"
    TUESDAY = "Tue"
    WEDNESDAY = "Wed"
    THURSDAY = "Thu"
    FRIDAY = "Fri"
    SATURDAY = "Sat"
    SUNDAY = "Sun"


class ScheduleBlock:

    def __init__(
        self,
        day: Weekday | str,
        start_time: str,
        end_time: str,
        location: str | None = None,
    ):
        self._day = Weekday(day)
        self._start_time = ScheduleBlock.validate_time_input(start_time)
        self._end_time = ScheduleBlock.validate_time_input(end_time)
        self._location = location

    @property
    def day(self) -> Weekday:
        return self._day

    @property
    def start_time(self) -> str:
        return self._start_time

    @property
    def end_time(self) -> str:
        return self._end_time

    @property
    def location(self) -> str | None:
        return self._location

    def to_dict(self) -> dict:
        return {
            "day": self._day.value,
            "start_time": self._start_time,
            "end_time": self._end_time,
            "location": self._location,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScheduleBlock:
        return cls(
            day=data["day"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            location=data.get("location"),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScheduleBlock):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"ScheduleBlock({self._day.value}, {self._start_time}, {self._end_time}, {self._location})"

    @staticmethod
    def validate_time_input(value: Any) -> str:
        """
        Validates a 24-hour "HH:MM" time string.

        Raises:
            TypeError: If the input is not a string in "HH:MM" format.
        """
        try:
            datetime.datetime.strptime(value, "%H:%M")

        except (TypeError, ValueError):
            raise TypeError(
                f"Invalid input. Times must be formatted as 24-hour HH:MM, got '{value}'."
            )

        return value


class Course:

    def __init__(
        self,
        id: str,
        name: str,
        code: str,
        color: str = config.DEFAULT_COURSE_COLOR,
        target_grade: float = config.DEFAULT_TARGET_GRADE,
        credits: int = config.DEFAULT_CREDITS,
        term: str | None = None,
        schedule: list[ScheduleBlock] | tuple[ScheduleBlock, ...] | None = None,
    ):
        self._id = id
        self._name = name
        self._code = code
        self._color = color
        self._target_grade = Course.validate_target_grade_input(target_grade)
        self._credits = Course.validate_credits_input(credits)
        self._term = term
        self._schedule = Course.validate_schedule_input(schedule)

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def code(self) -> str:
        return self._code

    @property
    def color(self) -> str:
        return self._color

    @property
    def target_grade(self) -> float:
        return self._target_grade

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def term(self) -> str | None:
        return self._term

    @property
    def schedule(self) -> tuple[ScheduleBlock, ...]:
        return self._schedule

    # === derived copies ===

    def fields(self) -> dict[str, Any]:
        return {
            "id": self._id,
            "name": self._name,
            "code": self._code,
            "color": self._color,
            "target_grade": self._target_grade,
            "credits": self._credits,
            "term": self._term,
            "schedule": self._schedule,
        }

    def replace(self, **changes: Any) -> Course:
        """
        Returns a new `Course` with the given fields changed.

        Raises:
            TypeError: If a change names an unknown field.
            ValueError: If a change targets `id`, or a changed value fails validation.
        """
        current = self.fields()

        unknown = sorted(set(changes) - set(current))
        if unknown:
            raise TypeError(f"Unknown course field(s): {', '.join(unknown)}.")

        if "id" in changes and changes["id"] != self._id:
            raise ValueError("The id of a course cannot be changed.")

        return Course(**{**current, **changes})

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "code": self._code,
            "color": self._color,
            "target_grade": self._target_grade,
            "credits": self._credits,
            "term": self._term,
            "schedule": [block.to_dict() for block in self._schedule],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Course:
        return cls(
            id=data["id"],
            name=data["name"],
            code=data["code"],
            color=data["color"],
            target_grade=data["target_grade"],
            credits=data["credits"],
            term=data.get("term"),
            schedule=data.get("schedule"),
        )

    @classmethod
    def from_import(cls, data: dict, id: str) -> Course:
        """
        Builds a `Course` from loosely-typed import data, filling in the configured defaults.

        Missing or empty `color`, `target_grade`, and `credits` fall back to `config.DEFAULT_COURSE_COLOR`,
        `config.DEFAULT_TARGET_GRADE`, and `config.DEFAULT_CREDITS`. Any id in `data` is ignored.

        Raises:
            KeyError: If `name` or `code` is missing.
            TypeError | ValueError: If a present value fails validation.
        """
        return cls(
            id=id,
            name=data["name"],
            code=data["code"],
            color=data.get("color") or config.DEFAULT_COURSE_COLOR,
            target_grade=data.get("target_grade") or config.DEFAULT_TARGET_GRADE,
            credits=data.get("credits") or config.DEFAULT_CREDITS,
            term=data.get("term"),
            schedule=data.get("schedule"),
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Course):
            return NotImplemented
        return self.fields() == other.fields()

    def __repr__(self) -> str:
        return f"Course({self._id}, {self._code}, {self._name}, {self._target_grade}, {self._credits})"

    def __str__(self) -> str:
        return f"COURSE: {self._code} {self._name} (ID: {self._id})"

    # === data validators ===

    @staticmethod
    def validate_target_grade_input(target_grade: Any) -> float:
        """
        Validates and normalizes input for a `Course` target grade.

        Casts to a finite float between 0 and 100, inclusive.

        Raises:
            TypeError: If the input cannot be cast to float.
            ValueError: If the input is non-finite or out of bounds.
        """
        try:
            target_grade = float(target_grade)

        except (TypeError, ValueError):
            raise TypeError("Invalid input. Target grade must be a number.")

        if not math.isfinite(target_grade):
            raise ValueError("Invalid input. Target grade must be a finite number.")

        if target_grade < 0 or target_grade > 100:
            raise ValueError("Invalid input. Target grade must be between 0 and 100.")

        return target_grade

    @staticmethod
    def validate_credits_input(credits: Any) -> int:
        """
        Validates and normalizes input for a `Course` credit count.

        Accepts integers, and floats with no fractional part. The result must be positive.

        Raises:
            TypeError: If the input is not a whole number.
            ValueError: If the input is zero or negative.
        """
        if isinstance(credits, bool):
            raise TypeError("Invalid input. Credits must be a whole number.")

        if isinstance(credits, float) and credits.is_integer():
            credits = int(credits)

        if not isinstance(credits, int):
            raise TypeError("Invalid input. Credits must be a whole number.")

        if credits <= 0:
            raise ValueError("Invalid input. Credits must be greater than zero.")

        return credits

    @staticmethod
    def validate_schedule_input(schedule: Any) -> tuple[ScheduleBlock, ...]:
        if schedule is None:
            return ()

        return tuple(
            block if isinstance(block, ScheduleBlock) else ScheduleBlock.from_dict(block)
            for block in schedule
        )

# models/types.py

"""
Holds TypeVar definition for simplifying type checks.
"""

from typing import TypeVar

from .course import Course
from .graded_item import GradedItem
from .trash_record import TrashRecord

RecordType = TypeVar("RecordType", Course, GradedItem, TrashRecord)

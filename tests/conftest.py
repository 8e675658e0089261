# tests/conftest.py

from datetime import datetime

import pytest

from core.utils import SequentialIdGenerator
from models.course import Course, ScheduleBlock
from models.graded_item import GradedItem, ItemStatus, ItemType, Link, Priority
from models.ledger import Ledger
from models.ledger_store import LedgerStore

NOW = datetime.strptime("2025-09-15 09:00", "%Y-%m-%d %H:%M")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_course():
    return Course(
        id="c001",
        name="Theatre History",
        code="THTR 274A",
        color="#3b82f6",
        target_grade=90.0,
        credits=4,
        term="FALL 2025",
        schedule=[ScheduleBlock("Mon", "10:00", "11:50", "MCC 107")],
    )


@pytest.fixture
def other_course():
    return Course(id="c002", name="Calculus I", code="MATH 101", credits=3)


@pytest.fixture
def item_a():
    return GradedItem(
        id="a001",
        course_id="c001",
        name="Midterm Paper",
        description="Analysis of a Greek tragedy.",
        due_date=datetime.strptime("2025-10-20 23:59", "%Y-%m-%d %H:%M"),
        weight=60,
        grade_received=90,
        priority=Priority.HIGH,
        status=ItemStatus.SUBMITTED,
        type=ItemType.MIDTERM,
        notes="Cite at least three sources.",
        links=[Link("Style guide", "https://example.edu/style")],
    )


@pytest.fixture
def item_b():
    return GradedItem(
        id="a002",
        course_id="c001",
        name="Lab Journal",
        due_date=datetime.strptime("2025-11-03 17:00", "%Y-%m-%d %H:%M"),
        weight=40,
        grade_received=80,
        status=ItemStatus.SUBMITTED,
        type=ItemType.LAB,
    )


@pytest.fixture
def ungraded_item():
    return GradedItem(
        id="a003",
        course_id="c001",
        name="Final Exam",
        due_date=datetime.strptime("2025-12-12 08:00", "%Y-%m-%d %H:%M"),
        weight=30,
        type=ItemType.FINAL,
    )


@pytest.fixture
def other_course_item():
    return GradedItem(
        id="b001",
        course_id="c002",
        name="Problem Set 1",
        due_date=datetime.strptime("2025-09-20 23:59", "%Y-%m-%d %H:%M"),
        weight=10,
        grade_received=95,
        type=ItemType.ASSIGNMENT,
    )


@pytest.fixture
def sample_ledger(sample_course, other_course, item_a, item_b, other_course_item):
    return Ledger(
        courses=[sample_course, other_course],
        graded_items=[item_a, item_b, other_course_item],
        term_start=datetime.strptime("2025-09-01 00:00", "%Y-%m-%d %H:%M"),
        term_end=datetime.strptime("2025-12-20 00:00", "%Y-%m-%d %H:%M"),
    )


@pytest.fixture
def saved_snapshots():
    return []


@pytest.fixture
def sample_store(sample_ledger, saved_snapshots):
    return LedgerStore(
        sample_ledger,
        id_generator=SequentialIdGenerator("gen-"),
        on_snapshot_changed=saved_snapshots.append,
        clock=lambda: NOW,
    )

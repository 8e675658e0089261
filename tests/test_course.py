# tests/test_course.py

import pytest

import core.config as config
from models.course import Course, ScheduleBlock, Weekday


def test_course_to_dict(sample_course):
    assert sample_course.to_dict() == {
        "id": "c001",
        "name": "Theatre History",
        "code": "THTR 274A",
        "color": "#3b82f6",
        "target_grade": 90.0,
        "credits": 4,
        "term": "FALL 2025",
        "schedule": [
            {
                "day": "Mon",
                "start_time": "10:00",
                "end_time": "11:50",
                "location": "MCC 107",
            }
        ],
    }


def test_course_from_dict(sample_course):
    course = Course.from_dict(sample_course.to_dict())

    assert course == sample_course
    assert course.schedule[0].day is Weekday.MONDAY


def test_course_defaults():
    course = Course("c9", "Ethics", "PHIL 140")

    assert course.color == config.DEFAULT_COURSE_COLOR
    assert course.target_grade == config.DEFAULT_TARGET_GRADE
    assert course.credits == config.DEFAULT_CREDITS
    assert course.term is None
    assert course.schedule == ()


def test_course_replace(sample_course):
    updated = sample_course.replace(target_grade=85, term="SPRING 2026")

    assert updated.target_grade == 85.0
    assert updated.term == "SPRING 2026"
    assert sample_course.target_grade == 90.0


def test_course_replace_rejects_unknown_field(sample_course):
    with pytest.raises(TypeError):
        sample_course.replace(instructor="Dr. Smith")


def test_course_replace_rejects_id_change(sample_course):
    with pytest.raises(ValueError):
        sample_course.replace(id="c999")


@pytest.mark.parametrize("target", [-1, 101])
def test_target_grade_out_of_bounds(target):
    with pytest.raises(ValueError):
        Course("c9", "Ethics", "PHIL 140", target_grade=target)


@pytest.mark.parametrize("credits", [0, -3])
def test_credits_must_be_positive(credits):
    with pytest.raises(ValueError):
        Course("c9", "Ethics", "PHIL 140", credits=credits)


@pytest.mark.parametrize("credits", [True, 2.5, "3"])
def test_credits_must_be_whole_number(credits):
    with pytest.raises(TypeError):
        Course("c9", "Ethics", "PHIL 140", credits=credits)


def test_credits_accepts_integral_float():
    assert Course("c9", "Ethics", "PHIL 140", credits=4.0).credits == 4


def test_schedule_block_rejects_bad_time():
    with pytest.raises(TypeError):
        ScheduleBlock("Tue", "9am", "10:15")


def test_schedule_block_rejects_unknown_day():
    with pytest.raises(ValueError):
        ScheduleBlock("Monday", "09:00", "10:15")


def test_schedule_accepts_dicts():
    course = Course(
        "c9",
        "Ethics",
        "PHIL 140",
        schedule=[{"day": "Thu", "start_time": "13:00", "end_time": "14:20"}],
    )

    assert course.schedule == (ScheduleBlock("Thu", "13:00", "14:20"),)


def test_from_import_fills_defaults():
    course = Course.from_import(
        {"id": "ignored", "name": "Ethics", "code": "PHIL 140", "color": "", "credits": None},
        id="c-new",
    )

    assert course.id == "c-new"
    assert course.color == config.DEFAULT_COURSE_COLOR
    assert course.target_grade == config.DEFAULT_TARGET_GRADE
    assert course.credits == config.DEFAULT_CREDITS


def test_from_import_requires_code():
    with pytest.raises(KeyError):
        Course.from_import({"name": "Ethics"}, id="c-new")


def test_course_to_str(sample_course):
    assert str(sample_course) == "COURSE: THTR 274A Theatre History (ID: c001)"

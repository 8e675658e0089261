# tests/test_status_resolver.py

import datetime

import pytest

from core.status_resolver import (
    AVAILABLE_LABEL,
    default_term_bounds,
    resolve_display_status,
    term_progress,
)
from models.graded_item import ItemStatus


def _due_in(item, now, days):
    return item.replace(due_date=now + datetime.timedelta(days=days))


def test_not_started_far_out_is_available(ungraded_item, now):
    status = resolve_display_status(_due_in(ungraded_item, now, 20), now)

    assert status.label == AVAILABLE_LABEL
    assert status.is_available


def test_not_started_close_is_not_started(ungraded_item, now):
    status = resolve_display_status(_due_in(ungraded_item, now, 10), now)

    assert status.label == "Not Started"
    assert not status.is_available


def test_window_boundary_is_not_available(ungraded_item, now):
    status = resolve_display_status(_due_in(ungraded_item, now, 14), now)

    assert status.label == "Not Started"


def test_overdue_not_started_stays_not_started(ungraded_item, now):
    assert resolve_display_status(_due_in(ungraded_item, now, -3), now).label == "Not Started"


@pytest.mark.parametrize(
    "stored",
    [ItemStatus.IN_PROGRESS, ItemStatus.NOT_SUBMITTED, ItemStatus.SUBMITTED],
)
def test_other_statuses_pass_through(ungraded_item, now, stored):
    item = _due_in(ungraded_item, now, 30).replace(status=stored)

    status = resolve_display_status(item, now)

    assert status.label == stored.value
    assert not status.is_available


def test_status_changes_with_time_alone(ungraded_item, now):
    item = _due_in(ungraded_item, now, 20)
    later = now + datetime.timedelta(days=10)

    assert resolve_display_status(item, now).is_available
    assert not resolve_display_status(item, later).is_available
    assert item.status is ItemStatus.NOT_STARTED


def test_aware_due_date_with_naive_now(ungraded_item, now):
    item = ungraded_item.replace(due_date="2025-10-10T00:00:00Z")

    assert resolve_display_status(item, now).is_available


def test_default_term_bounds(now):
    assert default_term_bounds(now) == (
        datetime.datetime(2025, 9, 1),
        datetime.datetime(2025, 12, 20),
    )


def test_term_progress(sample_ledger, now):
    progress = term_progress(sample_ledger.term_start, sample_ledger.term_end, now)

    assert progress.total_days == 110
    assert progress.elapsed_days == 15
    assert progress.days_left == 96
    assert progress.percent == pytest.approx(15 / 110 * 100)


def test_term_progress_uses_default_bounds(sample_ledger, now):
    assert term_progress(None, None, now) == term_progress(
        sample_ledger.term_start, sample_ledger.term_end, now
    )


def test_term_progress_after_term(sample_ledger):
    later = datetime.datetime(2026, 1, 10)
    progress = term_progress(sample_ledger.term_start, sample_ledger.term_end, later)

    assert progress.days_left == 0
    assert progress.percent == 100


def test_term_progress_before_term(sample_ledger):
    earlier = datetime.datetime(2025, 8, 1)
    progress = term_progress(sample_ledger.term_start, sample_ledger.term_end, earlier)

    assert progress.percent == 0
    assert progress.days_left == 141

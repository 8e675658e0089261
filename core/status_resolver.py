# core/status_resolver.py

"""
Derives display-time views from stored data and the current time.

Nothing here is cached. The same graded item reads as "Available" while its due date is more than
`config.AVAILABLE_WINDOW_DAYS` away and as "Not Started" once it comes closer, with no stored transition.
"""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass

import core.config as config
from core.formatters import align_to
from models.graded_item import GradedItem, ItemStatus

AVAILABLE_LABEL = "Available"

_DAY = datetime.timedelta(days=1)


@dataclass(frozen=True)
class DisplayStatus:
    label: str
    is_available: bool


@dataclass(frozen=True)
class TermProgress:
    total_days: int
    elapsed_days: int
    days_left: int
    percent: float


def resolve_display_status(item: GradedItem, now: datetime.datetime) -> DisplayStatus:
    """
    Resolves the label shown for a graded item at time `now`.

    - Not started and due more than 14 days out: "Available".
    - Not started otherwise: "Not Started".
    - Any other stored status: the status label unchanged.
    """
    if item.status is not ItemStatus.NOT_STARTED:
        return DisplayStatus(label=item.status.value, is_available=False)

    now = align_to(now, item.due_date)
    window = datetime.timedelta(days=config.AVAILABLE_WINDOW_DAYS)

    if item.due_date - now > window:
        return DisplayStatus(label=AVAILABLE_LABEL, is_available=True)

    return DisplayStatus(label=ItemStatus.NOT_STARTED.value, is_available=False)


def default_term_bounds(now: datetime.datetime) -> tuple[datetime.datetime, datetime.datetime]:
    start_month, start_day = config.DEFAULT_TERM_START
    end_month, end_day = config.DEFAULT_TERM_END

    return (
        now.replace(month=start_month, day=start_day, hour=0, minute=0, second=0, microsecond=0),
        now.replace(month=end_month, day=end_day, hour=0, minute=0, second=0, microsecond=0),
    )


def term_progress(
    term_start: datetime.datetime | None,
    term_end: datetime.datetime | None,
    now: datetime.datetime,
) -> TermProgress:
    """
    Computes how far `now` is through the term.

    Missing bounds fall back to the default term of the current year. Day counts round up, `days_left`
    never goes below 0, and `percent` is clamped to 0 to 100.
    """
    reference = term_start or term_end
    if reference is not None:
        now = align_to(now, reference)

    default_start, default_end = default_term_bounds(now)
    start = term_start or default_start
    end = term_end or default_end

    total_days = math.ceil((end - start) / _DAY)
    elapsed_days = math.ceil((now - start) / _DAY)
    days_left = max(0, math.ceil((end - now) / _DAY))

    if total_days <= 0:
        percent = 100.0 if now >= end else 0.0
    else:
        percent = min(100.0, max(0.0, elapsed_days / total_days * 100))

    return TermProgress(
        total_days=total_days,
        elapsed_days=elapsed_days,
        days_left=days_left,
        percent=percent,
    )

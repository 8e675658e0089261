# core/grade_calculator.py

"""
Weighted-grade statistics over lists of graded items.

Every function here is pure and total: it reads the items it is given, never raises for empty or
ungraded input, and returns plain result objects. Sums use `math.fsum`, so results do not depend on
the order of the input.

Weights are percentages of the course grade and grades are percentages from 0 to 100, so an item
contributes `weight * grade / 100` points.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import core.config as config
from models.graded_item import GradedItem, ItemStatus, ItemType


@dataclass(frozen=True)
class WeightedAverage:
    """
    Weighted average over the graded subset of some items.

    scored_weight: total weight of items that have a grade.
    points_earned: sum of weight * grade / 100 over those items.
    average:       points_earned / scored_weight * 100, or 0 when nothing is scored.
    """

    scored_weight: float = 0.0
    points_earned: float = 0.0
    average: float = 0.0

    @property
    def has_scores(self) -> bool:
        return self.scored_weight > 0


@dataclass(frozen=True)
class TypeBreakdown:
    type: ItemType
    total_weight: float
    average: float
    scored_weight: float
    items: tuple[GradedItem, ...]


@dataclass(frozen=True)
class WeightReport:
    total: float
    difference: float  # total minus the expected 100
    is_balanced: bool


@dataclass(frozen=True)
class GradeProjection:
    """Final grade if every ungraded item scored 0."""

    total_score: float
    total_weight: float


@dataclass(frozen=True)
class RequiredAverage:
    """
    Average needed across the remaining ungraded weight to reach a target.

    `required` is None when no ungraded weight remains; `achievable` then only says whether the target is
    already met.
    """

    target: float
    achieved_so_far: float
    remaining_weight: float
    required: float | None
    achievable: bool


def weighted_average(items: Iterable[GradedItem]) -> WeightedAverage:
    scored = [item for item in items if item.grade_received is not None]

    scored_weight = math.fsum(item.weight for item in scored)
    points_earned = math.fsum(item.weight * item.grade_received / 100 for item in scored)

    if scored_weight <= 0:
        return WeightedAverage()

    return WeightedAverage(
        scored_weight=scored_weight,
        points_earned=points_earned,
        average=points_earned / scored_weight * 100,
    )


def breakdown_by_type(items: Iterable[GradedItem]) -> list[TypeBreakdown]:
    """
    Groups items by type and computes a weighted average per group.

    Returns:
        One `TypeBreakdown` per type present in `items`, in `ItemType` declaration order.
        Types with no items are omitted.
    """
    grouped: dict[ItemType, list[GradedItem]] = {}

    for item in items:
        grouped.setdefault(item.type, []).append(item)

    breakdown = []

    for item_type in ItemType:
        group = grouped.get(item_type)
        if not group:
            continue

        stats = weighted_average(group)
        breakdown.append(
            TypeBreakdown(
                type=item_type,
                total_weight=math.fsum(item.weight for item in group),
                average=stats.average,
                scored_weight=stats.scored_weight,
                items=tuple(group),
            )
        )

    return breakdown


def gap_to_target(current_average: float, target_grade: float) -> float:
    """Points still needed to reach `target_grade`; zero or negative once the target is met."""
    return target_grade - current_average


def total_weight(items: Iterable[GradedItem]) -> float:
    return math.fsum(item.weight for item in items)


def weight_report(
    items: Iterable[GradedItem],
    tolerance: float = config.WEIGHT_TOTAL_TOLERANCE,
) -> WeightReport:
    """
    Reports how far a course's weights are from summing to 100.

    Nothing is enforced; callers decide whether to warn.
    """
    total = total_weight(items)
    difference = total - config.EXPECTED_WEIGHT_TOTAL

    return WeightReport(
        total=total,
        difference=difference,
        is_balanced=abs(difference) <= tolerance,
    )


def completion_progress(items: Iterable[GradedItem]) -> float:
    """
    Percentage of total weight carried by submitted items.

    Returns 0 when the items carry no weight.
    """
    items = list(items)
    weight = total_weight(items)

    if weight <= 0:
        return 0.0

    submitted = math.fsum(
        item.weight for item in items if item.status is ItemStatus.SUBMITTED
    )
    return submitted / weight * 100


def project_final_grade(items: Iterable[GradedItem]) -> GradeProjection:
    """
    Projects a final grade with every ungraded item counted as 0.

    Used for what-if scenarios: callers pass a scratch list with hypothetical grades filled in.
    """
    items = list(items)

    return GradeProjection(
        total_score=math.fsum(
            item.weight * (item.grade_received or 0) / 100 for item in items
        ),
        total_weight=total_weight(items),
    )


def required_average(items: Iterable[GradedItem], target: float) -> RequiredAverage:
    """
    Computes the average needed on the ungraded items to finish at `target`.

    Args:
        items (Iterable[GradedItem]): All items of one course.
        target (float): The desired final grade, 0 to 100.

    Returns:
        RequiredAverage: `required` may be negative (target already secured) or above 100 (out of reach);
        `achievable` is True when it is at most 100.
    """
    items = list(items)
    achieved = weighted_average(items).points_earned
    remaining = math.fsum(item.weight for item in items if item.grade_received is None)
    needed = target - achieved

    if remaining <= 0:
        return RequiredAverage(
            target=target,
            achieved_so_far=achieved,
            remaining_weight=0.0,
            required=None,
            achievable=needed <= 0,
        )

    required = needed / (remaining / 100)

    return RequiredAverage(
        target=target,
        achieved_so_far=achieved,
        remaining_weight=remaining,
        required=required,
        achievable=required <= 100,
    )

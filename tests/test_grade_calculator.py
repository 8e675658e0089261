# tests/test_grade_calculator.py

import pytest

import core.grade_calculator as grade_calculator
from models.graded_item import ItemStatus, ItemType


def test_weighted_average(item_a, item_b):
    result = grade_calculator.weighted_average([item_a, item_b])

    assert result.scored_weight == pytest.approx(100)
    assert result.points_earned == pytest.approx(86)
    assert result.average == pytest.approx(86)
    assert result.has_scores


def test_weighted_average_ignores_ungraded(item_a, item_b, ungraded_item):
    with_ungraded = grade_calculator.weighted_average([item_a, ungraded_item, item_b])

    assert with_ungraded == grade_calculator.weighted_average([item_a, item_b])


def test_weighted_average_of_nothing():
    result = grade_calculator.weighted_average([])

    assert result == grade_calculator.WeightedAverage(0, 0, 0)
    assert not result.has_scores


def test_weighted_average_of_only_ungraded(ungraded_item):
    assert grade_calculator.weighted_average([ungraded_item]) == grade_calculator.WeightedAverage()


def test_weighted_average_zero_weight_scores_nothing(item_a):
    result = grade_calculator.weighted_average([item_a.replace(weight=0)])

    assert result.average == 0
    assert result.scored_weight == 0


def test_weighted_average_is_order_independent(item_a, item_b, other_course_item):
    items = [item_a.replace(weight=33.3), item_b.replace(weight=0.1), other_course_item]

    assert grade_calculator.weighted_average(items) == grade_calculator.weighted_average(
        list(reversed(items))
    )


def test_zero_grade_counts(item_a, item_b):
    result = grade_calculator.weighted_average([item_a.replace(grade_received=0), item_b])

    assert result.scored_weight == pytest.approx(100)
    assert result.average == pytest.approx(32)


def test_breakdown_by_type(item_a, item_b, ungraded_item):
    breakdown = grade_calculator.breakdown_by_type([ungraded_item, item_a, item_b])

    assert [group.type for group in breakdown] == [ItemType.LAB, ItemType.MIDTERM, ItemType.FINAL]

    lab, midterm, final = breakdown
    assert lab.total_weight == pytest.approx(40)
    assert lab.average == pytest.approx(80)
    assert midterm.items == (item_a,)
    assert final.total_weight == pytest.approx(30)
    assert final.scored_weight == 0
    assert final.average == 0


def test_breakdown_of_nothing():
    assert grade_calculator.breakdown_by_type([]) == []


def test_gap_to_target():
    assert grade_calculator.gap_to_target(86, 90) == pytest.approx(4)
    assert grade_calculator.gap_to_target(95, 90) == pytest.approx(-5)


def test_weight_report(item_a, item_b, ungraded_item):
    balanced = grade_calculator.weight_report([item_a, item_b])
    over = grade_calculator.weight_report([item_a, item_b, ungraded_item])

    assert balanced.is_balanced
    assert balanced.difference == pytest.approx(0)
    assert over.total == pytest.approx(130)
    assert over.difference == pytest.approx(30)
    assert not over.is_balanced


def test_completion_progress(item_a, item_b, ungraded_item):
    assert grade_calculator.completion_progress([item_a, item_b, ungraded_item]) == pytest.approx(
        100 / 130 * 100
    )
    assert grade_calculator.completion_progress([ungraded_item]) == 0


def test_completion_progress_without_weight(item_a):
    assert grade_calculator.completion_progress([item_a.replace(weight=0)]) == 0
    assert grade_calculator.completion_progress([]) == 0


def test_project_final_grade(item_a, item_b, ungraded_item):
    projection = grade_calculator.project_final_grade([item_a, item_b, ungraded_item])

    assert projection.total_score == pytest.approx(86)
    assert projection.total_weight == pytest.approx(130)


def test_project_final_grade_with_hypothetical_score(item_a, ungraded_item):
    projection = grade_calculator.project_final_grade(
        [item_a, ungraded_item.replace(grade_received=100, status=ItemStatus.SUBMITTED)]
    )

    assert projection.total_score == pytest.approx(84)


def test_required_average(item_a, ungraded_item):
    reachable = grade_calculator.required_average([item_a, ungraded_item], target=80)
    out_of_reach = grade_calculator.required_average([item_a, ungraded_item], target=90)

    assert reachable.achieved_so_far == pytest.approx(54)
    assert reachable.remaining_weight == pytest.approx(30)
    assert reachable.required == pytest.approx(26 / 30 * 100)
    assert reachable.achievable

    assert out_of_reach.required == pytest.approx(120)
    assert not out_of_reach.achievable


def test_required_average_when_fully_graded(item_a, item_b):
    met = grade_calculator.required_average([item_a, item_b], target=80)
    missed = grade_calculator.required_average([item_a, item_b], target=90)

    assert met.required is None
    assert met.achievable
    assert missed.required is None
    assert not missed.achievable

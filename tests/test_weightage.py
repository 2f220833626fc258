from decimal import Decimal

from apps.goals.items import GoalItem
from apps.goals.weightage import (
    WEIGHTAGE_LIMIT, is_over_limit, item_weightage, remaining_weightage, summary, total_weightage,
)


def test_total_sums_item_weightages():
    assert total_weightage([{"weightage": 60}, {"weightage": 40}]) == 100


def test_unusable_weightages_count_as_zero():
    items = [{"weightage": None}, {}, {"weightage": "abc"}, {"weightage": True}, {"weightage": float("nan")}]
    assert total_weightage(items) == 0


def test_numeric_strings_and_floats_are_accepted():
    assert item_weightage({"weightage": " 25 "}) == 25
    assert item_weightage({"weightage": 12.9}) == 12
    assert item_weightage({"weightage": Decimal("7")}) == 7


def test_accepts_goal_item_instances():
    assert total_weightage([GoalItem(weightage=30), GoalItem(weightage=20)]) == 50


def test_empty_plan_totals_zero():
    assert total_weightage([]) == 0
    assert total_weightage(None) == 0


def test_limit_is_inclusive():
    assert WEIGHTAGE_LIMIT == 100
    assert not is_over_limit([{"weightage": 100}])
    assert is_over_limit([{"weightage": 60}, {"weightage": 41}])


def test_remaining_goes_negative_when_over():
    assert remaining_weightage([{"weightage": 70}]) == 30
    assert remaining_weightage([{"weightage": 70}, {"weightage": 40}]) == -10


def test_summary():
    assert summary([{"weightage": 110}]) == {
        "total_weightage": 110,
        "remaining_weightage": -10,
        "is_over_limit": True,
        "limit": 100,
    }

from apps.goals.items import (
    GoalItem, merge_actuals, missing_actual_errors, normalize_items, required_field_errors, schema_errors,
)
from .factories import goal_item


def test_normalize_assigns_missing_ids_and_keeps_order():
    items = normalize_items([goal_item(10, client="First"), goal_item(20, id="keep", client="Second")])
    assert [i["client"] for i in items] == ["First", "Second"]
    assert items[0]["id"]
    assert items[1]["id"] == "keep"


def test_normalize_replaces_repeated_ids():
    items = normalize_items([goal_item(id="x"), goal_item(id="x")])
    assert items[0]["id"] == "x"
    assert items[1]["id"] != "x"


def test_normalize_drops_unknown_keys():
    items = normalize_items([dict(goal_item(id="a"), colour="red")])
    assert "colour" not in items[0]
    assert set(items[0]) == {"id", "client", "bucket", "line_item", "weightage", "target", "actual"}


def test_required_fields_treat_whitespace_as_empty():
    errors = required_field_errors([goal_item(client="  ", target="")])
    assert set(errors) == {"items[0].client", "items[0].target"}


def test_at_least_one_item_is_required():
    assert "items" in required_field_errors([])


def test_missing_actuals():
    errors = missing_actual_errors([goal_item(actual="9"), goal_item(actual=" ")])
    assert list(errors) == ["items[1].actual"]
    assert GoalItem(actual="3").has_actual


def test_schema_rejects_out_of_range_weightage():
    errors = schema_errors([goal_item(150, id="a")])
    assert "items[0].weightage" in errors


def test_merge_actuals_only_touches_actual():
    approved = [goal_item(60, id="a", target="10"), goal_item(40, id="b")]
    submitted = [{"id": "a", "actual": "12", "target": "changed", "weightage": 99}, {"id": "zzz", "actual": "1"}]
    merged = merge_actuals(approved, submitted)
    assert merged[0]["actual"] == "12"
    assert merged[0]["target"] == "10"
    assert merged[0]["weightage"] == 60
    assert merged[1]["actual"] is None
    assert approved[0]["actual"] is None

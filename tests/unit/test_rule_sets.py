"""Unit tests for rule set loading, validation, and selection"""

import json
import pytest
from datetime import date
from decimal import Decimal
from ledger_balance.domain.rule_sets import RuleSetCollection, validate_rule_sets


VALID_RULE_SET = {
    "overduePercentage": "0.015",
    "minOverdueCharge": "5",
    "daysOverdueForRep": "30",
    "daysOverdueForAgency": "90",
}


def test_valid_collection_from_mapping(raw_rule_sets):
    """Test mapping input with well-formed rule sets"""
    collection = RuleSetCollection(raw_rule_sets)

    assert collection.validate() is True
    assert len(collection) == 2


def test_valid_collection_from_json(raw_rule_sets):
    """Test JSON text input decodes to the same collection"""
    collection = RuleSetCollection(json.dumps(raw_rule_sets))

    assert collection.validate() is True
    assert collection.pick_rule_set(date(2016, 3, 1)) == RuleSetCollection(raw_rule_sets).pick_rule_set(
        date(2016, 3, 1)
    )


def test_numeric_json_values_accepted():
    """Test numbers are accepted as well as numeric strings"""
    collection = RuleSetCollection(
        {"2015-01-01": {"overduePercentage": 0.015, "minOverdueCharge": 5, "daysOverdueForRep": 30, "daysOverdueForAgency": 90}}
    )

    assert collection.validate() is True
    rule_set = collection.pick_rule_set(date(2015, 1, 1))
    assert rule_set.overdue_percentage == Decimal("0.015")
    assert rule_set.days_overdue_for_agency == 90


def test_small_float_percentage_accepted():
    """Test floats that JSON renders in exponent form are read as plain decimals"""
    collection = RuleSetCollection(
        {"2015-01-01": {"overduePercentage": 1e-05, "minOverdueCharge": 0.0, "daysOverdueForRep": 30, "daysOverdueForAgency": 90}}
    )

    assert collection.validate() is True
    rule_set = collection.pick_rule_set(date(2015, 1, 1))
    assert rule_set.overdue_percentage == Decimal("0.00001")
    assert rule_set.min_overdue_charge == Decimal("0")


@pytest.mark.parametrize(
    "raw",
    [
        {},
        [],
        None,
        "not json at all",
        "[1, 2, 3]",
    ],
)
def test_empty_or_malformed_input_is_invalid(raw):
    """Test empty collections and undecodable input are rejected"""
    assert validate_rule_sets(raw) is False


def test_bad_date_key_invalidates_collection():
    """Test every key must be a strict YYYY-MM-DD calendar date"""
    assert validate_rule_sets({"2015-1-1": VALID_RULE_SET}) is False
    assert validate_rule_sets({"2015-02-30": VALID_RULE_SET}) is False
    assert validate_rule_sets({"2015-01-01": VALID_RULE_SET, "current": VALID_RULE_SET}) is False


@pytest.mark.parametrize("field", list(VALID_RULE_SET))
def test_missing_field_rejects_rule_set(field):
    """Test a rule set missing any one required field is rejected"""
    rule_set = {k: v for k, v in VALID_RULE_SET.items() if k != field}

    assert validate_rule_sets({"2015-01-01": rule_set}) is False


@pytest.mark.parametrize(
    "field, value",
    [
        ("overduePercentage", "-0.015"),
        ("overduePercentage", "1.5%"),
        ("minOverdueCharge", "five"),
        ("daysOverdueForRep", "30.5"),
        ("daysOverdueForAgency", "-90"),
        ("daysOverdueForAgency", True),
    ],
)
def test_malformed_field_rejects_rule_set(field, value):
    """Test money fields must be non-negative decimals and day fields non-negative integers"""
    rule_set = dict(VALID_RULE_SET, **{field: value})

    assert validate_rule_sets({"2015-01-01": rule_set}) is False


def test_one_bad_rule_set_invalidates_whole_collection():
    """Test a single rejected entry makes the collection invalid"""
    collection = RuleSetCollection(
        {
            "2015-01-01": VALID_RULE_SET,
            "2016-01-01": dict(VALID_RULE_SET, minOverdueCharge="n/a"),
        }
    )

    assert collection.validate() is False


def test_rep_threshold_may_exceed_agency_threshold():
    """Test threshold ordering is not enforced"""
    assert validate_rule_sets(
        {"2015-01-01": dict(VALID_RULE_SET, daysOverdueForRep="120", daysOverdueForAgency="60")}
    ) is True


def test_pick_rule_set_latest_start_on_or_before_date(rule_sets):
    """Test selection of the rule set with the greatest start date <= query date"""
    lenient = rule_sets.pick_rule_set(date(2015, 1, 1))
    strict = rule_sets.pick_rule_set(date(2016, 3, 1))

    assert lenient.min_overdue_charge == Decimal("5")
    assert rule_sets.pick_rule_set(date(2016, 2, 29)) == lenient
    assert strict.min_overdue_charge == Decimal("2.50")
    assert rule_sets.pick_rule_set(date(2030, 1, 1)) == strict


def test_pick_rule_set_before_first_start_date(rule_sets):
    """Test no rule set applies before the earliest start date"""
    assert rule_sets.pick_rule_set(date(2014, 12, 31)) is None


def test_pick_rule_set_ignores_key_order():
    """Test selection does not depend on mapping insertion order"""
    collection = RuleSetCollection(
        {
            "2017-01-01": dict(VALID_RULE_SET, daysOverdueForRep="3"),
            "2015-01-01": dict(VALID_RULE_SET, daysOverdueForRep="1"),
            "2016-01-01": dict(VALID_RULE_SET, daysOverdueForRep="2"),
        }
    )

    assert collection.pick_rule_set(date(2016, 6, 1)).days_overdue_for_rep == 2
    assert collection.pick_rule_set(date(2017, 6, 1)).days_overdue_for_rep == 3


def test_overdue_charge_uses_larger_of_percentage_and_minimum(rule_sets):
    """Test fee pricing: percentage of amount, floored at the minimum charge"""
    rule_set = rule_sets.pick_rule_set(date(2015, 6, 1))

    assert rule_set.overdue_charge(Decimal("100")) == Decimal("5")  # 1.50 < 5
    assert rule_set.overdue_charge(Decimal("1000")) == Decimal("15.000")

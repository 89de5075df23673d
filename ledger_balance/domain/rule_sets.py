"""Date-keyed collection of company billing rule sets"""

import logging
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ledger_balance.domain.models import RuleSet
from ledger_balance.utils.date_utils import parse_iso_date
from ledger_balance.utils.json_utils import decode_if_json, number_text

logger = logging.getLogger(__name__)

DECIMAL_PATTERN = re.compile(r"^(?:\d+|\d*\.\d+)$")
INTEGER_PATTERN = re.compile(r"^\d+$")

# Required field name -> (pattern, attribute on RuleSet)
REQUIRED_RULE_FIELDS = {
    "overduePercentage": (DECIMAL_PATTERN, "overdue_percentage"),
    "minOverdueCharge": (DECIMAL_PATTERN, "min_overdue_charge"),
    "daysOverdueForRep": (INTEGER_PATTERN, "days_overdue_for_rep"),
    "daysOverdueForAgency": (INTEGER_PATTERN, "days_overdue_for_agency"),
}


def _invalid_rule_fields(raw_rule_set: Any) -> List[str]:
    """Names of required fields that are missing or malformed"""
    if not isinstance(raw_rule_set, dict):
        return list(REQUIRED_RULE_FIELDS)

    invalid = []
    for name, (pattern, _) in REQUIRED_RULE_FIELDS.items():
        value = raw_rule_set.get(name)
        if value is None or isinstance(value, bool) or not pattern.match(number_text(value)):
            invalid.append(name)
    return invalid


def _build_rule_set(raw_rule_set: Dict[str, Any]) -> RuleSet:
    values = {}
    for name, (pattern, attribute) in REQUIRED_RULE_FIELDS.items():
        text = number_text(raw_rule_set[name])
        values[attribute] = int(text) if pattern is INTEGER_PATTERN else Decimal(text)
    return RuleSet(**values)


class RuleSetCollection:
    """
    Billing policy versions keyed by the date each one comes into effect.

    A rule set applies to every date from its start date up to the day before
    the next rule set starts. Input is either a mapping of
    ``{"YYYY-MM-DD": {field: value}}`` or the equivalent JSON text.

    Example:
        {"2015-10-23": {"overduePercentage": ".015", "minOverdueCharge": "5",
                        "daysOverdueForRep": "30", "daysOverdueForAgency": "90"}}
    """

    def __init__(self, raw_rule_sets: Any):
        self.raw_rule_sets = decode_if_json(raw_rule_sets)
        self._rule_sets: Dict[date, RuleSet] = {}
        self._valid = self._load()

    def _load(self) -> bool:
        if not isinstance(self.raw_rule_sets, dict) or not self.raw_rule_sets:
            logger.warning("Rule sets must be a non-empty mapping of start date to rule set")
            return False

        valid = True
        for start_date, raw_rule_set in self.raw_rule_sets.items():
            try:
                effective = parse_iso_date(start_date)
            except ValueError:
                logger.warning("Rule set key is not a date", extra={"start_date": str(start_date)})
                valid = False
                continue

            invalid_fields = _invalid_rule_fields(raw_rule_set)
            if invalid_fields:
                logger.warning(
                    "Rule set rejected",
                    extra={"start_date": start_date, "invalid_fields": invalid_fields},
                )
                valid = False
                continue

            self._rule_sets[effective] = _build_rule_set(raw_rule_set)
        return valid

    def validate(self) -> bool:
        """True if the collection is non-empty and every rule set is well formed"""
        return self._valid

    def pick_rule_set(self, on_date: date) -> Optional[RuleSet]:
        """
        Rule set in effect on the given date.

        Returns the rule set with the latest start date on or before on_date,
        or None when every rule set starts after it.
        """
        eligible = [start for start in self._rule_sets if start <= on_date]
        if not eligible:
            return None
        return self._rule_sets[max(eligible)]

    def __len__(self) -> int:
        return len(self._rule_sets)


def validate_rule_sets(raw_rule_sets: Any) -> bool:
    """Boundary check: whether raw rule sets (mapping or JSON) are usable"""
    return RuleSetCollection(raw_rule_sets).validate()

"""Validation and normalization of raw ledger events"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ledger_balance.domain.exceptions import FieldParseError
from ledger_balance.domain.models import LedgerEvent
from ledger_balance.utils.date_utils import parse_iso_date
from ledger_balance.utils.json_utils import decode_if_json, number_text

AMOUNT_PATTERN = re.compile(r"^-?(?:\d+|\d*\.\d+)$")
NET_DAYS_PATTERN = re.compile(r"^\d+$")

REQUIRED_EVENT_FIELDS = ("date", "amount", "description", "notes", "netD")
RESERVED_EVENT_FIELDS = ("overdueFeeCreated",)  # only the engine may set these


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        raise FieldParseError(f"{value!r} is not a number")
    return number_text(value)


def parse_event_date(value: Any) -> date:
    """Parse the date of an event, which must be a real YYYY-MM-DD calendar date"""
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise FieldParseError(str(e)) from e


def parse_amount(value: Any) -> Decimal:
    """Parse a signed decimal amount; positive is a credit, negative a debit"""
    text = _as_text(value)
    if not AMOUNT_PATTERN.match(text):
        raise FieldParseError(f"{text!r} is not a signed decimal")
    return Decimal(text)


def parse_net_days(value: Any) -> int:
    """Parse the non-negative number of days until a credit is due"""
    text = _as_text(value)
    if not NET_DAYS_PATTERN.match(text):
        raise FieldParseError(f"{text!r} is not a non-negative integer")
    return int(text)


FIELD_PARSERS = {
    "amount": parse_amount,
    "netD": parse_net_days,
}


@dataclass
class ValidationError:
    """A single problem found in one ledger event"""

    index: int
    field: str
    kind: str  # "missing" | "invalid" | "not_a_date" | "malformed"
    message: str


@dataclass
class ValidationResult:
    """Every error found in a batch, plus the normalized events when there are none"""

    errors: List[ValidationError] = field(default_factory=list)
    events: List[LedgerEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]

    def error_text(self) -> str:
        return "\n".join(self.messages)


class EventValidator:
    """
    Check a batch of raw ledger events for missing or malformed fields.

    Validation is exhaustive rather than fail-fast: every event and every
    field is checked so that an operator can correct all data-entry errors
    in one pass.
    """

    def validate(self, raw_events: Any) -> ValidationResult:
        raw_events = decode_if_json(raw_events)
        result = ValidationResult()

        if not isinstance(raw_events, list):
            result.errors.append(
                ValidationError(
                    index=-1,
                    field="accountHistory",
                    kind="malformed",
                    message="Invalid accountHistory: expected a list of account events",
                )
            )
            return result

        for index, raw_event in enumerate(raw_events):
            if not isinstance(raw_event, dict):
                result.errors.append(
                    ValidationError(
                        index=index,
                        field="accountEvent",
                        kind="malformed",
                        message=f"Invalid accountEvent: entry {index} is not an object",
                    )
                )
                continue
            result.errors.extend(self._check_event(index, raw_event))

        if result.ok:
            result.events = [self._normalize(raw_event) for raw_event in raw_events]
        return result

    def _check_event(self, index: int, raw_event: Dict[str, Any]) -> List[ValidationError]:
        errors = []
        label = raw_event.get("date", "")

        if "date" in raw_event:
            try:
                parse_event_date(raw_event["date"])
            except FieldParseError:
                errors.append(
                    ValidationError(
                        index=index,
                        field="date",
                        kind="not_a_date",
                        message=f"Invalid accountEvent Field Data: {label} is not a date!",
                    )
                )

        for name in REQUIRED_EVENT_FIELDS:
            if raw_event.get(name) is None:
                errors.append(
                    ValidationError(
                        index=index,
                        field=name,
                        kind="missing",
                        message=f"Missing Field: Field {name} from {label}",
                    )
                )
                continue

            parser = FIELD_PARSERS.get(name)
            if parser is None:
                continue
            try:
                parser(raw_event[name])
            except FieldParseError:
                errors.append(
                    ValidationError(
                        index=index,
                        field=name,
                        kind="invalid",
                        message=f"Invalid accountEvent Field Data: Field {name} for {label}",
                    )
                )

        for name in RESERVED_EVENT_FIELDS:
            if name in raw_event:
                errors.append(
                    ValidationError(
                        index=index,
                        field=name,
                        kind="invalid",
                        message=f"Invalid accountEvent Field Data: Field {name} for {label}",
                    )
                )

        return errors

    @staticmethod
    def _normalize(raw_event: Dict[str, Any]) -> LedgerEvent:
        return LedgerEvent(
            date=parse_event_date(raw_event["date"]),
            amount=parse_amount(raw_event["amount"]),
            description=str(raw_event["description"]),
            notes=str(raw_event["notes"]),
            net_days=parse_net_days(raw_event["netD"]),
        )

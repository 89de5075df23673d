"""Domain-specific exceptions"""

from datetime import date
from typing import List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRuleSetsError(DomainException):
    """Rule set collection is empty or contains a malformed rule set"""

    def __init__(self, message: str = "Invalid ruleSets"):
        super().__init__(message)


class InvalidLedgerEventsError(DomainException):
    """One or more ledger events failed validation"""

    def __init__(self, messages: List[str]):
        super().__init__("\n".join(messages))
        self.messages = messages


class RuleSetNotFoundError(DomainException):
    """No rule set is in effect on the date of a ledger event"""

    def __init__(self, event_date: date):
        super().__init__(f"Rule Set not found for {event_date.isoformat()}")
        self.event_date = event_date


class FieldParseError(DomainException):
    """A single raw field could not be parsed into its typed value"""

    pass

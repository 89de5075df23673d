"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from ledger_balance.utils.date_utils import add_days


class EscalationFlag(str, Enum):
    """Collection escalation levels, least severe first"""

    NO_UNPAID_CREDITS = "No unpaid credits"
    UNPAID_NOT_LATE = "Unpaid credits but none late"
    OVERDUE_CREDIT = "Overdue credit"
    INTERNAL_REP = "Use internal collection representative"
    EXTERNAL_AGENCY = "Use external collection agency"

    @property
    def severity(self) -> int:
        return list(EscalationFlag).index(self)


@dataclass(frozen=True)
class RuleSet:
    """One version of the company billing policy"""

    overdue_percentage: Decimal  # .015 is 1.5%
    min_overdue_charge: Decimal
    days_overdue_for_rep: int
    days_overdue_for_agency: int

    def overdue_charge(self, amount_overdue: Decimal) -> Decimal:
        """Percentage of the overdue amount, or the minimum charge if that is larger"""
        return max(self.overdue_percentage * amount_overdue, self.min_overdue_charge)


@dataclass
class LedgerEvent:
    """A credit (positive amount) or debit (negative amount) on the account"""

    date: date
    amount: Decimal
    description: str
    notes: str
    net_days: int
    overdue_fee_created: bool = False
    is_overdue_fee: bool = False  # generated by the engine, never supplied by callers

    @property
    def due_date(self) -> date:
        """Date from which the amount counts as overdue; fees are owed from the day they are charged"""
        if self.is_overdue_fee:
            return self.date
        return add_days(self.date, self.net_days)

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "date": self.date.isoformat(),
            "amount": float(self.amount),
            "description": self.description,
            "notes": self.notes,
            "netD": self.net_days,
        }
        if self.overdue_fee_created:
            row["overdueFeeCreated"] = True
        return row


@dataclass
class BalanceSnapshot:
    """Output of a balance computation; only error_messages is set on failure"""

    net_balance: Optional[Decimal] = None
    overdue_balance: Optional[Decimal] = None
    escalation_flag: Optional[EscalationFlag] = None
    balance_timeline: List[LedgerEvent] = field(default_factory=list)
    error_messages: str = ""

    @property
    def ok(self) -> bool:
        return not self.error_messages

    @classmethod
    def failed(cls, error_messages: str) -> "BalanceSnapshot":
        return cls(error_messages=error_messages)

    def to_dict(self) -> Dict[str, Any]:
        if not self.ok:
            return {"errorMessages": self.error_messages}
        return {
            "escalationFlag": self.escalation_flag.value,
            "overdueBalance": float(self.overdue_balance),
            "netBalance": float(self.net_balance),
            "balanceTimeline": [event.to_dict() for event in self.balance_timeline],
        }

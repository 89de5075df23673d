"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Any, Dict, List, Optional, Union

from ledger_balance.domain.models import BalanceSnapshot, LedgerEvent


class CamelModel(BaseModel):
    """Base schema whose JSON keys are camelCase, matching the domain records"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuleSetValidationRequest(CamelModel):
    """Request body for POST /v1/rule-sets/validate"""

    rule_sets: Union[Dict[str, Any], str] = Field(
        ..., description="Rule sets keyed by start date (YYYY-MM-DD), or the same as JSON text"
    )


class RuleSetValidationResponse(CamelModel):
    """Response for POST /v1/rule-sets/validate"""

    valid: bool


class BalanceRequest(CamelModel):
    """Request body for POST /v1/balance"""

    rule_sets: Union[Dict[str, Any], str] = Field(
        ..., description="Rule sets keyed by start date (YYYY-MM-DD), or the same as JSON text"
    )
    account_history: Union[List[Any], str] = Field(
        ..., description="Credit/debit events, or the same as JSON text"
    )
    as_of: Optional[date] = Field(None, description="Evaluation date (default: today)")


class TimelineEntrySchema(CamelModel):
    """Single row of the balance timeline"""

    date: date
    amount: float
    description: str
    notes: str
    net_d: int
    overdue_fee_created: bool = False

    @classmethod
    def from_event(cls, event: LedgerEvent) -> "TimelineEntrySchema":
        return cls(
            date=event.date,
            amount=float(event.amount),
            description=event.description,
            notes=event.notes,
            net_d=event.net_days,
            overdue_fee_created=event.overdue_fee_created,
        )


class BalanceResponse(CamelModel):
    """Response for POST /v1/balance"""

    net_balance: float
    overdue_balance: float
    escalation_flag: str
    balance_timeline: List[TimelineEntrySchema]

    @classmethod
    def from_snapshot(cls, snapshot: BalanceSnapshot) -> "BalanceResponse":
        return cls(
            net_balance=float(snapshot.net_balance),
            overdue_balance=float(snapshot.overdue_balance),
            escalation_flag=snapshot.escalation_flag.value,
            balance_timeline=[TimelineEntrySchema.from_event(e) for e in snapshot.balance_timeline],
        )

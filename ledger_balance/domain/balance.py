"""Balance engine - replays ledger events into a balance snapshot"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional

from ledger_balance.config import settings
from ledger_balance.domain.exceptions import (
    DomainException,
    InvalidLedgerEventsError,
    InvalidRuleSetsError,
    RuleSetNotFoundError,
)
from ledger_balance.domain.models import BalanceSnapshot, EscalationFlag, LedgerEvent, RuleSet
from ledger_balance.domain.rule_sets import RuleSetCollection
from ledger_balance.domain.validation import EventValidator
from ledger_balance.utils.date_utils import days_between

logger = logging.getLogger(__name__)


@dataclass
class _Ledger:
    """Working state owned by a single computation"""

    net_balance: Decimal = Decimal("0")
    funds: Decimal = Decimal("0")  # debited money not yet put towards a credit
    unpaid_credits: List[LedgerEvent] = field(default_factory=list)  # oldest first
    timeline: List[LedgerEvent] = field(default_factory=list)

    def append_timeline(self, entry: LedgerEvent) -> None:
        self.timeline.append(entry)

    def reposition_timeline(self, entry: LedgerEvent) -> None:
        """Move a mutated entry to the end so it sorts by its new date"""
        self.timeline = [row for row in self.timeline if row is not entry]
        self.timeline.append(entry)

    def sorted_timeline(self) -> List[LedgerEvent]:
        # stable: equal dates keep processing order
        return sorted(self.timeline, key=lambda row: row.date)


class BalanceEngine:
    """
    Compute the balance of one account from its credit/debit history.

    Credits are paid off oldest first (FIFO) from the pool of debited funds,
    partially if the funds do not cover them. A credit that is still unpaid
    on its due date is charged a single overdue fee, priced by the rule set
    in effect on the date the fee is discovered.

    The engine holds no per-account state: each call to compute() owns its
    own queue, funds pool and timeline.
    """

    def __init__(
        self,
        validator: Optional[EventValidator] = None,
        never_overdue_net_days: Optional[int] = None,
        net_balance_places: Optional[int] = None,
    ):
        self.validator = validator or EventValidator()
        self.never_overdue_net_days = (
            never_overdue_net_days if never_overdue_net_days is not None else settings.never_overdue_net_days
        )
        places = net_balance_places if net_balance_places is not None else settings.net_balance_places
        self.quantum = Decimal(1).scaleb(-places)

    def compute(
        self,
        raw_events: Any,
        rule_sets: RuleSetCollection,
        today: Optional[date] = None,
    ) -> BalanceSnapshot:
        """
        Replay the account history and compile the balance as of today.

        Failures never raise: invalid rule sets, invalid events, or an event
        dated before every rule set yield a snapshot carrying only
        error_messages, and no partial balance.
        """
        today = today or date.today()
        try:
            if not rule_sets.validate():
                raise InvalidRuleSetsError()

            result = self.validator.validate(raw_events)
            if not result.ok:
                raise InvalidLedgerEventsError(result.messages)

            return self._compile(result.events, rule_sets, today)

        except DomainException as e:
            logger.warning("Balance computation aborted", extra={"reason": type(e).__name__})
            return BalanceSnapshot.failed(str(e))

    def _compile(self, events: List[LedgerEvent], rule_sets: RuleSetCollection, today: date) -> BalanceSnapshot:
        ledger = _Ledger()

        for event in sorted(events, key=lambda e: e.date):
            rule_set = rule_sets.pick_rule_set(event.date)
            if rule_set is None:
                raise RuleSetNotFoundError(event.date)

            self._charge_overdue_fees(ledger, event.date, rule_set)
            ledger.append_timeline(event)
            self._apply_credit_or_debit(ledger, event)
            self._apply_spare_funds(ledger, event)

        # Catch up on fees that came due after the last event
        today_rule_set = rule_sets.pick_rule_set(today)
        if today_rule_set is not None:
            self._charge_overdue_fees(ledger, today, today_rule_set)

        return BalanceSnapshot(
            net_balance=ledger.net_balance.quantize(self.quantum, rounding=ROUND_HALF_UP),
            overdue_balance=self._overdue_balance(ledger, today),
            escalation_flag=self._escalation_flag(ledger, today, today_rule_set),
            balance_timeline=ledger.sorted_timeline(),
        )

    def _charge_overdue_fees(self, ledger: _Ledger, check_date: date, rule_set: RuleSet) -> None:
        """Create one fee for every unpaid credit that is due and has not been charged yet"""
        for credit in list(ledger.unpaid_credits):
            if credit.overdue_fee_created or credit.due_date > check_date:
                continue

            credit.overdue_fee_created = True
            amount = rule_set.overdue_charge(credit.amount)
            if amount <= 0:
                continue  # nothing to charge

            fee = LedgerEvent(
                date=credit.due_date,
                amount=amount,
                description=f"Overdue fee for original {credit.date.isoformat()} credit.",
                notes="Overdue Fee",
                net_days=self.never_overdue_net_days,
                overdue_fee_created=True,
                is_overdue_fee=True,
            )
            ledger.append_timeline(fee)
            ledger.unpaid_credits.append(fee)
            ledger.net_balance += fee.amount
            logger.debug(
                "Overdue fee generated",
                extra={"credit_date": credit.date.isoformat(), "fee_amount": str(fee.amount)},
            )

    @staticmethod
    def _apply_credit_or_debit(ledger: _Ledger, event: LedgerEvent) -> None:
        if event.amount > 0:
            ledger.unpaid_credits.append(event)
        else:
            ledger.funds -= event.amount  # debits are negative
        ledger.net_balance += event.amount

    @staticmethod
    def _apply_spare_funds(ledger: _Ledger, payment: LedgerEvent) -> None:
        """Put available funds towards unpaid credits, oldest first"""
        while ledger.funds > 0 and ledger.unpaid_credits:
            credit = ledger.unpaid_credits[0]
            original_date = credit.date.isoformat()
            credit.notes = f"Credit payment of {ledger.funds}"
            credit.date = payment.date

            if ledger.funds >= credit.amount:
                credit.description = f"Credit paid for {original_date} with remaining {ledger.funds}"
                ledger.funds -= credit.amount
                credit.amount = Decimal("0")
                ledger.unpaid_credits.pop(0)
            else:
                credit.description = f"{ledger.funds} put towards credit for {original_date}"
                credit.amount -= ledger.funds
                ledger.funds = Decimal("0")

            ledger.reposition_timeline(credit)

    @staticmethod
    def _overdue_balance(ledger: _Ledger, today: date) -> Decimal:
        """Unpaid amount that is past due; credits that are due but not late are excluded"""
        return sum(
            (credit.amount for credit in ledger.unpaid_credits if credit.due_date <= today),
            Decimal("0"),
        )

    @staticmethod
    def _escalation_flag(ledger: _Ledger, today: date, rule_set: Optional[RuleSet]) -> EscalationFlag:
        """
        Collection intensity for the account, driven by its oldest unpaid credit.

        Thresholds come from the rule set in effect today; without one the
        flag cannot rise above OVERDUE_CREDIT.
        """
        if not ledger.unpaid_credits:
            return EscalationFlag.NO_UNPAID_CREDITS

        flag = EscalationFlag.UNPAID_NOT_LATE
        days_overdue = days_between(ledger.unpaid_credits[0].due_date, today)
        if days_overdue >= 0:
            flag = EscalationFlag.OVERDUE_CREDIT
        if rule_set is not None:
            if days_overdue >= rule_set.days_overdue_for_rep:
                flag = EscalationFlag.INTERNAL_REP
            if days_overdue >= rule_set.days_overdue_for_agency:
                flag = EscalationFlag.EXTERNAL_AGENCY
        return flag


def compute_balance(raw_events: Any, raw_rule_sets: Any, today: Optional[date] = None) -> BalanceSnapshot:
    """
    Main entry point: validate rule sets and events, then compute the balance.

    Both arguments may be structured data or the equivalent JSON text.
    """
    rule_sets = raw_rule_sets if isinstance(raw_rule_sets, RuleSetCollection) else RuleSetCollection(raw_rule_sets)
    return BalanceEngine().compute(raw_events, rule_sets, today)

"""Prometheus metrics for monitoring balance computations, overdue fees, and escalations"""

from prometheus_client import Counter, Histogram

from ledger_balance.domain.models import BalanceSnapshot

# Balance metrics
balance_counter = Counter(
    "ledger_balance_computations_total",
    "Total balance computations",
    ["outcome"],  # computed | rejected
)

overdue_fee_counter = Counter(
    "ledger_overdue_fees_total",
    "Overdue fees generated while computing balances",
)

escalation_counter = Counter(
    "ledger_escalation_flag_total",
    "Escalation flags issued",
    ["flag"],
)

rule_set_validation_counter = Counter(
    "ledger_rule_set_validations_total",
    "Rule set validation requests",
    ["valid"],  # true | false
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_balance(snapshot: BalanceSnapshot) -> None:
    """Record computation outcome, fee volume, and escalation distribution"""
    if not snapshot.ok:
        balance_counter.labels(outcome="rejected").inc()
        return

    balance_counter.labels(outcome="computed").inc()
    fees = sum(1 for event in snapshot.balance_timeline if event.is_overdue_fee)
    if fees:
        overdue_fee_counter.inc(fees)
    escalation_counter.labels(flag=snapshot.escalation_flag.value).inc()

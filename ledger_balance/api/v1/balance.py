"""POST /v1/balance - Account balance and collection escalation endpoint"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request

from ledger_balance.api.v1.schemas import BalanceRequest, BalanceResponse
from ledger_balance.api.dependencies import get_balance_engine, get_request_id, get_today
from ledger_balance.domain.balance import BalanceEngine
from ledger_balance.domain.rule_sets import RuleSetCollection
from ledger_balance.infrastructure.observability.metrics import record_balance
from ledger_balance.infrastructure.observability.logging import log_balance

router = APIRouter()


@router.post("/balance", response_model=BalanceResponse)
def compute_account_balance(
    request_body: BalanceRequest,
    request: Request,
    engine: BalanceEngine = Depends(get_balance_engine),
    today: date = Depends(get_today),
):
    """
    Compute net balance, overdue balance, and escalation flag for one account.

    Flow:
    1. Load and validate rule sets
    2. Validate the account history (every error is reported)
    3. Replay events: overdue fees, FIFO payment allocation
    4. Return snapshot, or 422 with the error messages
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        rule_sets = RuleSetCollection(request_body.rule_sets)
        snapshot = engine.compute(request_body.account_history, rule_sets, request_body.as_of or today)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_balance(snapshot)

    if not snapshot.ok:
        log_balance(request_id, "rejected", None, None, 0, duration_ms)
        raise HTTPException(
            status_code=422,
            detail={"errorMessages": snapshot.error_messages.splitlines()},
        )

    log_balance(
        request_id,
        "computed",
        snapshot.escalation_flag.value,
        float(snapshot.net_balance),
        len(snapshot.balance_timeline),
        duration_ms,
    )
    return BalanceResponse.from_snapshot(snapshot)

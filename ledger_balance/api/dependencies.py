"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from ledger_balance.domain.balance import BalanceEngine


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_balance_engine() -> BalanceEngine:
    """Provide a balance engine instance"""
    return BalanceEngine()


def get_today() -> date:
    """Evaluation date used when a request does not pin one"""
    return date.today()

"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Any, Dict, List
from fastapi.testclient import TestClient
from ledger_balance.api.main import create_app
from ledger_balance.api.dependencies import get_today
from ledger_balance.domain.rule_sets import RuleSetCollection


# Evaluation date shared by tests that pin "today"
TODAY = date(2016, 6, 1)


def make_event(
    event_date: str,
    amount: Any,
    net_d: Any = 30,
    description: str = "Invoice",
    notes: str = "",
) -> Dict[str, Any]:
    """Raw account event as a caller would submit it"""
    return {
        "date": event_date,
        "amount": amount,
        "description": description,
        "notes": notes,
        "netD": net_d,
    }


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def raw_rule_sets() -> Dict[str, Dict[str, Any]]:
    """Two policy versions: a lenient 2015 policy and a stricter 2016 one"""
    return {
        "2015-01-01": {
            "overduePercentage": "0.015",
            "minOverdueCharge": "5",
            "daysOverdueForRep": "30",
            "daysOverdueForAgency": "90",
        },
        "2016-03-01": {
            "overduePercentage": ".1",
            "minOverdueCharge": "2.50",
            "daysOverdueForRep": "15",
            "daysOverdueForAgency": "45",
        },
    }


@pytest.fixture
def rule_sets(raw_rule_sets: Dict[str, Dict[str, Any]]) -> RuleSetCollection:
    return RuleSetCollection(raw_rule_sets)


@pytest.fixture
def sample_history() -> List[Dict[str, Any]]:
    """Monthly invoices with one late partial payment"""
    return [
        make_event("2016-01-01", "100", description="January invoice"),
        make_event("2016-02-01", "100", description="February invoice"),
        make_event("2016-02-10", "-150", description="Payment", net_d=0),
    ]


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a pinned evaluation date"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)

"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from ledger_balance.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_balance(
    request_id: str,
    outcome: str,
    escalation_flag: str | None,
    net_balance: float | None,
    timeline_length: int,
    duration_ms: float,
) -> None:
    """Log structured balance outcome for analysis"""
    logging.info(
        "Balance computed",
        extra={
            "request_id": request_id,
            "step": "balance_complete",
            "outcome": outcome,
            "escalation_flag": escalation_flag,
            "net_balance": net_balance,
            "timeline_length": timeline_length,
            "duration_ms": duration_ms,
        },
    )

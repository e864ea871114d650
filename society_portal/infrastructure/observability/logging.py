"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from society_portal.config import settings


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


def log_bill_generation(request_id: str, month: int, year: int, created: int, duration_ms: float) -> None:
    """Log outcome of a monthly billing run"""
    logging.info(
        "Bill generation completed",
        extra={
            "request_id": request_id,
            "step": "bills_generated",
            "period": f"{year}-{month:02d}",
            "bills_created": created,
            "duration_ms": duration_ms,
        },
    )


def log_payment(request_id: str, bill_id: str, method: str, receipt_number: str, recorded_by: str) -> None:
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "step": "payment_recorded",
            "bill_id": bill_id,
            "payment_method": method,
            "receipt_number": receipt_number,
            "recorded_by": recorded_by,
        },
    )


def log_approval(request_id: str, member_id: str, outcome: str, admin_id: str) -> None:
    logging.info(
        "Membership decision",
        extra={
            "request_id": request_id,
            "step": "membership_decision",
            "member_id": member_id,
            "outcome": outcome,
            "admin_id": admin_id,
        },
    )

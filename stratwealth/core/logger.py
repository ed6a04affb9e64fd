"""
Application and audit logging.
Every record carries a correlation id so a request can be traced end to end.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stratwealth.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Guarantees the correlation_id attribute exists on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Configures a stream logger once; repeated calls return the same instance."""
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        log.addHandler(handler)
        log.propagate = False
    log.setLevel((level or settings.LOG_LEVEL).upper())
    return log


logger = setup_logger("stratwealth")
audit_logger = setup_logger("stratwealth.audit")


def get_logger_with_correlation(correlation_id: str) -> logging.LoggerAdapter:
    """Returns a logger adapter that stamps every message with the given correlation id."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})


def audit_log(action: str, user: str, resource: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Emits a single JSON audit record for a state-changing business action.
    Values that are not JSON-native (Decimal, datetime, enums) are stringified.
    """
    payload: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "user": user,
        "resource": resource,
        "details": details or {},
    }
    correlation_id = payload["details"].get("correlation_id", "-")
    audit_logger.info(json.dumps(payload, default=str), extra={"correlation_id": correlation_id})

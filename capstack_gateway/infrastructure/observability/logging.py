"""JSON log output and structured event helpers"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from capstack_gateway.config import settings

# Libraries whose INFO chatter drowns out scoring events
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "passlib")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """Stamps every record with UTC time, level and the service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(stdout)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_score(
    request_id: str,
    user_id: int,
    kind: str,
    score: Optional[int],
    used_default_profile: bool,
    duration_ms: float,
) -> None:
    """One line per calculator run, tagged with where the profile came from"""
    logging.info(
        "Score computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "calculator": kind,
            "score": score,
            "profile_source": "default" if used_default_profile else "stored",
            "duration_ms": round(duration_ms, 2),
        },
    )


def log_protocol_outcome(
    request_id: str,
    user_id: int,
    category: str,
    amount: float,
    blocked: bool,
    reason: Optional[str] = None,
    auto_saved: Optional[int] = None,
) -> None:
    """Record what the discipline protocol did with a transaction"""
    extra = {
        "request_id": request_id,
        "user_id": user_id,
        "category": category,
        "amount": amount,
    }
    if blocked:
        logging.info("Transaction blocked", extra={**extra, "reason": reason})
    else:
        logging.info("Transaction approved", extra={**extra, "auto_saved": auto_saved or 0})

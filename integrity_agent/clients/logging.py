"""Structured logging utilities."""

import json
import logging
from typing import Any, Dict, Optional

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields passed via `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with JSON formatting configured."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def log_sweep(
    logger: logging.Logger,
    run_id: str,
    issue_count: int,
    duration_ms: int,
    checks_run: int,
    checks_failed: int,
    severity_breakdown: Optional[Dict[str, int]] = None,
) -> None:
    """Log completion of a full detection sweep."""
    extra: Dict[str, Any] = {
        "run_id": run_id,
        "stage": "sweep",
        "issue_count": issue_count,
        "duration_ms": duration_ms,
        "checks_run": checks_run,
        "checks_failed": checks_failed,
    }
    if severity_breakdown:
        extra["severity_breakdown"] = severity_breakdown
    logger.info("Integrity sweep completed", extra=extra)


def log_check(
    logger: logging.Logger,
    run_id: str,
    check_name: str,
    issue_count: int,
    duration_ms: int,
    severity_breakdown: Optional[Dict[str, int]] = None,
) -> None:
    """Log check execution stage."""
    extra: Dict[str, Any] = {
        "run_id": run_id,
        "stage": check_name,
        "issue_count": issue_count,
        "duration_ms": duration_ms,
    }
    if severity_breakdown:
        extra["severity_breakdown"] = severity_breakdown
    logger.info(f"Check {check_name} completed", extra=extra)


def log_fix(
    logger: logging.Logger,
    fixed: int,
    failed: int,
    duration_ms: int,
) -> None:
    """Log an auto-fix batch."""
    logger.info(
        "Auto-fix batch completed",
        extra={
            "stage": "auto_fix",
            "fixed": fixed,
            "failed": failed,
            "duration_ms": duration_ms,
        },
    )

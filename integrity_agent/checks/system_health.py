"""Data store configuration, connectivity and latency."""

from __future__ import annotations

import logging
import time
from typing import List

from ..utils.errors import DataAccessError
from ..utils.issues import Category, Issue, Severity
from .base import CheckContext

logger = logging.getLogger(__name__)


async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    if not gateway.is_configured():
        return [
            Issue(
                severity=Severity.ERROR,
                category=Category.SYSTEM,
                title="Data Store Not Configured",
                description="The data store backend is not configured. Integrity checks cannot read any records.",
            )
        ]

    threshold_ms = context.thresholds.slow_response_ms
    start = time.perf_counter()
    try:
        await gateway.ping()
    except DataAccessError as exc:
        return [
            Issue(
                severity=Severity.ERROR,
                category=Category.SYSTEM,
                title="Database Connection Error",
                description=f"Failed to connect to database: {exc}",
            )
        ]
    except Exception as exc:
        logger.error("Unexpected error during health check", exc_info=True)
        return [
            Issue(
                severity=Severity.ERROR,
                category=Category.SYSTEM,
                title="System Error",
                description=f"Unexpected error during health check: {exc}",
            )
        ]
    response_ms = int((time.perf_counter() - start) * 1000)

    if response_ms > threshold_ms:
        return [
            Issue(
                severity=Severity.WARNING,
                category=Category.SYSTEM,
                title="Slow Database Response",
                description=f"Database response time is {response_ms}ms (should be under {threshold_ms}ms)",
            )
        ]
    return []

"""Shared context and helpers for check modules."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List

from ..clients.gateway import DataStoreGateway
from ..config.settings import ThresholdConfig
from ..utils.issues import Issue

logger = logging.getLogger(__name__)

CheckFn = Callable[["CheckContext"], Awaitable[List[Issue]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CheckContext:
    """Everything a check may read: the gateway, thresholds and the clock."""

    gateway: DataStoreGateway
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    clock: Callable[[], datetime] = utc_now

    def now(self) -> datetime:
        return self.clock()


def requires_configured_store(fn: CheckFn) -> CheckFn:
    """Skip a data check when no backend is configured.

    The system-health check reports the unconfigured store; every other check
    yields nothing in that state.
    """

    @functools.wraps(fn)
    async def wrapper(context: CheckContext) -> List[Issue]:
        if not context.gateway.is_configured():
            logger.debug(f"Skipping {fn.__module__}: data store not configured")
            return []
        return await fn(context)

    return wrapper

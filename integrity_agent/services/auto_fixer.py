"""Applies the remediations bound to auto-fixable issues."""

from __future__ import annotations

import time
from typing import Iterable

from ..clients.gateway import DataStoreGateway
from ..clients.logging import get_logger, log_fix
from ..utils.errors import RemediationError
from ..utils.issues import FixOutcome, Issue
from ..utils.timing import elapsed_ms

logger = get_logger(__name__)


class AutoFixer:
    """Applies fixes one at a time; a failed fix is counted, never raised.

    Batches are not transactional: earlier successful fixes stay applied when a
    later one fails, and no check is made that an issue still reflects the
    current store. Callers re-run detection afterwards.
    """

    def __init__(self, gateway: DataStoreGateway):
        self._gateway = gateway

    async def apply(self, issues: Iterable[Issue]) -> FixOutcome:
        start = time.time()
        outcome = FixOutcome()
        for issue in issues:
            if not issue.auto_fixable:
                continue
            try:
                await self._apply_one(issue)
            except RemediationError as exc:
                outcome.failed += 1
                logger.error(
                    str(exc),
                    extra={"issue_id": issue.id, "record_id": exc.record_id},
                    exc_info=True,
                )
            else:
                outcome.fixed += 1
        log_fix(logger, outcome.fixed, outcome.failed, elapsed_ms(start))
        return outcome

    async def _apply_one(self, issue: Issue) -> None:
        remediation = issue.remediation
        try:
            await self._gateway.update_record(
                remediation.collection,
                remediation.record_id,
                remediation.changes,
            )
        except Exception as exc:
            raise RemediationError(issue.title, remediation.record_id, str(exc)) from exc
        logger.info(
            f"Applied fix for '{issue.title}'",
            extra={
                "issue_id": issue.id,
                "kind": remediation.kind.value,
                "record_id": remediation.record_id,
            },
        )

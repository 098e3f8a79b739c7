"""Runs the check catalog and exposes the agent's invocation surface."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from dotenv import load_dotenv

from ..analyzers import scorer
from ..checks.base import CheckContext, utc_now
from ..checks.registry import CHECK_CATALOG, CheckDefinition
from ..clients.firestore import FirestoreGateway
from ..clients.gateway import DataStoreGateway
from ..clients.logging import get_logger, log_check, log_sweep
from ..config.config_loader import load_agent_config
from ..config.settings import AgentConfig
from ..utils.errors import UnknownCheckError
from ..utils.issues import CheckFailure, CheckResult, FixOutcome, Issue
from ..utils.timing import elapsed_ms, timed
from .auto_fixer import AutoFixer

logger = get_logger(__name__)


class IntegrityAgent:
    """Detects inconsistencies in the task store and applies targeted fixes.

    Checks run sequentially in catalog order so a sweep never issues
    concurrent full scans and reports are ordered deterministically.
    """

    def __init__(
        self,
        gateway: DataStoreGateway,
        config: AgentConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        catalog: Tuple[CheckDefinition, ...] = CHECK_CATALOG,
    ):
        self._gateway = gateway
        self._config = config or AgentConfig()
        self._catalog = catalog
        self._checks_by_key = {check.key: check for check in catalog}
        self._context = CheckContext(
            gateway=gateway,
            thresholds=self._config.thresholds,
            clock=clock,
        )
        self._fixer = AutoFixer(gateway)

    async def run_all_checks(self) -> CheckResult:
        run_id = str(uuid.uuid4())
        metrics: Dict[str, int] = {}
        issues: List[Issue] = []
        checks_run: List[str] = []
        checks_failed: List[CheckFailure] = []

        logger.info("Integrity sweep started", extra={"run_id": run_id})
        with timed("sweep", metrics):
            for check in self._catalog:
                try:
                    with timed(check.key, metrics):
                        check_issues = await check.run(self._context)
                except Exception as exc:
                    logger.error(
                        f"Check {check.name} failed",
                        extra={"run_id": run_id, "stage": check.key, "error": str(exc)},
                        exc_info=True,
                    )
                    checks_failed.append(CheckFailure(key=check.key, name=check.name, error=str(exc)))
                    continue
                issues.extend(check_issues)
                checks_run.append(check.name)
                log_check(
                    logger,
                    run_id,
                    check.key,
                    len(check_issues),
                    metrics.get(f"duration_{check.key}", 0),
                    scorer.severity_counts(scorer.summarize(check_issues)),
                )

        summary = scorer.summarize(issues)
        counts = scorer.severity_counts(summary)
        result = CheckResult(
            run_id=run_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            duration_ms=metrics["duration_sweep"],
            issues=issues,
            checks_run=checks_run,
            checks_failed=checks_failed,
            errors=counts["error"],
            warnings=counts["warning"],
            infos=counts["info"],
        )
        log_sweep(
            logger,
            run_id,
            result.total_issues,
            result.duration_ms,
            len(checks_run),
            len(checks_failed),
            counts,
        )
        return result

    async def run_one_check(self, key: str) -> List[Issue]:
        """Run a single check by key; raises UnknownCheckError for unknown keys."""
        check = self._checks_by_key.get(key)
        if check is None:
            raise UnknownCheckError(key)
        start = time.time()
        try:
            issues = await check.run(self._context)
        except Exception as exc:
            logger.error(
                f"Check {check.name} failed",
                extra={"stage": check.key, "error": str(exc)},
                exc_info=True,
            )
            return []
        log_check(logger, "single", check.key, len(issues), elapsed_ms(start))
        return issues

    async def auto_fix(self, issues: Iterable[Issue]) -> FixOutcome:
        return await self._fixer.apply(issues)

    async def fix_and_recheck(self, issues: Iterable[Issue]) -> Tuple[FixOutcome, CheckResult]:
        """Apply fixes, then run a fresh sweep to confirm what remains."""
        outcome = await self.auto_fix(issues)
        result = await self.run_all_checks()
        return outcome, result


def build_default_agent(
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> IntegrityAgent:
    """Wire an agent against Firestore using .env and agent.yaml settings."""
    load_dotenv(env_file)
    config = load_agent_config(config_path)
    logger.info(
        "Integrity agent configured",
        extra={"config_version": config.metadata.get("config_version")},
    )
    return IntegrityAgent(FirestoreGateway(config.store), config)

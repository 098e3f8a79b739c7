"""Stale in-progress task detection.

Both severities live in one check driven by an ordered threshold table. The
first matching row wins, so a task idle for ten days is reported once as an
error and never also as a warning.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from ..config.settings import ThresholdConfig
from ..utils.issues import Category, Issue, Severity
from .base import CheckContext, requires_configured_store


@dataclass(frozen=True)
class StaleThreshold:
    days: int
    severity: Severity

    @property
    def min_age(self) -> timedelta:
        return timedelta(days=self.days)


def threshold_table(thresholds: ThresholdConfig) -> List[StaleThreshold]:
    """Rows ordered from the longest age to the shortest."""
    rows = [
        StaleThreshold(thresholds.stale_error_days, Severity.ERROR),
        StaleThreshold(thresholds.stale_warning_days, Severity.WARNING),
    ]
    return sorted(rows, key=lambda row: row.days, reverse=True)


def classify(age: timedelta, table: List[StaleThreshold]) -> Optional[StaleThreshold]:
    for row in table:
        if age >= row.min_age:
            return row
    return None


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    tasks = await context.gateway.fetch_tasks(statuses=["in-progress"])
    table = threshold_table(context.thresholds)
    now = context.now()

    issues: List[Issue] = []
    for task in tasks:
        last_activity = task.last_activity
        if last_activity is None:
            continue
        row = classify(now - last_activity, table)
        if row is None:
            continue
        issues.append(
            Issue(
                severity=row.severity,
                category=Category.TASK,
                title=f"Stale Task ({row.days}+ days)",
                description=(
                    f'Task "{task.title}" has been in-progress for over {row.days} days '
                    "without updates"
                ),
                affected_records=[task.id],
            )
        )
    return issues

"""Pending or in-progress tasks whose scheduled date has passed."""

from __future__ import annotations

from typing import List

from ..utils.issues import Category, Issue, Remediation, RemediationKind, Severity
from ..utils.normalization import parse_date
from ..utils.records import ACTIVE_TASK_STATUSES
from .base import CheckContext, requires_configured_store

OVERDUE_STATUS = "overdue"


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    tasks = await gateway.fetch_tasks(statuses=ACTIVE_TASK_STATUSES)
    today = context.now().date()

    issues: List[Issue] = []
    for task in tasks:
        scheduled = parse_date(task.scheduled_date)
        if scheduled is None or scheduled >= today:
            continue
        issues.append(
            Issue(
                severity=Severity.ERROR,
                category=Category.TASK,
                title="Unmarked Overdue Task",
                description=(
                    f'Task "{task.title}" was due on {scheduled.isoformat()} '
                    "but is not marked as overdue"
                ),
                affected_records=[task.id],
                remediation=Remediation(
                    kind=RemediationKind.SET_STATUS,
                    collection=gateway.tasks_collection,
                    record_id=task.id,
                    changes={"status": OVERDUE_STATUS},
                ),
            )
        )
    return issues

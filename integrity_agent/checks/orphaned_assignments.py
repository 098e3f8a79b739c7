"""Tasks assigned to user ids that no longer exist in the profile store."""

from __future__ import annotations

from typing import List

from ..utils.issues import Category, Issue, Remediation, RemediationKind, Severity
from ..utils.records import ARCHIVED_STATUS
from .base import CheckContext, requires_configured_store


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    profiles = await gateway.fetch_user_profiles()
    valid_user_ids = {profile.id for profile in profiles}
    tasks = await gateway.fetch_tasks(exclude_statuses=[ARCHIVED_STATUS])

    issues: List[Issue] = []
    for task in tasks:
        invalid = [user_id for user_id in task.assigned_to if user_id not in valid_user_ids]
        if not invalid:
            continue
        valid = [user_id for user_id in task.assigned_to if user_id in valid_user_ids]
        issues.append(
            Issue(
                severity=Severity.ERROR,
                category=Category.TASK,
                title="Orphaned Assignment",
                description=f'Task "{task.title}" is assigned to {len(invalid)} non-existent user(s)',
                affected_records=[task.id, *invalid],
                remediation=Remediation(
                    kind=RemediationKind.SET_ASSIGNEES,
                    collection=gateway.tasks_collection,
                    record_id=task.id,
                    changes={"assigned_to": valid},
                ),
            )
        )
    return issues

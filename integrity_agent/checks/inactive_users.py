"""Active tasks assigned to deactivated users."""

from __future__ import annotations

from typing import List

from ..utils.issues import Category, Issue, Severity
from ..utils.records import ACTIVE_TASK_STATUSES, build_record_index
from .base import CheckContext, requires_configured_store


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    inactive_users = await gateway.fetch_user_profiles(is_active=False)
    if not inactive_users:
        return []
    user_index = build_record_index(inactive_users)

    tasks = await gateway.fetch_tasks(statuses=ACTIVE_TASK_STATUSES)
    issues: List[Issue] = []
    for task in tasks:
        inactive = [user_id for user_id in task.assigned_to if user_id in user_index]
        if not inactive:
            continue
        names = ", ".join(user_index[user_id].display_name for user_id in inactive)
        issues.append(
            Issue(
                severity=Severity.WARNING,
                category=Category.USER,
                title="Inactive User Assignment",
                description=f'Task "{task.title}" is assigned to inactive user(s): {names}',
                affected_records=[task.id, *inactive],
            )
        )
    return issues

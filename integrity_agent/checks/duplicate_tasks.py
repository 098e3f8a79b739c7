"""Potential duplicate tasks: same normalized title on the same date.

Assignees are not part of the key, so identically named tasks for two
different teams on one day are also flagged.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..utils.issues import Category, Issue, Severity
from ..utils.normalization import normalize_title
from ..utils.records import ARCHIVED_STATUS, TaskRecord
from .base import CheckContext, requires_configured_store


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    tasks = await context.gateway.fetch_tasks(exclude_statuses=[ARCHIVED_STATUS])

    # dicts keep insertion order, so groups are reported in first-seen order
    groups: Dict[Tuple[str, Optional[str]], List[TaskRecord]] = {}
    for task in tasks:
        key = (normalize_title(task.title), task.scheduled_date)
        groups.setdefault(key, []).append(task)

    issues: List[Issue] = []
    for group in groups.values():
        if len(group) < 2:
            continue
        first = group[0]
        issues.append(
            Issue(
                severity=Severity.WARNING,
                category=Category.TASK,
                title="Potential Duplicate Tasks",
                description=(
                    f'Found {len(group)} tasks with title "{first.title}" '
                    f"scheduled for {first.scheduled_date}"
                ),
                affected_records=[task.id for task in group],
            )
        )
    return issues

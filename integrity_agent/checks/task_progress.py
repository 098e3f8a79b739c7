"""Task progress consistency: stored percentage versus completed steps."""

from __future__ import annotations

import math
from typing import List

from ..utils.issues import Category, Issue, Remediation, RemediationKind, Severity
from ..utils.records import ARCHIVED_STATUS, TaskRecord
from .base import CheckContext, requires_configured_store


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    tasks = await gateway.fetch_tasks(exclude_statuses=[ARCHIVED_STATUS])
    issues: List[Issue] = []
    for task in tasks:
        total_steps, completed_count = _step_counts(task)
        expected = expected_progress(total_steps, completed_count)
        actual = task.progress_percentage

        if actual != expected:
            issues.append(
                Issue(
                    severity=Severity.ERROR,
                    category=Category.TASK,
                    title="Progress Mismatch",
                    description=(
                        f'Task "{task.title}" has {completed_count}/{total_steps} steps completed '
                        f"but shows {_fmt(actual)}% (should be {expected}%)"
                    ),
                    affected_records=[task.id],
                    remediation=Remediation(
                        kind=RemediationKind.SET_PROGRESS,
                        collection=gateway.tasks_collection,
                        record_id=task.id,
                        changes={"progress_percentage": expected},
                    ),
                )
            )

        if task.status == "completed" and total_steps > 0 and actual != 100:
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    category=Category.TASK,
                    title="Completed Task Not at 100%",
                    description=(
                        f'Task "{task.title}" is marked completed but progress is only {_fmt(actual)}%'
                    ),
                    affected_records=[task.id],
                    remediation=Remediation(
                        kind=RemediationKind.COMPLETE_ALL_STEPS,
                        collection=gateway.tasks_collection,
                        record_id=task.id,
                        changes={
                            "completed_steps": task.step_ids,
                            "progress_percentage": 100,
                        },
                    ),
                )
            )
    return issues


def expected_progress(total_steps: int, completed_count: int) -> int:
    """round(100 * completed / total), half rounding up; 0 with no steps."""
    if total_steps <= 0:
        return 0
    return int(math.floor(completed_count * 100 / total_steps + 0.5))


def _step_counts(task: TaskRecord) -> tuple:
    # Steps without an id can never be completed, so they are not counted.
    step_ids = set(task.step_ids)
    completed = {step_id for step_id in task.completed_steps if step_id in step_ids}
    return len(step_ids), len(completed)


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)

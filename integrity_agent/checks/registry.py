"""Fixed, ordered catalog of integrity checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from . import (
    duplicate_tasks,
    inactive_users,
    orphaned_assignments,
    overdue_tasks,
    procedures,
    stale_tasks,
    system_health,
    task_progress,
)
from ..utils.errors import UnknownCheckError
from .base import CheckFn


@dataclass(frozen=True)
class CheckDefinition:
    key: str
    name: str
    run: CheckFn


CHECK_CATALOG: Tuple[CheckDefinition, ...] = (
    CheckDefinition("task-progress", "Task Progress Consistency", task_progress.run),
    CheckDefinition("orphaned-assignments", "Orphaned Assignments", orphaned_assignments.run),
    CheckDefinition("stale-tasks", "Stale Tasks", stale_tasks.run),
    CheckDefinition("overdue-tasks", "Overdue Tasks", overdue_tasks.run),
    CheckDefinition("duplicate-tasks", "Duplicate Tasks", duplicate_tasks.run),
    CheckDefinition("procedure-integrity", "Procedure Integrity", procedures.run),
    CheckDefinition("inactive-users", "Inactive User Assignments", inactive_users.run),
    CheckDefinition("system-health", "System Health", system_health.run),
)

_BY_KEY: Dict[str, CheckDefinition] = {check.key: check for check in CHECK_CATALOG}


def get_check(key: str) -> CheckDefinition:
    try:
        return _BY_KEY[key]
    except KeyError:
        raise UnknownCheckError(key) from None

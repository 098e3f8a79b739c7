"""Dataclasses describing issues emitted by checks and the sweep report."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Lower is more urgent."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class Category(str, Enum):
    TASK = "task"
    PROCEDURE = "procedure"
    USER = "user"
    SYSTEM = "system"


class RemediationKind(str, Enum):
    SET_PROGRESS = "set_progress"
    COMPLETE_ALL_STEPS = "complete_all_steps"
    SET_ASSIGNEES = "set_assignees"
    SET_STATUS = "set_status"
    ASSIGN_STEP_IDS = "assign_step_ids"
    RENUMBER_STEPS = "renumber_steps"


def generate_issue_id() -> str:
    """Process-local unique id: epoch millis plus a random suffix."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"issue_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True)
class Remediation:
    """A single-record patch captured at detection time.

    The values in ``changes`` reflect the store as it was when the issue was
    detected; applying it later writes exactly these values.
    """

    kind: RemediationKind
    collection: str
    record_id: str
    changes: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "collection": self.collection,
            "record_id": self.record_id,
            "changes": dict(self.changes),
        }


@dataclass
class Issue:
    severity: Severity
    category: Category
    title: str
    description: str
    affected_records: List[str] = field(default_factory=list)
    remediation: Optional[Remediation] = None
    id: str = field(default_factory=generate_issue_id)

    @property
    def auto_fixable(self) -> bool:
        return self.remediation is not None

    @property
    def primary_record(self) -> Optional[str]:
        return self.affected_records[0] if self.affected_records else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "affected_records": list(self.affected_records),
            "auto_fixable": self.auto_fixable,
            "remediation": self.remediation.to_dict() if self.remediation else None,
        }


@dataclass
class CheckFailure:
    key: str
    name: str
    error: str


@dataclass
class CheckResult:
    run_id: str
    timestamp: str
    duration_ms: int
    issues: List[Issue] = field(default_factory=list)
    checks_run: List[str] = field(default_factory=list)
    checks_failed: List[CheckFailure] = field(default_factory=list)
    errors: int = 0
    warnings: int = 0
    infos: int = 0

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    @property
    def fixable_count(self) -> int:
        return sum(1 for issue in self.issues if issue.auto_fixable)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "total_issues": self.total_issues,
            "errors": self.errors,
            "warnings": self.warnings,
            "infos": self.infos,
            "fixable_count": self.fixable_count,
            "issues": [issue.to_dict() for issue in self.issues],
            "checks_run": list(self.checks_run),
            "checks_failed": [
                {"key": failure.key, "name": failure.name, "error": failure.error}
                for failure in self.checks_failed
            ],
        }


@dataclass
class FixOutcome:
    fixed: int = 0
    failed: int = 0

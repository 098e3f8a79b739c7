"""Rule-based data integrity checks and auto-remediation for the task store."""

from .services.integrity_agent import IntegrityAgent, build_default_agent
from .utils.errors import DataAccessError, RemediationError, UnknownCheckError
from .utils.issues import CheckResult, FixOutcome, Issue

__all__ = [
    "IntegrityAgent",
    "build_default_agent",
    "CheckResult",
    "FixOutcome",
    "Issue",
    "DataAccessError",
    "RemediationError",
    "UnknownCheckError",
]

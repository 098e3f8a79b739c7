"""Custom exception classes for integrity agent errors."""

from __future__ import annotations


class IntegrityAgentError(Exception):
    """Base exception for integrity agent failures."""


class DataAccessError(IntegrityAgentError):
    """Raised when a read or write through the data store gateway fails."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"Data store {operation} failed: {message}")
        self.operation = operation


class UnknownCheckError(IntegrityAgentError):
    """Raised when a check key is not part of the catalog."""

    def __init__(self, check_key: str):
        super().__init__(f"Unknown check: {check_key}")
        self.check_key = check_key


class RemediationError(IntegrityAgentError):
    """Raised when applying a fix for a specific issue fails."""

    def __init__(self, issue_title: str, record_id: str, message: str):
        super().__init__(
            f"Failed to fix '{issue_title}' for record {record_id}: {message}"
        )
        self.issue_title = issue_title
        self.record_id = record_id

"""Record shapes read through the data store gateway."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

ACTIVE_TASK_STATUSES = ("pending", "in-progress")
ARCHIVED_STATUS = "archived"


class StepRecord(BaseModel):
    """One step of a task or procedure; unknown step fields are preserved."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    order: Optional[int] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=False)


class TaskRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    steps: List[StepRecord] = []
    completed_steps: List[str] = []
    progress_percentage: float = 0
    status: str = "pending"
    assigned_to: List[str] = []
    scheduled_date: Optional[str] = None
    due_time: Optional[str] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, value: Any) -> Any:
        return value or ""

    @field_validator("steps", "completed_steps", "assigned_to", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return value or []

    @field_validator("progress_percentage", mode="before")
    @classmethod
    def _none_progress(cls, value: Any) -> Any:
        return value or 0

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _date_to_string(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date().isoformat()
        return value

    @property
    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps if step.id]

    @property
    def last_activity(self) -> Optional[datetime]:
        """Last update time, falling back to the start time."""
        return as_utc(self.updated_at or self.started_at)


class ProcedureRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    steps: List[StepRecord] = []
    status: str = "active"

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, value: Any) -> Any:
        return value or ""

    @field_validator("steps", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return value or []


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    is_active: bool = True

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _none_name(cls, value: Any) -> Any:
        return value or ""

    @field_validator("is_active", mode="before")
    @classmethod
    def _none_active(cls, value: Any) -> Any:
        # Profiles without the flag are treated as active.
        return True if value is None else value

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.id


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_record_index(records: List[Any]) -> Dict[str, Any]:
    """Index records by id for O(1) lookups."""
    return {record.id: record for record in records if record.id}

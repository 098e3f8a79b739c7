"""Runtime configuration models for the integrity agent."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None
    emulator_host: Optional[str] = None
    tasks_collection: str = "job_tasks"
    procedures_collection: str = "procedures"
    profiles_collection: str = "profiles"


class ThresholdConfig(BaseModel):
    stale_warning_days: int = 3
    stale_error_days: int = 7
    slow_response_ms: int = 3000


class AgentConfig(BaseModel):
    metadata: dict = Field(default_factory=dict)
    store: StoreConfig = Field(default_factory=StoreConfig)
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)

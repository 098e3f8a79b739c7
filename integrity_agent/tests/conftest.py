"""Pytest configuration and shared fixtures."""

import asyncio
import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import pytest

from integrity_agent.checks.base import CheckContext
from integrity_agent.clients.gateway import DataStoreGateway, decode_documents
from integrity_agent.config.settings import AgentConfig, ThresholdConfig
from integrity_agent.services.integrity_agent import IntegrityAgent
from integrity_agent.utils.errors import DataAccessError
from integrity_agent.utils.records import ProcedureRecord, TaskRecord, UserProfile

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeGateway(DataStoreGateway):
    """In-memory gateway holding plain documents keyed by collection."""

    def __init__(self, data: Optional[Dict[str, List[dict]]] = None, configured: bool = True):
        data = copy.deepcopy(data or {})
        self.documents: Dict[str, Dict[str, dict]] = {
            self.tasks_collection: {doc["id"]: doc for doc in data.get("tasks", [])},
            self.procedures_collection: {doc["id"]: doc for doc in data.get("procedures", [])},
            self.profiles_collection: {doc["id"]: doc for doc in data.get("profiles", [])},
        }
        self.configured = configured
        self.failing_reads: Set[str] = set()
        self.failing_updates: Set[str] = set()
        self.ping_error: Optional[Exception] = None
        self.ping_delay: float = 0.0
        self.reads: List[str] = []
        self.updates: List[tuple] = []

    def is_configured(self) -> bool:
        return self.configured

    def _read(self, collection: str, model):
        self.reads.append(collection)
        if collection in self.failing_reads:
            raise DataAccessError(f"read {collection}", "backend unavailable")
        documents = [(doc_id, copy.deepcopy(doc)) for doc_id, doc in self.documents[collection].items()]
        return decode_documents(collection, model, documents)

    async def fetch_tasks(
        self,
        statuses: Optional[Iterable[str]] = None,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[TaskRecord]:
        tasks = self._read(self.tasks_collection, TaskRecord)
        if statuses is not None:
            wanted = set(statuses)
            tasks = [task for task in tasks if task.status in wanted]
        if exclude_statuses:
            excluded = set(exclude_statuses)
            tasks = [task for task in tasks if task.status not in excluded]
        return tasks

    async def fetch_procedures(
        self,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[ProcedureRecord]:
        procedures = self._read(self.procedures_collection, ProcedureRecord)
        if exclude_statuses:
            excluded = set(exclude_statuses)
            procedures = [proc for proc in procedures if proc.status not in excluded]
        return procedures

    async def fetch_user_profiles(self, is_active: Optional[bool] = None) -> List[UserProfile]:
        profiles = self._read(self.profiles_collection, UserProfile)
        if is_active is not None:
            profiles = [profile for profile in profiles if profile.is_active == is_active]
        return profiles

    async def update_record(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> None:
        if record_id in self.failing_updates:
            raise DataAccessError(f"update {collection}/{record_id}", "write rejected")
        if record_id not in self.documents[collection]:
            raise DataAccessError(f"update {collection}/{record_id}", "no such document")
        self.documents[collection][record_id].update(copy.deepcopy(dict(changes)))
        self.updates.append((collection, record_id, dict(changes)))

    async def ping(self) -> None:
        if self.ping_delay:
            await asyncio.sleep(self.ping_delay)
        if self.ping_error is not None:
            raise self.ping_error

    def task(self, task_id: str) -> dict:
        return self.documents[self.tasks_collection][task_id]

    def procedure(self, procedure_id: str) -> dict:
        return self.documents[self.procedures_collection][procedure_id]


def run_async(coro):
    return asyncio.run(coro)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_store(fixtures_dir: Path) -> Dict[str, List[dict]]:
    """Load the seeded task/procedure/profile documents."""
    with open(fixtures_dir / "store.json") as f:
        return json.load(f)


@pytest.fixture
def gateway(sample_store) -> FakeGateway:
    return FakeGateway(sample_store)


@pytest.fixture
def empty_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def context(gateway, clock) -> CheckContext:
    return CheckContext(gateway=gateway, thresholds=ThresholdConfig(), clock=clock)


@pytest.fixture
def agent(gateway, clock) -> IntegrityAgent:
    return IntegrityAgent(gateway, AgentConfig(), clock=clock)

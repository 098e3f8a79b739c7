"""Tests for FirestoreGateway with a mocked async Firestore client."""

import json
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from google.api_core import exceptions as google_exceptions

from integrity_agent.clients.firestore import FirestoreGateway
from integrity_agent.config.settings import StoreConfig
from integrity_agent.tests.conftest import run_async
from integrity_agent.utils.errors import DataAccessError


class _AsyncStream:
    def __init__(self, docs):
        self._docs = iter(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._docs)
        except StopIteration:
            raise StopAsyncIteration


class _FailingStream(_AsyncStream):
    def __init__(self, exc):
        self._exc = exc

    async def __anext__(self):
        raise self._exc


def _doc(doc_id, data):
    doc = Mock()
    doc.id = doc_id
    doc.to_dict = Mock(return_value=data)
    return doc


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def firestore_gateway(mock_client):
    gateway = FirestoreGateway(StoreConfig(project_id="demo-project"))
    gateway._client = mock_client
    return gateway


def test_is_configured(monkeypatch, tmp_path):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    assert FirestoreGateway(StoreConfig(project_id="demo-project")).is_configured()
    assert not FirestoreGateway(StoreConfig()).is_configured()
    assert not FirestoreGateway(StoreConfig(project_id="your-project-id")).is_configured()
    missing = str(tmp_path / "missing.json")
    assert not FirestoreGateway(
        StoreConfig(project_id="demo-project", credentials_path=missing)
    ).is_configured()


def test_is_configured_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "env-project")
    assert FirestoreGateway(StoreConfig()).is_configured()


def test_unconfigured_client_raises(monkeypatch):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    gateway = FirestoreGateway(StoreConfig())
    with pytest.raises(DataAccessError):
        run_async(gateway.ping())


def test_fetch_tasks_excludes_statuses(firestore_gateway, mock_client):
    collection = mock_client.collection.return_value
    collection.stream.return_value = _AsyncStream([
        _doc("t1", {"title": "Open", "status": "pending", "progress_percentage": None}),
        _doc("t2", {"title": "Old", "status": "archived"}),
        _doc("t3", {"title": "No status"}),
    ])

    tasks = run_async(firestore_gateway.fetch_tasks(exclude_statuses=["archived"]))

    mock_client.collection.assert_called_with("job_tasks")
    assert [task.id for task in tasks] == ["t1", "t3"]
    assert tasks[0].progress_percentage == 0
    assert tasks[1].status == "pending"


def test_fetch_tasks_filters_statuses_server_side(firestore_gateway, mock_client):
    collection = mock_client.collection.return_value
    collection.where.return_value.stream.return_value = _AsyncStream([
        _doc("t1", {"title": "Busy", "status": "in-progress", "updated_at": "2025-06-01T00:00:00Z"}),
    ])

    tasks = run_async(firestore_gateway.fetch_tasks(statuses=["in-progress"]))

    field_filter = collection.where.call_args.kwargs["filter"]
    assert field_filter.field_path == "status"
    assert field_filter.op_string == "in"
    assert field_filter.value == ["in-progress"]
    assert tasks[0].last_activity.year == 2025


def test_fetch_user_profiles_active_filter(firestore_gateway, mock_client):
    mock_client.collection.return_value.stream.return_value = _AsyncStream([
        _doc("u1", {"first_name": "A", "is_active": True}),
        _doc("u2", {"first_name": "B", "is_active": False}),
        _doc("u3", {"first_name": "C"}),
    ])
    profiles = run_async(firestore_gateway.fetch_user_profiles(is_active=False))
    assert [p.id for p in profiles] == ["u2"]


def test_read_errors_become_data_access_errors(firestore_gateway, mock_client):
    mock_client.collection.return_value.stream.return_value = _FailingStream(
        google_exceptions.ServiceUnavailable("down")
    )

    with pytest.raises(DataAccessError) as excinfo:
        run_async(firestore_gateway.fetch_procedures())
    assert excinfo.value.operation == "read procedures"


def test_update_record(firestore_gateway, mock_client):
    doc_ref = mock_client.collection.return_value.document.return_value
    doc_ref.update = AsyncMock()

    run_async(firestore_gateway.update_record("job_tasks", "t1", {"status": "overdue"}))

    mock_client.collection.return_value.document.assert_called_with("t1")
    doc_ref.update.assert_awaited_once_with({"status": "overdue"})


def test_update_record_failure(firestore_gateway, mock_client):
    doc_ref = mock_client.collection.return_value.document.return_value
    doc_ref.update = AsyncMock(side_effect=google_exceptions.NotFound("gone"))

    with pytest.raises(DataAccessError):
        run_async(firestore_gateway.update_record("job_tasks", "t1", {"status": "overdue"}))


def test_ping(firestore_gateway, mock_client):
    limited = mock_client.collection.return_value.limit.return_value
    limited.get = AsyncMock(return_value=[])
    run_async(firestore_gateway.ping())
    mock_client.collection.assert_called_with("profiles")
    mock_client.collection.return_value.limit.assert_called_with(1)


def test_malformed_documents_are_skipped(firestore_gateway, mock_client, caplog):
    mock_client.collection.return_value.stream.return_value = _AsyncStream([
        _doc("t1", {"title": "Fine", "status": "pending"}),
        _doc("t2", {"title": "Broken", "assigned_to": "u1"}),
        _doc("t3", {"title": "Also fine", "status": "in-progress"}),
    ])

    with caplog.at_level("WARNING", logger="integrity_agent.clients.gateway"):
        tasks = run_async(firestore_gateway.fetch_tasks())

    assert [task.id for task in tasks] == ["t1", "t3"]
    skipped = [r for r in caplog.records if r.getMessage() == "Skipping malformed document"]
    assert [r.record_id for r in skipped] == ["t2"]


def test_project_id_read_from_credentials_file(monkeypatch, tmp_path):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    creds = tmp_path / "service-account.json"
    creds.write_text(json.dumps({"type": "service_account", "project_id": "sa-project"}))

    gateway = FirestoreGateway(StoreConfig(credentials_path=str(creds)))

    assert gateway.is_configured()
    assert gateway._resolve_project() == "sa-project"


def test_credentials_file_without_project_is_unconfigured(monkeypatch, tmp_path):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    creds = tmp_path / "service-account.json"
    creds.write_text(json.dumps({"type": "service_account"}))
    assert not FirestoreGateway(StoreConfig(credentials_path=str(creds))).is_configured()

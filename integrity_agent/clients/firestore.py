"""Firestore-backed data store gateway used by checks and remediations."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from google.api_core import exceptions as google_exceptions
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account

from ..config.settings import StoreConfig
from ..utils.errors import DataAccessError
from ..utils.records import ProcedureRecord, TaskRecord, UserProfile
from .gateway import DataStoreGateway, RecordT, decode_documents

logger = logging.getLogger(__name__)

# Placeholder values shipped in example .env files
_PLACEHOLDER_PROJECTS = {"", "your-project-id", "YOUR_PROJECT_ID"}


class FirestoreGateway(DataStoreGateway):
    """Reads and patches task, procedure and profile documents in Firestore."""

    def __init__(self, config: StoreConfig):
        self._config = config
        self._client: firestore.AsyncClient | None = None
        self.tasks_collection = config.tasks_collection
        self.procedures_collection = config.procedures_collection
        self.profiles_collection = config.profiles_collection

    def _resolve_project(self) -> Optional[str]:
        """Project id from config, the environment, or the service account file."""
        project = self._config.project_id or os.getenv("GOOGLE_CLOUD_PROJECT")
        if project:
            return project
        cred_path = self._config.credentials_path
        if cred_path and os.path.exists(cred_path):
            try:
                with open(cred_path, encoding="utf-8") as handle:
                    data = json.load(handle)
                if isinstance(data, dict):
                    return data.get("project_id")
            except (OSError, ValueError) as exc:
                logger.warning(f"Could not read project id from {cred_path}: {exc}")
        return None

    def is_configured(self) -> bool:
        project = self._resolve_project()
        if project in _PLACEHOLDER_PROJECTS or project is None:
            return False
        if self._config.emulator_host:
            return True
        cred_path = self._config.credentials_path
        if cred_path and not os.path.exists(cred_path):
            logger.warning(f"Service account file not found at {cred_path}")
            return False
        return True

    def _get_client(self) -> firestore.AsyncClient:
        """Lazy initialization of the async Firestore client."""
        if self._client is not None:
            return self._client
        if not self.is_configured():
            raise DataAccessError("connect", "Firestore project is not configured")
        if self._config.emulator_host:
            os.environ.setdefault("FIRESTORE_EMULATOR_HOST", self._config.emulator_host)
        project = self._resolve_project()
        try:
            cred_path = self._config.credentials_path
            if cred_path:
                credentials = service_account.Credentials.from_service_account_file(cred_path)
                self._client = firestore.AsyncClient(credentials=credentials, project=project)
                logger.info(f"Firestore client initialized with credentials from {cred_path}")
            else:
                self._client = firestore.AsyncClient(project=project)
                logger.info("Firestore client initialized with Application Default Credentials")
        except DefaultCredentialsError as exc:
            raise DataAccessError(
                "connect",
                "Firestore credentials not configured. Set GOOGLE_APPLICATION_CREDENTIALS "
                f"or run 'gcloud auth application-default login'. Error: {exc}",
            ) from exc
        return self._client

    async def _stream(
        self,
        collection: str,
        model: Type[RecordT],
        field_filter: Optional[FieldFilter] = None,
    ) -> List[RecordT]:
        client = self._get_client()
        query = client.collection(collection)
        if field_filter is not None:
            query = query.where(filter=field_filter)
        documents: List[Tuple[str, Dict[str, Any]]] = []
        try:
            async for doc in query.stream():
                documents.append((doc.id, doc.to_dict() or {}))
        except google_exceptions.GoogleAPICallError as exc:
            raise DataAccessError(f"read {collection}", str(exc)) from exc
        return decode_documents(collection, model, documents)

    async def fetch_tasks(
        self,
        statuses: Optional[Iterable[str]] = None,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[TaskRecord]:
        field_filter = None
        if statuses is not None:
            field_filter = FieldFilter("status", "in", list(statuses))
        tasks = await self._stream(self.tasks_collection, TaskRecord, field_filter)
        # Exclusion is applied here so documents without a status are kept.
        if exclude_statuses:
            excluded = set(exclude_statuses)
            tasks = [task for task in tasks if task.status not in excluded]
        return tasks

    async def fetch_procedures(
        self,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[ProcedureRecord]:
        procedures = await self._stream(self.procedures_collection, ProcedureRecord)
        if exclude_statuses:
            excluded = set(exclude_statuses)
            procedures = [proc for proc in procedures if proc.status not in excluded]
        return procedures

    async def fetch_user_profiles(self, is_active: Optional[bool] = None) -> List[UserProfile]:
        profiles = await self._stream(self.profiles_collection, UserProfile)
        if is_active is not None:
            profiles = [profile for profile in profiles if profile.is_active == is_active]
        return profiles

    async def update_record(
        self,
        collection: str,
        record_id: str,
        changes: Mapping[str, Any],
    ) -> None:
        client = self._get_client()
        doc_ref = client.collection(collection).document(record_id)
        try:
            await doc_ref.update(dict(changes))
        except google_exceptions.GoogleAPICallError as exc:
            raise DataAccessError(f"update {collection}/{record_id}", str(exc)) from exc
        logger.info(
            "Patched record",
            extra={"collection": collection, "record_id": record_id, "fields": sorted(changes)},
        )

    async def ping(self) -> None:
        client = self._get_client()
        try:
            await client.collection(self.profiles_collection).limit(1).get()
        except google_exceptions.GoogleAPICallError as exc:
            raise DataAccessError("ping", str(exc)) from exc

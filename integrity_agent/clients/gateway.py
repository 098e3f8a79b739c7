"""Abstract read/write boundary to persisted tasks, procedures and profiles."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..utils.records import ProcedureRecord, TaskRecord, UserProfile

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def decode_documents(
    collection: str,
    model: Type[RecordT],
    documents: Iterable[Tuple[str, Mapping[str, Any]]],
) -> List[RecordT]:
    """Validate ``(doc_id, data)`` pairs, skipping documents that do not fit the model."""
    records: List[RecordT] = []
    for doc_id, data in documents:
        try:
            records.append(model.model_validate({**data, "id": doc_id}))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed document",
                extra={
                    "collection": collection,
                    "record_id": doc_id,
                    "error_count": exc.error_count(),
                    "error": str(exc),
                },
            )
    return records


class DataStoreGateway(ABC):
    """Backend the checks read from and remediations write through.

    Implementations raise ``DataAccessError`` for any backend failure.
    """

    tasks_collection: str = "job_tasks"
    procedures_collection: str = "procedures"
    profiles_collection: str = "profiles"

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a backend is configured at all."""

    @abstractmethod
    async def fetch_tasks(
        self,
        statuses: Optional[Iterable[str]] = None,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[TaskRecord]:
        """Fetch tasks, optionally restricted to or excluding statuses."""

    @abstractmethod
    async def fetch_procedures(
        self,
        exclude_statuses: Optional[Iterable[str]] = None,
    ) -> List[ProcedureRecord]:
        ...

    @abstractmethod
    async def fetch_user_profiles(self, is_active: Optional[bool] = None) -> List[UserProfile]:
        ...

    @abstractmethod
    async def update_record(
        self,
        collection: str,
        record_id: str,
        changes: Mapping[str, Any],
    ) -> None:
        """Patch the named fields of a single record."""

    @abstractmethod
    async def ping(self) -> None:
        """Minimal read used as a liveness probe."""

"""Base LogStore interface shared by every storage backend."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import SQLModel

from lifeintel.db.models import (
    DOMAINS,
    DisciplineDay,
    DisciplineEntry,
    DisciplineLogCreate,
    Domain,
    InboxItemCreate,
    InboxItemRead,
    ProjectCreate,
    ProjectRead,
)

logger = structlog.get_logger()

# Hard read limits that bound the dashboard payload
WINDOW_LIMIT = 30
DISCIPLINE_DETAIL_LIMIT = 100


def clamp_limit(limit: int | None, hard_limit: int) -> int:
    if limit is None:
        return hard_limit
    return max(0, min(limit, hard_limit))


class LogStore(ABC):
    """Abstract base class for domain-keyed log storage.

    Every backend provides:
    - _write(): insert-or-overwrite one validated log by its natural key
    - query(): most-recent-first records for a domain
    - aggregate(): per-date discipline totals
    - project and inbox bookkeeping

    Payloads are validated and project references checked here, before
    any backend is touched.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logger.bind(store=name)

    def upsert(self, domain: Domain | str, fields: Mapping[str, Any]) -> SQLModel:
        """Insert a log or overwrite the one sharing its natural key.

        Args:
            domain: Domain the log belongs to.
            fields: Raw submitted fields.

        Returns:
            The stored record.

        Raises:
            ValidationError: A field is missing, mistyped or out of range.
            ReferenceError: A discipline log names an unknown project.
        """
        domain = Domain(domain)
        payload = validate(domain, fields)

        if isinstance(payload, DisciplineLogCreate) and self.get_project(payload.project_id) is None:
            raise ReferenceError(payload.project_id)

        record, created = self._write(domain, payload)
        self.logger.info(
            "Log upserted",
            domain=domain.value,
            key={name: str(getattr(payload, name)) for name in DOMAINS[domain].key},
            created=created,
        )
        return record

    @abstractmethod
    def _write(self, domain: Domain, payload: SQLModel) -> tuple[SQLModel, bool]:
        """Atomically insert or overwrite a validated payload.

        Returns:
            The stored record and whether a new row was created.
        """
        pass

    @abstractmethod
    def query(self, domain: Domain | str, limit: int | None = None) -> list[SQLModel]:
        """Fetch logs ordered by date, most recent first.

        Body, mind and finance return at most WINDOW_LIMIT records; discipline
        returns DisciplineEntry rows, at most DISCIPLINE_DETAIL_LIMIT.
        """
        pass

    @abstractmethod
    def aggregate(
        self, domain: Domain | str = Domain.DISCIPLINE, limit: int | None = None
    ) -> list[DisciplineDay]:
        """Per-date discipline totals, most recent first, at most WINDOW_LIMIT."""
        pass

    def create_project(self, fields: Mapping[str, Any]) -> ProjectRead:
        payload = _validate_model(ProjectCreate, "project", fields)
        project = self._insert_project(payload)
        self.logger.info("Project created", project_id=project.id, name=project.name)
        return project

    @abstractmethod
    def _insert_project(self, payload: ProjectCreate) -> ProjectRead:
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> ProjectRead | None:
        pass

    @abstractmethod
    def list_projects(self) -> list[ProjectRead]:
        pass

    def add_inbox_item(self, fields: Mapping[str, Any]) -> InboxItemRead:
        payload = _validate_model(InboxItemCreate, "inbox", fields)
        item = self._insert_inbox_item(payload)
        self.logger.info("Inbox item added", item_id=item.id, type=item.type.value)
        return item

    @abstractmethod
    def _insert_inbox_item(self, payload: InboxItemCreate) -> InboxItemRead:
        pass

    @abstractmethod
    def list_inbox(self, limit: int | None = None) -> list[InboxItemRead]:
        """Inbox items, newest first."""
        pass

    @abstractmethod
    def delete_inbox_item(self, item_id: int) -> bool:
        """Delete an inbox item.

        Returns:
            True if an item was removed, False if the id did not exist.
        """
        pass


def validate(domain: Domain | str, fields: Mapping[str, Any]) -> SQLModel:
    """Validate raw fields into the domain's Create DTO."""
    domain = Domain(domain)
    return _validate_model(DOMAINS[domain].create, domain.value, fields)


def _validate_model(model: type[SQLModel], label: str, fields: Mapping[str, Any]) -> SQLModel:
    try:
        return model.model_validate(dict(fields))
    except PydanticValidationError as e:
        raise ValidationError(label, e.errors()) from e


def discipline_entry(log: SQLModel, project_name: str) -> DisciplineEntry:
    return DisciplineEntry(**log.model_dump(), project_name=project_name)


class LogStoreError(Exception):
    """Base exception for log store errors."""

    pass


class ValidationError(LogStoreError):
    """Raised when a submission fails field validation."""

    def __init__(self, domain: str, errors: list[dict[str, Any]]) -> None:
        self.domain = domain
        self.errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
            }
            for error in errors
        ]
        fields = ", ".join(e["field"] or "<root>" for e in self.errors)
        super().__init__(f"[{domain}] invalid fields: {fields}")


class ReferenceError(LogStoreError):
    """Raised when a discipline log references a project that does not exist."""

    def __init__(self, project_id: int) -> None:
        self.project_id = project_id
        super().__init__(f"[discipline] unknown project: {project_id}")

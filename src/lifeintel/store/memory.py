"""In-memory LogStore, used by tests and throwaway sessions."""

import threading
from collections import defaultdict
from datetime import date
from typing import Any

from sqlmodel import SQLModel

from lifeintel.db.models import (
    DOMAINS,
    DisciplineDay,
    Domain,
    InboxItemCreate,
    InboxItemRead,
    ProjectCreate,
    ProjectRead,
    utcnow,
)
from lifeintel.store.base import (
    DISCIPLINE_DETAIL_LIMIT,
    WINDOW_LIMIT,
    LogStore,
    clamp_limit,
    discipline_entry,
)


class InMemoryLogStore(LogStore):
    """LogStore backed by dictionaries keyed on each domain's natural key.

    A single lock serializes every call, so each operation is atomic and
    same-key writes resolve last-write-wins.
    """

    def __init__(self) -> None:
        super().__init__("memory")
        self._lock = threading.Lock()
        self._logs: dict[Domain, dict[tuple[Any, ...], SQLModel]] = defaultdict(dict)
        self._projects: dict[int, ProjectRead] = {}
        self._inbox: dict[int, InboxItemRead] = {}
        self._ids: dict[str, int] = defaultdict(int)

    def _next_id(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def _write(self, domain: Domain, payload: SQLModel) -> tuple[SQLModel, bool]:
        models = DOMAINS[domain]
        key = tuple(getattr(payload, name) for name in models.key)

        with self._lock:
            existing = self._logs[domain].get(key)
            created = existing is None
            record_id = self._next_id(domain.value) if created else existing.id
            record = models.read(**payload.model_dump(), id=record_id)
            self._logs[domain][key] = record

        return record.model_copy(), created

    def query(self, domain: Domain | str, limit: int | None = None) -> list[SQLModel]:
        domain = Domain(domain)

        with self._lock:
            records = sorted(
                self._logs[domain].values(),
                key=lambda r: (r.date, r.id),
                reverse=True,
            )

            if domain is Domain.DISCIPLINE:
                limit = clamp_limit(limit, DISCIPLINE_DETAIL_LIMIT)
                return [
                    discipline_entry(r, self._projects[r.project_id].name)
                    for r in records[:limit]
                ]

            limit = clamp_limit(limit, WINDOW_LIMIT)
            return [r.model_copy() for r in records[:limit]]

    def aggregate(
        self, domain: Domain | str = Domain.DISCIPLINE, limit: int | None = None
    ) -> list[DisciplineDay]:
        if Domain(domain) is not Domain.DISCIPLINE:
            raise ValueError("only discipline logs are aggregated")

        with self._lock:
            by_date: dict[date, list[SQLModel]] = defaultdict(list)
            for record in self._logs[Domain.DISCIPLINE].values():
                by_date[record.date].append(record)

        days = [
            DisciplineDay(
                date=day,
                total_minutes=sum(r.minutes_invested for r in logs),
                avg_focus=sum(r.focus_level for r in logs) / len(logs),
            )
            for day, logs in by_date.items()
        ]
        days.sort(key=lambda d: d.date, reverse=True)
        return days[: clamp_limit(limit, WINDOW_LIMIT)]

    def _insert_project(self, payload: ProjectCreate) -> ProjectRead:
        with self._lock:
            project = ProjectRead(
                **payload.model_dump(), id=self._next_id("project"), created_at=utcnow()
            )
            self._projects[project.id] = project
        return project

    def get_project(self, project_id: int) -> ProjectRead | None:
        with self._lock:
            return self._projects.get(project_id)

    def list_projects(self) -> list[ProjectRead]:
        with self._lock:
            return [self._projects[pid] for pid in sorted(self._projects)]

    def _insert_inbox_item(self, payload: InboxItemCreate) -> InboxItemRead:
        with self._lock:
            item = InboxItemRead(
                **payload.model_dump(), id=self._next_id("inbox"), created_at=utcnow()
            )
            self._inbox[item.id] = item
        return item

    def list_inbox(self, limit: int | None = None) -> list[InboxItemRead]:
        with self._lock:
            items = sorted(self._inbox.values(), key=lambda i: (i.created_at, i.id), reverse=True)
        return items if limit is None else items[: max(0, limit)]

    def delete_inbox_item(self, item_id: int) -> bool:
        with self._lock:
            return self._inbox.pop(item_id, None) is not None

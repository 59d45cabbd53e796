"""SQLModel-backed LogStore."""

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, col, select

from lifeintel.db import create_db_engine, init_db
from lifeintel.db.models import (
    DOMAINS,
    DisciplineDay,
    DisciplineLog,
    Domain,
    InboxItem,
    InboxItemCreate,
    InboxItemRead,
    Project,
    ProjectCreate,
    ProjectRead,
)
from lifeintel.store.base import (
    DISCIPLINE_DETAIL_LIMIT,
    WINDOW_LIMIT,
    LogStore,
    clamp_limit,
    discipline_entry,
)


class SQLLogStore(LogStore):
    """LogStore over a SQL database; each call runs in its own session."""

    def __init__(self, engine: Engine | None = None, create_tables: bool = True) -> None:
        super().__init__("sql")
        self.engine = engine or create_db_engine()
        if create_tables:
            init_db(self.engine)

    def _write(self, domain: Domain, payload: SQLModel) -> tuple[SQLModel, bool]:
        try:
            return self._upsert_row(domain, payload.model_dump())
        except IntegrityError:
            # Another writer inserted the same key first; overwrite its row
            self.logger.warning("Upsert collided, retrying", domain=domain.value)
            return self._upsert_row(domain, payload.model_dump())

    def _upsert_row(self, domain: Domain, values: dict) -> tuple[SQLModel, bool]:
        """Select by natural key, then overwrite or insert in one transaction."""
        models = DOMAINS[domain]

        with Session(self.engine) as session:
            statement = select(models.table)
            for name in models.key:
                statement = statement.where(getattr(models.table, name) == values[name])
            row = session.exec(statement).first()

            created = row is None
            if created:
                row = models.table(**values)
            else:
                for name, value in values.items():
                    if name not in models.key:
                        setattr(row, name, value)

            session.add(row)
            session.commit()
            session.refresh(row)
            return models.read.model_validate(row), created

    def query(self, domain: Domain | str, limit: int | None = None) -> list[SQLModel]:
        domain = Domain(domain)
        models = DOMAINS[domain]

        with Session(self.engine) as session:
            if domain is Domain.DISCIPLINE:
                statement = (
                    select(DisciplineLog, Project.name)
                    .join(Project, col(DisciplineLog.project_id) == col(Project.id))
                    .order_by(col(DisciplineLog.date).desc(), col(DisciplineLog.id).desc())
                    .limit(clamp_limit(limit, DISCIPLINE_DETAIL_LIMIT))
                )
                return [discipline_entry(log, name) for log, name in session.exec(statement)]

            statement = (
                select(models.table)
                .order_by(col(models.table.date).desc(), col(models.table.id).desc())
                .limit(clamp_limit(limit, WINDOW_LIMIT))
            )
            return [models.read.model_validate(row) for row in session.exec(statement)]

    def aggregate(
        self, domain: Domain | str = Domain.DISCIPLINE, limit: int | None = None
    ) -> list[DisciplineDay]:
        if Domain(domain) is not Domain.DISCIPLINE:
            raise ValueError("only discipline logs are aggregated")

        statement = (
            select(
                DisciplineLog.date,
                func.sum(DisciplineLog.minutes_invested),
                func.avg(DisciplineLog.focus_level),
            )
            .group_by(DisciplineLog.date)
            .order_by(col(DisciplineLog.date).desc())
            .limit(clamp_limit(limit, WINDOW_LIMIT))
        )

        with Session(self.engine) as session:
            return [
                DisciplineDay(date=day, total_minutes=int(total), avg_focus=float(avg))
                for day, total, avg in session.exec(statement)
            ]

    def _insert_project(self, payload: ProjectCreate) -> ProjectRead:
        with Session(self.engine) as session:
            project = Project(**payload.model_dump())
            session.add(project)
            session.commit()
            session.refresh(project)
            return ProjectRead.model_validate(project)

    def get_project(self, project_id: int) -> ProjectRead | None:
        with Session(self.engine) as session:
            project = session.get(Project, project_id)
            return ProjectRead.model_validate(project) if project else None

    def list_projects(self) -> list[ProjectRead]:
        with Session(self.engine) as session:
            projects = session.exec(select(Project).order_by(col(Project.id)))
            return [ProjectRead.model_validate(p) for p in projects]

    def _insert_inbox_item(self, payload: InboxItemCreate) -> InboxItemRead:
        with Session(self.engine) as session:
            item = InboxItem(**payload.model_dump())
            session.add(item)
            session.commit()
            session.refresh(item)
            return InboxItemRead.model_validate(item)

    def list_inbox(self, limit: int | None = None) -> list[InboxItemRead]:
        statement = select(InboxItem).order_by(
            col(InboxItem.created_at).desc(), col(InboxItem.id).desc()
        )
        if limit is not None:
            statement = statement.limit(max(0, limit))

        with Session(self.engine) as session:
            return [InboxItemRead.model_validate(i) for i in session.exec(statement)]

    def delete_inbox_item(self, item_id: int) -> bool:
        with Session(self.engine) as session:
            item = session.get(InboxItem, item_id)
            if item is None:
                return False
            session.delete(item)
            session.commit()
            return True

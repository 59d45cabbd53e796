"""Database models for Life Intelligence using SQLModel.

Each logged entity comes in three shapes:
- ``*Base``: validated fields shared by every shape
- table model: the persisted row
- ``*Create`` / ``*Read``: input DTO and the record returned by any LogStore
"""

from dataclasses import dataclass
import datetime as dt
import math
from enum import Enum

from sqlalchemy import UniqueConstraint
from pydantic import field_validator
from sqlmodel import Field, SQLModel


MINUTES_PER_DAY = 24 * 60


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class Domain(str, Enum):
    """Life domains that can be logged."""

    BODY = "body"
    MIND = "mind"
    FINANCE = "finance"
    DISCIPLINE = "discipline"


class InboxItemType(str, Enum):
    IDEA = "idea"
    WORRY = "worry"
    THOUGHT = "thought"
    TASK = "task"


# Body


class BodyLogBase(SQLModel):
    """Physical state for one calendar day."""

    date: dt.date = Field(index=True, unique=True)

    # Sleep
    sleep_hours: float = Field(ge=0, le=24)
    sleep_quality: int = Field(ge=1, le=5)

    # Training
    training_done: bool = False
    training_type: str = ""

    energy_level: int = Field(ge=1, le=5)
    activity_level: int = Field(ge=1, le=5)


class BodyLog(BodyLogBase, table=True):
    __tablename__ = "body_logs"

    id: int | None = Field(default=None, primary_key=True)


class BodyLogCreate(BodyLogBase):
    pass


class BodyLogRead(BodyLogBase):
    id: int


# Mind


class MindLogBase(SQLModel):
    """Mental state for one calendar day. Anxiety and stress: higher is worse."""

    date: dt.date = Field(index=True, unique=True)

    mood: int = Field(ge=1, le=5)
    anxiety: int = Field(ge=1, le=5)
    stress: int = Field(ge=1, le=5)
    focus: int = Field(ge=1, le=5)
    journal: str = ""


class MindLog(MindLogBase, table=True):
    __tablename__ = "mind_logs"

    id: int | None = Field(default=None, primary_key=True)


class MindLogCreate(MindLogBase):
    pass


class MindLogRead(MindLogBase):
    id: int


# Finance


class FinanceLogBase(SQLModel):
    """Money snapshot for one calendar day."""

    date: dt.date = Field(index=True, unique=True)

    income: float = Field(default=0, ge=0)
    expenses: float = Field(default=0, ge=0)
    debts: float = Field(default=0, ge=0)
    installments: float = Field(default=0, ge=0)

    @field_validator("income", "expenses", "debts", "installments")
    @classmethod
    def money_is_finite(cls, value: float) -> float:
        return _finite(value)


class FinanceLog(FinanceLogBase, table=True):
    __tablename__ = "finance_logs"

    id: int | None = Field(default=None, primary_key=True)


class FinanceLogCreate(FinanceLogBase):
    pass


class FinanceLogRead(FinanceLogBase):
    id: int


# Projects & discipline


class ProjectBase(SQLModel):
    name: str = Field(min_length=1)
    weekly_goal_hours: float = Field(default=0, ge=0)

    @field_validator("weekly_goal_hours")
    @classmethod
    def goal_is_finite(cls, value: float) -> float:
        return _finite(value)


class Project(ProjectBase, table=True):
    __tablename__ = "projects"

    id: int | None = Field(default=None, primary_key=True)
    created_at: dt.datetime = Field(default_factory=utcnow)


class ProjectCreate(ProjectBase):
    pass


class ProjectRead(ProjectBase):
    id: int
    created_at: dt.datetime


class DisciplineLogBase(SQLModel):
    """Time invested in one project on one day."""

    date: dt.date = Field(index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    minutes_invested: int = Field(ge=0, le=MINUTES_PER_DAY)
    focus_level: int = Field(ge=1, le=5)


class DisciplineLog(DisciplineLogBase, table=True):
    __tablename__ = "discipline_logs"
    __table_args__ = (
        UniqueConstraint("date", "project_id", name="uq_discipline_date_project"),
    )

    id: int | None = Field(default=None, primary_key=True)


class DisciplineLogCreate(DisciplineLogBase):
    pass


class DisciplineLogRead(DisciplineLogBase):
    id: int


class DisciplineEntry(DisciplineLogRead):
    """Discipline log joined with its project for display."""

    project_name: str


class DisciplineDay(SQLModel):
    """Per-date discipline aggregate consumed by the dashboard."""

    date: dt.date
    total_minutes: int
    avg_focus: float


# Mental inbox


class InboxItemBase(SQLModel):
    content: str = Field(min_length=1)
    type: InboxItemType


class InboxItem(InboxItemBase, table=True):
    __tablename__ = "mental_inbox"

    id: int | None = Field(default=None, primary_key=True)
    created_at: dt.datetime = Field(default_factory=utcnow, index=True)


class InboxItemCreate(InboxItemBase):
    pass


class InboxItemRead(InboxItemBase):
    id: int
    created_at: dt.datetime


@dataclass(frozen=True)
class DomainModels:
    """Model classes and natural key for one logged domain."""

    create: type[SQLModel]
    table: type[SQLModel]
    read: type[SQLModel]
    key: tuple[str, ...]


DOMAINS: dict[Domain, DomainModels] = {
    Domain.BODY: DomainModels(BodyLogCreate, BodyLog, BodyLogRead, ("date",)),
    Domain.MIND: DomainModels(MindLogCreate, MindLog, MindLogRead, ("date",)),
    Domain.FINANCE: DomainModels(FinanceLogCreate, FinanceLog, FinanceLogRead, ("date",)),
    Domain.DISCIPLINE: DomainModels(
        DisciplineLogCreate, DisciplineLog, DisciplineLogRead, ("date", "project_id")
    ),
}

"""Database engine and schema helpers."""

from pathlib import Path

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from lifeintel.config.settings import settings

# Register tables on SQLModel.metadata
from lifeintel.db import models  # noqa: F401

logger = structlog.get_logger()

SQLITE_PREFIX = "sqlite:///"


def resolve_database_url(url: str) -> str:
    """Expand ``~`` in SQLite file URLs and create the parent directory."""
    if not url.startswith(SQLITE_PREFIX) or url == SQLITE_PREFIX:
        return url

    raw_path = url[len(SQLITE_PREFIX):]
    if raw_path.startswith(":memory:"):
        return url

    path = Path(raw_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"{SQLITE_PREFIX}{path}"


def create_db_engine(url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for the configured (or given) database URL.

    In-memory SQLite shares one connection so every session sees the same data.
    """
    url = resolve_database_url(url or settings.database.database_url)
    echo = settings.database.echo if echo is None else echo

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", f"{SQLITE_PREFIX}:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, echo=echo)


def init_db(engine: Engine) -> None:
    """Create all tables if they do not exist."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized", url=engine.url.render_as_string(hide_password=True))


def close_db(engine: Engine) -> None:
    """Dispose of pooled connections."""
    engine.dispose()
    logger.info("Database connections closed")

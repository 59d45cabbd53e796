"""Life Intelligence API server for log entry and the dashboard."""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

import structlog
from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from lifeintel import __version__
from lifeintel.aggregators.dashboard import DashboardAggregator, DashboardData
from lifeintel.config.settings import settings
from lifeintel.db import close_db
from lifeintel.db.models import (
    BodyLogRead,
    DisciplineEntry,
    Domain,
    FinanceLogRead,
    InboxItemRead,
    MindLogRead,
    ProjectRead,
)
from lifeintel.store import (
    DISCIPLINE_DETAIL_LIMIT,
    WINDOW_LIMIT,
    LogStore,
    ReferenceError,
    SQLLogStore,
    ValidationError,
)

logger = structlog.get_logger()


@lru_cache
def get_store() -> LogStore:
    """Process-wide store; tests override this dependency."""
    return SQLLogStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: Initialize database
    try:
        get_store()
        logger.info("Store ready")
    except Exception as e:
        logger.warning("Database initialization failed", error=str(e))

    yield

    # Shutdown: Close database connections
    if get_store.cache_info().currsize:
        store = get_store()
        if isinstance(store, SQLLogStore):
            close_db(store.engine)


app = FastAPI(
    title="Life Intelligence API",
    description="Daily body, mind, finance and discipline logging with cross-domain insights",
    version=__version__,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected submission", domain=exc.domain, errors=exc.errors)
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "details": exc.errors},
    )


@app.exception_handler(ReferenceError)
async def reference_error_handler(request: Request, exc: ReferenceError) -> JSONResponse:
    logger.info("Unknown project", project_id=exc.project_id)
    return JSONResponse(
        status_code=404,
        content={"error": "unknown_project", "details": {"project_id": exc.project_id}},
    )


def _saved(record: SQLModel) -> dict[str, Any]:
    return {"success": True, "record": record.model_dump(mode="json")}


# --- Body ---


@app.get("/api/body")
def list_body(
    limit: int = Query(WINDOW_LIMIT, ge=1, le=WINDOW_LIMIT),
    store: LogStore = Depends(get_store),
) -> list[BodyLogRead]:
    return store.query(Domain.BODY, limit)


@app.post("/api/body")
def upsert_body(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    """Create or replace the body log for the submitted date."""
    return _saved(store.upsert(Domain.BODY, payload))


# --- Mind ---


@app.get("/api/mind")
def list_mind(
    limit: int = Query(WINDOW_LIMIT, ge=1, le=WINDOW_LIMIT),
    store: LogStore = Depends(get_store),
) -> list[MindLogRead]:
    return store.query(Domain.MIND, limit)


@app.post("/api/mind")
def upsert_mind(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    """Create or replace the mind log for the submitted date."""
    return _saved(store.upsert(Domain.MIND, payload))


# --- Finance ---


@app.get("/api/finance")
def list_finance(
    limit: int = Query(WINDOW_LIMIT, ge=1, le=WINDOW_LIMIT),
    store: LogStore = Depends(get_store),
) -> list[FinanceLogRead]:
    return store.query(Domain.FINANCE, limit)


@app.post("/api/finance")
def upsert_finance(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    """Create or replace the finance log for the submitted date."""
    return _saved(store.upsert(Domain.FINANCE, payload))


# --- Projects & Discipline ---


@app.get("/api/projects")
def list_projects(store: LogStore = Depends(get_store)) -> list[ProjectRead]:
    return store.list_projects()


@app.post("/api/projects")
def create_project(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    return _saved(store.create_project(payload))


@app.get("/api/discipline")
def list_discipline(
    limit: int = Query(DISCIPLINE_DETAIL_LIMIT, ge=1, le=DISCIPLINE_DETAIL_LIMIT),
    store: LogStore = Depends(get_store),
) -> list[DisciplineEntry]:
    """Discipline logs with their project names, most recent first."""
    return store.query(Domain.DISCIPLINE, limit)


@app.post("/api/discipline")
def upsert_discipline(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    """Create or replace minutes and focus for one project on one date."""
    return _saved(store.upsert(Domain.DISCIPLINE, payload))


# --- Mental Inbox ---


@app.get("/api/inbox")
def list_inbox(store: LogStore = Depends(get_store)) -> list[InboxItemRead]:
    return store.list_inbox()


@app.post("/api/inbox")
def add_inbox_item(
    payload: dict[str, Any] = Body(...),
    store: LogStore = Depends(get_store),
) -> dict[str, Any]:
    return _saved(store.add_inbox_item(payload))


@app.delete("/api/inbox/{item_id}")
def delete_inbox_item(item_id: int, store: LogStore = Depends(get_store)) -> dict[str, Any]:
    deleted = store.delete_inbox_item(item_id)
    return {"success": True, "deleted": deleted}


# --- Dashboard & Insights ---


@app.get("/api/dashboard")
def get_dashboard(store: LogStore = Depends(get_store)) -> DashboardData:
    """Scores, insights and the last 30 days of every domain."""
    return DashboardAggregator(store).get_dashboard()


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(app, host=host or settings.api.host, port=port or settings.api.port)


if __name__ == "__main__":
    run_server()

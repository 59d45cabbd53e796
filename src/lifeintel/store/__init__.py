"""Domain-keyed log storage."""

from lifeintel.store.base import (
    DISCIPLINE_DETAIL_LIMIT,
    WINDOW_LIMIT,
    LogStore,
    LogStoreError,
    ReferenceError,
    ValidationError,
    validate,
)
from lifeintel.store.memory import InMemoryLogStore
from lifeintel.store.sql import SQLLogStore

__all__ = [
    # Base
    "LogStore",
    "LogStoreError",
    "ValidationError",
    "ReferenceError",
    "validate",
    "WINDOW_LIMIT",
    "DISCIPLINE_DETAIL_LIMIT",
    # Backends
    "InMemoryLogStore",
    "SQLLogStore",
]

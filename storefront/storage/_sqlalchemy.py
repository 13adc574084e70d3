"""
SQLAlchemy integration: durable key-value storage in any SQL database.

Usage:
    engine = create_engine("sqlite:///storefront.db")
    storage = SQLAlchemyStorage(engine)

    storage.set("cart", "[]")
    storage.get("cart")  # Ok("[]")

The table is created on first use. Each call runs in its own transaction,
so a write is durable as soon as `set` returns Ok.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import Engine, String, DateTime, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from kungfu import Result, Ok, Error

from storefront.storage._store import StorageError, MemoryStorage, Storage

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════

class Base(DeclarativeBase):
    pass


class KeyValueTable(Base):
    """One row per storage key."""

    __tablename__ = "storefront_kv"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Storage
# ═══════════════════════════════════════════════════════════════════════════════

class SQLAlchemyStorage:
    """
    Key-value storage backed by a SQLAlchemy engine.

    Note: synchronous on purpose. The cart persists right after each
    mutation, before control returns to the caller.
    """

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self._engine = engine
        self._ready = not create_tables

    def _ensure_schema(self) -> None:
        if not self._ready:
            Base.metadata.create_all(self._engine)
            self._ready = True

    def get(self, key: str) -> Result[str | None, StorageError]:
        try:
            self._ensure_schema()
            with Session(self._engine) as session:
                row = session.get(KeyValueTable, key)
                return Ok(row.value if row is not None else None)
        except SQLAlchemyError as e:
            return Error(StorageError(f"Failed to read {key!r}", e))

    def set(self, key: str, value: str) -> Result[None, StorageError]:
        try:
            self._ensure_schema()
            with Session(self._engine) as session, session.begin():
                session.merge(KeyValueTable(key=key, value=value, updated_at=datetime.now()))
            return Ok(None)
        except SQLAlchemyError as e:
            return Error(StorageError(f"Failed to write {key!r}", e))

    def remove(self, key: str) -> Result[bool, StorageError]:
        try:
            self._ensure_schema()
            with Session(self._engine) as session, session.begin():
                row = session.get(KeyValueTable, key)
                if row is None:
                    return Ok(False)
                session.delete(row)
            return Ok(True)
        except SQLAlchemyError as e:
            return Error(StorageError(f"Failed to remove {key!r}", e))


# ═══════════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════════

def open_storage(url: str) -> Storage:
    """
    Storage for a configured URL.

    Empty URL → MemoryStorage, anything else → SQLAlchemyStorage.
    """
    if not url:
        logger.info("No storage URL configured, cart will not survive restarts")
        return MemoryStorage()
    return SQLAlchemyStorage(create_engine(url))


__all__ = (
    "Base",
    "KeyValueTable",
    "SQLAlchemyStorage",
    "open_storage",
)

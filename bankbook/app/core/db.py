from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata
from .errors import StorageError


logger = logging.getLogger(__name__)


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def create_engine_for_url(database_url: str, busy_timeout: float = 30.0) -> Engine:
    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": busy_timeout}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def init_db(engine: Engine) -> None:
    """Create the accounts table if it does not exist yet."""
    try:
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        logger.exception("db.init.failed", extra={"url": str(engine.url)})
        raise StorageError(f"Cannot initialise database: {exc}") from exc

"""Database infrastructure for ledger-sync.

This module exposes helpers to create and reuse the SQLAlchemy engine of
the local ledger database. It belongs to the infrastructure layer because
it deals with an external system.
"""

from pathlib import Path
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from ledger_sync.application.ports.database import DatabaseEnginePort
from ledger_sync.infrastructure.settings import LedgerSyncSettings


def _ensure_sqlite_directory(db_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database.

    Args:
        db_url: SQLAlchemy URL of the database.
    """
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    if url.database in (None, "", ":memory:"):
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL.

    Returns:
        Engine: Engine with connection health checks enabled.
    """
    _ensure_sqlite_directory(db_url)
    return create_engine(
        db_url,
        pool_pre_ping=True,
        future=True,
    )


_ledger_engine: Optional[Engine] = None


def get_ledger_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the ledger database.

    Values from a ``.env`` file are loaded before reading settings.

    Returns:
        Engine: Lazily initialized engine for the configured database URL.
    """
    global _ledger_engine
    if _ledger_engine is None:
        dotenv.load_dotenv()
        settings = LedgerSyncSettings.from_env()
        _ledger_engine = _create_engine(settings.database_url)
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    An explicit engine can be injected; otherwise the module singleton is
    used.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine holding synchronized ledger data.
        """
        if self._engine is not None:
            return self._engine
        return get_ledger_engine()


__all__ = [
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]

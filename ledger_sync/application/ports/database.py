"""Database ports for ledger-sync.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations provide concrete adapters
that satisfy it.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the local ledger database."""

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the local ledger database.

        Returns:
            Engine: SQLAlchemy engine holding synchronized ledger data.
        """


__all__ = ["DatabaseEnginePort"]

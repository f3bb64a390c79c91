"""Composition root for wiring infrastructure adapters."""

from ledger_sync.application.ports.database import DatabaseEnginePort
from ledger_sync.application.ports.ledger_codec import LedgerCodecPort
from ledger_sync.application.ports.ledger_store import LedgerStorePort
from ledger_sync.application.use_cases.compose_transaction import (
    TransactionComposer,
)
from ledger_sync.application.use_cases.get_account_tree import (
    GetAccountTreeUseCase,
)
from ledger_sync.application.use_cases.resolve_api_version import (
    ResolveApiVersionUseCase,
)
from ledger_sync.application.use_cases.sync_ledger import SyncLedgerUseCase
from ledger_sync.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from ledger_sync.infrastructure.hledger_json.registry import codec_for
from ledger_sync.infrastructure.ledger_store import SqlAlchemyLedgerStore
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.infrastructure.settings import LedgerSyncSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_store(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerStorePort:
    """Return the SQLAlchemy ledger store."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerStore(resolved_db)


def build_codec(
    settings: LedgerSyncSettings | None = None,
    version_response: str | None = None,
) -> LedgerCodecPort:
    """Return the codec for the configured or detected API version.

    Args:
        settings: Settings to use; read from the environment when omitted.
        version_response: Server version answer used when configured as AUTO.

    Returns:
        LedgerCodecPort: Codec for the resolved version.
    """
    resolved_settings = settings or LedgerSyncSettings.from_env()
    version = ResolveApiVersionUseCase(logger=get_app_logger()).execute(
        resolved_settings.api_version,
        version_response,
    )
    return codec_for(version)


def build_sync_ledger_use_case(
    settings: LedgerSyncSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
    version_response: str | None = None,
) -> SyncLedgerUseCase:
    """Return the sync use case wired to the configured codec and store."""
    return SyncLedgerUseCase(
        codec=build_codec(settings, version_response),
        store=build_ledger_store(db_port),
        logger=get_app_logger(),
    )


def build_account_tree_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> GetAccountTreeUseCase:
    """Return the use case reading the stored account tree."""
    return GetAccountTreeUseCase(build_ledger_store(db_port))


def build_transaction_composer(
    settings: LedgerSyncSettings | None = None,
) -> TransactionComposer:
    """Return a composer using the configured formatting preferences."""
    resolved_settings = settings or LedgerSyncSettings.from_env()
    return TransactionComposer(
        context=resolved_settings.formatting_context(),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_store",
    "build_codec",
    "build_sync_ledger_use_case",
    "build_account_tree_use_case",
    "build_transaction_composer",
]

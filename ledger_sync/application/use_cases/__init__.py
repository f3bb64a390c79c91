"""Application use cases package."""

from .compose_transaction import TransactionComposer
from .get_account_tree import GetAccountTreeUseCase
from .resolve_api_version import ResolveApiVersionUseCase
from .sync_ledger import SyncLedgerResult, SyncLedgerUseCase

__all__ = [
    "TransactionComposer",
    "GetAccountTreeUseCase",
    "ResolveApiVersionUseCase",
    "SyncLedgerResult",
    "SyncLedgerUseCase",
]

"""Use case to read the stored account tree for display."""

from ledger_sync.application.ports.ledger_store import LedgerStorePort
from ledger_sync.domain.models.accounts import AccountTree
from ledger_sync.domain.policies.account_filters import (
    is_reported_account_name,
)


class GetAccountTreeUseCase:
    """Fetch the stored account hierarchy as an immutable snapshot."""

    def __init__(self, store: LedgerStorePort) -> None:
        """Initialize the use case with its required dependencies."""
        self._store = store

    def execute(self) -> AccountTree:
        """Return every stored account except the synthetic root."""
        accounts = self._store.fetch_accounts()
        return AccountTree(
            account
            for account in accounts
            if is_reported_account_name(account.full_name)
        )


__all__ = ["GetAccountTreeUseCase"]

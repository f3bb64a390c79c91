"""Port for persisting the synchronized ledger."""

from collections.abc import Sequence
from typing import Protocol

from ledger_sync.domain.models.accounts import AccountNode, AccountTree
from ledger_sync.domain.models.transactions import Transaction


class LedgerStorePort(Protocol):
    """Port exposing stored accounts and transactions."""

    def prepare_destination(self) -> None:
        """Ensure the storage can receive data."""

    def fetch_expanded_names(self) -> set[str]:
        """Return names of accounts the user left expanded."""

    def replace_accounts(self, tree: AccountTree) -> int:
        """Replace stored accounts with the snapshot; return the row count."""

    def replace_transactions(self, transactions: Sequence[Transaction]) -> int:
        """Replace stored transactions; return the row count."""

    def replace_ledger(
        self,
        tree: AccountTree,
        transactions: Sequence[Transaction],
    ) -> tuple[int, int]:
        """Replace accounts and transactions together, or neither."""

    def fetch_accounts(self) -> list[AccountNode]:
        """Return stored accounts with their amounts."""


__all__ = ["LedgerStorePort"]

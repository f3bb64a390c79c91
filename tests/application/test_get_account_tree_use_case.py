"""Tests for the GetAccountTreeUseCase."""

from decimal import Decimal
from unittest.mock import MagicMock

from ledger_sync.application.use_cases.get_account_tree import (
    GetAccountTreeUseCase,
)
from ledger_sync.domain.models.accounts import AccountNode


def test_execute_returns_snapshot_without_root() -> None:
    """The synthetic root is filtered out of the snapshot."""
    cash = AccountNode("Assets:Cash")
    cash.add_amount(Decimal("3"), "USD")
    store = MagicMock()
    store.fetch_accounts.return_value = [
        AccountNode("root"),
        cash,
        AccountNode("Assets", has_children=True),
    ]

    tree = GetAccountTreeUseCase(store).execute()

    assert tree.names() == ["Assets", "Assets:Cash"]
    assert tree.get("Assets:Cash").amount_for("USD") == Decimal("3")
    store.fetch_accounts.assert_called_once_with()

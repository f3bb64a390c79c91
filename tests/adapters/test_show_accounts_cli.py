"""Tests for the show_accounts_cli adapter."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from ledger_sync.adapters import show_accounts_cli
from ledger_sync.domain.models.accounts import AccountNode, AccountTree
from ledger_sync.domain.models.amounts import AmountStyle, SymbolPosition
from ledger_sync.domain.models.context import FormattingContext


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch):
    """Skip .env loading and keep log files out of the project tree."""
    monkeypatch.setattr(show_accounts_cli.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(
        show_accounts_cli,
        "get_app_logger",
        lambda: MagicMock(),
    )
    for name in ("LEDGER_DECIMAL_SEPARATOR", "LEDGER_CURRENCY_POSITION"):
        monkeypatch.delenv(name, raising=False)


def test_render_account_indents_and_marks_collapsed_parents() -> None:
    """Collapsed parents get a marker; amounts use their own style."""
    node = AccountNode("Assets:Cash", has_children=True)
    node.add_amount(
        Decimal("1234.5"),
        "USD",
        AmountStyle(SymbolPosition.BEFORE, True, 2, "."),
    )

    line = show_accounts_cli.render_account(node, FormattingContext())

    assert line == "  + Cash  USD 1,234.50"


def test_main_prints_visible_accounts(monkeypatch, capsys) -> None:
    """Only accounts below expanded parents are printed."""
    tree = AccountTree(
        [
            AccountNode("Assets", has_children=True, expanded=True),
            AccountNode("Assets:Bank", has_children=True),
            AccountNode("Assets:Bank:Main"),
        ]
    )
    use_case = MagicMock()
    use_case.execute.return_value = tree
    monkeypatch.setattr(
        show_accounts_cli,
        "build_account_tree_use_case",
        lambda: use_case,
    )

    show_accounts_cli.main()

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["  Assets", "  + Bank"]


def test_main_reports_database_errors(monkeypatch, capsys) -> None:
    """Storage failures end with exit code 1."""
    def _failing_builder():
        raise OperationalError("SELECT", {}, Exception("no such table"))

    monkeypatch.setattr(
        show_accounts_cli,
        "build_account_tree_use_case",
        _failing_builder,
    )

    with pytest.raises(SystemExit) as excinfo:
        show_accounts_cli.main()

    assert excinfo.value.code == 1
    assert "Could not load data" in capsys.readouterr().out

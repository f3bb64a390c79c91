"""Tests for assembling decoded accounts into a tree."""

from decimal import Decimal
from itertools import permutations

import pytest

from ledger_sync.domain.errors import DecodeError, OperationCancelled
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.services.account_tree import (
    AccountTreeBuilder,
    build_account_tree,
)
from ledger_sync.utils.cancellation import CancellationToken


def _node(name: str, **amounts: str) -> AccountNode:
    node = AccountNode(name)
    for currency, value in amounts.items():
        node.add_amount(Decimal(value), currency)
    return node


def test_missing_ancestors_are_synthesized_with_descendant_amounts() -> None:
    """A lone deep account should create its ancestors with its amounts."""
    builder = AccountTreeBuilder()
    builder.add(_node("Assets:Cash:Checking", USD="5"))

    tree = builder.build()

    assert tree.names() == ["Assets", "Assets:Cash", "Assets:Cash:Checking"]
    assert tree.get("Assets").amount_for("USD") == Decimal("5")
    assert tree.get("Assets:Cash").amount_for("USD") == Decimal("5")
    assert tree.get("Assets").has_children is True
    assert tree.get("Assets:Cash").has_children is True
    assert tree.get("Assets:Cash:Checking").has_children is False
    assert builder.synthesized_names == ["Assets", "Assets:Cash"]
    assert builder.reported_count == 1


def test_propagation_stops_at_reported_ancestor() -> None:
    """Reported balances already include their sub-accounts."""
    tree = build_account_tree(
        [
            _node("Assets", USD="12"),
            _node("Assets:Cash:Checking", USD="5"),
            _node("Assets:Cash:Savings", USD="7"),
        ]
    )

    assert tree.get("Assets").amount_for("USD") == Decimal("12")
    assert tree.get("Assets:Cash").amount_for("USD") == Decimal("12")


def test_result_does_not_depend_on_arrival_order() -> None:
    """Every arrival order should produce the same tree."""
    nodes = [
        _node("Assets:Cash", USD="7"),
        _node("Assets:Cash:Checking", USD="5"),
        _node("Assets:Bank:Main", EUR="3"),
        _node("Expenses:Food", USD="2"),
    ]
    expected = build_account_tree(nodes)

    for order in permutations(nodes):
        assert build_account_tree(order) == expected

    assert expected.get("Assets").amount_for("USD") == Decimal("7")
    assert expected.get("Assets").amount_for("EUR") == Decimal("3")
    assert expected.get("Expenses").amount_for("USD") == Decimal("2")


def test_late_report_of_synthesized_account_replaces_its_amounts() -> None:
    """Reporting a synthesized account should apply only the difference."""
    builder = AccountTreeBuilder()
    builder.add(_node("Assets:Cash:Checking", USD="5"))
    builder.add(_node("Assets:Cash", USD="7", EUR="1"))

    tree = builder.build()

    assert tree.get("Assets:Cash").amount_for("USD") == Decimal("7")
    assert tree.get("Assets").amount_for("USD") == Decimal("7")
    assert tree.get("Assets").amount_for("EUR") == Decimal("1")
    assert tree.get("Assets:Cash").has_children is True
    assert builder.synthesized_names == ["Assets"]


def test_duplicate_reports_are_rejected() -> None:
    """The same account reported twice is a decode error."""
    builder = AccountTreeBuilder()
    builder.add(_node("Assets"))

    with pytest.raises(DecodeError):
        builder.add(_node("Assets"))


def test_cancelled_token_stops_assembly() -> None:
    """Adding after cancellation should raise."""
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelled):
        build_account_tree([_node("Assets")], token)

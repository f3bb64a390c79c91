"""Assembly of decoded accounts into an account tree snapshot.

Servers may omit intermediate accounts. Missing ancestors are synthesized
with no amounts and then receive the amounts of every reported descendant
below them, added as each descendant arrives. Propagation stops at the
nearest reported ancestor because a reported balance already includes its
sub-accounts. Final totals therefore do not depend on arrival order.
"""

from collections.abc import Iterable

from ledger_sync.domain.errors import DecodeError
from ledger_sync.domain.models.accounts import (
    AccountNode,
    AccountTree,
    extract_parent_name,
)
from ledger_sync.utils.cancellation import CancellationToken, check_cancelled


class AccountTreeBuilder:
    """Incrementally assemble reported accounts into a tree."""

    def __init__(self, cancel_token: CancellationToken | None = None) -> None:
        """Initialize an empty builder.

        Args:
            cancel_token: Optional token checked once per added account.
        """
        self._nodes: dict[str, AccountNode] = {}
        self._reported: set[str] = set()
        self._cancel_token = cancel_token

    @property
    def reported_count(self) -> int:
        return len(self._reported)

    @property
    def synthesized_names(self) -> list[str]:
        """Names of ancestors created because the server omitted them."""
        return sorted(set(self._nodes) - self._reported)

    def add(self, node: AccountNode) -> None:
        """Add one reported account.

        Args:
            node: Decoded account with its own amounts.

        Raises:
            DecodeError: If the account was already reported.
            OperationCancelled: If the cancellation token is set.
        """
        check_cancelled(self._cancel_token)
        name = node.full_name
        if name in self._reported:
            raise DecodeError(f"Account reported twice: {name}")

        incoming = node.copy()
        previous = self._nodes.get(name)
        if previous is None:
            delta = incoming.copy()
        else:
            incoming.has_children = incoming.has_children or previous.has_children
            delta = _difference(incoming, previous)

        self._nodes[name] = incoming
        self._reported.add(name)
        self._propagate(name, delta)

    def add_all(self, nodes: Iterable[AccountNode]) -> None:
        for node in nodes:
            self.add(node)

    def build(self) -> AccountTree:
        """Return an immutable snapshot of the accounts added so far."""
        return AccountTree(self._nodes.values())

    def _propagate(self, name: str, delta: AccountNode) -> None:
        parent_name = extract_parent_name(name)
        while parent_name is not None:
            parent = self._nodes.get(parent_name)
            if parent is None:
                parent = AccountNode(parent_name)
                self._nodes[parent_name] = parent
            parent.has_children = True
            if parent_name in self._reported:
                break
            delta.propagate_amounts_to(parent)
            parent_name = extract_parent_name(parent_name)


def _difference(current: AccountNode, previous: AccountNode) -> AccountNode:
    """Per-currency amounts that turn ``previous`` into ``current``."""
    delta = AccountNode(current.full_name)
    for currency in list(previous.amounts) + list(current.amounts):
        if currency in delta.amounts:
            continue
        source = current.amounts.get(currency) or previous.amounts[currency]
        delta.add_amount(
            current.amount_for(currency) - previous.amount_for(currency),
            currency,
            source.style,
        )
    return delta


def build_account_tree(
    nodes: Iterable[AccountNode],
    cancel_token: CancellationToken | None = None,
) -> AccountTree:
    """Build a tree snapshot from reported accounts.

    Args:
        nodes: Decoded accounts in any order.
        cancel_token: Optional token checked once per account.

    Returns:
        AccountTree: Snapshot including synthesized ancestors.
    """
    builder = AccountTreeBuilder(cancel_token)
    builder.add_all(nodes)
    return builder.build()


__all__ = ["AccountTreeBuilder", "build_account_tree"]

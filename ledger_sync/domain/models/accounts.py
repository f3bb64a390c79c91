"""Domain models for ledger accounts and account tree snapshots."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType

from ledger_sync.domain.constants import ACCOUNT_DELIMITER
from ledger_sync.domain.models.amounts import AmountStyle, StyledAmount


def split_account_name(full_name: str) -> list[str]:
    """Split a colon-delimited account name into its segments.

    Args:
        full_name: Account name such as ``Assets:Cash``.

    Returns:
        list[str]: Name segments from the top level down.

    Raises:
        ValueError: If the name is blank or has an empty segment.
    """
    segments = full_name.split(ACCOUNT_DELIMITER)
    if any(not segment.strip() for segment in segments):
        raise ValueError(f"Invalid account name: {full_name!r}")
    return segments


def extract_parent_name(full_name: str) -> str | None:
    """Return the parent account name, or None for top-level accounts."""
    head, delimiter, _ = full_name.rpartition(ACCOUNT_DELIMITER)
    return head if delimiter else None


def account_sort_key(full_name: str) -> tuple[str, ...]:
    """Sort key that keeps every parent right before its sub-accounts."""
    return tuple(full_name.split(ACCOUNT_DELIMITER))


@dataclass
class AccountNode:
    """One account with its per-currency amounts.

    Amounts are keyed by currency code; the empty code is a valid bucket for
    amounts without a commodity.

    Attributes:
        full_name: Colon-delimited account name.
        amounts: Per-currency amounts, at most one entry per currency.
        expanded: UI-only flag telling whether sub-accounts are shown.
        has_children: True when at least one sub-account exists.
    """

    full_name: str
    amounts: dict[str, StyledAmount] = field(default_factory=dict)
    expanded: bool = False
    has_children: bool = False

    def __post_init__(self) -> None:
        split_account_name(self.full_name)

    @property
    def short_name(self) -> str:
        return self.full_name.rsplit(ACCOUNT_DELIMITER, 1)[-1]

    @property
    def parent_name(self) -> str | None:
        return extract_parent_name(self.full_name)

    @property
    def level(self) -> int:
        """Depth in the tree; top-level accounts are level 0."""
        return self.full_name.count(ACCOUNT_DELIMITER)

    def amount_for(self, currency: str) -> Decimal:
        """Return the magnitude held in ``currency``, zero when absent."""
        amount = self.amounts.get(currency)
        return amount.magnitude if amount is not None else Decimal("0")

    def add_amount(
        self,
        magnitude: Decimal,
        currency: str = "",
        style: AmountStyle | None = None,
    ) -> None:
        """Merge a magnitude into the bucket of its currency.

        The first style seen for a currency is kept; later styles are
        ignored.

        Args:
            magnitude: Amount to add.
            currency: Currency code, empty for no commodity.
            style: Display style reported alongside the amount.
        """
        existing = self.amounts.get(currency)
        if existing is None:
            self.amounts[currency] = StyledAmount(currency, magnitude, style)
        else:
            self.amounts[currency] = existing.plus(magnitude)

    def propagate_amounts_to(self, parent: "AccountNode") -> None:
        """Add every amount of this account into ``parent``."""
        for amount in self.amounts.values():
            parent.add_amount(
                amount.magnitude,
                amount.currency_code,
                amount.style,
            )

    def copy(self) -> "AccountNode":
        """Return an independent copy of the node."""
        return replace(self, amounts=dict(self.amounts))


class AccountTree:
    """Immutable snapshot of accounts indexed by full name.

    Nodes handed out by the snapshot are copies, so readers never observe
    or cause changes to the stored state. Parents are looked up by name.
    """

    def __init__(self, nodes: Iterable[AccountNode] = ()) -> None:
        ordered = sorted(
            (node.copy() for node in nodes),
            key=lambda node: account_sort_key(node.full_name),
        )
        self._nodes = MappingProxyType(
            {node.full_name: node for node in ordered}
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._nodes

    def __iter__(self) -> Iterator[AccountNode]:
        for node in self._nodes.values():
            yield node.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountTree):
            return NotImplemented
        return dict(self._nodes) == dict(other._nodes)

    def __repr__(self) -> str:
        return f"AccountTree({len(self)} accounts)"

    def names(self) -> list[str]:
        """Return account names in tree order."""
        return list(self._nodes)

    def get(self, full_name: str) -> AccountNode | None:
        """Return a copy of the named account, or None."""
        node = self._nodes.get(full_name)
        return node.copy() if node is not None else None

    def parent_of(self, full_name: str) -> AccountNode | None:
        """Return the parent of the named account, or None at top level."""
        parent_name = extract_parent_name(full_name)
        if parent_name is None:
            return None
        return self.get(parent_name)

    def children_of(self, full_name: str) -> list[AccountNode]:
        """Return the direct sub-accounts of the named account."""
        return [
            node.copy()
            for node in self._nodes.values()
            if node.parent_name == full_name
        ]

    def roots(self) -> list[AccountNode]:
        """Return top-level accounts."""
        return [
            node.copy()
            for node in self._nodes.values()
            if node.parent_name is None
        ]

    def is_visible(self, full_name: str) -> bool:
        """Return True when every ancestor of the account is expanded."""
        parent_name = extract_parent_name(full_name)
        while parent_name is not None:
            parent = self._nodes.get(parent_name)
            if parent is not None and not parent.expanded:
                return False
            parent_name = extract_parent_name(parent_name)
        return True

    def visible_nodes(self) -> list[AccountNode]:
        """Return accounts whose ancestors are all expanded, in tree order."""
        return [
            node.copy()
            for name, node in self._nodes.items()
            if self.is_visible(name)
        ]

    def with_expanded(self, expanded_names: Iterable[str]) -> "AccountTree":
        """Return a new snapshot with ``expanded`` taken from a saved set.

        Args:
            expanded_names: Names of accounts that were expanded before.

        Returns:
            AccountTree: Snapshot where only the listed accounts are expanded.
        """
        wanted = set(expanded_names)
        return AccountTree(
            replace(node, expanded=name in wanted)
            for name, node in self._nodes.items()
        )


__all__ = [
    "AccountNode",
    "AccountTree",
    "split_account_name",
    "extract_parent_name",
    "account_sort_key",
]

"""Balancing of a transaction while the user edits its rows.

The balancer is a pure function of the row list: it decides whether the
transaction can be submitted, places balancing hints, inserts and removes
placeholder rows and keeps the ``is_last`` flag on the last row. Running it
on its own output changes nothing.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
import logging

from ledger_sync.domain.constants import MIN_EDITABLE_ROWS
from ledger_sync.domain.errors import InternalInvariantViolation
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.editing import (
    AmountState,
    EditableAccountRow,
    TransactionHead,
)
from ledger_sync.domain.models.transactions import Posting, Transaction
from ledger_sync.domain.services.formatting import format_number
from ledger_sync.domain.services.normalization import (
    normalize_account_name,
    normalize_comment,
)


EditableItem = TransactionHead | EditableAccountRow


@dataclass(frozen=True)
class BalanceCheck:
    """Outcome of one balancing pass.

    Attributes:
        submittable: True when the transaction may be posted.
        items: Normalized head and rows.
        changed: True when ``items`` differs from the input.
    """

    submittable: bool
    items: tuple[EditableItem, ...]
    changed: bool

    @property
    def head(self) -> TransactionHead:
        return self.items[0]

    @property
    def rows(self) -> tuple[EditableAccountRow, ...]:
        return self.items[1:]


@dataclass
class _CurrencyGroup:
    """Row ids of one currency, classified for the balancing rules."""

    rows: list[int] = field(default_factory=list)
    empty_account: list[int] = field(default_factory=list)
    blank: list[int] = field(default_factory=list)
    without_amount: list[int] = field(default_factory=list)
    receivers: list[int] = field(default_factory=list)
    balance: Decimal = Decimal("0")


def split_items(
    items: Sequence[EditableItem],
) -> tuple[TransactionHead, list[EditableAccountRow]]:
    """Split an editable transaction into its head and rows.

    Raises:
        InternalInvariantViolation: If the list is not a head followed by rows.
    """
    if not items or not isinstance(items[0], TransactionHead):
        raise InternalInvariantViolation(
            "Editable transaction must start with its head"
        )
    rows = list(items[1:])
    if not all(isinstance(row, EditableAccountRow) for row in rows):
        raise InternalInvariantViolation(
            "Editable transaction rows must follow the head"
        )
    return items[0], rows


def next_row_id(rows: Sequence[EditableAccountRow]) -> int:
    """Return an id not used by any row."""
    return max((row.row_id for row in rows), default=0) + 1


class TransactionBalancer:
    """Evaluate submittability and normalize the rows of a transaction."""

    def __init__(
        self,
        context: FormattingContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the balancer.

        Args:
            context: Formatting preferences used for hints and new rows.
            logger: Logger for the reasons a transaction is not submittable.
        """
        self._context = context or FormattingContext()
        self._logger = logger or logging.getLogger(__name__)

    def check(self, items: Sequence[EditableItem]) -> BalanceCheck:
        """Run one balancing pass.

        Numeric failures abort the pass: the transaction is reported as not
        submittable and the input is returned unchanged.

        Args:
            items: Head followed by the account rows.

        Returns:
            BalanceCheck: Submittability and the normalized items.
        """
        head, rows = split_items(items)
        original = tuple(items)
        try:
            submittable, normalized = self._evaluate(head, rows)
        except (ArithmeticError, ValueError) as exc:
            self._logger.warning(f"Balancing aborted: {exc}")
            return BalanceCheck(False, original, False)
        new_items = (head, *normalized)
        return BalanceCheck(submittable, new_items, new_items != original)

    def _evaluate(
        self,
        head: TransactionHead,
        rows: list[EditableAccountRow],
    ) -> tuple[bool, list[EditableAccountRow]]:
        groups = _group_rows(rows)
        if not any(row.amount_state is AmountState.INVALID for row in rows):
            self._add_placeholders(rows, groups)
        self._drop_extra_blank_rows(rows, groups)
        while len(rows) < MIN_EDITABLE_ROWS:
            rows.append(
                EditableAccountRow(
                    row_id=next_row_id(rows),
                    currency_code=self._context.default_currency,
                )
            )

        # Hints are placed on the final row set.
        submittable = self._rows_submittable(head, rows)
        for currency, group in _group_rows(rows).items():
            if not self._place_hints(rows, currency, group):
                submittable = False
        return submittable, _flag_last_row(rows)

    def _rows_submittable(
        self,
        head: TransactionHead,
        rows: list[EditableAccountRow],
    ) -> bool:
        submittable = True
        if not head.description.strip():
            self._logger.debug("Not submittable: missing description")
            submittable = False
        for row in rows:
            has_amount = row.amount_state is not AmountState.UNSET
            if not row.has_account and has_amount:
                self._logger.debug(
                    f"Not submittable: row {row.row_id} has an amount "
                    "but no account"
                )
                submittable = False
            if row.amount_state is AmountState.INVALID:
                self._logger.debug(
                    f"Not submittable: row {row.row_id} has an invalid amount"
                )
                submittable = False
        if sum(1 for row in rows if row.has_account) < 2:
            self._logger.debug("Not submittable: fewer than two accounts")
            submittable = False
        return submittable

    def _place_hints(
        self,
        rows: list[EditableAccountRow],
        currency: str,
        group: _CurrencyGroup,
    ) -> bool:
        """Put the balancing hint on the receiver of ``currency``.

        Returns:
            bool: False when the currency lacks exactly one receiver.
        """
        if group.balance == 0:
            for row_id in group.rows:
                _update_row(rows, row_id, amount_hint=None)
            return True

        balanced = len(group.receivers) == 1
        if not balanced:
            self._logger.debug(
                f"Not submittable: {len(group.receivers)} rows could receive "
                f"the {currency or 'default'} remainder"
            )
        if group.receivers:
            receiver = group.receivers[0]
        elif group.without_amount:
            receiver = group.without_amount[0]
        else:
            receiver = None
        hint = format_number(-group.balance, self._context)
        for row_id in group.rows:
            _update_row(
                rows,
                row_id,
                amount_hint=hint if row_id == receiver else None,
            )
        return balanced

    def _add_placeholders(
        self,
        rows: list[EditableAccountRow],
        groups: dict[str, _CurrencyGroup],
    ) -> None:
        """Give every currency without an empty-account row a blank row."""
        for currency, group in groups.items():
            if group.empty_account:
                continue
            rows.append(
                EditableAccountRow(
                    row_id=next_row_id(rows),
                    currency_code=currency,
                )
            )

    def _drop_extra_blank_rows(
        self,
        rows: list[EditableAccountRow],
        groups: dict[str, _CurrencyGroup],
    ) -> None:
        """Keep at most one blank row per currency, none if it is alone."""
        for group in groups.values():
            remaining = len(group.rows)
            for row_id in group.blank[1:]:
                if len(rows) <= MIN_EDITABLE_ROWS:
                    break
                _remove_row(rows, row_id)
                remaining -= 1
            if (
                group.blank
                and remaining == 1
                and len(rows) > MIN_EDITABLE_ROWS
            ):
                _remove_row(rows, group.blank[0])


def _group_rows(
    rows: Sequence[EditableAccountRow],
) -> dict[str, _CurrencyGroup]:
    groups: dict[str, _CurrencyGroup] = {}
    for row in rows:
        group = groups.setdefault(row.currency_code, _CurrencyGroup())
        group.rows.append(row.row_id)
        if not row.has_account:
            group.empty_account.append(row.row_id)
            if row.amount_state is AmountState.UNSET:
                group.blank.append(row.row_id)
        if row.is_amount_set:
            group.balance += row.amount
            continue
        group.without_amount.append(row.row_id)
        if row.has_account:
            group.receivers.append(row.row_id)
    return groups


def _index_of(rows: list[EditableAccountRow], row_id: int) -> int:
    for index, row in enumerate(rows):
        if row.row_id == row_id:
            return index
    raise InternalInvariantViolation(f"Unknown row id: {row_id}")


def _update_row(rows: list[EditableAccountRow], row_id: int, **changes) -> None:
    index = _index_of(rows, row_id)
    row = rows[index]
    if any(getattr(row, name) != value for name, value in changes.items()):
        rows[index] = replace(row, **changes)


def _remove_row(rows: list[EditableAccountRow], row_id: int) -> None:
    del rows[_index_of(rows, row_id)]


def _flag_last_row(rows: list[EditableAccountRow]) -> list[EditableAccountRow]:
    last_index = len(rows) - 1
    return [
        row if row.is_last == (index == last_index)
        else replace(row, is_last=index == last_index)
        for index, row in enumerate(rows)
    ]


def build_transaction(
    items: Sequence[EditableItem],
    today: date | None = None,
) -> Transaction:
    """Turn an editable transaction into a Transaction ready to post.

    Rows without an account are skipped. In each currency the rows without
    an amount receive the negated balance, or zero when the currency has no
    amounts at all.

    Args:
        items: Head followed by the account rows.
        today: Date used when the head has none.

    Returns:
        Transaction: Transaction whose postings all carry amounts.

    Raises:
        InternalInvariantViolation: If a currency with a non-zero balance has
            more than one row without an amount, or a row holds invalid text.
    """
    head, rows = split_items(items)
    balances: dict[str, Decimal] = {}
    unresolved: dict[str, list[int]] = {}
    postings: list[Posting] = []
    for row in rows:
        if not row.has_account:
            continue
        if row.amount_state is AmountState.INVALID:
            raise InternalInvariantViolation(
                f"Row {row.row_id} holds an invalid amount"
            )
        currency = row.currency_code
        if row.is_amount_set:
            balances[currency] = (
                balances.get(currency, Decimal("0")) + row.amount
            )
        else:
            unresolved.setdefault(currency, []).append(len(postings))
        postings.append(
            Posting(
                account_name=normalize_account_name(row.account_name),
                currency_code=currency,
                amount=row.amount if row.is_amount_set else None,
                comment=normalize_comment(row.comment),
            )
        )

    for currency, indexes in unresolved.items():
        balance = balances.get(currency)
        if balance is not None and balance != 0 and len(indexes) != 1:
            raise InternalInvariantViolation(
                f"{len(indexes)} rows would receive the {currency!r} remainder"
            )
        value = Decimal("0") - (balance or Decimal("0"))
        for index in indexes:
            postings[index] = replace(postings[index], amount=value)

    return Transaction(
        date=head.date or today or date.today(),
        description=head.description.strip(),
        comment=normalize_comment(head.comment),
        postings=tuple(postings),
    )


__all__ = [
    "BalanceCheck",
    "EditableItem",
    "TransactionBalancer",
    "build_transaction",
    "next_row_id",
    "split_items",
]

"""Domain models for a transaction being composed by the user."""

from dataclasses import dataclass, replace
import datetime
from decimal import Decimal
from enum import Enum


class AmountState(Enum):
    """Parse state of the amount text of an editable row."""

    UNSET = "unset"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class TransactionHead:
    """Header of an editable transaction."""

    date: datetime.date | None = None
    description: str = ""
    comment: str = ""


@dataclass(frozen=True)
class EditableAccountRow:
    """One editable account row.

    Rows are immutable; every edit produces a copy that keeps ``row_id`` so
    observers can track row identity across edits.

    Attributes:
        row_id: Stable identity of the row.
        account_name: Account name as typed.
        amount_text: Raw amount text as typed.
        amount: Parsed amount when ``amount_state`` is VALID.
        amount_state: Whether the text is blank, valid or invalid.
        currency_code: Currency of the row.
        comment: Free-form posting comment.
        amount_hint: Suggested balancing amount, never authoritative.
        is_last: True only for the physically last row.
    """

    row_id: int
    account_name: str = ""
    amount_text: str = ""
    amount: Decimal | None = None
    amount_state: AmountState = AmountState.UNSET
    currency_code: str = ""
    comment: str = ""
    amount_hint: str | None = None
    is_last: bool = False

    @property
    def has_account(self) -> bool:
        return bool(self.account_name.strip())

    @property
    def is_amount_set(self) -> bool:
        return self.amount_state is AmountState.VALID

    @property
    def is_amount_valid(self) -> bool:
        return self.amount_state is not AmountState.INVALID

    @property
    def is_blank(self) -> bool:
        """True when neither an account nor any amount text is present."""
        return not self.has_account and self.amount_state is AmountState.UNSET

    def with_amount(self, amount: Decimal | None, text: str) -> "EditableAccountRow":
        """Return a copy carrying a parsed amount, or an unset one."""
        state = AmountState.UNSET if amount is None else AmountState.VALID
        return replace(
            self,
            amount=amount,
            amount_text=text,
            amount_state=state,
        )

    def with_invalid_amount(self, text: str) -> "EditableAccountRow":
        """Return a copy whose amount text could not be parsed."""
        return replace(
            self,
            amount=None,
            amount_text=text,
            amount_state=AmountState.INVALID,
        )


__all__ = ["AmountState", "TransactionHead", "EditableAccountRow"]

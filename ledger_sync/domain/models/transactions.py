"""Domain models for ledger transactions and postings."""

from dataclasses import dataclass
import datetime
from decimal import Decimal

from ledger_sync.domain.models.amounts import AmountStyle


@dataclass(frozen=True)
class Posting:
    """One account line of a transaction.

    Attributes:
        account_name: Colon-delimited account name.
        currency_code: Currency code, empty for no commodity.
        amount: Signed magnitude, or None when the amount is not set.
        comment: Free-form posting comment.
        amount_style: Display style reported by the server, if any.
    """

    account_name: str
    currency_code: str = ""
    amount: Decimal | None = None
    comment: str = ""
    amount_style: AmountStyle | None = None

    @property
    def is_amount_set(self) -> bool:
        return self.amount is not None


@dataclass(frozen=True)
class Transaction:
    """A dated, described group of postings.

    Attributes:
        date: Transaction date; None until a date is chosen.
        description: Payee or description line.
        comment: Free-form transaction comment.
        postings: Postings in declared order.
        ledger_id: Index of the transaction on the server, 0 when new.
    """

    date: datetime.date | None
    description: str
    comment: str = ""
    postings: tuple[Posting, ...] = ()
    ledger_id: int = 0

    def balance_per_currency(self) -> dict[str, Decimal]:
        """Sum the set amounts of the postings per currency.

        Returns:
            dict[str, Decimal]: Totals keyed by currency code.
        """
        totals: dict[str, Decimal] = {}
        for posting in self.postings:
            if posting.amount is None:
                continue
            totals[posting.currency_code] = (
                totals.get(posting.currency_code, Decimal("0"))
                + posting.amount
            )
        return totals

    @property
    def is_balanced(self) -> bool:
        """True when every currency sums to zero and all amounts are set."""
        if any(not posting.is_amount_set for posting in self.postings):
            return False
        return all(total == 0 for total in self.balance_per_currency().values())


__all__ = ["Posting", "Transaction"]

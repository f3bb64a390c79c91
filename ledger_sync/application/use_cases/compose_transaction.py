"""Use case holding a transaction while the user composes it.

Every edit produces a new row list, runs the balancer on it and publishes
the normalized result to observers. Edits are serialized by a single
guard; an edit attempted while another one runs (for example from an
observer callback) is rejected instead of deadlocking.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal
import threading

from ledger_sync.application.ports.ledger_codec import LedgerCodecPort
from ledger_sync.domain.errors import (
    InternalInvariantViolation,
    InvalidAmountTextError,
    ReentrantEditError,
    UnsupportedVersionError,
)
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.editing import (
    EditableAccountRow,
    TransactionHead,
)
from ledger_sync.domain.models.templates import (
    ExtractedTransaction,
    TransactionTemplate,
)
from ledger_sync.domain.models.transactions import Transaction
from ledger_sync.domain.services.balancing import (
    EditableItem,
    TransactionBalancer,
    build_transaction,
    next_row_id,
    split_items,
)
from ledger_sync.domain.services.formatting import parse_amount_text
from ledger_sync.domain.services.templates import TemplateMatcher
from ledger_sync.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


Observer = Callable[[tuple[EditableItem, ...], bool], None]


class TransactionComposer:
    """Live editable transaction with balancing after every edit."""

    def __init__(
        self,
        context: FormattingContext | None = None,
        balancer: TransactionBalancer | None = None,
        logger=None,
        usage_logger=None,
        matcher: TemplateMatcher | None = None,
    ) -> None:
        """Initialize an empty transaction with two blank rows.

        Args:
            context: Formatting preferences for parsing and hints.
            balancer: Balancer to run after each edit.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger for user actions.
            matcher: Template matcher used by ``apply_template``.
        """
        self._context = context or FormattingContext()
        self._balancer = balancer or TransactionBalancer(self._context)
        self._logger = logger or get_app_logger()
        self._matcher = matcher or TemplateMatcher(self._logger)
        self._usage_logger = usage_logger or get_usage_logger()
        self._guard = threading.Lock()
        self._observers: list[Observer] = []
        self._items: tuple[EditableItem, ...] = ()
        self._submittable = False
        self.reset()

    @property
    def items(self) -> tuple[EditableItem, ...]:
        return self._items

    @property
    def head(self) -> TransactionHead:
        return self._items[0]

    @property
    def rows(self) -> tuple[EditableAccountRow, ...]:
        return self._items[1:]

    @property
    def submittable(self) -> bool:
        return self._submittable

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback run after every edit.

        Args:
            observer: Receives the published items and submittability.

        Returns:
            Callable[[], None]: Function removing the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def reset(self) -> None:
        """Discard the transaction and start over with two blank rows."""
        currency = self._context.default_currency
        self._apply(
            lambda items: [
                TransactionHead(),
                EditableAccountRow(row_id=1, currency_code=currency),
                EditableAccountRow(row_id=2, currency_code=currency),
            ]
        )

    def load_transaction(self, transaction: Transaction) -> None:
        """Replace the rows with the postings of an existing transaction.

        The date is left empty so the copy gets a new date on submission.

        Args:
            transaction: Transaction to copy.
        """

        def build(items: list[EditableItem]) -> list[EditableItem]:
            rows = [
                EditableAccountRow(
                    row_id=row_id,
                    account_name=posting.account_name,
                    currency_code=posting.currency_code,
                    comment=posting.comment,
                ).with_amount(
                    posting.amount, self._amount_text(posting.amount)
                )
                for row_id, posting in enumerate(transaction.postings, start=1)
            ]
            head = TransactionHead(
                description=transaction.description,
                comment=transaction.comment,
            )
            return [head, *rows]

        self._apply(build)

    def apply_template(
        self,
        text: str,
        templates: Iterable[TransactionTemplate],
        today: date | None = None,
    ) -> ExtractedTransaction | None:
        """Fill the transaction from the first template matching ``text``.

        The head and rows are replaced by the extracted values and the
        result is balanced like any other edit. Nothing changes when no
        template matches.

        Args:
            text: Free text to match, e.g. a bank notification.
            templates: Candidate templates.
            today: Supplies the month and day a template leaves out.

        Returns:
            ExtractedTransaction | None: Values applied, or None.
        """
        extracted = self._matcher.extract_from_text(
            text,
            templates,
            self._context.default_currency,
            today,
        )
        if extracted is None:
            return None

        def build(items: list[EditableItem]) -> list[EditableItem]:
            rows = [
                EditableAccountRow(
                    row_id=row_id,
                    account_name=line.account_name,
                    currency_code=line.currency_code,
                    comment=line.comment,
                ).with_amount(line.amount, self._amount_text(line.amount))
                for row_id, line in enumerate(extracted.lines, start=1)
            ]
            head = TransactionHead(
                date=extracted.date,
                description=extracted.description,
                comment=extracted.comment or "",
            )
            return [head, *rows]

        self._apply(build)
        self._usage_logger.info(
            f"Applied template '{extracted.template_name}'"
        )
        return extracted

    def set_date(self, value: date | None) -> None:
        self._edit_head(date=value)

    def set_description(self, text: str) -> None:
        self._edit_head(description=text)

    def set_comment(self, text: str) -> None:
        self._edit_head(comment=text)

    def set_account_name(self, row_id: int, name: str) -> None:
        self._edit_row(row_id, lambda row: replace(row, account_name=name))

    def set_currency(self, row_id: int, currency: str) -> None:
        self._edit_row(
            row_id,
            lambda row: replace(row, currency_code=currency.strip()),
        )

    def set_row_comment(self, row_id: int, comment: str) -> None:
        self._edit_row(row_id, lambda row: replace(row, comment=comment))

    def set_amount_text(self, row_id: int, text: str) -> bool:
        """Store amount text typed into a row.

        Invalid text is kept so the user can fix it; it makes the
        transaction non-submittable until then.

        Args:
            row_id: Row being edited.
            text: Raw text as typed.

        Returns:
            bool: True when the text is blank or a valid amount.
        """
        try:
            amount = parse_amount_text(text, self._context)
        except InvalidAmountTextError:
            self._edit_row(row_id, lambda row: row.with_invalid_amount(text))
            return False
        self._edit_row(row_id, lambda row: row.with_amount(amount, text))
        return True

    def add_row(self, currency: str | None = None) -> int:
        """Append a blank row; the balancer may drop it again if redundant.

        Returns:
            int: Id given to the new row.
        """
        code = self._context.default_currency if currency is None else currency
        new_id = next_row_id(self.rows)

        def append(items: list[EditableItem]) -> list[EditableItem]:
            return [
                *items,
                EditableAccountRow(row_id=new_id, currency_code=code),
            ]

        self._apply(append)
        return new_id

    def remove_row(self, row_id: int) -> None:
        def remove(items: list[EditableItem]) -> list[EditableItem]:
            index = _row_index(items, row_id)
            return items[:index] + items[index + 1:]

        self._apply(remove)

    def move_row(self, from_position: int, to_position: int) -> None:
        """Move a row between zero-based positions among the rows."""

        def move(items: list[EditableItem]) -> list[EditableItem]:
            head, rows = split_items(items)
            positions = range(len(rows))
            if from_position not in positions or to_position not in positions:
                raise IndexError(
                    f"Cannot move row {from_position} to {to_position}"
                )
            row = rows.pop(from_position)
            rows.insert(to_position, row)
            return [head, *rows]

        self._apply(move)

    def construct_transaction(self, today: date | None = None) -> Transaction:
        """Resolve balancing receivers and return the final transaction.

        Raises:
            InternalInvariantViolation: If receivers are ambiguous.
        """
        return build_transaction(self._items, today)

    def encode_for_submission(
        self,
        codec: LedgerCodecPort,
        today: date | None = None,
    ) -> bytes:
        """Build the request body posting this transaction.

        Args:
            codec: Codec of the server's API version.
            today: Date used when the head has none.

        Returns:
            bytes: Encoded transaction.

        Raises:
            UnsupportedVersionError: If the API version cannot post.
            InternalInvariantViolation: If the transaction is not submittable.
        """
        if not codec.version.supports_posting:
            raise UnsupportedVersionError(
                f"API version {codec.version.description} cannot post "
                "transactions"
            )
        if not self._submittable:
            raise InternalInvariantViolation(
                "Transaction is not ready for submission"
            )
        transaction = self.construct_transaction(today)
        payload = codec.encode_transaction(transaction, self._context, today)
        self._usage_logger.info(
            f"Prepared transaction '{transaction.description}' with "
            f"{len(transaction.postings)} postings"
        )
        return payload

    def _amount_text(self, amount: Decimal | None) -> str:
        if amount is None:
            return ""
        return f"{amount:f}".replace(".", self._context.decimal_separator)

    def _edit_head(self, **changes) -> None:
        def edit(items: list[EditableItem]) -> list[EditableItem]:
            return [replace(items[0], **changes), *items[1:]]

        self._apply(edit)

    def _edit_row(
        self,
        row_id: int,
        change: Callable[[EditableAccountRow], EditableAccountRow],
    ) -> None:
        def edit(items: list[EditableItem]) -> list[EditableItem]:
            index = _row_index(items, row_id)
            updated = list(items)
            updated[index] = change(items[index])
            return updated

        self._apply(edit)

    def _apply(
        self,
        mutate: Callable[[list[EditableItem]], Sequence[EditableItem]],
    ) -> None:
        if not self._guard.acquire(blocking=False):
            raise ReentrantEditError("Another edit is still in progress")
        try:
            candidate = mutate(list(self._items))
            result = self._balancer.check(candidate)
            self._items = result.items
            self._submittable = result.submittable
            for observer in list(self._observers):
                observer(self._items, self._submittable)
        finally:
            self._guard.release()


def _row_index(items: Sequence[EditableItem], row_id: int) -> int:
    for index, item in enumerate(items):
        if isinstance(item, EditableAccountRow) and item.row_id == row_id:
            return index
    raise InternalInvariantViolation(f"Unknown row id: {row_id}")


__all__ = ["TransactionComposer"]

"""Tests for the TransactionComposer use case."""

from datetime import date
from decimal import Decimal
import json
from unittest.mock import MagicMock

import pytest

from ledger_sync.application.use_cases.compose_transaction import (
    TransactionComposer,
)
from ledger_sync.domain.errors import (
    InternalInvariantViolation,
    ReentrantEditError,
    UnsupportedVersionError,
)
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.editing import AmountState
from ledger_sync.domain.models.templates import (
    TemplateLine,
    TransactionTemplate,
)
from ledger_sync.domain.models.transactions import Posting, Transaction
from ledger_sync.infrastructure.hledger_json import codec_for


def _composer(context=None, usage_logger=None) -> TransactionComposer:
    return TransactionComposer(
        context=context,
        logger=MagicMock(),
        usage_logger=usage_logger or MagicMock(),
    )


def _lunch(composer: TransactionComposer) -> None:
    composer.set_description("Lunch")
    composer.set_account_name(1, "Expenses:Food")
    composer.set_amount_text(1, "10")
    composer.set_account_name(2, "Assets:Cash")


def test_new_composer_has_two_blank_rows() -> None:
    """A fresh transaction starts with two rows in the default currency."""
    composer = _composer(FormattingContext(default_currency="USD"))

    assert [row.row_id for row in composer.rows] == [1, 2]
    assert all(row.currency_code == "USD" for row in composer.rows)
    assert composer.rows[-1].is_last is True
    assert composer.submittable is False


def test_hint_moves_to_the_open_row_as_accounts_are_entered() -> None:
    """The balancing hint follows the row able to receive it."""
    composer = _composer()
    composer.set_description("Lunch")
    composer.set_account_name(1, "Expenses:Food")
    composer.set_amount_text(1, "10")

    assert composer.rows[1].amount_hint == "-10.00"
    assert composer.submittable is False

    composer.set_account_name(2, "Assets:Cash")

    assert composer.submittable is True
    assert composer.rows[1].amount_hint == "-10.00"
    assert len(composer.rows) == 3


def test_observers_receive_every_published_state() -> None:
    """Subscribers see the normalized rows after each edit."""
    composer = _composer()
    seen = []
    unsubscribe = composer.subscribe(
        lambda items, submittable: seen.append((len(items), submittable))
    )

    _lunch(composer)
    unsubscribe()
    composer.set_comment("ignored")

    assert len(seen) == 4
    assert seen[-1] == (4, True)


def test_edit_from_observer_is_rejected() -> None:
    """An observer editing the transaction does not deadlock."""
    composer = _composer()
    unsubscribe = composer.subscribe(
        lambda items, submittable: composer.set_comment("nested")
    )

    with pytest.raises(ReentrantEditError):
        composer.set_description("Lunch")

    unsubscribe()
    composer.set_comment("after")
    assert composer.head.comment == "after"
    assert composer.head.description == "Lunch"


def test_invalid_amount_text_is_kept_and_blocks_submission() -> None:
    """Invalid text stays visible and makes the row invalid."""
    composer = _composer()
    _lunch(composer)

    assert composer.set_amount_text(1, "ten") is False

    row = composer.rows[0]
    assert row.amount_text == "ten"
    assert row.amount_state is AmountState.INVALID
    assert composer.submittable is False


def test_amount_text_uses_context_separator() -> None:
    """Amounts are typed with the configured decimal separator."""
    context = FormattingContext(decimal_separator=",", grouping_separator=".")
    composer = _composer(context)

    assert composer.set_amount_text(1, "12,50") is True
    assert composer.rows[0].amount == Decimal("12.50")


def test_construct_transaction_resolves_open_row() -> None:
    """The open row receives the remainder on construction."""
    composer = _composer()
    _lunch(composer)

    transaction = composer.construct_transaction(date(2024, 3, 1))

    assert transaction.date == date(2024, 3, 1)
    assert [p.amount for p in transaction.postings] == [
        Decimal("10"),
        Decimal("-10"),
    ]


def test_encode_for_submission_produces_document_and_logs() -> None:
    """A submittable transaction is encoded by the 1.50 codec."""
    usage_logger = MagicMock()
    composer = _composer(usage_logger=usage_logger)
    _lunch(composer)

    payload = composer.encode_for_submission(
        codec_for(ApiVersion.V1_50),
        today=date(2024, 3, 1),
    )

    body = json.loads(payload)
    assert body["tdescription"] == "Lunch"
    assert body["tdate"] == "2024-03-01"
    assert len(body["tpostings"]) == 2
    usage_logger.info.assert_called_once()


def test_encode_requires_posting_capable_version() -> None:
    """Older revisions cannot post."""
    composer = _composer()
    _lunch(composer)

    with pytest.raises(UnsupportedVersionError):
        composer.encode_for_submission(codec_for(ApiVersion.V1_32))


def test_encode_requires_submittable_transaction() -> None:
    """Incomplete transactions are never encoded."""
    composer = _composer()

    with pytest.raises(InternalInvariantViolation):
        composer.encode_for_submission(codec_for(ApiVersion.V1_50))


def test_load_transaction_copies_postings_without_date() -> None:
    """Loaded transactions keep accounts and amounts but not the date."""
    context = FormattingContext(decimal_separator=",", grouping_separator=".")
    composer = _composer(context)
    source = Transaction(
        date=date(2024, 1, 1),
        description="Rent",
        postings=(
            Posting("Expenses:Rent", "EUR", Decimal("10.5")),
            Posting("Assets:Bank", "EUR", Decimal("-10.5")),
        ),
    )

    composer.load_transaction(source)

    assert composer.head.date is None
    assert composer.head.description == "Rent"
    assert composer.rows[0].amount_text == "10,5"
    assert composer.rows[1].amount == Decimal("-10.5")
    assert composer.submittable is True


def test_rows_can_be_added_moved_and_removed() -> None:
    """Row structure edits keep ids stable."""
    composer = _composer()
    composer.set_account_name(1, "Expenses:Food")
    composer.set_amount_text(1, "x")
    composer.set_account_name(2, "Assets:Cash")

    new_id = composer.add_row()
    composer.move_row(2, 0)

    assert new_id == 3
    assert [row.row_id for row in composer.rows] == [3, 1, 2]
    assert composer.rows[-1].is_last is True

    composer.remove_row(3)

    assert [row.row_id for row in composer.rows] == [1, 2]


def test_move_row_out_of_range_raises() -> None:
    """Positions must exist."""
    composer = _composer()

    with pytest.raises(IndexError):
        composer.move_row(0, 5)
    composer.set_comment("still editable")


def test_unknown_row_id_raises() -> None:
    """Edits must target an existing row."""
    composer = _composer()

    with pytest.raises(InternalInvariantViolation):
        composer.set_account_name(99, "Assets")


def test_reset_discards_edits() -> None:
    """reset starts over."""
    composer = _composer()
    _lunch(composer)

    composer.reset()

    assert composer.head.description == ""
    assert all(row.is_blank for row in composer.rows)
    assert len(composer.rows) == 2


GROCERY_TEMPLATE = TransactionTemplate(
    name="Grocery",
    pattern=r"PAID (\S+) AT (\w+) ON (\d{4})-(\d{2})-(\d{2})",
    description_group=2,
    date_year_group=3,
    date_month_group=4,
    date_day_group=5,
    lines=(
        TemplateLine(account_name="Expenses:Food", amount_group=1),
        TemplateLine(account_name="Assets:Card"),
    ),
)


def test_apply_template_loads_rows_and_balances() -> None:
    """Extracted values replace the transaction and get balanced."""
    usage_logger = MagicMock()
    composer = _composer(usage_logger=usage_logger)
    composer.set_description("Old")

    extracted = composer.apply_template(
        "PAID 12.50 AT Grocer ON 2024-03-05",
        [GROCERY_TEMPLATE],
    )

    assert extracted.template_name == "Grocery"
    assert composer.head.description == "Grocer"
    assert composer.head.date == date(2024, 3, 5)
    assert composer.rows[0].amount == Decimal("12.50")
    assert composer.rows[0].amount_text == "12.50"
    assert composer.rows[1].amount_state is AmountState.UNSET
    assert composer.rows[1].amount_hint == "-12.50"
    assert composer.rows[-1].is_blank
    assert composer.submittable is True
    usage_logger.info.assert_called_once_with("Applied template 'Grocery'")


def test_apply_template_without_match_changes_nothing() -> None:
    """Text no template matches leaves the transaction alone."""
    composer = _composer()
    _lunch(composer)
    before = composer.items

    assert composer.apply_template("nothing here", [GROCERY_TEMPLATE]) is None
    assert composer.items == before

"""Codec for the hledger-web 1.50 JSON API, the only one that can post.

Account balances moved under ``adata.pdperiods``: a list of
``[date, {"bdincludingsubs": [...], "bdexcludingsubs": [...], ...}]``
pairs whose first entry holds the totals. ``tsourcepos`` is a list with a
start and an end position.
"""

from collections.abc import Iterator
from datetime import date
from decimal import Decimal
import json
from typing import Any

from ledger_sync.domain.constants import DEFAULT_PRECISION
from ledger_sync.domain.errors import DecodeError, InternalInvariantViolation
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.amounts import AmountStyle, SymbolPosition
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.transactions import Posting, Transaction
from ledger_sync.infrastructure.hledger_json.fields import (
    build_style,
    decode_account_records,
    decode_transaction_records,
    require_dict,
    require_list,
)
from ledger_sync.utils.cancellation import CancellationToken


_STATUS_UNMARKED = "Unmarked"


def parse_style(style: dict[str, Any], currency: str) -> AmountStyle:
    return build_style(
        style,
        currency,
        precision=style.get("asprecision", 0),
        decimal_mark=style.get("asdecimalmark"),
    )


def balances_of(record: dict[str, Any]) -> Any:
    """Return the inclusive balance list of an account record.

    Records without ``adata`` fall back to the flat ``aibalance`` list.
    """
    data = record.get("adata")
    if data is None:
        return record.get("aibalance")
    periods = require_list(
        require_dict(data, "adata").get("pdperiods"),
        "pdperiods",
    )
    if not periods:
        return []
    first = periods[0]
    if not isinstance(first, list) or len(first) != 2:
        raise DecodeError("Expected a [date, balance] pair in pdperiods")
    return require_dict(first[1], "period balance").get("bdincludingsubs")


def source_position() -> dict[str, Any]:
    return {"sourceName": "", "sourceLine": 1, "sourceColumn": 1}


def encode_quantity(amount: Decimal) -> dict[str, Any]:
    """Encode a magnitude as mantissa and decimal places.

    At least two places are written; more are kept when the amount needs
    them, so no digits are lost.
    """
    exponent = amount.as_tuple().exponent
    places = max(DEFAULT_PRECISION, -exponent)
    quantized = amount.quantize(Decimal(1).scaleb(-places))
    sign, digits, _ = quantized.as_tuple()
    mantissa = int("".join(str(digit) for digit in digits) or "0")
    if sign:
        mantissa = -mantissa
    return {
        "decimalMantissa": mantissa,
        "decimalPlaces": places,
        "floatingPoint": float(quantized),
    }


def encode_posting(posting: Posting, context: FormattingContext) -> dict[str, Any]:
    """Encode one posting.

    Raises:
        InternalInvariantViolation: If the posting has no amount.
    """
    if posting.amount is None:
        raise InternalInvariantViolation(
            f"Posting to {posting.account_name} has no amount"
        )
    quantity = encode_quantity(posting.amount)
    side = "R" if context.symbol_position is SymbolPosition.AFTER else "L"
    amount = {
        "acommodity": posting.currency_code,
        "aismultiplier": False,
        "aquantity": quantity,
        "astyle": {
            "ascommodityside": side,
            "ascommodityspaced": context.currency_gap,
            "asdigitgroups": None,
            "asdecimalmark": ".",
            "asprecision": quantity["decimalPlaces"],
            "asrounding": "NoRounding",
        },
    }
    return {
        "paccount": posting.account_name,
        "pamount": [amount],
        "pbalanceassertion": None,
        "pcomment": posting.comment,
        "pdate": None,
        "pdate2": None,
        "poriginal": None,
        "pstatus": _STATUS_UNMARKED,
        "ptags": [],
        "ptransaction_": "1",
        "ptype": "RegularPosting",
    }


class PeriodBalanceCodec:
    """Codec for hledger-web 1.50 with transaction encoding."""

    version = ApiVersion.V1_50

    def decode_accounts(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None = None,
    ) -> Iterator[AccountNode]:
        return decode_account_records(
            payload,
            balances_of,
            parse_style,
            cancel_token,
        )

    def decode_transactions(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None = None,
    ) -> Iterator[Transaction]:
        return decode_transaction_records(payload, parse_style, cancel_token)

    def encode_transaction(
        self,
        transaction: Transaction,
        context: FormattingContext,
        today: date | None = None,
    ) -> bytes:
        """Serialize a transaction for the add-transaction endpoint.

        Postings without an account are dropped. A missing date becomes
        ``today``.

        Args:
            transaction: Transaction whose postings all carry amounts.
            context: Formatting preferences for commodity side and spacing.
            today: Date used when the transaction has none.

        Returns:
            bytes: UTF-8 JSON document.

        Raises:
            InternalInvariantViolation: If a kept posting has no amount.
        """
        postings = [
            encode_posting(posting, context)
            for posting in transaction.postings
            if posting.account_name.strip()
        ]
        when = transaction.date or today or date.today()
        body = {
            "tcode": "",
            "tcomment": transaction.comment,
            "tdate": when.isoformat(),
            "tdate2": None,
            "tdescription": transaction.description,
            "tindex": 1,
            "tpostings": postings,
            "tprecedingcomment": "",
            "tsourcepos": [source_position(), source_position()],
            "tstatus": _STATUS_UNMARKED,
            "ttags": [],
        }
        return json.dumps(body).encode("utf-8")


__all__ = [
    "PeriodBalanceCodec",
    "balances_of",
    "encode_quantity",
    "encode_posting",
]

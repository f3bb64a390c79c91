"""Codec for the hledger-web 1.19.1 JSON API.

``asprecision`` is a tagged object such as
``{"tag": "Precision", "contents": 2}``; other tags carry no digit count.
"""

from collections.abc import Iterator
from datetime import date
from typing import Any

from ledger_sync.domain.errors import DecodeError, UnsupportedVersionError
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.amounts import AmountStyle
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.transactions import Transaction
from ledger_sync.infrastructure.hledger_json.fields import (
    build_style,
    decode_account_records,
    decode_transaction_records,
)
from ledger_sync.utils.cancellation import CancellationToken


def parse_precision(raw: Any) -> int:
    """Read the digit count out of a tagged precision object."""
    if raw is None:
        return 0
    if isinstance(raw, dict):
        contents = raw.get("contents", 0)
        return contents if contents is not None else 0
    if isinstance(raw, int):
        return raw
    raise DecodeError("Expected a precision object for asprecision")


def parse_style(style: dict[str, Any], currency: str) -> AmountStyle:
    return build_style(
        style,
        currency,
        precision=parse_precision(style.get("asprecision")),
        decimal_mark=style.get("asdecimalpoint"),
    )


def balances_of(record: dict[str, Any]) -> Any:
    return record.get("aibalance")


class PrecisionObjectCodec:
    """Read-only codec for hledger-web 1.19.1."""

    version = ApiVersion.V1_19_1

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
        raise UnsupportedVersionError(
            "API version 1.19.1 cannot post transactions"
        )


__all__ = ["PrecisionObjectCodec", "parse_precision"]

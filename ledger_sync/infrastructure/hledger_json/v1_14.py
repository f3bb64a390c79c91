"""Codec for the hledger-web 1.14 and 1.15 JSON API.

Styles carry a one-character ``asdecimalpoint`` and an integer
``asprecision``; account balances sit in the flat ``aibalance`` list.
"""

from collections.abc import Iterator
from datetime import date
from typing import Any

from ledger_sync.domain.errors import UnsupportedVersionError
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


SUPPORTED_VERSIONS = (ApiVersion.V1_14, ApiVersion.V1_15)


def parse_style(style: dict[str, Any], currency: str) -> AmountStyle:
    return build_style(
        style,
        currency,
        precision=style.get("asprecision", 0),
        decimal_mark=style.get("asdecimalpoint"),
    )


def balances_of(record: dict[str, Any]) -> Any:
    return record.get("aibalance")


class DecimalPointCodec:
    """Read-only codec for hledger-web 1.14 and 1.15."""

    def __init__(self, version: ApiVersion = ApiVersion.V1_15) -> None:
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(
                f"DecimalPointCodec cannot handle {version.description}"
            )
        self._version = version

    @property
    def version(self) -> ApiVersion:
        return self._version

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
            f"API version {self._version.description} cannot post transactions"
        )


__all__ = ["DecimalPointCodec", "SUPPORTED_VERSIONS"]

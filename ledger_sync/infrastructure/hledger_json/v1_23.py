"""Codec for the hledger-web 1.23 JSON API.

Precision went back to a plain integer and the decimal point is a single
character again, so styles and balances read exactly as in 1.14.
"""

from collections.abc import Iterator
from datetime import date

from ledger_sync.domain.errors import UnsupportedVersionError
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.transactions import Transaction
from ledger_sync.infrastructure.hledger_json.fields import (
    decode_account_records,
    decode_transaction_records,
)
from ledger_sync.infrastructure.hledger_json.v1_14 import (
    balances_of,
    parse_style,
)
from ledger_sync.utils.cancellation import CancellationToken


class IntegerPrecisionCodec:
    """Read-only codec for hledger-web 1.23."""

    version = ApiVersion.V1_23

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
            "API version 1.23 cannot post transactions"
        )


__all__ = ["IntegerPrecisionCodec"]

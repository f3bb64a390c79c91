"""Port for decoding and encoding hledger-web payloads."""

from collections.abc import Iterator
from datetime import date
from typing import Protocol

from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.models.transactions import Transaction
from ledger_sync.utils.cancellation import CancellationToken


class LedgerCodecPort(Protocol):
    """Port translating one wire format revision to the canonical model.

    Decoders are lazy: records are produced one at a time and the
    cancellation token is checked before each one.
    """

    version: ApiVersion

    def decode_accounts(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None = None,
    ) -> Iterator[AccountNode]:
        """Yield reported accounts, skipping the synthetic root."""

    def decode_transactions(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None = None,
    ) -> Iterator[Transaction]:
        """Yield transactions in payload order."""

    def encode_transaction(
        self,
        transaction: Transaction,
        context: FormattingContext,
        today: date | None = None,
    ) -> bytes:
        """Serialize a transaction for posting to the server."""


__all__ = ["LedgerCodecPort"]

"""Use case for synchronizing server payloads into the local ledger store.

The use case:

* decodes the accounts payload and assembles the account tree, including
  ancestors the server omitted;
* decodes the transactions payload and orders it newest first;
* keeps the ``expanded`` flags the user set on stored accounts;
* replaces the stored accounts and transactions in one store transaction.

Fetching the payloads is left to the caller.
"""

from dataclasses import dataclass
from datetime import date

from ledger_sync.application.ports.ledger_codec import LedgerCodecPort
from ledger_sync.application.ports.ledger_store import LedgerStorePort
from ledger_sync.domain.errors import DecodeError
from ledger_sync.domain.models.accounts import AccountTree
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.transactions import Transaction
from ledger_sync.domain.services.account_tree import AccountTreeBuilder
from ledger_sync.domain.services.validation import validate_transaction_balance
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.utils.cancellation import CancellationToken


@dataclass(frozen=True)
class SyncLedgerResult:
    """Result of a sync_ledger run.

    Attributes:
        api_version: Wire format revision used for decoding.
        account_count: Accounts stored, synthesized ancestors included.
        synthesized_count: Ancestors created because the server omitted them.
        transaction_count: Transactions stored.
        posting_count: Postings across all stored transactions.
    """

    api_version: ApiVersion
    account_count: int
    synthesized_count: int
    transaction_count: int
    posting_count: int


def sort_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Order transactions by date, then server index, newest first."""
    return sorted(
        transactions,
        key=lambda item: (item.date or date.min, item.ledger_id),
        reverse=True,
    )


class SyncLedgerUseCase:
    """Decode server payloads and store the result.

    The use case depends on the codec and store ports only, so wire format
    revisions and storage engines can change without touching it.
    """

    def __init__(
        self,
        codec: LedgerCodecPort,
        store: LedgerStorePort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            codec: Codec for the server's API version.
            store: Destination for accounts and transactions.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._codec = codec
        self._store = store
        self._logger = logger or get_app_logger()

    def run(
        self,
        accounts_payload: bytes | str,
        transactions_payload: bytes | str,
        cancel_token: CancellationToken | None = None,
    ) -> SyncLedgerResult:
        """Execute the synchronization job.

        Nothing is stored unless both payloads decode completely.

        Args:
            accounts_payload: Body of the accounts endpoint.
            transactions_payload: Body of the transactions endpoint.
            cancel_token: Optional token checked once per decoded record.

        Returns:
            SyncLedgerResult: Summary of what was stored.

        Raises:
            DecodeError: If a payload is malformed.
            OperationCancelled: If the token is set during decoding.
        """
        tree, synthesized_count = self._decode_accounts(
            accounts_payload,
            cancel_token,
        )
        transactions = self._decode_transactions(
            transactions_payload,
            cancel_token,
        )

        self._store.prepare_destination()
        tree = tree.with_expanded(self._store.fetch_expanded_names())
        account_count, transaction_count = self._store.replace_ledger(
            tree,
            transactions,
        )
        self._logger.info(
            f"Stored {account_count} accounts and "
            f"{transaction_count} transactions"
        )

        return SyncLedgerResult(
            api_version=self._codec.version,
            account_count=account_count,
            synthesized_count=synthesized_count,
            transaction_count=transaction_count,
            posting_count=sum(len(item.postings) for item in transactions),
        )

    def _decode_accounts(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None,
    ) -> tuple[AccountTree, int]:
        """Decode accounts and assemble the tree.

        Args:
            payload: Body of the accounts endpoint.
            cancel_token: Optional cancellation token.

        Returns:
            tuple[AccountTree, int]: Snapshot and number of synthesized
            ancestors.
        """
        builder = AccountTreeBuilder(cancel_token)
        try:
            builder.add_all(self._codec.decode_accounts(payload, cancel_token))
        except DecodeError as exc:
            self._logger.error(f"Could not decode accounts: {exc}")
            raise
        synthesized = builder.synthesized_names
        self._logger.info(
            f"Decoded {builder.reported_count} accounts "
            f"({len(synthesized)} ancestors synthesized)"
        )
        return builder.build(), len(synthesized)

    def _decode_transactions(
        self,
        payload: bytes | str,
        cancel_token: CancellationToken | None,
    ) -> list[Transaction]:
        try:
            transactions = list(
                self._codec.decode_transactions(payload, cancel_token)
            )
        except DecodeError as exc:
            self._logger.error(f"Could not decode transactions: {exc}")
            raise
        for transaction in transactions:
            validate_transaction_balance(transaction, self._logger)
        self._logger.info(f"Decoded {len(transactions)} transactions")
        return sort_newest_first(transactions)


__all__ = ["SyncLedgerUseCase", "SyncLedgerResult", "sort_newest_first"]

"""CLI adapter to synchronize saved hledger-web payloads into the ledger store.

The payload files are named by LEDGER_ACCOUNTS_FILE and
LEDGER_TRANSACTIONS_FILE; the API version comes from LEDGER_API_VERSION.
"""

import dotenv
from sqlalchemy.exc import SQLAlchemyError

from ledger_sync.domain.errors import LedgerSyncError
from ledger_sync.infrastructure.container import build_sync_ledger_use_case
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.infrastructure.settings import LedgerSyncSettings


def main() -> None:
    """Run the ledger synchronization use case."""
    dotenv.load_dotenv()
    logger = get_app_logger()
    try:
        settings = LedgerSyncSettings.from_env()
    except (LedgerSyncError, ValueError) as exc:
        logger.error(f"Invalid configuration: {exc}")
        print(f"Invalid configuration: {exc}")
        raise SystemExit(2) from exc
    if settings.accounts_file is None or settings.transactions_file is None:
        print(
            "Set LEDGER_ACCOUNTS_FILE and LEDGER_TRANSACTIONS_FILE "
            "to the saved server payloads."
        )
        raise SystemExit(2)

    try:
        use_case = build_sync_ledger_use_case(settings)
        result = use_case.run(
            settings.accounts_file.read_bytes(),
            settings.transactions_file.read_bytes(),
        )
    except (LedgerSyncError, SQLAlchemyError, OSError) as exc:
        logger.error(f"Synchronization failed: {exc}")
        print(f"Could not load data: {exc}")
        raise SystemExit(1) from exc

    print(
        f"Synchronized {result.account_count} accounts and "
        f"{result.transaction_count} transactions "
        f"(API {result.api_version.description})."
    )


if __name__ == "__main__":  # pragma: no cover
    main()

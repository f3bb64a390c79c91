"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from ledger_sync.domain.models.amounts import SymbolPosition
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.utils.utils import get_project_root


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class LedgerSyncSettings:
    """Settings for synchronizing with an hledger-web server.

    Attributes:
        api_version: Configured wire format revision, AUTO to detect it.
        decimal_separator: Decimal separator typed and shown by the user.
        default_currency: Currency assigned to new rows.
        currency_position: Symbol position when no server style is known.
        currency_gap: Whether a space separates symbol and number.
        database_url: SQLAlchemy URL of the local ledger database.
        accounts_file: Optional saved accounts payload for the CLI.
        transactions_file: Optional saved transactions payload for the CLI.
    """

    api_version: ApiVersion = ApiVersion.AUTO
    decimal_separator: str = "."
    default_currency: str = ""
    currency_position: SymbolPosition = SymbolPosition.BEFORE
    currency_gap: bool = True
    database_url: str = "sqlite://"
    accounts_file: Optional[Path] = None
    transactions_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "LedgerSyncSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSyncSettings: Settings sourced from environment variables.

        Raises:
            UnsupportedVersionError: If LEDGER_API_VERSION names an unknown
                revision.
            ValueError: If another variable holds an invalid value.
        """
        api_version = cls._parse_api_version(
            os.getenv("LEDGER_API_VERSION", "auto")
        )
        separator = os.getenv("LEDGER_DECIMAL_SEPARATOR", ".").strip() or "."
        if separator not in (".", ","):
            raise ValueError(
                f"LEDGER_DECIMAL_SEPARATOR must be '.' or ',': {separator!r}"
            )
        position = os.getenv("LEDGER_CURRENCY_POSITION", "before")
        return cls(
            api_version=api_version,
            decimal_separator=separator,
            default_currency=os.getenv("LEDGER_DEFAULT_CURRENCY", "").strip(),
            currency_position=SymbolPosition(position.strip().upper()),
            currency_gap=cls._parse_flag(
                os.getenv("LEDGER_CURRENCY_GAP", "true"),
                "LEDGER_CURRENCY_GAP",
            ),
            database_url=os.getenv("LEDGER_DB_URL") or cls._default_database_url(),
            accounts_file=cls._optional_path(os.getenv("LEDGER_ACCOUNTS_FILE")),
            transactions_file=cls._optional_path(
                os.getenv("LEDGER_TRANSACTIONS_FILE")
            ),
        )

    def formatting_context(self) -> FormattingContext:
        """Return the formatting context matching these preferences."""
        grouping = "." if self.decimal_separator == "," else ","
        return FormattingContext(
            decimal_separator=self.decimal_separator,
            grouping_separator=grouping,
            default_currency=self.default_currency,
            symbol_position=self.currency_position,
            currency_gap=self.currency_gap,
        )

    @staticmethod
    def _parse_api_version(raw: str) -> ApiVersion:
        """Read a version name, or an integer code saved by a profile.

        Unknown integer codes fall back to automatic detection.
        """
        cleaned = raw.strip()
        if cleaned.lstrip("-").isdigit():
            return ApiVersion.from_code(int(cleaned))
        return ApiVersion.parse(cleaned)

    @staticmethod
    def _parse_flag(raw: str, name: str) -> bool:
        cleaned = raw.strip().lower()
        if cleaned in _TRUE_VALUES:
            return True
        if cleaned in _FALSE_VALUES:
            return False
        raise ValueError(f"{name} must be a boolean flag: {raw!r}")

    @staticmethod
    def _optional_path(raw: str | None) -> Path | None:
        """Resolve a payload path, warning when the file is missing.

        Args:
            raw: Raw path string, possibly empty.

        Returns:
            Path | None: Resolved path, or None when unset.
        """
        if not raw:
            return None
        path = Path(raw).expanduser().resolve()
        if not path.exists():
            get_app_logger().warning(f"Payload file does not exist at {path}")
        return path

    @staticmethod
    def _default_database_url() -> str:
        data_dir = get_project_root() / "data"
        return f"sqlite:///{data_dir / 'ledger_sync.db'}"


__all__ = ["LedgerSyncSettings"]

"""Tests for ledger-sync settings."""

from pathlib import Path

import pytest

from ledger_sync.domain.errors import UnsupportedVersionError
from ledger_sync.domain.models.amounts import SymbolPosition
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.infrastructure import settings as settings_module
from ledger_sync.infrastructure.settings import LedgerSyncSettings


_VARIABLES = (
    "LEDGER_API_VERSION",
    "LEDGER_DECIMAL_SEPARATOR",
    "LEDGER_DEFAULT_CURRENCY",
    "LEDGER_CURRENCY_POSITION",
    "LEDGER_CURRENCY_GAP",
    "LEDGER_DB_URL",
    "LEDGER_ACCOUNTS_FILE",
    "LEDGER_TRANSACTIONS_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without ledger variables."""
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults(monkeypatch, tmp_path: Path) -> None:
    """Unset variables fall back to automatic detection and a local db."""
    monkeypatch.setattr(settings_module, "get_project_root", lambda: tmp_path)

    settings = LedgerSyncSettings.from_env()

    assert settings.api_version is ApiVersion.AUTO
    assert settings.decimal_separator == "."
    assert settings.currency_position is SymbolPosition.BEFORE
    assert settings.currency_gap is True
    assert settings.database_url == (
        f"sqlite:///{tmp_path / 'data' / 'ledger_sync.db'}"
    )
    assert settings.accounts_file is None


def test_from_env_reads_every_variable(monkeypatch, tmp_path: Path) -> None:
    """Configured values should be parsed into typed settings."""
    accounts = tmp_path / "accounts.json"
    accounts.write_text("[]", encoding="utf-8")
    monkeypatch.setenv("LEDGER_API_VERSION", "1.50")
    monkeypatch.setenv("LEDGER_DECIMAL_SEPARATOR", ",")
    monkeypatch.setenv("LEDGER_DEFAULT_CURRENCY", " EUR ")
    monkeypatch.setenv("LEDGER_CURRENCY_POSITION", "after")
    monkeypatch.setenv("LEDGER_CURRENCY_GAP", "no")
    monkeypatch.setenv("LEDGER_DB_URL", "sqlite://")
    monkeypatch.setenv("LEDGER_ACCOUNTS_FILE", str(accounts))

    settings = LedgerSyncSettings.from_env()

    assert settings.api_version is ApiVersion.V1_50
    assert settings.default_currency == "EUR"
    assert settings.currency_position is SymbolPosition.AFTER
    assert settings.currency_gap is False
    assert settings.database_url == "sqlite://"
    assert settings.accounts_file == accounts.resolve()


def test_missing_payload_file_is_reported(monkeypatch, tmp_path: Path) -> None:
    """A configured file that does not exist is kept but logged."""
    warnings = []

    class _FakeLogger:
        def warning(self, message):
            warnings.append(message)

    monkeypatch.setattr(settings_module, "get_app_logger", _FakeLogger)
    monkeypatch.setenv("LEDGER_TRANSACTIONS_FILE", str(tmp_path / "none.json"))

    settings = LedgerSyncSettings.from_env()

    assert settings.transactions_file == (tmp_path / "none.json").resolve()
    assert len(warnings) == 1


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LEDGER_DECIMAL_SEPARATOR", ";"),
        ("LEDGER_CURRENCY_POSITION", "middle"),
        ("LEDGER_CURRENCY_GAP", "sometimes"),
    ],
)
def test_from_env_rejects_invalid_values(monkeypatch, name, value) -> None:
    """Invalid values raise ValueError."""
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        LedgerSyncSettings.from_env()


def test_from_env_rejects_unknown_api_version(monkeypatch) -> None:
    """Unknown revisions raise UnsupportedVersionError."""
    monkeypatch.setenv("LEDGER_API_VERSION", "0.9")

    with pytest.raises(UnsupportedVersionError):
        LedgerSyncSettings.from_env()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("-6", ApiVersion.V1_32), (" 0 ", ApiVersion.AUTO), ("42", ApiVersion.AUTO)],
)
def test_from_env_reads_stored_api_codes(monkeypatch, raw, expected) -> None:
    """Integer profile codes map to revisions, unknown ones to AUTO."""
    monkeypatch.setenv("LEDGER_API_VERSION", raw)

    assert LedgerSyncSettings.from_env().api_version is expected


def test_formatting_context_swaps_grouping_for_comma() -> None:
    """A comma separator groups with points."""
    settings = LedgerSyncSettings(
        decimal_separator=",",
        default_currency="EUR",
        currency_position=SymbolPosition.AFTER,
        currency_gap=False,
    )

    context = settings.formatting_context()

    assert context.grouping_separator == "."
    assert context.default_currency == "EUR"
    assert context.symbol_position is SymbolPosition.AFTER
    assert context.currency_gap is False

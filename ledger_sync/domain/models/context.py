"""Formatting context passed explicitly into formatting and parsing."""

from dataclasses import dataclass

from ledger_sync.domain.models.amounts import SymbolPosition


@dataclass(frozen=True)
class FormattingContext:
    """User preferences that drive number rendering and parsing.

    Attributes:
        decimal_separator: Separator typed and shown for fractions.
        grouping_separator: Thousands separator used for hints.
        default_currency: Currency assigned to new rows.
        symbol_position: Where symbols go when no server style is known.
        currency_gap: Whether a space separates symbol and number.
    """

    decimal_separator: str = "."
    grouping_separator: str = ","
    default_currency: str = ""
    symbol_position: SymbolPosition = SymbolPosition.BEFORE
    currency_gap: bool = True

    def __post_init__(self) -> None:
        if self.decimal_separator not in (".", ","):
            raise ValueError(
                f"Unsupported decimal separator: {self.decimal_separator!r}"
            )
        if self.grouping_separator == self.decimal_separator:
            raise ValueError(
                "Grouping and decimal separators must differ"
            )


__all__ = ["FormattingContext"]

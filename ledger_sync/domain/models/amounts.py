"""Domain models for amounts and their display styles."""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum


class SymbolPosition(Enum):
    """Placement of a currency symbol relative to the number."""

    BEFORE = "BEFORE"
    AFTER = "AFTER"
    NONE = "NONE"


_DECIMAL_MARKS = (".", ",")


@dataclass(frozen=True)
class AmountStyle:
    """Display style reported by the server for a commodity.

    Attributes:
        symbol_position: Where the currency symbol goes.
        spaced: Whether a single space separates symbol and number.
        precision: Number of fraction digits to render.
        decimal_mark: Decimal mark, either "." or ",".
    """

    symbol_position: SymbolPosition = SymbolPosition.NONE
    spaced: bool = False
    precision: int = 2
    decimal_mark: str = "."

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"Precision must not be negative: {self.precision}")
        if self.decimal_mark not in _DECIMAL_MARKS:
            raise ValueError(f"Unsupported decimal mark: {self.decimal_mark!r}")

    def serialize(self) -> str:
        """Return the compact storage form, e.g. ``BEFORE:true:2:.``.

        Returns:
            str: Four colon-separated fields.
        """
        spaced = "true" if self.spaced else "false"
        return (
            f"{self.symbol_position.value}:{spaced}:"
            f"{self.precision}:{self.decimal_mark}"
        )

    @classmethod
    def deserialize(cls, raw: str | None) -> "AmountStyle | None":
        """Parse the storage form produced by serialize().

        Args:
            raw: Stored string, possibly empty or malformed.

        Returns:
            AmountStyle | None: Parsed style, or None when malformed.
        """
        if not raw:
            return None
        parts = raw.split(":")
        if len(parts) != 4:
            return None
        position, spaced, precision, mark = parts
        if spaced not in ("true", "false"):
            return None
        try:
            return cls(
                symbol_position=SymbolPosition(position),
                spaced=spaced == "true",
                precision=int(precision),
                decimal_mark=mark or ".",
            )
        except ValueError:
            return None


@dataclass(frozen=True)
class StyledAmount:
    """A magnitude tagged with its currency and optional style."""

    currency_code: str
    magnitude: Decimal
    style: AmountStyle | None = None

    def plus(self, magnitude: Decimal) -> "StyledAmount":
        """Return a copy with ``magnitude`` added; the style is kept."""
        return replace(self, magnitude=self.magnitude + magnitude)


__all__ = ["SymbolPosition", "AmountStyle", "StyledAmount"]

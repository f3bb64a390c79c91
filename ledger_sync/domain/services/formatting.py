"""Rendering and parsing of amounts under an explicit formatting context."""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
import re

from ledger_sync.domain.constants import DEFAULT_PRECISION
from ledger_sync.domain.errors import InvalidAmountTextError
from ledger_sync.domain.models.amounts import (
    AmountStyle,
    StyledAmount,
    SymbolPosition,
)
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.utils.decimal_utils import coerce_decimal


_AMOUNT_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

_HINT_QUANTUM = Decimal("0.001")
_CENT_QUANTUM = Decimal("0.01")


def default_style(currency: str, context: FormattingContext) -> AmountStyle:
    """Return the style used when the server reported none.

    Args:
        currency: Currency code of the amount.
        context: Active formatting preferences.

    Returns:
        AmountStyle: Context-driven style with two decimals.
    """
    position = (
        context.symbol_position if currency else SymbolPosition.NONE
    )
    return AmountStyle(
        symbol_position=position,
        spaced=context.currency_gap,
        precision=DEFAULT_PRECISION,
        decimal_mark=context.decimal_separator,
    )


def _substitute_marks(rendered: str, decimal_mark: str, grouping: str) -> str:
    """Swap the "," and "." of a Python-formatted number for the given marks."""
    integer, separator, fraction = rendered.partition(".")
    integer = integer.replace(",", grouping)
    if not separator:
        return integer
    return f"{integer}{decimal_mark}{fraction}"


def format_magnitude(magnitude, style: AmountStyle) -> str:
    """Render a number with grouping and the style's precision and mark.

    A precision of zero renders a grouped integer. Grouping uses "," unless
    the decimal mark is ",", in which case it uses ".".

    Args:
        magnitude: Number to render.
        style: Style providing precision and decimal mark.

    Returns:
        str: Rendered number without a currency symbol.
    """
    value = coerce_decimal(magnitude)
    quantum = Decimal(1).scaleb(-style.precision)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    grouping = "." if style.decimal_mark == "," else ","
    return _substitute_marks(f"{rounded:,f}", style.decimal_mark, grouping)


def format_amount(
    magnitude,
    currency: str = "",
    style: AmountStyle | None = None,
    context: FormattingContext | None = None,
) -> str:
    """Render an amount with its currency symbol.

    Args:
        magnitude: Number to render.
        currency: Currency code; empty renders no symbol.
        style: Server style; falls back to the context default.
        context: Active formatting preferences.

    Returns:
        str: Display text such as ``USD 1,234.50`` or ``12,50 EUR``.
    """
    resolved = style or default_style(currency, context or FormattingContext())
    number = format_magnitude(magnitude, resolved)
    if not currency or resolved.symbol_position is SymbolPosition.NONE:
        return number
    gap = " " if resolved.spaced else ""
    if resolved.symbol_position is SymbolPosition.BEFORE:
        return f"{currency}{gap}{number}"
    return f"{number}{gap}{currency}"


def format_styled_amount(
    amount: StyledAmount,
    context: FormattingContext | None = None,
) -> str:
    """Render a StyledAmount using its own style when present."""
    return format_amount(
        amount.magnitude,
        amount.currency_code,
        amount.style,
        context,
    )


def format_number(value, context: FormattingContext) -> str:
    """Render a plain number for balancing hints.

    Uses grouping and between two and three fraction digits, e.g. ``-10``
    becomes ``-10.00``.

    Args:
        value: Number to render.
        context: Active formatting preferences.

    Returns:
        str: Number text in the context's separators.
    """
    quantized = coerce_decimal(value).quantize(
        _HINT_QUANTUM,
        rounding=ROUND_HALF_EVEN,
    )
    if quantized == quantized.quantize(_CENT_QUANTUM):
        quantized = quantized.quantize(_CENT_QUANTUM)
    if quantized == 0:
        quantized = abs(quantized)
    return _substitute_marks(
        f"{quantized:,f}",
        context.decimal_separator,
        context.grouping_separator,
    )


def parse_amount_text(text: str, context: FormattingContext) -> Decimal | None:
    """Parse user-entered amount text.

    Args:
        text: Raw text; surrounding whitespace is ignored.
        context: Active formatting preferences.

    Returns:
        Decimal | None: Parsed amount, or None for blank text.

    Raises:
        InvalidAmountTextError: If the text is not a signed decimal.
    """
    cleaned = text.strip()
    if not cleaned:
        return None
    candidate = cleaned.replace(context.decimal_separator, ".")
    if not _AMOUNT_PATTERN.match(candidate):
        raise InvalidAmountTextError(f"Not a valid amount: {text!r}")
    return Decimal(candidate)


__all__ = [
    "default_style",
    "format_magnitude",
    "format_amount",
    "format_styled_amount",
    "format_number",
    "parse_amount_text",
]

"""Tests for amount formatting and parsing."""

from decimal import Decimal

import pytest

from ledger_sync.domain.errors import InvalidAmountTextError
from ledger_sync.domain.models.amounts import (
    AmountStyle,
    StyledAmount,
    SymbolPosition,
)
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.services.formatting import (
    default_style,
    format_amount,
    format_magnitude,
    format_number,
    format_styled_amount,
    parse_amount_text,
)


def test_format_magnitude_groups_and_rounds() -> None:
    """Grouping and fixed precision should apply."""
    style = AmountStyle(precision=2)

    assert format_magnitude(Decimal("1234567.891"), style) == "1,234,567.89"


def test_format_magnitude_uses_point_grouping_with_comma_mark() -> None:
    """A comma decimal mark should switch grouping to points."""
    style = AmountStyle(precision=2, decimal_mark=",")

    assert format_magnitude(Decimal("1234.5"), style) == "1.234,50"


def test_format_magnitude_precision_zero_renders_integer() -> None:
    """Precision zero should render a grouped integer."""
    style = AmountStyle(precision=0)

    assert format_magnitude(Decimal("12344.9996"), style) == "12,345"


def test_format_magnitude_never_renders_negative_zero() -> None:
    """Values rounding to zero should not keep a minus sign."""
    style = AmountStyle(precision=2)

    assert format_magnitude(Decimal("-0.001"), style) == "0.00"


def test_format_amount_places_symbol_before_with_space() -> None:
    """BEFORE with spacing should prefix the symbol and a space."""
    style = AmountStyle(SymbolPosition.BEFORE, True, 2, ".")

    assert format_amount(Decimal("5"), "USD", style) == "USD 5.00"


def test_format_amount_places_symbol_after_without_space() -> None:
    """AFTER without spacing should append the symbol directly."""
    style = AmountStyle(SymbolPosition.AFTER, False, 2, ",")

    assert format_amount(Decimal("-12.5"), "€", style) == "-12,50€"


def test_format_amount_without_currency_has_no_symbol() -> None:
    """An empty currency should render the bare number."""
    style = AmountStyle(SymbolPosition.BEFORE, True, 2, ".")

    assert format_amount(Decimal("3"), "", style) == "3.00"


def test_format_amount_falls_back_to_context_style() -> None:
    """Without a server style, the context decides placement."""
    context = FormattingContext(
        decimal_separator=",",
        grouping_separator=".",
        symbol_position=SymbolPosition.AFTER,
        currency_gap=True,
    )

    assert format_amount(Decimal("1000"), "EUR", None, context) == "1.000,00 EUR"


def test_default_style_has_no_position_without_currency() -> None:
    """No currency means no symbol position."""
    style = default_style("", FormattingContext())

    assert style.symbol_position is SymbolPosition.NONE
    assert style.precision == 2


def test_format_styled_amount_uses_its_own_style() -> None:
    """StyledAmount styles take precedence over the context."""
    amount = StyledAmount(
        "$",
        Decimal("7.5"),
        AmountStyle(SymbolPosition.BEFORE, False, 1, "."),
    )

    assert format_styled_amount(amount) == "$7.5"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("-10"), "-10.00"),
        (Decimal("-5"), "-5.00"),
        (Decimal("1234.5"), "1,234.50"),
        (Decimal("0.125"), "0.125"),
        (Decimal("0.1255"), "0.126"),
        (Decimal("-0.0001"), "0.00"),
    ],
)
def test_format_number_renders_hint_text(value, expected) -> None:
    """Hints should use two to three fraction digits with grouping."""
    assert format_number(value, FormattingContext()) == expected


def test_format_number_honours_context_separators() -> None:
    """Hints should use the context separators."""
    context = FormattingContext(decimal_separator=",", grouping_separator=".")

    assert format_number(Decimal("-1234.5"), context) == "-1.234,50"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("10", Decimal("10")),
        (" -2.50 ", Decimal("-2.50")),
        ("+3", Decimal("3")),
        (".5", Decimal("0.5")),
        ("7.", Decimal("7")),
    ],
)
def test_parse_amount_text_accepts_signed_decimals(text, expected) -> None:
    """Signed decimals should parse."""
    assert parse_amount_text(text, FormattingContext()) == expected


def test_parse_amount_text_uses_context_separator() -> None:
    """A comma separator should be accepted when configured."""
    context = FormattingContext(decimal_separator=",", grouping_separator=".")

    assert parse_amount_text("12,75", context) == Decimal("12.75")


def test_parse_amount_text_returns_none_for_blank() -> None:
    """Blank text means the amount is not set."""
    assert parse_amount_text("   ", FormattingContext()) is None


@pytest.mark.parametrize("text", ["abc", "1,5", "1.2.3", "--1", "1e5", "NaN"])
def test_parse_amount_text_rejects_invalid_text(text) -> None:
    """Anything but a plain signed decimal should be rejected."""
    with pytest.raises(InvalidAmountTextError):
        parse_amount_text(text, FormattingContext())

"""Tests for AmountStyle serialization and validation."""

import pytest

from ledger_sync.domain.models.amounts import AmountStyle, SymbolPosition


def test_serialize_uses_four_colon_separated_fields() -> None:
    """serialize should produce POSITION:spaced:precision:mark."""
    style = AmountStyle(SymbolPosition.BEFORE, True, 2, ".")

    assert style.serialize() == "BEFORE:true:2:."


@pytest.mark.parametrize(
    "style",
    [
        AmountStyle(SymbolPosition.BEFORE, True, 2, "."),
        AmountStyle(SymbolPosition.AFTER, False, 0, ","),
        AmountStyle(SymbolPosition.NONE, False, 8, "."),
    ],
)
def test_deserialize_restores_serialized_style(style: AmountStyle) -> None:
    """deserialize should invert serialize."""
    assert AmountStyle.deserialize(style.serialize()) == style


def test_deserialize_defaults_empty_mark_to_point() -> None:
    """An empty decimal mark should read back as '.'."""
    style = AmountStyle.deserialize("AFTER:false:3:")

    assert style == AmountStyle(SymbolPosition.AFTER, False, 3, ".")


@pytest.mark.parametrize(
    "raw",
    [None, "", "BEFORE:true:2", "SIDEWAYS:true:2:.", "BEFORE:maybe:2:.",
     "BEFORE:true:x:.", "BEFORE:true:-1:.", "BEFORE:true:2:;"],
)
def test_deserialize_returns_none_for_malformed_input(raw) -> None:
    """Malformed strings should deserialize to None."""
    assert AmountStyle.deserialize(raw) is None


def test_style_rejects_negative_precision() -> None:
    """Negative precision is not a valid style."""
    with pytest.raises(ValueError):
        AmountStyle(precision=-1)


def test_style_rejects_unknown_decimal_mark() -> None:
    """Only '.' and ',' are accepted as decimal marks."""
    with pytest.raises(ValueError):
        AmountStyle(decimal_mark="'")

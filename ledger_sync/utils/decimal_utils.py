"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Floats go through their shortest repr so ``0.1`` stays ``0.1``.

    Args:
        value: Raw numeric value from JSON or adapters.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value is a bool, not numeric, or not finite.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


__all__ = ["coerce_decimal"]

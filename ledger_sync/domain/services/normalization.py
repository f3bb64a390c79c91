"""Domain normalization helpers."""


def normalize_currency_code(currency: str | None) -> str:
    """Normalize currency codes reported by the server or typed by users.

    Args:
        currency: Raw currency code, possibly None.

    Returns:
        str: Stripped code, empty when there is no commodity.
    """
    if not currency:
        return ""
    return currency.strip()


def normalize_account_name(name: str | None) -> str:
    """Normalize account names.

    Args:
        name: Raw account name, possibly None.

    Returns:
        str: Stripped account name.
    """
    if not name:
        return ""
    return name.strip()


def normalize_comment(comment: str | None) -> str:
    """Normalize free-form comments; trailing newlines are dropped."""
    if not comment:
        return ""
    return comment.strip()


__all__ = [
    "normalize_currency_code",
    "normalize_account_name",
    "normalize_comment",
]

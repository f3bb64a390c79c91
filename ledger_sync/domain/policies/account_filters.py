"""Account filtering policies."""

from ledger_sync.domain.constants import ROOT_ACCOUNT_NAME


def is_reported_account_name(name: str) -> bool:
    """Return True when a server account should enter the tree.

    The server reports a synthetic top-level account named ``root``
    holding the grand total; it is not a real account.

    Args:
        name: Account name to evaluate.

    Returns:
        bool: True when the name should be retained.
    """
    candidate = name.strip()
    if not candidate:
        return False
    return candidate != ROOT_ACCOUNT_NAME


__all__ = ["is_reported_account_name"]

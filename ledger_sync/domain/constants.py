"""Domain constants for ledger accounts and editable transactions."""

ACCOUNT_DELIMITER = ":"

ROOT_ACCOUNT_NAME = "root"

MIN_EDITABLE_ROWS = 2

DEFAULT_PRECISION = 2


__all__ = [
    "ACCOUNT_DELIMITER",
    "ROOT_ACCOUNT_NAME",
    "MIN_EDITABLE_ROWS",
    "DEFAULT_PRECISION",
]

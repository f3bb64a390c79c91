"""Domain services package."""

from .account_tree import AccountTreeBuilder, build_account_tree
from .balancing import BalanceCheck, TransactionBalancer, build_transaction
from .formatting import (
    default_style,
    format_amount,
    format_magnitude,
    format_number,
    format_styled_amount,
    parse_amount_text,
)
from .normalization import (
    normalize_account_name,
    normalize_comment,
    normalize_currency_code,
)
from .templates import TemplateMatcher, validate_pattern
from .validation import validate_transaction_balance

__all__ = [
    "AccountTreeBuilder",
    "build_account_tree",
    "BalanceCheck",
    "TransactionBalancer",
    "build_transaction",
    "default_style",
    "format_amount",
    "format_magnitude",
    "format_number",
    "format_styled_amount",
    "parse_amount_text",
    "normalize_account_name",
    "normalize_comment",
    "normalize_currency_code",
    "TemplateMatcher",
    "validate_pattern",
    "validate_transaction_balance",
]

"""Domain models package."""

from .accounts import AccountNode, AccountTree
from .amounts import AmountStyle, StyledAmount, SymbolPosition
from .api_version import ApiVersion, ServerVersion
from .context import FormattingContext
from .editing import AmountState, EditableAccountRow, TransactionHead
from .templates import (
    ExtractedLine,
    ExtractedTransaction,
    PatternCheck,
    TemplateLine,
    TransactionTemplate,
)
from .transactions import Posting, Transaction

__all__ = [
    "AccountNode",
    "AccountTree",
    "AmountStyle",
    "StyledAmount",
    "SymbolPosition",
    "ApiVersion",
    "ServerVersion",
    "FormattingContext",
    "AmountState",
    "EditableAccountRow",
    "TransactionHead",
    "ExtractedLine",
    "ExtractedTransaction",
    "PatternCheck",
    "TemplateLine",
    "TransactionTemplate",
    "Posting",
    "Transaction",
]

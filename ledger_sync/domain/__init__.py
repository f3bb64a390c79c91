"""Domain package for the canonical ledger model and its rules."""

from .constants import (
    ACCOUNT_DELIMITER,
    DEFAULT_PRECISION,
    MIN_EDITABLE_ROWS,
    ROOT_ACCOUNT_NAME,
)
from .errors import (
    DecodeError,
    InternalInvariantViolation,
    InvalidAmountTextError,
    LedgerSyncError,
    OperationCancelled,
    ReentrantEditError,
    UnsupportedVersionError,
)
from .models import (
    AccountNode,
    AccountTree,
    AmountState,
    AmountStyle,
    ApiVersion,
    EditableAccountRow,
    FormattingContext,
    Posting,
    ServerVersion,
    StyledAmount,
    SymbolPosition,
    Transaction,
    TransactionHead,
)
from .policies import is_reported_account_name

__all__ = [
    "ACCOUNT_DELIMITER",
    "DEFAULT_PRECISION",
    "MIN_EDITABLE_ROWS",
    "ROOT_ACCOUNT_NAME",
    "DecodeError",
    "InternalInvariantViolation",
    "InvalidAmountTextError",
    "LedgerSyncError",
    "OperationCancelled",
    "ReentrantEditError",
    "UnsupportedVersionError",
    "AccountNode",
    "AccountTree",
    "AmountState",
    "AmountStyle",
    "ApiVersion",
    "EditableAccountRow",
    "FormattingContext",
    "Posting",
    "ServerVersion",
    "StyledAmount",
    "SymbolPosition",
    "Transaction",
    "TransactionHead",
    "is_reported_account_name",
]

"""Error taxonomy shared by every layer of ledger-sync."""


class LedgerSyncError(Exception):
    """Base class for errors raised by ledger-sync."""


class DecodeError(LedgerSyncError):
    """Raised when a server payload cannot be decoded.

    The whole fetch is abandoned; no partially decoded data is returned.
    """


class UnsupportedVersionError(LedgerSyncError):
    """Raised when an API version has no codec or cannot post."""


class InvalidAmountTextError(LedgerSyncError, ValueError):
    """Raised when user-entered amount text is not a decimal number."""


class InternalInvariantViolation(LedgerSyncError):
    """Raised when internal state breaks an invariant the code relies on."""


class OperationCancelled(LedgerSyncError):
    """Raised when a cancellation token is set while work is in progress."""


class ReentrantEditError(LedgerSyncError):
    """Raised when an edit is attempted while another edit is running."""


__all__ = [
    "LedgerSyncError",
    "DecodeError",
    "UnsupportedVersionError",
    "InvalidAmountTextError",
    "InternalInvariantViolation",
    "OperationCancelled",
    "ReentrantEditError",
]

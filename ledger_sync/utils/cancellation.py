"""Cooperative cancellation shared between a decode worker and its owner."""

import threading

from ledger_sync.domain.errors import OperationCancelled


class CancellationToken:
    """Thread-safe flag checked by long-running loops."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; idempotent."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled once cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelled("Operation was cancelled")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses."""
        return self._event.wait(timeout)


def check_cancelled(token: CancellationToken | None) -> None:
    """Raise OperationCancelled when ``token`` is set; None never cancels."""
    if token is not None:
        token.raise_if_cancelled()


__all__ = ["CancellationToken", "check_cancelled"]

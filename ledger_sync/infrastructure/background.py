"""Decoding on a worker thread with a single consumer."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
import queue
import threading
from typing import Generic, TypeVar

from ledger_sync.domain.errors import InternalInvariantViolation
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.utils.cancellation import CancellationToken


T = TypeVar("T")

_POLL_SECONDS = 0.05
_DONE = object()


@dataclass(frozen=True)
class _Failure:
    error: Exception


class BackgroundDecoder(Generic[T]):
    """Run a decode generator on a worker thread.

    Records travel to the consumer through a bounded queue, so the worker
    never runs far ahead. Errors raised by the worker are re-raised in the
    consumer. The records can be consumed once; a cancelled decoder stops
    both sides at the next record boundary.
    """

    def __init__(
        self,
        produce: Callable[[CancellationToken], Iterable[T]],
        max_pending: int = 64,
        logger=None,
    ) -> None:
        """Initialize the decoder.

        Args:
            produce: Callable returning the records; it receives the
                cancellation token and should check it once per record.
            max_pending: Maximum number of records waiting in the queue.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._produce = produce
        self._queue: queue.Queue = queue.Queue(maxsize=max_pending)
        self._token = CancellationToken()
        self._thread: threading.Thread | None = None
        self._consumed = False
        self._logger = logger or get_app_logger()

    @property
    def cancel_token(self) -> CancellationToken:
        return self._token

    def start(self) -> "BackgroundDecoder[T]":
        """Start the worker thread.

        Raises:
            RuntimeError: If the worker was already started.
        """
        if self._thread is not None:
            raise RuntimeError("Decode worker already started")
        self._thread = threading.Thread(
            target=self._run,
            name="ledger-sync-decoder",
            daemon=True,
        )
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._token.cancel()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def results(self) -> Iterator[T]:
        """Yield decoded records in production order.

        Raises:
            RuntimeError: If the records were already consumed.
            OperationCancelled: If the decoder was cancelled.
        """
        if self._consumed:
            raise RuntimeError("Decoded records can only be consumed once")
        self._consumed = True
        if self._thread is None:
            self.start()
        return self._drain()

    def _drain(self) -> Iterator[T]:
        while True:
            self._token.raise_if_cancelled()
            try:
                item = self._queue.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                if not self._thread.is_alive() and self._queue.empty():
                    self._token.raise_if_cancelled()
                    raise InternalInvariantViolation(
                        "Decode worker stopped without finishing"
                    )
                continue
            if item is _DONE:
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item

    def _run(self) -> None:
        count = 0
        try:
            for item in self._produce(self._token):
                if not self._put(item):
                    return
                count += 1
        except Exception as exc:
            if not self._token.is_cancelled:
                self._logger.error(f"Background decoding failed: {exc}")
            self._put(_Failure(exc))
            return
        self._logger.info(f"Background decoding produced {count} records")
        self._put(_DONE)

    def _put(self, item: object) -> bool:
        while not self._token.is_cancelled:
            try:
                self._queue.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def __enter__(self) -> "BackgroundDecoder[T]":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
        self.join()


__all__ = ["BackgroundDecoder"]

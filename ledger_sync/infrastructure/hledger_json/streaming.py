"""Lazy reading of the top-level JSON array returned by hledger-web."""

from collections.abc import Iterator
from decimal import Decimal
import json
import re
from typing import Any

from ledger_sync.domain.errors import DecodeError
from ledger_sync.utils.cancellation import CancellationToken, check_cancelled


_WHITESPACE = re.compile(r"[ \t\n\r]*")


def _to_text(payload: bytes | str) -> str:
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Payload is not valid UTF-8: {exc}") from exc


def _skip_whitespace(text: str, index: int) -> int:
    return _WHITESPACE.match(text, index).end()


def iter_json_array(
    payload: bytes | str,
    cancel_token: CancellationToken | None = None,
) -> Iterator[dict[str, Any]]:
    """Yield the objects of a top-level JSON array one at a time.

    Elements are decoded on demand, so a consumer that stops early never
    pays for the rest of the payload. Numbers with a fraction are decoded
    as Decimal. The stream is forward only and cannot be restarted.

    Args:
        payload: Raw response body.
        cancel_token: Optional token checked before each element.

    Yields:
        dict[str, Any]: One decoded array element.

    Raises:
        DecodeError: If the payload is not an array of objects.
        OperationCancelled: If the token is set between elements.
    """
    text = _to_text(payload)
    decoder = json.JSONDecoder(parse_float=Decimal)
    index = _skip_whitespace(text, 0)
    if text[index:index + 1] != "[":
        raise DecodeError("Expected a JSON array at the top level")
    index = _skip_whitespace(text, index + 1)

    if text[index:index + 1] == "]":
        index += 1
    else:
        while True:
            check_cancelled(cancel_token)
            try:
                element, index = decoder.raw_decode(text, index)
            except json.JSONDecodeError as exc:
                raise DecodeError(f"Malformed JSON: {exc}") from exc
            if not isinstance(element, dict):
                raise DecodeError(
                    f"Expected a JSON object, got {type(element).__name__}"
                )
            yield element
            index = _skip_whitespace(text, index)
            separator = text[index:index + 1]
            index = _skip_whitespace(text, index + 1)
            if separator == "]":
                break
            if separator != ",":
                raise DecodeError(
                    f"Expected ',' or ']' at position {index}"
                )

    if _skip_whitespace(text, index) != len(text):
        raise DecodeError("Unexpected data after the JSON array")


__all__ = ["iter_json_array"]

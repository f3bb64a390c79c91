"""Tests for lazy decoding of top-level JSON arrays."""

from decimal import Decimal

import pytest

from ledger_sync.domain.errors import DecodeError, OperationCancelled
from ledger_sync.infrastructure.hledger_json.streaming import iter_json_array
from ledger_sync.utils.cancellation import CancellationToken


def test_yields_each_object_in_order() -> None:
    """Elements should come back one by one in array order."""
    payload = b' [ {"a": 1}, {"b": 2.50} ,{"c": null} ] \n'

    records = list(iter_json_array(payload))

    assert records == [{"a": 1}, {"b": Decimal("2.50")}, {"c": None}]
    assert isinstance(records[1]["b"], Decimal)


def test_accepts_empty_array_and_bom() -> None:
    """An empty array with a byte order mark decodes to nothing."""
    assert list(iter_json_array("\ufeff[]".encode("utf-8"))) == []


def test_decodes_lazily() -> None:
    """Malformed data after the consumed element is not touched."""
    records = iter_json_array('[{"a": 1}, {broken')

    assert next(records) == {"a": 1}
    with pytest.raises(DecodeError):
        next(records)


@pytest.mark.parametrize(
    "payload",
    [
        '{"a": 1}',
        "",
        "[1, 2]",
        '[{"a": 1} {"b": 2}]',
        '[{"a": 1}] trailing',
        '[{"a": 1},',
        b"\xff\xfe[",
    ],
)
def test_rejects_malformed_payloads(payload) -> None:
    """Anything but an array of objects is a decode error."""
    with pytest.raises(DecodeError):
        list(iter_json_array(payload))


def test_cancellation_stops_between_elements() -> None:
    """A cancelled token should stop decoding before the next element."""
    token = CancellationToken()
    records = iter_json_array('[{"a": 1}, {"b": 2}]', token)

    assert next(records) == {"a": 1}
    token.cancel()
    with pytest.raises(OperationCancelled):
        next(records)

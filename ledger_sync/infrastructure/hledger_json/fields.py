"""Field parsers shared by the hledger-web JSON codecs.

Every function here is pure. Codecs combine them with their own style and
balance extractors, so revisions differ only where the wire format does.
"""

from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from typing import Any

from ledger_sync.domain.errors import DecodeError
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.amounts import (
    AmountStyle,
    StyledAmount,
    SymbolPosition,
)
from ledger_sync.domain.models.transactions import Posting, Transaction
from ledger_sync.domain.policies.account_filters import (
    is_reported_account_name,
)
from ledger_sync.domain.services.normalization import (
    normalize_account_name,
    normalize_comment,
    normalize_currency_code,
)
from ledger_sync.infrastructure.hledger_json.streaming import iter_json_array
from ledger_sync.utils.cancellation import CancellationToken
from ledger_sync.utils.decimal_utils import coerce_decimal


StyleParser = Callable[[dict[str, Any], str], AmountStyle]
BalanceExtractor = Callable[[dict[str, Any]], Any]


def require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected an object for {what}")
    return value


def require_list(value: Any, what: str) -> list[Any]:
    """Return ``value`` as a list; null counts as empty."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"Expected a list for {what}")
    return value


def get_str(record: dict[str, Any], key: str, default: str = "") -> str:
    value = record.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DecodeError(f"Expected a string for {key}")
    return value


def get_int(record: dict[str, Any], key: str, default: int = 0) -> int:
    value = record.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected an integer for {key}")
    return value


def parse_quantity(raw: Any) -> Decimal:
    """Decode an ``aquantity`` value.

    Args:
        raw: Object with ``decimalMantissa`` and ``decimalPlaces``, or a
            plain number.

    Returns:
        Decimal: Exact magnitude.

    Raises:
        DecodeError: If the value cannot be read as a number.
    """
    if isinstance(raw, dict):
        mantissa = raw.get("decimalMantissa")
        places = raw.get("decimalPlaces")
        if (
            isinstance(mantissa, int)
            and not isinstance(mantissa, bool)
            and isinstance(places, int)
            and not isinstance(places, bool)
            and places >= 0
        ):
            return Decimal(f"{mantissa}E-{places}")
        raw = raw.get("floatingPoint")
    if isinstance(raw, (int, float, Decimal)):
        try:
            return coerce_decimal(raw)
        except ValueError as exc:
            raise DecodeError(f"Invalid quantity: {exc}") from exc
    raise DecodeError("Missing or invalid amount quantity")


def parse_side(raw: Any, currency: str) -> SymbolPosition:
    """Map ``ascommodityside`` to a symbol position."""
    if not currency:
        return SymbolPosition.NONE
    if raw == "L":
        return SymbolPosition.BEFORE
    if raw == "R":
        return SymbolPosition.AFTER
    return SymbolPosition.NONE


def parse_decimal_mark(raw: Any) -> str:
    return "," if raw == "," else "."


def build_style(
    style: dict[str, Any],
    currency: str,
    precision: int,
    decimal_mark: Any,
) -> AmountStyle:
    """Assemble an AmountStyle from the fields every revision shares."""
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise DecodeError("Expected an integer precision")
    try:
        return AmountStyle(
            symbol_position=parse_side(style.get("ascommodityside"), currency),
            spaced=bool(style.get("ascommodityspaced")),
            precision=precision,
            decimal_mark=parse_decimal_mark(decimal_mark),
        )
    except ValueError as exc:
        raise DecodeError(f"Invalid amount style: {exc}") from exc


def parse_amount(raw: Any, parse_style: StyleParser) -> StyledAmount:
    amount = require_dict(raw, "amount")
    currency = normalize_currency_code(get_str(amount, "acommodity"))
    magnitude = parse_quantity(amount.get("aquantity"))
    raw_style = amount.get("astyle")
    style = (
        parse_style(require_dict(raw_style, "astyle"), currency)
        if raw_style is not None
        else None
    )
    return StyledAmount(currency, magnitude, style)


def parse_amounts(raw: Any, parse_style: StyleParser) -> list[StyledAmount]:
    return [
        parse_amount(item, parse_style)
        for item in require_list(raw, "amount list")
    ]


def merge_consecutive(amounts: list[StyledAmount]) -> list[StyledAmount]:
    """Sum neighbouring amounts of one currency, keeping the first style."""
    merged: list[StyledAmount] = []
    for amount in amounts:
        if merged and merged[-1].currency_code == amount.currency_code:
            merged[-1] = merged[-1].plus(amount.magnitude)
        else:
            merged.append(amount)
    return merged


def account_from_record(
    record: dict[str, Any],
    balances_of: BalanceExtractor,
    parse_style: StyleParser,
) -> AccountNode | None:
    """Decode one account record; the synthetic root yields None."""
    name = normalize_account_name(get_str(record, "aname"))
    if not name:
        raise DecodeError("Account record without a name")
    if not is_reported_account_name(name):
        return None
    try:
        node = AccountNode(name)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc
    for amount in merge_consecutive(
        parse_amounts(balances_of(record), parse_style)
    ):
        node.add_amount(amount.magnitude, amount.currency_code, amount.style)
    return node


def parse_date(raw: Any, key: str) -> date:
    if not isinstance(raw, str):
        raise DecodeError(f"Missing date in {key}")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise DecodeError(f"Invalid date in {key}: {raw!r}") from exc


def posting_from_record(raw: Any, parse_style: StyleParser) -> Posting:
    """Decode one posting; only the first amount of ``pamount`` is used."""
    posting = require_dict(raw, "posting")
    account = normalize_account_name(get_str(posting, "paccount"))
    if not account:
        raise DecodeError("Posting without an account")
    amounts = parse_amounts(posting.get("pamount"), parse_style)
    first = amounts[0] if amounts else None
    return Posting(
        account_name=account,
        currency_code=first.currency_code if first else "",
        amount=first.magnitude if first else None,
        comment=normalize_comment(get_str(posting, "pcomment")),
        amount_style=first.style if first else None,
    )


def transaction_from_record(
    record: dict[str, Any],
    parse_style: StyleParser,
) -> Transaction:
    return Transaction(
        ledger_id=get_int(record, "tindex"),
        date=parse_date(record.get("tdate"), "tdate"),
        description=get_str(record, "tdescription"),
        comment=normalize_comment(get_str(record, "tcomment")),
        postings=tuple(
            posting_from_record(item, parse_style)
            for item in require_list(record.get("tpostings"), "tpostings")
        ),
    )


def decode_account_records(
    payload: bytes | str,
    balances_of: BalanceExtractor,
    parse_style: StyleParser,
    cancel_token: CancellationToken | None = None,
) -> Iterator[AccountNode]:
    """Lazily decode an accounts payload, skipping the synthetic root."""
    for record in iter_json_array(payload, cancel_token):
        node = account_from_record(record, balances_of, parse_style)
        if node is not None:
            yield node


def decode_transaction_records(
    payload: bytes | str,
    parse_style: StyleParser,
    cancel_token: CancellationToken | None = None,
) -> Iterator[Transaction]:
    """Lazily decode a transactions payload."""
    for record in iter_json_array(payload, cancel_token):
        yield transaction_from_record(record, parse_style)


__all__ = [
    "StyleParser",
    "BalanceExtractor",
    "require_dict",
    "require_list",
    "get_str",
    "get_int",
    "parse_quantity",
    "parse_side",
    "parse_decimal_mark",
    "build_style",
    "parse_amount",
    "parse_amounts",
    "merge_consecutive",
    "account_from_record",
    "parse_date",
    "posting_from_record",
    "transaction_from_record",
    "decode_account_records",
    "decode_transaction_records",
]

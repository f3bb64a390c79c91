"""Domain models for transaction templates matched against free text."""

from dataclasses import dataclass
import datetime
from decimal import Decimal


@dataclass(frozen=True)
class TemplateLine:
    """One account line produced by a template.

    Every ``*_group`` field names a regex group whose text replaces the
    literal value next to it; ``None`` or ``0`` means the literal is used.

    Attributes:
        account_name: Literal account name.
        account_name_group: Group holding the account name.
        amount: Literal amount.
        amount_group: Group holding the amount text.
        negate_amount: Whether the amount sign is flipped.
        currency_name: Literal currency; the default currency when empty.
        currency_group: Group holding the currency.
        comment: Literal posting comment.
        comment_group: Group holding the comment.
    """

    account_name: str = ""
    account_name_group: int | None = None
    amount: Decimal | None = None
    amount_group: int | None = None
    negate_amount: bool = False
    currency_name: str | None = None
    currency_group: int | None = None
    comment: str = ""
    comment_group: int | None = None


@dataclass(frozen=True)
class TransactionTemplate:
    """Regex template turning a line of text into a transaction.

    Fallback templates are tried after all others; within each kind the
    templates are tried by name, ignoring case.
    """

    name: str
    pattern: str
    lines: tuple[TemplateLine, ...] = ()
    description: str = ""
    description_group: int | None = None
    comment: str | None = None
    comment_group: int | None = None
    date_year: int | None = None
    date_year_group: int | None = None
    date_month: int | None = None
    date_month_group: int | None = None
    date_day: int | None = None
    date_day_group: int | None = None
    test_text: str = ""
    is_fallback: bool = False


@dataclass(frozen=True)
class ExtractedLine:
    account_name: str
    amount: Decimal | None
    currency_code: str
    comment: str


@dataclass(frozen=True)
class ExtractedTransaction:
    """Values a template pulled out of matched text."""

    template_name: str
    description: str
    comment: str | None
    date: datetime.date | None
    lines: tuple[ExtractedLine, ...]


@dataclass(frozen=True)
class PatternCheck:
    """Result of validating a template pattern against sample text.

    Attributes:
        error: Compile error message, None when the pattern is valid.
        group_count: Number of capturing groups in the pattern.
        match_span: Start and end of the first match in the sample, if any.
    """

    error: str | None
    group_count: int = 0
    match_span: tuple[int, int] | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


__all__ = [
    "TemplateLine",
    "TransactionTemplate",
    "ExtractedLine",
    "ExtractedTransaction",
    "PatternCheck",
]

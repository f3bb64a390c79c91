"""Matching of free text against transaction templates.

A template is a regular expression plus instructions saying which match
groups fill which transaction fields. Values without a group, or whose
group did not take part in the match, fall back to the template's literal
values.
"""

from collections.abc import Iterable
import datetime
from decimal import Decimal, InvalidOperation
import logging
import re

from ledger_sync.domain.models.templates import (
    ExtractedLine,
    ExtractedTransaction,
    PatternCheck,
    TemplateLine,
    TransactionTemplate,
)


def order_templates(
    templates: Iterable[TransactionTemplate],
) -> list[TransactionTemplate]:
    """Return templates in the order they are tried: regular ones first."""
    return sorted(
        templates,
        key=lambda template: (template.is_fallback, template.name.upper()),
    )


def parse_template_amount(text: str | None) -> Decimal | None:
    """Parse amount text captured by a template.

    Commas and spaces are treated as grouping and removed.

    Returns:
        Decimal | None: The amount, or None when the text is not a number.
    """
    if text is None:
        return None
    cleaned = text.replace(",", "").replace(" ", "").strip()
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def validate_pattern(pattern: str, test_text: str = "") -> PatternCheck:
    """Compile a template pattern and try it on sample text.

    Args:
        pattern: Regular expression being edited.
        test_text: Optional sample the pattern should match.

    Returns:
        PatternCheck: Error message or group count and match position.
    """
    if not pattern:
        return PatternCheck(error="Pattern is empty")
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        return PatternCheck(error=str(exc))
    span = None
    if test_text:
        match = compiled.search(test_text)
        if match is not None:
            span = match.span()
    return PatternCheck(error=None, group_count=compiled.groups, match_span=span)


class TemplateMatcher:
    """Find the template matching a text and extract a transaction from it."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def find_match(
        self,
        text: str,
        templates: Iterable[TransactionTemplate],
    ) -> tuple[TransactionTemplate, re.Match] | None:
        """Return the first template whose pattern occurs in ``text``.

        Templates with a blank or invalid pattern are skipped.
        """
        for template in order_templates(templates):
            if not template.pattern.strip():
                continue
            try:
                match = re.search(template.pattern, text)
            except re.error as exc:
                self._logger.warning(
                    f"Invalid pattern in template '{template.name}': {exc}"
                )
                continue
            if match is not None:
                return template, match
        return None

    def extract_transaction(
        self,
        template: TransactionTemplate,
        match: re.Match,
        default_currency: str = "",
        today: datetime.date | None = None,
    ) -> ExtractedTransaction:
        """Fill transaction fields from the groups of ``match``.

        Args:
            template: Template whose pattern produced the match.
            match: Match of the template pattern.
            default_currency: Currency for lines that name none.
            today: Supplies the month and day a template leaves out.

        Returns:
            ExtractedTransaction: Header values and one line per template line.
        """
        description = self._group_text(
            match, template.description_group, template.description
        )
        comment = self._group_text(
            match, template.comment_group, template.comment
        )
        return ExtractedTransaction(
            template_name=template.name,
            description=description or "",
            comment=comment,
            date=self._extract_date(
                template, match, today or datetime.date.today()
            ),
            lines=tuple(
                self._extract_line(line, match, default_currency)
                for line in template.lines
            ),
        )

    def extract_from_text(
        self,
        text: str,
        templates: Iterable[TransactionTemplate],
        default_currency: str = "",
        today: datetime.date | None = None,
    ) -> ExtractedTransaction | None:
        """Match ``text`` and extract a transaction in one step."""
        found = self.find_match(text, templates)
        if found is None:
            self._logger.debug("No template matches the text")
            return None
        template, match = found
        self._logger.debug(f"Text matches template '{template.name}'")
        return self.extract_transaction(
            template, match, default_currency, today
        )

    def _group_text(
        self,
        match: re.Match,
        group: int | None,
        fallback: str | None,
    ) -> str | None:
        if group is None or group <= 0:
            return fallback
        if group > match.re.groups:
            self._logger.debug(
                f"Group {group} exceeds the {match.re.groups} groups of "
                "the pattern"
            )
            return fallback
        value = match.group(group)
        return fallback if value is None else value

    def _extract_line(
        self,
        line: TemplateLine,
        match: re.Match,
        default_currency: str,
    ) -> ExtractedLine:
        account_name = self._group_text(
            match, line.account_name_group, line.account_name
        )

        amount_text = self._group_text(match, line.amount_group, None)
        if amount_text is None:
            amount = line.amount
        else:
            amount = parse_template_amount(amount_text)
        if amount is not None and line.negate_amount:
            amount = -amount

        if (line.currency_group or 0) > 0:
            currency = self._group_text(match, line.currency_group, None)
        else:
            currency = line.currency_name
        if currency is None:
            currency = default_currency

        comment = self._group_text(match, line.comment_group, line.comment)
        return ExtractedLine(
            account_name=account_name or "",
            amount=amount,
            currency_code=currency,
            comment=comment or "",
        )

    def _extract_date(
        self,
        template: TransactionTemplate,
        match: re.Match,
        today: datetime.date,
    ) -> datetime.date | None:
        # Without a year there is no date at all.
        year = _to_int(
            self._group_text(
                match, template.date_year_group, _as_text(template.date_year)
            )
        )
        if year is None:
            return None
        month = _to_int(
            self._group_text(
                match, template.date_month_group, _as_text(template.date_month)
            )
        )
        day = _to_int(
            self._group_text(
                match, template.date_day_group, _as_text(template.date_day)
            )
        )
        try:
            return datetime.date(
                year,
                month if month is not None else today.month,
                day if day is not None else today.day,
            )
        except ValueError as exc:
            self._logger.debug(f"Template '{template.name}' date: {exc}")
            return None


def _as_text(value: int | None) -> str | None:
    return None if value is None else str(value)


def _to_int(text: str | None) -> int | None:
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


__all__ = [
    "TemplateMatcher",
    "order_templates",
    "parse_template_amount",
    "validate_pattern",
]

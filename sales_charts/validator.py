from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from .loader import RawRow

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^[0-9]{4}-(0[1-9]|1[0-2])$")

MAX_AMOUNT = Decimal("1e15")


class ValidationError(ValueError):
    """
    A single row failed field-level validation.

    row_index counts data records from 0, header and blank lines excluded;
    it is not a physical line number (quoted cells may span lines).
    """

    def __init__(self, row_index: int, field: str, value: str, reason: str) -> None:
        self.row_index = row_index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Row {row_index}: invalid {field} {value!r}: {reason}")

    def as_dict(self) -> dict:
        return {
            "row": self.row_index,
            "field": self.field,
            "value": self.value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SalesRecord:
    """Typed sales row. Only the validator creates these."""
    month: str
    product: str
    amount: Decimal


@dataclass(frozen=True)
class ValidationResult:
    """Records that passed validation plus the rows skipped in lenient mode."""
    records: List[SalesRecord]
    skipped: List[ValidationError] = field(default_factory=list)

    @property
    def rows_out(self) -> int:
        return len(self.records)

    @property
    def rows_in(self) -> int:
        return len(self.records) + len(self.skipped)


def _parse_month(raw: RawRow) -> str:
    month = (raw.month or "").strip()
    if not month:
        raise ValidationError(raw.index, "month", raw.month, "value is empty")
    if not _MONTH_RE.match(month):
        raise ValidationError(raw.index, "month", raw.month, "expected YYYY-MM with month 01-12")
    return month


def _parse_product(raw: RawRow) -> str:
    product = (raw.product or "").strip()
    if not product:
        raise ValidationError(raw.index, "product", raw.product, "value is empty")
    return product


def _parse_amount(raw: RawRow) -> Decimal:
    text = (raw.sales_amount or "").strip()
    if not text:
        raise ValidationError(raw.index, "sales_amount", raw.sales_amount, "value is empty")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(raw.index, "sales_amount", raw.sales_amount, "not a number") from None
    if not amount.is_finite():
        raise ValidationError(raw.index, "sales_amount", raw.sales_amount, "not a finite number")
    if amount < 0:
        raise ValidationError(raw.index, "sales_amount", raw.sales_amount, "amount is negative")
    # Keeps cent-precision sums of many rows inside the 28-digit decimal context
    if amount >= MAX_AMOUNT:
        raise ValidationError(raw.index, "sales_amount", raw.sales_amount, "amount too large")
    return amount


def validate_row(raw: RawRow) -> SalesRecord:
    """Convert one raw row into a SalesRecord or raise ValidationError."""
    return SalesRecord(
        month=_parse_month(raw),
        product=_parse_product(raw),
        amount=_parse_amount(raw),
    )


def validate_rows(rows: Iterable[RawRow], strict: bool = True) -> ValidationResult:
    """
    Validate a batch of rows, keeping input order.

    strict=True re-raises the first ValidationError; otherwise bad rows are
    skipped and returned in ValidationResult.skipped for the end-of-run summary.
    """
    records: List[SalesRecord] = []
    skipped: List[ValidationError] = []

    for raw in rows:
        try:
            records.append(validate_row(raw))
        except ValidationError as err:
            if strict:
                raise
            logger.warning("Skipping %s", err)
            skipped.append(err)

    return ValidationResult(records=records, skipped=skipped)

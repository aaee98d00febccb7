from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from .aggregator import AggregateTable

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ChartSeries:
    """
    What a renderer needs to draw one chart.

    For an empty table, empty is True and minimum/maximum are None; renderers
    are expected to draw a placeholder instead of computing an axis range.
    """
    labels: Tuple[str, ...]
    values: Tuple[Decimal, ...]
    minimum: Optional[Decimal]
    maximum: Optional[Decimal]
    empty: bool

    def axis_bounds(self) -> Tuple[Decimal, Decimal]:
        """Value-axis range that always includes zero and never collapses."""
        if self.empty:
            raise ValueError("Empty series has no axis range")
        lower = min(Decimal(0), self.minimum)
        upper = self.maximum
        if upper <= lower:
            upper = lower + 1
        return lower, upper

    def as_floats(self) -> Tuple[float, ...]:
        return tuple(float(v) for v in self.values)


def to_series(table: AggregateTable) -> ChartSeries:
    """Reshape an aggregate table into labels, values and value range."""
    if len(table) == 0:
        return ChartSeries(labels=(), values=(), minimum=None, maximum=None, empty=True)

    values = tuple(table.totals)
    return ChartSeries(
        labels=tuple(table.keys),
        values=values,
        minimum=min(values),
        maximum=max(values),
        empty=False,
    )


def round_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Two decimals, half-up rounding, thousands separators: 1234.5 -> '1,234.50'."""
    return f"{round_cents(value):,.2f}"

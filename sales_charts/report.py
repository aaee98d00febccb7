from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .aggregator import AggregateTable, AggregateTables, ProductOrder
from .chart_data import format_amount, round_cents
from .validator import ValidationError, ValidationResult


@dataclass(frozen=True)
class RunSummary:
    """Everything a run produced that is worth showing to the user."""
    rows_in: int
    rows_out: int
    skipped: List[ValidationError]
    monthly: AggregateTable
    products: AggregateTable
    product_order: ProductOrder

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def build_summary(result: ValidationResult,
                  tables: AggregateTables,
                  product_order: ProductOrder = ProductOrder.FIRST_SEEN) -> RunSummary:
    return RunSummary(
        rows_in=result.rows_in,
        rows_out=result.rows_out,
        skipped=list(result.skipped),
        monthly=tables.monthly,
        products=tables.products,
        product_order=ProductOrder(product_order),
    )


def _table_lines(title: str, table: AggregateTable) -> List[str]:
    lines = [f"{title}:"]
    if len(table) == 0:
        lines.append("- no data")
        return lines
    width = max(len(k) for k in table.keys)
    for entry in table:
        lines.append(f"- {entry.key.ljust(width)}  {format_amount(entry.total):>14}")
    return lines


def format_summary(summary: RunSummary) -> str:
    """
    Human-readable CLI report.

    Skipped rows are listed last, with at most 2 examples, so they are the
    final thing the user sees.
    """
    lines: List[str] = []
    lines.append("Sales Summary")
    lines.append("-------------")
    lines.append(f"Rows read: {summary.rows_in}")
    lines.append(f"Rows aggregated: {summary.rows_out}")
    lines.append("")
    lines.extend(_table_lines("Totals by month", summary.monthly))
    lines.append("")
    lines.extend(_table_lines(f"Totals by product ({summary.product_order.value})", summary.products))
    lines.append("")
    lines.append(f"Grand total: {format_amount(summary.monthly.grand_total)}")

    if summary.skipped:
        lines.append("")
        lines.append(f"Skipped rows: {summary.skipped_count}")
        for err in summary.skipped[:2]:
            lines.append(f"    example: {err}")
    return "\n".join(lines)


def _table_json(table: AggregateTable) -> List[Dict[str, str]]:
    # Strings keep the decimal totals exact in JSON
    return [{"key": e.key, "total": str(round_cents(e.total))} for e in table]


def to_json_dict(summary: RunSummary) -> Dict[str, Any]:
    """Machine-readable report for automation and regression tests."""
    return {
        "counts": {
            "rows_in": summary.rows_in,
            "rows_out": summary.rows_out,
            "skipped": summary.skipped_count,
        },
        "skipped": [err.as_dict() for err in summary.skipped],
        "monthly": _table_json(summary.monthly),
        "products": _table_json(summary.products),
        "product_order": summary.product_order.value,
        "grand_total": str(round_cents(summary.monthly.grand_total)),
    }

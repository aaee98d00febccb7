from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Tuple

from .validator import SalesRecord


class ProductOrder(str, Enum):
    """Display order for the per-product table."""
    FIRST_SEEN = "first_seen"
    ALPHABETICAL = "alphabetical"
    SALES = "sales"


@dataclass(frozen=True)
class AggregateEntry:
    key: str
    total: Decimal


@dataclass(frozen=True)
class AggregateTable:
    """Ordered, immutable (key, total) pairs; one entry per distinct key."""
    entries: Tuple[AggregateEntry, ...] = ()

    def __iter__(self) -> Iterator[AggregateEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def keys(self) -> List[str]:
        return [e.key for e in self.entries]

    @property
    def totals(self) -> List[Decimal]:
        return [e.total for e in self.entries]

    @property
    def grand_total(self) -> Decimal:
        return sum(self.totals, Decimal(0))

    def as_pairs(self) -> List[Tuple[str, Decimal]]:
        return [(e.key, e.total) for e in self.entries]


@dataclass(frozen=True)
class AggregateTables:
    monthly: AggregateTable
    products: AggregateTable


def _table(sums: Dict[str, Decimal], keys: Iterable[str]) -> AggregateTable:
    return AggregateTable(tuple(AggregateEntry(k, sums[k]) for k in keys))


def aggregate(records: Iterable[SalesRecord]) -> AggregateTables:
    """
    Sum sales amounts by month and by product in a single pass.

    Monthly totals come back sorted by the YYYY-MM label (chronological);
    product totals keep the order in which each product first appears.
    Empty input gives two empty tables.
    """
    by_month: Dict[str, Decimal] = {}
    by_product: Dict[str, Decimal] = {}

    for rec in records:
        by_month[rec.month] = by_month.get(rec.month, Decimal(0)) + rec.amount
        # dicts keep insertion order, which is the first-seen order
        by_product[rec.product] = by_product.get(rec.product, Decimal(0)) + rec.amount

    return AggregateTables(
        monthly=_table(by_month, sorted(by_month)),
        products=_table(by_product, by_product),
    )


def order_products(table: AggregateTable, order: ProductOrder | str = ProductOrder.FIRST_SEEN) -> AggregateTable:
    """
    Reorder a product table for display.

    "sales" puts the largest totals first (ties stay in first-seen order);
    "alphabetical" sorts by product name.
    """
    order = ProductOrder(order)
    if order == ProductOrder.FIRST_SEEN:
        return table
    if order == ProductOrder.ALPHABETICAL:
        return AggregateTable(tuple(sorted(table.entries, key=lambda e: e.key)))
    return AggregateTable(tuple(sorted(table.entries, key=lambda e: e.total, reverse=True)))

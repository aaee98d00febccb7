from __future__ import annotations

import random
from decimal import Decimal
from typing import List

import pytest

from sales_charts.aggregator import (
    AggregateEntry,
    AggregateTable,
    ProductOrder,
    aggregate,
    order_products,
)
from sales_charts.validator import SalesRecord


def _records(rows) -> List[SalesRecord]:
    return [SalesRecord(month=m, product=p, amount=Decimal(a)) for m, p, a in rows]


def _d(pairs):
    return [(k, Decimal(v)) for k, v in pairs]


@pytest.fixture
def example_records():
    return _records([
        ("2023-01", "Product A", "100.50"),
        ("2023-01", "Product B", "200.75"),
        ("2023-02", "Product A", "150.25"),
    ])


@pytest.fixture
def random_records():
    rng = random.Random(7)
    months = [f"202{y}-{m:02d}" for y in range(2, 5) for m in range(1, 13)]
    products = [f"SKU-{i}" for i in range(12)]
    return [
        SalesRecord(
            month=rng.choice(months),
            product=rng.choice(products),
            amount=Decimal(rng.randint(0, 100_000)) / 100,
        )
        for _ in range(500)
    ]


def test_end_to_end_example(example_records):
    tables = aggregate(example_records)

    assert tables.monthly.as_pairs() == _d([("2023-01", "301.25"), ("2023-02", "150.25")])
    assert tables.products.as_pairs() == _d([("Product A", "250.75"), ("Product B", "200.75")])


def test_duplicate_pairs_accumulate():
    tables = aggregate(_records([
        ("2023-01", "Product A", "50.00"),
        ("2023-01", "Product A", "25.00"),
    ]))

    assert tables.monthly.as_pairs() == _d([("2023-01", "75.00")])
    assert tables.products.as_pairs() == _d([("Product A", "75.00")])


def test_empty_input_gives_empty_tables():
    tables = aggregate([])
    assert len(tables.monthly) == 0
    assert len(tables.products) == 0
    assert tables.monthly.grand_total == Decimal(0)


def test_single_record_is_its_own_total():
    tables = aggregate(_records([("2024-05", "Widget", "9.99")]))
    assert tables.monthly.entries == (AggregateEntry("2024-05", Decimal("9.99")),)
    assert tables.products.entries == (AggregateEntry("Widget", Decimal("9.99")),)


def test_months_sorted_products_first_seen():
    tables = aggregate(_records([
        ("2023-03", "Zeta", "1"),
        ("2022-12", "Alpha", "1"),
        ("2023-01", "Zeta", "1"),
        ("2023-01", "Mid", "1"),
    ]))

    assert tables.monthly.keys == ["2022-12", "2023-01", "2023-03"]
    assert tables.products.keys == ["Zeta", "Alpha", "Mid"]


def test_accepts_a_generator(example_records):
    tables = aggregate(r for r in example_records)
    assert len(tables.monthly) == 2 and len(tables.products) == 2


def test_decimal_sums_have_no_float_drift():
    tables = aggregate(_records([("2023-01", "A", "0.10")] * 3))
    # 0.1 + 0.1 + 0.1 != 0.3 in binary floating point
    assert tables.monthly.totals == [Decimal("0.30")]


# -----------------------------
# Properties
# -----------------------------

def test_idempotent(random_records):
    assert aggregate(random_records) == aggregate(random_records)


def test_sums_are_order_independent(random_records):
    shuffled = list(random_records)
    random.Random(3).shuffle(shuffled)

    a = aggregate(random_records)
    b = aggregate(shuffled)

    assert a.monthly == b.monthly
    assert dict(a.products.as_pairs()) == dict(b.products.as_pairs())


def test_sum_correctness_per_key_and_overall(random_records):
    tables = aggregate(random_records)
    total = sum((r.amount for r in random_records), Decimal(0))

    for entry in tables.monthly:
        assert entry.total == sum((r.amount for r in random_records if r.month == entry.key), Decimal(0))
    for entry in tables.products:
        assert entry.total == sum((r.amount for r in random_records if r.product == entry.key), Decimal(0))

    assert tables.monthly.grand_total == total
    assert tables.products.grand_total == total
    assert len(set(tables.products.keys)) == len(tables.products)


# -----------------------------
# Display ordering
# -----------------------------

@pytest.fixture
def product_table():
    return AggregateTable((
        AggregateEntry("Pear", Decimal("10")),
        AggregateEntry("Apple", Decimal("30")),
        AggregateEntry("Fig", Decimal("10")),
    ))


def test_order_first_seen_is_identity(product_table):
    assert order_products(product_table) is product_table


def test_order_alphabetical(product_table):
    assert order_products(product_table, "alphabetical").keys == ["Apple", "Fig", "Pear"]


def test_order_by_sales_keeps_ties_stable(product_table):
    assert order_products(product_table, ProductOrder.SALES).keys == ["Apple", "Pear", "Fig"]


def test_order_rejects_unknown_value(product_table):
    with pytest.raises(ValueError):
        order_products(product_table, "random")

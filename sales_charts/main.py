from pathlib import Path
import argparse
import json
import logging
import sys

from sales_charts.loader import load_csv, iter_raw_rows
from sales_charts.validator import validate_rows
from sales_charts.aggregator import AggregateTables, aggregate, order_products, ProductOrder
from sales_charts.chart_data import to_series
from sales_charts.render import render_sales_chart, render_product_share
from sales_charts.report import build_summary, format_summary, to_json_dict
from sales_charts.stress import inject_faults

logger = logging.getLogger("sales_charts")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Aggregate monthly and per-product sales and chart them"
    )

    parser.add_argument(
        "--input",
        default="sales_data.csv",
        help="CSV file with a month,product,sales_amount header"
    )

    parser.add_argument(
        "--output",
        default="sales_chart.png",
        help="Image file for the monthly line chart and product bar chart"
    )

    parser.add_argument(
        "--mode",
        default="strict",
        choices=["strict", "lenient"],
        help="strict: abort on the first invalid row; lenient: skip invalid rows and report them"
    )

    parser.add_argument(
        "--product-order",
        default=ProductOrder.FIRST_SEEN.value,
        choices=[o.value for o in ProductOrder],
        help="Order of products on the bar chart"
    )

    parser.add_argument(
        "--pie",
        default="",
        help="Also write a product share pie chart to this path"
    )

    parser.add_argument(
        "--json",
        default="",
        help="Write JSON report to this path (e.g. out/report.json)."
    )

    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Chart width in pixels"
    )

    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Chart height in pixels"
    )

    parser.add_argument(
        "--stress-test",
        action="store_true",
        help="Inject controlled data issues to test validation logic"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress and skipped rows"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        raw = load_csv(Path(args.input))
        if args.stress_test:
            raw = inject_faults(raw)
        result = validate_rows(iter_raw_rows(raw), strict=args.mode == "strict")
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    product_order = ProductOrder(args.product_order)
    tables = aggregate(result.records)
    products = order_products(tables.products, product_order)
    summary = build_summary(result, AggregateTables(monthly=tables.monthly, products=products),
                            product_order=product_order)

    render_sales_chart(
        to_series(tables.monthly),
        to_series(products),
        Path(args.output),
        size=(args.width, args.height),
    )
    if args.pie:
        render_product_share(to_series(products), Path(args.pie))

    print(format_summary(summary))
    if args.json:
        out_path = Path(args.json)
        out_path.parent.mkdir(parents=True, exist_ok=True)

        with out_path.open("w", encoding="utf-8") as f:
            json.dump(to_json_dict(summary), f, indent=2, ensure_ascii=False)
        logger.info("JSON report written to %s", out_path)

    if summary.skipped:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

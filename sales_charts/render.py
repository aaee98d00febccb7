from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from .chart_data import ChartSeries, format_amount

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (1024, 768)
DPI = 100


def _no_data(ax, title: str) -> None:
    ax.set_title(title, fontsize=14)
    ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14,
            color="grey", transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def draw_line_chart(ax, series: ChartSeries, title: str = "Monthly Sales Trend") -> None:
    """Monthly totals as a line over the month labels, in series order."""
    if series.empty:
        _no_data(ax, title)
        return

    x = np.arange(len(series.labels))
    ax.plot(x, series.as_floats(), marker="o", color="red", linewidth=2, label="Total Sales")
    ax.set_xticks(x)
    ax.set_xticklabels(series.labels, rotation=45, ha="right")

    lower, upper = series.axis_bounds()
    ax.set_ylim(float(lower), float(upper) * 1.05)
    ax.set_title(title, fontsize=14)
    ax.set_xlabel("Month")
    ax.set_ylabel("Total Sales")
    ax.grid(True, linestyle="--", alpha=0.6)
    ax.legend(loc="upper left")


def draw_bar_chart(ax, series: ChartSeries, title: str = "Sales by Product") -> None:
    """One bar per product, annotated with its total."""
    if series.empty:
        _no_data(ax, title)
        return

    x = np.arange(len(series.labels))
    colors = plt.cm.tab20(np.arange(len(series.labels)) % 20)
    bars = ax.bar(x, series.as_floats(), color=colors, alpha=0.9)
    for bar, value in zip(bars, series.values):
        ax.annotate(format_amount(value),
                    (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    ha="center", va="bottom", fontsize=9)
    ax.set_xticks(x)
    ax.set_xticklabels(series.labels, rotation=45, ha="right")

    lower, upper = series.axis_bounds()
    ax.set_ylim(float(lower), float(upper) * 1.1)
    ax.set_title(title, fontsize=14)
    ax.set_xlabel("Product")
    ax.set_ylabel("Total Sales")


def render_sales_chart(monthly: ChartSeries,
                       products: ChartSeries,
                       output_path: Path,
                       size: Tuple[int, int] = DEFAULT_SIZE) -> Path:
    """Write the monthly line chart (top) and product bar chart (bottom) to one image."""
    width, height = size
    fig, (upper, lower) = plt.subplots(2, 1, figsize=(width / DPI, height / DPI), dpi=DPI)
    try:
        draw_line_chart(upper, monthly)
        draw_bar_chart(lower, products)
        fig.tight_layout()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=DPI)
    finally:
        plt.close(fig)

    logger.info("Chart saved as %s", output_path)
    return output_path


def render_product_share(products: ChartSeries,
                         output_path: Path,
                         size: Tuple[int, int] = (800, 600)) -> Optional[Path]:
    """
    Pie chart of each product's share of total sales.

    Products with a zero total have no slice. Returns None (and writes
    nothing) when there is nothing to draw.
    """
    slices = [(label, value) for label, value in zip(products.labels, products.values) if value > 0]
    if not slices:
        logger.info("No product sales to draw; skipping %s", output_path)
        return None

    total = sum(v for _, v in slices)
    labels = [f"{label}: {format_amount(value)}" for label, value in slices]
    width, height = size

    fig, ax = plt.subplots(figsize=(width / DPI, height / DPI), dpi=DPI)
    try:
        ax.pie([float(v) for _, v in slices],
               labels=labels,
               autopct=lambda pct: f"{pct:.1f}%",
               startangle=90,
               counterclock=False)
        ax.set_title(f"Sales by Product (total {format_amount(total)})", fontsize=14)
        ax.axis("equal")
        fig.tight_layout()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=DPI)
    finally:
        plt.close(fig)

    logger.info("Pie chart saved as %s", output_path)
    return output_path

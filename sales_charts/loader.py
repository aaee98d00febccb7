from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["month", "product", "sales_amount"]


class SchemaError(ValueError):
    """Header of the input file does not match the expected sales columns."""

    def __init__(self, missing: Sequence[str], unexpected: Sequence[str] = ()) -> None:
        self.missing = list(missing)
        self.unexpected = list(unexpected)
        parts = []
        if self.missing:
            parts.append(f"missing required columns: {', '.join(self.missing)}")
        if self.unexpected:
            parts.append(f"unexpected columns: {', '.join(self.unexpected)}")
        super().__init__("Invalid CSV header; " + "; ".join(parts))


@dataclass(frozen=True)
class RawRow:
    """One data row exactly as read from the file, before validation."""
    index: int
    month: str
    product: str
    sales_amount: str


def check_header(columns: Sequence[str]) -> List[str]:
    """
    Normalize header names and make sure they are exactly the sales columns.

    Names are compared case-insensitively after trimming; order is free.
    Returns the normalized names in file order.
    """
    normalized = [str(c).strip().lower() for c in columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in normalized]
    unexpected = [c for c in normalized if c not in REQUIRED_COLUMNS]
    # e.g. "Month" and "month" in the same header
    duplicated = sorted({c for c in normalized if normalized.count(c) > 1 and c in REQUIRED_COLUMNS})
    unexpected.extend(f"{c} (duplicate)" for c in duplicated)

    if missing or unexpected:
        raise SchemaError(missing, unexpected)
    return normalized


def load_csv(path: Path) -> pd.DataFrame:
    """
    Read a sales CSV into a frame of strings with normalized column names.

    Every cell stays a string (empty cells become ""), so that typing and
    range checks happen in one place: the validator. A data row with more
    fields than the header is a fatal ValueError.
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing file: {path}")

    try:
        columns = check_header(pd.read_csv(path, nrows=0, dtype=str).columns)
        # header=None: pandas would otherwise turn an over-long first row
        # into an implicit index and shift every column left
        df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False,
                         skip_blank_lines=True, on_bad_lines="error")
    except pd.errors.EmptyDataError:
        raise SchemaError(REQUIRED_COLUMNS) from None
    except pd.errors.ParserError as exc:
        raise ValueError(f"Malformed CSV {path}: {exc}") from exc

    if df.shape[1] != len(columns):
        raise ValueError(f"Malformed CSV {path}: expected {len(columns)} fields per row, saw {df.shape[1]}")

    df = df.iloc[1:].reset_index(drop=True)
    df.columns = columns
    # Short rows come back as NaN even with keep_default_na=False
    df = df.fillna("")

    logger.info("Loaded %d data rows from %s", df.shape[0], path)
    return df[REQUIRED_COLUMNS]


def iter_raw_rows(df: pd.DataFrame) -> Iterator[RawRow]:
    """Yield RawRow objects in file order, numbered from 0."""
    for i, (month, product, amount) in enumerate(df[REQUIRED_COLUMNS].itertuples(index=False, name=None)):
        yield RawRow(index=i, month=month, product=product, sales_amount=amount)

from __future__ import annotations

import random

import pandas as pd


def inject_faults(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Inject controlled data issues into raw sales rows to exercise validation.

    This is intentionally deterministic (fixed seed) so test results are repeatable.
    The input frame is not modified.
    """
    df = raw.copy().reset_index(drop=True)
    n = len(df)
    if n == 0:
        return df

    rng = random.Random(42)

    def sample_idx(pct: float) -> list[int]:
        """Return a reproducible random sample of row indices (at least one)."""
        return rng.sample(range(n), max(1, int(n * pct)))

    # Month without leading zero
    for i in sample_idx(0.01):
        df.at[i, "month"] = "2023-1"

    # Blank product
    for i in sample_idx(0.01):
        df.at[i, "product"] = "   "

    # Negative amounts
    for i in sample_idx(0.005):
        df.at[i, "sales_amount"] = "-5.00"

    # Non-numeric amounts
    for i in sample_idx(0.005):
        df.at[i, "sales_amount"] = "n/a"

    return df

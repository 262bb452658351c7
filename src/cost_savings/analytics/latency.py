"""Average time from case creation to intervention."""

from __future__ import annotations

import polars as pl


def average_intervention_latency(df: pl.DataFrame) -> float:
    """Mean of the floored day counts over cases with both timestamps, else 0."""
    mean = df["latency_days"].drop_nulls().mean()
    if mean is None:
        return 0.0
    return float(mean)

"""Monthly time-series aggregation.

Both series bucket cases by the calendar month of ``created_at`` and share the
same keying; they differ only in the fields accumulated:

- savings evolution: projected savings and case count per month
- cost comparison: initial vs current projected cost per month

Buckets are formed in first-occurrence order, then re-sorted ascending by
``YYYY-MM`` because input cases are not guaranteed to be chronological.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel
import polars as pl

logger = logging.getLogger(__name__)


class MonthlyPoint(BaseModel):
    month: str
    savings_sum: float
    case_count: int


class CostComparisonPoint(BaseModel):
    month: str
    initial_cost_sum: float
    current_cost_sum: float


def _monthly_buckets(df: pl.DataFrame) -> pl.DataFrame:
    undated = df["month"].null_count()
    if undated:
        logger.debug("Skipping %d cases without created_at in monthly buckets", undated)

    return (
        df.filter(pl.col("month").is_not_null())
        .group_by("month", maintain_order=True)
        .agg(
            pl.col("projected_savings").sum().alias("savings_sum"),
            pl.len().alias("case_count"),
            pl.col("initial_projected_cost").sum().alias("initial_cost_sum"),
            pl.col("current_projected_cost").sum().alias("current_cost_sum"),
        )
        .sort("month", maintain_order=True)
    )


def build_savings_evolution(df: pl.DataFrame) -> list[MonthlyPoint]:
    """Projected savings and case count per month, ascending by month."""
    return [
        MonthlyPoint(
            month=row["month"],
            savings_sum=float(row["savings_sum"]),
            case_count=int(row["case_count"]),
        )
        for row in _monthly_buckets(df).iter_rows(named=True)
    ]


def build_cost_comparison(df: pl.DataFrame) -> list[CostComparisonPoint]:
    """Initial vs current projected cost per month, ascending by month."""
    return [
        CostComparisonPoint(
            month=row["month"],
            initial_cost_sum=float(row["initial_cost_sum"]),
            current_cost_sum=float(row["current_cost_sum"]),
        )
        for row in _monthly_buckets(df).iter_rows(named=True)
    ]

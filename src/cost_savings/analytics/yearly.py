"""Year-over-year trend table.

Buckets cases by the calendar year of ``created_at`` and keeps the most
recent years. The best year is picked among the kept rows only, not over
the full history.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
import polars as pl

from cost_savings.analytics.kpis import compute_roi


class YearlyTrendRow(BaseModel):
    year: int
    cases: int
    total_savings: float
    total_intervention_cost: float
    avg_savings: float = Field(description="total_savings / cases")
    avg_percentage: float = Field(description="Mean savings_percentage of the year's cases")
    roi: float


class YearlyTrend(BaseModel):
    rows: list[YearlyTrendRow] = Field(default_factory=list)
    best_year: int | None = Field(
        default=None, description="Year with the highest total_savings among rows"
    )


def build_yearly_trend(df: pl.DataFrame, window: int = 5) -> YearlyTrend:
    """Build the yearly trend table.

    Args:
        df: Frame from :func:`cost_savings.extract.cases_to_frame`.
        window: Number of most recent years to keep.

    Returns:
        YearlyTrend with rows sorted descending by year and the best year
        within those rows (earliest row wins a tie, i.e. the most recent year).
    """
    dated = df.filter(pl.col("year").is_not_null())

    totals = dated.group_by("year", maintain_order=True).agg(
        pl.len().alias("cases"),
        pl.col("projected_savings").sum().alias("total_savings"),
        pl.col("intervention_cost").sum().alias("total_intervention_cost"),
    )
    # Mean of a different field, taken from its own pass over the year's cases
    percentages = dated.group_by("year").agg(
        pl.col("savings_percentage").mean().alias("avg_percentage")
    )
    pct_by_year = {row["year"]: row["avg_percentage"] for row in percentages.iter_rows(named=True)}

    rows: list[YearlyTrendRow] = []
    for row in totals.sort("year", descending=True).head(window).iter_rows(named=True):
        cases = int(row["cases"])
        total_savings = float(row["total_savings"])
        total_cost = float(row["total_intervention_cost"])
        rows.append(
            YearlyTrendRow(
                year=int(row["year"]),
                cases=cases,
                total_savings=total_savings,
                total_intervention_cost=total_cost,
                avg_savings=total_savings / cases if cases > 0 else 0.0,
                avg_percentage=float(pct_by_year.get(row["year"]) or 0.0),
                roi=compute_roi(total_savings, total_cost),
            )
        )

    best: YearlyTrendRow | None = None
    for row in rows:
        if best is None or row.total_savings > best.total_savings:
            best = row

    return YearlyTrend(rows=rows, best_year=best.year if best is not None else None)

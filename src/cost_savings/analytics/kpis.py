"""Headline KPI summary.

Reduces the normalized case set to four scalars:
  - total_cases, total_savings
  - avg_savings_percentage (mean over all cases)
  - roi against total intervention cost
"""

from __future__ import annotations

from pydantic import BaseModel, Field
import polars as pl


class KpiSummary(BaseModel):
    """Scalar KPIs shown on the dashboard cards."""

    total_cases: int = 0
    total_savings: float = 0.0
    avg_savings_percentage: float = Field(default=0.0, description="Percent units")
    total_intervention_cost: float = 0.0
    roi: float = Field(default=0.0, description="(savings - cost) / cost × 100")


def compute_roi(savings: float, cost: float) -> float:
    """ROI in percent. Zero when there is no cost to return on."""
    if cost > 0:
        return (savings - cost) / cost * 100
    return 0.0


def summarize_kpis(df: pl.DataFrame) -> KpiSummary:
    """Compute the KPI summary from the normalized case frame.

    Args:
        df: Frame from :func:`cost_savings.extract.cases_to_frame`.

    Returns:
        KpiSummary; all zeros for an empty frame.
    """
    total_cases = df.height
    if total_cases == 0:
        return KpiSummary()

    total_savings = float(df["projected_savings"].sum())
    avg_pct = float(df["savings_percentage"].sum()) / total_cases
    total_cost = float(df["intervention_cost"].sum())

    return KpiSummary(
        total_cases=total_cases,
        total_savings=total_savings,
        avg_savings_percentage=avg_pct,
        total_intervention_cost=total_cost,
        roi=compute_roi(total_savings, total_cost),
    )

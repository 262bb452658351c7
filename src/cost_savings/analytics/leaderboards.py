"""Leaderboard construction.

Ranked, size-bounded views over the normalized case set:

1. medication leaderboard: top N medications by attributed savings
2. doctor leaderboard: every evaluating doctor by savings
3. doctor ROI leaderboard: top N doctors by ROI on intervention cost
4. savings by specialty: every doctor specialty by savings

Buckets are created in first-occurrence order and every ranking is a stable
descending sort, so ties keep their first-seen relative order.

A case listing several medications contributes its *full* projected savings
to each of them. Leaderboard totals can therefore exceed the KPI total.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
import polars as pl

from cost_savings.analytics.kpis import compute_roi
from cost_savings.config import AnalyticsConfig


class LeaderboardEntry(BaseModel):
    """A single ranked bucket."""

    key: str
    cases: int
    savings: float
    specialty: str | None = None


class DoctorRoiEntry(LeaderboardEntry):
    """Doctor leaderboard entry extended with return on intervention cost."""

    intervention_cost: float = 0.0
    avg_savings: float = Field(default=0.0, description="savings / cases")
    roi: float = Field(default=0.0, description="(savings - cost) / cost × 100")


class SpecialtySavings(BaseModel):
    specialty: str
    cases: int
    savings: float


def build_medication_leaderboard(
    medications_df: pl.DataFrame,
    top_n: int = 10,
) -> list[LeaderboardEntry]:
    """Rank medications by cumulative attributed savings.

    Args:
        medications_df: Frame from :func:`cost_savings.extract.medications_to_frame`.
        top_n: Number of entries to keep.
    """
    ranked = (
        medications_df.group_by("medication", maintain_order=True)
        .agg(
            pl.len().alias("cases"),
            pl.col("projected_savings").sum().alias("savings"),
        )
        .sort("savings", descending=True, maintain_order=True)
        .head(top_n)
    )
    return [
        LeaderboardEntry(key=row["medication"], cases=int(row["cases"]), savings=float(row["savings"]))
        for row in ranked.iter_rows(named=True)
    ]


def build_doctor_leaderboard(
    df: pl.DataFrame,
    config: AnalyticsConfig | None = None,
) -> list[LeaderboardEntry]:
    """Rank every evaluating doctor by cumulative savings.

    Cases without a doctor land in the unassigned bucket. The specialty shown
    is the one on the doctor's first case.
    """
    config = config or AnalyticsConfig()
    ranked = (
        df.group_by("doctor_key", maintain_order=True)
        .agg(
            pl.len().alias("cases"),
            pl.col("projected_savings").sum().alias("savings"),
            pl.col("doctor_specialty").first().alias("specialty"),
        )
        .sort("savings", descending=True, maintain_order=True)
    )
    return [
        LeaderboardEntry(
            key=row["doctor_key"],
            cases=int(row["cases"]),
            savings=float(row["savings"]),
            specialty=row["specialty"] or config.unknown_specialty_label,
        )
        for row in ranked.iter_rows(named=True)
    ]


def build_doctor_roi_leaderboard(
    df: pl.DataFrame,
    doctor_leaderboard: list[LeaderboardEntry],
    top_n: int = 10,
) -> list[DoctorRoiEntry]:
    """Rank doctors by ROI on the intervention cost of their cases.

    Intervention cost is matched on the doctor's display name with exact,
    case-sensitive equality. Cases without a doctor name never match, so the
    unassigned bucket normally reports zero cost and zero ROI.
    """
    cost_by_name: dict[str, float] = {
        row["doctor_name"]: float(row["intervention_cost"])
        for row in (
            df.filter(pl.col("doctor_name").is_not_null())
            .group_by("doctor_name")
            .agg(pl.col("intervention_cost").sum())
            .iter_rows(named=True)
        )
    }

    entries: list[DoctorRoiEntry] = []
    for doc in doctor_leaderboard:
        cost = cost_by_name.get(doc.key, 0.0)
        entries.append(
            DoctorRoiEntry(
                **doc.model_dump(),
                intervention_cost=cost,
                avg_savings=doc.savings / doc.cases if doc.cases > 0 else 0.0,
                roi=compute_roi(doc.savings, cost),
            )
        )

    # sorted() is stable with reverse=True
    entries = sorted(entries, key=lambda e: e.roi, reverse=True)
    return entries[:top_n]


def build_specialty_savings(
    df: pl.DataFrame,
    config: AnalyticsConfig | None = None,
) -> list[SpecialtySavings]:
    """Savings and case count per doctor specialty, descending by savings."""
    config = config or AnalyticsConfig()
    ranked = (
        df.with_columns(
            pl.when(pl.col("doctor_specialty").is_null() | (pl.col("doctor_specialty") == ""))
            .then(pl.lit(config.no_specialty_label))
            .otherwise(pl.col("doctor_specialty"))
            .alias("specialty")
        )
        .group_by("specialty", maintain_order=True)
        .agg(
            pl.len().alias("cases"),
            pl.col("projected_savings").sum().alias("savings"),
        )
        .sort("savings", descending=True, maintain_order=True)
    )
    return [
        SpecialtySavings(specialty=row["specialty"], cases=int(row["cases"]), savings=float(row["savings"]))
        for row in ranked.iter_rows(named=True)
    ]

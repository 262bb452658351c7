"""Report engine: the single entry point of the aggregation core.

Normalizes the case list once, then runs every aggregator over the same
immutable snapshot. The engine is stateless: nothing is cached between calls
and the input list is never mutated. Retrieval and filtering happen before
this point (see :mod:`cost_savings.filters`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from cost_savings.analytics.kpis import KpiSummary, summarize_kpis
from cost_savings.analytics.latency import average_intervention_latency
from cost_savings.analytics.leaderboards import (
    DoctorRoiEntry,
    LeaderboardEntry,
    SpecialtySavings,
    build_doctor_leaderboard,
    build_doctor_roi_leaderboard,
    build_medication_leaderboard,
    build_specialty_savings,
)
from cost_savings.analytics.status import StatusCount, build_status_distribution
from cost_savings.analytics.time_series import (
    CostComparisonPoint,
    MonthlyPoint,
    build_cost_comparison,
    build_savings_evolution,
)
from cost_savings.analytics.yearly import YearlyTrend, build_yearly_trend
from cost_savings.config import AnalyticsConfig
from cost_savings.extract import cases_to_frame, medications_to_frame, normalize_cases
from cost_savings.schema import CaseRecord

logger = logging.getLogger(__name__)


class CostSavingsReport(BaseModel):
    """Every derived view consumed by the dashboards and executive reports."""

    kpis: KpiSummary = Field(default_factory=KpiSummary)
    monthly_savings: list[MonthlyPoint] = Field(default_factory=list)
    cost_comparison: list[CostComparisonPoint] = Field(default_factory=list)
    status_distribution: list[StatusCount] = Field(default_factory=list)
    medication_leaderboard: list[LeaderboardEntry] = Field(default_factory=list)
    doctor_leaderboard: list[LeaderboardEntry] = Field(default_factory=list)
    doctor_roi_leaderboard: list[DoctorRoiEntry] = Field(default_factory=list)
    specialty_savings: list[SpecialtySavings] = Field(default_factory=list)
    yearly_trend: YearlyTrend = Field(default_factory=YearlyTrend)
    average_latency_days: float = 0.0


def build_report(
    cases: Iterable[CaseRecord | Mapping[str, Any]],
    config: AnalyticsConfig | None = None,
) -> CostSavingsReport:
    """Aggregate a case list into the full report bundle.

    Args:
        cases: Already-filtered case records, or plain mappings with the
            same fields.
        config: Leaderboard sizes, trend window and fallback labels.

    Returns:
        CostSavingsReport. An empty case list yields all-zero KPIs and empty
        series, leaderboards and trend table.
    """
    config = config or AnalyticsConfig()
    normalized = normalize_cases(cases, config)
    df = cases_to_frame(normalized)
    medications = medications_to_frame(normalized)

    doctors = build_doctor_leaderboard(df, config)
    report = CostSavingsReport(
        kpis=summarize_kpis(df),
        monthly_savings=build_savings_evolution(df),
        cost_comparison=build_cost_comparison(df),
        status_distribution=build_status_distribution(df),
        medication_leaderboard=build_medication_leaderboard(medications, config.medication_top_n),
        doctor_leaderboard=doctors,
        doctor_roi_leaderboard=build_doctor_roi_leaderboard(df, doctors, config.doctor_roi_top_n),
        specialty_savings=build_specialty_savings(df, config),
        yearly_trend=build_yearly_trend(df, config.yearly_window),
        average_latency_days=average_intervention_latency(df),
    )

    logger.debug(
        "Report built: cases=%d, months=%d, medications=%d, doctors=%d, years=%d",
        report.kpis.total_cases,
        len(report.monthly_savings),
        medications["medication"].n_unique(),
        len(doctors),
        len(report.yearly_trend.rows),
    )
    return report

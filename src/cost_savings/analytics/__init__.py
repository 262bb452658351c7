"""Aggregators over the normalized case snapshot."""

from cost_savings.analytics.kpis import KpiSummary, summarize_kpis
from cost_savings.analytics.latency import average_intervention_latency
from cost_savings.analytics.leaderboards import (
    build_doctor_leaderboard,
    build_doctor_roi_leaderboard,
    build_medication_leaderboard,
    build_specialty_savings,
)
from cost_savings.analytics.status import build_status_distribution
from cost_savings.analytics.time_series import build_cost_comparison, build_savings_evolution
from cost_savings.analytics.yearly import build_yearly_trend

__all__ = [
    "KpiSummary",
    "average_intervention_latency",
    "build_cost_comparison",
    "build_doctor_leaderboard",
    "build_doctor_roi_leaderboard",
    "build_medication_leaderboard",
    "build_savings_evolution",
    "build_specialty_savings",
    "build_status_distribution",
    "build_yearly_trend",
    "summarize_kpis",
]

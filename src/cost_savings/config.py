"""Configuration models for the cost-savings analytics engine.

Report shaping (leaderboard sizes, trend window, fallback labels) and the
synthetic data generator are controlled via the Pydantic models defined here.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Knobs for the aggregation engine. Defaults reproduce the dashboard views."""

    medication_top_n: int = Field(
        default=10, ge=1, description="Entries kept in the medication leaderboard"
    )
    doctor_roi_top_n: int = Field(
        default=10, ge=1, description="Entries kept in the doctor ROI leaderboard"
    )
    yearly_window: int = Field(
        default=5, ge=1, description="Most recent years kept in the yearly trend table"
    )
    unnamed_medication_label: str = Field(
        default="unnamed", description="Key for medication entries without a name"
    )
    unassigned_doctor_label: str = Field(
        default="Unassigned", description="Key for cases without an evaluating doctor"
    )
    unknown_specialty_label: str = Field(
        default="N/A", description="Doctor leaderboard specialty when none is recorded"
    )
    no_specialty_label: str = Field(
        default="No specialty", description="Bucket for savings-by-specialty without a specialty"
    )


class PipelineConfig(BaseModel):
    """Top-level configuration: synthetic data generation plus engine settings."""

    seed: int = Field(default=42, description="Random seed for deterministic generation")
    num_cases: int = Field(default=500, ge=0, description="Number of synthetic cases")
    num_doctors: int = Field(default=12, ge=1, description="Size of the evaluating doctor pool")
    date_start: date = Field(default=date(2020, 1, 1), description="Earliest creation date")
    date_end: date = Field(default=date(2025, 12, 31), description="Latest creation date")
    unassigned_rate: float = Field(
        default=0.08, ge=0.0, le=1.0, description="Fraction of cases with no evaluating doctor"
    )
    output_dir: Path = Field(default=Path("output"), description="Root output directory")

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)

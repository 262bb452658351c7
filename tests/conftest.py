"""Shared test fixtures for cost-savings analytics tests."""

from __future__ import annotations

import polars as pl
import pytest

from cost_savings.config import PipelineConfig
from cost_savings.extract import cases_to_frame, normalize_cases


@pytest.fixture
def config() -> PipelineConfig:
    """Default test configuration with small dataset."""
    return PipelineConfig(seed=42, num_cases=300)


@pytest.fixture
def synthetic_cases(config: PipelineConfig) -> list[dict]:
    """Generate a small synthetic case list for testing."""
    from cost_savings.generate_data import generate_cases

    return generate_cases(config)


@pytest.fixture
def minimal_cases() -> list[dict]:
    """A minimal hand-crafted case list for precise testing.

    - Two doctors plus one unassigned case
    - Medication lists as an array, as a keyed object, absent and malformed
    - Creation dates across 2023 and 2024, deliberately out of order
    """
    ana = {"full_name": "Dr. Ana Ruiz", "specialty": "Oncology"}
    luis = {"full_name": "Dr. Luis Pena", "specialty": "Rheumatology"}
    return [
        {
            "id": "C001",
            "diagnosis": "Breast cancer",
            "status": "completed",
            "initial_projected_cost": 12000.0,
            "current_projected_cost": 9000.0,
            "intervention_cost": 500.0,
            "projected_savings": 3000.0,
            "savings_percentage": 25.0,
            "created_at": "2024-02-10T09:00:00",
            "intervention_date": "2024-02-20T15:00:00",
            "initial_medication": [{"name": "Trastuzumab"}, {"name": "Pembrolizumab"}],
            "evaluating_doctor_id": "DOC-1",
            "evaluating_doctor": ana,
        },
        {
            "id": "C002",
            "diagnosis": "Rheumatoid arthritis",
            "status": "in_evaluation",
            "initial_projected_cost": 6000.0,
            "current_projected_cost": None,
            "intervention_cost": None,
            "projected_savings": None,
            "savings_percentage": None,
            "created_at": "2024-01-05T10:00:00",
            "intervention_date": None,
            "initial_medication": {"a": {"medication": "Adalimumab"}, "b": {"dose": "40 mg"}},
            "evaluating_doctor_id": "DOC-2",
            "evaluating_doctor": luis,
        },
        {
            "id": "C003",
            "diagnosis": "Crohn's disease",
            "status": "intervened",
            "initial_projected_cost": 8000.0,
            "current_projected_cost": 7000.0,
            "intervention_cost": 200.0,
            "projected_savings": 1000.0,
            "savings_percentage": 12.5,
            "created_at": "2023-11-20T08:00:00",
            "intervention_date": "2023-11-23T07:00:00",
            "initial_medication": "Infliximab 5mg/kg",
            "evaluating_doctor_id": "DOC-2",
            "evaluating_doctor": luis,
        },
        {
            "id": "C004",
            "diagnosis": "Osteoporosis",
            "status": "completed",
            "initial_projected_cost": 3000.0,
            "current_projected_cost": 1000.0,
            "intervention_cost": 0.0,
            "projected_savings": 2000.0,
            "savings_percentage": 66.0,
            "created_at": "2024-01-25T12:00:00",
            "intervention_date": "2024-01-28T12:00:00",
            "initial_medication": None,
            "evaluating_doctor_id": None,
            "evaluating_doctor": None,
        },
    ]


@pytest.fixture
def minimal_df(minimal_cases: list[dict]) -> pl.DataFrame:
    """Normalized snapshot frame of ``minimal_cases``."""
    return cases_to_frame(normalize_cases(minimal_cases))

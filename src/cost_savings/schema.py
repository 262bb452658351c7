"""Schema definitions for cost-savings case data.

Provides:
- Pydantic models for individual case records as delivered by the retrieval layer.
- Constants for enum-like field values.
- The field groups the metric extractor coalesces to zero.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Enum-like constants
# ---------------------------------------------------------------------------
CASE_STATUSES = ["in_evaluation", "intervened", "completed", "no_optimization"]

# Monetary fields, all in the practice's local currency
MONEY_FIELDS: list[str] = [
    "initial_monthly_cost",
    "current_monthly_cost",
    "initial_projected_cost",
    "current_projected_cost",
    "intervention_cost",
    "monthly_savings",
    "projected_savings",
]

# Percent units (0-100), not fractions
PERCENT_FIELDS: list[str] = ["savings_percentage"]


# ---------------------------------------------------------------------------
# Pydantic record models
# ---------------------------------------------------------------------------
class DoctorRef(BaseModel):
    """The evaluating doctor as embedded in a case row."""

    model_config = ConfigDict(frozen=True)

    full_name: str | None = None
    specialty: str | None = None


class CaseRecord(BaseModel):
    """A single cost-savings case. Read-only input to the engine.

    ``initial_medication`` is kept untyped: rows carry either a list of
    entries or a mapping of entries, and older rows carry neither.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | int | None = None
    diagnosis: str | None = None
    status: str | None = None
    initial_monthly_cost: float | None = None
    current_monthly_cost: float | None = None
    initial_projected_cost: float | None = None
    current_projected_cost: float | None = None
    intervention_cost: float | None = None
    monthly_savings: float | None = None
    projected_savings: float | None = None
    savings_percentage: float | None = None
    created_at: datetime | None = None
    intervention_date: datetime | None = None
    initial_medication: Any = None
    evaluating_doctor_id: str | None = None
    evaluating_doctor: DoctorRef | None = None

"""Metric extraction module.

Normalizes raw case records into typed, null-safe views that every
aggregator reads. Runs once per report; aggregators never see raw rows.

- Optional monetary and percentage fields are coalesced to 0.0; NaN counts
  as missing.
- ``initial_medication`` is resolved to a flat list of entries whether it is
  stored as a list or as a keyed mapping. Other shapes yield no entries.
- Month/year buckets, doctor keys and intervention latency are derived here.

Nothing in this module raises on malformed shapes; degradation is silent
and deterministic.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
import polars as pl

from cost_savings.config import AnalyticsConfig
from cost_savings.schema import MONEY_FIELDS, PERCENT_FIELDS, CaseRecord

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400

# Column layout of the normalized snapshot. Fixed so that an empty case list
# still produces a frame every aggregator can group on.
CASE_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "month": pl.Utf8(),
    "year": pl.Int32(),
    "status": pl.Utf8(),
    "projected_savings": pl.Float64(),
    "initial_projected_cost": pl.Float64(),
    "current_projected_cost": pl.Float64(),
    "intervention_cost": pl.Float64(),
    "savings_percentage": pl.Float64(),
    "doctor_key": pl.Utf8(),
    "doctor_name": pl.Utf8(),
    "doctor_specialty": pl.Utf8(),
    "latency_days": pl.Int64(),
}

MEDICATION_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "medication": pl.Utf8(),
    "projected_savings": pl.Float64(),
}


class MedicationEntry(BaseModel):
    """One entry of a case's initial medication list."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    medication: str | None = None

    def display_key(self, unnamed: str = "unnamed") -> str:
        """First non-empty of ``name`` / ``medication``, else the unnamed label."""
        return self.name or self.medication or unnamed


class CaseMetrics(BaseModel):
    """Normalized, null-safe view of a single case."""

    model_config = ConfigDict(frozen=True)

    id: str | int | None = None
    status: str | None = None
    initial_monthly_cost: float = 0.0
    current_monthly_cost: float = 0.0
    initial_projected_cost: float = 0.0
    current_projected_cost: float = 0.0
    intervention_cost: float = 0.0
    monthly_savings: float = 0.0
    projected_savings: float = 0.0
    savings_percentage: float = 0.0
    created_at: datetime | None = None
    intervention_date: datetime | None = None
    month: str | None = None
    year: int | None = None
    medications: tuple[MedicationEntry, ...] = ()
    medication_keys: tuple[str, ...] = ()
    doctor_key: str = "Unassigned"
    doctor_name: str | None = None
    doctor_specialty: str | None = None
    latency_days: int | None = None


def _text_or_none(value: Any) -> str | None:
    # Falsy values ("", 0, None) do not count as a name
    if not value:
        return None
    return str(value)


def _to_entry(raw: Any) -> MedicationEntry:
    if not isinstance(raw, Mapping):
        return MedicationEntry()
    return MedicationEntry(
        name=_text_or_none(raw.get("name")),
        medication=_text_or_none(raw.get("medication")),
    )


def resolve_medications(raw: Any) -> list[MedicationEntry]:
    """Resolve ``initial_medication`` into an ordered list of entries.

    A list (or tuple) is taken as-is, a mapping contributes its values in
    iteration order, and every other shape contributes nothing.
    """
    if isinstance(raw, (list, tuple)):
        items = list(raw)
    elif isinstance(raw, Mapping):
        items = list(raw.values())
    else:
        if raw is not None:
            logger.debug("Ignoring initial_medication of type %s", type(raw).__name__)
        return []
    return [_to_entry(item) for item in items]


def _num(value: float | None) -> float:
    # NaN counts as missing, like None
    if value is None or math.isnan(value):
        return 0.0
    return float(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def intervention_latency_days(
    created_at: datetime | None,
    intervention_date: datetime | None,
) -> int | None:
    """Whole days from creation to intervention, floored. None if either is missing."""
    if created_at is None or intervention_date is None:
        return None
    if (created_at.tzinfo is None) != (intervention_date.tzinfo is None):
        created_at, intervention_date = _as_utc(created_at), _as_utc(intervention_date)
    seconds = (intervention_date - created_at).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY)


def normalize_case(
    record: CaseRecord | Mapping[str, Any],
    config: AnalyticsConfig | None = None,
) -> CaseMetrics:
    """Normalize one raw case into a :class:`CaseMetrics` view."""
    config = config or AnalyticsConfig()
    if not isinstance(record, CaseRecord):
        record = CaseRecord.model_validate(record)

    medications = resolve_medications(record.initial_medication)
    doctor = record.evaluating_doctor
    doctor_name = doctor.full_name if doctor is not None else None
    created_at = record.created_at

    return CaseMetrics(
        id=record.id,
        status=record.status,
        **{field: _num(getattr(record, field)) for field in MONEY_FIELDS + PERCENT_FIELDS},
        created_at=created_at,
        intervention_date=record.intervention_date,
        month=created_at.strftime("%Y-%m") if created_at is not None else None,
        year=created_at.year if created_at is not None else None,
        medications=tuple(medications),
        medication_keys=tuple(
            m.display_key(config.unnamed_medication_label) for m in medications
        ),
        doctor_key=doctor_name or config.unassigned_doctor_label,
        doctor_name=doctor_name,
        doctor_specialty=doctor.specialty if doctor is not None else None,
        latency_days=intervention_latency_days(created_at, record.intervention_date),
    )


def normalize_cases(
    records: Iterable[CaseRecord | Mapping[str, Any]],
    config: AnalyticsConfig | None = None,
) -> list[CaseMetrics]:
    """Normalize a case list, preserving input order."""
    config = config or AnalyticsConfig()
    cases = [normalize_case(r, config) for r in records]
    logger.debug("Normalized %d cases", len(cases))
    return cases


def cases_to_frame(cases: list[CaseMetrics]) -> pl.DataFrame:
    """One row per case, in input order, with the fixed snapshot schema."""
    return pl.DataFrame(
        {col: [getattr(c, col) for c in cases] for col in CASE_FRAME_SCHEMA},
        schema=CASE_FRAME_SCHEMA,
    )


def medications_to_frame(cases: list[CaseMetrics]) -> pl.DataFrame:
    """One row per (case, medication entry), in case then entry order.

    Each row carries the case's full ``projected_savings``.
    """
    names: list[str] = []
    savings: list[float] = []
    for case in cases:
        for key in case.medication_keys:
            names.append(key)
            savings.append(case.projected_savings)
    return pl.DataFrame(
        {"medication": names, "projected_savings": savings},
        schema=MEDICATION_FRAME_SCHEMA,
    )

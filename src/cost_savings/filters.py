"""Report filters.

The retrieval layer restricts the case list before it reaches the engine.
This module is the in-memory reference of that restriction, used by the CLI
when cases come from a file rather than from the hosted store.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from cost_savings.schema import CaseRecord


class CaseFilter(BaseModel):
    """Optional restrictions; an unset field means no restriction."""

    start_date: datetime | None = Field(default=None, description="created_at >= start_date")
    end_date: datetime | None = Field(default=None, description="created_at <= end_date")
    specialty: str | None = Field(default=None, description="Evaluating doctor specialty")
    doctor_id: str | None = Field(default=None, description="evaluating_doctor_id")
    status: str | None = Field(default=None, description="Case lifecycle status")

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, name) is not None for name in type(self).model_fields)


def _comparable(a: datetime, b: datetime) -> tuple[datetime, datetime]:
    if (a.tzinfo is None) == (b.tzinfo is None):
        return a, b
    return (
        a if a.tzinfo else a.replace(tzinfo=timezone.utc),
        b if b.tzinfo else b.replace(tzinfo=timezone.utc),
    )


def matches(case: CaseRecord, case_filter: CaseFilter) -> bool:
    """True if the case satisfies every set restriction."""
    if case_filter.start_date is not None:
        if case.created_at is None:
            return False
        created, start = _comparable(case.created_at, case_filter.start_date)
        if created < start:
            return False
    if case_filter.end_date is not None:
        if case.created_at is None:
            return False
        created, end = _comparable(case.created_at, case_filter.end_date)
        if created > end:
            return False
    if case_filter.status is not None and case.status != case_filter.status:
        return False
    if case_filter.doctor_id is not None and case.evaluating_doctor_id != case_filter.doctor_id:
        return False
    if case_filter.specialty is not None:
        doctor = case.evaluating_doctor
        if doctor is None or doctor.specialty != case_filter.specialty:
            return False
    return True


def apply_filter(cases: list[CaseRecord], case_filter: CaseFilter | None = None) -> list[CaseRecord]:
    """Return the cases that satisfy ``case_filter``, preserving order."""
    if case_filter is None or case_filter.is_empty:
        return list(cases)
    return [c for c in cases if matches(c, case_filter)]

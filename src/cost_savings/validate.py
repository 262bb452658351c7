"""Case data validation module.

Two-tier validation:
- Critical: rows that cannot be read as a case record → fail the run.
- Advisory: values the engine tolerates but that usually signal bad data → warn only.

The engine itself never rejects input; this gate runs before it in the CLI.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from cost_savings.extract import intervention_latency_days
from cost_savings.schema import CASE_STATUSES, MONEY_FIELDS, CaseRecord


class ValidationIssue(BaseModel):
    """A single validation issue found in the data."""

    level: str = Field(description="'critical' or 'advisory'")
    rule: str = Field(description="Name of the validation rule")
    message: str = Field(description="Human-readable description")
    affected_rows: int = Field(default=0, description="Number of rows affected")
    examples: list[str] = Field(default_factory=list, description="Example values")


class ValidationResult(BaseModel):
    """Result of case data validation."""

    passed: bool = Field(description="True if no critical issues found")
    total_rows: int = Field(description="Total rows validated")
    critical_issues: list[ValidationIssue] = Field(default_factory=list)
    advisory_issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def all_issues(self) -> list[ValidationIssue]:
        return self.critical_issues + self.advisory_issues


def _advisory(rule: str, message: str, affected: int, examples: list[str] | None = None) -> ValidationIssue:
    return ValidationIssue(
        level="advisory",
        rule=rule,
        message=message,
        affected_rows=affected,
        examples=(examples or [])[:5],
    )


def validate_cases(rows: list[Any]) -> ValidationResult:
    """Validate raw case rows against the record schema and business rules.

    Args:
        rows: Raw rows as read by :func:`cost_savings.ingest.read_raw_cases`.

    Returns:
        ValidationResult with pass/fail status and list of issues.
    """
    critical: list[ValidationIssue] = []
    advisory: list[ValidationIssue] = []
    total_rows = len(rows)

    # --- Critical: record schema ---
    records: list[CaseRecord] = []
    bad_rows: list[str] = []
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            bad_rows.append(f"#{i}: not an object")
            continue
        try:
            records.append(CaseRecord.model_validate(row))
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            bad_rows.append(f"#{i}: {', '.join(fields)}")
    if bad_rows:
        critical.append(
            ValidationIssue(
                level="critical",
                rule="record_schema",
                message=f"{len(bad_rows)} rows are not valid case records",
                affected_rows=len(bad_rows),
                examples=bad_rows[:5],
            )
        )

    # --- Advisory: unknown status ---
    unknown = Counter(r.status for r in records if r.status not in CASE_STATUSES)
    if unknown:
        advisory.append(
            _advisory(
                "unknown_status",
                f"{sum(unknown.values())} cases have a status outside {CASE_STATUSES}",
                sum(unknown.values()),
                [str(s) for s in unknown],
            )
        )

    # --- Advisory: missing creation timestamp ---
    undated = sum(1 for r in records if r.created_at is None)
    if undated:
        advisory.append(
            _advisory(
                "missing_created_at",
                f"{undated} cases have no created_at and are left out of monthly/yearly views",
                undated,
            )
        )

    # --- Advisory: negative costs (savings may legitimately be negative) ---
    for field in (f for f in MONEY_FIELDS if not f.endswith("_savings")):
        negatives = [r for r in records if (getattr(r, field) or 0.0) < 0]
        if negatives:
            advisory.append(
                _advisory(
                    "negative_amount",
                    f"Field '{field}' has {len(negatives)} negative values",
                    len(negatives),
                    [str(r.id) for r in negatives],
                )
            )

    # --- Advisory: percentage range ---
    out_of_range = [
        r for r in records
        if r.savings_percentage is not None and not 0 <= r.savings_percentage <= 100
    ]
    if out_of_range:
        advisory.append(
            _advisory(
                "percentage_range",
                f"{len(out_of_range)} cases have savings_percentage outside 0-100",
                len(out_of_range),
                [str(r.id) for r in out_of_range],
            )
        )

    # --- Advisory: intervention before creation ---
    early = [
        r for r in records
        if (intervention_latency_days(r.created_at, r.intervention_date) or 0) < 0
    ]
    if early:
        advisory.append(
            _advisory(
                "intervention_before_creation",
                f"{len(early)} cases have intervention_date before created_at",
                len(early),
                [str(r.id) for r in early],
            )
        )

    # --- Advisory: medication shape ---
    odd_shape = [
        r for r in records
        if r.initial_medication is not None
        and not isinstance(r.initial_medication, (list, tuple, Mapping))
    ]
    if odd_shape:
        advisory.append(
            _advisory(
                "medication_shape",
                f"{len(odd_shape)} cases have initial_medication that is neither a list nor a mapping",
                len(odd_shape),
                [str(r.id) for r in odd_shape],
            )
        )

    passed = len(critical) == 0
    return ValidationResult(
        passed=passed,
        total_rows=total_rows,
        critical_issues=critical,
        advisory_issues=advisory,
    )

"""Synthetic cost-savings case generator.

Produces case rows shaped like the hosted store's export:
- Lognormal medication costs with a 5-60% optimization on intervened cases
- A doctor pool with fixed specialties plus a share of unassigned cases
- Medication lists stored either as arrays or as keyed objects
- Statuses consistent with intervention presence

All generation is seeded for deterministic, reproducible output.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta

import numpy as np

from cost_savings.config import PipelineConfig
from cost_savings.schema import CASE_STATUSES

SPECIALTIES = [
    "Oncology",
    "Rheumatology",
    "Neurology",
    "Cardiology",
    "Endocrinology",
    "Internal Medicine",
    "Hematology",
]

MEDICATIONS = [
    "Adalimumab",
    "Etanercept",
    "Rituximab",
    "Trastuzumab",
    "Pembrolizumab",
    "Insulin glargine",
    "Ocrelizumab",
    "Infliximab",
    "Tocilizumab",
    "Denosumab",
    "Apixaban",
    "Semaglutide",
]

DIAGNOSES = [
    "Rheumatoid arthritis",
    "Multiple sclerosis",
    "Breast cancer",
    "Type 2 diabetes",
    "Crohn's disease",
    "Atrial fibrillation",
    "Osteoporosis",
]

# Projection horizon for monthly → projected costs
PROJECTION_MONTHS = 12


def _medication_payload(rng: np.random.Generator, names: list[str]) -> list | dict:
    """Medication entries as an array or as a keyed object, like legacy rows."""
    entries = []
    for name in names:
        # Older forms stored the drug under "medication" instead of "name"
        key = "medication" if rng.random() < 0.2 else "name"
        entries.append({key: name, "dose": f"{int(rng.integers(1, 9)) * 50} mg"})
    if rng.random() < 0.3:
        return {f"med_{i}": entry for i, entry in enumerate(entries)}
    return entries


def generate_cases(config: PipelineConfig) -> list[dict]:
    """Generate synthetic case rows.

    Args:
        config: Pipeline configuration with seed, num_cases and date range.

    Returns:
        List of case dicts accepted by :class:`cost_savings.schema.CaseRecord`.
    """
    rng = np.random.default_rng(config.seed)

    doctors = [
        {
            "id": f"DOC-{i:04d}",
            "full_name": f"Dr. Doctor {i:02d}",
            "specialty": str(rng.choice(SPECIALTIES)),
        }
        for i in range(config.num_doctors)
    ]

    total_days = max(1, (config.date_end - config.date_start).days)
    cases: list[dict] = []

    for n in range(config.num_cases):
        created_day = config.date_start + timedelta(days=int(rng.integers(0, total_days)))
        created_at = datetime.combine(created_day, time(hour=int(rng.integers(8, 18))))

        monthly_cost = round(float(rng.lognormal(7.5, 0.9)), 2)
        initial_projected = round(monthly_cost * PROJECTION_MONTHS, 2)

        status = str(rng.choice(CASE_STATUSES, p=[0.25, 0.25, 0.35, 0.15]))
        intervened = status in ("intervened", "completed")

        if intervened:
            savings_pct = round(float(rng.uniform(5.0, 60.0)), 2)
            current_monthly = round(monthly_cost * (1 - savings_pct / 100), 2)
            current_projected = round(current_monthly * PROJECTION_MONTHS, 2)
            monthly_savings = round(monthly_cost - current_monthly, 2)
            projected_savings = round(initial_projected - current_projected, 2)
            intervention_cost = round(float(rng.uniform(50.0, 1500.0)), 2)
            intervention_date = created_at + timedelta(
                days=int(rng.integers(1, 120)), hours=int(rng.integers(0, 24))
            )
        else:
            savings_pct = None
            current_monthly = None
            current_projected = None
            monthly_savings = None
            projected_savings = None
            intervention_cost = None
            intervention_date = None

        n_meds = int(rng.integers(0, 4))
        med_names = [str(m) for m in rng.choice(MEDICATIONS, size=n_meds, replace=False)]
        medication = _medication_payload(rng, med_names) if n_meds else None

        doctor = None if rng.random() < config.unassigned_rate else doctors[int(rng.integers(0, len(doctors)))]

        cases.append(
            {
                "id": f"CASE-{n:06d}",
                "diagnosis": str(rng.choice(DIAGNOSES)),
                "status": status,
                "initial_monthly_cost": monthly_cost,
                "current_monthly_cost": current_monthly,
                "initial_projected_cost": initial_projected,
                "current_projected_cost": current_projected,
                "intervention_cost": intervention_cost,
                "monthly_savings": monthly_savings,
                "projected_savings": projected_savings,
                "savings_percentage": savings_pct,
                "created_at": created_at.isoformat(),
                "intervention_date": intervention_date.isoformat() if intervention_date else None,
                "initial_medication": medication,
                "evaluating_doctor_id": doctor["id"] if doctor else None,
                "evaluating_doctor": (
                    {"full_name": doctor["full_name"], "specialty": doctor["specialty"]}
                    if doctor
                    else None
                ),
            }
        )

    return cases

"""Data ingestion module.

Loads case lists from JSON or Parquet exports of the hosted store and
writes report bundles back out as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path

import polars as pl
from pydantic import ValidationError

from cost_savings.engine import CostSavingsReport
from cost_savings.schema import CaseRecord


def read_raw_cases(path: Path) -> list[dict]:
    """Read raw case rows without validating them.

    JSON files may hold a bare array or an object with a ``cases`` array.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cases file not found: {path}")

    if path.suffix == ".parquet":
        try:
            return pl.read_parquet(path).to_dicts()
        except Exception as e:
            raise ValueError(f"Failed to read Parquet file {path}: {e}") from e

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JSON file {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("cases")
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of cases in {path}")
    return raw


def load_cases(path: Path) -> list[CaseRecord]:
    """Load and validate cases from a JSON or Parquet file.

    Args:
        path: Path to the file.

    Returns:
        Case records in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be read or a row is not a valid case.
    """
    rows = read_raw_cases(path)
    cases: list[CaseRecord] = []
    for i, row in enumerate(rows):
        try:
            cases.append(CaseRecord.model_validate(row))
        except ValidationError as e:
            raise ValueError(f"Invalid case at index {i} in {path}: {e}") from e
    return cases


def save_cases(cases: list[dict], path: Path) -> Path:
    """Save raw case rows as a JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cases, indent=2, default=str), encoding="utf-8")
    return path


def save_report(report: CostSavingsReport, path: Path) -> Path:
    """Save a report bundle as JSON.

    Args:
        report: Bundle from :func:`cost_savings.engine.build_report`.
        path: Output file path.

    Returns:
        The path written to.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    return path

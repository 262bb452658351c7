"""Case status distribution."""

from __future__ import annotations

from pydantic import BaseModel
import polars as pl


class StatusCount(BaseModel):
    status: str | None
    count: int


def build_status_distribution(df: pl.DataFrame) -> list[StatusCount]:
    """Count cases per status.

    Only statuses present in the input appear, in order of first occurrence.
    """
    counts = df.group_by("status", maintain_order=True).agg(pl.len().alias("count"))
    return [
        StatusCount(status=row["status"], count=int(row["count"]))
        for row in counts.iter_rows(named=True)
    ]

"""CLI entrypoint for cost-savings analytics.

Commands:
  generate-data  — Generate synthetic cost-savings cases
  validate       — Validate a case file against schema and business rules
  report         — Filter cases and build the analytics report bundle
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from cost_savings.config import PipelineConfig

if TYPE_CHECKING:
    from cost_savings.engine import CostSavingsReport

app = typer.Typer(
    name="cost-savings",
    help="Cost-savings analytics — synthetic data, validation, and report aggregation.",
    add_completion=False,
)
console = Console()


def _get_config(
    seed: int,
    num_cases: int,
    output_dir: Path,
    config_file: Path | None = None,
) -> PipelineConfig:
    """Build pipeline config from CLI args and optional config file."""
    if config_file and config_file.exists():
        raw = json.loads(config_file.read_text())
        return PipelineConfig(**raw)
    return PipelineConfig(seed=seed, num_cases=num_cases, output_dir=output_dir)


@app.command()
def generate_data(
    seed: int = typer.Option(42, help="Random seed for reproducible generation"),
    num_cases: int = typer.Option(500, help="Number of cases to generate"),
    output_dir: Path = typer.Option(Path("output"), help="Output directory"),
    config_file: Path | None = typer.Option(None, "--config", help="JSON config file"),
) -> None:
    """Generate synthetic cost-savings cases."""
    from cost_savings.generate_data import generate_cases
    from cost_savings.ingest import save_cases

    config = _get_config(seed, num_cases, output_dir, config_file)
    console.print(f"[bold blue]Generating {config.num_cases:,} synthetic cases (seed={config.seed})...[/]")

    cases = generate_cases(config)
    out_path = save_cases(cases, config.output_dir / "cases.json")

    console.print(f"[green]✓ Generated {len(cases):,} cases → {out_path}[/]")


@app.command()
def validate(
    input_file: Path = typer.Option(Path("output/cases.json"), "--input", help="Case file (JSON or Parquet)"),
    output_dir: Path = typer.Option(Path("output"), help="Directory for validation_report.json"),
) -> None:
    """Validate a case file against schema and business rules."""
    from cost_savings.ingest import read_raw_cases
    from cost_savings.validate import validate_cases

    console.print(f"[bold blue]Validating {input_file}...[/]")

    rows = read_raw_cases(input_file)
    result = validate_cases(rows)

    report_path = output_dir / "validation_report.json"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(result.model_dump_json(indent=2))

    if result.passed:
        console.print(f"[green]✓ Validation passed ({result.total_rows:,} rows, "
                      f"{len(result.advisory_issues)} advisory warnings)[/]")
        for issue in result.advisory_issues:
            console.print(f"  [yellow]• {issue.rule}: {issue.message}[/]")
    else:
        console.print(f"[red]✗ Validation FAILED — {len(result.critical_issues)} critical issues:[/]")
        for issue in result.critical_issues:
            console.print(f"  [red]• {issue.rule}: {issue.message}[/]")
        raise typer.Exit(code=1)


def _print_summary(report: CostSavingsReport) -> None:
    kpis = report.kpis
    table = Table(title="Key Metrics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total Cases", f"{kpis.total_cases:,}")
    table.add_row("Total Savings", f"${kpis.total_savings:,.2f}")
    table.add_row("Avg Savings %", f"{kpis.avg_savings_percentage:.1f}%")
    table.add_row("ROI", f"{kpis.roi:.1f}%")
    table.add_row("Avg Days to Intervention", f"{report.average_latency_days:.1f}")
    console.print(table)

    doctors = Table(title="Top Doctors by ROI")
    doctors.add_column("#", justify="right")
    doctors.add_column("Doctor")
    doctors.add_column("Specialty")
    doctors.add_column("Cases", justify="right")
    doctors.add_column("Savings", justify="right")
    doctors.add_column("ROI", justify="right")
    for i, doc in enumerate(report.doctor_roi_leaderboard, 1):
        doctors.add_row(
            str(i), doc.key, doc.specialty or "—", f"{doc.cases:,}",
            f"${doc.savings:,.2f}", f"{doc.roi:.1f}%",
        )
    console.print(doctors)

    trend = report.yearly_trend
    years = Table(title="Yearly Trend")
    for col in ("Year", "Cases", "Savings", "Avg Savings", "Avg %", "ROI"):
        years.add_column(col, justify="right")
    for row in trend.rows:
        marker = " ★" if row.year == trend.best_year else ""
        years.add_row(
            f"{row.year}{marker}", f"{row.cases:,}", f"${row.total_savings:,.2f}",
            f"${row.avg_savings:,.2f}", f"{row.avg_percentage:.1f}%", f"{row.roi:.1f}%",
        )
    console.print(years)


@app.command()
def report(
    input_file: Path = typer.Option(Path("output/cases.json"), "--input", help="Case file (JSON or Parquet)"),
    output_dir: Path = typer.Option(Path("output"), help="Directory for report.json"),
    start_date: datetime | None = typer.Option(None, help="Only cases created on/after this date"),
    end_date: datetime | None = typer.Option(None, help="Only cases created on/before this date"),
    specialty: str | None = typer.Option(None, help="Evaluating doctor specialty"),
    doctor_id: str | None = typer.Option(None, help="Evaluating doctor id"),
    status: str | None = typer.Option(None, help="Case status"),
    config_file: Path | None = typer.Option(None, "--config", help="JSON config file"),
) -> None:
    """Filter cases and build the analytics report bundle."""
    from cost_savings.engine import build_report
    from cost_savings.filters import CaseFilter, apply_filter
    from cost_savings.ingest import load_cases, save_report

    config = _get_config(42, 0, output_dir, config_file)
    console.print(f"[bold blue]Building report from {input_file}...[/]")

    try:
        cases = load_cases(input_file)
        case_filter = CaseFilter(
            start_date=start_date,
            end_date=end_date,
            specialty=specialty,
            doctor_id=doctor_id,
            status=status,
        )
        selected = apply_filter(cases, case_filter)
        console.print(f"  {len(selected):,} of {len(cases):,} cases selected")

        bundle = build_report(selected, config.analytics)
        report_path = save_report(bundle, output_dir / "report.json")
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Report error: {e}[/]")
        raise typer.Exit(code=2) from e

    _print_summary(bundle)
    console.print(f"[green]✓ Report written → {report_path}[/]")


if __name__ == "__main__":
    app()

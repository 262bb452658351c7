"""Tests for the yearly trend table."""

import polars as pl
import pytest

from cost_savings.analytics.yearly import build_yearly_trend
from cost_savings.extract import cases_to_frame, normalize_cases


def _year_cases(savings_by_year: dict[int, float]) -> pl.DataFrame:
    cases = [
        {"created_at": f"{year}-06-01T12:00:00", "projected_savings": savings}
        for year, savings in savings_by_year.items()
    ]
    return cases_to_frame(normalize_cases(cases))


class TestYearlyTrend:
    def test_minimal(self, minimal_df: pl.DataFrame) -> None:
        """Yearly rows over the hand-crafted cases."""
        trend = build_yearly_trend(minimal_df)
        assert [r.year for r in trend.rows] == [2024, 2023]

        y2024, y2023 = trend.rows
        assert y2024.cases == 3
        assert y2024.total_savings == pytest.approx(5000.0)
        assert y2024.total_intervention_cost == pytest.approx(500.0)
        assert y2024.avg_savings == pytest.approx(5000.0 / 3)
        assert y2024.avg_percentage == pytest.approx(91.0 / 3)
        assert y2024.roi == pytest.approx(900.0)

        assert y2023.cases == 1
        assert y2023.avg_savings == pytest.approx(1000.0)
        assert y2023.avg_percentage == pytest.approx(12.5)
        assert y2023.roi == pytest.approx(400.0)

        assert trend.best_year == 2024

    def test_window_keeps_most_recent_years(self) -> None:
        """Only the five most recent years are kept."""
        df = _year_cases({y: 100.0 for y in range(2016, 2025)})
        trend = build_yearly_trend(df)
        assert [r.year for r in trend.rows] == [2024, 2023, 2022, 2021, 2020]

    def test_best_year_only_within_window(self) -> None:
        """A better year outside the window is not picked."""
        df = _year_cases({
            2019: 10_000.0,
            2020: 100.0,
            2021: 200.0,
            2022: 900.0,
            2023: 300.0,
            2024: 400.0,
        })
        trend = build_yearly_trend(df)
        assert 2019 not in [r.year for r in trend.rows]
        assert trend.best_year == 2022

    def test_tie_goes_to_most_recent_year(self) -> None:
        """On equal savings the most recent year wins."""
        trend = build_yearly_trend(_year_cases({2022: 100.0, 2023: 100.0, 2024: 100.0}))
        assert trend.best_year == 2024

    def test_all_losses_still_pick_a_year(self) -> None:
        """The smallest loss is the best year."""
        trend = build_yearly_trend(_year_cases({2023: -50.0, 2024: -80.0}))
        assert trend.best_year == 2023

    def test_custom_window(self) -> None:
        df = _year_cases({2022: 1.0, 2023: 2.0, 2024: 3.0})
        assert [r.year for r in build_yearly_trend(df, window=2).rows] == [2024, 2023]

    def test_zero_cost_year_has_zero_roi(self) -> None:
        """A year without intervention cost has ROI 0."""
        trend = build_yearly_trend(_year_cases({2024: 750.0}))
        assert trend.rows[0].roi == 0.0

    def test_undated_cases_excluded(self) -> None:
        """Cases without created_at have no year."""
        cases = [{"projected_savings": 99.0}, {"created_at": "2021-03-01T00:00:00", "projected_savings": 1.0}]
        trend = build_yearly_trend(cases_to_frame(normalize_cases(cases)))
        assert [(r.year, r.cases) for r in trend.rows] == [(2021, 1)]

    def test_empty(self) -> None:
        trend = build_yearly_trend(cases_to_frame([]))
        assert trend.rows == []
        assert trend.best_year is None

    def test_synthetic_rows_strictly_descending(self, synthetic_cases: list[dict]) -> None:
        """Rows descend by year and the best year is one of them."""
        trend = build_yearly_trend(cases_to_frame(normalize_cases(synthetic_cases)))
        years = [r.year for r in trend.rows]
        assert len(years) <= 5
        assert all(a > b for a, b in zip(years, years[1:]))
        assert trend.best_year in years

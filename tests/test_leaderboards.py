"""Tests for leaderboard construction."""

import polars as pl
import pytest

from cost_savings.analytics.leaderboards import (
    LeaderboardEntry,
    build_doctor_leaderboard,
    build_doctor_roi_leaderboard,
    build_medication_leaderboard,
    build_specialty_savings,
)
from cost_savings.config import AnalyticsConfig
from cost_savings.extract import cases_to_frame, medications_to_frame, normalize_cases


def _frames(cases: list[dict]) -> tuple[pl.DataFrame, pl.DataFrame]:
    normalized = normalize_cases(cases)
    return cases_to_frame(normalized), medications_to_frame(normalized)


# ---------------------------------------------------------------------------
# Medication leaderboard
# ---------------------------------------------------------------------------

class TestMedicationLeaderboard:
    def test_minimal(self, minimal_cases: list[dict]) -> None:
        """Medication ranking over the hand-crafted cases."""
        _, meds = _frames(minimal_cases)
        board = build_medication_leaderboard(meds)
        assert board == [
            LeaderboardEntry(key="Trastuzumab", cases=1, savings=3000.0),
            LeaderboardEntry(key="Pembrolizumab", cases=1, savings=3000.0),
            LeaderboardEntry(key="Adalimumab", cases=1, savings=0.0),
            LeaderboardEntry(key="unnamed", cases=1, savings=0.0),
        ]

    def test_full_savings_per_medication(self) -> None:
        """A case with two medications credits its full savings to each."""
        _, meds = _frames([
            {"projected_savings": 1000.0, "initial_medication": [{"name": "A"}, {"name": "B"}]},
        ])
        board = build_medication_leaderboard(meds)
        assert {e.key: e.savings for e in board} == {"A": 1000.0, "B": 1000.0}

    def test_truncated_to_top_n(self) -> None:
        """Only the top 10 medications are kept, sorted descending."""
        cases = [
            {"projected_savings": float(i), "initial_medication": [{"name": f"M{i:02d}"}]}
            for i in range(15)
        ]
        _, meds = _frames(cases)
        board = build_medication_leaderboard(meds)
        assert len(board) == 10
        assert board[0].key == "M14"
        assert [e.savings for e in board] == sorted((e.savings for e in board), reverse=True)

    def test_ties_keep_first_insertion_order(self) -> None:
        """Equal savings keep first-seen order across list and mapping shapes."""
        cases = [
            {"projected_savings": 10.0, "initial_medication": [{"name": "B"}]},
            {"projected_savings": 10.0, "initial_medication": {"x": {"name": "A"}}},
            {"projected_savings": 10.0, "initial_medication": [{"name": "C"}]},
        ]
        _, meds = _frames(cases)
        assert [e.key for e in build_medication_leaderboard(meds)] == ["B", "A", "C"]

    def test_accumulates_across_cases(self) -> None:
        """name and medication keys land in the same bucket."""
        cases = [
            {"projected_savings": 10.0, "initial_medication": [{"name": "A"}]},
            {"projected_savings": 25.0, "initial_medication": [{"medication": "A"}]},
        ]
        _, meds = _frames(cases)
        assert build_medication_leaderboard(meds) == [
            LeaderboardEntry(key="A", cases=2, savings=35.0)
        ]

    def test_empty(self) -> None:
        _, meds = _frames([])
        assert build_medication_leaderboard(meds) == []


# ---------------------------------------------------------------------------
# Doctor leaderboards
# ---------------------------------------------------------------------------

class TestDoctorLeaderboard:
    def test_minimal(self, minimal_df: pl.DataFrame) -> None:
        """Doctors ranked by savings with an Unassigned bucket."""
        assert build_doctor_leaderboard(minimal_df) == [
            LeaderboardEntry(key="Dr. Ana Ruiz", cases=1, savings=3000.0, specialty="Oncology"),
            LeaderboardEntry(key="Unassigned", cases=1, savings=2000.0, specialty="N/A"),
            LeaderboardEntry(key="Dr. Luis Pena", cases=2, savings=1000.0, specialty="Rheumatology"),
        ]

    def test_specialty_from_first_case(self) -> None:
        """The shown specialty is the one on the doctor's first case."""
        df, _ = _frames([
            {"evaluating_doctor": {"full_name": "Dr. X", "specialty": "Neurology"}},
            {"evaluating_doctor": {"full_name": "Dr. X", "specialty": "Cardiology"}},
        ])
        (entry,) = build_doctor_leaderboard(df)
        assert entry.specialty == "Neurology"
        assert entry.cases == 2

    def test_no_truncation(self) -> None:
        """The doctor leaderboard is unbounded."""
        df, _ = _frames([
            {"evaluating_doctor": {"full_name": f"Dr. {i}"}, "projected_savings": float(i)}
            for i in range(25)
        ])
        assert len(build_doctor_leaderboard(df)) == 25

    def test_custom_labels(self, minimal_df: pl.DataFrame) -> None:
        config = AnalyticsConfig(unknown_specialty_label="-")
        board = build_doctor_leaderboard(minimal_df, config)
        assert {e.key: e.specialty for e in board}["Unassigned"] == "-"


class TestDoctorRoiLeaderboard:
    def test_minimal(self, minimal_df: pl.DataFrame) -> None:
        """ROI ranking over the hand-crafted cases."""
        roi_board = build_doctor_roi_leaderboard(minimal_df, build_doctor_leaderboard(minimal_df))
        assert [e.key for e in roi_board] == ["Dr. Ana Ruiz", "Dr. Luis Pena", "Unassigned"]

        ana, luis, unassigned = roi_board
        assert ana.intervention_cost == pytest.approx(500.0)
        assert ana.roi == pytest.approx(500.0)
        assert ana.avg_savings == pytest.approx(3000.0)
        assert luis.roi == pytest.approx(400.0)
        assert luis.avg_savings == pytest.approx(500.0)
        assert unassigned.intervention_cost == 0.0
        assert unassigned.roi == 0.0

    def test_zero_cost_guarded(self) -> None:
        """Zero intervention cost yields ROI 0 and keeps the average."""
        df, _ = _frames([
            {
                "evaluating_doctor": {"full_name": "Dr. Solo"},
                "intervention_cost": 0,
                "projected_savings": 500.0,
            }
        ])
        (entry,) = build_doctor_roi_leaderboard(df, build_doctor_leaderboard(df))
        assert entry.roi == 0.0
        assert entry.avg_savings == pytest.approx(500.0)

    def test_exact_name_match(self) -> None:
        """Cost matching is case-sensitive on the display name."""
        df, _ = _frames([
            {"evaluating_doctor": {"full_name": "Dr. Kim"}, "projected_savings": 300.0,
             "intervention_cost": 100.0},
            {"evaluating_doctor": {"full_name": "dr. kim"}, "projected_savings": 0.0,
             "intervention_cost": 900.0},
        ])
        roi_board = build_doctor_roi_leaderboard(df, build_doctor_leaderboard(df))
        by_key = {e.key: e for e in roi_board}
        assert by_key["Dr. Kim"].intervention_cost == pytest.approx(100.0)
        assert by_key["Dr. Kim"].roi == pytest.approx(200.0)
        assert by_key["dr. kim"].intervention_cost == pytest.approx(900.0)

    def test_truncated_and_sorted(self) -> None:
        """Only the top 10 doctors by ROI are kept."""
        df, _ = _frames([
            {
                "evaluating_doctor": {"full_name": f"Dr. {i}"},
                "projected_savings": 100.0 * (i + 1),
                "intervention_cost": 50.0,
            }
            for i in range(12)
        ])
        roi_board = build_doctor_roi_leaderboard(df, build_doctor_leaderboard(df), top_n=10)
        assert len(roi_board) == 10
        rois = [e.roi for e in roi_board]
        assert rois == sorted(rois, reverse=True)
        assert roi_board[0].key == "Dr. 11"


class TestSpecialtySavings:
    def test_minimal(self, minimal_df: pl.DataFrame) -> None:
        """Specialties ranked by savings, with a bucket for missing specialty."""
        rows = build_specialty_savings(minimal_df)
        assert [(r.specialty, r.cases, r.savings) for r in rows] == [
            ("Oncology", 1, 3000.0),
            ("No specialty", 1, 2000.0),
            ("Rheumatology", 2, 1000.0),
        ]

    def test_empty(self) -> None:
        df, _ = _frames([])
        assert build_specialty_savings(df) == []

"""
Scoring Engine Tests
====================

Unit tests for the ProjectPulse health-score engine.

Author: ProjectPulse Team
Version: 1.0.0
"""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from shared.schemas.tracking import ProjectStatus, RiskSeverity
from pulse.scoring import (
    CheckInSnapshot,
    FeedbackSnapshot,
    HealthScoreEngine,
    ProjectTimeline,
    RiskSnapshot,
    compute_health_score,
    status_for_score,
)
from pulse.scoring.rules import (
    as_utc,
    calculate_client_satisfaction,
    calculate_employee_confidence,
    calculate_expected_progress,
    calculate_risk_factor,
    calculate_timeline_progress,
)


NOW = datetime(2025, 6, 4, 12, 0, tzinfo=timezone.utc)


def timeline(elapsed_days: float, remaining_days: float) -> ProjectTimeline:
    return ProjectTimeline(
        start_date=NOW - timedelta(days=elapsed_days),
        end_date=NOW + timedelta(days=remaining_days),
    )


def check_in(confidence: int = 3, completion: float = 0.0) -> CheckInSnapshot:
    return CheckInSnapshot(confidence_level=confidence, completion_percentage=completion)


def feedback(satisfaction: int = 3, communication: int = 3, flagged: bool = False):
    return FeedbackSnapshot(
        satisfaction_rating=satisfaction,
        communication_rating=communication,
        issue_flagged=flagged,
    )


class TestStatusForScore:
    """Tests for status band mapping."""

    @pytest.mark.parametrize("score,expected", [
        (100, ProjectStatus.ON_TRACK),
        (80, ProjectStatus.ON_TRACK),
        (79, ProjectStatus.AT_RISK),
        (60, ProjectStatus.AT_RISK),
        (59, ProjectStatus.CRITICAL),
        (0, ProjectStatus.CRITICAL),
    ])
    def test_band_boundaries(self, score, expected):
        assert status_for_score(score) == expected


class TestClientSatisfaction:
    """Tests for the client satisfaction sub-score."""

    def test_no_feedback_is_neutral(self):
        assert calculate_client_satisfaction([]) == 0.7

    def test_perfect_ratings(self):
        assert calculate_client_satisfaction([feedback(5, 5)]) == 1.0

    def test_issue_penalty(self):
        score = calculate_client_satisfaction([feedback(5, 5, flagged=True)])
        assert score == pytest.approx(0.9)

    def test_issue_penalty_is_capped(self):
        entries = [feedback(5, 5, flagged=True) for _ in range(4)]
        assert calculate_client_satisfaction(entries) == pytest.approx(0.7)

    def test_never_negative(self):
        assert calculate_client_satisfaction([feedback(1, 1, flagged=True)]) == 0.0


class TestEmployeeConfidence:
    """Tests for the employee confidence sub-score and its trend penalty."""

    def test_no_check_ins_is_neutral(self):
        assert calculate_employee_confidence([]) == 0.7

    def test_average_is_normalized(self):
        assert calculate_employee_confidence([check_in(3), check_in(5)]) == pytest.approx(0.75)

    def test_drop_between_last_two_entries_is_penalized(self):
        # Window is newest-first; the last two entries are compared as given
        score = calculate_employee_confidence([check_in(5), check_in(2)])
        assert score == pytest.approx(0.625 - 0.15)

    def test_rise_between_last_two_entries_is_not_penalized(self):
        score = calculate_employee_confidence([check_in(2), check_in(5)])
        assert score == pytest.approx(0.625)

    def test_one_point_drop_is_tolerated(self):
        score = calculate_employee_confidence([check_in(4), check_in(3)])
        assert score == pytest.approx(0.625)

    def test_only_last_two_entries_are_compared(self):
        score = calculate_employee_confidence([check_in(1), check_in(5), check_in(5)])
        assert score == pytest.approx((11 / 3 - 1) / 4)


class TestTimelineProgress:
    """Tests for expected progress and timeline bands."""

    def test_expected_progress_midway(self):
        assert calculate_expected_progress(timeline(30, 30), NOW) == pytest.approx(50.0)

    def test_expected_progress_is_clamped(self):
        assert calculate_expected_progress(timeline(90, -30), NOW) == 100.0
        assert calculate_expected_progress(timeline(-10, 30), NOW) == 0.0

    def test_zero_duration_after_start(self):
        project = ProjectTimeline(NOW - timedelta(days=1), NOW - timedelta(days=1))
        assert calculate_expected_progress(project, NOW) == 100.0

    def test_zero_duration_before_start(self):
        project = ProjectTimeline(NOW + timedelta(days=1), NOW + timedelta(days=1))
        assert calculate_expected_progress(project, NOW) == 0.0

    def test_negative_duration_is_guarded(self):
        project = ProjectTimeline(NOW - timedelta(days=1), NOW - timedelta(days=5))
        assert calculate_expected_progress(project, NOW) == 100.0

    @pytest.mark.parametrize("completion,expected_score", [
        (50, 1.0),
        (48, 1.0),
        (47.5, 1.0),
        (47.4, 0.8),
        (40, 0.8),
        (30, 0.6),
        (29, 0.4),
        (0, 0.4),
    ])
    def test_bands(self, completion, expected_score):
        result = calculate_timeline_progress(timeline(30, 30), [check_in(3, completion)], NOW)
        assert result.score == expected_score

    def test_not_started_scores_full(self):
        result = calculate_timeline_progress(timeline(-5, 30), [], NOW)
        assert result.score == 1.0
        assert result.expected_progress == 0.0

    def test_actual_progress_uses_last_entry_of_window(self):
        window = [check_in(3, 60), check_in(3, 20)]
        result = calculate_timeline_progress(timeline(30, 30), window, NOW)
        assert result.actual_progress == 20.0
        assert result.score == 0.4

    def test_accepts_plain_dates(self):
        project = ProjectTimeline(date(2025, 5, 5), date(2025, 7, 4))
        result = calculate_timeline_progress(project, [], NOW)
        assert 0.0 < result.expected_progress < 100.0


class TestRiskFactor:
    """Tests for the risk factor sub-score."""

    def test_no_risks(self):
        assert calculate_risk_factor([]) == 1.0

    def test_severity_penalties(self):
        risks = [
            RiskSnapshot(RiskSeverity.HIGH),
            RiskSnapshot(RiskSeverity.MEDIUM),
            RiskSnapshot(RiskSeverity.LOW),
        ]
        assert calculate_risk_factor(risks) == pytest.approx(0.55)

    def test_plain_string_severity(self):
        assert calculate_risk_factor([RiskSnapshot("High")]) == pytest.approx(0.75)

    def test_penalty_is_capped(self):
        risks = [RiskSnapshot(RiskSeverity.HIGH) for _ in range(5)]
        assert calculate_risk_factor(risks) == pytest.approx(0.2)


class TestComputeHealthScore:
    """End-to-end health score computations."""

    def test_on_track_scenario(self):
        score = compute_health_score(
            timeline(30, 30),
            [check_in(5, 30)],
            [feedback(5, 5)],
            [],
            now=NOW,
        )
        assert score == 90
        assert status_for_score(score) == ProjectStatus.ON_TRACK

    def test_empty_inputs_not_started(self):
        # 0.7*30 + 0.7*25 + 1*25 + 1*20 = 83.5
        assert compute_health_score(timeline(-1, 30), [], [], [], now=NOW) == 84

    def test_empty_inputs_fully_elapsed(self):
        # 0.7*30 + 0.7*25 + 0.4*25 + 1*20 = 68.5, rounded half-up
        assert compute_health_score(timeline(60, -1), [], [], [], now=NOW) == 69

    def test_zero_open_risks_contribute_twenty_points(self):
        result = HealthScoreEngine().score(timeline(30, 30), [], [], [], now=NOW)
        assert result.component_points()["risk_factor"] == 20

    def test_five_high_risks_contribute_four_points(self):
        risks = [RiskSnapshot(RiskSeverity.HIGH) for _ in range(5)]
        result = HealthScoreEngine().score(timeline(30, 30), [], [], risks, now=NOW)
        assert result.component_points()["risk_factor"] == pytest.approx(4.0)

    def test_zero_duration_never_yields_nan(self):
        project = ProjectTimeline(NOW, NOW)
        result = HealthScoreEngine().score(project, [check_in(3, 50)], [], [], now=NOW)
        assert not math.isnan(result.raw_score)
        assert 0 <= result.health_score <= 100

    def test_score_is_in_range_for_worst_inputs(self):
        score = compute_health_score(
            timeline(60, -1),
            [check_in(5, 0), check_in(1, 0)],
            [feedback(1, 1, flagged=True) for _ in range(4)],
            [RiskSnapshot(RiskSeverity.HIGH) for _ in range(10)],
            now=NOW,
        )
        assert isinstance(score, int)
        assert 0 <= score <= 100

    def test_monotonic_in_satisfaction(self):
        scores = [
            compute_health_score(timeline(30, 30), [], [feedback(rating, 3)], [], now=NOW)
            for rating in range(1, 6)
        ]
        assert scores == sorted(scores)

    def test_monotonic_in_confidence(self):
        scores = [
            compute_health_score(timeline(30, 30), [check_in(level, 50)], [], [], now=NOW)
            for level in range(1, 6)
        ]
        assert scores == sorted(scores)

    def test_idempotent(self):
        args = (timeline(20, 40), [check_in(4, 25)], [feedback(4, 3)], [RiskSnapshot("Medium")])
        assert compute_health_score(*args, now=NOW) == compute_health_score(*args, now=NOW)


class TestExplain:
    """Tests for score explanations."""

    def test_healthy_project_needs_no_action(self):
        engine = HealthScoreEngine()
        result = engine.score(timeline(30, 30), [check_in(5, 50)], [feedback(5, 5)], [], now=NOW)
        explanation = engine.explain(result)

        assert explanation["health_score"] == 100
        assert explanation["weakest_components"] == []
        assert explanation["recommendations"] == [
            "Continue monitoring; no immediate action required"
        ]
        assert [c["name"] for c in explanation["components"]] == [
            "client_satisfaction",
            "employee_confidence",
            "timeline_progress",
            "risk_factor",
        ]

    def test_weak_components_are_listed_weakest_first(self):
        engine = HealthScoreEngine()
        risks = [RiskSnapshot(RiskSeverity.HIGH) for _ in range(5)]
        result = engine.score(
            timeline(30, 30), [check_in(5, 0)], [feedback(2, 2)], risks, now=NOW
        )
        explanation = engine.explain(result)

        assert result.status == ProjectStatus.CRITICAL
        assert explanation["weakest_components"] == [
            "Open risks",
            "Client satisfaction",
            "Timeline progress",
        ]
        assert len(explanation["recommendations"]) == 3
        assert "Immediate attention" in explanation["summary"]


class TestAsUtc:
    """Tests for date normalization."""

    def test_naive_datetime_is_utc(self):
        assert as_utc(datetime(2025, 1, 1, 8)).tzinfo == timezone.utc

    def test_date_is_midnight(self):
        assert as_utc(date(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_utc("2025-01-01")

"""
ProjectPulse Health Scoring Rules
=================================

Sub-score rules for the project health score.

Each rule turns one slice of recent project activity into a value in the
[0, 1] range:

    - Client Satisfaction: feedback ratings, minus a penalty per flagged issue
    - Employee Confidence: check-in confidence, minus a penalty on a sharp drop
    - Timeline Progress: reported completion vs. elapsed share of the schedule
    - Risk Factor: penalty by number and severity of open risks

The rules are pure: they read attribute values from whatever objects they
are handed (snapshots below, ORM rows, test doubles) and never mutate them.

Author: ProjectPulse Team
Version: 1.0.0
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Sequence

from shared.schemas.tracking import RiskSeverity


# =============================================================================
# Constants
# =============================================================================

# Score returned when there is no feedback / no check-in yet
NEUTRAL_SCORE = 0.7

# Client satisfaction
ISSUE_PENALTY_PER_FLAG = 0.1
ISSUE_PENALTY_CAP = 0.3

# Employee confidence
CONFIDENCE_DROP_THRESHOLD = 1
CONFIDENCE_DROP_PENALTY = 0.15

# Timeline progress: (minimum actual/expected ratio, score), checked in order
TIMELINE_BANDS = (
    (0.95, 1.0),
    (0.80, 0.8),
    (0.60, 0.6),
)
TIMELINE_FLOOR = 0.4

# Risk factor
SEVERITY_PENALTIES = {
    RiskSeverity.HIGH.value: 0.25,
    RiskSeverity.MEDIUM.value: 0.15,
    RiskSeverity.LOW.value: 0.05,
}
RISK_PENALTY_CAP = 0.8
RISK_SCORE_FLOOR = 0.2


# =============================================================================
# Input Snapshots
# =============================================================================


@dataclass(frozen=True)
class ProjectTimeline:
    """Schedule of a project; the only project fields the engine reads."""
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True)
class CheckInSnapshot:
    """Scoring view of an employee check-in."""
    confidence_level: int
    completion_percentage: float
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FeedbackSnapshot:
    """Scoring view of a client feedback entry."""
    satisfaction_rating: int
    communication_rating: int
    issue_flagged: bool = False


@dataclass(frozen=True)
class RiskSnapshot:
    """Scoring view of an open risk."""
    severity: RiskSeverity


@dataclass(frozen=True)
class TimelineProgress:
    """Timeline sub-score together with the progress figures behind it."""
    score: float
    expected_progress: float
    actual_progress: float


# =============================================================================
# Helpers
# =============================================================================


def as_utc(value: Any) -> datetime:
    """
    Normalize a date/datetime to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC; plain dates map to
    midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


# =============================================================================
# Sub-score Rules
# =============================================================================


def calculate_client_satisfaction(recent_feedback: Sequence[Any]) -> float:
    """
    Client satisfaction sub-score (0-1).

    Mean of the average satisfaction and average communication ratings,
    normalized from 1-5 to 0-1, minus 0.1 per flagged issue (at most 0.3).
    """
    if not recent_feedback:
        return NEUTRAL_SCORE

    avg_satisfaction = _mean([f.satisfaction_rating for f in recent_feedback])
    avg_communication = _mean([f.communication_rating for f in recent_feedback])

    combined = (avg_satisfaction + avg_communication) / 2
    normalized = (combined - 1) / 4

    flagged = sum(1 for f in recent_feedback if f.issue_flagged)
    issue_penalty = min(ISSUE_PENALTY_CAP, flagged * ISSUE_PENALTY_PER_FLAG)

    return max(0.0, normalized - issue_penalty)


def calculate_employee_confidence(recent_check_ins: Sequence[Any]) -> float:
    """
    Employee confidence sub-score (0-1).

    Average confidence normalized from 1-5 to 0-1. When the last entry of
    the supplied window is more than one point below the entry before it,
    0.15 is subtracted.

    The window arrives newest-first, so the "last two" compared here are the
    two oldest check-ins in it. That ordering is kept as-is; comparing the
    two newest submissions instead would be a product decision.
    """
    if not recent_check_ins:
        return NEUTRAL_SCORE

    avg_confidence = _mean([c.confidence_level for c in recent_check_ins])
    normalized = (avg_confidence - 1) / 4

    if len(recent_check_ins) >= 2:
        first, second = (c.confidence_level for c in recent_check_ins[-2:])
        if second < first - CONFIDENCE_DROP_THRESHOLD:
            return max(0.0, normalized - CONFIDENCE_DROP_PENALTY)

    return normalized


def calculate_expected_progress(project: Any, now: datetime) -> float:
    """
    Share of the schedule (0-100) that has elapsed at ``now``.

    A zero or negative duration is treated as a deadline: 100 once the
    start date has passed, 0 before it.
    """
    start = as_utc(project.start_date)
    end = as_utc(project.end_date)
    now = as_utc(now)

    total_seconds = (end - start).total_seconds()
    if total_seconds <= 0:
        return 100.0 if now >= start else 0.0

    elapsed_seconds = (now - start).total_seconds()
    return max(0.0, min(100.0, (elapsed_seconds / total_seconds) * 100))


def calculate_timeline_progress(
    project: Any,
    recent_check_ins: Sequence[Any],
    now: datetime,
) -> TimelineProgress:
    """
    Timeline progress sub-score (0-1).

    Compares the completion reported by the last entry of the check-in
    window with the expected progress and maps the ratio onto fixed bands.
    """
    expected = calculate_expected_progress(project, now)

    actual = 0.0
    if recent_check_ins:
        actual = float(recent_check_ins[-1].completion_percentage)

    if expected == 0:
        # Project has not started yet
        return TimelineProgress(1.0, expected, actual)

    ratio = actual / expected
    for threshold, band_score in TIMELINE_BANDS:
        if ratio >= threshold:
            return TimelineProgress(band_score, expected, actual)

    return TimelineProgress(TIMELINE_FLOOR, expected, actual)


def calculate_risk_factor(open_risks: Sequence[Any]) -> float:
    """
    Risk factor sub-score (0-1).

    High, Medium and Low risks cost 0.25, 0.15 and 0.05 respectively; the
    total penalty is capped at 0.8. Unknown severities cost nothing.
    """
    if not open_risks:
        return 1.0

    penalty = sum(
        SEVERITY_PENALTIES.get(getattr(r.severity, "value", r.severity), 0.0)
        for r in open_risks
    )
    penalty = min(RISK_PENALTY_CAP, penalty)

    return max(RISK_SCORE_FLOOR, 1 - penalty)

"""
ProjectPulse Health Score Engine
================================

Combines the four sub-scores into a 0-100 project health score and maps
the score onto a status label.

    score = 30 * client_satisfaction
          + 25 * employee_confidence
          + 25 * timeline_progress
          + 20 * risk_factor

The result is clamped to [0, 100] and rounded half-up.

Interpretation:
    - 80-100: On Track
    - 60-79:  At Risk
    - 0-59:   Critical

Usage:
    from pulse.scoring import compute_health_score, status_for_score

    score = compute_health_score(project, check_ins, feedback, open_risks)
    status = status_for_score(score)

Author: ProjectPulse Team
Version: 1.0.0
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from shared.schemas.tracking import ProjectStatus
from pulse.scoring.rules import (
    calculate_client_satisfaction,
    calculate_employee_confidence,
    calculate_risk_factor,
    calculate_timeline_progress,
)


SCORING_VERSION = "1.0.0"

# Points available per component (sum = 100)
WEIGHTS = {
    "client_satisfaction": 30,
    "employee_confidence": 25,
    "timeline_progress": 25,
    "risk_factor": 20,
}

ON_TRACK_THRESHOLD = 80
AT_RISK_THRESHOLD = 60

# Components at or below this value are called out in explanations
WEAK_COMPONENT_THRESHOLD = 0.6

COMPONENT_LABELS = {
    "client_satisfaction": "Client satisfaction",
    "employee_confidence": "Employee confidence",
    "timeline_progress": "Timeline progress",
    "risk_factor": "Open risks",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def status_for_score(score: float) -> ProjectStatus:
    """Map a health score onto its status band (lower bounds inclusive)."""
    if score >= ON_TRACK_THRESHOLD:
        return ProjectStatus.ON_TRACK
    if score >= AT_RISK_THRESHOLD:
        return ProjectStatus.AT_RISK
    return ProjectStatus.CRITICAL


@dataclass
class HealthScoreResult:
    """
    Complete health-score computation for a project.

    Holds every sub-score next to the final score so callers can persist
    the score and explain it from the same object.
    """
    client_satisfaction: float
    employee_confidence: float
    timeline_progress: float
    risk_factor: float
    expected_progress: float
    actual_progress: float
    raw_score: float
    health_score: int
    status: ProjectStatus
    calculated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    scoring_version: str = SCORING_VERSION

    def component_values(self) -> Dict[str, float]:
        """Sub-score per component, in weight order."""
        return {
            "client_satisfaction": self.client_satisfaction,
            "employee_confidence": self.employee_confidence,
            "timeline_progress": self.timeline_progress,
            "risk_factor": self.risk_factor,
        }

    def component_points(self) -> Dict[str, float]:
        """Weighted points each component contributed to the raw score."""
        return {
            name: WEIGHTS[name] * value
            for name, value in self.component_values().items()
        }


class HealthScoreEngine:
    """
    Project health-score engine.

    Stateless: every call works only on the snapshots it is given, so a
    single instance can be shared freely across concurrent requests.

    Example:
        engine = HealthScoreEngine()
        result = engine.score(project, check_ins, feedback, open_risks)
        print(result.health_score, result.status.value)

        explanation = engine.explain(result)
    """

    def score(
        self,
        project: Any,
        recent_check_ins: Sequence[Any],
        recent_feedback: Sequence[Any],
        open_risks: Sequence[Any],
        now: Optional[datetime] = None,
    ) -> HealthScoreResult:
        """
        Compute the health score with its full breakdown.

        Args:
            project: Object exposing ``start_date`` and ``end_date``
            recent_check_ins: At most the N newest check-ins, newest-first
            recent_feedback: At most the N newest feedback entries, newest-first
            open_risks: All open risks, any order
            now: Evaluation time (defaults to the current UTC time)

        Returns:
            HealthScoreResult
        """
        now = now or datetime.now(timezone.utc)

        satisfaction = calculate_client_satisfaction(recent_feedback)
        confidence = calculate_employee_confidence(recent_check_ins)
        timeline = calculate_timeline_progress(project, recent_check_ins, now)
        risk = calculate_risk_factor(open_risks)

        raw = 0.0
        raw += satisfaction * WEIGHTS["client_satisfaction"]
        raw += confidence * WEIGHTS["employee_confidence"]
        raw += timeline.score * WEIGHTS["timeline_progress"]
        raw += risk * WEIGHTS["risk_factor"]

        if math.isnan(raw):
            raw = 0.0

        health_score = _round_half_up(max(0.0, min(100.0, raw)))

        return HealthScoreResult(
            client_satisfaction=satisfaction,
            employee_confidence=confidence,
            timeline_progress=timeline.score,
            risk_factor=risk,
            expected_progress=timeline.expected_progress,
            actual_progress=timeline.actual_progress,
            raw_score=raw,
            health_score=health_score,
            status=status_for_score(health_score),
            calculated_at=now,
        )

    def explain(self, result: HealthScoreResult) -> Dict[str, Any]:
        """
        Generate a human-readable explanation of a health score.

        Args:
            result: HealthScoreResult to explain

        Returns:
            Dictionary with summary, weakest components and recommendations
        """
        values = result.component_values()
        points = result.component_points()

        weakest = sorted(
            (name for name, value in values.items() if value <= WEAK_COMPONENT_THRESHOLD),
            key=lambda name: values[name],
        )

        return {
            "health_score": result.health_score,
            "status": result.status,
            "summary": self._generate_summary(result),
            "components": [
                {
                    "name": name,
                    "weight": WEIGHTS[name],
                    "value": round(values[name], 4),
                    "points": round(points[name], 2),
                }
                for name in WEIGHTS
            ],
            "weakest_components": [COMPONENT_LABELS[name] for name in weakest],
            "recommendations": self._generate_recommendations(result),
        }

    def _generate_summary(self, result: HealthScoreResult) -> str:
        """Generate a one-line summary of the project's health."""
        if result.status == ProjectStatus.ON_TRACK:
            return f"Project is on track with a health score of {result.health_score}."
        if result.status == ProjectStatus.AT_RISK:
            return (
                f"Project is AT RISK with a health score of {result.health_score}. "
                f"Review recommended."
            )
        return (
            f"Project is CRITICAL with a health score of {result.health_score}. "
            f"Immediate attention required."
        )

    def _generate_recommendations(self, result: HealthScoreResult) -> List[str]:
        """Generate recommendations from the weak components."""
        recommendations = []

        if result.client_satisfaction <= WEAK_COMPONENT_THRESHOLD:
            recommendations.append(
                "Schedule a check-in call with the client to address concerns"
            )

        if result.employee_confidence <= WEAK_COMPONENT_THRESHOLD:
            recommendations.append(
                "Review blockers with the delivery team"
            )

        if result.timeline_progress <= WEAK_COMPONENT_THRESHOLD:
            recommendations.append(
                f"Progress ({result.actual_progress:.0f}%) trails the schedule "
                f"({result.expected_progress:.0f}%); re-plan scope or deadline"
            )

        if result.risk_factor <= WEAK_COMPONENT_THRESHOLD:
            recommendations.append(
                "Prioritize mitigation of open high-severity risks"
            )

        if not recommendations:
            recommendations.append(
                "Continue monitoring; no immediate action required"
            )

        return recommendations


_default_engine = HealthScoreEngine()


def compute_health_score(
    project: Any,
    recent_check_ins: Sequence[Any],
    recent_feedback: Sequence[Any],
    open_risks: Sequence[Any],
    now: Optional[datetime] = None,
) -> int:
    """
    Compute a project's health score (0-100).

    Total over all inputs, including empty lists and zero-length schedules.
    """
    return _default_engine.score(
        project, recent_check_ins, recent_feedback, open_risks, now=now
    ).health_score

"""
ProjectPulse Scoring Package
============================

Project health-score engine.

This package provides:
    - rules: Sub-score rules (satisfaction, confidence, timeline, risk)
    - engine: Score orchestration, status mapping and explanations

Author: ProjectPulse Team
Version: 1.0.0
"""

from pulse.scoring.engine import (
    HealthScoreEngine,
    HealthScoreResult,
    compute_health_score,
    status_for_score,
)
from pulse.scoring.rules import (
    CheckInSnapshot,
    FeedbackSnapshot,
    ProjectTimeline,
    RiskSnapshot,
)

__all__ = [
    "HealthScoreEngine",
    "HealthScoreResult",
    "compute_health_score",
    "status_for_score",
    "CheckInSnapshot",
    "FeedbackSnapshot",
    "ProjectTimeline",
    "RiskSnapshot",
]

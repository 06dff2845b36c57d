"""
Health Score Recompute Policy
=============================

Keeps the stored project health score in step with project activity:

    - Recompute on write: every check-in, feedback or risk mutation
      recomputes the score and stores it in the same unit of work.
    - Patch on read: a project read recomputes the score and stores it
      only when it drifted from the stored value by more than the
      configured threshold.

Concurrent writers are not coordinated; the last write wins. The stored
score is a derived summary and converges on the next recompute.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from shared.schemas.tracking import ActivityType
from pulse.config import settings
from pulse.db.models import ProjectDB
from pulse.scoring.engine import HealthScoreEngine, HealthScoreResult
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)


class HealthRecomputer:
    """
    Reads the scoring window for a project, scores it and writes it back.

    Example:
        recomputer = HealthRecomputer(TrackingRepository(db))
        result = await recomputer.recompute(project, actor_id=user.user_id)
    """

    def __init__(
        self,
        repository: TrackingRepository,
        engine: Optional[HealthScoreEngine] = None,
        window_size: Optional[int] = None,
        drift_threshold: Optional[int] = None,
    ):
        """
        Initialize the recomputer.

        Args:
            repository: Tracking repository bound to the request session
            engine: Health score engine (a default instance if omitted)
            window_size: Check-ins/feedback entries scored per project
            drift_threshold: Read-time drift tolerated before a write
        """
        self.repository = repository
        self.engine = engine or HealthScoreEngine()
        self.window_size = window_size or settings.health_window_size
        self.drift_threshold = (
            settings.health_drift_threshold if drift_threshold is None else drift_threshold
        )

    async def evaluate(
        self,
        project: ProjectDB,
        now: Optional[datetime] = None,
    ) -> HealthScoreResult:
        """Score the project from its latest activity without persisting."""
        check_ins = await self.repository.recent_check_ins(project.id, self.window_size)
        feedback = await self.repository.recent_feedback(project.id, self.window_size)
        open_risks = await self.repository.open_risks(project.id)

        return self.engine.score(project, check_ins, feedback, open_risks, now=now)

    async def recompute(self, project: ProjectDB, actor_id: str) -> HealthScoreResult:
        """Score the project and store the result unconditionally."""
        result = await self.evaluate(project)
        await self._persist(project, result, actor_id, source="mutation")
        return result

    async def refresh_on_read(
        self,
        project: ProjectDB,
        actor_id: str,
    ) -> Tuple[HealthScoreResult, bool]:
        """
        Score the project and store the result if it drifted.

        Returns:
            (result, refreshed) where ``refreshed`` tells whether the stored
            score was rewritten
        """
        result = await self.evaluate(project)

        drift = abs(result.health_score - project.health_score)
        if drift <= self.drift_threshold:
            return result, False

        logger.info(
            f"Health score drift on project {project.id}: "
            f"stored={project.health_score} fresh={result.health_score}"
        )
        await self._persist(project, result, actor_id, source="read_refresh")
        return result, True

    async def _persist(
        self,
        project: ProjectDB,
        result: HealthScoreResult,
        actor_id: str,
        source: str,
    ) -> None:
        previous_score = project.health_score
        previous_status = project.status

        await self.repository.save_health(project, result.health_score, result.status)

        if previous_status != result.status.value:
            await self.repository.log_activity(
                project_id=project.id,
                user_id=actor_id,
                activity_type=ActivityType.STATUS_CHANGE,
                description=(
                    f"Project status changed from {previous_status} to "
                    f"{result.status.value} (health score {result.health_score})"
                ),
                details={
                    "previous_status": previous_status,
                    "status": result.status.value,
                    "previous_health_score": previous_score,
                    "health_score": result.health_score,
                    "source": source,
                },
            )

        logger.debug(
            f"Stored health score for project {project.id}: "
            f"{previous_score} -> {result.health_score} ({result.status.value})"
        )

"""
Health Recompute Policy Tests
=============================

Tests for recompute-on-write and patch-on-read of the stored health score.

Author: ProjectPulse Team
Version: 1.0.0
"""

import pytest

from shared.schemas.tracking import ActivityType, ProjectStatus
from pulse.tracking.health import HealthRecomputer

from conftest import make_project


# An empty project halfway through its schedule scores
# 0.7*30 + 0.7*25 + 0.4*25 + 1*20 = 68.5 -> 69 (At Risk)
FRESH_SCORE = 69


class TestRefreshOnRead:
    """Stored score is only rewritten when it drifted past the threshold."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", [FRESH_SCORE, FRESH_SCORE - 5, FRESH_SCORE + 5])
    async def test_drift_within_threshold_is_not_written(self, mock_repository, stored):
        project = make_project(health_score=stored)
        recomputer = HealthRecomputer(mock_repository, drift_threshold=5)

        result, refreshed = await recomputer.refresh_on_read(project, "admin-1")

        assert result.health_score == FRESH_SCORE
        assert refreshed is False
        mock_repository.save_health.assert_not_awaited()
        mock_repository.log_activity.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", [FRESH_SCORE - 6, FRESH_SCORE + 6])
    async def test_drift_past_threshold_is_written(self, mock_repository, stored):
        project = make_project(health_score=stored, status="At Risk")
        recomputer = HealthRecomputer(mock_repository, drift_threshold=5)

        result, refreshed = await recomputer.refresh_on_read(project, "admin-1")

        assert refreshed is True
        mock_repository.save_health.assert_awaited_once_with(
            project, FRESH_SCORE, ProjectStatus.AT_RISK
        )
        # Status label unchanged, so nothing is logged
        mock_repository.log_activity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_status_change_is_logged(self, mock_repository):
        project = make_project(health_score=90, status="On Track")
        recomputer = HealthRecomputer(mock_repository, drift_threshold=5)

        await recomputer.refresh_on_read(project, "emp-1")

        mock_repository.log_activity.assert_awaited_once()
        kwargs = mock_repository.log_activity.await_args.kwargs
        assert kwargs["activity_type"] == ActivityType.STATUS_CHANGE
        assert kwargs["user_id"] == "emp-1"
        assert kwargs["details"]["previous_status"] == "On Track"
        assert kwargs["details"]["status"] == "At Risk"
        assert kwargs["details"]["source"] == "read_refresh"


class TestRecompute:
    """Mutations always store the fresh score."""

    @pytest.mark.asyncio
    async def test_recompute_always_writes(self, mock_repository):
        project = make_project(health_score=FRESH_SCORE, status="At Risk")
        recomputer = HealthRecomputer(mock_repository)

        result = await recomputer.recompute(project, "emp-1")

        assert result.health_score == FRESH_SCORE
        mock_repository.save_health.assert_awaited_once_with(
            project, FRESH_SCORE, ProjectStatus.AT_RISK
        )
        mock_repository.log_activity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recompute_overwrites_completed_status(self, mock_repository):
        project = make_project(status="Completed")
        recomputer = HealthRecomputer(mock_repository)

        await recomputer.recompute(project, "admin-1")

        kwargs = mock_repository.log_activity.await_args.kwargs
        assert kwargs["details"]["previous_status"] == "Completed"
        assert kwargs["details"]["source"] == "mutation"

    @pytest.mark.asyncio
    async def test_reads_bounded_window(self, mock_repository):
        project = make_project()
        recomputer = HealthRecomputer(mock_repository, window_size=4)

        await recomputer.evaluate(project)

        mock_repository.recent_check_ins.assert_awaited_once_with(project.id, 4)
        mock_repository.recent_feedback.assert_awaited_once_with(project.id, 4)
        mock_repository.open_risks.assert_awaited_once_with(project.id)

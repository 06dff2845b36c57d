"""
pytest configuration and fixtures.

Author: ProjectPulse Team
Version: 1.0.0
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from shared.schemas.tracking import UserRole
from pulse.tracking.access import Actor
from pulse.tracking.repository import TrackingRepository


# Services score against the real clock
NOW = datetime.now(timezone.utc)


@pytest.fixture
def now():
    """Evaluation time the fixture projects are scheduled around."""
    return NOW


@pytest.fixture
def admin():
    return Actor(user_id="admin-1", role=UserRole.ADMIN)


@pytest.fixture
def employee():
    return Actor(user_id="emp-1", role=UserRole.EMPLOYEE)


@pytest.fixture
def client_user():
    return Actor(user_id="client-1", role=UserRole.CLIENT)


def make_user(user_id: str, role: UserRole, name: str = "Test User"):
    """Stand-in for a UserDB row."""
    return SimpleNamespace(
        id=user_id,
        email=f"{user_id}@projectpulse.com",
        name=name,
        role=role.value,
        password_hash="",
        created_at=NOW,
    )


def make_project(
    project_id: str = "proj-1",
    client_id: str = "client-1",
    health_score: int = 70,
    status: str = "On Track",
    elapsed_days: int = 30,
    remaining_days: int = 30,
):
    """Stand-in for a ProjectDB row scheduled around NOW."""
    return SimpleNamespace(
        id=project_id,
        name="Website Relaunch",
        description="Relaunch of the marketing site",
        client_id=client_id,
        start_date=NOW - timedelta(days=elapsed_days),
        end_date=NOW + timedelta(days=remaining_days),
        status=status,
        health_score=health_score,
        created_at=NOW - timedelta(days=elapsed_days),
        updated_at=NOW,
    )


@pytest.fixture
def project():
    return make_project()


@pytest.fixture
def users():
    return {
        "admin-1": make_user("admin-1", UserRole.ADMIN, "Admin User"),
        "emp-1": make_user("emp-1", UserRole.EMPLOYEE, "John Developer"),
        "emp-2": make_user("emp-2", UserRole.EMPLOYEE, "Sarah Engineer"),
        "client-1": make_user("client-1", UserRole.CLIENT, "Client Representative"),
        "client-2": make_user("client-2", UserRole.CLIENT, "Another Client"),
    }


@pytest.fixture
def mock_repository(project, users):
    """
    AsyncMock TrackingRepository holding a single empty project
    with ``emp-1`` assigned.
    """
    repo = AsyncMock(spec=TrackingRepository)
    repo.db = AsyncMock()

    async def _add(record):
        if getattr(record, "id", None) is None:
            record.id = "new-1"
        if getattr(record, "created_at", None) is None:
            record.created_at = NOW
        if hasattr(record, "updated_at") and record.updated_at is None:
            record.updated_at = NOW
        return record

    async def _get_users(ids):
        return {uid: users[uid] for uid in ids if uid in users}

    repo.add.side_effect = _add
    repo.get_users.side_effect = _get_users
    repo.get_project.return_value = project
    repo.get_employee_ids.return_value = {project.id: ["emp-1"]}
    repo.is_employee_assigned.return_value = True
    repo.find_check_in.return_value = None
    repo.find_feedback.return_value = None
    repo.recent_check_ins.return_value = []
    repo.recent_feedback.return_value = []
    repo.open_risks.return_value = []
    repo.list_activities.return_value = []
    return repo


@pytest.fixture
def this_monday():
    return NOW.date() - timedelta(days=NOW.weekday())

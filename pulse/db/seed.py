"""
Demo Data Seeder
================

Resets the database and loads demo users, projects, check-ins, feedback,
risks and activity, then scores every project.

Dates are laid out relative to the current week so the demo stays live.

Usage:
    python -m pulse.db.seed

Passwords default to the demo values below and can be overridden with
SEED_ADMIN_PASSWORD, SEED_EMPLOYEE_PASSWORD and SEED_CLIENT_PASSWORD.

Author: ProjectPulse Team
Version: 1.0.0
"""

import asyncio
import os
from datetime import datetime, time, timedelta, timezone
from typing import Dict, List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from shared.schemas.tracking import ActivityType, RiskStatus, UserRole
from pulse.config import settings
from pulse.db.models import (
    ActivityLogDB,
    CheckInDB,
    FeedbackDB,
    ProjectDB,
    ProjectEmployeeDB,
    RiskDB,
    UserDB,
)
from pulse.db.session import close_db, get_session_factory, init_db
from pulse.logging import get_logger, setup_logging
from pulse.tracking.access import start_of_week
from pulse.tracking.health import HealthRecomputer
from pulse.tracking.repository import TrackingRepository
from pulse.tracking.users import UsersService


logger = get_logger(__name__)

DEMO_USERS = [
    ("admin@projectpulse.com", "Admin User", UserRole.ADMIN),
    ("employee@projectpulse.com", "John Developer", UserRole.EMPLOYEE),
    ("employee2@projectpulse.com", "Sarah Engineer", UserRole.EMPLOYEE),
    ("client@projectpulse.com", "Client Representative", UserRole.CLIENT),
    ("client2@projectpulse.com", "Another Client", UserRole.CLIENT),
]

DEFAULT_PASSWORDS = {
    UserRole.ADMIN: os.environ.get("SEED_ADMIN_PASSWORD", "Admin@123"),
    UserRole.EMPLOYEE: os.environ.get("SEED_EMPLOYEE_PASSWORD", "Employee@123"),
    UserRole.CLIENT: os.environ.get("SEED_CLIENT_PASSWORD", "Client@123"),
}

# Child rows first
_TABLES = (ActivityLogDB, RiskDB, FeedbackDB, CheckInDB, ProjectEmployeeDB, ProjectDB, UserDB)


def _at(day, hour: int = 12) -> datetime:
    return datetime.combine(day, time(hour), tzinfo=timezone.utc)


async def clear_data(session: AsyncSession) -> None:
    for model in _TABLES:
        await session.execute(delete(model))
    await session.flush()


async def seed_users(repo: TrackingRepository) -> Dict[str, UserDB]:
    service = UsersService(repo)
    users = {}
    for email, name, role in DEMO_USERS:
        users[email] = await service.create_user(email, DEFAULT_PASSWORDS[role], name, role)
    return users


async def seed_projects(
    repo: TrackingRepository,
    users: Dict[str, UserDB],
    now: datetime,
) -> List[ProjectDB]:
    admin = users["admin@projectpulse.com"]
    employee1 = users["employee@projectpulse.com"]
    employee2 = users["employee2@projectpulse.com"]
    client1 = users["client@projectpulse.com"]
    client2 = users["client2@projectpulse.com"]

    specs = [
        (
            "E-Commerce Platform Redesign",
            "Complete overhaul of the company e-commerce platform with modern UI/UX "
            "and improved performance",
            client1, [employee1, employee2], now - timedelta(days=50), now + timedelta(days=70),
        ),
        (
            "Mobile App Development",
            "Native mobile application for iOS and Android with real-time synchronization",
            client1, [employee1], now - timedelta(days=20), now + timedelta(days=130),
        ),
        (
            "CRM System Integration",
            "Integration of third-party CRM system with existing infrastructure",
            client2, [employee2], now - timedelta(days=65), now + timedelta(days=55),
        ),
    ]

    projects = []
    for name, description, client, employees, start, end in specs:
        project = await repo.add(ProjectDB(
            name=name,
            description=description,
            client_id=client.id,
            start_date=start,
            end_date=end,
            status="On Track",
            health_score=settings.initial_health_score,
            created_at=start,
        ))
        await repo.set_employees(project.id, [e.id for e in employees])
        await repo.log_activity(
            project_id=project.id,
            user_id=admin.id,
            activity_type=ActivityType.STATUS_CHANGE,
            description="Project created",
        )
        projects.append(project)
    return projects


async def seed_activity(
    repo: TrackingRepository,
    users: Dict[str, UserDB],
    projects: List[ProjectDB],
    now: datetime,
) -> None:
    employee1 = users["employee@projectpulse.com"]
    employee2 = users["employee2@projectpulse.com"]
    client1 = users["client@projectpulse.com"]
    client2 = users["client2@projectpulse.com"]
    redesign, mobile, crm = projects

    this_week = start_of_week(now.date())
    last_week = this_week - timedelta(days=7)

    check_ins = [
        (redesign, employee1, last_week, 2,
         "Implemented shopping cart functionality and product listings", "", 5, 30),
        (redesign, employee1, this_week, 1,
         "Completed initial design mockups and started frontend implementation",
         "Waiting for client approval on final design", 4, 35),
        (mobile, employee1, this_week, 2,
         "Set up development environment and basic app structure",
         "Facing issues with push notification setup", 3, 20),
        (crm, employee2, this_week, 3,
         "API integration partially complete",
         "CRM vendor response time is slow, causing delays", 2, 40),
    ]
    for project, employee, week, day, summary, blockers, confidence, completion in check_ins:
        await repo.add(CheckInDB(
            project_id=project.id,
            employee_id=employee.id,
            week_start_date=week,
            progress_summary=summary,
            blockers=blockers,
            confidence_level=confidence,
            completion_percentage=completion,
            created_at=min(_at(week + timedelta(days=day)), now),
        ))
        await repo.log_activity(
            project_id=project.id,
            user_id=employee.id,
            activity_type=ActivityType.CHECKIN,
            description="Employee submitted weekly check-in",
            details={"confidence_level": confidence, "completion_percentage": completion},
        )

    feedback = [
        (redesign, client1, last_week, 4, 4, 5,
         "Good work, slight delay but overall satisfied with the direction.", False),
        (redesign, client1, this_week, 4, 5, 5,
         "Excellent progress! The team is very responsive and delivers quality work.", False),
        (mobile, client1, this_week, 4, 3, 4,
         "Concerned about the pace of development. Need more frequent updates.", True),
        (crm, client2, this_week, 4, 2, 2,
         "Very dissatisfied with progress. Multiple deadlines missed.", True),
    ]
    for project, client, week, day, satisfaction, communication, comments, flagged in feedback:
        await repo.add(FeedbackDB(
            project_id=project.id,
            client_id=client.id,
            week_start_date=week,
            satisfaction_rating=satisfaction,
            communication_rating=communication,
            comments=comments,
            issue_flagged=flagged,
            created_at=min(_at(week + timedelta(days=day)), now),
        ))
        await repo.log_activity(
            project_id=project.id,
            user_id=client.id,
            activity_type=ActivityType.FEEDBACK,
            description="Client submitted feedback",
            details={
                "satisfaction_rating": satisfaction,
                "communication_rating": communication,
                "issue_flagged": flagged,
            },
        )

    risks = [
        (mobile, employee1, "Push Notification Implementation Delay", "Medium",
         "Researching alternative push notification services. Will decide by end of week.",
         RiskStatus.OPEN),
        (crm, employee2, "CRM Vendor API Documentation Incomplete", "High",
         "Scheduled call with vendor support team. May need to request contract "
         "addendum for better support.",
         RiskStatus.OPEN),
        (crm, employee2, "Data Migration Complexity", "High",
         "Hired external consultant with CRM migration experience. Additional 2 weeks "
         "buffer added to timeline.",
         RiskStatus.OPEN),
        (redesign, employee1, "Browser Compatibility Issues", "Low",
         "Fixed using polyfills. Testing in progress.",
         RiskStatus.RESOLVED),
    ]
    for project, employee, title, severity, plan, risk_status in risks:
        risk = await repo.add(RiskDB(
            project_id=project.id,
            employee_id=employee.id,
            title=title,
            severity=severity,
            mitigation_plan=plan,
            status=risk_status.value,
        ))
        await repo.log_activity(
            project_id=project.id,
            user_id=employee.id,
            activity_type=ActivityType.RISK_CREATED,
            description=f"New {severity} risk reported: {title}",
            details={"risk_id": risk.id, "severity": severity},
        )


async def seed() -> None:
    """Reset the database and load the demo data set."""
    await init_db()

    now = datetime.now(timezone.utc)

    async with get_session_factory()() as session:
        try:
            repo = TrackingRepository(session)

            logger.info("Clearing existing data")
            await clear_data(session)

            users = await seed_users(repo)
            projects = await seed_projects(repo, users, now)
            await seed_activity(repo, users, projects, now)

            recomputer = HealthRecomputer(repo)
            admin_id = users["admin@projectpulse.com"].id
            for project in projects:
                result = await recomputer.recompute(project, admin_id)
                logger.info(
                    "project_scored",
                    project=project.name,
                    health_score=result.health_score,
                    status=result.status.value,
                )

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    logger.info("seed_completed", users=len(users), projects=len(projects))
    for email, _, role in DEMO_USERS:
        print(f"{role.value:<9} {email} / {DEFAULT_PASSWORDS[role]}")


async def main() -> None:
    try:
        await seed()
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging(level=settings.log_level, json_output=False)
    asyncio.run(main())

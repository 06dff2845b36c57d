"""
Database Models
===============

SQLAlchemy ORM models for ProjectPulse persistence.

Tables:
    - users: Accounts for admins, employees and clients
    - projects: Tracked projects with their current health score
    - project_employees: Employee assignments
    - check_ins: Weekly employee progress reports
    - feedback: Weekly client satisfaction reports
    - risks: Employee-reported risks
    - activity_logs: Append-only project activity trail

Author: ProjectPulse Team
Version: 1.0.0
"""

from datetime import date, datetime
from typing import Any, Dict

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pulse.db.base import Base, CreatedAtMixin, TimestampMixin, generate_uuid


class UserDB(Base, TimestampMixin):
    """Application user."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)


class ProjectDB(Base, TimestampMixin):
    """Tracked project. ``health_score`` and ``status`` are derived values."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    client_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    start_date: Mapped[datetime] = mapped_column(nullable=False)
    end_date: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="On Track")
    health_score: Mapped[int] = mapped_column(Integer, nullable=False, default=70)


class ProjectEmployeeDB(Base):
    """Assignment of an employee to a project."""

    __tablename__ = "project_employees"

    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), primary_key=True, index=True
    )


class CheckInDB(Base, CreatedAtMixin):
    """Weekly employee check-in."""

    __tablename__ = "check_ins"
    __table_args__ = (
        UniqueConstraint("project_id", "employee_id", "week_start_date", name="uq_checkin_week"),
        Index("ix_check_ins_project_created", "project_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    progress_summary: Mapped[str] = mapped_column(Text, nullable=False)
    blockers: Mapped[str] = mapped_column(Text, nullable=False, default="")
    confidence_level: Mapped[int] = mapped_column(Integer, nullable=False)
    completion_percentage: Mapped[float] = mapped_column(Float, nullable=False)


class FeedbackDB(Base, CreatedAtMixin):
    """Weekly client feedback."""

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("project_id", "client_id", "week_start_date", name="uq_feedback_week"),
        Index("ix_feedback_project_created", "project_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    satisfaction_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    communication_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    issue_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class RiskDB(Base, TimestampMixin):
    """Risk reported against a project."""

    __tablename__ = "risks"
    __table_args__ = (
        Index("ix_risks_project_status", "project_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    severity: Mapped[str] = mapped_column(String(10), nullable=False)
    mitigation_plan: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="Open")


class ActivityLogDB(Base, CreatedAtMixin):
    """Append-only activity entry."""

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_project_created", "project_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    details: Mapped[Dict[str, Any]] = mapped_column("metadata", JSON, nullable=False, default=dict)

"""
Project Tracking Schemas
========================

Enumerations and request/response models for the ProjectPulse REST API.

Input validation for ratings (1-5), completion (0-100) and risk severity
happens here, at the point of record creation. The health-score engine
trusts whatever it is handed.

Author: ProjectPulse Team
Version: 1.0.0
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enumerations
# =============================================================================


class UserRole(str, Enum):
    """User roles for RBAC."""
    ADMIN = "admin"          # Manages projects and users
    EMPLOYEE = "employee"    # Submits check-ins and reports risks
    CLIENT = "client"        # Submits feedback


class ProjectStatus(str, Enum):
    """Project status label. COMPLETED is only ever set by an admin."""
    ON_TRACK = "On Track"
    AT_RISK = "At Risk"
    CRITICAL = "Critical"
    COMPLETED = "Completed"


class RiskSeverity(str, Enum):
    """Risk severity levels."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskStatus(str, Enum):
    """Risk lifecycle status."""
    OPEN = "Open"
    RESOLVED = "Resolved"


class ActivityType(str, Enum):
    """Activity log entry types."""
    CHECKIN = "checkin"
    FEEDBACK = "feedback"
    RISK_CREATED = "risk_created"
    RISK_UPDATED = "risk_updated"
    STATUS_CHANGE = "status_change"


# =============================================================================
# Auth
# =============================================================================


class LoginRequest(BaseModel):
    """Credentials for POST /auth/login."""
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class UserSummary(BaseModel):
    """Public view of a user (never includes the password hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole


class UserResponse(UserSummary):
    """User listing entry."""
    created_at: datetime


class LoginResponse(BaseModel):
    """Issued access token plus the authenticated user."""
    user: UserSummary
    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


# =============================================================================
# Projects
# =============================================================================


class ProjectCreate(BaseModel):
    """Request model for creating a project."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    client_id: str = Field(..., description="Owning client user ID")
    employee_ids: List[str] = Field(..., min_length=1, description="Assigned employee user IDs")
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_dates(self) -> "ProjectCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class ProjectUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    client_id: Optional[str] = None
    employee_ids: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[ProjectStatus] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ProjectResponse(BaseModel):
    """Project with its client and assigned employees populated."""
    id: str
    name: str
    description: str
    client_id: str
    employee_ids: List[str]
    start_date: datetime
    end_date: datetime
    status: ProjectStatus
    health_score: int = Field(..., ge=0, le=100)
    created_at: datetime
    updated_at: datetime
    client: Optional[UserSummary] = None
    employees: List[UserSummary] = Field(default_factory=list)


class HealthComponent(BaseModel):
    """One weighted sub-score of the health score."""
    name: str
    weight: int
    value: float = Field(..., ge=0.0, le=1.0)
    points: float


class ProjectHealthResponse(BaseModel):
    """Health-score breakdown for GET /projects/{id}/health."""
    project_id: str
    health_score: int = Field(..., ge=0, le=100)
    status: ProjectStatus
    components: List[HealthComponent]
    expected_progress: float
    actual_progress: float
    summary: str
    weakest_components: List[str]
    recommendations: List[str]
    calculated_at: datetime


# =============================================================================
# Check-ins
# =============================================================================


class CheckInCreate(BaseModel):
    """Weekly employee check-in."""
    project_id: str
    progress_summary: str = Field(..., min_length=1)
    blockers: str = Field(default="")
    confidence_level: int = Field(..., ge=1, le=5)
    completion_percentage: float = Field(..., ge=0.0, le=100.0)
    week_start_date: Optional[date] = Field(
        None,
        description="Monday of the reported week (defaults to the current week)"
    )


class CheckInResponse(BaseModel):
    """Stored check-in with the submitting employee populated."""
    id: str
    project_id: str
    employee_id: str
    week_start_date: date
    progress_summary: str
    blockers: str
    confidence_level: int
    completion_percentage: float
    created_at: datetime
    employee: Optional[UserSummary] = None


# =============================================================================
# Feedback
# =============================================================================


class FeedbackCreate(BaseModel):
    """Weekly client feedback."""
    project_id: str
    satisfaction_rating: int = Field(..., ge=1, le=5)
    communication_rating: int = Field(..., ge=1, le=5)
    comments: str = Field(default="")
    issue_flagged: bool = Field(default=False)
    week_start_date: Optional[date] = None


class FeedbackResponse(BaseModel):
    """Stored feedback with the submitting client populated."""
    id: str
    project_id: str
    client_id: str
    week_start_date: date
    satisfaction_rating: int
    communication_rating: int
    comments: str
    issue_flagged: bool
    created_at: datetime
    client: Optional[UserSummary] = None


# =============================================================================
# Risks
# =============================================================================


class RiskCreate(BaseModel):
    """New risk report."""
    project_id: str
    title: str = Field(..., min_length=1, max_length=255)
    severity: RiskSeverity
    mitigation_plan: str = Field(..., min_length=1)


class RiskUpdate(BaseModel):
    """Partial risk update; a status change resolves or reopens the risk."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    severity: Optional[RiskSeverity] = None
    mitigation_plan: Optional[str] = Field(None, min_length=1)
    status: Optional[RiskStatus] = None


class RiskResponse(BaseModel):
    """Stored risk with the reporting employee populated."""
    id: str
    project_id: str
    employee_id: str
    title: str
    severity: RiskSeverity
    mitigation_plan: str
    status: RiskStatus
    created_at: datetime
    updated_at: datetime
    employee: Optional[UserSummary] = None


# =============================================================================
# Activity
# =============================================================================


class ActivityResponse(BaseModel):
    """Activity log entry."""
    id: str
    project_id: str
    user_id: str
    type: ActivityType
    description: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    user: Optional[UserSummary] = None

"""
ProjectPulse Shared Schemas Package
===================================

Data types shared by the API layer, tracking services and scoring engine.

This package provides:
    - Enumerations: roles, project status, risk severity/status, activity types
    - Request models: validated payloads for every mutation
    - Response models: serialized views of persisted records

Author: ProjectPulse Team
Version: 1.0.0
"""

from shared.schemas.tracking import (
    ActivityResponse,
    ActivityType,
    CheckInCreate,
    CheckInResponse,
    FeedbackCreate,
    FeedbackResponse,
    HealthComponent,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProjectCreate,
    ProjectHealthResponse,
    ProjectResponse,
    ProjectStatus,
    ProjectUpdate,
    RiskCreate,
    RiskResponse,
    RiskSeverity,
    RiskStatus,
    RiskUpdate,
    UserResponse,
    UserRole,
    UserSummary,
)

__all__ = [
    # Enumerations
    "ActivityType",
    "ProjectStatus",
    "RiskSeverity",
    "RiskStatus",
    "UserRole",
    # Requests
    "CheckInCreate",
    "FeedbackCreate",
    "LoginRequest",
    "ProjectCreate",
    "ProjectUpdate",
    "RiskCreate",
    "RiskUpdate",
    # Responses
    "ActivityResponse",
    "CheckInResponse",
    "FeedbackResponse",
    "HealthComponent",
    "LoginResponse",
    "MessageResponse",
    "ProjectHealthResponse",
    "ProjectResponse",
    "RiskResponse",
    "UserResponse",
    "UserSummary",
]

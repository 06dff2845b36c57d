"""
ProjectPulse Service Contracts
==============================

Models returned by the health probes that orchestration and monitoring
consume.

Version: 1.0.0
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DependencyHealth(BaseModel):
    """Health of a dependency."""
    name: str
    status: str  # healthy, unavailable, unhealthy
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ServiceHealth(BaseModel):
    """
    ProjectPulse health status.

    Monitoring calls: GET /health
    """
    service: str = Field(default="projectpulse")
    status: str  # healthy, degraded, unhealthy
    version: str
    uptime_seconds: float
    dependencies: List[DependencyHealth]
    timestamp: datetime

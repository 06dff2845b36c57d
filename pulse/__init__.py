"""
ProjectPulse Core Package
=========================

Project-status tracking service with a deterministic health-score engine.

This package contains:
    - api/: FastAPI REST API layer
    - scoring/: Project health-score engine
    - tracking/: Projects, check-ins, feedback, risks and activity services
    - db/: SQLAlchemy persistence layer

Author: ProjectPulse Team
Version: 1.0.0
"""

__version__ = "1.0.0"

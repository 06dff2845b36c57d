"""
Tracking Errors
===============

Exceptions raised by the tracking services. The API layer maps each one
onto an HTTP status through ``status_code``.

Author: ProjectPulse Team
Version: 1.0.0
"""


class TrackingError(Exception):
    """Base class for tracking service failures."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailedError(TrackingError):
    """Request is well-formed but violates a business rule."""

    status_code = 400


class DuplicateSubmissionError(TrackingError):
    """A weekly check-in or feedback entry already exists."""

    status_code = 400


class AuthenticationError(TrackingError):
    """Credentials are missing or wrong."""

    status_code = 401


class AccessDeniedError(TrackingError):
    """Caller may not act on this resource."""

    status_code = 403


class NotFoundError(TrackingError):
    """Requested resource does not exist."""

    status_code = 404

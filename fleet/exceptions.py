# fleet/exceptions.py
"""
Error taxonomy shared by services and the API layer.
Services raise these; fleet.main maps each one to a single HTTP status.
"""

from typing import Any, Optional


class FleetError(Exception):
    """Base class for every error a service raises on purpose."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(FleetError):
    """Malformed, missing or out-of-enum input. `details` lists the offending fields."""

    status_code = 400


class UnauthorizedError(FleetError):
    """Missing or invalid caller identity on a protected operation."""

    status_code = 401


class NotFoundError(FleetError):
    """A referenced id does not exist."""

    status_code = 404


class ConflictError(FleetError):
    """Business invariant violation: unavailable vehicle/client, duplicate key, terminal assignment."""

    status_code = 409


class InternalError(FleetError):
    """Storage or unexpected failure. The message is logged, never returned to the caller."""

    status_code = 500

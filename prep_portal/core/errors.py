"""
Error taxonomy.

Services raise these; the exception handlers in main.py turn them into
HTTP responses. Anything not listed here becomes a generic 500.
"""

from typing import Dict, Optional


class PortalError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Field-level validation failure. `errors` maps field path -> message."""

    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors


class NotFoundError(PortalError):
    status_code = 404


class ConflictError(PortalError):
    """Request is well-formed but conflicts with current state."""

    status_code = 400


class AuthorizationError(PortalError):
    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code


class TransientExternalError(PortalError):
    """Webhook / storage failure. Always caught and logged, never returned."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause

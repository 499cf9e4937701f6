"""
Forge API - Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for each error class the API exposes.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers registered in main.py map them to status codes
       and a uniform JSON body; context is logged, never returned for 5xx.
Who:   Raised by services, the credential store and the authorization guard.

Exception Hierarchy:
    ForgeApiError (base)
    ├── ValidationError      → 400 Bad Request
    ├── UnauthorizedError    → 401 Unauthorized
    ├── NotFoundError        → 404 Not Found
    ├── ConflictError        → 409 Conflict
    ├── DatabaseError        → 500 Internal Server Error
    ├── InternalError        → 500 Internal Server Error
    ├── TokenError           (codec failure, surfaced as InternalError)
    │   └── InvalidTokenError (bad signature, malformed, expired → 401)
    └── MissingSecretError   (startup failure, never reaches a request)
"""

from typing import Any, Dict, Optional


class ForgeApiError(Exception):
    """
    Base exception for all Forge API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ForgeApiError):
    """
    Raised when client input is missing or invalid.

    HTTP: 400 Bad Request. Schema-level failures detected by FastAPI itself
    (e.g. an empty note text) keep FastAPI's 422 response.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(ForgeApiError):
    """
    Raised for bad credentials and for missing, invalid or expired tokens.

    The message is deliberately the same for every cause so callers cannot
    tell an unknown user from a wrong password, or a tampered token from an
    expired one. The cause goes into context for the server log.
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ForgeApiError):
    """Raised when a requested resource does not exist (HTTP 404)."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ForgeApiError):
    """Raised when a write violates a uniqueness constraint (HTTP 409)."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ForgeApiError):
    """
    Raised when a database operation fails unexpectedly.

    The client always gets a generic message; the driver error text is kept
    in context and only written to the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(ForgeApiError):
    """Raised for non-database server faults, e.g. a token that cannot be issued."""

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenError(ForgeApiError):
    """Raised by the token codec when a token cannot be produced."""

    def __init__(
        self,
        message: str = "Token could not be issued",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(TokenError):
    """Raised by the token codec when a token is malformed, tampered with or expired."""

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingSecretError(ForgeApiError):
    """Raised at startup when production runs without a token signing secret."""

    def __init__(
        self,
        message: str = "Token signing secret is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

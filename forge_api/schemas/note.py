"""
Forge API - Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract for notes, errors and health.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and generates the OpenAPI document from them.

Schemas are kept apart from the SQLAlchemy models so the API never exposes
columns it does not mean to (e.g. users.password_hash).
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteChangeset(BaseModel):
    """
    Body for creating or replacing a note.

    An empty text fails schema validation, which FastAPI answers with 422.
    """
    text: str = Field(min_length=1, description="Note body (must not be empty)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """A stored note as returned by the notes endpoints."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    text: str = Field(description="Note body")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "success": false,
            "error": "unauthorized",
            "message": "Invalid credentials",
            "request_id": "1f0c9a2e"
        }
    """
    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    environment: str = Field(description="Environment the service runs in")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

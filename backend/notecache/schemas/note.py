"""
NoteCache — Pydantic Response Schemas
======================================

What:  Pydantic models defining the JSON side of the API contract.
Why:   Automatic serialization and OpenAPI doc generation at /docs.
Who:   NoteStore.list() returns Note items; route handlers declare these as
       response models.

Plain-text endpoints (GET/PUT /notes/{name}) and the form-encoded POST /write
have no JSON schema; only the listing, errors, and health check do.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Note(BaseModel):
    """
    What:  A stored note as it appears in GET /notes.
    Why:   The listing returns every note with its full text, not a preview.
    """
    name: str = Field(description="Note name (file name without the .txt suffix)")
    text: str = Field(description="Full stored content")

    model_config = {"frozen": True}


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and storage status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Storage root status: writable, unavailable")
    notes: int = Field(description="Number of notes currently stored")
    uptime_seconds: float = Field(description="Seconds since service started")

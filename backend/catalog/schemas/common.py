"""
Catalog Backend: Shared Pydantic Schemas
=========================================

What:  Response shapes shared by every resource: errors, health, pagination.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context; validation errors put the ordered
                 violation list under details.errors
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Request payload failed validation",
            "details": {"errors": [{"field": "name", "reason": "Field required"}]},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class PageInfo(BaseModel):
    """Offset pagination state returned alongside every list."""
    total_count: int = Field(description="Total number of rows matching the filter")
    limit: int = Field(description="Page size used for this response")
    offset: int = Field(description="Number of rows skipped")
    has_more: bool = Field(description="Whether rows exist past this page")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

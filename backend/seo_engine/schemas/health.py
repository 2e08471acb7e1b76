"""
SEO Engine Backend: Pydantic Response Schemas
================================================

What:  Pydantic models defining the API contract for the health endpoint and
       the error envelope shared by every non-2xx response.
Why:   FastAPI reflects over these models to serialize responses and to
       derive the component schemas of the OpenAPI manifest.
When:  Serialized on every response; reflected once at startup.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from seo_engine import __version__


class HealthResponse(BaseModel):
    """
    What:  Liveness payload returned by GET /health.
    Who:   Deployment infrastructure (Docker HEALTHCHECK, orchestrator probes).

    Created fresh for each request and discarded after serialization.
    """
    status: str = Field(
        default="ok",
        description="Service status; always \"ok\" while the process is serving",
        examples=["ok"],
    )
    version: str = Field(
        default=__version__,
        description="Application version",
        examples=[__version__],
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the response was produced (UTC ISO 8601)",
    )


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.
    Why:   Clients need a consistent structure to parse errors programmatically.

    Example:
        {
            "error": "not_found",
            "message": "No route matches GET /nonexistent",
            "details": null,
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code", examples=["not_found"])
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")

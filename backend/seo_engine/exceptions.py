"""
SEO Engine Backend: Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for the few error scenarios
       this service has.
Why:   Custom exceptions let global handlers return one consistent error
       format, and let startup code report manifest problems precisely.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch the runtime
       ones and return structured JSON error responses.

Exception Hierarchy:
    SeoEngineError (base)      → 500 Internal Server Error
    └── ManifestError          → startup abort (never served)

Routing misses are not modelled here: Starlette raises HTTPException(404)
and main.register_exception_handlers() renders it as an ErrorResponse.
"""

from typing import Any, Dict, Optional


class SeoEngineError(Exception):
    """
    Base exception for all SEO Engine application errors.

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


class ManifestError(SeoEngineError):
    """
    Raised when the API documentation manifest is inconsistent.

    What:    The generated OpenAPI document references a schema that is not
             defined, uses an undeclared tag, disagrees with the route table,
             or is not an OpenAPI 3.0.x document.
    When:    During create_app(), after routes are registered.
    Effect:  The application is never created, so uvicorn refuses to start.

    Attributes:
        location: JSON location of the problem (e.g. "paths./health.get...")
        schema:   Name of the offending schema, when there is one
    """

    def __init__(
        self,
        message: str = "API documentation manifest is invalid",
        location: Optional[str] = None,
        schema: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if location:
            ctx["location"] = location
        if schema:
            ctx["schema"] = schema
        super().__init__(message=message, context=ctx)
        self.location = location
        self.schema = schema

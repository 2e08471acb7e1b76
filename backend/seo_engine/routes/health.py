"""
SEO Engine Backend: Health Check Route
=========================================

What:  Liveness endpoint for container and orchestrator probes.
Why:   Deployment infrastructure needs a cheap, always-available signal that
       the process is up and serving HTTP.
How:   Returns a fixed payload with status "ok" plus version and timestamp.
Who:   Called by Docker HEALTHCHECK, load balancers, and uptime monitors.

The service has no downstream dependencies, so there is nothing to probe and
no degraded state: if this handler runs, the service is healthy.
"""

from fastapi import APIRouter, Request

from seo_engine.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "Health check endpoint", "model": HealthResponse},
    },
    summary="Health check endpoint",
    description="Returns a fixed payload and HTTP 200 whenever the service is running.",
)
async def health_check(request: Request) -> HealthResponse:
    """Report that the service is alive."""
    return HealthResponse(status="ok", version=request.app.state.settings.api_version)


# Probers that only check the status line send HEAD. Hidden from the manifest,
# where the GET operation already describes the endpoint.
router.add_api_route(
    "/health",
    health_check,
    methods=["HEAD"],
    response_model=HealthResponse,
    include_in_schema=False,
)

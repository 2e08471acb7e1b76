"""
SEO Engine Backend: Request ID Middleware
============================================

What:  Assigns a correlation ID to each incoming request and returns it in
       the X-Request-ID response header.
Why:   Error bodies and access log lines carry the same ID, so a client
       report can be matched to the server log.
How:   Uses the client-provided X-Request-ID when present, otherwise a short
       UUID; stores it in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Echo the client's X-Request-ID header if it sent one
        2. Otherwise generate an 8-character UUID prefix
        3. Store it in the ContextVar (loggers, exception handlers)
           and request.state (route handlers)
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

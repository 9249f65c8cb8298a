"""
NoteFlow Backend — Request ID Middleware
==========================================

What:  Assigns a short ID to each incoming request and returns it in X-Request-ID.
Why:   Lets operators match a failed AI call in the logs to the response a
       user saw, without putting anything beyond {error, details} in the body.
How:   Reuses a client-supplied X-Request-ID or generates one, stores it in a
       ContextVar for loggers and on request.state for handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

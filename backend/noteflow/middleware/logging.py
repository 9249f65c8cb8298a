"""
NoteFlow Backend — Access Logging Middleware
==============================================

What:  One access-log line per request on the `noteflow.access` logger.
Why:   AI endpoints are slow (dominated by the provider call) and cost
       money; per-request duration and status are the first things
       operators look at when a user reports "summarize is broken".
How:   Times call_next and logs method, path, status, duration, request ID
       and client. AI calls also carry the operation name as an `extra`
       field so log pipelines can group by it.

Privacy:
    Request and response bodies are never logged: they hold note content,
    prompts and passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from noteflow.middleware.request_id import request_id_var

logger = logging.getLogger("noteflow.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def ai_operation(path: str) -> str:
    """'/ai/summarize' → 'summarize'; '' for non-AI paths."""
    prefix, _, operation = path.partition("/ai/")
    return operation if not prefix and operation else ""


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        request_id = request_id_var.get("")
        client = request.client.host if request.client else "unknown"
        operation = ai_operation(path)

        logger.log(
            level_for_status(response.status_code),
            "%s %s → %d in %.0fms [%s] %s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id,
            client,
            extra={
                "request_id": request_id,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 1),
                "ai_operation": operation or None,
            },
        )
        return response

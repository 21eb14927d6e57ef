"""
TaskNest Backend — Access Log Middleware
==========================================

What:  One line per API call on the `tasknest.access` logger.
How:   Times the downstream stack and logs method, route template, status
       and latency. The request id is attached by RequestIDLogFilter.

    GET /api/checklists/{checklist_id}/tasks 200 3.2ms

The route template is logged instead of the raw path so ids do not fan out
into one log key per checklist. Bodies are never logged (passwords).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tasknest.access")

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    """`/api/tasks/{task_id}` for a matched route, else the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms",
            request.method,
            route_template(request),
            response.status_code,
            elapsed_ms,
            extra={"duration_ms": round(elapsed_ms, 2)},
        )
        return response

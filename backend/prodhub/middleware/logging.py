"""
AI Productivity Hub Backend — Request Logging Middleware
=========================================================

What:  One access-log line per request: route kind, method, path, status,
       duration, request ID and client address.
Why:   Scheduler invocations and admin reads are rare and important; each
       one should be visible with its outcome and latency.
How:   Level follows the status class so alerting can key off severity:
       5xx → ERROR, 4xx → WARNING (rejected cron calls show up here), else INFO.

Never logged: headers (Authorization and x-admin-key carry secrets), bodies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from prodhub.middleware.request_id import request_id_var

logger = logging.getLogger("prodhub.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_kind(path: str) -> str:
    """Coarse label used to filter access logs: cron, admin or api."""
    if path.startswith("/api/cron") or path == "/api/notifications":
        return "cron"
    if path.startswith("/api/admin"):
        return "admin"
    return "api"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request except health probes.

    Duration covers everything downstream of this middleware: the auth gate,
    the database round trips and serialization.
    """

    SKIPPED_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "kind": route_kind(request.url.path),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for_status(response.status_code),
            "[%(kind)s] %(method)s %(path)s -> %(status)d in %(duration_ms).1fms "
            "(rid=%(request_id)s, client=%(client_ip)s)",
            fields,
            extra=fields,
        )
        return response

"""
AI Productivity Hub Backend — Request ID Middleware
====================================================

What:  Tags each request with a short correlation ID and echoes it back in
       the X-Request-ID response header.
Why:   A cron run produces several log lines (gate, START, dispatches, DONE);
       the ID ties them together, and the scheduler's run log records the
       header so a failed run can be matched to server logs.
How:   Reuses a well-formed inbound X-Request-ID, otherwise generates one;
       stores it in a ContextVar (read by the access logger) and in
       request.state.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Inbound IDs end up in log lines; anything else is replaced
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(inbound: Optional[str]) -> str:
    if inbound and _VALID_REQUEST_ID.match(inbound):
        return inbound
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

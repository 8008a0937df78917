"""
Hivemind — Request ID Middleware
================================

What:  Tags every request with a correlation id and echoes it back.
How:   A client-supplied X-Request-ID is kept only when it is a short token
       of letters, digits, '.', '_' or '-'; anything else (too long, spaces,
       control characters) is replaced by a fresh 8-character hex id. The id
       is published through `request_id_var` for the access log and the
       exception handlers.
When:  Outermost middleware.

    X-Request-ID: dash-42          → dash-42
    X-Request-ID: <200 characters> → 3f9c01ab
    (none)                         → 3f9c01ab
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: Optional[str]) -> str:
    """The client's id if it is safe to log and echo, otherwise a new one."""
    if candidate and _ACCEPTED_ID.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

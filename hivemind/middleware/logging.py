"""
Hivemind — Access Log Middleware
================================

What:  One line per request on the "hivemind.access" logger, naming the
       sensor or switch the request addressed.

Line Format:
    PUT /api/sensor/boiler 202 0.6ms [3f9c01ab] sensor=boiler
    GET /api/switch/ 200 0.4ms [3f9c01ab] switch=*
    GET / 200 0.1ms [3f9c01ab]

Levels:
    501            → WARNING (a method or path this API does not serve)
    other 5xx      → ERROR
    4xx            → WARNING
    everything else → INFO

Request bodies are never logged.
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hivemind.middleware.request_id import request_id_var
from hivemind.schemas.entities import ENTITY_KINDS

logger = logging.getLogger("hivemind.access")


def resource_target(path: str) -> Optional[Tuple[str, str]]:
    """
    (kind, entity id) addressed by `path`, or None outside the resources.

    The collection path gives an empty id.
    """
    for kind in ENTITY_KINDS:
        prefix = f"/api/{kind}/"
        if path.startswith(prefix):
            return kind, path[len(prefix):].split("/")[0]
    return None


def level_for(status: int) -> int:
    if status == 501 or 400 <= status < 500:
        return logging.WARNING
    if status >= 500:
        return logging.ERROR
    return logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        path = request.url.path
        target = resource_target(path)
        suffix = f" {target[0]}={target[1] or '*'}" if target else ""

        logger.log(
            level_for(response.status_code),
            "%s %s %d %.1fms [%s]%s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(),
            suffix,
        )
        return response

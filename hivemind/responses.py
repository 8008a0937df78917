"""
Hivemind — Response Helpers
===========================

What:  Builders for the two response shapes the API produces: an empty body,
       or a JSON payload.
How:   The headers depend only on the request path, so route handlers and
       the global exception handlers attach exactly the same headers:

    /api/...                       → content-type: application/json
    /api/sensor/..., /api/switch/… → + Access-Control-Allow-Origin: *

Errors never carry a body; the status code is the whole report.
"""

from typing import Dict

from starlette.responses import Response

JSON_MEDIA_TYPE = "application/json"

API_PREFIX = "/api/"
RESOURCE_PREFIXES = ("/api/sensor/", "/api/switch/")

# Every method a route answers itself instead of letting the framework 405
HTTP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


def api_headers(path: str) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    if path.startswith(API_PREFIX):
        headers["content-type"] = JSON_MEDIA_TYPE
    if path.startswith(RESOURCE_PREFIXES):
        headers["Access-Control-Allow-Origin"] = "*"
    return headers


def empty_response(status_code: int, path: str) -> Response:
    return Response(status_code=status_code, headers=api_headers(path))


def json_response(payload: bytes, status_code: int, path: str) -> Response:
    """Already-encoded JSON payload with the API headers for `path`."""
    headers = api_headers(path)
    headers["content-type"] = JSON_MEDIA_TYPE
    return Response(content=payload, status_code=status_code, headers=headers)

"""
Hivemind — Root & Fallback Routes
=================================

What:  Answers every path that is not a sensor/switch resource.

Route Table:
    /            → 200, empty body (any method)
    /api/        → 200, empty body, JSON content type (any method)
    /api         → 301 to /api/
    /api/{rest}  → 501, JSON content type
    /{rest}      → 404, empty body

The two catch-all routes must be registered after every other router,
otherwise they would shadow the resource routes.

Routes only list HTTP_METHODS. A request with any other method (PROPFIND,
PURGE, ...) never reaches a handler; `answer_unlisted_method` gives it the
answer its path would get, so the framework's 405 is never sent.
"""

from fastapi import APIRouter, Request
from starlette.responses import RedirectResponse, Response

from hivemind.responses import API_PREFIX, HTTP_METHODS, empty_response

router = APIRouter(tags=["Root"])

# Paths the router answers with a redirect to their slash-terminated form
SLASH_REDIRECTS = ("/api", "/api/sensor", "/api/switch")


def redirect_to_slash(request: Request) -> Response:
    url = request.url.replace(path=request.url.path + "/")
    return RedirectResponse(url=str(url), status_code=301)


def answer_unlisted_method(request: Request) -> Response:
    """Response for a method that no route lists, chosen by path alone."""
    path = request.url.path
    if path in SLASH_REDIRECTS:
        return redirect_to_slash(request)
    if path == "/":
        return Response(status_code=200)
    if path == API_PREFIX:
        return empty_response(200, path)
    if path.startswith(API_PREFIX):
        # Includes the resources: their handlers answer 501 to such methods
        return empty_response(501, path)
    return Response(status_code=404)


@router.api_route("/", methods=HTTP_METHODS, include_in_schema=False)
async def root() -> Response:
    return Response(status_code=200)


@router.api_route("/api/", methods=HTTP_METHODS, include_in_schema=False)
async def api_index(request: Request) -> Response:
    return empty_response(200, request.url.path)


@router.api_route("/api", methods=HTTP_METHODS, include_in_schema=False)
async def api_redirect(request: Request) -> Response:
    return redirect_to_slash(request)


@router.api_route("/api/{endpoint:path}", methods=HTTP_METHODS, include_in_schema=False)
async def api_not_implemented(request: Request, endpoint: str) -> Response:
    return empty_response(501, request.url.path)


@router.api_route("/{unknown:path}", methods=HTTP_METHODS, include_in_schema=False)
async def not_found(unknown: str) -> Response:
    return Response(status_code=404)

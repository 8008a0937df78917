"""
Hivemind — Sensor & Switch Resource Handlers
============================================

What:  Handles everything under /api/sensor/ and /api/switch/.
How:   One route per resource matches the collection path and every path
       below it. The handler picks the id (first path segment after the
       prefix) and dispatches on the HTTP method.
Who:   Called by dashboards and devices; talks to the injected HivemindStore.

Method Table (same for both resources):
    GET  /api/sensor/       → 200, JSON array of all sensors
    GET  /api/sensor/{id}   → 200 + sensor, or 404 + zero-value sensor
    POST /api/sensor/       → decode body, upsert, 202 (bad JSON → 500)
    POST /api/sensor/{id}   → 501, creation goes through the collection
    PUT  /api/sensor/{id}   → decode body keyed by {id}, upsert, 202
    PUT  /api/sensor/       → 501, nothing to key the entity by
    anything else           → 501

PUT Bodies:
    - a JSON entity object; its ID is replaced by the path id
    - a bare scalar (decimal integer for sensors, boolean literal for
      switches) that replaces Value/State of the stored entity
    - anything else stores a zero-value entity under the path id and still
      answers 202, unless `strict_put` is set (then 400, nothing stored)
"""

import logging
from typing import Type

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from hivemind.config import Settings
from hivemind.exceptions import DecodeError, ValidationError
from hivemind.responses import HTTP_METHODS, empty_response, json_response
from hivemind.routes.root import redirect_to_slash
from hivemind.schemas.entities import Entity, Sensor, Switch
from hivemind.stores.base import HivemindStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Resources"])


# ── Dependencies ──────────────────────────────────────────────────────────

def get_store(request: Request) -> HivemindStore:
    """The store handed to create_app()."""
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ── Dispatch ──────────────────────────────────────────────────────────────

async def dispatch(
    kind: Type[Entity],
    request: Request,
    entity_path: str,
    store: HivemindStore,
    settings: Settings,
) -> Response:
    """
    Route one request on a resource to the handler for its method.

    Args:
        kind:        Sensor or Switch
        entity_path: Everything after "/api/<kind>/" ("" for the collection)
    """
    path = request.url.path
    entity_id = entity_path.split("/")[0]

    if request.method == "GET":
        return await _get(kind, store, entity_id, path)
    if request.method == "POST":
        if entity_path:
            return empty_response(501, path)
        return await _post(kind, store, await request.body(), path)
    if request.method == "PUT":
        if not entity_id:
            return empty_response(501, path)
        return await _put(kind, store, entity_id, await request.body(), settings.strict_put, path)
    return empty_response(501, path)


async def _get(kind: Type[Entity], store: HivemindStore, entity_id: str, path: str) -> Response:
    if not entity_id:
        entities = await store.get_all(kind)
        return json_response(kind.encode_many(entities), 200, path)

    entity = await store.get_one(kind, entity_id)
    if entity is None:
        # The 404 still carries a zero-value entity; existing clients parse it
        return json_response(kind().encode(), 404, path)
    return json_response(entity.encode(), 200, path)


async def _post(kind: Type[Entity], store: HivemindStore, body: bytes, path: str) -> Response:
    entity = kind.decode(body)
    await store.put(entity)
    logger.info("Created %s %r", kind.bucket, entity.id)
    return empty_response(202, path)


async def _put(
    kind: Type[Entity],
    store: HivemindStore,
    entity_id: str,
    body: bytes,
    strict: bool,
    path: str,
) -> Response:
    scalar = kind.parse_scalar(body.decode("utf-8", errors="replace"))
    if scalar is not None:
        current = await store.get_one(kind, entity_id) or kind(id=entity_id)
        entity = current.with_id(entity_id).with_scalar(scalar)
    else:
        try:
            entity = kind.decode(body).with_id(entity_id)
        except DecodeError as e:
            if strict:
                raise ValidationError(
                    message=f"{kind.bucket} body could not be decoded",
                    field="body",
                    context=e.context,
                )
            # Legacy contract: store the zero value and still answer 202
            logger.warning(
                "Undecodable PUT body for %s %r, storing zero value: %s",
                kind.bucket,
                entity_id,
                e.context.get("error", e.message),
            )
            entity = kind(id=entity_id)

    await store.put(entity)
    return empty_response(202, path)


# ── Routes ────────────────────────────────────────────────────────────────

@router.api_route("/sensor/{entity_path:path}", methods=HTTP_METHODS, include_in_schema=False)
async def sensor_resource(
    request: Request,
    entity_path: str,
    store: HivemindStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    return await dispatch(Sensor, request, entity_path, store, settings)


@router.api_route("/switch/{entity_path:path}", methods=HTTP_METHODS, include_in_schema=False)
async def switch_resource(
    request: Request,
    entity_path: str,
    store: HivemindStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    return await dispatch(Switch, request, entity_path, store, settings)


@router.api_route("/sensor", methods=HTTP_METHODS, include_in_schema=False)
@router.api_route("/switch", methods=HTTP_METHODS, include_in_schema=False)
async def resource_redirect(request: Request) -> Response:
    """Bare resource names redirect to their collection path."""
    return redirect_to_slash(request)

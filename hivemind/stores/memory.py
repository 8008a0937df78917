"""
Hivemind — In-Memory Store
==========================

What:  HivemindStore backed by one plain dict per bucket.
Who:   Used for tests and for throwaway runs (HIVEMIND_STORE=memory).

Limitations:
    Nothing survives a restart, and there is no locking: concurrent
    mutation of the same store is not supported.
"""

import logging
from typing import Dict, Iterable, List, Optional, Type

from hivemind.schemas.entities import Entity
from hivemind.stores.base import E, HivemindStore

logger = logging.getLogger(__name__)


class InMemoryHivemindStore(HivemindStore):
    """
    Small in-memory implementation of a HivemindStore.

    Entities are copied on the way in and on the way out, so callers can
    modify what they hold without touching the stored value.
    """

    def __init__(self, seed: Iterable[Entity] = ()):
        self._buckets: Dict[str, Dict[str, Entity]] = {}
        for entity in seed:
            self._bucket(entity.bucket)[entity.id] = entity.model_copy()

    def _bucket(self, name: str) -> Dict[str, Entity]:
        return self._buckets.setdefault(name, {})

    async def get_one(self, kind: Type[E], entity_id: str) -> Optional[E]:
        entity = self._buckets.get(kind.bucket, {}).get(entity_id)
        if entity is None:
            return None
        return entity.model_copy()

    async def get_all(self, kind: Type[E]) -> List[E]:
        return [entity.model_copy() for entity in self._buckets.get(kind.bucket, {}).values()]

    async def put(self, entity: Entity) -> None:
        self._bucket(entity.bucket)[entity.id] = entity.model_copy()
        logger.debug("Stored %s %r in memory", entity.bucket, entity.id)

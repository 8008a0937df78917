"""
Hivemind — Abstract Store Interface
===================================

What:  Abstract base class defining the contract every entity store fulfils.
How:   Concrete stores implement get_one / get_all / put per bucket; the
       kind-specific helpers (get_sensor, store_switch, ...) are built on top.
Who:   Called by the resource handlers; implemented by
       InMemoryHivemindStore and SQLiteHivemindStore.

Contract:
    - get_one returns None for an absent key; absence is never an error
    - get_all returns every entity of a kind, order not guaranteed
    - put is an upsert keyed by the entity's own ID
    - StoreError is raised only when persistence itself fails
    - open()/close() bracket the store's lifetime; open() is idempotent
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Type, TypeVar

from hivemind.schemas.entities import Entity, Sensor, Switch

E = TypeVar("E", bound=Entity)


class HivemindStore(ABC):
    """
    Abstract interface for sensor and switch persistence.

    Implementations:
        - InMemoryHivemindStore: dict per bucket, gone when the process exits
        - SQLiteHivemindStore: one SQLite table per bucket, survives restarts
    """

    async def open(self) -> None:
        """Acquire the underlying resources. No-op by default."""

    async def close(self) -> None:
        """Release the underlying resources. No-op by default."""

    async def __aenter__(self) -> "HivemindStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def get_one(self, kind: Type[E], entity_id: str) -> Optional[E]:
        """
        Look up one entity by ID.

        Args:
            kind:      Entity class, selects the bucket (Sensor or Switch).
            entity_id: Key within the bucket.

        Returns:
            The stored entity, or None when the key is absent.

        Raises:
            StoreError: The store could not be read.
        """
        ...

    @abstractmethod
    async def get_all(self, kind: Type[E]) -> List[E]:
        """Every entity of a kind; an empty or missing bucket gives []."""
        ...

    @abstractmethod
    async def put(self, entity: Entity) -> None:
        """
        Upsert an entity under its own ID.

        Raises:
            StoreError: The value could not be serialized or written.
        """
        ...

    # ── Kind-specific helpers ─────────────────────────────────────────────

    async def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        return await self.get_one(Sensor, sensor_id)

    async def get_all_sensors(self) -> List[Sensor]:
        return await self.get_all(Sensor)

    async def store_sensor(self, sensor: Sensor) -> None:
        await self.put(sensor)

    async def get_switch(self, switch_id: str) -> Optional[Switch]:
        return await self.get_one(Switch, switch_id)

    async def get_all_switches(self) -> List[Switch]:
        return await self.get_all(Switch)

    async def store_switch(self, switch: Switch) -> None:
        await self.put(switch)

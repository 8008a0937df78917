# Schemas package init
from hivemind.schemas.entities import ENTITY_KINDS, Entity, Sensor, Switch

__all__ = ["ENTITY_KINDS", "Entity", "Sensor", "Switch"]

"""
Hivemind — Sensor / Switch Schemas
==================================

What:  Pydantic models for the two entity kinds and their JSON codecs.
How:   The same model is used on the wire and in the store: the on-disk
       value of a key is exactly the JSON a GET returns.
Who:   Decoded by the resource handlers, encoded by handlers and stores.

Wire format (field names and order are part of the contract):
    Sensor: {"ID": "...", "Name": "...", "Unit": "...", "Type": "...", "Value": 0}
    Switch: {"ID": "...", "Name": "...", "Type": "...", "State": false}

Decoding rules:
    - field names match case-insensitively, an exact match wins
    - unknown fields are ignored, null leaves the zero value in place
    - types are strict ("12" is not a Value, 1 is not a State)
    - Value is a signed 64-bit integer
    - a bare null body is the zero-value entity
"""

import json
import re
from functools import lru_cache
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from hivemind.exceptions import DecodeError, EncodeError

E = TypeVar("E", bound="Entity")

# Sensor values are signed 64-bit integers on the wire
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Accepted by the integer-value PUT variant: optional sign, decimal digits
_DECIMAL = re.compile(r"[+-]?[0-9]+")

# Accepted by the boolean-value PUT variant
_BOOL_LITERALS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


class Entity(BaseModel):
    """
    Base class for everything kept in a store bucket.

    Subclasses declare:
        bucket:       name of the store namespace ("sensor", "switch")
        scalar_field: field replaced by a bare-scalar PUT body
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bucket: ClassVar[str] = ""
    scalar_field: ClassVar[str] = ""

    @model_validator(mode="before")
    @classmethod
    def _fold_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        folded: Dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            if alias in data:
                value = data[alias]
            else:
                key = next(
                    (k for k in data if isinstance(k, str) and k.lower() == alias.lower()),
                    None,
                )
                if key is None:
                    continue
                value = data[key]
            if value is not None:
                folded[alias] = value
        return folded

    # ── Codecs ────────────────────────────────────────────────────────────

    @classmethod
    def decode(cls: Type[E], body: bytes) -> E:
        """
        Decode a JSON object into an entity of this kind.

        Raises:
            DecodeError: body is not valid JSON, neither an object nor null,
                or a field has the wrong type or range.
        """
        try:
            data = json.loads(body)
            # A bare null decodes to the zero value, like an empty object
            return cls.model_validate({} if data is None else data)
        except (PydanticValidationError, ValueError) as e:
            raise DecodeError(
                message=f"{cls.bucket} body could not be decoded",
                kind=cls.bucket,
                context={"error": str(e).splitlines()[0] if str(e) else type(e).__name__},
            )

    def encode(self) -> bytes:
        """Compact JSON with wire field names."""
        try:
            return self.model_dump_json(by_alias=True).encode("utf-8")
        except PydanticSerializationError as e:
            raise EncodeError(context={"kind": self.bucket, "error": str(e)})

    @classmethod
    def encode_many(cls, entities: Iterable["Entity"]) -> bytes:
        """JSON array of entities; an empty collection encodes as []."""
        try:
            return _list_adapter(cls).dump_json(list(entities), by_alias=True)
        except PydanticSerializationError as e:
            raise EncodeError(context={"kind": cls.bucket, "error": str(e)})

    # ── PUT helpers ───────────────────────────────────────────────────────

    @classmethod
    def parse_scalar(cls, text: str) -> Optional[Any]:
        """Value of a bare-scalar body, or None when the body is not one."""
        return None

    def with_id(self: E, entity_id: str) -> E:
        return self.model_copy(update={"id": entity_id})

    def with_scalar(self: E, value: Any) -> E:
        return self.model_copy(update={self.scalar_field: value})


class Sensor(Entity):
    """A sensor with an ID and its current integer reading."""

    bucket: ClassVar[str] = "sensor"
    scalar_field: ClassVar[str] = "value"

    id: StrictStr = Field(default="", alias="ID")
    name: StrictStr = Field(default="", alias="Name")
    unit: StrictStr = Field(default="", alias="Unit")
    type: StrictStr = Field(default="", alias="Type")
    value: StrictInt = Field(default=0, alias="Value", ge=INT64_MIN, le=INT64_MAX)

    @classmethod
    def parse_scalar(cls, text: str) -> Optional[int]:
        if not _DECIMAL.fullmatch(text):
            return None
        number = int(text)
        if not INT64_MIN <= number <= INT64_MAX:
            return None
        return number


class Switch(Entity):
    """A switch with an ID and its current on/off state."""

    bucket: ClassVar[str] = "switch"
    scalar_field: ClassVar[str] = "state"

    id: StrictStr = Field(default="", alias="ID")
    name: StrictStr = Field(default="", alias="Name")
    type: StrictStr = Field(default="", alias="Type")
    state: StrictBool = Field(default=False, alias="State")

    @classmethod
    def parse_scalar(cls, text: str) -> Optional[bool]:
        return _BOOL_LITERALS.get(text)


ENTITY_KINDS: Dict[str, Type[Entity]] = {
    Sensor.bucket: Sensor,
    Switch.bucket: Switch,
}


@lru_cache(maxsize=None)
def _list_adapter(kind: Type[Entity]) -> TypeAdapter:
    return TypeAdapter(List[kind])

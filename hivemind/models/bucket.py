"""
Hivemind — Bucket SQLAlchemy Models
===================================

What:  ORM models for the key-value tables of the on-disk store.
How:   One table per entity kind ("bucket"). Every table has the same two
       columns: the raw UTF-8 bytes of the entity ID and the JSON-encoded
       entity.

Table layout:
    sensor(key BLOB PRIMARY KEY, value BLOB NOT NULL)
    switch(key BLOB PRIMARY KEY, value BLOB NOT NULL)

    Keys compare as bytes, so listing a bucket in primary key order gives
    the same order as a byte-wise cursor walk.
"""

from typing import Dict, Type

from sqlalchemy import LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from hivemind.database import Base


class BucketMixin:
    """Columns shared by every bucket table."""

    key: Mapped[bytes] = mapped_column(
        LargeBinary,
        primary_key=True,
        comment="Entity ID as raw UTF-8 bytes",
    )

    value: Mapped[bytes] = mapped_column(
        LargeBinary,
        nullable=False,
        comment="JSON-encoded entity",
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(key={self.key!r})>"


class SensorBucket(BucketMixin, Base):
    __tablename__ = "sensor"


class SwitchBucket(BucketMixin, Base):
    __tablename__ = "switch"


BUCKETS: Dict[str, Type[BucketMixin]] = {
    SensorBucket.__tablename__: SensorBucket,
    SwitchBucket.__tablename__: SwitchBucket,
}

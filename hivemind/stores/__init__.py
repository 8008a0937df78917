# Stores package init
"""
Hivemind — Stores Package
=========================

Store Inventory:
    - HivemindStore (abstract): get_one / get_all / put contract
    - InMemoryHivemindStore: transient, dict per bucket
    - SQLiteHivemindStore: durable, one SQLite table per bucket

build_store() picks the implementation named by the settings; the caller
owns the returned store and its open()/close() lifecycle.
"""

from hivemind.config import Settings
from hivemind.stores.base import HivemindStore
from hivemind.stores.memory import InMemoryHivemindStore
from hivemind.stores.sqlite import SQLiteHivemindStore

__all__ = [
    "HivemindStore",
    "InMemoryHivemindStore",
    "SQLiteHivemindStore",
    "build_store",
]


def build_store(settings: Settings) -> HivemindStore:
    """Construct (but do not open) the store selected by `settings.store`."""
    if settings.store == "memory":
        return InMemoryHivemindStore()
    return SQLiteHivemindStore(
        settings.db_path,
        timeout=settings.open_timeout,
        echo=settings.log_level == "DEBUG",
    )

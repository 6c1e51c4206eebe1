"""Key-value storage adapters."""

from streamflow_stations.adapters.storage.in_memory_key_value_store import InMemoryKeyValueStore
from streamflow_stations.adapters.storage.sqlite_key_value_store import SqliteKeyValueStore

__all__ = ["InMemoryKeyValueStore", "SqliteKeyValueStore"]

"""In-memory key-value store."""

from __future__ import annotations

from streamflow_stations.domain.ports.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store that lives as long as the process."""

    def __init__(self, fail_writes: bool = False) -> None:
        """Initialize the store.

        Args:
            fail_writes: Refuse every write, like a browser storage that hit its quota.
        """
        self._data: dict[str, bytes] = {}
        self.fail_writes = fail_writes

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        if self.fail_writes:
            return False
        self._data[key] = bytes(value)
        return True

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> set[str]:
        """All stored keys."""
        return set(self._data.keys())

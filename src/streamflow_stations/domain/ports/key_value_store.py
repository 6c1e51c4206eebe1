"""Key-value storage port backing the station cache."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Port for a persistent or in-memory byte store."""

    def get(self, key: str) -> bytes | None:
        """Return the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: bytes) -> bool:
        """Store a value, replacing any previous one.

        Returns:
            True if the value was written, False if the store refused it
            (for example because it is full).
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...

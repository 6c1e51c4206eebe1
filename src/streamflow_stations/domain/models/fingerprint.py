"""Deterministic cache keys derived from query shapes."""

from collections.abc import Iterable


def tag_fingerprint(tag: str, limit: int) -> str:
    """Cache key for a tag query."""
    return f"tag:{tag}:limit:{limit}"


def uuid_batch_fingerprint(uuids: Iterable[str]) -> str:
    """Cache key for a batch of station ids.

    Ids are de-duplicated and sorted so every permutation of the same set
    maps to the same key.
    """
    return "uuids:" + "_".join(sorted(set(uuids)))

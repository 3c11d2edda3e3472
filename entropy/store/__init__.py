"""
entropy.store
=============

Storage capability interfaces injected into the core, plus concrete backends:

- `SeedStorage`  - the narrow get/set surface the handler needs; the host's
  storage (or a transactional overlay over it) satisfies it.
- `KeyValue`     - a slightly wider byte KV used by the reference host and
  its backends (`MemoryKeyValue`, `SQLiteKeyValue`).

The core touches exactly one key (`constants.SEED_KEY`); see `store.seed`.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SeedStorage(Protocol):
    """Minimal durable storage capability consumed by the handler."""

    def get(self, key: bytes) -> Optional[bytes]:
        """Return value for key, or None if missing."""
        ...

    def set(self, key: bytes, value: bytes) -> None:
        """Insert or replace key with value."""
        ...


@runtime_checkable
class KeyValue(SeedStorage, Protocol):
    """Byte-oriented KV backend used under the reference host."""

    def delete(self, key: bytes) -> None:
        """Remove key if present (no-op if absent)."""
        ...

    def has(self, key: bytes) -> bool:
        """Return True if key exists."""
        ...


from .memory import MemoryKeyValue  # noqa: E402
from .seed import SeedStore  # noqa: E402

__all__ = [
    "SeedStorage",
    "KeyValue",
    "MemoryKeyValue",
    "SeedStore",
]

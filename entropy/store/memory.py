"""In-memory KeyValue backend for tests and throwaway local runs."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple


def _check_bytes(name: str, v: object) -> bytes:
    if not isinstance(v, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes")
    return bytes(v)


class MemoryKeyValue:
    """Dict-backed implementation of the `KeyValue` protocol."""

    def __init__(self, initial: Optional[Dict[bytes, bytes]] = None) -> None:
        self._store: Dict[bytes, bytes] = dict(initial or {})

    def get(self, key: bytes) -> Optional[bytes]:
        return self._store.get(_check_bytes("key", key))

    def set(self, key: bytes, value: bytes) -> None:
        self._store[_check_bytes("key", key)] = _check_bytes("value", value)

    def delete(self, key: bytes) -> None:
        self._store.pop(_check_bytes("key", key), None)

    def has(self, key: bytes) -> bool:
        return _check_bytes("key", key) in self._store

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        # Sorted so snapshots compare deterministically.
        return iter(sorted(self._store.items()))

    def __len__(self) -> int:
        return len(self._store)


__all__ = ["MemoryKeyValue"]

"""
Seed accessor over a `SeedStorage` capability.

Wraps the single durable key with the seed invariants:
- reads fail loudly when the key is absent (`UninitializedSeed`) or holds
  anything other than 32 bytes (`CorruptSeed`);
- writes refuse anything other than 32 bytes.

The seed value itself is never logged.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import SEED_KEY, SEED_LEN, ZERO_SEED
from ..errors import CorruptSeed, UninitializedSeed
from . import SeedStorage


@dataclass(frozen=True)
class SeedStore:
    storage: SeedStorage
    key: bytes = SEED_KEY

    def load(self) -> bytes:
        raw = self.storage.get(self.key)
        if raw is None:
            raise UninitializedSeed()
        if len(raw) != SEED_LEN:
            raise CorruptSeed(length=len(raw))
        return bytes(raw)

    def save(self, seed: bytes) -> None:
        if not isinstance(seed, (bytes, bytearray)):
            raise TypeError("seed must be bytes")
        if len(seed) != SEED_LEN:
            raise CorruptSeed(length=len(seed))
        self.storage.set(self.key, bytes(seed))

    def initialize(self) -> None:
        """Set the seed to the all-zero value (instantiate only)."""
        self.storage.set(self.key, ZERO_SEED)

    def is_initialized(self) -> bool:
        raw = self.storage.get(self.key)
        return raw is not None and len(raw) == SEED_LEN


__all__ = ["SeedStore"]

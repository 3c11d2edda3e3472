"""
Entropy accumulator errors.

A small hierarchy of exceptions raised by the seed protocol. Callers (the host
adapter, the CLI) can catch `EntropyError` to handle every failure the core
surfaces, or catch concrete subclasses for granular reporting.

None of these are retried internally. When one propagates out of an
invocation, the host discards every pending write of that invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import SEED_LEN


class EntropyError(Exception):
    """Base class for all entropy accumulator errors."""
    pass


class UninitializedSeed(EntropyError):
    """
    Raised when the durable seed key is absent at read time.

    This signals a broken initialization invariant: the module was invoked
    before `instantiate`, or its state was tampered with.
    """

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return "UninitializedSeed: seed key is absent (module not instantiated?)"


@dataclass(frozen=True)
class CorruptSeed(UninitializedSeed):
    """
    Raised when the stored seed is present but not exactly 32 bytes.

    Attributes:
        length: Length of the value found under the seed key.
    """
    length: int

    def __str__(self) -> str:
        return f"CorruptSeed: stored seed is {self.length} bytes, expected {SEED_LEN}"


@dataclass(frozen=True)
class ExcessiveLength(EntropyError):
    """
    Raised when a caller-supplied length exceeds the configured bound.

    Checked before any hashing or stream expansion is performed.

    Attributes:
        field: Which request field was rejected (e.g. 'bytes', 'entropy').
        requested: The requested length.
        limit: The configured maximum.
    """
    field: str
    requested: int
    limit: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"ExcessiveLength: {self.field}={self.requested} > limit={self.limit}"


@dataclass(frozen=True)
class PayloadConstructionFailure(EntropyError):
    """
    Raised when the outbound callback payload cannot be serialized.

    Attributes:
        reason: Human-readable explanation (e.g. 'encode', 'too-large').
    """
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"PayloadConstructionFailure: {self.reason}"


@dataclass(frozen=True)
class InvalidMessage(EntropyError):
    """
    Raised when a host-delivered payload does not decode to a known message.

    Attributes:
        reason: Decoder error text.
        entrypoint: Entry point the payload was addressed to, if known.
    """
    reason: str
    entrypoint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        where = f" ({self.entrypoint})" if self.entrypoint else ""
        return f"InvalidMessage{where}: {self.reason}"


__all__ = [
    "EntropyError",
    "UninitializedSeed",
    "CorruptSeed",
    "ExcessiveLength",
    "PayloadConstructionFailure",
    "InvalidMessage",
]

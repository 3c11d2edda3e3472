"""
entropy.types.context: ambient call context folded into the seed.

The host supplies, for every invocation, who is calling and where in the
chain the call executes. The mixer binds all of it into the new seed so that
identical payloads from different callers, chains, blocks or times never
collapse to the same state.

Design notes
------------
- `sender` is the caller's canonical address as raw bytes; the host has
  already validated it. Hex strings (with or without "0x") are accepted and
  normalized to bytes.
- `chain_id` is the chain's string identifier (e.g. "animica-devnet-1").
- `height` and `time` are consensus values, validated to fit an unsigned
  64-bit integer because they are encoded as 8 big-endian bytes.
- No wall-clock or OS input is read here; `time` is whatever the host says.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from ..constants import HEIGHT_WIDTH, TIME_WIDTH, U64_MAX


class ContextError(ValueError):
    """Validation or coercion failure for CallContext."""


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_u64(name: str, v: Any) -> int:
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0 or v > U64_MAX:
        raise ContextError(f"{name} must fit in an unsigned 64-bit integer, got {v}")
    return v


@dataclass(frozen=True)
class CallContext:
    """
    Deterministic per-invocation context.

    Fields
    ------
    sender:    Caller identity (canonical address bytes).
    chain_id:  Chain identifier string.
    height:    Block height.
    time:      Block time (seconds since epoch or chain-defined unit).
    """
    sender: bytes
    chain_id: str
    height: int
    time: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sender", to_bytes(self.sender))
        if not isinstance(self.chain_id, str):
            raise ContextError(f"chain_id must be str, got {type(self.chain_id).__name__}")
        object.__setattr__(self, "height", _require_u64("height", self.height))
        object.__setattr__(self, "time", _require_u64("time", self.time))

    def encode(self) -> bytes:
        """sender ‖ utf8(chain_id) ‖ be64(height) ‖ be64(time)."""
        return (
            self.sender
            + self.chain_id.encode("utf-8")
            + self.height.to_bytes(HEIGHT_WIDTH, "big")
            + self.time.to_bytes(TIME_WIDTH, "big")
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CallContext":
        return cls(
            sender=to_bytes(d.get("sender", b"")),
            chain_id=d.get("chain_id", ""),
            height=_require_u64("height", d.get("height")),
            time=_require_u64("time", d.get("time")),
        )

    @classmethod
    def from_execution_context(cls, ctx: Any) -> "CallContext":
        """
        Adapter from execution-layer objects exposing `sender`, `chain_id`,
        `height` and `time` (or `timestamp`) attributes.
        """
        t = getattr(ctx, "time", None)
        if t is None:
            t = getattr(ctx, "timestamp")
        return cls(
            sender=to_bytes(getattr(ctx, "sender")),
            chain_id=str(getattr(ctx, "chain_id")),
            height=_require_u64("height", getattr(ctx, "height")),
            time=_require_u64("time", t),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": to_hex(self.sender),
            "chain_id": self.chain_id,
            "height": self.height,
            "time": self.time,
        }


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "CallContext",
]

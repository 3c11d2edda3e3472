"""
entropy.mixer
=============

Seed mixing: fold a payload and the call context into the 32-byte seed.

    new_seed = SHA-256( seed ‖ payload ‖ sender ‖ utf8(chain_id)
                        ‖ be64(height) ‖ be64(time) )

The same function serves two roles:

- **contribution**: `payload` is the caller's entropy (AddEntropy);
- **ratchet**: after a GetRandom, `payload` is the request's own
  `utf8(callback_address) ‖ callback_input`, so the post-call seed cannot be
  run backwards to the seed that produced the released bytes.

Everything here is pure. Identical inputs on identical prior state always
yield the identical new seed, which every validating node relies on.
"""

from __future__ import annotations

import hashlib

from .constants import SEED_LEN
from .errors import CorruptSeed
from .types.context import CallContext
from .types.messages import GetRandom


def _as_bytes(name: str, x: object) -> bytes:
    if isinstance(x, (bytes, bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"{name} must be bytes-like, got {type(x).__name__}")


def mix(seed: bytes, payload: bytes, context: CallContext) -> bytes:
    """Return SHA-256(seed ‖ payload ‖ context.encode())."""
    s = _as_bytes("seed", seed)
    if len(s) != SEED_LEN:
        raise CorruptSeed(length=len(s))
    if not isinstance(context, CallContext):
        raise TypeError(f"context must be CallContext, got {type(context).__name__}")
    h = hashlib.sha256()
    h.update(s)
    h.update(_as_bytes("payload", payload))
    h.update(context.encode())
    return h.digest()


def ratchet_payload(callback_address: str, callback_input: bytes) -> bytes:
    """utf8(callback_address) ‖ callback_input."""
    if not isinstance(callback_address, str):
        raise TypeError("callback_address must be str")
    return callback_address.encode("utf-8") + _as_bytes("callback_input", callback_input)


def ratchet(seed: bytes, request: GetRandom, context: CallContext) -> bytes:
    """Advance the seed after serving `request`."""
    return mix(seed, ratchet_payload(request.callback_address, request.callback_input), context)


__all__ = [
    "mix",
    "ratchet_payload",
    "ratchet",
]

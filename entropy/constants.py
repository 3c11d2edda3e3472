"""
Entropy accumulator constants.

These values define the persisted state layout and the wire-level shape of the
service. Changing any of them breaks compatibility with already-deployed state,
so networks tune the *operational* bounds through `entropy.config` instead.
"""

from __future__ import annotations

# -----------------------------
# Persisted state layout
# -----------------------------
# The single durable key the core reads and writes.
SEED_KEY: bytes = b"seed"

# Seed width in bytes (SHA-256 digest size, ChaCha20 key size).
SEED_LEN: int = 32

# Value written at instantiation. Low entropy by construction: outputs drawn
# before independent contributions accumulate are predictable.
ZERO_SEED: bytes = b"\x00" * SEED_LEN

# -----------------------------
# Stream parameters
# -----------------------------

# ChaCha20 nonce as accepted by `cryptography`: 4-byte LE block counter
# followed by a 12-byte nonce. All zero: counter starts at block 0.
STREAM_NONCE: bytes = b"\x00" * 16

# -----------------------------
# Context encoding
# -----------------------------
U64_MAX: int = (1 << 64) - 1
HEIGHT_WIDTH: int = 8  # big-endian
TIME_WIDTH: int = 8    # big-endian

# -----------------------------
# Default operational bounds (mirrored by EntropyConfig defaults)
# -----------------------------
DEFAULT_MAX_RANDOM_BYTES: int = 64 * 1024
DEFAULT_MAX_ENTROPY_BYTES: int = 64 * 1024
DEFAULT_MAX_CALLBACK_INPUT_BYTES: int = 64 * 1024
DEFAULT_MAX_CALLBACK_PAYLOAD_BYTES: int = 256 * 1024

__all__ = [
    "SEED_KEY",
    "SEED_LEN",
    "ZERO_SEED",
    "STREAM_NONCE",
    "U64_MAX",
    "HEIGHT_WIDTH",
    "TIME_WIDTH",
    "DEFAULT_MAX_RANDOM_BYTES",
    "DEFAULT_MAX_ENTROPY_BYTES",
    "DEFAULT_MAX_CALLBACK_INPUT_BYTES",
    "DEFAULT_MAX_CALLBACK_PAYLOAD_BYTES",
]

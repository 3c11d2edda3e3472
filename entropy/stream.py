"""
entropy.stream: seed → pseudorandom byte stream.

The 32-byte seed is used directly as a ChaCha20 key (no stretching) with an
all-zero nonce and the block counter starting at 0. The keystream is read as
little-endian 32-bit words and each output byte is the low byte of one word,
which is what a word-oriented ChaCha20 RNG yields when asked for one byte at
a time:

    ks = ChaCha20(key=seed, counter=0, nonce=0^12)
    expand(seed, n) = ks[0], ks[4], ks[8], …, ks[4*(n-1)]

Properties
----------
- Pure: identical (seed, n) always yields identical bytes; the seed is never
  modified. Ratcheting is the handler's job, after expansion.
- Prefix-stable: expand(seed, n) is a prefix of expand(seed, m) for n <= m,
  and reading a `ChaChaStream` in chunks matches one-shot expansion.
- Length bounds are enforced by the caller against the host's metering
  budget; this module only rejects nonsense (negative / non-int).

Reference (RFC 7539 A.1 #1 keystream, every fourth byte): seed = 0^32 →
    76a04053bda0a88bda5177b86a15c3b2 …
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .constants import SEED_LEN, STREAM_NONCE
from .errors import CorruptSeed

# Keystream bytes consumed per output byte (one 32-bit word).
WORD_SIZE = 4


def _ensure_len_arg(n: object) -> int:
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError(f"length must be int, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"length must be >= 0 (got {n})")
    return n


class ChaChaStream:
    """
    Stateful reader over the ChaCha20 word stream of one seed.

        s = ChaChaStream(seed)
        a = s.read(10)
        b = s.read(6)
        assert a + b == expand(seed, 16)
    """

    __slots__ = ("_enc", "_pos")

    def __init__(self, seed: bytes) -> None:
        if not isinstance(seed, (bytes, bytearray, memoryview)):
            raise TypeError("seed must be bytes-like")
        key = bytes(seed)
        if len(key) != SEED_LEN:
            raise CorruptSeed(length=len(key))
        cipher = Cipher(algorithms.ChaCha20(key, STREAM_NONCE), mode=None)
        self._enc = cipher.encryptor()
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of output bytes produced so far."""
        return self._pos

    def read(self, n: int) -> bytes:
        """Return the next `n` output bytes."""
        n = _ensure_len_arg(n)
        if n == 0:
            return b""
        # Encrypting zeros yields the keystream itself; keep each word's low byte.
        words = self._enc.update(bytes(WORD_SIZE * n))
        self._pos += n
        return words[::WORD_SIZE]


def expand(seed: bytes, length: int) -> bytes:
    """Return the first `length` output bytes for `seed`."""
    length = _ensure_len_arg(length)
    stream = ChaChaStream(seed)
    return stream.read(length)


__all__ = [
    "ChaChaStream",
    "expand",
]

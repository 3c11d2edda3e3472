"""
Animica entropy accumulator.

This package implements the seed-state protocol behind the chain's
contract-facing `GetRandom` service:

- AddEntropy folds caller-supplied bytes and call context into a 32-byte seed,
- GetRandom expands the current seed into a ChaCha20 byte stream, returns it
  in a single callback message, then ratchets the seed forward.

Only light, stable exports are surfaced here to avoid import cycles.
"""

from __future__ import annotations

# Public version string (lazy fallback during early bootstrap)
try:
    from .version import __version__  # type: ignore
except Exception:  # pragma: no cover
    __version__ = "0.0.0+dev"

__all__ = ["__version__"]

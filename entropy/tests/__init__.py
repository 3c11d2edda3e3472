"""
entropy.tests
-------------
Test package initializer for the entropy accumulator.

Notes:
- Call contexts and seeds used here are fixed values so every assertion can
  be recomputed independently with hashlib and the ChaCha20 primitive.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()

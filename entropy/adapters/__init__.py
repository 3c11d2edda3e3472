"""
Adapters between the entropy core and its host environment.

  • host - reference execution host (pending-writes atomic boundary, outbox)
"""

from __future__ import annotations

from .host import Invocation, LocalHost, PendingWrites

__all__ = ["Invocation", "LocalHost", "PendingWrites"]

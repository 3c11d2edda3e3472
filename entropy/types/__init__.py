"""
Entropy accumulator - types package

  • context   - CallContext, the ambient call data folded into the seed
  • messages  - host wire schema (AddEntropy, GetRandom, RandomAnswer, …)
  • response  - OutboundMessage, Response

Commonly used symbols are re-exported here:
    from entropy.types import CallContext, GetRandom, Response
"""

from __future__ import annotations

from .context import CallContext, ContextError
from .messages import (
    AddEntropy,
    ExecuteMsg,
    GetRandom,
    InitMsg,
    MigrateMsg,
    QueryMsg,
    RandomAnswer,
)
from .response import OutboundMessage, Response

__all__ = [
    "CallContext",
    "ContextError",
    "AddEntropy",
    "GetRandom",
    "ExecuteMsg",
    "InitMsg",
    "QueryMsg",
    "MigrateMsg",
    "RandomAnswer",
    "OutboundMessage",
    "Response",
]

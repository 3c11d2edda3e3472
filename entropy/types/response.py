"""
Handler results: the outbound-message intents and the response envelope.

The handler never calls a destination directly. It returns descriptors that
the host's message bus is responsible for delivering after the invocation
commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """
    One execute-style message to another module.

    Fields:
      contract_addr - destination address (host-validated)
      msg           - serialized payload (JSON bytes)
      funds         - attached funds; always empty for this service
    """

    contract_addr: str
    msg: bytes
    funds: Tuple[Tuple[str, int], ...] = ()

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.contract_addr, str) or not self.contract_addr:
            raise ValueError("contract_addr must be a non-empty str")
        if not isinstance(self.msg, (bytes, bytearray)):
            raise TypeError("msg must be bytes")


@dataclass(frozen=True, slots=True)
class Response:
    """
    Result of one invocation.

    Fields:
      messages    - outbound messages to dispatch after commit (0 or 1 here)
      data        - optional raw return data (unused by this service)
      attributes  - (key, value) log attributes for indexers
    """

    messages: Tuple[OutboundMessage, ...] = ()
    data: Optional[bytes] = None
    attributes: Tuple[Tuple[str, str], ...] = field(default=())

    @classmethod
    def empty(cls) -> "Response":
        return cls()


__all__ = [
    "OutboundMessage",
    "Response",
]

"""
Callback construction: package generated bytes for asynchronous delivery.

`build_callback` produces exactly one `OutboundMessage` addressed to the
requester's chosen destination. Its payload is the JSON `RandomAnswer`

    {"random_bytes": "<base64>", "input": "<base64>"}

with `input` echoing the request's `callback_input` unchanged so the receiver
can correlate the answer with its request. No funds are attached.

Delivery, retries and confirmation belong to the host's message router. A
payload that cannot be built raises `PayloadConstructionFailure`, which aborts
the whole invocation (including the seed ratchet).
"""

from __future__ import annotations

from typing import Optional

import msgspec

from .errors import PayloadConstructionFailure
from .types.messages import RandomAnswer
from .types.response import OutboundMessage

_ENCODER = msgspec.json.Encoder()
_ANSWER_DECODER = msgspec.json.Decoder(RandomAnswer)


def encode_answer(random_bytes: bytes, echo_input: bytes) -> bytes:
    """Serialize a RandomAnswer to JSON bytes."""
    if not isinstance(random_bytes, (bytes, bytearray)):
        raise PayloadConstructionFailure(f"random_bytes must be bytes, got {type(random_bytes).__name__}")
    if not isinstance(echo_input, (bytes, bytearray)):
        raise PayloadConstructionFailure(f"input must be bytes, got {type(echo_input).__name__}")
    answer = RandomAnswer(random_bytes=bytes(random_bytes), input=bytes(echo_input))
    try:
        return _ENCODER.encode(answer)
    except (msgspec.EncodeError, TypeError, ValueError) as e:
        raise PayloadConstructionFailure(f"encode: {e}") from e


def decode_answer(payload: bytes) -> RandomAnswer:
    """Parse a callback payload (receiver side / tests)."""
    return _ANSWER_DECODER.decode(payload)


def build_callback(
    random_bytes: bytes,
    echo_input: bytes,
    destination: str,
    *,
    max_payload_bytes: Optional[int] = None,
) -> OutboundMessage:
    """
    Build the single outbound message carrying `random_bytes` to `destination`.

    Raises:
        PayloadConstructionFailure: empty/non-str destination, encoding
            failure, or a payload larger than `max_payload_bytes`.
    """
    if not isinstance(destination, str) or not destination:
        raise PayloadConstructionFailure("destination must be a non-empty address string")
    payload = encode_answer(random_bytes, echo_input)
    if max_payload_bytes is not None and len(payload) > max_payload_bytes:
        raise PayloadConstructionFailure(
            f"too-large: payload {len(payload)} bytes > {max_payload_bytes}"
        )
    return OutboundMessage(contract_addr=destination, msg=payload)


__all__ = [
    "encode_answer",
    "decode_answer",
    "build_callback",
]

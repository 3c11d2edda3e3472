"""
Wire schema for host-delivered call payloads and the callback answer.

The host hands the module JSON payloads per entry point:

    instantiate   {}
    execute       {"add_entropy": {"entropy": "<base64>"}}
                  {"get_random": {"bytes": 16,
                                  "callback_address": "anim1…",
                                  "callback_input": "<base64>"}}
    query         {}
    migrate       {}

Execute payloads are externally tagged: exactly one snake_case variant key.
Byte fields travel as standard base64 strings, which is msgspec's native JSON
encoding for `bytes`.

The answer delivered to `callback_address` is

    {"random_bytes": "<base64>", "input": "<base64>"}

where `input` echoes `callback_input` verbatim.
"""

from __future__ import annotations

from typing import Annotated, Optional, Union

import msgspec

from ..constants import U64_MAX
from ..errors import InvalidMessage

# msgspec bounds must fit in an int64; the u64 ceiling is checked in __post_init__.
U64 = Annotated[int, msgspec.Meta(ge=0)]


# ---- execute variants --------------------------------------------------------


class AddEntropy(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    """Contribute opaque bytes to the seed."""
    entropy: bytes


class GetRandom(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    """
    Request `length` pseudorandom bytes delivered to `callback_address`.

    `length` travels as the `bytes` field on the wire.
    """
    length: U64 = msgspec.field(name="bytes")
    callback_address: str
    callback_input: bytes

    def __post_init__(self) -> None:
        if isinstance(self.length, int) and self.length > U64_MAX:
            raise ValueError(f"bytes must fit in an unsigned 64-bit integer, got {self.length}")


ExecuteMsg = Union[AddEntropy, GetRandom]


class HandleMsg(msgspec.Struct, forbid_unknown_fields=True, omit_defaults=True):
    """Externally tagged envelope; exactly one field is set."""
    add_entropy: Optional[AddEntropy] = None
    get_random: Optional[GetRandom] = None

    def variant(self) -> ExecuteMsg:
        set_fields = [v for v in (self.add_entropy, self.get_random) if v is not None]
        if len(set_fields) != 1:
            raise InvalidMessage(
                f"expected exactly one of add_entropy/get_random, got {len(set_fields)}",
                entrypoint="execute",
            )
        return set_fields[0]


# ---- lifecycle / compliance stubs --------------------------------------------


class InitMsg(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    pass


class QueryMsg(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    pass


class MigrateMsg(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    pass


# ---- callback answer ---------------------------------------------------------


class RandomAnswer(msgspec.Struct, forbid_unknown_fields=True, frozen=True):
    random_bytes: bytes
    input: bytes


# ---- codecs ------------------------------------------------------------------

_HANDLE_DECODER = msgspec.json.Decoder(HandleMsg)
_ENCODER = msgspec.json.Encoder()


def decode_handle_msg(raw: Union[bytes, str]) -> ExecuteMsg:
    """Decode an execute payload into `AddEntropy` or `GetRandom`."""
    try:
        envelope = _HANDLE_DECODER.decode(raw)
    except msgspec.DecodeError as e:
        raise InvalidMessage(str(e), entrypoint="execute") from e
    return envelope.variant()


def encode_handle_msg(msg: ExecuteMsg) -> bytes:
    """Wrap an execute variant in its tagged envelope and encode it."""
    if isinstance(msg, AddEntropy):
        return _ENCODER.encode(HandleMsg(add_entropy=msg))
    if isinstance(msg, GetRandom):
        return _ENCODER.encode(HandleMsg(get_random=msg))
    raise TypeError(f"not an execute message: {type(msg).__name__}")


def decode_stub(raw: Union[bytes, str], kind: type, entrypoint: str):
    """Decode an empty-object payload for instantiate/query/migrate."""
    try:
        return msgspec.json.decode(raw or b"{}", type=kind)
    except msgspec.DecodeError as e:
        raise InvalidMessage(str(e), entrypoint=entrypoint) from e


__all__ = [
    "U64",
    "AddEntropy",
    "GetRandom",
    "ExecuteMsg",
    "HandleMsg",
    "InitMsg",
    "QueryMsg",
    "MigrateMsg",
    "RandomAnswer",
    "decode_handle_msg",
    "encode_handle_msg",
    "decode_stub",
]

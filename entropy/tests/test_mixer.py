from __future__ import annotations

import hashlib

import pytest

from entropy.errors import CorruptSeed
from entropy.mixer import mix, ratchet, ratchet_payload
from entropy.types import CallContext, GetRandom

from .conftest import CHAIN_ID, HEIGHT, SENDER, TIME

ZERO32 = b"\x00" * 32


def _be8(n: int) -> bytes:
    return n.to_bytes(8, "big")


def test_add_entropy_vector_matches_independent_sha256(ctx: CallContext) -> None:
    expected = hashlib.sha256(
        ZERO32 + b"\x01\x02" + SENDER + CHAIN_ID.encode() + _be8(HEIGHT) + _be8(TIME)
    ).digest()
    assert mix(ZERO32, b"\x01\x02", ctx) == expected


def test_mix_is_deterministic(ctx: CallContext) -> None:
    seed = bytes(range(32))
    a = mix(seed, b"payload", ctx)
    b = mix(seed, b"payload", ctx)
    assert a == b
    assert len(a) == 32


def test_empty_payload_still_changes_seed(ctx: CallContext) -> None:
    out = mix(ZERO32, b"", ctx)
    assert out != ZERO32
    assert out == hashlib.sha256(ZERO32 + ctx.encode()).digest()


@pytest.mark.parametrize(
    "field,value",
    [
        ("sender", bytes.fromhex("22" * 20)),
        ("chain_id", "animica-testnet"),
        ("height", HEIGHT + 1),
        ("time", TIME + 1),
    ],
)
def test_every_context_field_is_bound(ctx: CallContext, field: str, value) -> None:
    fields = ctx.to_dict()
    fields[field] = value
    other = CallContext.from_dict(fields)
    assert mix(ZERO32, b"x", ctx) != mix(ZERO32, b"x", other)


def test_context_encoding_layout(ctx: CallContext) -> None:
    enc = ctx.encode()
    assert enc[:20] == SENDER
    assert enc[20:-16] == CHAIN_ID.encode("utf-8")
    assert enc[-16:-8] == _be8(HEIGHT)
    assert enc[-8:] == _be8(TIME)


@pytest.mark.parametrize("bad_len", [0, 16, 31, 33, 64])
def test_mix_rejects_wrong_seed_width(ctx: CallContext, bad_len: int) -> None:
    with pytest.raises(CorruptSeed) as ei:
        mix(b"\x07" * bad_len, b"", ctx)
    assert ei.value.length == bad_len


def test_mix_rejects_non_bytes_payload(ctx: CallContext) -> None:
    with pytest.raises(TypeError):
        mix(ZERO32, "text", ctx)  # type: ignore[arg-type]


def test_ratchet_payload_is_address_then_input() -> None:
    assert ratchet_payload("anim1dest", b"\xaa") == b"anim1dest\xaa"
    assert ratchet_payload("anim1dest", b"") == b"anim1dest"
    assert ratchet_payload("ä", b"\x00") == "ä".encode("utf-8") + b"\x00"


def test_ratchet_equals_mix_over_request_fields(ctx: CallContext) -> None:
    seed = bytes(range(32))
    req = GetRandom(length=16, callback_address="anim1dest", callback_input=b"\xaa")
    expected = hashlib.sha256(seed + b"anim1dest\xaa" + ctx.encode()).digest()
    assert ratchet(seed, req, ctx) == expected

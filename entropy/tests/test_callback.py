from __future__ import annotations

import base64
import json

import pytest

from entropy.callback import build_callback, decode_answer, encode_answer
from entropy.errors import PayloadConstructionFailure
from entropy.types import OutboundMessage


def test_payload_shape_is_base64_json() -> None:
    payload = encode_answer(b"\x01\x02\x03", b"\xaa")
    doc = json.loads(payload)
    assert set(doc) == {"random_bytes", "input"}
    assert base64.b64decode(doc["random_bytes"]) == b"\x01\x02\x03"
    assert base64.b64decode(doc["input"]) == b"\xaa"


def test_build_callback_addresses_destination_without_funds() -> None:
    msg = build_callback(b"\x10" * 16, b"\xaa", "anim1dest")
    assert isinstance(msg, OutboundMessage)
    assert msg.contract_addr == "anim1dest"
    assert msg.funds == ()
    answer = decode_answer(msg.msg)
    assert answer.random_bytes == b"\x10" * 16
    assert answer.input == b"\xaa"


@pytest.mark.parametrize("echo", [b"", b"\x00", bytes(range(256)), b'{"nested":"json"}'])
def test_echo_input_is_verbatim(echo: bytes) -> None:
    msg = build_callback(b"", echo, "anim1dest")
    assert decode_answer(msg.msg).input == echo


def test_empty_random_bytes_allowed() -> None:
    answer = decode_answer(build_callback(b"", b"", "anim1dest").msg)
    assert answer.random_bytes == b""


@pytest.mark.parametrize("dest", ["", None, 123])
def test_bad_destination_fails(dest) -> None:
    with pytest.raises(PayloadConstructionFailure):
        build_callback(b"\x00", b"", dest)  # type: ignore[arg-type]


def test_non_bytes_fields_fail() -> None:
    with pytest.raises(PayloadConstructionFailure):
        encode_answer("abc", b"")  # type: ignore[arg-type]
    with pytest.raises(PayloadConstructionFailure):
        encode_answer(b"abc", [1, 2])  # type: ignore[arg-type]


def test_payload_cap_enforced() -> None:
    payload_len = len(encode_answer(b"\x00" * 64, b""))
    build_callback(b"\x00" * 64, b"", "anim1dest", max_payload_bytes=payload_len)
    with pytest.raises(PayloadConstructionFailure) as ei:
        build_callback(b"\x00" * 64, b"", "anim1dest", max_payload_bytes=payload_len - 1)
    assert ei.value.reason.startswith("too-large")

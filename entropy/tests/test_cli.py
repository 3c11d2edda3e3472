from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from entropy.cli import app
from entropy.constants import SEED_KEY
from entropy.mixer import mix
from entropy.store.sqlite import SQLiteKeyValue
from entropy.stream import expand
from entropy.types import CallContext

runner = CliRunner()

CTX_ARGS = ["--sender", "0x" + "11" * 20, "--chain-id", "animica-devnet-1", "--height", "7", "--time", "1700000000"]
CTX = CallContext(sender="0x" + "11" * 20, chain_id="animica-devnet-1", height=7, time=1_700_000_000)


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    for k in ("MAX_RANDOM_BYTES", "MAX_ENTROPY_BYTES", "MAX_CALLBACK_INPUT_BYTES",
              "MAX_CALLBACK_PAYLOAD_BYTES", "STORE_PATH", "METRICS"):
        monkeypatch.delenv("ANIMICA_ENTROPY_" + k, raising=False)
    # Keep the process-wide Prometheus registry untouched by CLI runs.
    monkeypatch.setenv("ANIMICA_ENTROPY_METRICS", "false")


def _invoke(*args: str):
    return runner.invoke(app, list(args))


def test_end_to_end_flow(tmp_path) -> None:
    db = str(tmp_path / "state.db")

    r = _invoke("init", "--db", db, *CTX_ARGS)
    assert r.exit_code == 0, r.output
    assert json.loads(r.stdout)["entrypoint"] == "instantiate"

    r = _invoke("add-entropy", "--db", db, "--entropy", "0x0102", *CTX_ARGS)
    assert r.exit_code == 0, r.output
    assert json.loads(r.stdout)["entropy_len"] == 2

    r = _invoke(
        "get-random", "--db", db, "--bytes", "16",
        "--callback-address", "anim1dest", "--callback-input", "0xaa", *CTX_ARGS,
    )
    assert r.exit_code == 0, r.output
    out = json.loads(r.stdout)
    (msg,) = out["messages"]
    assert msg["contract_addr"] == "anim1dest"
    assert msg["funds"] == []
    assert msg["msg"]["input"] == "0xaa"

    seed_after_add = mix(b"\x00" * 32, b"\x01\x02", CTX)
    assert msg["msg"]["random_bytes"] == "0x" + expand(seed_after_add, 16).hex()

    with SQLiteKeyValue(db) as kv:
        stored = kv.get(SEED_KEY)
    assert stored == mix(seed_after_add, b"anim1dest\xaa", CTX)
    # The seed itself is never printed.
    assert stored.hex() not in r.output


def test_add_entropy_text(tmp_path) -> None:
    db = str(tmp_path / "state.db")
    assert _invoke("init", "--db", db, *CTX_ARGS).exit_code == 0
    r = _invoke("add-entropy", "--db", db, "--text", "hello", *CTX_ARGS)
    assert r.exit_code == 0, r.output
    with SQLiteKeyValue(db) as kv:
        assert kv.get(SEED_KEY) == mix(b"\x00" * 32, b"hello", CTX)


def test_add_entropy_requires_exactly_one_source(tmp_path) -> None:
    db = str(tmp_path / "state.db")
    assert _invoke("add-entropy", "--db", db).exit_code == 1
    assert _invoke("add-entropy", "--db", db, "--entropy", "0x01", "--text", "x").exit_code == 1


def test_uninitialized_exits_nonzero(tmp_path) -> None:
    db = str(tmp_path / "state.db")
    r = _invoke("get-random", "--db", db, "--bytes", "4", "--callback-address", "anim1dest")
    assert r.exit_code == 1
    assert "UninitializedSeed" in r.output


def test_excessive_length_leaves_state(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    db = str(tmp_path / "state.db")
    monkeypatch.setenv("ANIMICA_ENTROPY_MAX_RANDOM_BYTES", "8")
    assert _invoke("init", "--db", db).exit_code == 0
    r = _invoke("get-random", "--db", db, "--bytes", "9", "--callback-address", "anim1dest")
    assert r.exit_code == 1
    assert "ExcessiveLength" in r.output
    with SQLiteKeyValue(db) as kv:
        assert kv.get(SEED_KEY) == b"\x00" * 32


def test_bad_hex_argument(tmp_path) -> None:
    db = str(tmp_path / "state.db")
    assert _invoke("init", "--db", db).exit_code == 0
    r = _invoke("add-entropy", "--db", db, "--entropy", "0xzz")
    assert r.exit_code == 1
    assert "invalid --entropy" in r.output


def test_query_and_migrate(tmp_path) -> None:
    db = str(tmp_path / "state.db")
    assert _invoke("init", "--db", db).exit_code == 0
    r = _invoke("query", "--db", db)
    assert r.exit_code == 0, r.output
    assert json.loads(r.stdout) == {"ok": True, "data": "0x"}
    r = _invoke("migrate", "--db", db)
    assert r.exit_code == 0, r.output


def test_config_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANIMICA_ENTROPY_MAX_ENTROPY_BYTES", "99")
    r = _invoke("config")
    assert r.exit_code == 0, r.output
    assert json.loads(r.stdout)["max_entropy_bytes"] == 99

    monkeypatch.setenv("ANIMICA_ENTROPY_MAX_ENTROPY_BYTES", "nope")
    assert _invoke("config").exit_code == 1

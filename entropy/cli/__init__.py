"""
entropy.cli
-----------

Local CLI driving the entropy accumulator through the reference host over a
SQLite state file. Useful for devnet smoke tests and for inspecting the
callback a GetRandom would emit.

Commands:
  - init         : instantiate (seed ← 32 zero bytes)
  - add-entropy  : contribute bytes (hex via --entropy or UTF-8 via --text)
  - get-random   : request N bytes; prints the outbound callback message
  - query        : host-compliance read stub
  - migrate      : host-compliance migration stub
  - config       : print the effective configuration

Every state-changing command takes the call context: --sender, --chain-id,
--height, --time. The seed is never printed.

Environment:
  ANIMICA_ENTROPY_* variables configure bounds (see entropy.config).

Example:
  python -m entropy.cli init --db ./state.db
  python -m entropy.cli add-entropy --db ./state.db --entropy 0x0102
  python -m entropy.cli get-random --db ./state.db --bytes 16 --callback-address anim1xyz --callback-input 0xaa
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

import typer

from ..adapters.host import LocalHost
from ..callback import decode_answer
from ..config import EntropyConfig
from ..errors import EntropyError
from ..store.sqlite import SQLiteKeyValue
from ..types.context import CallContext, ContextError, to_bytes
from ..types.messages import AddEntropy, GetRandom

__all__ = ["app", "main"]

app = typer.Typer(
    name="omni-entropy",
    help="Animica entropy accumulator (add entropy → get random → ratchet).",
    no_args_is_help=True,
    add_completion=False,
)


# ---- shared options ----------------------------------------------------------


def _opt_db() -> Optional[str]:
    return typer.Option(None, "--db", help="SQLite state file (default: config store_path).")  # type: ignore[return-value]


def _opt_sender() -> str:
    return typer.Option("0x" + "00" * 20, "--sender", "-s", help="Caller address as 0x-hex.")  # type: ignore[return-value]


def _opt_chain() -> str:
    return typer.Option("animica-devnet", "--chain-id", help="Chain identifier.")  # type: ignore[return-value]


def _opt_height() -> int:
    return typer.Option(1, "--height", min=0, help="Block height.")  # type: ignore[return-value]


def _opt_time() -> int:
    return typer.Option(0, "--time", min=0, help="Block time (seconds).")  # type: ignore[return-value]


def _opt_log_level() -> str:
    return typer.Option("WARNING", "--log-level", help="Python logging level.")  # type: ignore[return-value]


# ---- helpers -----------------------------------------------------------------


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(msg: str) -> None:
    typer.echo(msg, err=True)
    raise typer.Exit(code=1)


def _ctx(sender: str, chain_id: str, height: int, time: int) -> CallContext:
    try:
        return CallContext(sender=sender, chain_id=chain_id, height=height, time=time)
    except ContextError as e:
        _fail(f"invalid call context: {e}")
        raise  # unreachable; keeps type checkers quiet


def _hex_arg(name: str, value: str) -> bytes:
    try:
        return to_bytes(value)
    except ContextError as e:
        _fail(f"invalid {name}: {e}")
        raise


@contextmanager
def _host(db: Optional[str]) -> Iterator[LocalHost]:
    try:
        cfg = EntropyConfig.from_env()
    except ValueError as e:
        _fail(f"invalid configuration: {e}")
        raise
    kv = SQLiteKeyValue(db or cfg.store_path)
    try:
        yield LocalHost(kv, config=cfg)
    finally:
        kv.close()


@contextmanager
def _surface_errors() -> Iterator[None]:
    try:
        yield
    except EntropyError as e:
        _fail(str(e))


# ---- commands ----------------------------------------------------------------


@app.command("init")
def cmd_init(
    db: Optional[str] = _opt_db(),
    sender: str = _opt_sender(),
    chain_id: str = _opt_chain(),
    height: int = _opt_height(),
    time: int = _opt_time(),
    log_level: str = _opt_log_level(),
) -> None:
    """Instantiate the module: seed ← 32 zero bytes."""
    _setup_logging(log_level)
    ctx = _ctx(sender, chain_id, height, time)
    with _host(db) as host, _surface_errors():
        host.instantiate(ctx)
    typer.echo(json.dumps({"ok": True, "entrypoint": "instantiate"}))


@app.command("add-entropy")
def cmd_add_entropy(
    entropy: Optional[str] = typer.Option(None, "--entropy", "-e", help="0x-hex entropy bytes."),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="UTF-8 text used as entropy."),
    db: Optional[str] = _opt_db(),
    sender: str = _opt_sender(),
    chain_id: str = _opt_chain(),
    height: int = _opt_height(),
    time: int = _opt_time(),
    log_level: str = _opt_log_level(),
) -> None:
    """Contribute entropy to the seed."""
    _setup_logging(log_level)
    if (entropy is None) == (text is None):
        _fail("pass exactly one of --entropy or --text")
    payload = _hex_arg("--entropy", entropy) if entropy is not None else text.encode("utf-8")  # type: ignore[union-attr]
    ctx = _ctx(sender, chain_id, height, time)
    with _host(db) as host, _surface_errors():
        host.execute(ctx, AddEntropy(entropy=payload))
    typer.echo(json.dumps({"ok": True, "entrypoint": "add_entropy", "entropy_len": len(payload)}))


@app.command("get-random")
def cmd_get_random(
    nbytes: int = typer.Option(..., "--bytes", "-n", min=0, help="Number of random bytes."),
    callback_address: str = typer.Option(..., "--callback-address", "-a", help="Destination address."),
    callback_input: str = typer.Option("0x", "--callback-input", "-i", help="0x-hex echo payload."),
    db: Optional[str] = _opt_db(),
    sender: str = _opt_sender(),
    chain_id: str = _opt_chain(),
    height: int = _opt_height(),
    time: int = _opt_time(),
    log_level: str = _opt_log_level(),
) -> None:
    """Request random bytes; prints the callback message the host would route."""
    _setup_logging(log_level)
    echo = _hex_arg("--callback-input", callback_input)
    ctx = _ctx(sender, chain_id, height, time)
    req = GetRandom(length=nbytes, callback_address=callback_address, callback_input=echo)
    with _host(db) as host, _surface_errors():
        resp = host.execute(ctx, req)
    out = []
    for m in resp.messages:
        answer = decode_answer(m.msg)
        out.append(
            {
                "contract_addr": m.contract_addr,
                "funds": list(m.funds),
                "msg": {
                    "random_bytes": "0x" + answer.random_bytes.hex(),
                    "input": "0x" + answer.input.hex(),
                },
            }
        )
    typer.echo(json.dumps({"ok": True, "entrypoint": "get_random", "messages": out}, indent=2))


@app.command("query")
def cmd_query(db: Optional[str] = _opt_db()) -> None:
    """Host-compliance query stub (returns no data)."""
    with _host(db) as host, _surface_errors():
        data = host.query()
    typer.echo(json.dumps({"ok": True, "data": "0x" + data.hex()}))


@app.command("migrate")
def cmd_migrate(
    db: Optional[str] = _opt_db(),
    sender: str = _opt_sender(),
    chain_id: str = _opt_chain(),
    height: int = _opt_height(),
    time: int = _opt_time(),
) -> None:
    """Host-compliance migration stub (no-op)."""
    ctx = _ctx(sender, chain_id, height, time)
    with _host(db) as host, _surface_errors():
        host.migrate(ctx)
    typer.echo(json.dumps({"ok": True, "entrypoint": "migrate"}))


@app.command("config")
def cmd_config() -> None:
    """Print the effective configuration (env + defaults)."""
    try:
        cfg = EntropyConfig.from_env()
    except ValueError as e:
        _fail(f"invalid configuration: {e}")
        return
    typer.echo(cfg.to_json())


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for `omni-entropy` and `python -m entropy.cli`."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="omni-entropy")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()

"""
entropy.handler: request orchestration for the entropy accumulator.

State machine
-------------
One persistent state ("ready") with two self-transitions:

    AddEntropy(entropy)
        seed ← load
        seed' ← mix(seed, entropy, ctx)
        save(seed')                                  → no messages

    GetRandom(n, destination, echo)
        check n ≤ max_random_bytes                   (before any hashing)
        seed ← load
        out ← expand(seed, n)
        msg ← build_callback(out, echo, destination)
        seed' ← mix(seed, utf8(destination) ‖ echo, ctx)
        save(seed')                                  → [msg]

plus `instantiate` (seed ← 0^32) and the `query` / `migrate` compliance stubs.

Atomicity
---------
The seed write is the last step of each transition, so every failure
(uninitialized seed, excessive length, payload construction) raises before
any write reaches storage. Commit of the write together with the returned
message is the host's job: it runs the handler against a pending-writes view
and discards that view if the invocation raises (see
`entropy.adapters.host`).
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .callback import build_callback
from .config import EntropyConfig
from .errors import (
    EntropyError,
    ExcessiveLength,
    InvalidMessage,
    PayloadConstructionFailure,
    UninitializedSeed,
)
from .metrics import METRICS, Metrics
from .mixer import mix, ratchet_payload
from .store import SeedStorage, SeedStore
from .stream import expand
from .types.context import CallContext
from .types.messages import (
    AddEntropy,
    ExecuteMsg,
    GetRandom,
    InitMsg,
    MigrateMsg,
    QueryMsg,
    decode_handle_msg,
)
from .types.response import Response

logger = logging.getLogger(__name__)


def _outcome(exc: BaseException) -> str:
    if isinstance(exc, UninitializedSeed):
        return "uninitialized"
    if isinstance(exc, ExcessiveLength):
        return "excessive_length"
    if isinstance(exc, PayloadConstructionFailure):
        return "payload_failure"
    if isinstance(exc, InvalidMessage):
        return "invalid"
    return "error"


def _check_len(field: str, n: int, limit: int) -> None:
    if n > limit:
        raise ExcessiveLength(field=field, requested=n, limit=limit)


class _Observed:
    """Records the outcome of one entrypoint call; never suppresses errors."""

    __slots__ = ("_handler", "_entrypoint", "_record_ok")

    def __init__(self, handler: "RequestHandler", entrypoint: str, record_ok: bool = True) -> None:
        self._handler = handler
        self._entrypoint = entrypoint
        self._record_ok = record_ok

    def __enter__(self) -> None:
        return None

    def __exit__(self, exc_type, exc, tb) -> bool:
        metrics = self._handler.metrics
        if exc is None:
            if not self._record_ok:
                return False
            outcome = "ok"
        else:
            outcome = _outcome(exc)
            if isinstance(exc, EntropyError):
                logger.warning("%s rejected: %s", self._entrypoint, exc)
        if metrics is not None:
            metrics.record_call(self._entrypoint, outcome)
        return False


class RequestHandler:
    """
    Orchestrates the seed protocol over an injected storage capability.

    Args:
        storage: object with `get(key)` / `set(key, value)`; normally the
                 host's per-invocation pending-writes view.
        config:  operational bounds (defaults to `EntropyConfig()`).
        metrics: Prometheus instruments; defaults to the module singleton
                 when `config.metrics_enabled`, otherwise disabled.
    """

    def __init__(
        self,
        storage: SeedStorage,
        *,
        config: Optional[EntropyConfig] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.config = config or EntropyConfig()
        self.seeds = SeedStore(storage)
        if metrics is None and self.config.metrics_enabled:
            metrics = METRICS
        self.metrics = metrics

    # ---------- instrumentation ----------

    def _observe(self, entrypoint: str, *, record_ok: bool = True) -> _Observed:
        # Class-based: errors are frozen dataclasses, and contextlib would
        # try to reassign __traceback__ on re-raise.
        return _Observed(self, entrypoint, record_ok)

    # ---------- lifecycle ----------

    def instantiate(self, ctx: CallContext, msg: Optional[InitMsg] = None) -> Response:
        """Set the seed to 32 zero bytes."""
        with self._observe("instantiate"):
            self.seeds.initialize()
            logger.info("entropy seed initialized (chain=%s height=%d)", ctx.chain_id, ctx.height)
            return Response.empty()

    # ---------- transitions ----------

    def add_entropy(self, ctx: CallContext, entropy: bytes) -> Response:
        """Fold `entropy` and the call context into the seed."""
        with self._observe("add_entropy"):
            if not isinstance(entropy, (bytes, bytearray)):
                raise InvalidMessage("entropy must be bytes", entrypoint="execute")
            _check_len("entropy", len(entropy), self.config.max_entropy_bytes)
            seed = self.seeds.load()
            self.seeds.save(mix(seed, bytes(entropy), ctx))
            logger.debug(
                "add_entropy sender=0x%s chain=%s height=%d len=%d",
                ctx.sender.hex(), ctx.chain_id, ctx.height, len(entropy),
            )
            if self.metrics is not None:
                self.metrics.observe_entropy(len(entropy))
            return Response.empty()

    def get_random(
        self,
        ctx: CallContext,
        length: int,
        callback_address: str,
        callback_input: bytes = b"",
    ) -> Response:
        """
        Generate `length` bytes from the current seed, address them to
        `callback_address`, ratchet the seed.
        """
        with self._observe("get_random"):
            if not isinstance(length, int) or isinstance(length, bool) or length < 0:
                raise InvalidMessage(f"bytes must be a non-negative int, got {length!r}", entrypoint="execute")
            _check_len("bytes", length, self.config.max_random_bytes)
            if not isinstance(callback_input, (bytes, bytearray)):
                raise InvalidMessage("callback_input must be bytes", entrypoint="execute")
            _check_len("callback_input", len(callback_input), self.config.max_callback_input_bytes)

            seed = self.seeds.load()
            out = expand(seed, length)
            message = build_callback(
                out,
                bytes(callback_input),
                callback_address,
                max_payload_bytes=self.config.max_callback_payload_bytes,
            )
            self.seeds.save(mix(seed, ratchet_payload(callback_address, bytes(callback_input)), ctx))

            logger.debug(
                "get_random sender=0x%s chain=%s height=%d bytes=%d dest=%s",
                ctx.sender.hex(), ctx.chain_id, ctx.height, length, callback_address,
            )
            if self.metrics is not None:
                self.metrics.observe_random(length)
            return Response(messages=(message,))

    # ---------- dispatch ----------

    def execute(self, ctx: CallContext, msg: ExecuteMsg) -> Response:
        """Dispatch a decoded execute message."""
        if isinstance(msg, AddEntropy):
            return self.add_entropy(ctx, msg.entropy)
        if isinstance(msg, GetRandom):
            return self.get_random(ctx, msg.length, msg.callback_address, msg.callback_input)
        with self._observe("execute", record_ok=False):
            raise InvalidMessage(f"unsupported message type {type(msg).__name__}", entrypoint="execute")

    def execute_raw(self, ctx: CallContext, raw: Union[bytes, str]) -> Response:
        """Decode an externally-tagged JSON payload, then dispatch."""
        # Successful decodes are counted under the variant's own entrypoint.
        with self._observe("execute", record_ok=False):
            msg = decode_handle_msg(raw)
        return self.execute(ctx, msg)

    # ---------- host-compliance stubs ----------

    def query(self, msg: Optional[QueryMsg] = None) -> bytes:
        """Read-only entry point required by the host; returns no data."""
        with self._observe("query"):
            return b""

    def migrate(self, ctx: CallContext, msg: Optional[MigrateMsg] = None) -> Response:
        """Migration entry point required by the host; does nothing."""
        with self._observe("migrate"):
            return Response.empty()


__all__ = ["RequestHandler"]

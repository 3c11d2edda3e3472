"""
Reference execution host for the entropy accumulator.

The production host (the chain's execution layer) provides ordering, atomic
invocation, durable storage and message routing. This module models exactly
the slice of that behavior the core depends on, so the CLI and the tests can
drive the handler end to end:

- every invocation runs the handler against a `PendingWrites` view of the
  backing KeyValue;
- if the handler returns, the pending writes are committed (inside
  `kv.transaction()` when the backend offers one) and only then are the
  response's messages appended to the outbox;
- if the handler raises, pending writes are discarded and the exception
  propagates to the caller unchanged.

The outbox is inert: nothing is delivered and nothing is retried.

Typical usage
-------------
    from entropy.adapters.host import LocalHost
    from entropy.store.sqlite import SQLiteKeyValue
    from entropy.types import CallContext

    host = LocalHost(SQLiteKeyValue("./data/entropy/state.db"))
    ctx = CallContext(sender=b"\\x01" * 20, chain_id="animica-devnet", height=1, time=1_700_000_000)
    host.instantiate(ctx)
    host.execute_raw(ctx, b'{"add_entropy": {"entropy": "AQI="}}')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config import EntropyConfig
from ..handler import RequestHandler
from ..metrics import Metrics
from ..store import KeyValue
from ..types.context import CallContext
from ..types.messages import ExecuteMsg, InitMsg, MigrateMsg, QueryMsg, decode_stub
from ..types.response import OutboundMessage, Response

logger = logging.getLogger(__name__)

_DELETED = None


class PendingWrites:
    """
    Write-buffering view over a KeyValue.

    Reads see this invocation's own writes first; nothing reaches the base
    store until `commit()`.
    """

    def __init__(self, base: KeyValue) -> None:
        self._base = base
        self._writes: Dict[bytes, Optional[bytes]] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        if key in self._writes:
            return self._writes[key]
        return self._base.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        if not isinstance(key, (bytes, bytearray)) or not isinstance(value, (bytes, bytearray)):
            raise TypeError("key and value must be bytes")
        self._writes[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._writes[bytes(key)] = _DELETED

    def has(self, key: bytes) -> bool:
        return self.get(key) is not None

    @property
    def dirty_keys(self) -> Tuple[bytes, ...]:
        return tuple(sorted(self._writes))

    def commit(self) -> None:
        for key in sorted(self._writes):
            value = self._writes[key]
            if value is _DELETED:
                self._base.delete(key)
            else:
                self._base.set(key, value)
        self._writes.clear()

    def discard(self) -> None:
        self._writes.clear()


@dataclass(frozen=True)
class Invocation:
    """Audit record of one host invocation."""
    entrypoint: str
    ok: bool
    messages: Tuple[OutboundMessage, ...] = ()
    error: Optional[str] = None


class LocalHost:
    """
    In-process stand-in for the execution host.

    Args:
        kv:      durable backing store (MemoryKeyValue, SQLiteKeyValue, …)
        config:  handler bounds
        metrics: handler metrics (None → handler default)
    """

    def __init__(
        self,
        kv: KeyValue,
        *,
        config: Optional[EntropyConfig] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.kv = kv
        self.config = config or EntropyConfig()
        self.metrics = metrics
        self.outbox: List[OutboundMessage] = []
        self.history: List[Invocation] = []

    # ---------- atomic boundary ----------

    def _commit(self, pending: PendingWrites) -> None:
        tx = getattr(self.kv, "transaction", None)
        if callable(tx):
            with tx():
                pending.commit()
        else:
            pending.commit()

    def _invoke(
        self,
        entrypoint: str,
        call: Callable[[RequestHandler], Response],
        *,
        read_only: bool = False,
    ) -> Response:
        pending = PendingWrites(self.kv)
        handler = RequestHandler(pending, config=self.config, metrics=self.metrics)
        try:
            resp = call(handler)
            if read_only:
                pending.discard()
            else:
                self._commit(pending)
        except Exception as e:
            pending.discard()
            self.history.append(Invocation(entrypoint=entrypoint, ok=False, error=str(e)))
            logger.info("invocation %s aborted, state rolled back: %s", entrypoint, e)
            raise
        self.outbox.extend(resp.messages)
        self.history.append(Invocation(entrypoint=entrypoint, ok=True, messages=resp.messages))
        return resp

    # ---------- entry points ----------

    def instantiate(self, ctx: CallContext, raw: Union[bytes, str, None] = None) -> Response:
        msg = decode_stub(raw, InitMsg, "instantiate") if raw is not None else InitMsg()
        return self._invoke("instantiate", lambda h: h.instantiate(ctx, msg))

    def execute(self, ctx: CallContext, msg: ExecuteMsg) -> Response:
        return self._invoke("execute", lambda h: h.execute(ctx, msg))

    def execute_raw(self, ctx: CallContext, raw: Union[bytes, str]) -> Response:
        return self._invoke("execute", lambda h: h.execute_raw(ctx, raw))

    def query(self, raw: Union[bytes, str, None] = None) -> bytes:
        msg = decode_stub(raw, QueryMsg, "query") if raw is not None else QueryMsg()
        out: List[bytes] = []

        def _call(h: RequestHandler) -> Response:
            out.append(h.query(msg))
            return Response.empty()

        self._invoke("query", _call, read_only=True)
        return out[0]

    def migrate(self, ctx: CallContext, raw: Union[bytes, str, None] = None) -> Response:
        msg = decode_stub(raw, MigrateMsg, "migrate") if raw is not None else MigrateMsg()
        return self._invoke("migrate", lambda h: h.migrate(ctx, msg))

    # ---------- outbox ----------

    def drain_outbox(self) -> List[OutboundMessage]:
        """Return and clear queued outbound messages."""
        out, self.outbox = self.outbox, []
        return out


__all__ = [
    "PendingWrites",
    "Invocation",
    "LocalHost",
]

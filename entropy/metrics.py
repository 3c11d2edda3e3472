"""
Prometheus metrics for the entropy accumulator.

Instruments:
  • calls_total            - handler invocations per entrypoint and outcome
  • random_bytes_total     - pseudorandom bytes released in callbacks
  • entropy_bytes_total    - contributed entropy bytes folded into the seed
  • request_length_bytes   - distribution of requested GetRandom lengths

Label cardinality is bounded: `entrypoint` and `outcome` draw from small fixed
vocabularies, and nothing derived from the seed or outputs is ever exported.

Usage
-----
    from entropy.metrics import METRICS

    METRICS.record_call("get_random", "ok")
    METRICS.observe_random(16)

Tests construct their own `Metrics` with a private CollectorRegistry.
"""

from __future__ import annotations

from typing import Iterable

from prometheus_client import REGISTRY, Counter, Histogram

_ENTRYPOINTS = (
    "instantiate",
    "add_entropy",
    "get_random",
    "query",
    "migrate",
    "execute",  # dispatch-level rejections only (undecodable or unknown message)
)

_OUTCOMES = (
    "ok",
    "uninitialized",     # seed key absent or corrupt
    "excessive_length",  # rejected before hashing
    "payload_failure",   # callback could not be serialized
    "invalid",           # message did not decode
    "error",             # anything else
)

# Requested output lengths (bytes), 0 through the default 64 KiB cap.
_LENGTH_BUCKETS = (
    0.0, 1.0, 8.0, 16.0, 32.0, 64.0, 128.0, 256.0,
    1024.0, 4096.0, 16384.0, 65536.0,
)


class Metrics:
    """
    Container for the entropy accumulator's Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Registry the instruments are registered with.
    """

    def __init__(
        self,
        *,
        namespace: str = "animica",
        subsystem: str = "entropy",
        registry=REGISTRY,
        length_buckets: Iterable[float] = _LENGTH_BUCKETS,
    ) -> None:
        self.calls_total = Counter(
            "calls_total",
            "Handler invocations, labeled by entrypoint and outcome.",
            labelnames=("entrypoint", "outcome"),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.random_bytes_total = Counter(
            "random_bytes_total",
            "Pseudorandom bytes released in callback messages.",
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.entropy_bytes_total = Counter(
            "entropy_bytes_total",
            "Contributed entropy bytes mixed into the seed.",
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.request_length_bytes = Histogram(
            "request_length_bytes",
            "Requested GetRandom output length (bytes).",
            buckets=tuple(length_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    def record_call(self, entrypoint: str, outcome: str) -> None:
        if entrypoint not in _ENTRYPOINTS:
            raise ValueError(f"unknown entrypoint label: {entrypoint!r}")
        if outcome not in _OUTCOMES:
            outcome = "error"
        self.calls_total.labels(entrypoint=entrypoint, outcome=outcome).inc()

    def observe_random(self, n: int) -> None:
        """Record a completed GetRandom releasing `n` bytes."""
        self.random_bytes_total.inc(n)
        self.request_length_bytes.observe(float(n))

    def observe_entropy(self, n: int) -> None:
        self.entropy_bytes_total.inc(n)


METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
]

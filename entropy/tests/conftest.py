from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from entropy.adapters.host import LocalHost
from entropy.config import EntropyConfig
from entropy.handler import RequestHandler
from entropy.metrics import Metrics
from entropy.store import MemoryKeyValue
from entropy.types import CallContext

SENDER = bytes.fromhex("11" * 20)
CHAIN_ID = "animica-devnet-1"
HEIGHT = 42
TIME = 1_700_000_000


@pytest.fixture
def ctx() -> CallContext:
    return CallContext(sender=SENDER, chain_id=CHAIN_ID, height=HEIGHT, time=TIME)


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> Metrics:
    return Metrics(registry=registry)


@pytest.fixture
def kv() -> MemoryKeyValue:
    return MemoryKeyValue()


@pytest.fixture
def handler(kv: MemoryKeyValue, metrics: Metrics) -> RequestHandler:
    return RequestHandler(kv, config=EntropyConfig(), metrics=metrics)


@pytest.fixture
def host(kv: MemoryKeyValue, metrics: Metrics) -> LocalHost:
    return LocalHost(kv, config=EntropyConfig(), metrics=metrics)

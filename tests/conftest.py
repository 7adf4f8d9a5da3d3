"""Shared launch fixtures. Timeline: created at T0, discovery ends at T0+3600, predict ends 86400 later."""

from types import SimpleNamespace

import pytest

from predlaunch.engine import phase
from predlaunch.engine.ports import FixedClock, MemoryEventSink, MemoryMinter, MemoryPaymentRail
from predlaunch.engine.service import LaunchService
from predlaunch.storage.memory import MemoryLaunchStore

T0 = 1_000
DISCOVERY_END = T0 + 3600
PREDICT_END = DISCOVERY_END + 86400
SOL = 1_000_000_000


@pytest.fixture
def discovery_launch():
    return phase.create("authority", "ALPHA", "ALP", 1_000_000, 3600, 86400, now=T0)


@pytest.fixture
def predict_launch(discovery_launch):
    return phase.advance_to_predict(discovery_launch, 5_000, now=DISCOVERY_END)


@pytest.fixture
def settle_at(predict_launch):
    def _settle(value, launch=None):
        return phase.settle(launch or predict_launch, value, now=PREDICT_END)

    return _settle


@pytest.fixture
def env():
    """LaunchService wired to in-memory collaborators and a fixed clock at T0."""
    clock = FixedClock(T0)
    rail = MemoryPaymentRail()
    minter = MemoryMinter()
    sink = MemoryEventSink()
    store = MemoryLaunchStore()
    service = LaunchService(store, payment_rail=rail, minter=minter, clock=clock, events=sink)
    return SimpleNamespace(service=service, clock=clock, rail=rail, minter=minter, sink=sink, store=store)

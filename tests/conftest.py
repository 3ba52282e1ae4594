"""
Shared fixtures for the IntentRelay test suite
"""

import pytest

from intentrelay.domains.attribution.models import SignalTuple
from intentrelay.domains.attribution.services import (
    AttributionService,
    InMemoryIntentStore,
    InMemoryStatsRecorder,
)
from intentrelay.domains.presentation import LinkBuilder

START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced millisecond clock"""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryIntentStore(clock=clock)


@pytest.fixture
def stats():
    return InMemoryStatsRecorder()


@pytest.fixture
def links():
    return LinkBuilder(
        ios_app_id="987654321",
        android_package="com.example.app",
        app_scheme="exampleapp",
        website_url="https://example.com",
    )


@pytest.fixture
def service(store, stats, links, clock):
    return AttributionService(store=store, stats=stats, links=links, clock=clock)


@pytest.fixture
def ios_click_signals():
    return SignalTuple(
        platform_name="iOS",
        platform_version="17.1",
        network_address="203.0.113.10",
    )

"""
Pytest configuration and fixtures.
"""
from typing import List, Optional, Sequence

import pytest

from townhall_exporter.internal.domain.errors import FetchError


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Page fetcher returning canned documents."""

    def __init__(self, document: str = "") -> None:
        self.document = document
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.document


def build_page(*blocks: Sequence[str], marker: str = "Wartende Personen") -> str:
    """Build a waiting-time page with one queue block per value list."""
    rendered = []
    for values in blocks:
        spans = "".join(
            f'<div class="flex"><span>{value}</span></div>' for value in values
        )
        rendered.append(f'<div class="fr-view"><h3>{marker}</h3>{spans}</div>')
    return (
        "<html><body>"
        '<div class="fr-view"><p>Willkommen im Bürgeramt</p></div>'
        + "".join(rendered)
        + "</body></html>"
    )


CITIZEN_VALUES = ["12", "B3", "7 Minuten"]
DRIVERS_LICENSE_VALUES = ["4", "F1", "3 Minuten"]


@pytest.fixture
def clock():
    """Fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def wall_clock():
    """Fake wall clock at 2024-01-01T00:00:00Z."""
    return FakeClock(start=1704067200.0)


@pytest.fixture
def page():
    """Healthy waiting-time page."""
    return build_page(CITIZEN_VALUES, DRIVERS_LICENSE_VALUES)


@pytest.fixture
def fetcher(page):
    """Fetcher serving the healthy page."""
    return FakeFetcher(page)


@pytest.fixture
def failing_fetcher():
    """Fetcher that always fails."""
    fake = FakeFetcher()
    fake.error = FetchError("https://example.invalid", "ConnectError: refused")
    return fake


@pytest.fixture
def page_builder():
    """Factory for waiting-time pages."""
    return build_page


@pytest.fixture
def make_fetcher():
    """Factory for fake fetchers."""
    return FakeFetcher

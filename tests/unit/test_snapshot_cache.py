"""
Unit tests for the snapshot cache.
"""
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock

from townhall_exporter.internal.domain.errors import FetchError, ScrapeError
from townhall_exporter.internal.infrastructure.cache import SnapshotCache
from townhall_exporter.internal.parsers import WaitingTimePageParser
from townhall_exporter.internal.tracker import TicketTracker
from townhall_exporter.internal.usecase.scrape_queues import QueueScraper


TTL = timedelta(seconds=30)


@pytest.fixture
def scraper(fetcher, clock, wall_clock):
    """Real scraper on top of the fake fetcher."""
    return QueueScraper(
        fetcher=fetcher,
        parser=WaitingTimePageParser(),
        tracker=TicketTracker(clock=clock),
        source_url="https://erlangen.example/wartezeit",
        clock=clock,
        wall_clock=wall_clock,
    )


@pytest.fixture
def cache(scraper, clock):
    """Cache in front of the scraper."""
    return SnapshotCache(scraper, ttl=TTL, clock=clock)


class TestSnapshotCache:
    """Tests for SnapshotCache."""

    @pytest.mark.asyncio
    async def test_miss_scrapes_and_marks_cached(self, cache, fetcher):
        """Test that the first call scrapes and stores a cached snapshot."""
        snapshot = await cache.get_or_scrape()

        assert len(fetcher.calls) == 1
        assert snapshot.from_cache is True
        assert cache.cached is snapshot

    @pytest.mark.asyncio
    async def test_hit_within_ttl_is_identical(self, cache, fetcher, clock):
        """Test that calls within the TTL return the same snapshot."""
        first = await cache.get_or_scrape()
        clock.advance(29)
        second = await cache.get_or_scrape()

        assert second == first
        assert second.from_cache == first.from_cache
        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_hit_at_exact_ttl(self, cache, fetcher, clock):
        """Test that a snapshot exactly TTL old is still served."""
        await cache.get_or_scrape()
        clock.advance(30)
        await cache.get_or_scrape()

        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_expired_triggers_exactly_one_fetch(self, cache, fetcher, clock):
        """Test that an expired snapshot is refreshed once."""
        first = await cache.get_or_scrape()
        clock.advance(31)

        second = await cache.get_or_scrape()
        third = await cache.get_or_scrape()

        assert len(fetcher.calls) == 2
        assert second.created_at_monotonic > first.created_at_monotonic
        assert third == second

    @pytest.mark.asyncio
    async def test_ttl_override(self, cache, fetcher, clock):
        """Test passing a TTL per call."""
        await cache.get_or_scrape()
        clock.advance(5)

        await cache.get_or_scrape(ttl=timedelta(seconds=1))

        assert len(fetcher.calls) == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_slot(self, cache, fetcher, clock):
        """Test that a failed refresh propagates and leaves the old snapshot."""
        first = await cache.get_or_scrape()
        clock.advance(31)
        fetcher.error = FetchError("https://erlangen.example/wartezeit", "timeout")

        with pytest.raises(ScrapeError):
            await cache.get_or_scrape()

        assert cache.cached is first
        assert cache.is_fresh() is False

    @pytest.mark.asyncio
    async def test_failed_first_scrape_leaves_empty_slot(self, clock):
        """Test that nothing is stored when the very first scrape fails."""
        scraper = AsyncMock()
        scraper.scrape.side_effect = ScrapeError(FetchError("https://x", "refused"))
        cache = SnapshotCache(scraper, ttl=TTL, clock=clock)

        with pytest.raises(ScrapeError):
            await cache.get_or_scrape()

        assert cache.cached is None

    def test_default_ttl(self, scraper):
        """Test the default time-to-live."""
        assert SnapshotCache(scraper).ttl == timedelta(seconds=30)

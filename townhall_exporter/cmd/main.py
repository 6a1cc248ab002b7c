"""
Exporter Main Entry Point.

Wires the scrape pipeline together and serves it on the metrics endpoint.
"""

import asyncio
import signal
from typing import Optional

from dotenv import load_dotenv

from townhall_exporter.config.settings import Settings, get_settings
from townhall_exporter.internal.infrastructure.cache import SnapshotCache
from townhall_exporter.internal.infrastructure.http import HttpPageFetcher
from townhall_exporter.internal.parsers import WaitingTimePageParser
from townhall_exporter.internal.tracker import TicketTracker
from townhall_exporter.internal.transport.tcp import MetricsServer
from townhall_exporter.internal.usecase import MetricsService, QueueScraper
from townhall_exporter.pkg.logger import get_logger, setup_logging


# Load environment variables
load_dotenv()

logger = get_logger(__name__)


class Exporter:
    """
    Owns the exporter's resources.

    Builds the pipeline from settings and releases the HTTP client on stop.
    """

    def __init__(self, settings: Settings):
        """Initialize the exporter."""
        self._settings = settings
        self._stop_task: Optional[asyncio.Task] = None
        self._fetcher = HttpPageFetcher(
            timeout=settings.request_timeout_seconds,
            user_agent=settings.user_agent,
        )
        parser = WaitingTimePageParser(
            block_selector=settings.block_selector,
            value_selector=settings.value_selector,
            block_marker=settings.block_marker,
            waiting_time_suffix=settings.waiting_time_suffix,
        )
        tracker = TicketTracker()
        scraper = QueueScraper(
            fetcher=self._fetcher,
            parser=parser,
            tracker=tracker,
            source_url=settings.source_url,
        )
        cache = SnapshotCache(scraper, ttl=settings.cache_ttl)

        if settings.expose_internal_metrics:
            service = MetricsService.with_internal_metrics(
                cache, tracker, prefix=settings.metric_prefix
            )
        else:
            service = MetricsService(cache, tracker, prefix=settings.metric_prefix)

        self._server = MetricsServer(
            service,
            host=settings.host,
            port=settings.port,
            metrics_path=settings.metrics_path,
            read_timeout=settings.read_timeout,
        )

    async def run(self) -> None:
        """Serve until stopped."""
        logger.info(
            "Starting exporter",
            app=self._settings.app_name,
            source_url=self._settings.source_url,
            cache_ttl_seconds=self._settings.cache_ttl_seconds,
        )
        await self._server.serve_forever()

    def request_stop(self) -> asyncio.Task:
        """Start shutting down without waiting. Safe to call repeatedly."""
        if self._stop_task is None:
            self._stop_task = asyncio.create_task(self._shutdown())
        return self._stop_task

    async def stop(self) -> None:
        """Stop serving and wait until all resources are released."""
        await self.request_stop()

    async def _shutdown(self) -> None:
        logger.info("Stopping exporter...")
        await self._server.stop()
        await self._fetcher.close()
        logger.info("Exporter stopped")


async def main() -> None:
    """Main entry point."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.json_logs)

    exporter = Exporter(settings)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    def signal_handler() -> None:
        logger.info("Received shutdown signal")
        exporter.request_stop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await exporter.run()
    finally:
        await exporter.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()

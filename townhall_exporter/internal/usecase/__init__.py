"""
Use cases of the town hall exporter.
"""
from .scrape_queues import QueueScraper, PageFetcherProtocol
from .collect_metrics import MetricsService

__all__ = [
    "QueueScraper",
    "PageFetcherProtocol",
    "MetricsService",
]

"""
Metrics for the town hall exporter.

Provides the queue metrics renderer and the exporter's own Prometheus metrics.
"""

from .exposition import render_metrics
from .prometheus import (
    SCRAPES_TOTAL,
    SCRAPE_DURATION,
    CACHE_LOOKUPS,
    TRACKED_TICKETS,
    REQUESTS_TOTAL,
)

__all__ = [
    "render_metrics",
    "SCRAPES_TOTAL",
    "SCRAPE_DURATION",
    "CACHE_LOOKUPS",
    "TRACKED_TICKETS",
    "REQUESTS_TOTAL",
]

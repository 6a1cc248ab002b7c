"""
Prometheus Metrics for the exporter itself.

Defines metrics for monitoring the exporter's scraping and serving health.
They are separate from the queue metrics rendered for the town hall page.
"""

from prometheus_client import Counter, Histogram, Gauge

# Scrape metrics
SCRAPES_TOTAL = Counter(
    'townhall_exporter_scrapes_total',
    'Scrapes of the waiting-time page',
    ['status']  # success, fetch_error, parse_error
)

SCRAPE_DURATION = Histogram(
    'townhall_exporter_scrape_duration_seconds',
    'Waiting-time page scrape duration',
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Cache metrics
CACHE_LOOKUPS = Counter(
    'townhall_exporter_cache_lookups_total',
    'Snapshot cache lookups',
    ['result']  # hit, miss
)

TRACKED_TICKETS = Gauge(
    'townhall_exporter_tracked_tickets',
    'Tickets currently tracked for wait-time measurement'
)

# Serving metrics
REQUESTS_TOTAL = Counter(
    'townhall_exporter_requests_total',
    'Requests answered by the metrics endpoint',
    ['status_code']
)

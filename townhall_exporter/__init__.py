"""
Town hall queue exporter.

Scrapes the Erlangen town hall waiting-time page and serves the queue state
as Prometheus metrics.
"""

__version__ = "1.0.0"

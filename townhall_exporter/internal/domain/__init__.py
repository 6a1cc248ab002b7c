"""
Domain layer for the town hall queue exporter.
"""
from .errors import (
    ExporterError,
    FetchError,
    ParseError,
    TicketParseError,
    ScrapeError,
)
from .ticket import TicketCategory, TicketId
from .snapshot import QueueSnapshot, Snapshot

__all__ = [
    "ExporterError",
    "FetchError",
    "ParseError",
    "TicketParseError",
    "ScrapeError",
    "TicketCategory",
    "TicketId",
    "QueueSnapshot",
    "Snapshot",
]

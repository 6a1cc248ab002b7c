"""
Queue snapshot entities.

A Snapshot is the complete result of one scrape: the state of both service
queues plus the bookkeeping needed for caching and export.
"""
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Dict, Optional

from .errors import ParseError
from .ticket import TicketId


@dataclass(frozen=True)
class QueueSnapshot:
    """
    State of one service queue at a point in time.

    Attributes:
        people_waiting: Number of people waiting ("Wartende Personen").
        last_called_ticket: Last called ticket ("Aktuelle Aufrufnummer").
        waiting_time_estimate: Published estimate in minutes
            ("Durchschnittliche Wartezeit").
        tracked_wait_duration: Wait time measured by the ticket tracker,
            only present when a predicted ticket was actually called.
    """
    people_waiting: int
    last_called_ticket: TicketId
    waiting_time_estimate: int
    tracked_wait_duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        """Validate queue constraints."""
        if self.people_waiting < 0:
            raise ParseError("people_waiting", f"negative value {self.people_waiting}")
        if self.waiting_time_estimate < 0:
            raise ParseError(
                "waiting_time_estimate", f"negative value {self.waiting_time_estimate}"
            )

    def with_tracked_wait(self, duration: Optional[timedelta]) -> "QueueSnapshot":
        """Return a copy carrying the tracker's measurement."""
        return replace(self, tracked_wait_duration=duration)


@dataclass(frozen=True)
class Snapshot:
    """
    Both service queues captured by a single scrape.

    Attributes:
        citizen: Citizen services queue ("Bürgerservice").
        drivers_license: Drivers-license queue ("Fahrerlaubnisangelegenheiten").
        from_cache: Whether this snapshot is the one held by the cache.
        scrape_duration: How long fetching and parsing took.
        created_at_monotonic: Monotonic clock reading at creation, used for
            cache expiry.
        created_at_wall: Wall-clock creation time since the Unix epoch, zero
            when the clock was unavailable.
    """
    citizen: QueueSnapshot
    drivers_license: QueueSnapshot
    from_cache: bool
    scrape_duration: timedelta
    created_at_monotonic: float
    created_at_wall: timedelta = timedelta(0)

    def mark_cached(self) -> "Snapshot":
        """Return a copy flagged as served from cache."""
        return replace(self, from_cache=True)

    def age(self, now: float) -> timedelta:
        """Age of the snapshot relative to a monotonic clock reading."""
        return timedelta(seconds=now - self.created_at_monotonic)

    def queues(self) -> Dict[str, QueueSnapshot]:
        """Queues keyed by their service label, in export order."""
        return {
            "citizen": self.citizen,
            "drivers_license": self.drivers_license,
        }

"""
Ticket wait-time tracker.

Measures how long tickets actually wait. On every scrape the tracker predicts
which ticket will be called once the current queue has drained
(``last called + people waiting``) and remembers when that prediction was
first made. When the predicted ticket later shows up as the called ticket,
the elapsed time is an empirical wait time, independent of the estimate the
town hall publishes.
"""
import time
from datetime import timedelta
from typing import Callable, Dict, Optional

from townhall_exporter.internal.domain.ticket import TicketCategory, TicketId
from townhall_exporter.pkg.logger.logger import get_logger


logger = get_logger(__name__)


class TicketTracker:
    """
    Map of predicted tickets to the monotonic instant they were first seen.

    Not thread-safe; callers serialize access (see MetricsService).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the tracker.

        Args:
            clock: Monotonic clock returning seconds.
        """
        self._clock = clock
        self._first_seen: Dict[TicketId, float] = {}

    def update(
        self,
        observed_ticket: TicketId,
        queue_length: int,
        expected_category: TicketCategory,
    ) -> Optional[timedelta]:
        """
        Feed one scraped queue into the tracker.

        Args:
            observed_ticket: Ticket currently being called.
            queue_length: Number of people waiting behind it.
            expected_category: Category this queue serves.

        Returns:
            Time since ``observed_ticket`` was first predicted, or None if
            it was never predicted (or the observation is not usable).
        """
        if observed_ticket.category is TicketCategory.NONE:
            # Off-hours: numbering restarts, old predictions are worthless
            self.purge(expected_category)
            return None

        if observed_ticket.category is not expected_category:
            logger.debug(
                "Ignoring foreign ticket",
                ticket=str(observed_ticket),
                expected=expected_category.value,
            )
            return None

        now = self._clock()
        recorded = self._first_seen.get(observed_ticket)
        elapsed = timedelta(seconds=now - recorded) if recorded is not None else None

        predicted = observed_ticket.advanced_by(queue_length)
        self._first_seen.setdefault(predicted, now)

        if elapsed is not None:
            logger.debug(
                "Tracked ticket called",
                ticket=str(observed_ticket),
                wait_seconds=int(elapsed.total_seconds()),
            )
        return elapsed

    def purge(self, category: TicketCategory) -> int:
        """
        Drop every tracked ticket of a category.

        Returns:
            Number of dropped entries.
        """
        stale = [ticket for ticket in self._first_seen if ticket.category is category]
        for ticket in stale:
            del self._first_seen[ticket]
        if stale:
            logger.info("Ticket tracker reset", category=category.value, purged=len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._first_seen)

    def __contains__(self, ticket: object) -> bool:
        return ticket in self._first_seen

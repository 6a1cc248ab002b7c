"""
Queue metrics exposition.

Renders a Snapshot in the Prometheus text format. Line order, label sets and
the tab separators are kept stable because dashboards and recording rules
depend on them.
"""
from datetime import timedelta
from typing import List

from townhall_exporter.internal.domain.snapshot import QueueSnapshot, Snapshot
from townhall_exporter.internal.domain.ticket import TicketCategory


DEFAULT_PREFIX = "erth"

_SECTION_TITLES = {
    "citizen": "Information on the citizen service",
    "drivers_license": "Information on the drivers-license service",
}


def _millis(duration: timedelta) -> int:
    return duration // timedelta(milliseconds=1)


def _queue_lines(prefix: str, service: str, queue: QueueSnapshot) -> List[str]:
    lines = [f'{prefix}_people_waiting{{service="{service}"}}\t\t{queue.people_waiting}']

    ticket = queue.last_called_ticket
    if ticket.category is not TicketCategory.NONE:
        lines.append(
            f'{prefix}_last_called_ticket{{service="{service}",type="{ticket.category.value}"}}'
            f'\t{ticket.sequence}'
        )

    lines.append(f'{prefix}_waiting_time{{service="{service}"}}\t\t{queue.waiting_time_estimate}')

    if queue.tracked_wait_duration is not None:
        seconds = queue.tracked_wait_duration // timedelta(seconds=1)
        lines.append(f'{prefix}_tracked_waiting_time{{service="{service}"}}\t\t{seconds}')

    return lines


def render_metrics(
    snapshot: Snapshot,
    tracked_tickets: int,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """
    Render a snapshot as metric lines.

    Args:
        snapshot: Snapshot to export.
        tracked_tickets: Number of tickets currently held by the tracker.
        prefix: Metric name prefix.

    Returns:
        Newline-terminated exposition text.
    """
    sections = []
    for service, queue in snapshot.queues().items():
        lines = [f"# {_SECTION_TITLES[service]}"]
        lines.extend(_queue_lines(prefix, service, queue))
        sections.append("\n".join(lines) + "\n")

    meta = [
        "# Meta information",
        f"{prefix}_cached\t\t{int(snapshot.from_cache)}",
        f"{prefix}_tracked_tickets\t{tracked_tickets}",
        f"{prefix}_scrape_duration\t{_millis(snapshot.scrape_duration)}",
        f"{prefix}_scrape_timestamp\t{_millis(snapshot.created_at_wall)}",
    ]
    sections.append("\n".join(meta) + "\n")

    return "\n".join(sections)

"""
Unit tests for the queue metrics renderer.
"""
from datetime import timedelta

from townhall_exporter.internal.domain.snapshot import QueueSnapshot, Snapshot
from townhall_exporter.internal.domain.ticket import TicketId
from townhall_exporter.internal.metrics import render_metrics


def make_snapshot(citizen_ticket="B3", dl_ticket="F1", citizen_wait=None, dl_wait=None, cached=True):
    return Snapshot(
        citizen=QueueSnapshot(12, TicketId.parse(citizen_ticket), 7, citizen_wait),
        drivers_license=QueueSnapshot(4, TicketId.parse(dl_ticket), 3, dl_wait),
        from_cache=cached,
        scrape_duration=timedelta(milliseconds=153, microseconds=900),
        created_at_monotonic=1000.0,
        created_at_wall=timedelta(seconds=1704067200, milliseconds=42),
    )


class TestRenderMetrics:
    """Tests for render_metrics."""

    def test_full_output(self):
        """Test the exact exposition text including optional lines."""
        snapshot = make_snapshot(
            citizen_wait=timedelta(seconds=421, milliseconds=999),
            dl_wait=timedelta(seconds=60),
        )

        text = render_metrics(snapshot, tracked_tickets=5)

        assert text == (
            "# Information on the citizen service\n"
            'erth_people_waiting{service="citizen"}\t\t12\n'
            'erth_last_called_ticket{service="citizen",type="B"}\t3\n'
            'erth_waiting_time{service="citizen"}\t\t7\n'
            'erth_tracked_waiting_time{service="citizen"}\t\t421\n'
            "\n"
            "# Information on the drivers-license service\n"
            'erth_people_waiting{service="drivers_license"}\t\t4\n'
            'erth_last_called_ticket{service="drivers_license",type="F"}\t1\n'
            'erth_waiting_time{service="drivers_license"}\t\t3\n'
            'erth_tracked_waiting_time{service="drivers_license"}\t\t60\n'
            "\n"
            "# Meta information\n"
            "erth_cached\t\t1\n"
            "erth_tracked_tickets\t5\n"
            "erth_scrape_duration\t153\n"
            "erth_scrape_timestamp\t1704067200042\n"
        )

    def test_optional_lines_are_skipped(self):
        """Test that NONE tickets and missing tracked waits emit no lines."""
        text = render_metrics(make_snapshot(citizen_ticket="—", dl_ticket="—", cached=False), 0)

        assert "erth_last_called_ticket" not in text
        assert "erth_tracked_waiting_time" not in text
        assert "erth_cached\t\t0\n" in text
        assert "erth_tracked_tickets\t0\n" in text

    def test_only_present_tracked_wait_is_rendered(self):
        """Test that each service's tracked wait is independent."""
        text = render_metrics(make_snapshot(dl_wait=timedelta(seconds=90)), 2)

        assert 'erth_tracked_waiting_time{service="citizen"}' not in text
        assert 'erth_tracked_waiting_time{service="drivers_license"}\t\t90\n' in text

    def test_custom_prefix(self):
        """Test overriding the metric name prefix."""
        text = render_metrics(make_snapshot(), 1, prefix="townhall")

        assert 'townhall_people_waiting{service="citizen"}\t\t12\n' in text
        assert "erth_" not in text

    def test_every_metric_line_has_numeric_value(self):
        """Test the output parses as name/value lines."""
        text = render_metrics(make_snapshot(citizen_wait=timedelta(seconds=3)), 1)

        for line in text.splitlines():
            if not line or line.startswith("#"):
                continue
            name, value = line.rsplit("\t", 1)
            assert name.strip()
            assert value.isdigit()

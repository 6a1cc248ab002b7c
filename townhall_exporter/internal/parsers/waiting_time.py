"""
Erlangen town hall waiting-time page parser.

The page renders one block per service queue. Each block contains a list of
``<span>`` values in a fixed order::

    Wartende Personen            -> people waiting
    Aktuelle Aufrufnummer        -> last called ticket
    Durchschnittliche Wartezeit  -> waiting-time estimate ("7 Minuten")
"""
from typing import List

import soupsieve
from bs4 import BeautifulSoup, Tag

from townhall_exporter.internal.domain.errors import ParseError
from townhall_exporter.internal.domain.snapshot import QueueSnapshot
from townhall_exporter.internal.domain.ticket import TicketId
from townhall_exporter.internal.parsers.base import BaseQueueParser
from townhall_exporter.pkg.logger.logger import get_logger


logger = get_logger(__name__)


DEFAULT_BLOCK_SELECTOR = ".fr-view"
DEFAULT_VALUE_SELECTOR = ".flex>span"
DEFAULT_BLOCK_MARKER = "Wartende Personen"
DEFAULT_WAITING_TIME_SUFFIX = " Minuten"

# Number of values each queue block has to provide
REQUIRED_FIELDS = 3
# Citizen services and drivers-license services
REQUIRED_BLOCKS = 2


class _InvalidSelector:
    """Stand-in pattern for a selector that failed to compile."""

    def __init__(self, field: str, detail: str) -> None:
        self._field = field
        self._detail = detail

    def select(self, tag: Tag) -> List[Tag]:
        raise ParseError(self._field, self._detail)


def _compile_selector(field: str, selector: str):
    """
    Compile a CSS selector once.

    A malformed selector does not fail construction. Every parse then raises
    ParseError, so the endpoint reports the failure like any other bad page.
    """
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        logger.error("Invalid CSS selector", field=field, selector=selector, error=str(e))
        return _InvalidSelector(field, f"invalid selector {selector!r}: {e}")


class WaitingTimePageParser(BaseQueueParser):
    """Parser for the erlangen.de "aktuelle Wartezeit" page."""

    def __init__(
        self,
        block_selector: str = DEFAULT_BLOCK_SELECTOR,
        value_selector: str = DEFAULT_VALUE_SELECTOR,
        block_marker: str = DEFAULT_BLOCK_MARKER,
        waiting_time_suffix: str = DEFAULT_WAITING_TIME_SUFFIX,
    ) -> None:
        """
        Initialize the parser.

        Args:
            block_selector: CSS selector for the queue blocks.
            value_selector: CSS selector for the values inside a block.
            block_marker: Text a block's markup must contain to be a queue block.
            waiting_time_suffix: Unit suffix stripped from the waiting-time value.
        """
        self._block_pattern = _compile_selector("block_selector", block_selector)
        self._value_pattern = _compile_selector("value_selector", value_selector)
        self._block_marker = block_marker
        self._waiting_time_suffix = waiting_time_suffix

    @property
    def name(self) -> str:
        return "erlangen.de"

    def parse(self, document: str) -> List[QueueSnapshot]:
        """Extract one queue snapshot per queue block, in document order."""
        soup = BeautifulSoup(document, "html.parser")

        blocks = [
            block
            for block in self._block_pattern.select(soup)
            if self._block_marker in block.decode_contents()
        ]
        logger.debug("Queue blocks found", count=len(blocks))

        snapshots = [self._parse_block(block) for block in blocks]

        if len(snapshots) < REQUIRED_BLOCKS:
            raise ParseError(
                ParseError.INSUFFICIENT_BLOCKS,
                f"found {len(snapshots)}, need {REQUIRED_BLOCKS}",
            )

        return snapshots

    def _parse_block(self, block: Tag) -> QueueSnapshot:
        """Parse the positional values of a single queue block."""
        values = [
            element.get_text(strip=True)
            for element in self._value_pattern.select(block)
        ]
        if len(values) < REQUIRED_FIELDS:
            raise ParseError(
                ParseError.INSUFFICIENT_FIELDS,
                f"found {len(values)}, need {REQUIRED_FIELDS}",
            )

        people_waiting = self._parse_count("people_waiting", values[0])
        last_called_ticket = TicketId.parse(values[1])
        waiting_time = values[2]
        if self._waiting_time_suffix and waiting_time.endswith(self._waiting_time_suffix):
            waiting_time = waiting_time[: -len(self._waiting_time_suffix)]
        waiting_time_estimate = self._parse_count("waiting_time_estimate", waiting_time)

        return QueueSnapshot(
            people_waiting=people_waiting,
            last_called_ticket=last_called_ticket,
            waiting_time_estimate=waiting_time_estimate,
        )

    @staticmethod
    def _parse_count(field: str, value: str) -> int:
        """Parse a non-negative integer field."""
        if not value.isascii() or not value.isdigit():
            raise ParseError(field, f"not a non-negative integer: {value!r}")
        return int(value)

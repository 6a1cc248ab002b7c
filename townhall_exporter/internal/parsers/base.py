"""
Base Parser Abstract Class.

Defines the interface that queue page parsers must implement.
"""
from abc import ABC, abstractmethod
from typing import List

from townhall_exporter.internal.domain.snapshot import QueueSnapshot


class BaseQueueParser(ABC):
    """
    Abstract base class for queue status page parsers.

    Each parser implementation must provide:
    - Parser name identifier
    - Extraction of queue snapshots from a raw HTML document
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Get the parser name/identifier.

        Returns:
            Parser name (e.g., "erlangen.de")
        """
        pass

    @abstractmethod
    def parse(self, document: str) -> List[QueueSnapshot]:
        """
        Extract queue snapshots from a page.

        Implementations must be pure: the same document always yields the
        same result and nothing outside the parser is touched.

        Args:
            document: Raw HTML text of the status page.

        Returns:
            Queue snapshots in document order, without tracked wait times.

        Raises:
            ParseError: The document does not match the expected structure.
        """
        pass

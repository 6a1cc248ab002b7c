"""
Ticket value objects.

A ticket is what the town hall calls out on its displays, e.g. ``B42`` for
citizen services or ``F7`` for drivers-license services.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import TicketParseError


_SEQUENCE_PATTERN = re.compile(r"[0-9]+")


class TicketCategory(str, Enum):
    """
    Service a ticket belongs to.

    NONE is shown by the page outside of business hours. It is a valid
    observation, not an error.
    """

    CITIZEN = "B"
    DRIVERS_LICENSE = "F"
    NONE = "N/A"

    @property
    def service(self) -> Optional[str]:
        """Service label used in metrics, None for NONE."""
        if self is TicketCategory.CITIZEN:
            return "citizen"
        if self is TicketCategory.DRIVERS_LICENSE:
            return "drivers_license"
        return None

    @classmethod
    def from_letter(cls, letter: str) -> "TicketCategory":
        """Map the first character of a ticket label to a category."""
        for category in (cls.CITIZEN, cls.DRIVERS_LICENSE):
            if category.value == letter:
                return category
        return cls.NONE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TicketId:
    """
    Ticket identity.

    Attributes:
        category: Service category of the ticket.
        sequence: Ticket number within the category, 0 for NONE.
    """
    category: TicketCategory
    sequence: int = 0

    def __post_init__(self) -> None:
        """Validate ticket constraints."""
        if self.sequence < 0:
            raise ValueError("Ticket sequence cannot be negative")

    @classmethod
    def none(cls) -> "TicketId":
        """Ticket shown when no ticket is being called."""
        return cls(TicketCategory.NONE, 0)

    @classmethod
    def parse(cls, label: str) -> "TicketId":
        """
        Parse a ticket label as shown on the page.

        Args:
            label: Raw label, e.g. "B42".

        Returns:
            Parsed ticket. Labels without a known category letter (including
            empty labels and placeholders like "—") become the NONE ticket.

        Raises:
            TicketParseError: Known category letter without a valid number.
        """
        category = TicketCategory.from_letter(label[:1])
        if category is TicketCategory.NONE:
            return cls.none()

        digits = label[1:]
        if not _SEQUENCE_PATTERN.fullmatch(digits):
            raise TicketParseError(label)
        return cls(category, int(digits))

    def advanced_by(self, count: int) -> "TicketId":
        """Ticket that will be called after ``count`` more people."""
        return TicketId(self.category, self.sequence + count)

    def __str__(self) -> str:
        if self.category is TicketCategory.NONE:
            return str(self.category)
        return f"{self.category}{self.sequence}"

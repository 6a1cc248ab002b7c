"""
Domain-specific exceptions.

Errors raised while fetching and parsing the town hall waiting-time page.
"""


class ExporterError(Exception):
    """Base exception for exporter errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize exporter error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class FetchError(ExporterError):
    """Exception raised when the source page cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        """
        Initialize fetch error.

        Args:
            url: The URL that was requested.
            reason: Transport error or unexpected status.
        """
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseError(ExporterError):
    """Exception raised when the page does not have the expected structure."""

    # Reasons for structural failures; field failures use the field name
    INSUFFICIENT_BLOCKS = "insufficient blocks"
    INSUFFICIENT_FIELDS = "insufficient fields"

    def __init__(self, reason: str, detail: str = "") -> None:
        """
        Initialize parse error.

        Args:
            reason: Short machine-readable reason, either a structural
                reason or the name of the field that failed to parse.
            detail: Optional human-readable context (offending value).
        """
        message = f"Cannot parse page: {reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class TicketParseError(ParseError):
    """Exception raised when a ticket label has a known prefix but no valid number."""

    def __init__(self, label: str) -> None:
        super().__init__("last_called_ticket", f"invalid ticket label {label!r}")
        self.label = label


class ScrapeError(ExporterError):
    """Exception raised when a scrape attempt fails for any reason."""

    def __init__(self, cause: ExporterError) -> None:
        """
        Initialize scrape error.

        Args:
            cause: The underlying fetch or parse error.
        """
        super().__init__(f"Scrape failed: {cause.message}")
        self.cause = cause

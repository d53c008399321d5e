"""Custom exception classes for the scraping core."""


class PriceTrackerException(Exception):
    """Base exception for all price tracker errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NavigationError(PriceTrackerException):
    """Raised when a page fails to load within its timeout or the transport fails."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Navigation failed for {url}: {message}")


class ExtractionError(PriceTrackerException):
    """Raised when a required field cannot be located on a loaded page."""

    FIELDS = ("name", "price", "timeout")

    def __init__(self, field: str, message: str = ""):
        if field not in self.FIELDS:
            raise ValueError(f"Invalid extraction field: {field}")
        self.field = field
        super().__init__(message or f"Could not extract product {field}")


class UnknownSourceType(PriceTrackerException):
    """Raised when no extractor is registered for a source type tag."""

    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"No scraper registered for source type '{type_tag}'")


class TransientAutomationError(PriceTrackerException):
    """Raised when the browser frame was torn down while a page was loading."""


class BatchAlreadyRunningError(PriceTrackerException):
    """Raised when a batch is started while another one is still running."""

    def __init__(self):
        super().__init__("A scraping batch is already running")


class RecordSinkError(PriceTrackerException):
    """Raised when the persistence collaborator rejects a scraped record."""

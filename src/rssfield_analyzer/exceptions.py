"""Error taxonomy for RSS field analysis."""


class FeedAnalysisError(Exception):
    """Base class for errors that abort a feed analysis."""

    def details(self) -> dict:
        return {"type": type(self).__name__}


class ValidationError(FeedAnalysisError):
    """Raised when required input is missing or malformed."""


class FetchError(FeedAnalysisError):
    """Raised when the feed cannot be fetched (network, timeout, HTTP status)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status

    def details(self) -> dict:
        return {"type": type(self).__name__, "status": self.status}


class ParseError(FeedAnalysisError):
    """Raised when feed content is not well-formed markup."""

    def __init__(self, message: str, diagnostic: str | None = None):
        super().__init__(message)
        self.diagnostic = diagnostic

    def details(self) -> dict:
        return {"type": type(self).__name__, "diagnostic": self.diagnostic}


class MissingMappingError(FeedAnalysisError):
    """Raised when parsing instructions need a mapping slot that is absent."""

    def __init__(self, slots: list[str]):
        super().__init__(f"Missing required mapping for: {', '.join(slots)}")
        self.slots = slots

    def details(self) -> dict:
        return {"type": type(self).__name__, "slots": self.slots}

"""Custom exceptions for the Pitch Fund extraction service."""


class PitchExtractionError(Exception):
    """Base exception for the extraction service."""
    pass


class InputRejectedError(PitchExtractionError):
    """Locator or extraction mode is structurally invalid."""
    pass


class RetrievalError(PitchExtractionError):
    """The episode page could not be fetched."""

    def __init__(self, message: str, status_code: int = None, url: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url

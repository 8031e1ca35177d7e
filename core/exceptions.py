"""
Application exceptions.

Registry errors surface to the caller with a human-readable message. Scrape
errors describe why one pipeline run for one website failed.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    pass


class AuthenticationRequiredError(ServiceError):
    """Raised when a mutation is attempted without an authenticated user."""

    pass


class NotFoundError(ServiceError):
    """Raised when a website or feed is not found."""

    pass


class PermissionDeniedError(ServiceError):
    """Raised when the acting user does not own the website."""

    pass


class ConflictError(ServiceError):
    """Raised when the user already has a website with the same URL."""

    pass


class ScrapeError(Exception):
    """Base exception for all scrape pipeline errors."""

    pass


class FetchError(ScrapeError):
    """
    Exception raised when the website could not be fetched.

    Attributes:
        message: Error description
        status_code: HTTP status code, None for network failures
    """

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ParseError(ScrapeError):
    """Exception raised when the completion reply is not a JSON array."""

    pass


class ValidationError(ScrapeError):
    """Exception raised when an extracted candidate lacks required fields."""

    pass

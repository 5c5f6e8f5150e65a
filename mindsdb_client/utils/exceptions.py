"""Custom exceptions for the MindsDB client."""

from typing import Optional

import httpx

__all__ = [
    "MindsDbError",
    "ConfigurationError",
    "AuthenticationError",
    "QueryError",
]

# Human readable hints keyed by HTTP status code.
_STATUS_HINTS = {
    400: "MindsDB received an invalid request and can't process it.",
    401: (
        "Did you provide the right username and password to the 'connect' "
        "method before using the SDK?"
    ),
    403: (
        "You don't have permission to access this resource. Did you provide "
        "the right username and password to the 'connect' method before using the SDK?"
    ),
    404: "This MindsDB resource doesn't exist.",
    408: "The request took too long to complete. Please try again.",
    429: (
        "The number of requests you sent has exceeded the MindsDB API limit. "
        "Please contact us to request a limit increase."
    ),
    500: "Oops! Something went wrong on our end. Please try again.",
    502: "Oops! Something went wrong on our end. Please try again.",
    503: "Oops! Something went wrong on our end. Please try again.",
    504: "The request took too long to complete. Please try again.",
}


class MindsDbError(Exception):
    """Base exception for all MindsDB client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        """Initialize the error.

        Args:
            message: Human readable description of the failure
            status_code: HTTP status code of the failed response, if any
            url: URL of the failed request, if any
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url

    @classmethod
    def from_http_error(cls, error: BaseException, url: str) -> "MindsDbError":
        """Create a MindsDB error from an HTTP failure with a readable message.

        Args:
            error: Original error raised while sending the request
            url: URL the request was sent to

        Returns:
            New MindsDbError describing the failure
        """
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            base_msg = f"Request failed with status code {status}."
            hint = _STATUS_HINTS.get(status, f"Full message: {error}")
            return cls(f"{base_msg} {hint}", status_code=status, url=url)

        if isinstance(error, httpx.RequestError):
            # Request was made but no response was received.
            return cls(
                "The request was made but no response was received. "
                "Something may be wrong on our end. Please try again.",
                url=url,
            )

        return cls(
            f"Something went wrong handling HTTP request to {url}: {error}",
            url=url,
        )


class ConfigurationError(MindsDbError):
    """Raised when connection options or settings are invalid or missing."""
    pass


class AuthenticationError(MindsDbError):
    """Raised when logging into MindsDB fails."""
    pass


class QueryError(MindsDbError):
    """Raised when MindsDB reports an error executing a SQL statement."""
    pass

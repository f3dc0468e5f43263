"""CloudSift exceptions."""

from __future__ import annotations


class CloudSearchError(Exception):
    """Base exception for all CloudSift errors."""


class MissingSearchDomainException(CloudSearchError):
    """Raised when a client is used before a search domain is configured."""

    def __init__(self, message: str = "No search domain configured. Set ClientConfig.search_domain first.") -> None:
        super().__init__(message)


class RequestFailedError(CloudSearchError):
    """A request to the search service failed.

    Carries enough context to diagnose the failure without re-issuing it.

    Attributes:
        url: The URL the request was sent to.
        status_code: HTTP status of the response, if one was received.
        reason: HTTP reason phrase, if one was received.
        cause: The underlying transport error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        reason: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.cause = cause

    @classmethod
    def from_transport_error(cls, error: BaseException, url: str) -> RequestFailedError:
        return cls(f"{type(error).__name__}: {error} ({url})", url=url, cause=error)

    @classmethod
    def from_status(cls, status_code: int, reason: str, url: str) -> RequestFailedError:
        return cls(f"{status_code}: {reason} ({url})", url=url, status_code=status_code, reason=reason)


class SearchException(RequestFailedError):
    """Raised when a search request fails or returns a non-200 status."""


class DocumentUpdateException(RequestFailedError):
    """Raised when an add, update or remove request fails."""


class ParseError(CloudSearchError):
    """Raised when a search response does not match the expected schema."""


class FilterError(CloudSearchError, ValueError):
    """Raised when a filter mapping cannot be turned into a filter expression."""


class InvalidRequestError(CloudSearchError, ValueError):
    """Raised when search options, a rank or a document cannot be built from the given values."""

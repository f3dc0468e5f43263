"""CloudSift — client library for the AWS CloudSearch HTTP API.

Compiles nested boolean filters into CloudSearch query syntax, shapes
requests for the 2011-02-01 and 2013-01-01 API versions, and returns search
hits as paginated collections of document ids.
"""

from cloudsift.client import AsyncCloudSearchClient, CloudSearchClient
from cloudsift.config.settings import ClientConfig, Mode, Settings
from cloudsift.exceptions import (
    CloudSearchError,
    DocumentUpdateException,
    InvalidRequestError,
    MissingSearchDomainException,
    ParseError,
    SearchException,
)
from cloudsift.models.collection import SearchResultCollection
from cloudsift.models.query import SearchOptions

__version__ = "0.1.0"

__all__ = [
    "AsyncCloudSearchClient",
    "ClientConfig",
    "CloudSearchClient",
    "CloudSearchError",
    "DocumentUpdateException",
    "InvalidRequestError",
    "MissingSearchDomainException",
    "Mode",
    "ParseError",
    "SearchException",
    "SearchOptions",
    "SearchResultCollection",
    "Settings",
    "__version__",
]

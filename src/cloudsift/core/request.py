"""Request builder — search URLs and document batch requests.

Two API versions are supported and they disagree on parameter names:

    ==============  ==================  ==============
    concern         2011-02-01          2013-01-01
    ==============  ==================  ==============
    filter          ``bq=<query>``      ``q=<query>&q.parser=structured``
    field list      ``return-fields``   ``return``
    ordering        ``rank``            ``sort``
    ==============  ==================  ==============
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote_plus, urlencode

from pydantic import ValidationError

from cloudsift.config.settings import ClientConfig
from cloudsift.core.compiler import compile_filter
from cloudsift.core.rank import normalize_rank
from cloudsift.exceptions import InvalidRequestError
from cloudsift.models.document import DocumentMutation
from cloudsift.models.query import SearchOptions

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DEFAULT_LANG = "en"


@runtime_checkable
class ToUtcTimestamp(Protocol):
    """Values that know how to render themselves as a UTC timestamp string."""

    def to_utc_timestamp(self) -> str: ...


@runtime_checkable
class _SupportsStrftime(Protocol):
    def strftime(self, fmt: str, /) -> str: ...


@dataclass(frozen=True)
class MutationRequest:
    """A ready-to-send POST to the documents/batch endpoint."""

    url: str
    body: str
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


# ── URLs ────────────────────────────────────────────────────────────────


def search_endpoint(config: ClientConfig) -> str:
    return f"http://search-{config.search_domain}.{config.aws_region}.{config.service_host}/{config.api_version}/search"


def document_endpoint(config: ClientConfig) -> str:
    return (
        f"http://doc-{config.search_domain}.{config.aws_region}.{config.service_host}"
        f"/{config.api_version}/documents/batch"
    )


def search_params(config: ClientConfig, term: str, options: SearchOptions) -> list[tuple[str, str]]:
    """Ordered, unencoded query parameters for a search call."""
    structured = config.is_structured
    bq = compile_filter(options.filter) if options.filter is not None else None

    params: list[tuple[str, str]] = []
    if structured and bq is not None:
        params.append(("q", bq))
        params.append(("q.parser", "structured"))
    else:
        params.append(("q", str(term)))
        if bq is not None:
            params.append(("bq", bq))

    params.append(("size", str(options.page_size)))

    if options.return_fields:
        params.append(("return" if structured else "return-fields", ",".join(options.return_fields)))

    if options.start is not None:
        params.append(("start", str(options.start)))

    if options.rank is not None:
        params.append(("sort" if structured else "rank", normalize_rank(options.rank, config.api_version)))

    return params


def build_search_url(config: ClientConfig, term: str, options: SearchOptions | None = None) -> str:
    """Build the full search URL with every parameter value percent-encoded."""
    options = options or SearchOptions()
    url = f"{search_endpoint(config)}?{urlencode(search_params(config, term, options), quote_via=quote_plus)}"
    logger.debug("Built search URL: %s", url)
    return url


# ── Documents ───────────────────────────────────────────────────────────


def format_timestamp(value: Any) -> str | None:
    """Render a date/time-like value as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC.

    Returns None for values without a timestamp capability. Timezone-aware
    values are converted to UTC; naive ones are taken to already be UTC.

    Raises:
        InvalidRequestError: For time-of-day values with no date part.
    """
    if isinstance(value, ToUtcTimestamp):
        return value.to_utc_timestamp()
    if isinstance(value, str) or not isinstance(value, _SupportsStrftime):
        return None
    if not hasattr(value, "year"):
        raise InvalidRequestError(f"Cannot send {value!r} as a timestamp: it has no date part")
    utcoffset = getattr(value, "utcoffset", None)
    if callable(utcoffset) and utcoffset() is not None and hasattr(value, "astimezone"):
        value = value.astimezone(UTC)
    return value.strftime(TIMESTAMP_FORMAT)


def normalize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Prepare document fields for an add: timestamps formatted, None made ``""``.

    The input mapping is not modified.
    """
    normalized: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            normalized[str(key)] = ""
            continue
        timestamp = format_timestamp(value)
        normalized[str(key)] = timestamp if timestamp is not None else value
    return normalized


def current_version() -> int:
    return int(time.time())


def add_mutation(doc_id: Any, fields: Mapping[str, Any], version: int | None = None) -> DocumentMutation:
    try:
        return DocumentMutation(
            type="add",
            id=str(doc_id),
            version=current_version() if version is None else version,
            lang=DEFAULT_LANG,
            fields=normalize_fields(fields),
        )
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid document {doc_id!r}: {e}") from e


def delete_mutation(doc_id: Any, version: int | None = None) -> DocumentMutation:
    try:
        return DocumentMutation(
            type="delete",
            id=str(doc_id),
            version=current_version() if version is None else version,
        )
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid document {doc_id!r}: {e}") from e


def build_mutation_request(
    config: ClientConfig,
    mutations: DocumentMutation | Iterable[DocumentMutation],
) -> MutationRequest:
    """Build the batch POST for one or more mutations."""
    if isinstance(mutations, DocumentMutation):
        mutations = [mutations]
    batch = [m.to_wire() for m in mutations]
    if not batch:
        raise InvalidRequestError("A document batch needs at least one mutation")
    url = document_endpoint(config)
    logger.debug("Built document batch of %d mutation(s) for %s", len(batch), url)
    return MutationRequest(url=url, body=json.dumps(batch))

"""CloudSift clients — sync and async facades over the CloudSearch HTTP API.

Usage::

    # Sync
    with CloudSearchClient("my-domain-abc123", mode=Mode.LIVE) as client:
        hits = client.search("fritters", {"filter": {"and": {"type": "donuts"}}})
        client.add_item("13", {"name": "Apple Fritter", "baked_at": datetime.now(UTC)})

    # Async
    async with AsyncCloudSearchClient("my-domain-abc123", mode=Mode.LIVE) as client:
        hits = await client.search("fritters")

Clients start in ``Mode.SANDBOX``: searches return a fixed canned collection
and document calls do nothing, with no network I/O at all. Pass
``mode=Mode.LIVE`` to talk to the service.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from cloudsift.config.settings import ClientConfig, Mode, Settings
from cloudsift.core.request import (
    MutationRequest,
    add_mutation,
    build_mutation_request,
    build_search_url,
    delete_mutation,
)
from cloudsift.exceptions import DocumentUpdateException, InvalidRequestError, ParseError, SearchException
from cloudsift.models.collection import SearchResultCollection
from cloudsift.models.document import DocumentMutation
from cloudsift.models.query import SearchOptions

logger = logging.getLogger(__name__)

OptionsLike = SearchOptions | Mapping[str, Any]


# ═══════════════════════════════════════════════════════════════════════════════
# Shared request shaping and response handling
# ═══════════════════════════════════════════════════════════════════════════════


class _BaseClient:
    """Configuration, mode and request/response handling common to both clients."""

    def __init__(
        self,
        config: ClientConfig | str | None = None,
        *,
        mode: Mode = Mode.SANDBOX,
        timeout: float = 30.0,
    ) -> None:
        if config is None or isinstance(config, str):
            config = ClientConfig(config)
        self.config = config
        self.mode = Mode(mode)
        self._timeout = timeout

    @property
    def is_sandbox(self) -> bool:
        return self.mode is Mode.SANDBOX

    @staticmethod
    def _resolve_search_args(
        term_or_options: str | OptionsLike | None,
        options: OptionsLike | None,
    ) -> tuple[str, SearchOptions]:
        """Support ``search(options)`` as shorthand for ``search("", options)``."""
        if isinstance(term_or_options, (SearchOptions, Mapping)) and options is None:
            term, options = "", term_or_options
        else:
            term = "" if term_or_options is None else str(term_or_options)
        if options is None:
            return term, SearchOptions()
        if isinstance(options, SearchOptions):
            return term, options
        try:
            return term, SearchOptions.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid search options: {e}") from e

    @staticmethod
    def _parse_search_response(response: httpx.Response, url: str, page_size: int) -> SearchResultCollection:
        if response.status_code != 200:
            logger.warning("Search failed with HTTP %d: %s", response.status_code, url)
            raise SearchException.from_status(response.status_code, response.reason_phrase, url)
        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise ParseError(f"Search response is not valid JSON ({url})") from e
        return SearchResultCollection.from_response(body, page_size)

    @staticmethod
    def _check_document_response(response: httpx.Response, url: str) -> None:
        if response.status_code != 200:
            logger.warning("Document batch failed with HTTP %d: %s", response.status_code, url)
            raise DocumentUpdateException.from_status(response.status_code, response.reason_phrase, url)


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client
# ═══════════════════════════════════════════════════════════════════════════════


class CloudSearchClient(_BaseClient):
    """Synchronous CloudSearch client.

    Args:
        config: A ``ClientConfig``, or just the search domain name.
        mode: ``Mode.LIVE`` to issue requests, ``Mode.SANDBOX`` (default) for canned data.
        timeout: HTTP request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.Client``
            (e.g. ``transport=`` for testing).
    """

    def __init__(
        self,
        config: ClientConfig | str | None = None,
        *,
        mode: Mode = Mode.SANDBOX,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        super().__init__(config, mode=mode, timeout=timeout)
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), **httpx_kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, **httpx_kwargs: Any) -> CloudSearchClient:
        return cls(
            ClientConfig.from_settings(settings),
            mode=settings.mode,
            timeout=settings.timeout,
            **httpx_kwargs,
        )

    def __enter__(self) -> CloudSearchClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    # ── Search ──

    def search(
        self,
        term_or_options: str | OptionsLike | None = "",
        options: OptionsLike | None = None,
    ) -> SearchResultCollection:
        """Search for a term, optionally filtered, paged and ranked.

        Examples::

            client.search("fritters")                                   # ["13", "28"]
            client.search({"filter": {"and": {"type": "donuts"}}})      # ["13", "28", "35", "50"]
            client.search("fritters", {"filter": {"and": {"type": "donuts"}}})  # ["13"]

        Returns:
            The matching document ids (possibly empty).

        Raises:
            SearchException: On a transport failure or a non-200 response.
            ParseError: If the response body is not a search result.
            InvalidRequestError: If ``options`` cannot be turned into search options.
        """
        if self.is_sandbox:
            return SearchResultCollection.sandbox()

        term, opts = self._resolve_search_args(term_or_options, options)
        url = build_search_url(self.config, term, opts)
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise SearchException.from_transport_error(e, url) from e
        return self._parse_search_response(response, url, opts.page_size)

    # ── Documents ──

    def add_item(self, doc_id: Any, fields: Mapping[str, Any]) -> None:
        """Add a document to the index.

        ``fields`` must match the index fields of the search domain. Date and
        time values are sent as UTC timestamps; None values as empty strings.

        Raises:
            DocumentUpdateException: If the request fails.
        """
        if self.is_sandbox:
            return None
        self._submit(build_mutation_request(self.config, add_mutation(doc_id, fields)))
        return None

    def update_item(self, doc_id: Any, fields: Mapping[str, Any]) -> None:
        """Replace a document in the index (same request as ``add_item``)."""
        return self.add_item(doc_id, fields)

    def remove_item(self, doc_id: Any) -> None:
        """Remove a document from the index.

        Removing an id that is not in the index still succeeds.

        Raises:
            DocumentUpdateException: If the request fails.
        """
        if self.is_sandbox:
            return None
        self._submit(build_mutation_request(self.config, delete_mutation(doc_id)))
        return None

    def submit_batch(self, mutations: Iterable[DocumentMutation]) -> None:
        """Send several add/delete mutations in a single request."""
        if self.is_sandbox:
            return None
        self._submit(build_mutation_request(self.config, mutations))
        return None

    def _submit(self, request: MutationRequest) -> None:
        try:
            response = self._client.post(request.url, content=request.body, headers=request.headers)
        except httpx.HTTPError as e:
            raise DocumentUpdateException.from_transport_error(e, request.url) from e
        self._check_document_response(response, request.url)


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncCloudSearchClient(_BaseClient):
    """Async CloudSearch client. Same contract as :class:`CloudSearchClient`.

    Args:
        config: A ``ClientConfig``, or just the search domain name.
        mode: ``Mode.LIVE`` to issue requests, ``Mode.SANDBOX`` (default) for canned data.
        timeout: HTTP request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        config: ClientConfig | str | None = None,
        *,
        mode: Mode = Mode.SANDBOX,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        super().__init__(config, mode=mode, timeout=timeout)
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), **httpx_kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, **httpx_kwargs: Any) -> AsyncCloudSearchClient:
        return cls(
            ClientConfig.from_settings(settings),
            mode=settings.mode,
            timeout=settings.timeout,
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncCloudSearchClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def search(
        self,
        term_or_options: str | OptionsLike | None = "",
        options: OptionsLike | None = None,
    ) -> SearchResultCollection:
        """Search for a term. See :meth:`CloudSearchClient.search`."""
        if self.is_sandbox:
            return SearchResultCollection.sandbox()

        term, opts = self._resolve_search_args(term_or_options, options)
        url = build_search_url(self.config, term, opts)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise SearchException.from_transport_error(e, url) from e
        return self._parse_search_response(response, url, opts.page_size)

    async def add_item(self, doc_id: Any, fields: Mapping[str, Any]) -> None:
        if self.is_sandbox:
            return None
        await self._submit(build_mutation_request(self.config, add_mutation(doc_id, fields)))
        return None

    async def update_item(self, doc_id: Any, fields: Mapping[str, Any]) -> None:
        return await self.add_item(doc_id, fields)

    async def remove_item(self, doc_id: Any) -> None:
        if self.is_sandbox:
            return None
        await self._submit(build_mutation_request(self.config, delete_mutation(doc_id)))
        return None

    async def submit_batch(self, mutations: Iterable[DocumentMutation]) -> None:
        if self.is_sandbox:
            return None
        await self._submit(build_mutation_request(self.config, mutations))
        return None

    async def _submit(self, request: MutationRequest) -> None:
        try:
            response = await self._client.post(request.url, content=request.body, headers=request.headers)
        except httpx.HTTPError as e:
            raise DocumentUpdateException.from_transport_error(e, request.url) from e
        self._check_document_response(response, request.url)

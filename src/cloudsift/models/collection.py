"""Search result collection — ids of one page of hits plus paging metadata.

A collection is built once per search call from a single response body and
never changes afterwards. It behaves as a read-only sequence of document id
strings in the order the service returned them; iterating it again starts
over without any further I/O.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, overload

from cloudsift.exceptions import ParseError

SANDBOX_IDS: tuple[str, ...] = ("1", "2", "3")


class SearchResultCollection(Sequence[str]):
    """Immutable, paginated sequence of document ids.

    Attributes:
        total_hits: Total number of documents matching the query.
        page_size: Hits per page used for the request.
        offset: Index of the first hit of this page.
    """

    __slots__ = ("_ids", "_data", "total_hits", "page_size", "offset")

    def __init__(
        self,
        ids: Sequence[str],
        *,
        total_hits: int,
        page_size: int = 10,
        offset: int = 0,
        data: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._ids: tuple[str, ...] = tuple(ids)
        self._data: dict[str, dict[str, Any]] = {k: dict(v) for k, v in (data or {}).items()}
        self.total_hits = total_hits
        self.page_size = page_size
        self.offset = offset

    # ── Constructors ────────────────────────────────────────────────────

    @classmethod
    def from_response(cls, raw: Any, page_size: int = 10) -> SearchResultCollection:
        """Parse a decoded search response body.

        Expected shape::

            {"hits": {"found": 2, "start": 0, "hit": [{"id": "13"}, {"id": "28", "data": {...}}]}}

        Field data may be under ``data`` (2011-02-01) or ``fields`` (2013-01-01).

        Raises:
            ParseError: If the body does not match that shape.
        """
        if not isinstance(raw, Mapping):
            raise ParseError(f"Search response must be a JSON object, got {type(raw).__name__}")
        hits = raw.get("hits")
        if not isinstance(hits, Mapping):
            raise ParseError("Search response has no 'hits' object")

        found = hits.get("found")
        if isinstance(found, bool) or not isinstance(found, int):
            raise ParseError(f"'hits.found' must be an integer, got {found!r}")
        start = hits.get("start", 0)
        if isinstance(start, bool) or not isinstance(start, int):
            raise ParseError(f"'hits.start' must be an integer, got {start!r}")
        records = hits.get("hit", [])
        if not isinstance(records, list):
            raise ParseError("'hits.hit' must be a list")

        ids: list[str] = []
        data: dict[str, Mapping[str, Any]] = {}
        for record in records:
            if not isinstance(record, Mapping) or "id" not in record:
                raise ParseError(f"Hit without an id: {record!r}")
            doc_id = str(record["id"])
            ids.append(doc_id)
            fields = record.get("data", record.get("fields"))
            if isinstance(fields, Mapping):
                data[doc_id] = fields

        return cls(ids, total_hits=found, page_size=page_size, offset=start, data=data)

    @classmethod
    def sandbox(cls, page_size: int = 10) -> SearchResultCollection:
        """Canned result used while a client runs in sandbox mode."""
        return cls(SANDBOX_IDS, total_hits=len(SANDBOX_IDS), page_size=page_size)

    # ── Sequence protocol ───────────────────────────────────────────────

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[str, ...]: ...

    def __getitem__(self, index: int | slice) -> str | tuple[str, ...]:
        return self._ids[index]

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SearchResultCollection):
            return self._ids == other._ids and self.total_hits == other.total_hits
        if isinstance(other, (list, tuple)):
            return list(self._ids) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SearchResultCollection({list(self._ids)!r}, total_hits={self.total_hits}, page={self.current_page}/{self.total_pages})"

    # ── Pagination ──────────────────────────────────────────────────────

    @property
    def current_page(self) -> int:
        return self.offset // self.page_size + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_hits / self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    # ── Field data ──────────────────────────────────────────────────────

    @property
    def data(self) -> dict[str, dict[str, Any]]:
        """Returned field values keyed by document id (empty unless requested)."""
        return {k: dict(v) for k, v in self._data.items()}

    def fields_for(self, doc_id: str) -> dict[str, Any]:
        """Returned field values for one hit, or an empty dict."""
        return dict(self._data.get(doc_id, {}))

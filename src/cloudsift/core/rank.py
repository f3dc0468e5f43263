"""Rank normalizer — turns a RankSpec into the version-specific sort parameter."""

from __future__ import annotations

from typing import Any

from cloudsift.config.settings import STRUCTURED_API_VERSION
from cloudsift.exceptions import InvalidRequestError
from cloudsift.models.query import RankSpec, SortDirection


def normalize_rank(rank: RankSpec | Any, api_version: str) -> str:
    """Render a rank for the given API version.

    ``2013-01-01`` takes ``"<field> <asc|desc>"``. Older versions take the bare
    field for ascending order and ``"-<field>"`` for descending.

    Raises:
        InvalidRequestError: If ``rank`` is not a usable rank.
    """
    try:
        parsed = RankSpec.coerce(rank)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid rank {rank!r}: {e}") from e
    if api_version == STRUCTURED_API_VERSION:
        return f"{parsed.field} {parsed.direction.value}"
    if parsed.direction is SortDirection.DESC:
        return f"-{parsed.field}"
    return parsed.field

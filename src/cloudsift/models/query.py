"""Search option models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from cloudsift.models.filter import FilterExpr


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RankSpec(BaseModel):
    """A field to order results by, plus a direction (ascending by default)."""

    field: str = Field(min_length=1, description="Field to rank by")
    direction: SortDirection = Field(default=SortDirection.ASC, description="Sort direction")

    @field_validator("direction", mode="before")
    @classmethod
    def _lower_direction(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, SortDirection):
            return v.lower()
        return v

    @classmethod
    def coerce(cls, value: Any) -> RankSpec:
        """Build a RankSpec from ``"price"``, ``["price"]`` or ``("price", "desc")``."""
        if isinstance(value, RankSpec):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(value)
        if isinstance(value, str):
            return cls(field=value)
        if isinstance(value, Sequence):
            items = list(value)
            if not 1 <= len(items) <= 2:
                raise ValueError(f"A rank needs one or two elements, got {len(items)}")
            if len(items) == 1:
                return cls(field=str(items[0]))
            return cls(field=str(items[0]), direction=items[1])
        raise ValueError(f"Cannot build a rank from {value!r}")


class SearchOptions(BaseModel):
    """Options for a single search call."""

    filter: FilterExpr | None = Field(default=None, description="Boolean filter compiled into the query")
    page_size: int = Field(default=10, gt=0, description="Number of hits per page")
    page: int | None = Field(default=None, ge=1, description="1-based page number")
    return_fields: list[str] | None = Field(default=None, description="Fields to return with each hit")
    rank: RankSpec | None = Field(default=None, description="Result ordering")

    @field_validator("filter", mode="before")
    @classmethod
    def _parse_filter(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return FilterExpr.from_mapping(v)
        return v

    @field_validator("rank", mode="before")
    @classmethod
    def _parse_rank(cls, v: Any) -> Any:
        if v is None:
            return None
        return RankSpec.coerce(v)

    @field_validator("return_fields", mode="before")
    @classmethod
    def _split_fields(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [f.strip() for f in v.split(",") if f.strip()]
        return v

    @property
    def start(self) -> int | None:
        """Offset of the first hit, or None when no page was requested."""
        if self.page is None:
            return None
        return (self.page - 1) * self.page_size

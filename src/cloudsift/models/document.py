"""Document mutation model — records submitted to the documents/batch endpoint."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


class DocumentMutation(BaseModel):
    """A single add or delete operation in a document batch.

    ``version`` must not decrease for a given document id; the service
    applies mutations in version order. That ordering is the caller's
    responsibility and is not checked here.
    """

    type: Literal["add", "delete"] = Field(description="Mutation kind")
    id: str = Field(min_length=1, description="Document identifier")
    version: int = Field(ge=0, description="Document version, in epoch seconds")
    lang: Literal["en"] | None = Field(default=None, description="Document language")
    fields: dict[str, Any] | None = Field(default=None, description="Field values for an add")

    @model_validator(mode="after")
    def _check_fields(self) -> DocumentMutation:
        if self.type == "add" and self.fields is None:
            raise ValueError("An 'add' mutation requires fields")
        if self.type == "delete" and self.fields is not None:
            raise ValueError("A 'delete' mutation must not carry fields")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the batch body, omitting unset members."""
        return self.model_dump(mode="json", exclude_none=True)

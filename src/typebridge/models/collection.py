"""Collection models — schema view and typed existence-lookup result."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from typebridge.exceptions import TypesenseError

Document = dict[str, Any]
"""A Typesense document (field name to scalar or list of scalars)."""

Synonym = dict[str, Any]
"""A synonym set (``id``, ``synonyms`` and optional ``root``)."""


class CollectionField(BaseModel):
    """A single field declared on a collection schema."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Field name")
    type: str = Field(description="Typesense field type, e.g. 'string' or 'int32[]'")
    facet: bool = Field(default=False, description="Whether the field is facetable")
    optional: bool = Field(default=False, description="Whether documents may omit the field")


class Collection(BaseModel):
    """A collection as reported by the Typesense server.

    Unknown keys returned by newer server versions are preserved.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Unique collection name")
    fields: list[CollectionField] = Field(default_factory=list, description="Declared schema fields")
    default_sorting_field: str = Field(default="", description="Default sort field")
    num_documents: int = Field(default=0, description="Number of indexed documents")
    created_at: int | None = Field(default=None, description="Creation time (unix epoch seconds)")


class LookupStatus(str, Enum):
    """Outcome of a collection existence lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class CollectionLookup(BaseModel):
    """Typed result of :meth:`TypesenseClient.lookup_collection`.

    Separates a missing collection from a lookup that could not be performed
    (bad API key, unreachable server).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status: LookupStatus
    collection: Collection | None = None
    error: TypesenseError | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

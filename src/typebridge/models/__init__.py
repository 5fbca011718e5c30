"""Typed views of Typesense resources."""

from typebridge.models.collection import Collection, CollectionField, CollectionLookup, LookupStatus
from typebridge.models.key import NEVER_EXPIRES, ApiKey, CreatedKey, OneTimeSecret

__all__ = [
    "NEVER_EXPIRES",
    "ApiKey",
    "Collection",
    "CollectionField",
    "CollectionLookup",
    "CreatedKey",
    "LookupStatus",
    "OneTimeSecret",
]

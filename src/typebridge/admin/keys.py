"""API key administration — list, create and delete scoped keys.

Owns no state: every call goes to the server through the client façade.
Façade errors are not caught here; callers decide how to render them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from typebridge.client.client import TypesenseClient
from typebridge.models.key import NEVER_EXPIRES, ApiKey, CreatedKey

logger = logging.getLogger(__name__)

EXPIRY_FORMAT = "%Y-%m-%d %H:%M:%S"

DELETE_ROUTE = "/v1/servers/{server_id}/keys/{key_id}/delete"


class KeyRow(BaseModel):
    """Display row for one existing key."""

    id: int = Field(description="Key id")
    key_prefix: str = Field(description="First characters of the secret")
    description: str = Field(description="Internal description")
    actions: str = Field(description="Bracketed, comma-joined actions")
    collections: str = Field(description="Bracketed, comma-joined collection patterns")
    expires_at: str = Field(description="'never' or a formatted timestamp")
    delete_url: str = Field(description="Path of the key deletion route")


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated string into trimmed, non-empty tokens.

    ``"admin, search"`` yields ``["admin", "search"]``.
    """
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def format_list(values: list[str]) -> str:
    return "[" + ", ".join(values) + "]"


def format_expires_at(expires_at: int, tz: str = "UTC") -> str:
    """Render a key expiry, ``"never"`` for the no-expiry sentinel."""
    if expires_at == NEVER_EXPIRES:
        return "never"
    return datetime.fromtimestamp(expires_at, tz=ZoneInfo(tz)).strftime(EXPIRY_FORMAT)


def unwrap_keys(response: Any) -> list[dict[str, Any]]:
    """Pull the key list out of a ``GET /keys`` response.

    The server wraps the list in a single-entry mapping (``{"keys": [...]}``);
    anything else yields an empty list.
    """
    if not isinstance(response, dict) or not response:
        return []
    keys = next(iter(response.values()))
    return keys if isinstance(keys, list) else []


class KeyAdministration:
    """Key administration for one Typesense server.

    Args:
        client: Connected client façade.
        server_id: Identifier of the server, used to build delete routes.
        timezone: IANA timezone used to render expiry dates.
    """

    def __init__(self, client: TypesenseClient, server_id: str = "typesense", timezone: str = "UTC") -> None:
        self.client = client
        self.server_id = server_id
        self.timezone = timezone

    def list_keys(self) -> list[ApiKey]:
        return [ApiKey.model_validate(k) for k in unwrap_keys(self.client.get_keys().retrieve())]

    def rows(self) -> list[KeyRow]:
        """List existing keys formatted for display."""
        return [self.format_key(key) for key in self.list_keys()]

    def format_key(self, key: ApiKey) -> KeyRow:
        return KeyRow(
            id=key.id,
            key_prefix=key.value_prefix,
            description=key.description,
            actions=format_list(key.actions),
            collections=format_list(key.collections),
            expires_at=format_expires_at(key.expires_at, self.timezone),
            delete_url=DELETE_ROUTE.format(server_id=self.server_id, key_id=key.id),
        )

    def create_key(self, description: str, actions: str, collections: str) -> CreatedKey:
        """Create a key from comma-separated ``actions`` and ``collections``.

        The returned :class:`CreatedKey` holds the secret in a
        :class:`~typebridge.models.key.OneTimeSecret`; reveal it once to show
        it to the user.
        """
        response = self.client.get_keys().create(
            {
                "description": description,
                "actions": split_list(actions),
                "collections": split_list(collections),
            },
        )
        return CreatedKey.from_response(response)

    def delete_key(self, key_id: int) -> dict[str, Any]:
        return self.client.get_keys().delete(key_id)

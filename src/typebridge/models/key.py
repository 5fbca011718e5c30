"""API key models.

Typesense returns the full key secret only in the create response. Later
reads expose ``value_prefix`` only, so the secret is wrapped in
:class:`OneTimeSecret` which hands it out once and then forgets it.
"""

from __future__ import annotations

import threading
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

NEVER_EXPIRES = 64723363199
"""``expires_at`` value Typesense reports for keys without an expiry."""


class ApiKey(BaseModel):
    """A scoped API key as listed by the server."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(description="Server-assigned key id")
    value_prefix: str = Field(default="", description="First characters of the secret")
    description: str = Field(default="", description="Internal description")
    actions: list[str] = Field(default_factory=list, description="Allowed actions")
    collections: list[str] = Field(default_factory=list, description="Collection names or regex patterns")
    expires_at: int = Field(default=NEVER_EXPIRES, description="Expiry (unix epoch seconds)")

    @property
    def never_expires(self) -> bool:
        return self.expires_at == NEVER_EXPIRES


class OneTimeSecret:
    """Holds a secret that can be revealed exactly once.

    ``repr()`` and ``str()`` never show the value.
    """

    def __init__(self, value: str) -> None:
        self._value: str | None = value
        self._lock = threading.Lock()

    @property
    def revealed(self) -> bool:
        return self._value is None

    def reveal(self) -> str:
        """Return the secret and discard it.

        Raises:
            RuntimeError: If the secret was already revealed.
        """
        with self._lock:
            if self._value is None:
                raise RuntimeError("Secret has already been revealed and cannot be retrieved again")
            value, self._value = self._value, None
        return value

    def __repr__(self) -> str:
        state = "revealed" if self.revealed else "hidden"
        return f"OneTimeSecret(<{state}>)"

    __str__ = __repr__


class CreatedKey(BaseModel):
    """Result of creating a key: its metadata plus the one-time secret."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: ApiKey
    secret: OneTimeSecret

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> CreatedKey:
        value = str(data.get("value", ""))
        meta = {k: v for k, v in data.items() if k != "value"}
        meta.setdefault("value_prefix", value[:4])
        return cls(key=ApiKey.model_validate(meta), secret=OneTimeSecret(value))

"""Server registry — one connected client façade per configured Typesense server.

Clients are built once from configuration and handed out by server id. A
server whose health check fails at connect time is recorded as unavailable
together with the failure message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from typebridge.client.client import TypesenseClient
from typebridge.config.settings import ConnectionConfig
from typebridge.exceptions import TypesenseError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionConfig], TypesenseClient]


class ServerNotFoundError(KeyError):
    """Raised when no server is configured under the requested id."""


class ServerUnavailableError(RuntimeError):
    """Raised when a configured server could not be connected."""


class ServerRegistry:
    """Registry of connected Typesense clients.

    Example:
        >>> registry = ServerRegistry({"typesense": config})
        >>> registry.connect_all()
        >>> client = registry.get("typesense")
    """

    def __init__(
        self,
        configs: dict[str, ConnectionConfig],
        factory: ClientFactory = TypesenseClient,
    ) -> None:
        self._configs = dict(configs)
        self._factory = factory
        self._clients: dict[str, TypesenseClient] = {}
        self._errors: dict[str, str] = {}

    def connect(self, server_id: str) -> TypesenseClient:
        """Build the client for ``server_id``.

        Raises:
            ServerNotFoundError: If the server is not configured.
            TypesenseError: If the server is unreachable or unhealthy.
        """
        if server_id not in self._configs:
            raise ServerNotFoundError(server_id)
        try:
            client = self._factory(self._configs[server_id])
        except TypesenseError as e:
            self._errors[server_id] = str(e)
            raise
        self._errors.pop(server_id, None)
        previous = self._clients.get(server_id)
        if previous is not None and previous is not client:
            previous.close()
        self._clients[server_id] = client
        return client

    def connect_all(self) -> None:
        """Connect every configured server, recording the ones that fail."""
        for server_id in self._configs:
            try:
                self.connect(server_id)
                logger.info("Server '%s' connected", server_id)
            except TypesenseError as e:
                logger.warning("Server '%s' is not available: %s", server_id, e)

    def get(self, server_id: str) -> TypesenseClient:
        """Return the connected client for ``server_id``.

        Raises:
            ServerNotFoundError: If the server is not configured.
            ServerUnavailableError: If the server did not connect.
        """
        if server_id not in self._configs:
            raise ServerNotFoundError(server_id)
        if server_id not in self._clients:
            reason = self._errors.get(server_id, "not connected")
            raise ServerUnavailableError(f"Typesense server '{server_id}' is not available: {reason}")
        return self._clients[server_id]

    def is_available(self, server_id: str) -> bool:
        return server_id in self._clients

    def close_all(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    @property
    def configured_servers(self) -> list[str]:
        return list(self._configs)

    @property
    def available_servers(self) -> list[str]:
        return list(self._clients)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

"""API dependencies — Dependency injection for FastAPI endpoints.

The server registry lives on ``app.state`` and is set up by the
application lifespan (or injected directly by tests).
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from typebridge.admin.keys import KeyAdministration
from typebridge.client.client import TypesenseClient
from typebridge.client.registry import ServerNotFoundError, ServerRegistry, ServerUnavailableError
from typebridge.config.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> ServerRegistry:
    """Return the server registry attached to the application.

    Raises:
        RuntimeError: If the registry is not initialized.
    """
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise RuntimeError("Server registry not initialized. Is the server running?")
    return registry


def get_client(server_id: str, registry: ServerRegistry = Depends(get_registry)) -> TypesenseClient:
    """Resolve the ``server_id`` path parameter to a connected client."""
    try:
        return registry.get(server_id)
    except ServerNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown server '{server_id}'") from None
    except ServerUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


def get_key_admin(
    server_id: str,
    client: TypesenseClient = Depends(get_client),
    settings: Settings = Depends(get_settings),
) -> KeyAdministration:
    return KeyAdministration(client, server_id=server_id, timezone=settings.admin.timezone)

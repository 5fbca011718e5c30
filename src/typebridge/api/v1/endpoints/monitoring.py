"""Monitoring endpoints — service health and per-server pass-through calls."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from typebridge import __version__
from typebridge.api.deps import get_client, get_registry
from typebridge.client.client import TypesenseClient
from typebridge.client.registry import ServerRegistry
from typebridge.exceptions import TypesenseError

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status ('healthy' or 'degraded')")
    version: str = Field(description="typebridge version")
    service: str = Field(description="Service name ('typebridge')")
    available_servers: list[str] = Field(description="Servers connected at startup")
    unavailable_servers: dict[str, str] = Field(description="Servers that failed to connect, with the reason")


@router.get("/health", response_model=HealthResponse, summary="Service Health Check")
async def health_check(registry: ServerRegistry = Depends(get_registry)) -> HealthResponse:
    errors = registry.errors
    return HealthResponse(
        status="degraded" if errors else "healthy",
        version=__version__,
        service="typebridge",
        available_servers=registry.available_servers,
        unavailable_servers=errors,
    )


def _pass_through(call: str, client: TypesenseClient) -> dict[str, Any]:
    try:
        return getattr(client, call)()
    except TypesenseError as e:
        logger.warning("%s failed: %s", call, e)
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/servers/{server_id}/health", summary="Typesense Health")
def server_health(client: TypesenseClient = Depends(get_client)) -> dict[str, Any]:
    return _pass_through("retrieve_health", client)


@router.get("/servers/{server_id}/debug", summary="Typesense Debug Info")
def server_debug(client: TypesenseClient = Depends(get_client)) -> dict[str, Any]:
    return _pass_through("retrieve_debug", client)


@router.get("/servers/{server_id}/metrics", summary="Typesense Metrics")
def server_metrics(client: TypesenseClient = Depends(get_client)) -> dict[str, Any]:
    return _pass_through("retrieve_metrics", client)

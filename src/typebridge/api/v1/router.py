"""API v1 Router — monitoring and key administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from typebridge.api.v1.endpoints.keys import router as keys_router
from typebridge.api.v1.endpoints.monitoring import router as monitoring_router

router = APIRouter(tags=["v1"])
router.include_router(monitoring_router)
router.include_router(keys_router)

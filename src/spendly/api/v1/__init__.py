"""API version 1 routes."""

from fastapi import APIRouter

from spendly.api.v1 import ai, fx

router = APIRouter(prefix="/api/v1")

# Include routers
router.include_router(fx.router)
router.include_router(ai.router)

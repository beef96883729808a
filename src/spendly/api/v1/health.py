"""Liveness and readiness probes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.api.deps import get_inference_provider, get_rate_resolver
from spendly.categorization.inference import InferenceProvider
from spendly.db.session import get_db
from spendly.fx.resolver import RateResolver

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(
    db: AsyncSession = Depends(get_db),
    resolver: RateResolver = Depends(get_rate_resolver),
    inference_provider: InferenceProvider | None = Depends(get_inference_provider),
):
    """Ready when the database answers.

    Missing provider credentials do not fail readiness: rates fall back to
    the static table and categorization to learned mappings only.
    """
    providers = {
        "fx_provider": "configured" if resolver.provider is not None else "static",
        "ai_provider": "configured" if inference_provider is not None else "disabled",
    }
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "database": "disconnected", **providers},
        )
    return {"status": "ready", "database": "connected", **providers}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from spendly.api.middleware.error_handler import (
    handle_generic_error,
    handle_integrity_error,
    handle_spendly_error,
    handle_validation_error,
)
from spendly.api.middleware.logging import RequestLoggingMiddleware
from spendly.api.v1 import router as v1_router
from spendly.api.v1.health import router as health_router
from spendly.categorization.inference import build_inference_provider
from spendly.categorization.taxonomy import DEFAULT_CATEGORIES
from spendly.config import settings
from spendly.core.exceptions import SpendlyError
from spendly.core.log import setup_logging
from spendly.db.session import AsyncSessionLocal
from spendly.fx.providers import build_rate_provider
from spendly.fx.resolver import RateResolver
from spendly.repositories.category import CategoryRepository

logger = logging.getLogger(__name__)


async def seed_default_categories() -> int:
    async with AsyncSessionLocal() as session:
        return await CategoryRepository(session).seed_defaults(DEFAULT_CATEGORIES)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app.state.rate_resolver = RateResolver.from_settings(
        settings, AsyncSessionLocal, build_rate_provider(settings)
    )
    app.state.inference_provider = build_inference_provider(settings)

    if settings.seed_categories_on_startup:
        try:
            created = await seed_default_categories()
            if created:
                logger.info(f"Default categories seeded: {created}")
        except SQLAlchemyError:
            logger.error("Could not seed default categories", exc_info=True)

    yield
    # Shutdown


def create_app() -> FastAPI:
    setup_logging(settings.log_level, json_logs=settings.log_format.lower() == "json")

    app = FastAPI(
        title="Spendly API",
        description="Currency conversion and merchant categorization for expense tracking",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(SpendlyError, handle_spendly_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()

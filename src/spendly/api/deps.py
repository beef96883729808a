"""FastAPI dependency injection for authentication, database and core services."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.categorization.engine import CategorizationEngine, ConfidencePolicy
from spendly.categorization.inference import InferenceProvider
from spendly.config import settings
from spendly.core.errors import get_error
from spendly.core.security import get_user_id_from_token
from spendly.db.session import get_db
from spendly.fx.resolver import RateResolver

# OAuth2 bearer token scheme
security = HTTPBearer()


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> UUID:
    """
    Extract the authenticated user's id from the bearer token.

    Raises:
        HTTPException: If the token is invalid or expired
    """
    error_def = get_error("AUTH_001")
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error_code": "AUTH_001",
            "user_message": error_def["user_message"],
            "suggestion": error_def["suggestion"],
        },
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        return get_user_id_from_token(credentials.credentials)
    except JWTError:
        raise credentials_exception
    except ValueError:
        raise credentials_exception


def get_rate_resolver(request: Request) -> RateResolver:
    """Process-wide resolver created at startup (owns the rate cache)."""
    return request.app.state.rate_resolver


def get_inference_provider(request: Request) -> InferenceProvider | None:
    return request.app.state.inference_provider


async def get_categorization_engine(
    db: AsyncSession = Depends(get_db),
    provider: InferenceProvider | None = Depends(get_inference_provider),
) -> CategorizationEngine:
    """Request-scoped engine bound to the request's session."""
    return CategorizationEngine(db, provider, ConfidencePolicy.from_settings(settings))

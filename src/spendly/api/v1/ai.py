"""AI categorization endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from spendly.api.deps import get_categorization_engine, get_current_user_id
from spendly.categorization.engine import CategorizationEngine
from spendly.categorization.taxonomy import normalize_merchant_key
from spendly.core.exceptions import InvalidInputError
from spendly.schemas.categorization import (
    CategorizeRequest,
    CategorizeResponse,
    FeedbackRequest,
    FeedbackResponse,
)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/categorize",
    response_model=CategorizeResponse,
    summary="Suggest a category for a merchant",
    description="""
    Suggests a category using, in order: your own learned mappings, mappings
    shared by all users, and an AI model.

    When nothing qualifies the response has null fields and confidence 0;
    the client should ask the user to pick a category.
    """,
)
async def categorize_expense(
    payload: CategorizeRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    engine: CategorizationEngine = Depends(get_categorization_engine),
) -> CategorizeResponse:
    if not normalize_merchant_key(payload.merchant):
        raise InvalidInputError("AI_001")

    result = await engine.categorize(payload.merchant, payload.notes, current_user_id)
    if result is None:
        return CategorizeResponse()
    return CategorizeResponse.model_validate(result)


@router.post(
    "/feedback",
    response_model=FeedbackResponse,
    summary="Record categorization feedback",
    description="""
    Tell the service which category the user kept (**accepted** true) or
    chose instead of the suggestion (**accepted** false). After repeated
    corrections for the same merchant, the user's choice is always suggested.
    """,
)
async def submit_feedback(
    payload: FeedbackRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    engine: CategorizationEngine = Depends(get_categorization_engine),
) -> FeedbackResponse:
    if not normalize_merchant_key(payload.merchant):
        raise InvalidInputError("AI_001")

    await engine.record_feedback(
        current_user_id, payload.merchant, payload.category_id, payload.accepted
    )
    return FeedbackResponse()

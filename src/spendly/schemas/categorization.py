"""Pydantic schemas for categorization endpoints."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategorizeRequest(BaseModel):
    """Request a category suggestion for a merchant."""

    merchant: str = Field(max_length=255, description="Merchant name as entered by the user")
    notes: str | None = Field(None, max_length=1000, description="Optional free-text notes")


class CategorizeResponse(BaseModel):
    """Suggested category. All-null with confidence 0 means no suggestion."""

    category_id: UUID | None = None
    category_name: str | None = None
    confidence: int = Field(0, ge=0, le=100)

    model_config = ConfigDict(from_attributes=True)


class FeedbackRequest(BaseModel):
    """The category the user ended up with for a merchant."""

    merchant: str = Field(max_length=255)
    category_id: UUID = Field(description="Category the user kept or chose")
    accepted: bool = Field(description="False when the user overrode the suggestion")


class FeedbackResponse(BaseModel):
    message: str = "Feedback recorded"

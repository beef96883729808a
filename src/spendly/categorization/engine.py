"""Merchant categorization with feedback-driven learning.

Lookup order for a merchant key:

1. the user's own mapping: served at confidence 100 once the user has
   corrected this merchant ``override_escalation_count`` times, otherwise
   served as stored when its confidence reaches ``serve_threshold``
2. the global mapping, when its confidence reaches ``serve_threshold``
3. the inference provider, restricted to the default category names;
   answers at or above ``promote_threshold`` are written to the global
   mapping so later lookups stop at step 2

``record_feedback`` is the write side: every correction bumps the user's
override count for the merchant.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.categorization.inference import InferenceProvider
from spendly.categorization.taxonomy import DEFAULT_CATEGORY_NAMES, normalize_merchant_key
from spendly.config import Settings
from spendly.core.exceptions import InferenceProviderError
from spendly.models.merchant_category_map import MerchantCategoryMap
from spendly.repositories.category import CategoryRepository
from spendly.repositories.merchant_category_map import (
    MerchantCategoryMapRepository,
    MerchantMappingUpdate,
)

logger = logging.getLogger(__name__)

CONFIRMED_CONFIDENCE = 100


@dataclass(frozen=True)
class ConfidencePolicy:
    """Thresholds (0-100) separating serve, promote and discard decisions."""

    serve_threshold: int = 60
    promote_threshold: int = 80
    override_escalation_count: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfidencePolicy":
        return cls(
            serve_threshold=settings.categorization_serve_threshold,
            promote_threshold=settings.categorization_promote_threshold,
            override_escalation_count=settings.categorization_override_escalation,
        )


@dataclass(frozen=True)
class CategorizationResult:
    category_id: UUID
    category_name: str
    confidence: int


def to_percent(confidence: float) -> int:
    """Scale a [0, 1] confidence to an integer 0-100, rounding half up."""
    clamped = min(max(confidence, 0.0), 1.0)
    return int(math.floor(clamped * 100 + 0.5))


class CategorizationEngine:
    """Resolves merchant names to categories for one request/session."""

    def __init__(
        self,
        db: AsyncSession,
        provider: InferenceProvider | None = None,
        policy: ConfidencePolicy | None = None,
        categories: Sequence[str] = DEFAULT_CATEGORY_NAMES,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.provider = provider
        self.policy = policy or ConfidencePolicy()
        self.category_names = tuple(categories)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.mappings = MerchantCategoryMapRepository(db)
        self.categories = CategoryRepository(db)

    async def categorize(
        self, merchant: str | None, notes: str | None = None, user_id: UUID | None = None
    ) -> CategorizationResult | None:
        """Best-guess category for ``merchant``, or None for "let the user pick".

        A confidence of 0 in a returned result also means no usable
        suggestion. Database errors are logged and reported as None.
        """
        merchant_key = normalize_merchant_key(merchant)
        if not merchant_key:
            return None

        try:
            return await self._categorize(merchant.strip(), notes, user_id, merchant_key)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.warning(
                "Categorization lookup failed",
                extra={"merchant_key": merchant_key, "user_id": user_id},
                exc_info=True,
            )
            return None

    async def record_feedback(
        self, user_id: UUID, merchant: str | None, category_id: UUID, accepted: bool
    ) -> None:
        """Learn from the category the user kept or chose.

        A rejected suggestion increments the user's override count for the
        merchant; an accepted one only refreshes the mapping. Errors are
        logged and swallowed.
        """
        merchant_key = normalize_merchant_key(merchant)
        if not merchant_key:
            return

        update = MerchantMappingUpdate(
            category_id=category_id,
            override_increment=0 if accepted else 1,
        )
        try:
            await self.mappings.upsert(user_id, merchant_key, update, now=self._clock())
        except SQLAlchemyError:
            await self.db.rollback()
            logger.warning(
                "Could not record categorization feedback",
                extra={"merchant_key": merchant_key, "user_id": user_id},
                exc_info=True,
            )

    async def _categorize(
        self, merchant: str, notes: str | None, user_id: UUID | None, merchant_key: str
    ) -> CategorizationResult | None:
        policy = self.policy

        if user_id is not None:
            user_map = await self.mappings.get(user_id, merchant_key)
            if user_map is not None:
                if user_map.override_count >= policy.override_escalation_count:
                    return self._from_mapping(user_map, CONFIRMED_CONFIDENCE)
                if user_map.confidence >= policy.serve_threshold:
                    return self._from_mapping(user_map, user_map.confidence)

        global_map = await self.mappings.get(None, merchant_key)
        if global_map is not None and global_map.confidence >= policy.serve_threshold:
            return self._from_mapping(global_map, global_map.confidence)

        if self.provider is None:
            return None

        return await self._infer(merchant, notes, merchant_key)

    async def _infer(
        self, merchant: str, notes: str | None, merchant_key: str
    ) -> CategorizationResult | None:
        try:
            inference = await self.provider.infer(merchant, notes or None, self.category_names)
        except InferenceProviderError as exc:
            logger.warning(
                f"AI categorization unavailable: {exc.reason}",
                extra={"merchant_key": merchant_key, "error_code": exc.error_code},
            )
            return None

        category = await self.categories.get_global_by_name(inference.category_name)
        if category is None:
            logger.info(
                f"Inferred category {inference.category_name!r} is not a known category",
                extra={"merchant_key": merchant_key},
            )
            return None

        confidence = to_percent(inference.confidence)
        if confidence >= self.policy.promote_threshold:
            try:
                await self.mappings.upsert(
                    None,
                    merchant_key,
                    MerchantMappingUpdate(category_id=category.id, confidence=confidence),
                    now=self._clock(),
                )
            except SQLAlchemyError:
                # The suggestion is still served; the next lookup infers again.
                await self.db.rollback()
                logger.warning(
                    "Could not promote inferred category to global mapping",
                    extra={"merchant_key": merchant_key},
                    exc_info=True,
                )

        return CategorizationResult(
            category_id=category.id,
            category_name=category.name,
            confidence=confidence,
        )

    @staticmethod
    def _from_mapping(mapping: MerchantCategoryMap, confidence: int) -> CategorizationResult:
        return CategorizationResult(
            category_id=mapping.category_id,
            category_name=mapping.category.name,
            confidence=confidence,
        )

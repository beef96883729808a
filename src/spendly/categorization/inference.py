"""Category inference through an LLM.

The provider gets a merchant name, optional notes and a closed list of
category names, and must answer with one name and a confidence in [0, 1].
Anything else (SDK errors, timeouts, non-JSON output) is reported as
InferenceProviderError.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from openai import AsyncOpenAI, OpenAIError

from spendly.config import Settings
from spendly.core.exceptions import InferenceProviderError

logger = logging.getLogger(__name__)

# Used when the model omits a confidence.
DEFAULT_CONFIDENCE = 0.5


@dataclass(frozen=True)
class InferenceResult:
    category_name: str
    confidence: float


class InferenceProvider(Protocol):
    async def infer(
        self, merchant: str, notes: str | None, categories: Sequence[str]
    ) -> InferenceResult:
        ...


def build_messages(
    merchant: str, notes: str | None, categories: Sequence[str]
) -> list[dict[str, str]]:
    system = (
        "You are an expense categorizer. Given a merchant name and optional notes, "
        "return the most appropriate category from this list: "
        f"[{', '.join(categories)}]. "
        'Respond ONLY with valid JSON: {"category": "...", "confidence": 0.0-1.0}'
    )
    user = f'Merchant: "{merchant}"'
    if notes:
        user += f', Notes: "{notes}"'
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def parse_inference(content: str | None) -> InferenceResult:
    """Parse the model's JSON answer.

    Raises:
        InferenceProviderError: If the answer is not a JSON object with a
            non-empty ``category`` string and a finite numeric (or absent)
            confidence.
    """
    if not content:
        raise InferenceProviderError("empty_response")
    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as exc:
        raise InferenceProviderError("malformed_response") from exc
    if not isinstance(data, dict):
        raise InferenceProviderError("malformed_response")

    category = data.get("category")
    if not isinstance(category, str) or not category.strip():
        raise InferenceProviderError("missing_category")

    confidence = data.get("confidence")
    if confidence is None:
        confidence = DEFAULT_CONFIDENCE
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise InferenceProviderError("malformed_confidence")
    # json.loads accepts NaN and Infinity literals.
    if not math.isfinite(confidence):
        raise InferenceProviderError("malformed_confidence")

    return InferenceResult(
        category_name=category.strip(),
        confidence=min(max(float(confidence), 0.0), 1.0),
    )


class OpenAIInferenceProvider:
    """Chat-completions based categorizer (JSON mode)."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = "gpt-4o-mini",
        timeout: float = 15.0,
        max_tokens: int = 100,
    ):
        self.client = client
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens

    async def infer(
        self, merchant: str, notes: str | None, categories: Sequence[str]
    ) -> InferenceResult:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(merchant, notes, categories),
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except OpenAIError as exc:
            raise InferenceProviderError("request_failed", error_type=type(exc).__name__) from exc

        if not completion.choices:
            raise InferenceProviderError("empty_response")
        return parse_inference(completion.choices[0].message.content)


def build_inference_provider(settings: Settings) -> InferenceProvider | None:
    """Provider configured from settings, or None when no API key is set."""
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY not set; AI category suggestions disabled")
        return None
    # No retries: a failed call maps straight to "no suggestion".
    client = AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
    )
    return OpenAIInferenceProvider(
        client,
        model=settings.openai_model,
        timeout=settings.openai_timeout_seconds,
    )

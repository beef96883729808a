"""Merchant categorization.

Per-user learned mappings win over global mappings, which win over a cold
inference call. User corrections feed back into the per-user mappings.
"""

from .engine import CategorizationEngine, CategorizationResult, ConfidencePolicy
from .inference import InferenceProvider, OpenAIInferenceProvider, build_inference_provider
from .taxonomy import DEFAULT_CATEGORIES, DEFAULT_CATEGORY_NAMES, normalize_merchant_key

__all__ = [
    "CategorizationEngine",
    "CategorizationResult",
    "ConfidencePolicy",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY_NAMES",
    "InferenceProvider",
    "OpenAIInferenceProvider",
    "build_inference_provider",
    "normalize_merchant_key",
]

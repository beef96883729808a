"""Default category taxonomy and merchant key normalization."""

from __future__ import annotations

# Global default categories. The inference provider may only answer with
# one of these names.
DEFAULT_CATEGORIES: list[dict] = [
    {"name": "Food & Dining", "icon": "utensils", "color": "#f97316", "sort_order": 1},
    {"name": "Transportation", "icon": "car", "color": "#3b82f6", "sort_order": 2},
    {"name": "Shopping", "icon": "shopping-bag", "color": "#ec4899", "sort_order": 3},
    {"name": "Entertainment", "icon": "film", "color": "#8b5cf6", "sort_order": 4},
    {"name": "Health & Wellness", "icon": "heart", "color": "#10b981", "sort_order": 5},
    {"name": "Housing & Utilities", "icon": "home", "color": "#6366f1", "sort_order": 6},
    {"name": "Travel", "icon": "plane", "color": "#0ea5e9", "sort_order": 7},
    {"name": "Education", "icon": "book", "color": "#f59e0b", "sort_order": 8},
    {"name": "Business", "icon": "briefcase", "color": "#64748b", "sort_order": 9},
    {"name": "Personal Care", "icon": "sparkles", "color": "#d946ef", "sort_order": 10},
    {"name": "Subscriptions", "icon": "repeat", "color": "#14b8a6", "sort_order": 11},
    {"name": "Gifts & Donations", "icon": "gift", "color": "#f43f5e", "sort_order": 12},
    {"name": "Taxes & Fees", "icon": "receipt", "color": "#78716c", "sort_order": 13},
    {"name": "Uncategorized", "icon": "tag", "color": "#94a3b8", "sort_order": 14},
]

DEFAULT_CATEGORY_NAMES: tuple[str, ...] = tuple(c["name"] for c in DEFAULT_CATEGORIES)


def normalize_merchant_key(merchant: str | None) -> str:
    """Normalize a merchant name into its lookup key.

    Exact-match key (trimmed, lowercased); no fuzzy matching.
    """
    return (merchant or "").strip().lower()

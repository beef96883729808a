"""Database models."""
from spendly.models.category import Category
from spendly.models.fx_rate import FxRate
from spendly.models.merchant_category_map import MerchantCategoryMap

__all__ = ["Category", "FxRate", "MerchantCategoryMap"]

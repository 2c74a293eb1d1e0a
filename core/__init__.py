"""
Core package — business model schema, configuration, and shared utilities.
No business logic lives here.
"""

from .schema import (
    ALL_PRODUCTS,
    ALL_PRODUCTS_COMBINED,
    TOTAL_REVENUE,
    BusinessModel,
    COGSBreakdown,
    FixedCost,
    MarketingCosts,
    MarketingFixed,
    MarketingPercentRevenue,
    MarketingPerUnit,
    Product,
    SemiVariableCost,
    SetupCost,
    VariableCost,
)
from .utils import to_number, to_amount, safe_divide, excel_round
from .config import (
    GrowthRates,
    ProjectionSettings,
    SPREAD_OVER_PROJECTION,
    SPREAD_OVER_12_MONTHS,
)
from .business_types import BUSINESS_TYPES, BusinessType, get_business_type

__all__ = [
    "ALL_PRODUCTS",
    "ALL_PRODUCTS_COMBINED",
    "TOTAL_REVENUE",
    "BusinessModel",
    "COGSBreakdown",
    "FixedCost",
    "MarketingCosts",
    "MarketingFixed",
    "MarketingPercentRevenue",
    "MarketingPerUnit",
    "Product",
    "SemiVariableCost",
    "SetupCost",
    "VariableCost",
    "to_number",
    "to_amount",
    "safe_divide",
    "excel_round",
    "GrowthRates",
    "ProjectionSettings",
    "SPREAD_OVER_PROJECTION",
    "SPREAD_OVER_12_MONTHS",
    "BUSINESS_TYPES",
    "BusinessType",
    "get_business_type",
]

"""
Business type catalog offered by the input layer.
has_cogs / has_bom are None for the custom type (the user decides).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BusinessType:
    id: str
    label: str
    category: str
    has_cogs: Optional[bool]
    has_bom: Optional[bool]
    notes: str


BUSINESS_TYPES: Tuple[BusinessType, ...] = (
    BusinessType(
        "shoe_business", "Shoe Business", "Manufacturing & Retail", True, False,
        "Covers shoe manufacturing, wholesale or retail. COGS includes raw materials per unit.",
    ),
    BusinessType(
        "restaurant", "Restaurant", "Food & Beverage", True, False,
        "Menu-based pricing with multiple products. COGS = food/ingredient cost per dish.",
    ),
    BusinessType(
        "saas", "SaaS (Software as a Service)", "Technology", False, False,
        "Subscription-based revenue. Costs are mostly fixed (dev, hosting, support).",
    ),
    BusinessType(
        "software_development", "Software Development Agency", "Technology", False, False,
        "Project-based revenue. Costs include developer salaries, tools, licenses.",
    ),
    BusinessType(
        "manufacturing", "Manufacturing", "Manufacturing", True, True,
        "Raw materials converted to finished goods. Requires COGS with optional BOM logic.",
    ),
    BusinessType(
        "retail", "Retail Store", "Retail", True, False,
        "Buy goods and resell. COGS = purchase cost per unit.",
    ),
    BusinessType(
        "facebook_business", "Facebook / Social Commerce Business", "E-commerce", True, False,
        "Sell via Facebook page or group. Key costs include ad spend, delivery, packaging.",
    ),
    BusinessType(
        "fashion_apparel", "Fashion & Apparel", "Manufacturing & Retail", True, False,
        "Clothing business with production or sourcing. May have multiple product lines.",
    ),
    BusinessType(
        "jewellery", "Jewellery Business", "Manufacturing & Retail", True, False,
        "High COGS (gold, silver, stones). Multiple SKUs at different price points.",
    ),
    BusinessType(
        "trading_import", "Import & Trading Business", "Trading", True, False,
        "Import goods and sell locally. COGS includes product cost + customs + shipping.",
    ),
    BusinessType(
        "custom", "Custom / Other Business", "Custom", None, None,
        "User defines everything from scratch.",
    ),
)


def get_business_type(type_id: str) -> Optional[BusinessType]:
    for bt in BUSINESS_TYPES:
        if bt.id == type_id:
            return bt
    return None

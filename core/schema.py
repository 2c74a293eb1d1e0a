"""
Business model schema — products and the six cost-line kinds.

All entities are frozen: the input layer builds a fresh model for every recompute and
the engine only reads it. Numeric fields are typed as floats but the engine coerces
them again before any arithmetic (see core.utils.to_amount), so a half-filled form
never breaks a projection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

# Reference sentinels (wire values shared with the input layer)
ALL_PRODUCTS = "all_products"
ALL_PRODUCTS_COMBINED = "all_products_combined"
TOTAL_REVENUE = "total_revenue"

UNIT_REFERENCE_SENTINELS: Tuple[str, ...] = (ALL_PRODUCTS, ALL_PRODUCTS_COMBINED)


@dataclass(frozen=True)
class COGSBreakdown:
    """Direct cost of one unit."""
    raw_material_cost: float = 0.0
    labor_cost_per_unit: float = 0.0
    packaging_cost_per_unit: float = 0.0
    other_direct_cost_per_unit: float = 0.0


@dataclass(frozen=True)
class VariableCost:
    id: str
    name: str
    rate_per_unit: float = 0.0
    product_reference: str = ALL_PRODUCTS


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    unit_label: str = "unit"
    selling_price_per_unit: float = 0.0
    units_sold_per_month: float = 0.0
    cogs_per_unit: Optional[COGSBreakdown] = None
    # carried for the input layer; the engine costs variable lines from BusinessModel
    variable_costs: Tuple[VariableCost, ...] = ()


@dataclass(frozen=True)
class SetupCost:
    id: str
    name: str
    total_amount: float = 0.0


@dataclass(frozen=True)
class FixedCost:
    id: str
    name: str
    amount_per_month: float = 0.0


@dataclass(frozen=True)
class SemiVariableCost:
    id: str
    name: str
    base_amount_per_month: float = 0.0
    variable_rate_per_unit: float = 0.0
    unit_reference: str = ALL_PRODUCTS_COMBINED


@dataclass(frozen=True)
class MarketingFixed:
    id: str
    name: str
    amount_per_month: float = 0.0


@dataclass(frozen=True)
class MarketingPerUnit:
    id: str
    name: str
    rate_per_unit: float = 0.0
    product_reference: str = ALL_PRODUCTS


@dataclass(frozen=True)
class MarketingPercentRevenue:
    id: str
    name: str
    percentage_of_revenue: float = 0.0
    revenue_reference: str = TOTAL_REVENUE


@dataclass(frozen=True)
class MarketingCosts:
    fixed_marketing: Tuple[MarketingFixed, ...] = ()
    variable_marketing_per_unit: Tuple[MarketingPerUnit, ...] = ()
    variable_marketing_percent_revenue: Tuple[MarketingPercentRevenue, ...] = ()


@dataclass(frozen=True)
class BusinessModel:
    """Snapshot of everything the engine needs besides the projection settings."""

    products: Tuple[Product, ...] = ()
    setup_costs: Tuple[SetupCost, ...] = ()
    fixed_costs: Tuple[FixedCost, ...] = ()
    semi_variable_costs: Tuple[SemiVariableCost, ...] = ()
    variable_costs: Tuple[VariableCost, ...] = ()
    marketing_costs: MarketingCosts = field(default_factory=MarketingCosts)

    def product_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.products)

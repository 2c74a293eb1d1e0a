"""
Cost aggregators — reduce each cost-line collection to one monthly total.

Key rules:
  1. Every aggregator takes the month's product snapshot (growth already applied)
  2. Unit references: sentinel -> all units combined, product id -> that product's units
  3. Revenue references: sentinel -> total revenue, product id -> that product's revenue
  4. A reference to a product that no longer exists contributes 0
  5. Raw numbers are coerced with to_amount() right before use
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from core.config import ProjectionSettings
from core.schema import (
    TOTAL_REVENUE,
    UNIT_REFERENCE_SENTINELS,
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
from core.utils import safe_divide, to_amount


# ---------------------------------------------------------------------------
# Product-level helpers
# ---------------------------------------------------------------------------
def cogs_per_unit(product: Product) -> float:
    """Sum of the four direct cost components, 0 when the product has no COGS."""
    c = product.cogs_per_unit
    if c is None:
        return 0.0
    return (
        to_amount(c.raw_material_cost)
        + to_amount(c.labor_cost_per_unit)
        + to_amount(c.packaging_cost_per_unit)
        + to_amount(c.other_direct_cost_per_unit)
    )


def product_revenue(product: Product) -> float:
    return to_amount(product.selling_price_per_unit) * to_amount(product.units_sold_per_month)


def total_revenue(products: Sequence[Product]) -> float:
    return sum(product_revenue(p) for p in products)


def total_units(products: Sequence[Product]) -> float:
    return sum(to_amount(p.units_sold_per_month) for p in products)


def total_cogs(products: Sequence[Product]) -> float:
    return sum(cogs_per_unit(p) * to_amount(p.units_sold_per_month) for p in products)


def _find_product(products: Sequence[Product], product_id: str) -> Optional[Product]:
    for p in products:
        if p.id == product_id:
            return p
    return None


def units_for_reference(products: Sequence[Product], reference: str) -> float:
    if reference in UNIT_REFERENCE_SENTINELS:
        return total_units(products)
    product = _find_product(products, reference)
    return to_amount(product.units_sold_per_month) if product is not None else 0.0


def revenue_for_reference(products: Sequence[Product], reference: str) -> float:
    if reference == TOTAL_REVENUE:
        return total_revenue(products)
    product = _find_product(products, reference)
    return product_revenue(product) if product is not None else 0.0


def unit_reference_applies(reference: str, product_id: str) -> bool:
    """Whether a per-unit line is charged on units of ``product_id``."""
    return reference in UNIT_REFERENCE_SENTINELS or reference == product_id


def revenue_reference_applies(reference: str, product_id: str) -> bool:
    return reference == TOTAL_REVENUE or reference == product_id


# ---------------------------------------------------------------------------
# Aggregators
# ---------------------------------------------------------------------------
def total_setup_costs(setup_costs: Iterable[SetupCost]) -> float:
    return sum(to_amount(c.total_amount) for c in setup_costs)


def amortized_setup_cost(setup_costs: Iterable[SetupCost], settings: ProjectionSettings) -> float:
    """Setup pool spread over the horizon or a fixed 12 months; constant every month."""
    return safe_divide(total_setup_costs(setup_costs), settings.amortization_months)


def total_fixed_costs(fixed_costs: Iterable[FixedCost]) -> float:
    return sum(to_amount(c.amount_per_month) for c in fixed_costs)


def total_semi_variable_costs(
    semi_variable_costs: Iterable[SemiVariableCost],
    products: Sequence[Product],
) -> float:
    return sum(
        to_amount(c.base_amount_per_month)
        + to_amount(c.variable_rate_per_unit) * units_for_reference(products, c.unit_reference)
        for c in semi_variable_costs
    )


def total_variable_costs(
    variable_costs: Iterable[VariableCost],
    products: Sequence[Product],
) -> float:
    return sum(
        to_amount(c.rate_per_unit) * units_for_reference(products, c.product_reference)
        for c in variable_costs
    )


def total_fixed_marketing(fixed_marketing: Iterable[MarketingFixed]) -> float:
    return sum(to_amount(c.amount_per_month) for c in fixed_marketing)


def total_marketing_per_unit(
    per_unit: Iterable[MarketingPerUnit],
    products: Sequence[Product],
) -> float:
    return sum(
        to_amount(c.rate_per_unit) * units_for_reference(products, c.product_reference)
        for c in per_unit
    )


def total_marketing_percent_revenue(
    percent_revenue: Iterable[MarketingPercentRevenue],
    products: Sequence[Product],
) -> float:
    return sum(
        to_amount(c.percentage_of_revenue) / 100.0 * revenue_for_reference(products, c.revenue_reference)
        for c in percent_revenue
    )


def total_marketing_costs(marketing: MarketingCosts, products: Sequence[Product]) -> float:
    return (
        total_fixed_marketing(marketing.fixed_marketing)
        + total_marketing_per_unit(marketing.variable_marketing_per_unit, products)
        + total_marketing_percent_revenue(marketing.variable_marketing_percent_revenue, products)
    )

"""
Breakeven analysis — weighted contribution margin across products.

  Fixed pool      = fixed costs + semi-variable bases + amortized setup (per month)
  Unit margin     = price - COGS - variable rates - marketing per unit - marketing % x price
  Weighted margin = sum(margin_i x units_i) / sum(units_i), contribution-positive products only
  Breakeven units = ceil(fixed pool / weighted margin)

A business with no contribution-positive product has no finite breakeven. That is a
valid answer (zero units, zero revenue, no breakeven month), not an error.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence

from core.config import ProjectionSettings
from core.schema import BusinessModel, Product
from core.utils import safe_divide, to_amount
from engine.costs import (
    amortized_setup_cost,
    cogs_per_unit,
    revenue_reference_applies,
    total_fixed_costs,
    total_setup_costs,
    unit_reference_applies,
)
from engine.pnl import MonthlyStatement
from engine.runner import run_projection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakevenResult:
    breakeven_units_total: int = 0
    breakeven_units_per_product: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    breakeven_revenue: float = 0.0
    months_to_breakeven: Optional[int] = None


def breakeven_fixed_pool(model: BusinessModel, settings: ProjectionSettings) -> float:
    """Monthly costs that do not scale with volume (semi-variable rates excluded)."""
    semi_base = sum(to_amount(c.base_amount_per_month) for c in model.semi_variable_costs)
    return (
        total_fixed_costs(model.fixed_costs)
        + semi_base
        + amortized_setup_cost(model.setup_costs, settings)
    )


def unit_contribution_margin(product: Product, model: BusinessModel) -> float:
    """Per-unit price left after every cost that scales with this product's units."""
    price = to_amount(product.selling_price_per_unit)
    mkt = model.marketing_costs

    variable_rate = sum(
        to_amount(c.rate_per_unit)
        for c in model.variable_costs
        if unit_reference_applies(c.product_reference, product.id)
    )
    marketing_rate = sum(
        to_amount(c.rate_per_unit)
        for c in mkt.variable_marketing_per_unit
        if unit_reference_applies(c.product_reference, product.id)
    )
    marketing_pct = sum(
        to_amount(c.percentage_of_revenue)
        for c in mkt.variable_marketing_percent_revenue
        if revenue_reference_applies(c.revenue_reference, product.id)
    )

    return price - cogs_per_unit(product) - variable_rate - marketing_rate - marketing_pct / 100.0 * price


def months_to_breakeven(
    statements: Sequence[MonthlyStatement],
    total_setup: float,
) -> Optional[int]:
    """First month whose cumulative net P&L recovers the one-time setup investment."""
    cumulative = 0.0
    for s in statements:
        cumulative += s.net_pnl
        if cumulative >= total_setup:
            return s.month
    return None


def compute_breakeven(
    model: BusinessModel,
    settings: ProjectionSettings,
    statements: Optional[Sequence[MonthlyStatement]] = None,
) -> BreakevenResult:
    """
    Breakeven volume, revenue, per-product allocation and payback month.

    Parameters
    ----------
    model : BusinessModel
        Base (month-1, un-grown) products and cost lines
    settings : ProjectionSettings
        Used for the amortization denominator and, when ``statements`` is not given,
        to run the projection for the payback scan
    statements : sequence of MonthlyStatement, optional
        Already-computed projection; avoids running it a second time
    """
    products = tuple(model.products)
    fixed_pool = breakeven_fixed_pool(model, settings)

    weighted_sum = 0.0
    contributing_units = 0.0
    for p in products:
        margin = unit_contribution_margin(p, model)
        if margin > 0:
            units = to_amount(p.units_sold_per_month)
            weighted_sum += margin * units
            contributing_units += units

    weighted_margin = safe_divide(weighted_sum, contributing_units)
    if weighted_margin <= 0:
        logger.debug("No contribution-positive volume; breakeven undefined.")
        return BreakevenResult()

    all_units = sum(to_amount(p.units_sold_per_month) for p in products)
    blended_price = safe_divide(
        sum(to_amount(p.selling_price_per_unit) * to_amount(p.units_sold_per_month) for p in products),
        all_units,
    )
    raw_units = fixed_pool / weighted_margin
    if not math.isfinite(raw_units) or not math.isfinite(math.ceil(raw_units) * blended_price):
        logger.debug("Weighted margin %.3g too small for a finite breakeven.", weighted_margin)
        return BreakevenResult()

    breakeven_units = int(math.ceil(raw_units))
    breakeven_revenue = breakeven_units * blended_price

    # all_units > 0 here: a positive weighted margin needs contributing units
    per_product: Dict[str, int] = {
        p.id: int(math.ceil(breakeven_units * (to_amount(p.units_sold_per_month) / all_units)))
        for p in products
    }

    if statements is None:
        statements = run_projection(model, settings)
    payback_month = months_to_breakeven(statements, total_setup_costs(model.setup_costs))

    logger.debug(
        "Breakeven: pool=%.2f weighted_margin=%.4f units=%d payback_month=%s",
        fixed_pool, weighted_margin, breakeven_units, payback_month,
    )
    return BreakevenResult(
        breakeven_units_total=breakeven_units,
        breakeven_units_per_product=MappingProxyType(per_product),
        breakeven_revenue=breakeven_revenue,
        months_to_breakeven=payback_month,
    )

"""
Monthly P&L builder — one month's statement from the business model.

Steps for month m:
  1. Grow every product's units and price to month m (product snapshot)
  2. Grow any cost line that has a growth rule keyed on its id (no rule -> unchanged)
  3. Revenue, COGS, gross profit from the snapshot
  4. Five cost categories from the aggregators in engine/costs.py
  5. Net P&L and margin (0 margin when there is no revenue)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional, Tuple

from core.config import GrowthRates, ProjectionSettings
from core.schema import BusinessModel, MarketingCosts, Product
from core.utils import safe_divide, to_number
from growth.base import GrowthRule
from growth.evaluator import apply_growth

from .costs import (
    amortized_setup_cost,
    total_cogs,
    total_fixed_costs,
    total_marketing_costs,
    total_revenue,
    total_semi_variable_costs,
    total_variable_costs,
)


@dataclass(frozen=True)
class MonthlyStatement:
    """One month of the projection."""
    month: int
    revenue: float
    cogs: float
    gross_profit: float
    fixed_costs: float
    semi_variable_costs: float
    variable_costs: float
    marketing_costs: float
    setup_cost_amortized: float
    total_costs: float
    net_pnl: float
    margin_percent: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def grow_products(
    products: Tuple[Product, ...],
    month: int,
    growth_rates: GrowthRates,
) -> Tuple[Product, ...]:
    """Per-month product snapshot with units and price grown to ``month``."""
    return tuple(
        replace(
            p,
            units_sold_per_month=apply_growth(
                p.units_sold_per_month, month, growth_rates.units_sold.get(p.id)
            ),
            selling_price_per_unit=apply_growth(
                p.selling_price_per_unit, month, growth_rates.selling_price.get(p.id)
            ),
        )
        for p in products
    )


def _cost_rule(line_id: str, growth_rates: GrowthRates) -> Optional[GrowthRule]:
    return growth_rates.fixed_costs.get(line_id) or growth_rates.variable_costs.get(line_id)


def _grow_line(line, month: int, growth_rates: GrowthRates, fields: Tuple[str, ...]):
    rule = _cost_rule(line.id, growth_rates)
    if rule is None:
        return line
    return replace(line, **{f: apply_growth(getattr(line, f), month, rule) for f in fields})


def grow_cost_lines(model: BusinessModel, month: int, growth_rates: GrowthRates) -> BusinessModel:
    """
    Apply cost-line growth rules keyed by cost id.
    Returns ``model`` itself when no cost rules are configured.
    """
    if not growth_rates.fixed_costs and not growth_rates.variable_costs:
        return model

    def grow_all(lines, *fields):
        return tuple(_grow_line(c, month, growth_rates, fields) for c in lines)

    mkt = model.marketing_costs
    return replace(
        model,
        fixed_costs=grow_all(model.fixed_costs, "amount_per_month"),
        semi_variable_costs=grow_all(
            model.semi_variable_costs, "base_amount_per_month", "variable_rate_per_unit"
        ),
        variable_costs=grow_all(model.variable_costs, "rate_per_unit"),
        marketing_costs=MarketingCosts(
            fixed_marketing=grow_all(mkt.fixed_marketing, "amount_per_month"),
            variable_marketing_per_unit=grow_all(mkt.variable_marketing_per_unit, "rate_per_unit"),
            # percentages are shares, not amounts
            variable_marketing_percent_revenue=tuple(mkt.variable_marketing_percent_revenue),
        ),
    )


def build_month(
    month: int,
    model: BusinessModel,
    settings: ProjectionSettings,
    *,
    amortized_setup: Optional[float] = None,
) -> MonthlyStatement:
    """
    Build the statement for ``month`` (1-indexed).

    ``amortized_setup`` lets the runner pass the constant monthly amortization once
    instead of recomputing it for every month.
    """
    rates = settings.growth_rates
    products = grow_products(tuple(model.products), month, rates)
    costs = grow_cost_lines(model, month, rates)

    # to_number: a total that overflowed to inf is reported as 0
    revenue = to_number(total_revenue(products))
    cogs = to_number(total_cogs(products))
    gross_profit = to_number(revenue - cogs)

    fixed = to_number(total_fixed_costs(costs.fixed_costs))
    semi_variable = to_number(total_semi_variable_costs(costs.semi_variable_costs, products))
    variable = to_number(total_variable_costs(costs.variable_costs, products))
    marketing = to_number(total_marketing_costs(costs.marketing_costs, products))
    if amortized_setup is None:
        amortized_setup = amortized_setup_cost(model.setup_costs, settings)
    amortized_setup = to_number(amortized_setup)

    total_costs = to_number(fixed + semi_variable + variable + marketing + amortized_setup)
    net_pnl = to_number(gross_profit - total_costs)
    margin = to_number(safe_divide(net_pnl * 100.0, revenue)) if revenue > 0 else 0.0

    return MonthlyStatement(
        month=int(month),
        revenue=revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        fixed_costs=fixed,
        semi_variable_costs=semi_variable,
        variable_costs=variable,
        marketing_costs=marketing,
        setup_cost_amortized=float(amortized_setup),
        total_costs=total_costs,
        net_pnl=net_pnl,
        margin_percent=margin,
    )

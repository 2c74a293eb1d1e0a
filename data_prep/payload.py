"""
Environment payload — the JSON shape of a proposed business model.

This is what the assistant (or a saved file) hands over: products, the six cost
collections, optional global growth assumptions and projection defaults. Parsing is
lenient on values (numbers arrive as strings, blanks, nulls) and strict on shape
(a list where an object belongs is a ValidationError).

Conversion rules:
  - numeric fields -> finite, non-negative floats (growth percentages may be negative)
  - missing ids -> generated ids
  - missing references -> the "all products" / "total revenue" sentinels
  - global growth rules are fanned out per product (units, price) and per cost line
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from core.config import (
    AMORTIZATION_MODES,
    DEFAULT_PROJECTION_MONTHS,
    SPREAD_OVER_PROJECTION,
    GrowthRates,
    ProjectionSettings,
)
from core.schema import (
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
from core.utils import to_amount, to_number
from growth.base import GrowthRule

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def _coerce_id(value: Any) -> str:
    if value is None or str(value).strip() == "":
        return new_id()
    return str(value)


def _coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def _default_to(sentinel: str):
    def _ref(value: Any) -> str:
        if value is None or str(value).strip() == "":
            return sentinel
        return str(value)
    return _ref


def _coerce_months(value: Any) -> int:
    return max(int(to_number(value, DEFAULT_PROJECTION_MONTHS)), 1)


def _maybe_number(value: Any) -> Optional[float]:
    num = to_number(value, default=float("nan"))
    return None if num != num else num


Amount = Annotated[float, BeforeValidator(to_amount)]
Rate = Annotated[float, BeforeValidator(to_number)]
Id = Annotated[str, BeforeValidator(_coerce_id)]
Text = Annotated[str, BeforeValidator(_coerce_text)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(_maybe_number)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class COGSPayload(_Payload):
    raw_material_cost: Amount = 0.0
    labor_cost_per_unit: Amount = 0.0
    packaging_cost_per_unit: Amount = 0.0
    other_direct_cost_per_unit: Amount = 0.0

    def to_core(self) -> COGSBreakdown:
        return COGSBreakdown(**self.model_dump())


class VariableCostPayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    rate_per_unit: Amount = 0.0
    product_reference: Annotated[str, BeforeValidator(_default_to(ALL_PRODUCTS))] = ALL_PRODUCTS

    def to_core(self) -> VariableCost:
        return VariableCost(**self.model_dump())


class ProductPayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    unit_label: Text = "unit"
    selling_price_per_unit: Amount = 0.0
    units_sold_per_month: Amount = 0.0
    cogs_per_unit: Optional[COGSPayload] = None
    variable_costs: List[VariableCostPayload] = Field(default_factory=list)

    def to_core(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            unit_label=self.unit_label,
            selling_price_per_unit=self.selling_price_per_unit,
            units_sold_per_month=self.units_sold_per_month,
            cogs_per_unit=self.cogs_per_unit.to_core() if self.cogs_per_unit else None,
            variable_costs=tuple(v.to_core() for v in self.variable_costs),
        )


class SetupCostPayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    total_amount: Amount = 0.0

    def to_core(self) -> SetupCost:
        return SetupCost(**self.model_dump())


class FixedCostPayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    amount_per_month: Amount = 0.0

    def to_core(self) -> FixedCost:
        return FixedCost(**self.model_dump())


class SemiVariableCostPayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    base_amount_per_month: Amount = 0.0
    variable_rate_per_unit: Amount = 0.0
    unit_reference: Annotated[str, BeforeValidator(_default_to(ALL_PRODUCTS_COMBINED))] = ALL_PRODUCTS_COMBINED

    def to_core(self) -> SemiVariableCost:
        return SemiVariableCost(**self.model_dump())


class MarketingFixedPayload(FixedCostPayload):
    def to_core(self) -> MarketingFixed:
        return MarketingFixed(**self.model_dump())


class MarketingPerUnitPayload(VariableCostPayload):
    def to_core(self) -> MarketingPerUnit:
        return MarketingPerUnit(**self.model_dump())


class MarketingPercentRevenuePayload(_Payload):
    id: Id = Field(default_factory=new_id)
    name: Text = ""
    percentage_of_revenue: Amount = 0.0
    revenue_reference: Annotated[str, BeforeValidator(_default_to(TOTAL_REVENUE))] = TOTAL_REVENUE

    def to_core(self) -> MarketingPercentRevenue:
        return MarketingPercentRevenue(**self.model_dump())


class MarketingCostsPayload(_Payload):
    fixed_marketing: List[MarketingFixedPayload] = Field(default_factory=list)
    variable_marketing_per_unit: List[MarketingPerUnitPayload] = Field(default_factory=list)
    variable_marketing_percent_revenue: List[MarketingPercentRevenuePayload] = Field(default_factory=list)

    def to_core(self) -> MarketingCosts:
        return MarketingCosts(
            fixed_marketing=tuple(c.to_core() for c in self.fixed_marketing),
            variable_marketing_per_unit=tuple(c.to_core() for c in self.variable_marketing_per_unit),
            variable_marketing_percent_revenue=tuple(
                c.to_core() for c in self.variable_marketing_percent_revenue
            ),
        )


class GrowthRulePayload(_Payload):
    mode: Text = "proportional"
    growth_percentage: Rate = 0.0
    frequency: Text = "monthly"
    monthly_values: List[OptionalNumber] = Field(default_factory=list)
    quarterly_values: List[OptionalNumber] = Field(default_factory=list)

    def to_core(self) -> GrowthRule:
        return GrowthRule(
            mode=self.mode,
            growth_percentage=self.growth_percentage,
            frequency=self.frequency,
            monthly_values=tuple(self.monthly_values),
            quarterly_values=tuple(self.quarterly_values),
        )


class GrowthAssumptionsPayload(_Payload):
    units_sold: Optional[GrowthRulePayload] = None
    selling_price: Optional[GrowthRulePayload] = None
    costs: Optional[GrowthRulePayload] = None


class ProjectionDefaultsPayload(_Payload):
    months: Annotated[int, BeforeValidator(_coerce_months)] = DEFAULT_PROJECTION_MONTHS
    amortization_type: Text = SPREAD_OVER_PROJECTION


class InsightsPayload(_Payload):
    key_drivers: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class EnvironmentPayload(_Payload):
    products: List[ProductPayload] = Field(default_factory=list)
    setup_costs: List[SetupCostPayload] = Field(default_factory=list)
    fixed_costs: List[FixedCostPayload] = Field(default_factory=list)
    semi_variable_costs: List[SemiVariableCostPayload] = Field(default_factory=list)
    variable_costs: List[VariableCostPayload] = Field(default_factory=list)
    marketing_costs: MarketingCostsPayload = Field(default_factory=MarketingCostsPayload)
    growth_rates: GrowthAssumptionsPayload = Field(default_factory=GrowthAssumptionsPayload)
    projection_defaults: ProjectionDefaultsPayload = Field(default_factory=ProjectionDefaultsPayload)
    insights: InsightsPayload = Field(default_factory=InsightsPayload)

    def to_business_model(self) -> BusinessModel:
        return BusinessModel(
            products=tuple(p.to_core() for p in self.products),
            setup_costs=tuple(c.to_core() for c in self.setup_costs),
            fixed_costs=tuple(c.to_core() for c in self.fixed_costs),
            semi_variable_costs=tuple(c.to_core() for c in self.semi_variable_costs),
            variable_costs=tuple(c.to_core() for c in self.variable_costs),
            marketing_costs=self.marketing_costs.to_core(),
        )

    def to_projection_settings(self) -> ProjectionSettings:
        defaults = self.projection_defaults
        amortization = defaults.amortization_type
        if amortization not in AMORTIZATION_MODES:
            logger.warning("Unknown amortization type %r; using %s.", amortization, SPREAD_OVER_PROJECTION)
            amortization = SPREAD_OVER_PROJECTION

        return ProjectionSettings(
            months=defaults.months,
            amortization=amortization,
            growth_rates=self._growth_rates(),
        )

    def _growth_rates(self) -> GrowthRates:
        """
        Product rules only. ``growth_rates.costs`` stays on the payload and is never
        fanned out, so cost lines from a proposal are projected flat.
        """
        g = self.growth_rates
        product_ids = [p.id for p in self.products]

        def fan_out(rule: Optional[GrowthRulePayload]) -> Dict[str, GrowthRule]:
            if rule is None:
                return {}
            core_rule = rule.to_core()
            return {pid: core_rule for pid in product_ids}

        if g.costs is not None:
            logger.debug("Proposal cost growth rule kept on payload, not applied.")
        return GrowthRates(
            units_sold=fan_out(g.units_sold),
            selling_price=fan_out(g.selling_price),
        )

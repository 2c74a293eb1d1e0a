"""
Sanity checks for a business model before it enters the engine.

The engine never rejects a model (bad numbers become zero, dangling references
contribute nothing), so these checks exist to tell the user *why* a figure looks off:
- Duplicate ids
- References to products that don't exist
- Products with no price or a non-positive unit margin
- Horizon or amortization settings outside what the dashboard offers
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List

from analysis.breakeven import unit_contribution_margin
from core.config import AMORTIZATION_MODES, MAX_PROJECTION_MONTHS, MIN_PROJECTION_MONTHS, ProjectionSettings
from core.schema import TOTAL_REVENUE, UNIT_REFERENCE_SENTINELS, BusinessModel
from core.utils import to_amount, to_number


SETTINGS = "settings"
PRODUCTS = "products"
COSTS = "costs"
SECTIONS = (SETTINGS, PRODUCTS, COSTS)


@dataclass(frozen=True)
class ModelIssue:
    section: str
    message: str
    blocking: bool = False


@dataclass
class ValidationResult:
    """
    Findings about one model, tagged with the part of the model they concern.
    Only blocking findings (settings the engine cannot honour) make it invalid.
    """
    issues: List[ModelIssue] = field(default_factory=list)

    def error(self, section: str, message: str) -> None:
        self.issues.append(ModelIssue(section, message, blocking=True))

    def warn(self, section: str, message: str) -> None:
        self.issues.append(ModelIssue(section, message))

    @property
    def errors(self) -> List[str]:
        return [i.message for i in self.issues if i.blocking]

    @property
    def warnings(self) -> List[str]:
        return [i.message for i in self.issues if not i.blocking]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def in_section(self, section: str) -> List[ModelIssue]:
        return [i for i in self.issues if i.section == section]

    def summary(self) -> str:
        """Findings grouped by section, blocking ones marked with ✗."""
        if not self.issues:
            return "✓ Model is consistent."
        lines = []
        for section in SECTIONS:
            found = self.in_section(section)
            if not found:
                continue
            lines.append(f"{section.capitalize()} ({len(found)}):")
            lines.extend(f"  {'✗' if i.blocking else '⚠'} {i.message}" for i in found)
        return "\n".join(lines)


def _cost_lines(model: BusinessModel):
    mkt = model.marketing_costs
    return (
        list(model.setup_costs)
        + list(model.fixed_costs)
        + list(model.semi_variable_costs)
        + list(model.variable_costs)
        + list(mkt.fixed_marketing)
        + list(mkt.variable_marketing_per_unit)
        + list(mkt.variable_marketing_percent_revenue)
    )


def validate_model(model: BusinessModel, settings: ProjectionSettings) -> ValidationResult:
    """
    Run all checks on a model and its projection settings.
    Returns a ValidationResult with errors (settings the engine cannot honour as given)
    and warnings (informational). Never raises.
    """
    result = ValidationResult()

    # --- Settings ---
    months = to_number(settings.months)
    if months <= 0:
        result.error(SETTINGS, f"Projection horizon must be at least 1 month (got {settings.months}).")
    elif not MIN_PROJECTION_MONTHS <= months <= MAX_PROJECTION_MONTHS:
        result.warn(
            SETTINGS,
            f"Projection horizon of {int(months)} months is outside "
            f"{MIN_PROJECTION_MONTHS}-{MAX_PROJECTION_MONTHS}."
        )
    if settings.amortization not in AMORTIZATION_MODES:
        result.error(SETTINGS, f"Unknown amortization mode: {settings.amortization!r}.")

    # --- Products ---
    if not model.products:
        result.warn(PRODUCTS, "Model has no products; revenue will be zero.")

    product_ids = set(model.product_ids())
    dup_products = [pid for pid, n in Counter(p.id for p in model.products).items() if n > 1]
    if dup_products:
        result.warn(PRODUCTS, f"Duplicate product ids: {sorted(dup_products)}.")

    dup_costs = [cid for cid, n in Counter(c.id for c in _cost_lines(model)).items() if n > 1]
    if dup_costs:
        result.warn(COSTS, f"Duplicate cost ids: {sorted(dup_costs)}.")

    for p in model.products:
        label = p.name or p.id
        if to_amount(p.selling_price_per_unit) == 0:
            result.warn(PRODUCTS, f"Product '{label}' has no selling price.")
        if to_amount(p.units_sold_per_month) == 0:
            result.warn(PRODUCTS, f"Product '{label}' sells 0 units per month.")

    # --- References ---
    mkt = model.marketing_costs
    unit_refs = (
        [(c.name, c.product_reference) for c in model.variable_costs]
        + [(c.name, c.unit_reference) for c in model.semi_variable_costs]
        + [(c.name, c.product_reference) for c in mkt.variable_marketing_per_unit]
    )
    for name, ref in unit_refs:
        if ref not in UNIT_REFERENCE_SENTINELS and ref not in product_ids:
            result.warn(COSTS, f"Cost '{name}' references unknown product '{ref}'; it contributes 0.")
    for c in mkt.variable_marketing_percent_revenue:
        ref = c.revenue_reference
        if ref != TOTAL_REVENUE and ref not in product_ids:
            result.warn(COSTS, f"Cost '{c.name}' references unknown product '{ref}'; it contributes 0.")

    # --- Contribution margin ---
    for p in model.products:
        if to_amount(p.selling_price_per_unit) > 0 and unit_contribution_margin(p, model) <= 0:
            result.warn(
                PRODUCTS,
                f"Product '{p.name or p.id}' has a non-positive unit margin; it is excluded from breakeven."
            )

    return result

"""
Cost aggregator tests: per-category totals, reference resolution, amortization.
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from core.config import SPREAD_OVER_12_MONTHS, SPREAD_OVER_PROJECTION, ProjectionSettings
from core.schema import (
    ALL_PRODUCTS,
    ALL_PRODUCTS_COMBINED,
    TOTAL_REVENUE,
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
from core.utils import to_amount
from engine.costs import (
    amortized_setup_cost,
    cogs_per_unit,
    total_cogs,
    total_fixed_costs,
    total_marketing_costs,
    total_marketing_percent_revenue,
    total_marketing_per_unit,
    total_revenue,
    total_semi_variable_costs,
    total_setup_costs,
    total_variable_costs,
)

pytestmark = pytest.mark.unit

PRODUCTS = (
    Product(id="a", name="A", selling_price_per_unit=100, units_sold_per_month=10,
            cogs_per_unit=COGSBreakdown(raw_material_cost=20, labor_cost_per_unit=5,
                                        packaging_cost_per_unit=3, other_direct_cost_per_unit=2)),
    Product(id="b", name="B", selling_price_per_unit=50, units_sold_per_month=20),
)


class TestProductLevel:

    def test_cogs_sums_four_components(self):
        assert cogs_per_unit(PRODUCTS[0]) == 30

    def test_missing_cogs_is_zero(self):
        assert cogs_per_unit(PRODUCTS[1]) == 0

    def test_revenue_and_cogs_totals(self):
        assert total_revenue(PRODUCTS) == 100 * 10 + 50 * 20
        assert total_cogs(PRODUCTS) == 30 * 10

    def test_bad_numbers_become_zero(self):
        junk = Product(id="x", name="X", selling_price_per_unit="abc", units_sold_per_month=None)
        assert total_revenue([junk]) == 0

    def test_negative_inputs_clamped(self):
        neg = Product(id="x", name="X", selling_price_per_unit=-100, units_sold_per_month=5)
        assert total_revenue([neg]) == 0

    def test_numeric_strings_parsed(self):
        p = Product(id="x", name="X", selling_price_per_unit="1,200", units_sold_per_month="2")
        assert total_revenue([p]) == 2400

    def test_decimal_and_fraction_amounts(self):
        p = Product(id="x", name="X", selling_price_per_unit=Decimal("12.50"), units_sold_per_month=Fraction(8, 1))
        assert total_revenue([p]) == 100
        assert total_fixed_costs((FixedCost("f", "Rent", Decimal("2000")),)) == 2000

    def test_complex_and_special_decimals_become_zero(self):
        assert to_amount(complex(3, 1)) == 0
        assert to_amount(Decimal("NaN")) == 0
        assert to_amount(Decimal("Infinity")) == 0


class TestCostCategories:

    def test_fixed(self):
        lines = [FixedCost("r", "Rent", 1000), FixedCost("s", "Staff", "2500")]
        assert total_fixed_costs(lines) == 3500

    def test_semi_variable_combined_units(self):
        line = SemiVariableCost("e", "Power", base_amount_per_month=500, variable_rate_per_unit=2,
                                unit_reference=ALL_PRODUCTS_COMBINED)
        assert total_semi_variable_costs([line], PRODUCTS) == 500 + 2 * 30

    def test_semi_variable_single_product(self):
        line = SemiVariableCost("e", "Power", base_amount_per_month=500, variable_rate_per_unit=2,
                                unit_reference="b")
        assert total_semi_variable_costs([line], PRODUCTS) == 500 + 2 * 20

    def test_variable_all_products_and_specific(self):
        lines = [
            VariableCost("v1", "Shipping", rate_per_unit=3, product_reference=ALL_PRODUCTS),
            VariableCost("v2", "Gift box", rate_per_unit=4, product_reference="a"),
        ]
        assert total_variable_costs(lines, PRODUCTS) == 3 * 30 + 4 * 10

    def test_dangling_reference_contributes_zero(self):
        lines = [VariableCost("v", "Ghost", rate_per_unit=99, product_reference="deleted")]
        assert total_variable_costs(lines, PRODUCTS) == 0

    def test_semi_variable_dangling_keeps_base(self):
        line = SemiVariableCost("e", "Power", base_amount_per_month=500, variable_rate_per_unit=2,
                                unit_reference="deleted")
        assert total_semi_variable_costs([line], PRODUCTS) == 500

    def test_marketing_per_unit(self):
        lines = [MarketingPerUnit("m", "Referral", rate_per_unit=1.5, product_reference="b")]
        assert total_marketing_per_unit(lines, PRODUCTS) == 30

    def test_marketing_percent_of_total_revenue(self):
        lines = [MarketingPercentRevenue("m", "Affiliate", percentage_of_revenue=10,
                                         revenue_reference=TOTAL_REVENUE)]
        assert total_marketing_percent_revenue(lines, PRODUCTS) == pytest.approx(200)

    def test_marketing_percent_of_one_product(self):
        lines = [MarketingPercentRevenue("m", "Affiliate", percentage_of_revenue=10, revenue_reference="a")]
        assert total_marketing_percent_revenue(lines, PRODUCTS) == pytest.approx(100)

    def test_marketing_total_combines_all_three(self):
        mkt = MarketingCosts(
            fixed_marketing=(MarketingFixed("f", "Ads", 300),),
            variable_marketing_per_unit=(MarketingPerUnit("u", "Referral", 1, ALL_PRODUCTS),),
            variable_marketing_percent_revenue=(MarketingPercentRevenue("p", "Affiliate", 5),),
        )
        assert total_marketing_costs(mkt, PRODUCTS) == pytest.approx(300 + 30 + 100)


class TestSetupAmortization:

    SETUP = (SetupCost("s1", "Fit-out", 9000), SetupCost("s2", "Equipment", 3000))

    def test_total_setup(self):
        assert total_setup_costs(self.SETUP) == 12000

    def test_spread_over_projection(self):
        settings = ProjectionSettings(months=6, amortization=SPREAD_OVER_PROJECTION)
        assert amortized_setup_cost(self.SETUP, settings) == 2000

    def test_spread_over_12_months_ignores_horizon(self):
        for months in (1, 6, 24, 36):
            settings = ProjectionSettings(months=months, amortization=SPREAD_OVER_12_MONTHS)
            assert amortized_setup_cost(self.SETUP, settings) == 1000

    def test_no_setup_costs(self):
        assert amortized_setup_cost((), ProjectionSettings(months=12)) == 0

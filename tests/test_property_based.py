"""
Property-Based Tests using Hypothesis
Generate messy business models and check the engine's invariants hold.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from analysis.results import calculate
from core.config import AMORTIZATION_MODES, GrowthRates, ProjectionSettings
from core.schema import (
    BusinessModel,
    COGSBreakdown,
    FixedCost,
    MarketingCosts,
    MarketingPercentRevenue,
    Product,
    SemiVariableCost,
    SetupCost,
    VariableCost,
)
from engine.runner import run_projection
from growth.base import GrowthRule
from growth.evaluator import apply_growth

# Raw inputs as a form would deliver them
messy_number = st.one_of(
    st.floats(min_value=-1e6, max_value=1e6),
    st.sampled_from([float("nan"), float("inf"), float("-inf")]),
    st.integers(min_value=-10**6, max_value=10**6),
    st.sampled_from(["", "abc", "1,000", " 12 ", "-3", "NaN"]),
    st.none(),
)
amount = st.floats(min_value=0, max_value=1e5, allow_nan=False, allow_infinity=False)
huge_amount = st.floats(min_value=0, max_value=1e300, allow_nan=False, allow_infinity=False)
product_ids = st.sampled_from(["p1", "p2", "p3", "ghost", "all_products"])


@st.composite
def products(draw, numbers=messy_number):
    n = draw(st.integers(min_value=0, max_value=3))
    return tuple(
        Product(
            id=f"p{i + 1}",
            name=f"Product {i + 1}",
            selling_price_per_unit=draw(numbers),
            units_sold_per_month=draw(numbers),
            cogs_per_unit=draw(st.one_of(st.none(), st.builds(COGSBreakdown, raw_material_cost=numbers))),
        )
        for i in range(n)
    )


@st.composite
def business_models(draw, numbers=messy_number):
    return BusinessModel(
        products=draw(products(numbers)),
        setup_costs=(SetupCost("s", "Setup", draw(numbers)),),
        fixed_costs=(FixedCost("f", "Fixed", draw(numbers)),),
        semi_variable_costs=(SemiVariableCost("sv", "Semi", draw(numbers), draw(numbers), draw(product_ids)),),
        variable_costs=(VariableCost("v", "Var", draw(numbers), draw(product_ids)),),
        marketing_costs=MarketingCosts(
            variable_marketing_percent_revenue=(MarketingPercentRevenue("m", "Pct", draw(numbers)),),
        ),
    )


horizons = st.integers(min_value=1, max_value=36)
modes = st.sampled_from(AMORTIZATION_MODES)


@pytest.mark.property
class TestEngineProperties:

    @given(model=business_models(), months=horizons, mode=modes)
    @settings(max_examples=75, deadline=None)
    def test_horizon_length(self, model, months, mode):
        statements = run_projection(model, ProjectionSettings(months=months, amortization=mode))
        assert len(statements) == months
        assert [s.month for s in statements] == list(range(1, months + 1))

    @given(model=business_models(), months=horizons, mode=modes)
    @settings(max_examples=75, deadline=None)
    def test_never_nan_or_infinite(self, model, months, mode):
        results = calculate(model, ProjectionSettings(months=months, amortization=mode))
        for s in results.monthly_pnl:
            for value in s.to_dict().values():
                assert math.isfinite(value)
        be = results.breakeven
        assert math.isfinite(be.breakeven_revenue)
        assert be.breakeven_units_total >= 0
        assert all(u >= 0 for u in be.breakeven_units_per_product.values())

    @given(model=business_models(huge_amount), months=horizons, mode=modes)
    @settings(max_examples=50, deadline=None)
    def test_huge_inputs_stay_finite(self, model, months, mode):
        results = calculate(model, ProjectionSettings(months=months, amortization=mode))
        for s in results.monthly_pnl:
            assert all(math.isfinite(v) for v in s.to_dict().values())
        assert math.isfinite(results.breakeven.breakeven_revenue)

    @given(model=business_models(), months=horizons)
    @settings(max_examples=50, deadline=None)
    def test_deterministic(self, model, months):
        s = ProjectionSettings(months=months)
        assert calculate(model, s) == calculate(model, s)

    @given(model=business_models(amount), months=horizons)
    @settings(max_examples=50, deadline=None)
    def test_accounting_identities(self, model, months):
        for s in run_projection(model, ProjectionSettings(months=months)):
            assert s.gross_profit == pytest.approx(s.revenue - s.cogs)
            assert s.net_pnl == pytest.approx(s.gross_profit - s.total_costs)
            assert s.total_costs >= 0


@pytest.mark.property
class TestGrowthProperties:

    @given(base=amount, month=st.integers(min_value=1, max_value=36),
           frequency=st.sampled_from(["monthly", "quarterly"]))
    def test_zero_growth_is_identity(self, base, month, frequency):
        assert apply_growth(base, month, GrowthRule.proportional(0, frequency)) == base

    @given(base=amount, pct=st.floats(min_value=0, max_value=50), month=st.integers(min_value=1, max_value=35))
    def test_positive_growth_never_shrinks(self, base, pct, month):
        rule = GrowthRule.proportional(pct)
        assert apply_growth(base, month + 1, rule) >= apply_growth(base, month, rule)


@pytest.mark.metamorphic
class TestMetamorphic:

    @given(model=business_models(amount), months=horizons)
    @settings(max_examples=40, deadline=None)
    def test_extra_fixed_cost_lowers_every_month_by_its_amount(self, model, months):
        s = ProjectionSettings(months=months)
        base = run_projection(model, s)
        bumped = run_projection(
            BusinessModel(
                products=model.products,
                setup_costs=model.setup_costs,
                fixed_costs=model.fixed_costs + (FixedCost("extra", "Extra", 500),),
                semi_variable_costs=model.semi_variable_costs,
                variable_costs=model.variable_costs,
                marketing_costs=model.marketing_costs,
            ),
            s,
        )
        for a, b in zip(base, bumped):
            assert b.net_pnl == pytest.approx(a.net_pnl - 500, rel=1e-9, abs=1e-3)

    @given(model=business_models(amount), months=horizons)
    @settings(max_examples=40, deadline=None)
    def test_unit_growth_never_reduces_revenue(self, model, months):
        flat = run_projection(model, ProjectionSettings(months=months))
        rates = GrowthRates(units_sold={p.id: GrowthRule.proportional(10) for p in model.products})
        grown = run_projection(model, ProjectionSettings(months=months, growth_rates=rates))
        for a, b in zip(flat, grown):
            assert b.revenue >= a.revenue - 1e-9

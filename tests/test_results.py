"""
Orchestrator tests: headline fields, end-to-end scenario, golden sample proposal.
"""

from decimal import Decimal

import pytest

from analysis.results import ProjectionResults, calculate
from core.config import GrowthRates, ProjectionSettings
from core.schema import BusinessModel, FixedCost, Product, VariableCost
from data_prep.loader import load_environment_json
from growth.base import GrowthRule


@pytest.mark.unit
class TestCalculate:

    def test_end_to_end_three_months(self, single_product_model, three_month_settings):
        results = calculate(single_product_model, three_month_settings)
        assert isinstance(results, ProjectionResults)
        assert len(results.monthly_pnl) == 3
        for m in results.monthly_pnl:
            assert (m.revenue, m.cogs, m.gross_profit, m.total_costs, m.net_pnl) == (5000, 2000, 3000, 1000, 2000)
            assert m.margin_percent == pytest.approx(40.0)

    def test_headline_fields_are_month_one(self, single_product_model):
        settings = ProjectionSettings(
            months=6, growth_rates=GrowthRates(units_sold={"p1": GrowthRule.proportional(20)})
        )
        results = calculate(single_product_model, settings)
        first = results.monthly_pnl[0]
        assert results.total_revenue == first.revenue == 5000
        assert results.net_pnl == first.net_pnl
        assert results.total_operating_costs == first.total_costs
        assert results.net_margin_percent == first.margin_percent
        assert results.monthly_pnl[-1].revenue > first.revenue

    def test_zero_products(self):
        results = calculate(BusinessModel(), ProjectionSettings(months=5))
        assert len(results.monthly_pnl) == 5
        assert all(m.revenue == 0 and m.cogs == 0 and m.margin_percent == 0 for m in results.monthly_pnl)
        assert results.breakeven.breakeven_units_total == 0
        assert results.breakeven.breakeven_units_per_product == {}
        assert results.breakeven.breakeven_revenue == 0
        assert results.breakeven.months_to_breakeven is None

    def test_results_are_read_only(self, breakeven_model):
        results = calculate(breakeven_model, ProjectionSettings(months=3))
        assert isinstance(results.monthly_pnl, tuple)
        with pytest.raises(AttributeError):
            results.monthly_pnl.append(results.monthly_pnl[0])
        per_product = results.breakeven.breakeven_units_per_product
        with pytest.raises(TypeError):
            per_product["p1"] = 0
        assert dict(per_product) == {"p1": 20}

    def test_decimal_priced_model(self):
        model = BusinessModel(
            products=(Product("p", "P", selling_price_per_unit=Decimal("100"), units_sold_per_month=Decimal("50")),),
            fixed_costs=(FixedCost("f", "Rent", Decimal("2000")),),
        )
        results = calculate(model, ProjectionSettings(months=1))
        assert results.total_revenue == 5000
        assert results.monthly_pnl[0].fixed_costs == 2000
        assert results.breakeven.breakeven_units_total == 20

    def test_deterministic(self, single_product_model, three_month_settings):
        assert calculate(single_product_model, three_month_settings) == calculate(
            single_product_model, three_month_settings
        )

    def test_dangling_reference(self, single_product_model, three_month_settings):
        model = BusinessModel(
            products=single_product_model.products,
            fixed_costs=single_product_model.fixed_costs,
            variable_costs=(VariableCost("v", "Ghost", 75, product_reference="removed"),),
        )
        assert calculate(model, three_month_settings) == calculate(single_product_model, three_month_settings)

    def test_garbage_numbers_do_not_raise(self):
        model = BusinessModel(
            products=(Product("p", "P", selling_price_per_unit="NaN", units_sold_per_month=float("inf")),),
        )
        results = calculate(model, ProjectionSettings(months=2))
        assert results.total_revenue == 0
        assert results.breakeven.breakeven_units_total == 0


@pytest.mark.golden
class TestShoeSample:
    """
    Hand-checked month 1 of data/samples/shoe_business.json.

    Revenue   3500*200 + 2800*150                         = 1,120,000
    COGS      1650*200 + 1270*150                         =   520,500
    Fixed     80,000 + 150,000                            =   230,000
    Semi      10,000 + 5*350                              =    11,750
    Variable  150*350                                     =    52,500
    Marketing 30,000 + 50*200 + 3% * 1,120,000            =    73,600
    Setup     800,000 / 12                                =    66,666.67
    """

    @pytest.fixture
    def results(self, shoe_sample_path):
        model, settings, _ = load_environment_json(shoe_sample_path)
        return calculate(model, settings)

    def test_month_one(self, results):
        m1 = results.monthly_pnl[0]
        assert m1.revenue == pytest.approx(1_120_000)
        assert m1.cogs == pytest.approx(520_500)
        assert m1.gross_profit == pytest.approx(599_500)
        assert m1.fixed_costs == pytest.approx(230_000)
        assert m1.semi_variable_costs == pytest.approx(11_750)
        assert m1.variable_costs == pytest.approx(52_500)
        assert m1.marketing_costs == pytest.approx(73_600)
        assert m1.setup_cost_amortized == pytest.approx(800_000 / 12)
        assert m1.net_pnl == pytest.approx(599_500 - 434_516.6667, abs=0.01)

    def test_breakeven(self, results):
        # margins 1545 (running) and 1296 (sneaker); weighted 503,400 / 350
        # pool 240,000 + 66,666.67 -> ceil(213.2) = 214 units at blended 3,200
        be = results.breakeven
        assert be.breakeven_units_total == 214
        assert be.breakeven_revenue == pytest.approx(214 * 3200)
        assert be.breakeven_units_per_product == {"running_shoe": 123, "casual_sneaker": 92}

    def test_payback_within_horizon(self, results):
        be = results.breakeven
        assert len(results.monthly_pnl) == 12
        assert be.months_to_breakeven is not None
        cumulative = 0.0
        for m in results.monthly_pnl[: be.months_to_breakeven - 1]:
            cumulative += m.net_pnl
        assert cumulative < 800_000

    def test_growth_applied_over_horizon(self, results):
        revenues = [m.revenue for m in results.monthly_pnl]
        assert revenues == sorted(revenues)
        assert revenues[-1] > revenues[0]

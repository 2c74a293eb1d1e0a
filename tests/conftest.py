"""
Pytest configuration and fixtures for the P&L projection test suite

Markers:
    - unit: Fast unit tests
    - property: Property-based tests (Hypothesis)
    - metamorphic: Metamorphic relation tests
    - golden: Hand-checked dataset regression tests
    - integration: Tests that drive the Streamlit dashboard
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ProjectionSettings
from core.schema import COGSBreakdown, BusinessModel, FixedCost, Product

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SAMPLES_DIR = PROJECT_ROOT / "data" / "samples"


# ═══════════════════════════════════════════════════════════════════════════════
# PYTEST CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "property: Property-based tests (Hypothesis)")
    config.addinivalue_line("markers", "metamorphic: Metamorphic relation tests")
    config.addinivalue_line("markers", "golden: Hand-checked dataset regression tests")
    config.addinivalue_line("markers", "integration: Tests that drive the Streamlit dashboard")


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def single_product_model():
    """One product: price 500, 10 units/month, COGS 200/unit; fixed cost 1000/month."""
    return BusinessModel(
        products=(
            Product(
                id="p1",
                name="Widget",
                selling_price_per_unit=500,
                units_sold_per_month=10,
                cogs_per_unit=COGSBreakdown(raw_material_cost=200),
            ),
        ),
        fixed_costs=(FixedCost(id="rent", name="Rent", amount_per_month=1000),),
    )


@pytest.fixture
def breakeven_model():
    """Price 100, 50 units/month, no COGS, fixed 2000/month."""
    return BusinessModel(
        products=(Product(id="p1", name="Lesson", selling_price_per_unit=100, units_sold_per_month=50),),
        fixed_costs=(FixedCost(id="rent", name="Studio", amount_per_month=2000),),
    )


@pytest.fixture
def three_month_settings():
    return ProjectionSettings(months=3)


@pytest.fixture
def shoe_sample_path():
    return SAMPLES_DIR / "shoe_business.json"

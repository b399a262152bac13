"""
Shared fixtures for the Trade Navigator test suite.
"""
import os
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from trade_navigator.config.settings import Settings
from trade_navigator.engine.models import (
    OptimizationRequest,
    PriceRange,
    ProductCost,
    ScenarioParameter,
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings with side-channel files under a temp directory."""
    return Settings(
        project_root=tmp_path,
        data_dir=tmp_path,
        history_csv=tmp_path / 'history.csv',
        calculations_csv=tmp_path / 'calculations.csv',
        api_tokens={'test-token': 'user-1', 'other-token': 'user-2'},
    )


@pytest.fixture
def product() -> ProductCost:
    """Loaded unit cost 67: 40 unit + 2 tariff + 5 shipping + 10 variable + 10 fixed share."""
    return ProductCost(
        id='prod-1',
        name='Test Product',
        sku='TP-001',
        category='Electronics',
        current_price=100.0,
        unit_cost=40.0,
        sales_volume_current=1000,
        fixed_costs=10000.0,
        variable_costs=10.0,
        tariff_rate=5.0,
        shipping_cost=5.0,
        minimum_viable_price=60.0,
        competitor_prices=[95.0, 105.0, 110.0],
        price_elasticity=-1.8,
        market_share_current=15.0,
    )


@pytest.fixture
def three_scenarios() -> list[ScenarioParameter]:
    return [
        ScenarioParameter(name='Base Case'),
        ScenarioParameter(name='Tariff Hike', tariff_increase=10.0),
        ScenarioParameter(name='Material +5%', material_cost_change=5.0),
    ]


@pytest.fixture
def stepped_request(product, three_scenarios) -> OptimizationRequest:
    """Three scenarios swept from 80 to 120 in steps of 5, targeting 30%."""
    return OptimizationRequest(
        product=product,
        scenarios=three_scenarios,
        target_margin=30.0,
        price_range=PriceRange(min=80.0, max=120.0, step=5.0),
    )


@pytest.fixture
def product_payload() -> dict:
    """JSON body form of the product fixture."""
    return {
        'id': 'prod-1',
        'name': 'Test Product',
        'sku': 'TP-001',
        'category': 'Electronics',
        'current_price': 100,
        'unit_cost': 40,
        'fixed_costs': 10000,
        'variable_costs': 10,
        'tariff_rate': 5,
        'shipping_cost': 5,
        'minimum_viable_price': 60,
        'competitor_prices': [95, 105, 110],
        'price_elasticity': -1.8,
        'sales_volume_current': 1000,
        'market_share_current': 15,
    }

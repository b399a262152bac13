"""
Tests for the tabular result views.
"""
import pytest

from trade_navigator.engine.pricing_optimizer import PricingOptimizer
from trade_navigator.engine.reporting import (
    export_csv,
    price_points_frame,
    scenario_summary_frame,
    sensitivity_frame,
    strategy_points_frame,
)


@pytest.fixture
def result(settings, stepped_request):
    return PricingOptimizer(settings).optimize(stepped_request)


def test_scenario_summary_has_one_row_per_scenario(result):
    frame = scenario_summary_frame(result)

    assert list(frame['Scenario']) == ['Base Case', 'Tariff Hike', 'Material +5%']
    assert list(frame['Optimal Price']) == [100, 105, 100]
    assert frame['Target Met'].all()


def test_price_points_frame_marks_recommended_row(result):
    frame = price_points_frame(result.scenarios[0])

    assert len(frame) == 9
    assert frame.loc[frame['Recommended'], 'Price'].tolist() == [100]


def test_strategy_points_frame(result):
    frame = strategy_points_frame(result.scenarios[0])
    assert len(frame) == 10
    assert 'Cost Plus' in frame['Strategy'].tolist()


def test_sensitivity_frame_joins_on_price(result):
    frame = sensitivity_frame(result)

    assert list(frame.columns) == ['price', 'margin', 'volume', 'profit']
    assert len(frame) == 9


def test_export_csv_header(result):
    text = export_csv(result)
    assert text.splitlines()[0].startswith('Scenario,Total Unit Cost,Break-Even Price,Optimal Price')
    assert len(text.strip().splitlines()) == 4

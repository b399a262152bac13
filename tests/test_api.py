"""
HTTP-level tests for the Trade Navigator API.

Services are swapped for temp-directory instances through
app.dependency_overrides.
"""
import pytest
from fastapi.testclient import TestClient

from trade_navigator.api import dependencies
from trade_navigator.api.main import app
from trade_navigator.engine.landed_cost import LandedCostCalculator
from trade_navigator.engine.pricing_optimizer import PricingOptimizer
from trade_navigator.services.calculation_store import CalculationStore
from trade_navigator.services.history_log import HistoryLog
from trade_navigator.services.optimization_service import OptimizationService
from trade_navigator.services.result_store import InMemoryResultStore
from trade_navigator.services.sessions import StaticTokenSessionProvider

AUTH = {'Authorization': 'Bearer test-token'}
OTHER_AUTH = {'Authorization': 'Bearer other-token'}


class ExplodingService:
    def optimize(self, request, user_id=None):
        raise RuntimeError("database unavailable")


@pytest.fixture
def client(settings):
    history = HistoryLog(settings.history_csv)
    service = OptimizationService(
        optimizer=PricingOptimizer(settings),
        store=InMemoryResultStore(),
        history=history,
    )
    calculations = CalculationStore(settings.calculations_csv)

    app.dependency_overrides[dependencies.get_app_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_landed_cost_calculator] = LandedCostCalculator
    app.dependency_overrides[dependencies.get_history_log] = lambda: history
    app.dependency_overrides[dependencies.get_calculation_store] = lambda: calculations
    app.dependency_overrides[dependencies.get_optimization_service] = lambda: service
    app.dependency_overrides[dependencies.get_session_provider] = (
        lambda: StaticTokenSessionProvider(settings.api_tokens)
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def optimization_body(product_payload):
    return {
        'product': product_payload,
        'target_margin': 30,
        'scenarios': [
            {'name': 'Base Case'},
            {'name': 'Tariff Hike', 'tariff_increase': 10},
            {'name': 'Material +5%', 'material_cost_change': 5},
        ],
        'price_range': {'min': 80, 'max': 120, 'step': 5},
    }


def test_root_reports_status(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.json()['status'] == 'online'
    assert response.json()['default_target_margin'] == 20.0


# ---------------------------------------------------------------------------
# Cost calculator
# ---------------------------------------------------------------------------

def test_cost_calculator_success(client):
    response = client.post('/api/cost-calculator', json={
        'materials': 5000, 'labor': 2000, 'overhead': 1000, 'tariffRate': 5,
        'shippingCost': 500, 'insuranceCost': 100, 'customsFees': 50,
        'handlingFees': 75, 'warehouseCosts': 120, 'quantity': 100,
    })

    assert response.status_code == 200
    body = response.json()
    assert body['totalCost'] == pytest.approx(9095)
    assert body['perUnitCost'] == pytest.approx(90.95)
    assert body['formattedTotalCost'] == '$9,095.00'
    assert body['breakdown']['tariffAmount'] == pytest.approx(250)
    assert body['currency'] == 'USD'


def test_cost_calculator_needs_no_session(client):
    response = client.post('/api/cost-calculator', json={'materials': 300, 'labor': 100, 'overhead': 50})
    assert response.status_code == 200
    assert response.json()['totalCost'] == 450


def test_cost_calculator_validation_error(client):
    response = client.post('/api/cost-calculator', json={'materials': '300', 'labor': 100, 'overhead': 50})
    assert response.status_code == 400
    assert response.json() == {'error': 'Materials cost must be a valid non-negative number'}


@pytest.mark.parametrize("payload,message", [
    ({'materials': 300, 'labor': 100, 'overhead': -50}, 'Overhead cost must be a valid non-negative number'),
    ({'materials': 300, 'overhead': 50}, 'Labor cost must be a valid non-negative number'),
], ids=['negative-overhead', 'missing-labor'])
def test_cost_calculator_reports_first_invalid_field(client, payload, message):
    response = client.post('/api/cost-calculator', json=payload)
    assert response.status_code == 400
    assert response.json() == {'error': message}


def test_cost_calculator_rejects_oversized_integer(client):
    body = '{"materials": ' + '9' * 401 + ', "labor": 1, "overhead": 1}'
    response = client.post(
        '/api/cost-calculator',
        content=body,
        headers={'Content-Type': 'application/json'},
    )
    assert response.status_code == 400
    assert response.json() == {'error': 'Materials cost must be a valid non-negative number'}


def test_cost_calculator_malformed_body(client):
    response = client.post(
        '/api/cost-calculator',
        content='{not json',
        headers={'Content-Type': 'application/json'},
    )
    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid request format'}


def test_saved_calculations_are_scoped_to_user(client):
    response = client.post('/api/cost-calculator', headers=AUTH, json={
        'materials': 100, 'labor': 50, 'overhead': 25, 'saveCalculation': True, 'name': 'Run A',
    })
    calculation_id = response.json()['calculationId']

    listed = client.get('/api/cost-calculator/calculations', headers=AUTH).json()
    assert [c['calculation_id'] for c in listed] == [calculation_id]
    assert listed[0]['name'] == 'Run A'

    assert client.get('/api/cost-calculator/calculations', headers=OTHER_AUTH).json() == []
    assert client.get(f'/api/cost-calculator/calculations/{calculation_id}', headers=OTHER_AUTH).status_code == 404

    fetched = client.get(f'/api/cost-calculator/calculations/{calculation_id}', headers=AUTH)
    assert fetched.json()['total_cost'] == 175

    assert client.delete(f'/api/cost-calculator/calculations/{calculation_id}', headers=AUTH).status_code == 200
    assert client.get('/api/cost-calculator/calculations', headers=AUTH).json() == []


def test_saved_calculations_require_session(client):
    response = client.get('/api/cost-calculator/calculations')
    assert response.status_code == 401
    assert response.json() == {'error': 'Authentication required'}


# ---------------------------------------------------------------------------
# Pricing optimizer
# ---------------------------------------------------------------------------

def test_optimizer_requires_session(client, optimization_body):
    response = client.post('/api/pricing-optimizer', json=optimization_body)
    assert response.status_code == 401
    assert response.json() == {'error': 'Authentication required'}


def test_optimizer_rejects_unknown_token(client, optimization_body):
    response = client.post(
        '/api/pricing-optimizer',
        json=optimization_body,
        headers={'Authorization': 'Bearer wrong'},
    )
    assert response.status_code == 401


def test_optimizer_checks_session_before_body(client):
    response = client.post(
        '/api/pricing-optimizer',
        content='{not json',
        headers={'Content-Type': 'application/json'},
    )
    assert response.status_code == 401


def test_optimizer_success(client, optimization_body):
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body['id'].startswith('opt-')
    assert body['target_margin'] == 30
    assert [s['scenario_name'] for s in body['scenarios']] == ['Base Case', 'Tariff Hike', 'Material +5%']
    assert body['scenarios'][0]['optimal_price'] == 100
    assert body['scenarios'][0]['break_even_price'] == pytest.approx(67)
    assert body['recommendations']['recommended_scenario'] == 'Base Case'
    assert body['recommendations']['optimal_strategy'] == 'Balanced Pricing'
    assert len(body['sensitivity_analysis']['margin_impact_by_price']) == 9


def test_optimizer_defaults_target_margin(client, optimization_body):
    del optimization_body['target_margin']
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)
    assert response.status_code == 200
    assert response.json()['target_margin'] == 20


def test_optimizer_rejects_empty_scenarios(client, optimization_body):
    optimization_body['scenarios'] = []
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)

    assert response.status_code == 400
    body = response.json()
    assert body['error'] == 'Invalid request parameters'
    assert body['details'][0]['loc'] == 'scenarios'


def test_optimizer_rejects_string_numbers(client, optimization_body):
    optimization_body['product']['current_price'] = '100'
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)

    assert response.status_code == 400
    assert response.json()['details'][0]['loc'] == 'product.current_price'


def test_optimizer_rejects_inverted_price_range(client, optimization_body):
    optimization_body['price_range'] = {'min': 120, 'max': 80, 'step': 5}
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)

    assert response.status_code == 400
    body = response.json()
    assert body['error'] == 'Invalid request parameters'
    assert body['details'][0]['msg'] == 'Price range minimum must not exceed the maximum'


def test_optimizer_unreadable_body_is_internal_error(client):
    response = client.post(
        '/api/pricing-optimizer',
        content='{not json',
        headers={**AUTH, 'Content-Type': 'application/json'},
    )
    assert response.status_code == 500
    assert response.json() == {'error': 'An error occurred during price optimization'}


def test_optimizer_unexpected_failure_is_internal_error(client, optimization_body):
    app.dependency_overrides[dependencies.get_optimization_service] = ExplodingService
    response = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {'error': 'An error occurred during price optimization'}


def test_optimizer_history(client, optimization_body):
    result_id = client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH).json()['id']

    history = client.get('/api/pricing-optimizer/history', headers=AUTH).json()
    assert len(history) == 1
    assert history[0]['result_id'] == result_id
    assert history[0]['product_id'] == 'prod-1'
    assert history[0]['scenario_count'] == 3
    assert history[0]['optimization_type'] == 'pricing'

    assert client.get('/api/pricing-optimizer/history', headers=OTHER_AUTH).json() == []


@pytest.mark.parametrize('limit', ['0', '-1', '501', 'many'])
def test_optimizer_history_rejects_out_of_range_limit(client, limit):
    response = client.get(f'/api/pricing-optimizer/history?limit={limit}', headers=AUTH)
    assert response.status_code == 422


def test_optimizer_history_honours_limit(client, optimization_body):
    client.post('/api/pricing-optimizer', json=optimization_body, headers=AUTH)
    client.post('/api/pricing-optimizer', json={**optimization_body, 'target_margin': 25}, headers=AUTH)

    assert len(client.get('/api/pricing-optimizer/history', headers=AUTH).json()) == 2
    assert len(client.get('/api/pricing-optimizer/history?limit=1', headers=AUTH).json()) == 1


def test_strategy_catalog(client):
    response = client.get('/api/pricing-optimizer/strategies')
    assert response.status_code == 200
    names = [s['name'] for s in response.json()]
    assert len(names) == 10
    assert names[0] == 'Cost Plus'

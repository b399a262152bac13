"""
Tests for landed cost validation, breakdown and formatting.
"""
import pytest

from trade_navigator.engine.formatting import format_currency, is_supported_currency
from trade_navigator.engine.landed_cost import LandedCostCalculator, utc_timestamp
from trade_navigator.engine.validation import parse_cost_payload
from trade_navigator.errors import MalformedRequestError, ValidationError


@pytest.fixture
def calculator():
    return LandedCostCalculator()


def test_minimal_request_totals_manufacturing_cost(calculator):
    result = calculator.calculate_payload({'materials': 300, 'labor': 100, 'overhead': 50})

    assert result.total_cost == 450
    assert result.breakdown == {'materials': 300, 'labor': 100, 'overhead': 50}
    assert result.formatted_total_cost == "$450.00"
    assert result.currency == "USD"
    assert result.per_unit_cost is None


def test_tariff_is_charged_on_materials(calculator):
    result = calculator.calculate_payload({
        'materials': 1000, 'labor': 500, 'overhead': 200, 'tariffRate': 10,
    })

    assert result.breakdown['tariffRate'] == 10
    assert result.breakdown['tariffAmount'] == pytest.approx(100)
    assert result.total_cost == pytest.approx(1800)


def test_zero_optional_fees_are_left_out_of_breakdown(calculator):
    result = calculator.calculate_payload({
        'materials': 100, 'labor': 0, 'overhead': 0,
        'tariffRate': 0, 'shippingCost': 25, 'insuranceCost': 0,
    })

    assert 'tariffRate' not in result.breakdown
    assert 'tariffAmount' not in result.breakdown
    assert 'insuranceCost' not in result.breakdown
    assert result.breakdown['shippingCost'] == 25
    assert result.breakdown['labor'] == 0


def test_per_unit_cost_uses_quantity(calculator):
    result = calculator.calculate_payload({
        'materials': 1000, 'labor': 0, 'overhead': 0, 'quantity': 8,
    })

    assert result.per_unit_cost == pytest.approx(125)
    assert result.formatted_per_unit_cost == "$125.00"

    body = result.to_response()
    assert body['perUnitCost'] == pytest.approx(125)
    assert body['formattedPerUnitCost'] == "$125.00"


def test_response_uses_camel_case_keys(calculator):
    body = calculator.calculate_payload({'materials': 1, 'labor': 2, 'overhead': 3}).to_response()

    assert set(body) == {'totalCost', 'breakdown', 'formattedTotalCost', 'timestamp', 'currency'}
    assert body['timestamp'].endswith('Z')


@pytest.mark.parametrize("payload,message", [
    ({'labor': 1, 'overhead': 1}, "Materials cost must be a valid non-negative number"),
    ({'materials': -1, 'labor': 1, 'overhead': 1}, "Materials cost must be a valid non-negative number"),
    ({'materials': "100", 'labor': 1, 'overhead': 1}, "Materials cost must be a valid non-negative number"),
    ({'materials': 1, 'labor': float('nan'), 'overhead': 1}, "Labor cost must be a valid non-negative number"),
    ({'materials': 1, 'labor': 1, 'overhead': True}, "Overhead cost must be a valid non-negative number"),
    ({'materials': 1, 'labor': 1, 'overhead': -1}, "Overhead cost must be a valid non-negative number"),
    ({'materials': 1, 'overhead': 1}, "Labor cost must be a valid non-negative number"),
    ({'materials': 10 ** 400, 'labor': 1, 'overhead': 1}, "Materials cost must be a valid non-negative number"),
    ({'materials': 1, 'labor': 1, 'overhead': 1, 'tariffRate': -5}, "Tariff rate must be a valid non-negative number"),
    ({'materials': 1, 'labor': 1, 'overhead': 1, 'warehouseCosts': "x"}, "Warehouse costs must be a valid non-negative number"),
    ({'materials': 1, 'labor': 1, 'overhead': 1, 'quantity': 0}, "Quantity must be a positive number"),
    ({'materials': 1, 'labor': 1, 'overhead': 1, 'targetCurrency': "DOLLARS"}, "Target currency must be a 3-letter currency code"),
], ids=['missing', 'negative', 'string', 'nan', 'bool', 'negative-overhead', 'missing-labor', 'oversized', 'tariff', 'warehouse', 'quantity', 'currency'])
def test_invalid_fields_are_rejected(payload, message):
    with pytest.raises(ValidationError) as excinfo:
        parse_cost_payload(payload)
    assert excinfo.value.message == message


def test_first_invalid_field_wins():
    with pytest.raises(ValidationError) as excinfo:
        parse_cost_payload({'materials': -1, 'labor': -1, 'overhead': -1})
    assert excinfo.value.message.startswith("Materials cost")


def test_non_object_body_is_malformed():
    with pytest.raises(MalformedRequestError) as excinfo:
        parse_cost_payload([1, 2, 3])
    assert excinfo.value.message == "Invalid request format"
    assert excinfo.value.status_code == 400


def test_currency_code_is_normalised():
    costs = parse_cost_payload({'materials': 1, 'labor': 1, 'overhead': 1, 'targetCurrency': 'eur'})
    assert costs.target_currency == 'EUR'


def test_save_flag_requires_true():
    assert parse_cost_payload({'materials': 1, 'labor': 1, 'overhead': 1, 'saveCalculation': 'yes'}).save_calculation is False
    assert parse_cost_payload({'materials': 1, 'labor': 1, 'overhead': 1, 'saveCalculation': True}).save_calculation is True


@pytest.mark.parametrize("amount,currency,expected", [
    (1234.56, 'USD', "$1,234.56"),
    (1234.56, 'GBP', "£1,234.56"),
    (1234.56, 'CNY', "CN¥1,234.56"),
    (1234.56, 'JPY', "¥1,235"),
    (-20, 'USD', "-$20.00"),
    (1234.56, 'XYZ', "1,234.56"),
])
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected


def test_unknown_currency_is_formatted_without_symbol(calculator):
    result = calculator.calculate_payload({'materials': 10, 'labor': 0, 'overhead': 0, 'targetCurrency': 'XYZ'})
    assert result.currency == 'XYZ'
    assert result.formatted_total_cost == "10.00"
    assert not is_supported_currency('XYZ')


def test_utc_timestamp_has_millisecond_precision():
    stamp = utc_timestamp()
    assert stamp.endswith('Z')
    assert len(stamp.split('.')[-1]) == 4  # three digits plus Z


def test_total_is_sum_of_required_costs(calculator):
    result = calculator.calculate_payload({'materials': 100, 'labor': 200, 'overhead': 150})
    assert result.total_cost == 450


def test_all_zero_costs_are_valid(calculator):
    result = calculator.calculate_payload({'materials': 0, 'labor': 0, 'overhead': 0})
    assert result.total_cost == 0
    assert result.formatted_total_cost == "$0.00"

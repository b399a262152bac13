"""
Input validation for the calculators.

Validators run in a fixed order and stop at the first failure, so callers
always see the highest-priority error message.
"""
import math
from typing import Any

from ..errors import MalformedRequestError, ValidationError
from .models import (
    CostBreakdown,
    OptimizationRequest,
    PriceRange,
    ProductCost,
    ScenarioParameter,
)


# (payload key, CostBreakdown attribute, label) in validation order
REQUIRED_COST_FIELDS = [
    ('materials', 'materials', 'Materials cost'),
    ('labor', 'labor', 'Labor cost'),
    ('overhead', 'overhead', 'Overhead cost'),
]

OPTIONAL_COST_FIELDS = [
    ('tariffRate', 'tariff_rate', 'Tariff rate'),
    ('shippingCost', 'shipping_cost', 'Shipping cost'),
    ('insuranceCost', 'insurance_cost', 'Insurance cost'),
    ('customsFees', 'customs_fees', 'Customs fees'),
    ('handlingFees', 'handling_fees', 'Handling fees'),
    ('warehouseCosts', 'warehouse_costs', 'Warehouse costs'),
]


def is_number(value: Any) -> bool:
    """
    True for real, finite numbers. Strings and booleans are not coerced.

    Integers too large to represent as a float are not numbers here.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_valid_cost(value: Any) -> bool:
    return is_number(value) and value >= 0


def parse_cost_payload(payload: Any) -> CostBreakdown:
    """
    Validate a decoded landed-cost request body.

    Raises:
        MalformedRequestError: body is not a JSON object
        ValidationError: first invalid field, in field priority order
    """
    if not isinstance(payload, dict):
        raise MalformedRequestError()

    values = {}
    for key, attr, label in REQUIRED_COST_FIELDS:
        value = payload.get(key)
        if not is_valid_cost(value):
            raise ValidationError(f"{label} must be a valid non-negative number")
        values[attr] = value

    for key, attr, label in OPTIONAL_COST_FIELDS:
        value = payload.get(key)
        if value is None:
            continue
        if not is_valid_cost(value):
            raise ValidationError(f"{label} must be a valid non-negative number")
        values[attr] = value

    quantity = payload.get('quantity')
    if quantity is not None:
        if not is_number(quantity) or quantity <= 0:
            raise ValidationError("Quantity must be a positive number")
        values['quantity'] = quantity

    currency = payload.get('targetCurrency')
    if currency is not None:
        if not isinstance(currency, str) or len(currency.strip()) != 3:
            raise ValidationError("Target currency must be a 3-letter currency code")
        values['target_currency'] = currency.strip().upper()

    for key, attr in (('name', 'name'), ('description', 'description')):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            values[attr] = value.strip()

    values['save_calculation'] = payload.get('saveCalculation') is True

    return CostBreakdown(**values)


def _require_text(value: Any, label: str):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")


def _require_non_negative(value: Any, label: str):
    if not is_number(value) or value < 0:
        raise ValidationError(f"{label} must be non-negative")


def _require_positive(value: Any, label: str):
    if not is_number(value) or value <= 0:
        raise ValidationError(f"{label} must be positive")


def validate_product(product: ProductCost):
    """Check a product's fields in declaration order."""
    _require_text(product.name, "Product name")
    _require_text(product.sku, "SKU")
    _require_text(product.category, "Category")
    _require_positive(product.current_price, "Current price")
    _require_non_negative(product.unit_cost, "Unit cost")
    _require_non_negative(product.fixed_costs, "Fixed costs")
    _require_non_negative(product.variable_costs, "Variable costs")
    _require_non_negative(product.tariff_rate, "Tariff rate")
    _require_non_negative(product.shipping_cost, "Shipping cost")
    _require_non_negative(product.minimum_viable_price, "Minimum viable price")

    for price in product.competitor_prices or []:
        _require_positive(price, "Competitor price")

    if product.price_elasticity is not None and not is_number(product.price_elasticity):
        raise ValidationError("Price elasticity must be a number")

    _require_positive(product.sales_volume_current, "Current sales volume")
    if product.sales_volume_current != int(product.sales_volume_current):
        raise ValidationError("Current sales volume must be a whole number")

    if product.market_share_current is not None:
        share = product.market_share_current
        if not is_number(share) or share < 0 or share > 100:
            raise ValidationError("Current market share must be between 0 and 100")


def validate_scenario(scenario: ScenarioParameter):
    _require_text(scenario.name, "Scenario name")
    for attr in (
        'tariff_increase', 'material_cost_change', 'shipping_cost_change',
        'competitor_price_change', 'currency_fluctuation', 'demand_change',
        'marketing_spend_change',
    ):
        if not is_number(getattr(scenario, attr)):
            raise ValidationError(f"Scenario '{scenario.name}': {attr} must be a number")


def validate_price_range(price_range: PriceRange):
    if price_range.min is not None and not is_number(price_range.min):
        raise ValidationError("Price range minimum must be a number")
    if price_range.max is not None and not is_number(price_range.max):
        raise ValidationError("Price range maximum must be a number")
    if price_range.step is not None:
        _require_positive(price_range.step, "Price range step")


def validate_optimization_request(request: OptimizationRequest):
    """
    Validate a full optimization request before any computation starts.

    Raises:
        ValidationError: first invalid field
    """
    validate_product(request.product)

    if request.target_margin is not None:
        margin = request.target_margin
        if not is_number(margin) or margin < 0 or margin > 100:
            raise ValidationError("Target margin must be between 0 and 100")

    if not request.scenarios:
        raise ValidationError("At least one scenario is required")
    for scenario in request.scenarios:
        validate_scenario(scenario)

    if request.price_range is not None:
        validate_price_range(request.price_range)

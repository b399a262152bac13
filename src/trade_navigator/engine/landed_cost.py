"""
Landed Cost Calculator - totals manufacturing and landed costs for a run.

Tariff is charged on the materials cost basis. No currency conversion is
performed; the target currency only selects the display format.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from .formatting import format_currency
from .models import CostBreakdown, CostResult
from .validation import parse_cost_payload


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class LandedCostCalculator:
    """Computes total and per-unit landed cost from a cost breakdown."""

    # CostBreakdown attribute → response breakdown key, included only when non-zero
    OPTIONAL_BREAKDOWN_KEYS = [
        ('shipping_cost', 'shippingCost'),
        ('insurance_cost', 'insuranceCost'),
        ('customs_fees', 'customsFees'),
        ('handling_fees', 'handlingFees'),
        ('warehouse_costs', 'warehouseCosts'),
    ]

    def calculate_payload(self, payload: Any) -> CostResult:
        """Validate a decoded request body and calculate it."""
        return self.calculate(parse_cost_payload(payload))

    def calculate(self, costs: CostBreakdown, timestamp: Optional[str] = None) -> CostResult:
        total_cost = costs.total_cost
        currency = costs.target_currency

        result = CostResult(
            total_cost=total_cost,
            breakdown=self.build_breakdown(costs),
            formatted_total_cost=format_currency(total_cost, currency),
            timestamp=timestamp or utc_timestamp(),
            currency=currency,
        )

        if costs.quantity is not None:
            result.per_unit_cost = total_cost / costs.quantity
            result.formatted_per_unit_cost = format_currency(result.per_unit_cost, currency)

        return result

    def build_breakdown(self, costs: CostBreakdown) -> dict[str, float]:
        breakdown = {
            'materials': costs.materials,
            'labor': costs.labor,
            'overhead': costs.overhead,
        }

        if costs.tariff_rate:
            breakdown['tariffRate'] = costs.tariff_rate
            breakdown['tariffAmount'] = costs.tariff_amount

        for attr, key in self.OPTIONAL_BREAKDOWN_KEYS:
            value = getattr(costs, attr)
            if value:
                breakdown[key] = value

        return breakdown

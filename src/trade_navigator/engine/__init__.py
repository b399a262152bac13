"""Engine subpackage - landed cost and pricing optimization logic."""
from .landed_cost import LandedCostCalculator
from .pricing_optimizer import PricingOptimizer
from .models import (
    CostBreakdown,
    CostResult,
    OptimizationRequest,
    OptimizationResult,
    PriceRange,
    ProductCost,
    ScenarioParameter,
)

__all__ = [
    'LandedCostCalculator',
    'PricingOptimizer',
    'CostBreakdown',
    'CostResult',
    'OptimizationRequest',
    'OptimizationResult',
    'PriceRange',
    'ProductCost',
    'ScenarioParameter',
]

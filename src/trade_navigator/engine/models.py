"""
Data models for the calculation engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field, asdict
from typing import Optional


# ---------------------------------------------------------------------------
# Landed cost
# ---------------------------------------------------------------------------

@dataclass
class CostBreakdown:
    """Validated landed-cost input."""
    materials: float
    labor: float
    overhead: float
    tariff_rate: float = 0.0  # percent of materials
    shipping_cost: float = 0.0
    insurance_cost: float = 0.0
    customs_fees: float = 0.0
    handling_fees: float = 0.0
    warehouse_costs: float = 0.0
    quantity: Optional[float] = None  # None when the caller did not send one
    target_currency: str = "USD"

    # Saved calculation metadata
    name: Optional[str] = None
    description: Optional[str] = None
    save_calculation: bool = False

    @property
    def tariff_amount(self) -> float:
        return self.materials * self.tariff_rate / 100

    @property
    def manufacturing_cost(self) -> float:
        return self.materials + self.labor + self.overhead

    @property
    def landed_costs(self) -> float:
        return (
            self.tariff_amount
            + self.shipping_cost
            + self.insurance_cost
            + self.customs_fees
            + self.handling_fees
            + self.warehouse_costs
        )

    @property
    def total_cost(self) -> float:
        return self.manufacturing_cost + self.landed_costs


@dataclass
class CostResult:
    """Result of a landed-cost calculation."""
    total_cost: float
    breakdown: dict[str, float]
    formatted_total_cost: str
    timestamp: str
    currency: str
    per_unit_cost: Optional[float] = None
    formatted_per_unit_cost: Optional[str] = None
    calculation_id: Optional[str] = None

    def to_response(self) -> dict:
        """Convert to the camelCase JSON body returned by the API."""
        body = {
            "totalCost": self.total_cost,
            "breakdown": dict(self.breakdown),
            "formattedTotalCost": self.formatted_total_cost,
            "timestamp": self.timestamp,
            "currency": self.currency,
        }
        if self.per_unit_cost is not None:
            body["perUnitCost"] = self.per_unit_cost
            body["formattedPerUnitCost"] = self.formatted_per_unit_cost
        if self.calculation_id:
            body["calculationId"] = self.calculation_id
        return body


# ---------------------------------------------------------------------------
# Pricing optimizer inputs
# ---------------------------------------------------------------------------

@dataclass
class ProductCost:
    """Cost structure and market context for a single product."""
    name: str
    sku: str
    category: str
    current_price: float
    unit_cost: float
    sales_volume_current: int
    fixed_costs: float = 0.0  # per run, allocated over the baseline volume
    variable_costs: float = 0.0  # per unit
    tariff_rate: float = 0.0  # percent of unit cost
    shipping_cost: float = 0.0  # per unit
    minimum_viable_price: float = 0.0
    competitor_prices: list[float] = field(default_factory=list)
    price_elasticity: Optional[float] = None
    market_share_current: Optional[float] = None
    id: Optional[str] = None


@dataclass
class ScenarioParameter:
    """A named set of percentage perturbations applied to the product."""
    name: str
    tariff_increase: float = 0.0
    material_cost_change: float = 0.0
    shipping_cost_change: float = 0.0
    competitor_price_change: float = 0.0
    currency_fluctuation: float = 0.0
    demand_change: float = 0.0
    marketing_spend_change: float = 0.0


@dataclass
class PriceRange:
    """Bounds of the price sweep; missing bounds use the configured band."""
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None


@dataclass
class OptimizationRequest:
    """A validated pricing optimization request."""
    product: ProductCost
    scenarios: list[ScenarioParameter]
    target_margin: Optional[float] = None
    price_range: Optional[PriceRange] = None
    strategies: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Pricing optimizer outputs
# ---------------------------------------------------------------------------

@dataclass
class BaseCosts:
    """Scenario-adjusted cost structure."""
    unit_cost: float
    tariff_cost: float
    shipping_cost: float
    total_unit_cost: float
    fixed_costs: float
    variable_costs: float


@dataclass
class PricePoint:
    """Projection for one swept price."""
    price: float
    margin_percentage: float
    profit: float
    revenue: float
    volume_projection: float
    price_change_percentage: float
    market_share_projection: Optional[float] = None
    is_recommended: bool = False


@dataclass
class StrategyPoint:
    """Projection for a named pricing strategy within a scenario."""
    strategy: str
    description: str
    price: float
    margin_percentage: float
    profit: float
    revenue: float
    volume_projection: float
    in_range: bool


@dataclass
class CompetitorComparison:
    average_competitor_price: float
    price_difference_percentage: float
    relative_position: str  # "lower", "similar" or "higher"


@dataclass
class RiskAssessment:
    level: str  # "low", "medium" or "high"
    factors: list[str] = field(default_factory=list)


@dataclass
class ScenarioResult:
    """Complete result for one scenario."""
    scenario_name: str
    base_costs: BaseCosts
    price_points: list[PricePoint]
    optimal_price: float
    optimal_margin: float
    break_even_price: float
    risk_assessment: RiskAssessment
    competitor_comparison: Optional[CompetitorComparison] = None
    target_met: bool = False
    optimal_profit: float = 0.0
    optimal_revenue: float = 0.0
    optimal_volume: float = 0.0
    strategy_points: list[StrategyPoint] = field(default_factory=list)

    @property
    def optimal_point(self) -> Optional[PricePoint]:
        for point in self.price_points:
            if point.is_recommended:
                return point
        return None


@dataclass
class Recommendations:
    optimal_strategy: str
    recommended_scenario: str
    price_suggestion: float
    expected_margin: float
    expected_profit: float
    expected_revenue: float
    key_insights: list[str] = field(default_factory=list)


@dataclass
class SensitivityAnalysis:
    """Price → margin/volume/profit series for charting."""
    margin_impact_by_price: list[dict[str, float]] = field(default_factory=list)
    volume_impact_by_price: list[dict[str, float]] = field(default_factory=list)
    profit_impact_by_price: list[dict[str, float]] = field(default_factory=list)


@dataclass
class OptimizationResult:
    """Top-level result of a pricing optimization."""
    id: str
    product: ProductCost
    target_margin: float
    scenarios: list[ScenarioResult]
    recommendations: Recommendations
    sensitivity_analysis: SensitivityAnalysis
    created_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    def get_scenario(self, name: str) -> Optional[ScenarioResult]:
        for scenario in self.scenarios:
            if scenario.scenario_name == name:
                return scenario
        return None

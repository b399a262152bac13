"""
Pricing Optimizer - scenario-based price, margin and risk analysis.

For every scenario the optimizer:
1. Adjusts unit, tariff and shipping costs by the scenario's percentages
2. Sweeps candidate prices across the requested (or default) price range
3. Projects volume, revenue, profit and market share at each price
4. Picks the price closest to the target margin, never below the price floor
5. Compares the pick with competitors and rates its risk

Results across scenarios are then folded into one recommendation and a
sensitivity table for charting. The optimizer is pure: it performs no I/O
and identical input yields identical output apart from the result id and
timestamp.
"""
import logging
import math
import uuid
from dataclasses import replace
from typing import Optional

from ..config.settings import get_settings, Settings
from ..errors import ValidationError
from .landed_cost import utc_timestamp
from .models import (
    BaseCosts,
    CompetitorComparison,
    OptimizationRequest,
    OptimizationResult,
    PricePoint,
    PriceRange,
    ProductCost,
    Recommendations,
    RiskAssessment,
    ScenarioParameter,
    ScenarioResult,
    SensitivityAnalysis,
    StrategyPoint,
)
from .strategies import PricingStrategy, select_strategies
from .validation import validate_optimization_request

logger = logging.getLogger(__name__)

PRICE_TOLERANCE = 1e-6
MARGIN_TOLERANCE = 1e-9

# Competitor positioning: within ±2% of the average counts as "similar"
COMPETITOR_SIMILARITY_BAND = 2.0
COMPETITOR_PREMIUM_LIMIT = 15.0

# Risk thresholds, in percent
HIGH_PRICE_INCREASE = 15.0
MODERATE_PRICE_CHANGE = 5.0
LARGE_PRICE_DECREASE = 15.0
MARGIN_SHORTFALL_HIGH = 10.0
LOW_MARGIN = 10.0

# Price change vs current price that flips the strategy label
STRATEGY_LABEL_BAND = 10.0

RISK_RANK = {'low': 0, 'medium': 1, 'high': 2}


def generate_result_id() -> str:
    return f"opt-{uuid.uuid4().hex[:20]}"


def price_change_percentage(price: float, current_price: float) -> float:
    return (price - current_price) / current_price * 100


def margin_percentage(price: float, loaded_unit_cost: float) -> float:
    """Margin of a price over the fully loaded unit cost, in percent."""
    return (price - loaded_unit_cost) / price * 100


class PricingOptimizer:
    """
    Scenario-based pricing calculator.

    Margin is measured against the fully loaded unit cost: landed unit cost
    (unit + tariff + shipping) plus variable cost per unit plus fixed costs
    spread over the baseline sales volume. That loaded cost is also the
    break-even price.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def optimize(self, request: OptimizationRequest) -> OptimizationResult:
        """
        Run the full optimization.

        Args:
            request: product, scenarios and optional margin/range/strategy filters

        Returns:
            OptimizationResult with one ScenarioResult per input scenario

        Raises:
            ValidationError: before any computation, if the request is invalid
        """
        validate_optimization_request(request)

        product = request.product
        target_margin = (
            request.target_margin
            if request.target_margin is not None
            else self.settings.default_target_margin
        )
        break_even_prices = [
            self.loaded_unit_cost(product, self.adjusted_costs(product, scenario))
            for scenario in request.scenarios
        ]
        price_range = self.resolve_price_range(product, request.price_range, break_even_prices)
        prices = self.price_grid(price_range)
        strategies = select_strategies(request.strategies)

        scenarios = [
            self.evaluate_scenario(product, scenario, target_margin, prices, price_range, strategies)
            for scenario in request.scenarios
        ]

        result = OptimizationResult(
            id=generate_result_id(),
            product=product,
            target_margin=target_margin,
            scenarios=scenarios,
            recommendations=self.recommend(product, scenarios, target_margin),
            sensitivity_analysis=self.sensitivity(scenarios[0]),
            created_at=utc_timestamp(),
        )

        logger.debug(
            "Optimized %s: %d scenarios, %d price points each, suggestion %.2f",
            product.sku, len(scenarios), len(prices), result.recommendations.price_suggestion,
        )
        return result

    # ------------------------------------------------------------------
    # Price sweep
    # ------------------------------------------------------------------

    def resolve_price_range(
        self,
        product: ProductCost,
        price_range: Optional[PriceRange],
        break_even_prices: Optional[list[float]] = None,
    ) -> PriceRange:
        """
        Fill missing bounds and check the sweep size.

        The default sweep is the configured band around the current price,
        raised so it never starts below the cheapest scenario's break-even
        price or the price floor, and widened so the costliest scenario
        still has a price at or above its own break-even. A bound that is
        sent alone keeps the default for the other end when that fits,
        otherwise the other end is placed one band away from it.
        """
        requested = price_range or PriceRange()
        band = self.settings.default_price_band
        default_low, default_high = self.default_bounds(product, break_even_prices or [])

        if requested.min is not None and requested.max is not None:
            low, high = requested.min, requested.max
        elif requested.min is not None:
            low = requested.min
            high = default_high if default_high >= low else low * (1 + band)
        elif requested.max is not None:
            high = requested.max
            low = default_low if default_low <= high else high * (1 - band)
        else:
            low, high = default_low, default_high

        step = requested.step if requested.step is not None else self.settings.default_price_step

        if low <= 0:
            raise ValidationError("Price range minimum must be positive")
        if low > high:
            raise ValidationError("Price range minimum must not exceed the maximum")

        count = self._point_count(low, high, step)
        if count > self.settings.max_price_points:
            raise ValidationError(
                f"Price range produces {count} price points; "
                f"the limit is {self.settings.max_price_points}"
            )

        return PriceRange(min=low, max=high, step=step)

    def default_bounds(self, product: ProductCost, break_even_prices: list[float]) -> tuple[float, float]:
        band = self.settings.default_price_band
        floor = product.minimum_viable_price

        cost_floor = max(floor, min(break_even_prices)) if break_even_prices else floor
        cost_ceiling = max([floor] + break_even_prices)

        low = max(product.current_price * (1 - band), cost_floor)
        high = product.current_price * (1 + band)
        if high < cost_ceiling:
            high = cost_ceiling * (1 + band)
        return low, max(low, high)

    def price_grid(self, price_range: PriceRange) -> list[float]:
        """Prices from min to max in step increments; max is always included."""
        count = self._point_count(price_range.min, price_range.max, price_range.step)
        prices = [round(price_range.min + i * price_range.step, 6) for i in range(count)]
        if price_range.max - prices[-1] > PRICE_TOLERANCE:
            prices.append(price_range.max)
        return prices

    @staticmethod
    def _point_count(low: float, high: float, step: float) -> int:
        return int(math.floor((high - low) / step + 1e-9)) + 1

    # ------------------------------------------------------------------
    # Costs and projections
    # ------------------------------------------------------------------

    def adjusted_costs(self, product: ProductCost, scenario: ScenarioParameter) -> BaseCosts:
        """Apply a scenario's material, tariff, shipping and currency changes."""
        unit_cost = max(0.0, product.unit_cost * (1 + scenario.material_cost_change / 100))
        tariff_rate = max(0.0, product.tariff_rate + scenario.tariff_increase)
        tariff_cost = unit_cost * tariff_rate / 100
        shipping_cost = max(0.0, product.shipping_cost * (1 + scenario.shipping_cost_change / 100))

        fx = max(0.0, 1 + scenario.currency_fluctuation / 100)

        return BaseCosts(
            unit_cost=unit_cost * fx,
            tariff_cost=tariff_cost * fx,
            shipping_cost=shipping_cost * fx,
            total_unit_cost=(unit_cost + tariff_cost + shipping_cost) * fx,
            fixed_costs=product.fixed_costs * fx,
            variable_costs=product.variable_costs * fx,
        )

    @staticmethod
    def loaded_unit_cost(product: ProductCost, costs: BaseCosts) -> float:
        return (
            costs.total_unit_cost
            + costs.variable_costs
            + costs.fixed_costs / product.sales_volume_current
        )

    def project_volume(self, product: ProductCost, scenario: ScenarioParameter, price: float) -> float:
        """
        Baseline volume moved by price elasticity and the scenario's demand deltas.

        Without an elasticity the volume only follows the demand and
        marketing changes.
        """
        volume = float(product.sales_volume_current)

        if product.price_elasticity is not None:
            change = (price - product.current_price) / product.current_price
            volume *= 1 + product.price_elasticity * change

        volume *= 1 + scenario.demand_change / 100
        volume *= 1 + self.settings.marketing_response * scenario.marketing_spend_change / 100

        return max(0.0, volume)

    @staticmethod
    def profit(price: float, volume: float, costs: BaseCosts) -> float:
        unit_contribution = price - costs.total_unit_cost - costs.variable_costs
        return unit_contribution * volume - costs.fixed_costs

    @staticmethod
    def market_share(product: ProductCost, volume: float, factor: float = 1.0) -> Optional[float]:
        if product.market_share_current is None:
            return None
        share = product.market_share_current * (volume / product.sales_volume_current) * factor
        return min(100.0, share)

    def price_point(
        self,
        product: ProductCost,
        scenario: ScenarioParameter,
        costs: BaseCosts,
        loaded: float,
        price: float,
    ) -> PricePoint:
        volume = self.project_volume(product, scenario, price)
        return PricePoint(
            price=price,
            margin_percentage=margin_percentage(price, loaded),
            profit=self.profit(price, volume, costs),
            revenue=price * volume,
            volume_projection=volume,
            price_change_percentage=price_change_percentage(price, product.current_price),
            market_share_projection=self.market_share(product, volume),
        )

    # ------------------------------------------------------------------
    # Scenario evaluation
    # ------------------------------------------------------------------

    def evaluate_scenario(
        self,
        product: ProductCost,
        scenario: ScenarioParameter,
        target_margin: float,
        prices: list[float],
        price_range: PriceRange,
        strategies: list[PricingStrategy],
    ) -> ScenarioResult:
        costs = self.adjusted_costs(product, scenario)
        loaded = self.loaded_unit_cost(product, costs)

        points = [self.price_point(product, scenario, costs, loaded, price) for price in prices]

        floor_outside_range = False
        best = self.select_optimal(points, product.minimum_viable_price, target_margin)
        if best is None:
            # Every swept price sits under the floor: the floor itself is the answer
            floor_outside_range = True
            optimum = self.price_point(product, scenario, costs, loaded, product.minimum_viable_price)
        else:
            points[best] = replace(points[best], is_recommended=True)
            optimum = points[best]

        comparison = self.compare_competitors(product, scenario, optimum.price)

        return ScenarioResult(
            scenario_name=scenario.name,
            base_costs=costs,
            price_points=points,
            optimal_price=optimum.price,
            optimal_margin=optimum.margin_percentage,
            break_even_price=loaded,
            risk_assessment=self.assess_risk(
                product, optimum, target_margin, loaded, comparison, floor_outside_range
            ),
            competitor_comparison=comparison,
            target_met=optimum.margin_percentage >= target_margin - MARGIN_TOLERANCE,
            optimal_profit=optimum.profit,
            optimal_revenue=optimum.revenue,
            optimal_volume=optimum.volume_projection,
            strategy_points=self.evaluate_strategies(
                product, scenario, costs, loaded, price_range, strategies
            ),
        )

    @staticmethod
    def select_optimal(points: list[PricePoint], price_floor: float, target_margin: float) -> Optional[int]:
        """
        Index of the optimal price point, or None when none clears the floor.

        Selection order:
        1. Drop points priced below the floor
        2. Of the points reaching the target margin, take the smallest surplus
        3. Otherwise take the highest margin
        Ties go to the higher profit.
        """
        eligible = [i for i, p in enumerate(points) if p.price >= price_floor - PRICE_TOLERANCE]
        if not eligible:
            return None

        feasible = [
            i for i in eligible
            if points[i].margin_percentage >= target_margin - MARGIN_TOLERANCE
        ]
        if feasible:
            return min(
                feasible,
                key=lambda i: (points[i].margin_percentage - target_margin, -points[i].profit),
            )

        return max(eligible, key=lambda i: (points[i].margin_percentage, points[i].profit))

    def compare_competitors(
        self, product: ProductCost, scenario: ScenarioParameter, price: float
    ) -> Optional[CompetitorComparison]:
        if not product.competitor_prices:
            return None

        factor = 1 + scenario.competitor_price_change / 100
        average = sum(p * factor for p in product.competitor_prices) / len(product.competitor_prices)
        if average <= 0:
            return None

        difference = (price - average) / average * 100
        if difference > COMPETITOR_SIMILARITY_BAND:
            position = 'higher'
        elif difference < -COMPETITOR_SIMILARITY_BAND:
            position = 'lower'
        else:
            position = 'similar'

        return CompetitorComparison(
            average_competitor_price=average,
            price_difference_percentage=difference,
            relative_position=position,
        )

    @staticmethod
    def assess_risk(
        product: ProductCost,
        optimum: PricePoint,
        target_margin: float,
        break_even_price: float,
        comparison: Optional[CompetitorComparison],
        floor_outside_range: bool = False,
    ) -> RiskAssessment:
        findings = []

        change = optimum.price_change_percentage
        if change > HIGH_PRICE_INCREASE:
            findings.append(('high', 'Required price increase exceeds comfortable threshold'))
        elif change > MODERATE_PRICE_CHANGE:
            findings.append(('medium', 'Moderate price increase may affect customer retention'))
        elif change < -LARGE_PRICE_DECREASE:
            findings.append(('medium', 'Significant price decrease may impact brand perception'))

        if optimum.price < break_even_price - PRICE_TOLERANCE:
            findings.append(('high', 'Optimal price is below break-even point'))

        shortfall = target_margin - optimum.margin_percentage
        if shortfall > MARGIN_SHORTFALL_HIGH:
            findings.append(('high', 'Target margin is not achievable within the analysed price range'))
        elif shortfall > MARGIN_TOLERANCE:
            findings.append(('medium', 'Optimal margin falls short of the target margin'))

        if optimum.margin_percentage < LOW_MARGIN:
            findings.append(('medium', 'Low profit margin increases vulnerability to cost fluctuations'))

        if comparison and comparison.price_difference_percentage > COMPETITOR_PREMIUM_LIMIT:
            findings.append(('medium', 'Price significantly higher than competitors may reduce market share'))

        if floor_outside_range:
            findings.append(('medium', 'Minimum viable price lies above the analysed price range'))

        level = 'low'
        for finding_level, _ in findings:
            if RISK_RANK[finding_level] > RISK_RANK[level]:
                level = finding_level

        return RiskAssessment(level=level, factors=[factor for _, factor in findings])

    def evaluate_strategies(
        self,
        product: ProductCost,
        scenario: ScenarioParameter,
        costs: BaseCosts,
        loaded: float,
        price_range: PriceRange,
        strategies: list[PricingStrategy],
    ) -> list[StrategyPoint]:
        """Price each named strategy off the loaded cost and project its outcome."""
        points = []
        for strategy in strategies:
            if strategy.target_margin >= 100:
                continue
            price = loaded / (1 - strategy.target_margin / 100) * strategy.price_adjustment_factor
            if price <= 0:
                continue

            volume = self.project_volume(product, scenario, price) * strategy.volume_projection_factor
            points.append(StrategyPoint(
                strategy=strategy.name,
                description=strategy.description,
                price=price,
                margin_percentage=margin_percentage(price, loaded),
                profit=self.profit(price, volume, costs),
                revenue=price * volume,
                volume_projection=volume,
                in_range=price_range.min - PRICE_TOLERANCE <= price <= price_range.max + PRICE_TOLERANCE,
            ))
        return points

    # ------------------------------------------------------------------
    # Cross-scenario aggregation
    # ------------------------------------------------------------------

    @staticmethod
    def scenario_score(product: ProductCost, scenario: ScenarioResult, target_margin: float) -> float:
        """Margin attainment discounted by the size of the required price move."""
        if target_margin <= 0:
            attainment = 1.0
        else:
            attainment = max(0.0, min(scenario.optimal_margin / target_margin, 1.0))
        change = abs(price_change_percentage(scenario.optimal_price, product.current_price))
        return attainment / (1 + change / 100)

    def recommend(
        self, product: ProductCost, scenarios: list[ScenarioResult], target_margin: float
    ) -> Recommendations:
        ranked = max(
            enumerate(scenarios),
            key=lambda item: (
                self.scenario_score(product, item[1], target_margin),
                item[1].optimal_profit,
                -item[0],
            ),
        )
        best = ranked[1]

        price = best.optimal_price
        if price > product.current_price * (1 + STRATEGY_LABEL_BAND / 100):
            strategy = 'Premium Positioning'
        elif price < product.current_price * (1 - STRATEGY_LABEL_BAND / 100):
            strategy = 'Competitive Pricing'
        else:
            strategy = 'Balanced Pricing'

        return Recommendations(
            optimal_strategy=strategy,
            recommended_scenario=best.scenario_name,
            price_suggestion=price,
            expected_margin=best.optimal_margin,
            expected_profit=best.optimal_profit,
            expected_revenue=best.optimal_revenue,
            key_insights=self.key_insights(product, best, scenarios, target_margin),
        )

    @staticmethod
    def key_insights(
        product: ProductCost,
        best: ScenarioResult,
        scenarios: list[ScenarioResult],
        target_margin: float,
    ) -> list[str]:
        insights = []

        change = price_change_percentage(best.optimal_price, product.current_price)
        if change > MODERATE_PRICE_CHANGE:
            insights.append(f"Price increase of {change:.1f}% is recommended to reach the target margin")
        elif change < -MODERATE_PRICE_CHANGE:
            insights.append(f"Price decrease of {abs(change):.1f}% still meets the target margin")
        else:
            insights.append("Current pricing is close to optimal")

        if best.optimal_margin < target_margin - 5:
            insights.append(f"Achieving target margin of {target_margin:g}% may require cost optimization")
        elif best.optimal_margin > target_margin + 5:
            insights.append(
                f"Margin exceeds target by {best.optimal_margin - target_margin:.1f}%, "
                "consider competitive pricing to gain market share"
            )

        baseline = product.sales_volume_current
        if best.optimal_volume < baseline * 0.9:
            insights.append("Expected volume decrease may require operational adjustments")
        elif best.optimal_volume > baseline * 1.1:
            insights.append("Prepare for increased production volume to meet projected demand")

        level = best.risk_assessment.level
        if level == 'high':
            insights.append("High risk strategy: Consider phased implementation and close monitoring")
        elif level == 'medium':
            insights.append("Medium risk strategy: Monitor key performance indicators closely")

        comparison = best.competitor_comparison
        if comparison and comparison.relative_position == 'higher':
            insights.append(
                f"Price will be {comparison.price_difference_percentage:.1f}% higher than "
                "competitors, emphasize value proposition"
            )
        elif comparison and comparison.relative_position == 'lower':
            insights.append(
                f"Price will be {abs(comparison.price_difference_percentage):.1f}% lower than "
                "competitors, potential to gain market share"
            )

        if len(scenarios) > 1:
            optimal_prices = [s.optimal_price for s in scenarios]
            low, high = min(optimal_prices), max(optimal_prices)
            if high - low > PRICE_TOLERANCE:
                insights.append(
                    f"Optimal price ranges from {low:.2f} to {high:.2f} across {len(scenarios)} scenarios"
                )
            missed = sum(1 for s in scenarios if not s.target_met)
            if missed:
                insights.append(f"Target margin is out of reach in {missed} of {len(scenarios)} scenarios")

        return insights

    @staticmethod
    def sensitivity(scenario: ScenarioResult) -> SensitivityAnalysis:
        """Restate a scenario's price points as price → margin/volume/profit series."""
        analysis = SensitivityAnalysis()
        for point in scenario.price_points:
            analysis.margin_impact_by_price.append({'price': point.price, 'margin': point.margin_percentage})
            analysis.volume_impact_by_price.append({'price': point.price, 'volume': point.volume_projection})
            analysis.profit_impact_by_price.append({'price': point.price, 'profit': point.profit})
        return analysis

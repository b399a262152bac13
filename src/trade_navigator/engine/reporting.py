"""
Tabular views of optimization results for the dashboard and CSV export.
"""
import pandas as pd

from .models import OptimizationResult, ScenarioResult


def price_points_frame(scenario: ScenarioResult) -> pd.DataFrame:
    """One row per swept price of a scenario."""
    return pd.DataFrame([
        {
            'Price': point.price,
            'Margin %': point.margin_percentage,
            'Volume': point.volume_projection,
            'Revenue': point.revenue,
            'Profit': point.profit,
            'Price Change %': point.price_change_percentage,
            'Market Share %': point.market_share_projection,
            'Recommended': point.is_recommended,
        }
        for point in scenario.price_points
    ])


def strategy_points_frame(scenario: ScenarioResult) -> pd.DataFrame:
    return pd.DataFrame([
        {
            'Strategy': point.strategy,
            'Price': point.price,
            'Margin %': point.margin_percentage,
            'Volume': point.volume_projection,
            'Profit': point.profit,
            'In Range': point.in_range,
        }
        for point in scenario.strategy_points
    ])


def scenario_summary_frame(result: OptimizationResult) -> pd.DataFrame:
    """One row per scenario with its costs, optimum and risk."""
    rows = []
    for scenario in result.scenarios:
        comparison = scenario.competitor_comparison
        rows.append({
            'Scenario': scenario.scenario_name,
            'Total Unit Cost': scenario.base_costs.total_unit_cost,
            'Break-Even Price': scenario.break_even_price,
            'Optimal Price': scenario.optimal_price,
            'Optimal Margin %': scenario.optimal_margin,
            'Expected Profit': scenario.optimal_profit,
            'Expected Revenue': scenario.optimal_revenue,
            'Target Met': scenario.target_met,
            'Competitor Position': comparison.relative_position if comparison else None,
            'Risk': scenario.risk_assessment.level,
            'Risk Factors': "; ".join(scenario.risk_assessment.factors),
        })
    return pd.DataFrame(rows)


def sensitivity_frame(result: OptimizationResult) -> pd.DataFrame:
    """Join the three sensitivity series on price."""
    analysis = result.sensitivity_analysis
    margin = pd.DataFrame(analysis.margin_impact_by_price, columns=['price', 'margin'])
    volume = pd.DataFrame(analysis.volume_impact_by_price, columns=['price', 'volume'])
    profit = pd.DataFrame(analysis.profit_impact_by_price, columns=['price', 'profit'])
    return margin.merge(volume, on='price').merge(profit, on='price')


def export_csv(result: OptimizationResult) -> str:
    """Scenario summary as CSV text."""
    return scenario_summary_frame(result).to_csv(index=False)

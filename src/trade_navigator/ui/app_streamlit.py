"""
Streamlit UI for Trade Navigator.

Features:
- Landed cost calculator with sample scenarios and saved calculations
- Pricing optimizer with what-if scenarios and named strategies
- Scenario comparison, sensitivity charts and CSV export
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from trade_navigator.config.settings import get_settings
from trade_navigator.engine import (
    LandedCostCalculator,
    OptimizationRequest,
    PriceRange,
    PricingOptimizer,
    ProductCost,
    ScenarioParameter,
)
from trade_navigator.engine.formatting import CURRENCY_FORMATS, format_currency
from trade_navigator.engine.reporting import (
    export_csv,
    price_points_frame,
    scenario_summary_frame,
    sensitivity_frame,
    strategy_points_frame,
)
from trade_navigator.engine.strategies import STRATEGIES
from trade_navigator.engine.validation import parse_cost_payload
from trade_navigator.errors import TradeNavigatorError
from trade_navigator.services.calculation_store import CalculationStore


st.set_page_config(
    page_title="Trade Navigator",
    layout="wide",
    initial_sidebar_state="expanded"
)


# Preset inputs for the landed cost calculator
SAMPLE_SCENARIOS = {
    "Basic Widget": {
        'materials': 5000.0, 'labor': 2000.0, 'overhead': 1000.0, 'tariffRate': 5.0,
        'shippingCost': 500.0, 'insuranceCost': 100.0, 'customsFees': 50.0,
        'handlingFees': 75.0, 'warehouseCosts': 120.0, 'quantity': 100.0,
    },
    "Custom Electronics": {
        'materials': 12000.0, 'labor': 6000.0, 'overhead': 2500.0, 'tariffRate': 12.0,
        'shippingCost': 1200.0, 'insuranceCost': 300.0, 'customsFees': 200.0,
        'handlingFees': 150.0, 'warehouseCosts': 300.0, 'quantity': 250.0,
    },
    "Bulk Order": {
        'materials': 40000.0, 'labor': 12000.0, 'overhead': 6000.0, 'tariffRate': 3.0,
        'shippingCost': 2500.0, 'insuranceCost': 800.0, 'customsFees': 400.0,
        'handlingFees': 300.0, 'warehouseCosts': 900.0, 'quantity': 2000.0,
    },
}

COST_INPUTS = [
    ('materials', "Materials"),
    ('labor', "Labor"),
    ('overhead', "Overhead"),
    ('tariffRate', "Tariff Rate (%)"),
    ('shippingCost', "Shipping"),
    ('insuranceCost', "Insurance"),
    ('customsFees', "Customs Fees"),
    ('handlingFees', "Handling Fees"),
    ('warehouseCosts', "Warehouse Costs"),
]

DEFAULT_SCENARIOS = pd.DataFrame([
    {'name': 'Base Case', 'tariff_increase': 0.0, 'material_cost_change': 0.0,
     'shipping_cost_change': 0.0, 'competitor_price_change': 0.0,
     'currency_fluctuation': 0.0, 'demand_change': 0.0, 'marketing_spend_change': 0.0},
    {'name': 'Tariff Hike', 'tariff_increase': 10.0, 'material_cost_change': 0.0,
     'shipping_cost_change': 0.0, 'competitor_price_change': 0.0,
     'currency_fluctuation': 0.0, 'demand_change': 0.0, 'marketing_spend_change': 0.0},
    {'name': 'Material +5%', 'tariff_increase': 0.0, 'material_cost_change': 5.0,
     'shipping_cost_change': 0.0, 'competitor_price_change': 0.0,
     'currency_fluctuation': 0.0, 'demand_change': 0.0, 'marketing_spend_change': 0.0},
])


@st.cache_resource
def get_calculator():
    """Get cached calculator instance."""
    return LandedCostCalculator()


@st.cache_resource
def get_optimizer():
    """Get cached optimizer instance."""
    return PricingOptimizer(get_settings())


@st.cache_resource
def get_calculation_store():
    return CalculationStore(get_settings().calculations_csv)


try:
    calculator = get_calculator()
    optimizer = get_optimizer()
    settings = get_settings()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Display Settings
# ============================================================================
with st.sidebar:
    st.header("⚙️ Settings")

    with st.container(border=True):
        currency = st.selectbox("Display Currency", list(CURRENCY_FORMATS.keys()), index=0)
        st.caption("Amounts are formatted only; no conversion is applied.")

    st.divider()
    st.caption(f"Default target margin: **{settings.default_target_margin:g}%**")
    st.caption(f"Default price band: **±{settings.default_price_band * 100:g}%**")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Trade Navigator")
st.caption(f"v1.0 | Landed Cost & Pricing Optimizer | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["🚢 Landed Cost", "📈 Pricing Optimizer", "📚 Strategies"])


# ============================================================================
# TAB 1: LANDED COST CALCULATOR
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.6, 1.4], gap="large")

    with col1:
        st.subheader("Cost Inputs")

        sample = st.selectbox("Load Sample", ["(none)"] + list(SAMPLE_SCENARIOS.keys()))
        preset = SAMPLE_SCENARIOS.get(sample, {})

        payload = {}
        with st.container(border=True):
            input_cols = st.columns(3)
            for i, (key, label) in enumerate(COST_INPUTS):
                with input_cols[i % 3]:
                    payload[key] = st.number_input(
                        label,
                        min_value=0.0,
                        value=float(preset.get(key, 0.0)),
                        step=1.0,
                        key=f"cost_{key}_{sample}",
                    )

            use_quantity = st.checkbox("Per-unit cost", value='quantity' in preset)
            if use_quantity:
                payload['quantity'] = st.number_input(
                    "Quantity", min_value=1.0, value=float(preset.get('quantity', 1.0)), step=1.0,
                    key=f"cost_quantity_{sample}",
                )

        payload['targetCurrency'] = currency

        with st.expander("💾 Save Calculation"):
            payload['name'] = st.text_input("Name", value=sample if preset else "")
            payload['description'] = st.text_input("Description")
            save = st.button("Save", use_container_width=True)

    with col2:
        st.subheader("Result")
        try:
            costs = parse_cost_payload(payload)
            costs_result = calculator.calculate(costs)
        except TradeNavigatorError as e:
            st.error(e.message)
            costs_result = None

        if costs_result:
            with st.container(border=True):
                m1, m2 = st.columns(2)
                m1.metric("Total Landed Cost", costs_result.formatted_total_cost)
                if costs_result.per_unit_cost is not None:
                    m2.metric("Per Unit", costs_result.formatted_per_unit_cost)

            breakdown_df = pd.DataFrame([
                {'Component': key, 'Amount': value}
                for key, value in costs_result.breakdown.items()
                if key != 'tariffRate'
            ])
            st.bar_chart(breakdown_df, x='Component', y='Amount')

            if save:
                try:
                    saved = get_calculation_store().save(costs, costs_result)
                    st.toast(f"Saved {saved.calculation_id}")
                except Exception as e:
                    st.error(f"Could not save calculation: {e}")

    saved_calculations = get_calculation_store().list_calculations()
    if saved_calculations:
        st.divider()
        st.markdown("### 🗂️ Saved Calculations")
        st.dataframe(pd.DataFrame([
            {
                'Name': c.name,
                'Total': format_currency(c.total_cost, c.currency),
                'Per Unit': format_currency(c.per_unit_cost, c.currency) if c.per_unit_cost is not None else "",
                'Saved': c.created_at[:19],
            }
            for c in saved_calculations
        ]), use_container_width=True, hide_index=True)


# ============================================================================
# TAB 2: PRICING OPTIMIZER
# ============================================================================
with tab2:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Product")
        with st.container(border=True):
            product_name = st.text_input("Product Name", value="Test Product")
            p1, p2 = st.columns(2)
            sku = p1.text_input("SKU", value="TP-001")
            category = p2.text_input("Category", value="Electronics")

            current_price = p1.number_input("Current Price", min_value=0.01, value=100.0, step=1.0)
            unit_cost = p2.number_input("Unit Cost", min_value=0.0, value=40.0, step=1.0)
            tariff_rate = p1.number_input("Tariff Rate (%)", min_value=0.0, value=5.0, step=0.5)
            shipping_cost = p2.number_input("Shipping / Unit", min_value=0.0, value=5.0, step=0.5)
            variable_costs = p1.number_input("Variable Costs / Unit", min_value=0.0, value=10.0, step=0.5)
            fixed_costs = p2.number_input("Fixed Costs", min_value=0.0, value=10000.0, step=100.0)
            sales_volume = p1.number_input("Current Volume", min_value=1, value=1000, step=10)
            minimum_viable_price = p2.number_input("Minimum Viable Price", min_value=0.0, value=60.0, step=1.0)

        with st.expander("📊 Market Context"):
            competitors_text = st.text_input("Competitor Prices (comma separated)", value="95, 105, 110")
            use_elasticity = st.checkbox("Apply price elasticity", value=True)
            elasticity = st.number_input("Price Elasticity", value=-1.8, step=0.1, disabled=not use_elasticity)
            market_share = st.number_input("Market Share (%)", min_value=0.0, max_value=100.0, value=15.0)

        st.subheader("Targets")
        with st.container(border=True):
            target_margin = st.slider("Target Margin (%)", 0.0, 100.0, float(settings.default_target_margin), 0.5)
            use_range = st.checkbox("Custom price range", value=False)
            r1, r2, r3 = st.columns(3)
            range_min = r1.number_input("Min", min_value=0.01, value=80.0, disabled=not use_range)
            range_max = r2.number_input("Max", min_value=0.01, value=120.0, disabled=not use_range)
            range_step = r3.number_input("Step", min_value=0.01, value=5.0, disabled=not use_range)
            strategy_names = st.multiselect("Strategies", [s.name for s in STRATEGIES])

    with col2:
        st.subheader("Scenarios")
        scenario_df = st.data_editor(
            DEFAULT_SCENARIOS,
            use_container_width=True,
            num_rows="dynamic",
            column_config={
                "name": st.column_config.TextColumn("Scenario", required=True),
                "tariff_increase": st.column_config.NumberColumn("Tariff +pts"),
                "material_cost_change": st.column_config.NumberColumn("Material %"),
                "shipping_cost_change": st.column_config.NumberColumn("Shipping %"),
                "competitor_price_change": st.column_config.NumberColumn("Competitor %"),
                "currency_fluctuation": st.column_config.NumberColumn("FX %"),
                "demand_change": st.column_config.NumberColumn("Demand %"),
                "marketing_spend_change": st.column_config.NumberColumn("Marketing %"),
            },
            hide_index=True,
            key="scenario_editor"
        )

        run = st.button("⚡ Optimize", type="primary", use_container_width=True)

    if run:
        try:
            competitor_prices = [float(p) for p in competitors_text.split(',') if p.strip()]
        except ValueError:
            st.error("Competitor prices must be numbers")
            st.stop()

        scenarios = [
            ScenarioParameter(
                name=str(row['name']),
                **{
                    col: float(row[col]) if pd.notna(row[col]) else 0.0
                    for col in DEFAULT_SCENARIOS.columns if col != 'name'
                }
            )
            for _, row in scenario_df.iterrows()
            if pd.notna(row['name']) and str(row['name']).strip()
        ]

        request = OptimizationRequest(
            product=ProductCost(
                name=product_name,
                sku=sku,
                category=category,
                current_price=current_price,
                unit_cost=unit_cost,
                sales_volume_current=int(sales_volume),
                fixed_costs=fixed_costs,
                variable_costs=variable_costs,
                tariff_rate=tariff_rate,
                shipping_cost=shipping_cost,
                minimum_viable_price=minimum_viable_price,
                competitor_prices=competitor_prices,
                price_elasticity=elasticity if use_elasticity else None,
                market_share_current=market_share,
            ),
            scenarios=scenarios,
            target_margin=target_margin,
            price_range=PriceRange(range_min, range_max, range_step) if use_range else None,
            strategies=strategy_names or None,
        )

        try:
            st.session_state.optimization = optimizer.optimize(request)
        except TradeNavigatorError as e:
            st.error(e.message)
            st.session_state.pop('optimization', None)

    result = st.session_state.get('optimization')
    if result:
        st.divider()
        rec = result.recommendations

        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Suggested Price", format_currency(rec.price_suggestion, currency))
        c2.metric("Expected Margin", f"{rec.expected_margin:.1f}%")
        c3.metric("Expected Profit", format_currency(rec.expected_profit, currency))
        c4.metric("Strategy", rec.optimal_strategy)
        st.caption(f"Recommended scenario: **{rec.recommended_scenario}**")

        for insight in rec.key_insights:
            st.markdown(f"- {insight}")

        st.markdown("### 🧮 Scenario Comparison")
        st.dataframe(scenario_summary_frame(result), use_container_width=True, hide_index=True)

        st.download_button(
            "📥 CSV",
            data=export_csv(result),
            file_name=f"pricing_{result.product.sku}.csv",
            mime="text/csv",
        )

        st.markdown("### 📉 Sensitivity")
        sensitivity = sensitivity_frame(result).set_index('price')
        s1, s2, s3 = st.columns(3)
        s1.line_chart(sensitivity['margin'])
        s2.line_chart(sensitivity['volume'])
        s3.line_chart(sensitivity['profit'])

        for scenario in result.scenarios:
            with st.expander(f"📊 {scenario.scenario_name}: {format_currency(scenario.optimal_price, currency)}"):
                risk = scenario.risk_assessment
                st.markdown(f"**Risk:** {risk.level.upper()}")
                for factor in risk.factors:
                    st.caption(factor)
                st.dataframe(price_points_frame(scenario), use_container_width=True, hide_index=True)
                if scenario.strategy_points:
                    st.dataframe(strategy_points_frame(scenario), use_container_width=True, hide_index=True)


# ============================================================================
# TAB 3: STRATEGY CATALOG
# ============================================================================
with tab3:
    st.subheader("📚 Pricing Strategies")
    st.dataframe(pd.DataFrame([
        {
            'Strategy': s.name,
            'Description': s.description,
            'Target Margin %': s.target_margin,
            'Price Factor': s.price_adjustment_factor,
            'Volume Factor': s.volume_projection_factor,
            'Recommended For': ", ".join(s.recommended_for),
        }
        for s in STRATEGIES
    ]), use_container_width=True, hide_index=True)

"""
Pydantic request models for the pricing optimizer API.

Scalar fields are strict: numbers sent as strings are rejected instead of
coerced.
"""
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

from ..engine.models import (
    OptimizationRequest,
    PriceRange,
    ProductCost,
    ScenarioParameter,
)


class ProductModel(BaseModel):
    """Request model for a product's cost structure."""

    id: Optional[StrictStr] = None
    name: StrictStr = Field(min_length=1)
    sku: StrictStr = Field(min_length=1)
    category: StrictStr = Field(min_length=1)
    current_price: StrictFloat = Field(gt=0)
    unit_cost: StrictFloat = Field(ge=0)
    fixed_costs: StrictFloat = Field(ge=0)
    variable_costs: StrictFloat = Field(ge=0)
    tariff_rate: StrictFloat = Field(ge=0)
    shipping_cost: StrictFloat = Field(ge=0)
    minimum_viable_price: StrictFloat = Field(ge=0)
    competitor_prices: Optional[list[Annotated[StrictFloat, Field(gt=0)]]] = None
    price_elasticity: Optional[StrictFloat] = None
    sales_volume_current: StrictInt = Field(gt=0)
    market_share_current: Optional[StrictFloat] = Field(default=None, ge=0, le=100)

    def to_engine(self) -> ProductCost:
        return ProductCost(
            id=self.id,
            name=self.name,
            sku=self.sku,
            category=self.category,
            current_price=self.current_price,
            unit_cost=self.unit_cost,
            fixed_costs=self.fixed_costs,
            variable_costs=self.variable_costs,
            tariff_rate=self.tariff_rate,
            shipping_cost=self.shipping_cost,
            minimum_viable_price=self.minimum_viable_price,
            competitor_prices=list(self.competitor_prices or []),
            price_elasticity=self.price_elasticity,
            sales_volume_current=self.sales_volume_current,
            market_share_current=self.market_share_current,
        )


class ScenarioModel(BaseModel):
    """Request model for a what-if scenario."""

    name: StrictStr = Field(min_length=1)
    tariff_increase: StrictFloat = 0.0
    material_cost_change: StrictFloat = 0.0
    shipping_cost_change: StrictFloat = 0.0
    competitor_price_change: StrictFloat = 0.0
    currency_fluctuation: StrictFloat = 0.0
    demand_change: StrictFloat = 0.0
    marketing_spend_change: StrictFloat = 0.0

    def to_engine(self) -> ScenarioParameter:
        return ScenarioParameter(**self.model_dump())


class PriceRangeModel(BaseModel):
    """Bounds of the price sweep; missing bounds use the configured band."""
    min: Optional[StrictFloat] = None
    max: Optional[StrictFloat] = None
    step: StrictFloat = Field(default=1.0, gt=0)


class OptimizationRequestModel(BaseModel):
    """Request body of POST /api/pricing-optimizer."""

    product: ProductModel
    target_margin: StrictFloat = Field(default=20.0, ge=0, le=100)
    scenarios: list[ScenarioModel] = Field(min_length=1)
    price_range: Optional[PriceRangeModel] = None
    strategies: Optional[list[StrictStr]] = None

    def to_engine(self) -> OptimizationRequest:
        price_range = None
        if self.price_range is not None:
            price_range = PriceRange(
                min=self.price_range.min,
                max=self.price_range.max,
                step=self.price_range.step,
            )
        return OptimizationRequest(
            product=self.product.to_engine(),
            scenarios=[s.to_engine() for s in self.scenarios],
            target_margin=self.target_margin,
            price_range=price_range,
            strategies=self.strategies,
        )

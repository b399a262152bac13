"""
Catalog of named pricing strategies evaluated alongside the price sweep.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class PricingStrategy:
    """A pricing approach expressed as a margin target and adjustment factors."""
    name: str
    description: str
    price_adjustment_factor: float
    target_margin: float
    volume_projection_factor: float = 1.0
    market_share_projection_factor: float = 1.0
    recommended_for: tuple = field(default_factory=tuple)


STRATEGIES = [
    PricingStrategy(
        name='Cost Plus',
        description='Simple markup over costs to achieve target margin',
        price_adjustment_factor=1.0,
        target_margin=20,
        recommended_for=('Commodities', 'Wholesale', 'B2B'),
    ),
    PricingStrategy(
        name='Value Based',
        description='Pricing based on perceived value to customer',
        price_adjustment_factor=1.2,
        target_margin=35,
        volume_projection_factor=0.9,
        market_share_projection_factor=0.95,
        recommended_for=('Premium Products', 'Unique Solutions', 'Branded Goods'),
    ),
    PricingStrategy(
        name='Competitive Match',
        description='Match or slightly undercut competitor pricing',
        price_adjustment_factor=0.98,
        target_margin=15,
        volume_projection_factor=1.15,
        market_share_projection_factor=1.1,
        recommended_for=('Commoditized Markets', 'High Competition', 'Market Entry'),
    ),
    PricingStrategy(
        name='Penetration Pricing',
        description='Lower initial pricing to gain market share',
        price_adjustment_factor=0.85,
        target_margin=10,
        volume_projection_factor=1.5,
        market_share_projection_factor=1.4,
        recommended_for=('New Products', 'Market Entry', 'High Volume Products'),
    ),
    PricingStrategy(
        name='Premium Pricing',
        description='Higher pricing to signal quality and exclusivity',
        price_adjustment_factor=1.35,
        target_margin=45,
        volume_projection_factor=0.7,
        market_share_projection_factor=0.75,
        recommended_for=('Luxury Goods', 'High-End Products', 'Exclusive Services'),
    ),
    PricingStrategy(
        name='Skimming',
        description='High initial price that gradually reduces',
        price_adjustment_factor=1.5,
        target_margin=50,
        volume_projection_factor=0.6,
        market_share_projection_factor=0.65,
        recommended_for=('Innovative Products', 'Early Adopter Markets', 'Limited Competition'),
    ),
    PricingStrategy(
        name='Economy Pricing',
        description='Minimal price with focus on volume',
        price_adjustment_factor=0.8,
        target_margin=8,
        volume_projection_factor=1.7,
        market_share_projection_factor=1.5,
        recommended_for=('Basic Products', 'Price Sensitive Markets', 'High Volume'),
    ),
    PricingStrategy(
        name='Psychological Pricing',
        description='Prices set to create psychological effect (e.g., $9.99)',
        price_adjustment_factor=0.99,
        target_margin=25,
        volume_projection_factor=1.05,
        market_share_projection_factor=1.02,
        recommended_for=('Retail', 'Consumer Products', 'Impulse Purchases'),
    ),
    PricingStrategy(
        name='Bundle Pricing',
        description='Combined products at a discount',
        price_adjustment_factor=0.9,
        target_margin=30,
        volume_projection_factor=1.25,
        market_share_projection_factor=1.15,
        recommended_for=('Complementary Products', 'Service Packages', 'Cross-Selling'),
    ),
    PricingStrategy(
        name='Dynamic Pricing',
        description='Flexible pricing based on demand, time, and other factors',
        price_adjustment_factor=1.1,
        target_margin=32,
        volume_projection_factor=1.05,
        market_share_projection_factor=1.03,
        recommended_for=('E-commerce', 'Seasonal Products', 'High Demand Variation'),
    ),
]


def select_strategies(names: Optional[list[str]] = None) -> list[PricingStrategy]:
    """Return the catalog filtered to the given names; all strategies when none given."""
    if not names:
        return list(STRATEGIES)
    wanted = set(names)
    return [s for s in STRATEGIES if s.name in wanted]

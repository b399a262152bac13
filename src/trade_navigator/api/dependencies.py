"""
Dependency factories for the API routes.

Services are created once and shared; tests swap them through
app.dependency_overrides.
"""
from functools import lru_cache

from ..config.settings import get_settings, Settings
from ..engine.landed_cost import LandedCostCalculator
from ..engine.pricing_optimizer import PricingOptimizer
from ..services.calculation_store import CalculationStore
from ..services.history_log import HistoryLog
from ..services.optimization_service import OptimizationService
from ..services.result_store import InMemoryResultStore
from ..services.sessions import SessionProvider, StaticTokenSessionProvider


def get_app_settings() -> Settings:
    return get_settings()


@lru_cache(maxsize=1)
def get_landed_cost_calculator() -> LandedCostCalculator:
    return LandedCostCalculator()


@lru_cache(maxsize=1)
def get_history_log() -> HistoryLog:
    return HistoryLog(get_settings().history_csv)


@lru_cache(maxsize=1)
def get_calculation_store() -> CalculationStore:
    return CalculationStore(get_settings().calculations_csv)


@lru_cache(maxsize=1)
def get_optimization_service() -> OptimizationService:
    settings = get_settings()
    return OptimizationService(
        optimizer=PricingOptimizer(settings),
        store=InMemoryResultStore(max_entries=settings.cache_max_entries),
        history=get_history_log(),
        ttl_seconds=settings.cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_session_provider() -> SessionProvider:
    return StaticTokenSessionProvider(get_settings().api_tokens)

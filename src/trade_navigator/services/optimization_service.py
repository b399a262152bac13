"""
Optimization Service - wraps the pure optimizer with caching and history.

Cache and history are best-effort: a failure in either is logged and the
computed result is still returned.
"""
import hashlib
import json
import logging
from dataclasses import asdict
from typing import Optional

from ..engine.landed_cost import utc_timestamp
from ..engine.models import OptimizationRequest, OptimizationResult
from ..engine.pricing_optimizer import PricingOptimizer
from .history_log import HistoryEntry, HistoryLog
from .result_store import ResultStore

logger = logging.getLogger(__name__)


def request_signature(request: OptimizationRequest) -> str:
    """Stable hash of every request parameter."""
    payload = json.dumps(asdict(request), sort_keys=True, default=str)
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


def cache_key(request: OptimizationRequest) -> str:
    product_key = request.product.id or request.product.sku
    return f"{product_key}:{request_signature(request)}"


class OptimizationService:
    """Runs optimizations, reusing recent results and logging each run."""

    def __init__(
        self,
        optimizer: PricingOptimizer,
        store: Optional[ResultStore] = None,
        history: Optional[HistoryLog] = None,
        ttl_seconds: Optional[float] = None,
    ):
        self.optimizer = optimizer
        self.store = store
        self.history = history
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else optimizer.settings.cache_ttl_seconds

    def optimize(self, request: OptimizationRequest, user_id: Optional[str] = None) -> OptimizationResult:
        """
        Return a cached result younger than the TTL, or compute a fresh one.

        Raises:
            ValidationError: the request is invalid (nothing is cached or logged)
        """
        key = cache_key(request)

        result = self._lookup(key)
        if result is not None:
            logger.info("Reusing cached optimization %s for %s", result.id, request.product.sku)
        else:
            result = self.optimizer.optimize(request)
            self._remember(key, result)

        if user_id:
            self._record_history(user_id, request, result)

        return result

    def _lookup(self, key: str) -> Optional[OptimizationResult]:
        if self.store is None:
            return None
        try:
            return self.store.get(key)
        except Exception:
            logger.warning("Failed to read cached optimization results", exc_info=True)
            return None

    def _remember(self, key: str, result: OptimizationResult):
        if self.store is None:
            return
        try:
            self.store.put(key, result, self.ttl_seconds)
        except Exception:
            logger.error("Failed to store optimization results", exc_info=True)

    def _record_history(self, user_id: str, request: OptimizationRequest, result: OptimizationResult):
        if self.history is None:
            return
        try:
            self.history.record(HistoryEntry(
                user_id=user_id,
                product_id=request.product.id or request.product.sku,
                product_name=request.product.name,
                target_margin=result.target_margin,
                scenario_count=len(request.scenarios),
                result_id=result.id,
                created_at=utc_timestamp(),
            ))
        except Exception:
            logger.error("Failed to log optimization history", exc_info=True)

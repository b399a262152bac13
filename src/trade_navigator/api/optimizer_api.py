"""
Pricing Optimizer API - scenario-based pricing optimization for a product.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError as SchemaValidationError

from ..engine.strategies import STRATEGIES
from ..errors import InternalError, ValidationError
from ..services.history_log import HistoryLog
from ..services.optimization_service import OptimizationService
from .auth import require_user
from .dependencies import get_history_log, get_optimization_service
from .schemas import OptimizationRequestModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pricing-optimizer", tags=["pricing-optimizer"])

INVALID_PARAMETERS = "Invalid request parameters"
OPTIMIZATION_FAILED = "An error occurred during price optimization"


def schema_error_details(exc: SchemaValidationError) -> list[dict]:
    return [
        {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
        for err in exc.errors()
    ]


@router.post("")
async def optimize_pricing(
    request: Request,
    user_id: str = Depends(require_user),
    service: OptimizationService = Depends(get_optimization_service),
):
    """
    Calculate optimal price points across what-if scenarios.

    Authentication is checked before the body is read.
    """
    try:
        body = await request.json()
    except Exception as e:
        logger.error("Pricing optimizer could not read request body: %s", e)
        raise InternalError(OPTIMIZATION_FAILED)

    try:
        parsed = OptimizationRequestModel.model_validate(body)
    except SchemaValidationError as e:
        raise ValidationError(INVALID_PARAMETERS, details=schema_error_details(e))

    try:
        result = service.optimize(parsed.to_engine(), user_id=user_id)
    except ValidationError as e:
        raise ValidationError(INVALID_PARAMETERS, details=[{"loc": "", "msg": e.message}])
    except Exception:
        logger.exception("Pricing optimizer error")
        raise InternalError(OPTIMIZATION_FAILED)

    return jsonable_encoder(result)


@router.get("/history")
async def optimization_history(
    limit: int = Query(50, ge=1, le=500),
    user_id: str = Depends(require_user),
    history: HistoryLog = Depends(get_history_log),
):
    """The caller's past optimization runs, newest first."""
    return [asdict(entry) for entry in history.list_entries(user_id=user_id, limit=limit)]


@router.get("/strategies")
async def list_strategies():
    """Named pricing strategies that can be passed in `strategies`."""
    return [asdict(strategy) for strategy in STRATEGIES]

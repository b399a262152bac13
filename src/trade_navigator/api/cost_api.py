"""
Cost Calculator API - landed cost calculation and saved calculations.
"""
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ..engine.landed_cost import LandedCostCalculator
from ..engine.validation import parse_cost_payload
from ..errors import MalformedRequestError
from ..services.calculation_store import CalculationStore
from .auth import optional_user, require_user
from .dependencies import get_calculation_store, get_landed_cost_calculator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cost-calculator", tags=["cost-calculator"])


@router.post("")
async def calculate_cost(
    request: Request,
    user_id: Optional[str] = Depends(optional_user),
    calculator: LandedCostCalculator = Depends(get_landed_cost_calculator),
    store: CalculationStore = Depends(get_calculation_store),
):
    """Calculate total and per-unit landed cost."""
    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning("Cost calculator received an undecodable body: %s", e)
        raise MalformedRequestError()

    costs = parse_cost_payload(payload)
    result = calculator.calculate(costs)

    if costs.save_calculation:
        try:
            saved = store.save(costs, result, user_id)
            result.calculation_id = saved.calculation_id
        except Exception:
            logger.error("Failed to save cost calculation", exc_info=True)

    return result.to_response()


@router.get("/calculations")
async def list_calculations(
    user_id: str = Depends(require_user),
    store: CalculationStore = Depends(get_calculation_store),
):
    """List the caller's saved calculations, newest first."""
    return [asdict(c) for c in store.list_calculations(user_id=user_id)]


@router.get("/calculations/{calculation_id}")
async def get_calculation(
    calculation_id: str,
    user_id: str = Depends(require_user),
    store: CalculationStore = Depends(get_calculation_store),
):
    calculation = store.get(calculation_id)
    if not calculation or calculation.user_id != user_id:
        raise HTTPException(status_code=404, detail=f"Calculation '{calculation_id}' not found")
    return asdict(calculation)


@router.delete("/calculations/{calculation_id}")
async def delete_calculation(
    calculation_id: str,
    user_id: str = Depends(require_user),
    store: CalculationStore = Depends(get_calculation_store),
):
    calculation = store.get(calculation_id)
    if not calculation or calculation.user_id != user_id:
        raise HTTPException(status_code=404, detail=f"Calculation '{calculation_id}' not found")
    store.delete(calculation_id)
    return {"success": True, "message": f"Calculation '{calculation_id}' deleted"}

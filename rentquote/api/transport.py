from fastapi import APIRouter, HTTPException

from rentquote.core.money import round_money
from rentquote.schemas.transport import TransportCalcOut, TransportCalcRequest
from rentquote.services.transport import transport_cost

router = APIRouter(prefix="/transport", tags=["transport"])


@router.post("/calc", response_model=TransportCalcOut)
async def calc_transport(payload: TransportCalcRequest):
    cost = transport_cost(payload.cost_per_km, payload.distance_km, payload.include_handling_fee)
    try:
        return TransportCalcOut(
            base_cost=round_money(cost.base_cost),
            handling_fee=round_money(cost.handling_fee),
            total_cost=round_money(cost.total),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

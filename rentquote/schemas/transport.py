from decimal import Decimal

from pydantic import BaseModel, Field


class TransportCalcRequest(BaseModel):
    cost_per_km: Decimal = Field(ge=0)
    distance_km: Decimal = Field(ge=0)
    include_handling_fee: bool = False


class TransportCalcOut(BaseModel):
    base_cost: Decimal
    handling_fee: Decimal
    total_cost: Decimal

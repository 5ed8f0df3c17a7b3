from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from rentquote.core.enums import AdditionalItemType
from rentquote.utils.coercion import coerce_positive_int


class PricingTier(BaseModel):
    id: Optional[int] = None
    period_start: int = Field(ge=1)
    period_end: Optional[int] = None  # None is open-ended ("30+ days")
    price_per_day: Decimal = Field(ge=0)
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class AdditionalItem(BaseModel):
    id: int
    type: AdditionalItemType = AdditionalItemType.ADDITIONAL
    name: str
    price_per_day: Decimal = Field(ge=0)
    is_optional: bool = True
    position: int = 1


class ServiceItem(BaseModel):
    name: str
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    sort_order: int = 0


class ServiceCostConfig(BaseModel):
    interval_months: Optional[int] = Field(default=None, ge=1)
    interval_km: Optional[int] = Field(default=None, ge=1)
    interval_motohours: Optional[int] = Field(default=None, ge=1)
    worker_hours: Decimal = Field(default=Decimal("2.0"), ge=0)
    worker_cost_per_hour: Decimal = Field(default=Decimal("100.00"), ge=0)
    items: List[ServiceItem] = Field(default_factory=list)


class Equipment(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    model: Optional[str] = None
    fuel_consumption_75: Optional[Decimal] = Field(default=None, ge=0)  # l/h at 75% load
    fuel_consumption_per_100km: Optional[Decimal] = Field(default=None, ge=0)
    fuel_tank_capacity: Optional[int] = None
    quantity: int = Field(default=0, ge=0)
    available_quantity: int = Field(default=0, ge=0)
    pricing: List[PricingTier] = Field(default_factory=list)
    additional: List[AdditionalItem] = Field(default_factory=list)
    service_costs: Optional[ServiceCostConfig] = None
    is_transport: bool = False
    km_rate: Optional[Decimal] = Field(default=None, ge=0)


class TierResolveRequest(BaseModel):
    tiers: List[PricingTier]
    days: int = 1

    @field_validator("days", mode="before")
    @classmethod
    def _positive_days(cls, v):
        return coerce_positive_int(v)


class TierResolveOut(BaseModel):
    price_per_day: Decimal
    discount_percent: Decimal
    fallback_used: bool
    reason: Optional[str] = None
    tier: Optional[PricingTier] = None


class TierValidateRequest(BaseModel):
    tiers: List[PricingTier]


class TierValidateOut(BaseModel):
    valid: bool
    errors: List[str]
    warnings: List[str]

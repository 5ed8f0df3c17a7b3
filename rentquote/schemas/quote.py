from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from rentquote.core.enums import (
    AdditionalItemType,
    CalculationType,
    EquipmentDomain,
    IntervalUnit,
    QuoteStatus,
)
from rentquote.schemas.catalog import Equipment
from rentquote.utils.coercion import coerce_positive_int


class SelectedAdditionalItem(BaseModel):
    """An add-on picked for a line.

    Lines reloaded from a saved quote carry the full snapshot (name, type and
    price); new selections may send just the catalog ``id`` and the snapshot
    is taken from the equipment record.
    """
    id: int
    name: Optional[str] = None
    type: Optional[AdditionalItemType] = None
    price_per_day: Optional[Decimal] = Field(default=None, ge=0)
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def _positive_quantity(cls, v):
        return coerce_positive_int(v)


class AdditionalSnapshot(BaseModel):
    id: int
    name: str
    type: AdditionalItemType
    price_per_day: Decimal
    quantity: int


class LogisticsOption(BaseModel):
    include: bool = False
    distance_km: Decimal = Field(default=Decimal("0"), ge=0)
    technician_count: Optional[int] = Field(default=None, ge=1)
    service_rate_per_technician: Optional[Decimal] = Field(default=None, ge=0)
    travel_rate_per_km: Optional[Decimal] = Field(default=None, ge=0)


class TravelServiceOption(LogisticsOption):
    number_of_trips: Optional[int] = Field(default=None, ge=1)


class LogisticsOptions(BaseModel):
    installation: LogisticsOption = Field(default_factory=LogisticsOption)
    disassembly: LogisticsOption = Field(default_factory=LogisticsOption)
    travel_service: TravelServiceOption = Field(default_factory=TravelServiceOption)


class FuelOption(BaseModel):
    include: bool = False
    calculation_type: CalculationType = CalculationType.MOTOHOURS
    fuel_consumption_lh: Optional[Decimal] = Field(default=None, ge=0)
    fuel_consumption_per_100km: Optional[Decimal] = Field(default=None, ge=0)
    hours_per_day: Optional[int] = Field(default=None, ge=0, le=24)
    kilometers_per_day: Optional[int] = Field(default=None, ge=0)
    fuel_price_per_liter: Optional[Decimal] = Field(default=None, ge=0)


class MaintenanceOption(BaseModel):
    include: bool = False
    interval_unit: Optional[IntervalUnit] = None
    interval: Optional[int] = Field(default=None, ge=1)
    expected_usage: Optional[Decimal] = Field(default=None, ge=0)
    filter_costs: Optional[List[Decimal]] = None
    oil_cost: Optional[Decimal] = Field(default=None, ge=0)
    service_work_hours: Optional[Decimal] = Field(default=None, ge=0)
    service_work_rate_per_hour: Optional[Decimal] = Field(default=None, ge=0)
    service_travel_distance_km: Optional[Decimal] = Field(default=None, ge=0)
    service_travel_rate_per_km: Optional[Decimal] = Field(default=None, ge=0)


class ServiceItemsOption(BaseModel):
    include: bool = False
    item_costs: List[Decimal] = Field(default_factory=list)


class ConsumableOptions(BaseModel):
    fuel: FuelOption = Field(default_factory=FuelOption)
    maintenance: MaintenanceOption = Field(default_factory=MaintenanceOption)
    service_items: ServiceItemsOption = Field(default_factory=ServiceItemsOption)


class QuoteLineRequest(BaseModel):
    equipment: Equipment
    quantity: int = 1
    rental_period_days: int = 1
    price_per_day: Optional[Decimal] = Field(default=None, ge=0)
    discount_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    selected_additional: List[SelectedAdditionalItem] = Field(default_factory=list)
    logistics: LogisticsOptions = Field(default_factory=LogisticsOptions)
    consumables: ConsumableOptions = Field(default_factory=ConsumableOptions)
    kilometers: Optional[Decimal] = Field(default=None, ge=0)  # transport items only
    notes: Optional[str] = None

    @field_validator("quantity", "rental_period_days", mode="before")
    @classmethod
    def _positive_int(cls, v):
        return coerce_positive_int(v)


class QuoteLine(BaseModel):
    equipment_id: int
    equipment_name: str
    quantity: int
    rental_period_days: int
    price_per_day: Decimal
    discount_percent: Decimal
    tier_fallback_used: bool = False
    tier_fallback_reason: Optional[str] = None
    selected_additional: List[AdditionalSnapshot] = Field(default_factory=list)
    base_total: Decimal
    additional_cost: Decimal
    accessories_cost: Decimal
    installation_cost: Decimal
    disassembly_cost: Decimal
    travel_service_cost: Decimal
    fuel_cost: Decimal
    maintenance_cost: Decimal
    service_items_cost: Decimal
    transport_cost: Decimal
    total_price: Decimal
    notes: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class LineCalcRequest(BaseModel):
    domain: EquipmentDomain = EquipmentDomain.GENERAL
    line: QuoteLineRequest


class ClientSnapshot(BaseModel):
    company_name: Optional[str] = None
    nip: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class QuoteRequest(BaseModel):
    domain: EquipmentDomain = EquipmentDomain.GENERAL
    client: Optional[ClientSnapshot] = None
    status: QuoteStatus = QuoteStatus.DRAFT
    vat_rate: Optional[Decimal] = Field(default=None, ge=0)
    lines: List[QuoteLineRequest] = Field(default_factory=list)
    notes: Optional[str] = None


class Quote(BaseModel):
    domain: EquipmentDomain
    quote_number: Optional[str] = None
    status: QuoteStatus
    client: Optional[ClientSnapshot] = None
    lines: List[QuoteLine]
    total_net: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_gross: Decimal
    notes: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class TotalsRequest(BaseModel):
    line_totals: List[Decimal] = Field(default_factory=list)
    vat_rate: Optional[Decimal] = Field(default=None, ge=0)


class TotalsOut(BaseModel):
    total_net: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_gross: Decimal


class QuoteNumberOut(BaseModel):
    domain: EquipmentDomain
    sequence: int
    issued_on: date
    quote_number: str

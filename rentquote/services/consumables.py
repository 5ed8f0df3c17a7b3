"""Fuel, maintenance and service-item costs for engine-driven equipment."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from rentquote.core.config import settings
from rentquote.core.enums import CalculationType, IntervalUnit
from rentquote.core.money import HUNDRED, ZERO, sum_money
from rentquote.schemas.catalog import Equipment
from rentquote.schemas.quote import (
    ConsumableOptions,
    FuelOption,
    MaintenanceOption,
    ServiceItemsOption,
)

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = Decimal("30")

# Fuel filters 1/2, oil filter, air filters 1/2, engine filter
DEFAULT_FILTER_COSTS: Tuple[Decimal, ...] = (
    Decimal("49.00"),
    Decimal("118.00"),
    Decimal("45.00"),
    Decimal("105.00"),
    Decimal("54.00"),
    Decimal("150.00"),
)
DEFAULT_OIL_COST = Decimal("162.44")


@dataclass(frozen=True)
class MaintenanceDefaults:
    filter_costs: Tuple[Decimal, ...] = DEFAULT_FILTER_COSTS
    oil_cost: Decimal = DEFAULT_OIL_COST
    service_work_hours: Decimal = Decimal("2")
    service_work_rate_per_hour: Decimal = Decimal("100.00")
    service_travel_distance_km: Decimal = Decimal("31")
    service_travel_rate_per_km: Decimal = settings.TRAVEL_RATE_PER_KM
    interval_motohours: Optional[int] = 500
    interval_km: Optional[int] = None
    interval_months: Optional[int] = 12


@dataclass(frozen=True)
class ConsumableCosts:
    fuel_cost: Decimal = ZERO
    maintenance_cost: Decimal = ZERO
    service_items_cost: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.fuel_cost + self.maintenance_cost + self.service_items_cost


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def fuel_cost(
    option: FuelOption,
    equipment: Equipment,
    days: int,
    fuel_price_per_liter: Decimal,
    hours_per_day: int = 8,
) -> Decimal:
    if not option.include:
        return ZERO

    price = _first(option.fuel_price_per_liter, fuel_price_per_liter)

    if option.calculation_type == CalculationType.KILOMETERS:
        per_100km = _first(option.fuel_consumption_per_100km, equipment.fuel_consumption_per_100km, ZERO)
        km_per_day = option.kilometers_per_day or 0
        return per_100km / HUNDRED * km_per_day * days * price

    consumption = _first(option.fuel_consumption_lh, equipment.fuel_consumption_75, ZERO)
    hours = _first(option.hours_per_day, hours_per_day)
    return consumption * hours * days * price


def _interval_unit(option: MaintenanceOption, fuel: FuelOption) -> IntervalUnit:
    if option.interval_unit is not None:
        return option.interval_unit
    if fuel.calculation_type == CalculationType.KILOMETERS:
        return IntervalUnit.KILOMETERS
    return IntervalUnit.MOTOHOURS


def service_interval(
    unit: IntervalUnit,
    option: MaintenanceOption,
    equipment: Equipment,
    defaults: MaintenanceDefaults,
) -> Optional[int]:
    config = equipment.service_costs
    if unit == IntervalUnit.KILOMETERS:
        return _first(option.interval, config and config.interval_km, defaults.interval_km)
    if unit == IntervalUnit.MONTHS:
        return _first(option.interval, config and config.interval_months, defaults.interval_months)
    return _first(option.interval, config and config.interval_motohours, defaults.interval_motohours)


def expected_usage(
    unit: IntervalUnit,
    option: MaintenanceOption,
    fuel: FuelOption,
    days: int,
    hours_per_day: int = 8,
) -> Decimal:
    if option.expected_usage is not None:
        return option.expected_usage
    if unit == IntervalUnit.KILOMETERS:
        return Decimal((fuel.kilometers_per_day or 0) * days)
    if unit == IntervalUnit.MONTHS:
        return Decimal(days) / DAYS_PER_MONTH
    return Decimal(_first(fuel.hours_per_day, hours_per_day) * days)


def maintenance_cost(
    option: MaintenanceOption,
    fuel: FuelOption,
    equipment: Equipment,
    days: int,
    defaults: MaintenanceDefaults,
    hours_per_day: int = 8,
) -> Decimal:
    """One service visit, charged once when expected usage passes the interval."""
    if not option.include:
        return ZERO

    unit = _interval_unit(option, fuel)
    interval = service_interval(unit, option, equipment, defaults)
    if interval is None:
        logger.warning(
            f"No {unit} service interval for equipment {equipment.id}, maintenance not charged",
            extra={"equipment_id": equipment.id},
        )
        return ZERO

    usage = expected_usage(unit, option, fuel, days, hours_per_day)
    if usage <= interval:
        return ZERO

    config = equipment.service_costs
    if option.filter_costs is not None:
        parts = option.filter_costs
    elif config is not None and config.items:
        parts = [item.cost for item in config.items]
    else:
        parts = defaults.filter_costs

    oil = _first(option.oil_cost, defaults.oil_cost)
    work_hours = _first(option.service_work_hours, config and config.worker_hours, defaults.service_work_hours)
    work_rate = _first(
        option.service_work_rate_per_hour,
        config and config.worker_cost_per_hour,
        defaults.service_work_rate_per_hour,
    )
    travel_km = _first(option.service_travel_distance_km, defaults.service_travel_distance_km)
    travel_rate = _first(option.service_travel_rate_per_km, defaults.service_travel_rate_per_km)

    return sum_money(parts) + oil + work_hours * work_rate + travel_km * travel_rate


def service_items_cost(option: ServiceItemsOption) -> Decimal:
    """Extra service items priced on the line.

    Items configured on the equipment are service parts and are charged by
    ``maintenance_cost``; only the explicit ``item_costs`` are summed here.
    """
    if not option.include:
        return ZERO
    return sum_money(option.item_costs)


def consumable_costs(
    options: ConsumableOptions,
    equipment: Equipment,
    days: int,
    fuel_price_per_liter: Decimal,
    maintenance_defaults: MaintenanceDefaults,
    hours_per_day: int = 8,
) -> ConsumableCosts:
    return ConsumableCosts(
        fuel_cost=fuel_cost(options.fuel, equipment, days, fuel_price_per_liter, hours_per_day),
        maintenance_cost=maintenance_cost(
            options.maintenance, options.fuel, equipment, days, maintenance_defaults, hours_per_day
        ),
        service_items_cost=service_items_cost(options.service_items),
    )

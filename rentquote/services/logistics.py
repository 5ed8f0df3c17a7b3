"""Installation, disassembly and service-visit charges.

All three are one-time costs: they are never multiplied by rental days and
never discounted. Rates missing from an option come from the injected
``LogisticsRates`` record.
"""
from dataclasses import dataclass
from decimal import Decimal

from rentquote.core.config import settings
from rentquote.core.money import ZERO
from rentquote.schemas.quote import LogisticsOption, LogisticsOptions, TravelServiceOption


@dataclass(frozen=True)
class LogisticsRates:
    service_rate_per_technician: Decimal
    travel_rate_per_km: Decimal
    technician_count: int

    @classmethod
    def from_settings(cls) -> "LogisticsRates":
        return cls(
            service_rate_per_technician=settings.SERVICE_RATE_PER_TECHNICIAN,
            travel_rate_per_km=settings.TRAVEL_RATE_PER_KM,
            technician_count=settings.TECHNICIAN_COUNT,
        )


@dataclass(frozen=True)
class LogisticsCosts:
    installation_cost: Decimal = ZERO
    disassembly_cost: Decimal = ZERO
    travel_service_cost: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.installation_cost + self.disassembly_cost + self.travel_service_cost


def _visit_cost(option: LogisticsOption, rates: LogisticsRates, trips: int = 1) -> Decimal:
    travel_rate = option.travel_rate_per_km if option.travel_rate_per_km is not None else rates.travel_rate_per_km
    service_rate = (
        option.service_rate_per_technician
        if option.service_rate_per_technician is not None
        else rates.service_rate_per_technician
    )
    technicians = option.technician_count or rates.technician_count
    return option.distance_km * travel_rate * trips + technicians * service_rate


def installation_cost(option: LogisticsOption, rates: LogisticsRates) -> Decimal:
    if not option.include:
        return ZERO
    return _visit_cost(option, rates)


def disassembly_cost(option: LogisticsOption, rates: LogisticsRates) -> Decimal:
    if not option.include:
        return ZERO
    return _visit_cost(option, rates)


def travel_service_cost(option: TravelServiceOption, rates: LogisticsRates) -> Decimal:
    # Repeat service visits during a long rental; the only trip-multiplied cost
    if not option.include:
        return ZERO
    return _visit_cost(option, rates, trips=option.number_of_trips or 1)


def logistics_costs(options: LogisticsOptions, rates: LogisticsRates) -> LogisticsCosts:
    return LogisticsCosts(
        installation_cost=installation_cost(options.installation, rates),
        disassembly_cost=disassembly_cost(options.disassembly, rates),
        travel_service_cost=travel_service_cost(options.travel_service, rates),
    )

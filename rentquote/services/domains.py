"""Per-domain pricing profiles.

General, electrical and public rental quotes, and the guest catalog flow,
all run through the same engine. A profile only carries what differs
between them: default rates, the tier fallback policy and whether transport
items pay the distance handling fee.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict

from rentquote.core.config import settings
from rentquote.core.enums import EquipmentDomain, TierFallback
from rentquote.services.consumables import MaintenanceDefaults
from rentquote.services.logistics import LogisticsRates


@dataclass(frozen=True)
class DomainProfile:
    domain: EquipmentDomain
    logistics: LogisticsRates
    fuel_price_per_liter: Decimal
    hours_per_day: int = 8
    maintenance: MaintenanceDefaults = field(default_factory=MaintenanceDefaults)
    tier_fallback: TierFallback = TierFallback.FIRST
    transport_handling_fee: bool = False


def build_profiles() -> Dict[EquipmentDomain, DomainProfile]:
    shared_rates = LogisticsRates.from_settings()

    def profile(domain: EquipmentDomain, **overrides) -> DomainProfile:
        values = dict(
            domain=domain,
            logistics=shared_rates,
            fuel_price_per_liter=settings.FUEL_PRICE_PER_LITER,
            hours_per_day=settings.HOURS_PER_DAY,
        )
        values.update(overrides)
        return DomainProfile(**values)

    return {
        EquipmentDomain.GENERAL: profile(EquipmentDomain.GENERAL),
        EquipmentDomain.ELECTRICAL: profile(EquipmentDomain.ELECTRICAL),
        EquipmentDomain.PUBLIC: profile(
            EquipmentDomain.PUBLIC,
            maintenance=MaintenanceDefaults(
                service_work_rate_per_hour=Decimal("60"),
                service_travel_rate_per_km=Decimal("5"),
                interval_months=6,
            ),
        ),
        EquipmentDomain.CATALOG: profile(
            EquipmentDomain.CATALOG,
            logistics=LogisticsRates(
                service_rate_per_technician=settings.CATALOG_SERVICE_RATE_PER_TECHNICIAN,
                travel_rate_per_km=settings.CATALOG_TRAVEL_RATE_PER_KM,
                technician_count=settings.TECHNICIAN_COUNT,
            ),
            tier_fallback=TierFallback.LAST,
            transport_handling_fee=True,
        ),
    }


DOMAIN_PROFILES = build_profiles()


def get_profile(domain: EquipmentDomain) -> DomainProfile:
    return DOMAIN_PROFILES[EquipmentDomain(domain)]

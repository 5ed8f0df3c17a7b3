"""Quote line and quote totals composition.

Every recomputation starts from the line's current inputs; nothing is
patched incrementally, so the same inputs always give the same line.
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from rentquote.core.config import settings
from rentquote.core.metrics import quote_calculations, track_calculation
from rentquote.core.money import HUNDRED, ZERO, percent_factor, round_money, sum_money, to_decimal
from rentquote.schemas.catalog import Equipment
from rentquote.schemas.quote import (
    AdditionalSnapshot,
    ConsumableOptions,
    LogisticsOptions,
    Quote,
    QuoteLine,
    QuoteLineRequest,
    QuoteRequest,
    TotalsOut,
)
from rentquote.services.addons import aggregate, snapshot_selection
from rentquote.services.consumables import consumable_costs
from rentquote.services.domains import DomainProfile, get_profile
from rentquote.services.logistics import logistics_costs
from rentquote.services.tiers import TierResolution, discount_warnings, resolve
from rentquote.services.transport import transport_cost
from rentquote.utils.coercion import clamp_quantity

logger = logging.getLogger(__name__)

COST_FIELDS = (
    "base_total",
    "additional_cost",
    "accessories_cost",
    "installation_cost",
    "disassembly_cost",
    "travel_service_cost",
    "fuel_cost",
    "maintenance_cost",
    "service_items_cost",
    "transport_cost",
)


def base_total(price_per_day: Decimal, discount_percent: Decimal, quantity: int, days: int) -> Decimal:
    return price_per_day * percent_factor(discount_percent) * quantity * days


def _settle(raw: dict, round_each_component: bool) -> dict:
    """Round the cost breakdown and add ``total_price``.

    With ``round_each_component`` every sub-cost is rounded to cents first and
    the total is the sum of the rounded parts, which is how saved quotes were
    always totalled. Otherwise the total is rounded once from exact parts.
    """
    costs = {name: round_money(raw.get(name, ZERO)) for name in COST_FIELDS}
    if round_each_component:
        costs["total_price"] = round_money(sum_money(costs.values()))
    else:
        costs["total_price"] = round_money(sum_money(raw.get(name, ZERO) for name in COST_FIELDS))
    return costs


def compose_line(
    equipment: Equipment,
    tier: TierResolution,
    quantity: int,
    days: int,
    add_ons: Sequence[AdditionalSnapshot],
    logistics: LogisticsOptions,
    consumables: ConsumableOptions,
    *,
    profile: DomainProfile,
    round_each_component: Optional[bool] = None,
    notes: Optional[str] = None,
    warnings: Optional[List[str]] = None,
) -> QuoteLine:
    if round_each_component is None:
        round_each_component = settings.ROUND_EACH_COMPONENT

    add_on_costs = aggregate(add_ons, days)
    logistic = logistics_costs(logistics, profile.logistics)
    consumable = consumable_costs(
        consumables,
        equipment,
        days,
        profile.fuel_price_per_liter,
        profile.maintenance,
        profile.hours_per_day,
    )

    raw = {
        "base_total": base_total(tier.price_per_day, tier.discount_percent, quantity, days),
        "additional_cost": add_on_costs.additional_cost,
        "accessories_cost": add_on_costs.accessories_cost,
        "installation_cost": logistic.installation_cost,
        "disassembly_cost": logistic.disassembly_cost,
        "travel_service_cost": logistic.travel_service_cost,
        "fuel_cost": consumable.fuel_cost,
        "maintenance_cost": consumable.maintenance_cost,
        "service_items_cost": consumable.service_items_cost,
    }

    return QuoteLine(
        equipment_id=equipment.id,
        equipment_name=equipment.name,
        quantity=quantity,
        rental_period_days=days,
        price_per_day=round_money(tier.price_per_day),
        discount_percent=round_money(tier.discount_percent),
        tier_fallback_used=tier.fallback_used,
        tier_fallback_reason=tier.reason if tier.fallback_used else None,
        selected_additional=list(add_ons),
        notes=notes,
        warnings=list(warnings or []),
        **_settle(raw, round_each_component),
    )


def compose_transport_line(
    line: QuoteLineRequest,
    quantity: int,
    profile: DomainProfile,
    round_each_component: bool,
) -> QuoteLine:
    equipment = line.equipment
    rate = line.price_per_day if line.price_per_day is not None else (equipment.km_rate or ZERO)
    kilometers = line.kilometers or ZERO
    cost = transport_cost(rate, kilometers, with_handling_fee=profile.transport_handling_fee)

    return QuoteLine(
        equipment_id=equipment.id,
        equipment_name=equipment.name,
        quantity=quantity,
        rental_period_days=line.rental_period_days,
        price_per_day=round_money(rate),
        discount_percent=round_money(ZERO),
        notes=line.notes,
        **_settle({"transport_cost": cost.total * quantity}, round_each_component),
    )


@track_calculation("line")
def price_line(
    line: QuoteLineRequest,
    profile: DomainProfile,
    round_each_component: Optional[bool] = None,
) -> QuoteLine:
    """Price one line from its catalog record and the user's current choices."""
    if round_each_component is None:
        round_each_component = settings.ROUND_EACH_COMPONENT

    equipment = line.equipment
    days = line.rental_period_days
    quantity = clamp_quantity(line.quantity, equipment.available_quantity)
    quote_calculations.labels(domain=str(profile.domain), kind="line").inc()

    if equipment.is_transport:
        return compose_transport_line(line, quantity, profile, round_each_component)

    resolution = resolve(equipment.pricing, days, profile.tier_fallback, str(profile.domain))
    warnings = []
    if resolution.fallback_used:
        warnings.append(
            f"No pricing tier covers {days} days for {equipment.name}; fallback price applied"
        )

    if line.price_per_day is not None or line.discount_percent is not None:
        resolution = TierResolution(
            price_per_day=(
                line.price_per_day if line.price_per_day is not None else resolution.price_per_day
            ),
            discount_percent=(
                line.discount_percent if line.discount_percent is not None else resolution.discount_percent
            ),
            tier=resolution.tier,
            fallback_used=resolution.fallback_used,
            reason=resolution.reason,
        )

    return compose_line(
        equipment,
        resolution,
        quantity,
        days,
        snapshot_selection(equipment, line.selected_additional),
        line.logistics,
        line.consumables,
        profile=profile,
        round_each_component=round_each_component,
        notes=line.notes,
        warnings=warnings,
    )


def compose_totals(line_totals: Iterable[Decimal], vat_rate: Optional[Decimal] = None) -> TotalsOut:
    if vat_rate is None:
        vat_rate = settings.DEFAULT_VAT_RATE
    vat_rate = to_decimal(vat_rate)

    totals = [to_decimal(t) for t in line_totals]
    negative = [t for t in totals if t < 0]
    if negative:
        raise ValueError(f"Quote lines cannot be negative: {negative}")

    total_net = round_money(sum_money(totals))
    total_gross = round_money(total_net * (1 + vat_rate / HUNDRED))
    return TotalsOut(
        total_net=total_net,
        vat_rate=vat_rate,
        vat_amount=total_gross - total_net,
        total_gross=total_gross,
    )


@track_calculation("quote")
def price_quote(request: QuoteRequest, round_each_component: Optional[bool] = None) -> Quote:
    profile = get_profile(request.domain)
    lines = [price_line(line, profile, round_each_component) for line in request.lines]
    totals = compose_totals([line.total_price for line in lines], request.vat_rate)

    warnings: List[str] = []
    seen = set()
    for line_request, line in zip(request.lines, lines):
        warnings.extend(line.warnings)
        equipment = line_request.equipment
        if equipment.id in seen:
            continue
        seen.add(equipment.id)
        for message in discount_warnings(equipment.pricing):
            warnings.append(f"{equipment.name}: {message}")

    for message in warnings:
        logger.warning(message, extra={"domain": str(request.domain)})

    quote_calculations.labels(domain=str(request.domain), kind="quote").inc()
    return Quote(
        domain=request.domain,
        status=request.status,
        client=request.client,
        lines=lines,
        notes=request.notes,
        warnings=warnings,
        **totals.model_dump(),
    )

"""Tiered rental pricing: day count -> daily price and discount.

Tiers for one piece of equipment are expected to be contiguous and sorted
by ``period_start`` with a single open-ended tier last. That is enforced when
tiers are authored (see ``validate_tiers``), not when they are resolved.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from rentquote.core.config import settings
from rentquote.core.enums import TierFallback
from rentquote.core.metrics import tier_fallbacks, tier_data_warnings
from rentquote.schemas.catalog import PricingTier

logger = logging.getLogger(__name__)

FALLBACK_NO_TIERS = "no_tiers"
FALLBACK_NO_MATCH = "no_matching_tier"


class TierConfigurationError(ValueError):
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class TierResolution:
    price_per_day: Decimal
    discount_percent: Decimal
    tier: Optional[PricingTier] = None
    fallback_used: bool = False
    reason: Optional[str] = None


def _sorted(tiers: Sequence[PricingTier]) -> List[PricingTier]:
    return sorted(tiers, key=lambda t: t.period_start)


def tier_matches(tier: PricingTier, days: int) -> bool:
    return days >= tier.period_start and (tier.period_end is None or days <= tier.period_end)


def resolve(
    tiers: Sequence[PricingTier],
    days: int,
    fallback: TierFallback = TierFallback.FIRST,
    domain: str = "general",
) -> TierResolution:
    ordered = _sorted(tiers)
    for tier in ordered:
        if tier_matches(tier, days):
            return TierResolution(
                price_per_day=tier.price_per_day,
                discount_percent=tier.discount_percent,
                tier=tier,
            )

    if not ordered:
        logger.warning(
            f"No pricing tiers configured, using default {settings.FALLBACK_PRICE_PER_DAY}/day",
            extra={"domain": domain},
        )
        tier_fallbacks.labels(domain=domain, reason=FALLBACK_NO_TIERS).inc()
        return TierResolution(
            price_per_day=settings.FALLBACK_PRICE_PER_DAY,
            discount_percent=Decimal("0"),
            fallback_used=True,
            reason=FALLBACK_NO_TIERS,
        )

    chosen = ordered[-1] if fallback == TierFallback.LAST else ordered[0]
    logger.warning(
        f"No pricing tier covers {days} days, falling back to tier "
        f"{chosen.period_start}-{chosen.period_end or 'open'}",
        extra={"domain": domain},
    )
    tier_fallbacks.labels(domain=domain, reason=FALLBACK_NO_MATCH).inc()
    return TierResolution(
        price_per_day=chosen.price_per_day,
        discount_percent=chosen.discount_percent,
        tier=chosen,
        fallback_used=True,
        reason=FALLBACK_NO_MATCH,
    )


def validate_tiers(tiers: Sequence[PricingTier]) -> List[str]:
    """Return every contiguity problem in a tier list; empty means valid."""
    if not tiers:
        return ["at least one pricing tier is required"]

    errors: List[str] = []
    ordered = _sorted(tiers)

    if ordered[0].period_start != 1:
        errors.append(f"first tier must start at day 1, starts at {ordered[0].period_start}")

    open_tiers = [t for t in ordered if t.period_end is None]
    if len(open_tiers) > 1:
        errors.append("only one tier may be open-ended")
    if open_tiers and ordered[-1].period_end is not None:
        errors.append("the open-ended tier must be the last tier")

    for tier in ordered:
        if tier.period_end is not None and tier.period_end < tier.period_start:
            errors.append(f"tier {tier.period_start}-{tier.period_end} ends before it starts")

    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.period_end is None:
            continue
        if nxt.period_start <= prev.period_end:
            errors.append(
                f"tiers {prev.period_start}-{prev.period_end} and "
                f"{nxt.period_start}-{nxt.period_end or 'open'} overlap"
            )
        elif nxt.period_start > prev.period_end + 1:
            errors.append(f"days {prev.period_end + 1}-{nxt.period_start - 1} are not covered")

    return errors


def ensure_valid_tiers(tiers: Sequence[PricingTier]) -> None:
    errors = validate_tiers(tiers)
    if errors:
        raise TierConfigurationError(errors)


def discount_warnings(tiers: Sequence[PricingTier]) -> List[str]:
    """Flag tier lists where a longer rental earns a smaller discount."""
    warnings: List[str] = []
    ordered = _sorted(tiers)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.discount_percent < prev.discount_percent:
            warnings.append(
                f"discount drops from {prev.discount_percent}% to {nxt.discount_percent}% "
                f"at day {nxt.period_start}"
            )
    if warnings:
        tier_data_warnings.labels(kind="discount_not_monotonic").inc()
    return warnings

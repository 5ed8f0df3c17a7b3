from fastapi import APIRouter, HTTPException

from rentquote.core.enums import EquipmentDomain
from rentquote.core.money import round_money
from rentquote.schemas.catalog import (
    TierResolveOut,
    TierResolveRequest,
    TierValidateOut,
    TierValidateRequest,
)
from rentquote.services.domains import get_profile
from rentquote.services.tiers import discount_warnings, resolve, validate_tiers

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post("/tiers/resolve", response_model=TierResolveOut)
async def resolve_tier(payload: TierResolveRequest, domain: EquipmentDomain = EquipmentDomain.GENERAL):
    profile = get_profile(domain)
    resolution = resolve(
        payload.tiers,
        payload.days,
        profile.tier_fallback,
        str(domain),
    )
    try:
        return TierResolveOut(
            price_per_day=round_money(resolution.price_per_day),
            discount_percent=round_money(resolution.discount_percent),
            fallback_used=resolution.fallback_used,
            reason=resolution.reason,
            tier=resolution.tier,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/tiers/validate", response_model=TierValidateOut)
async def validate_tier_list(payload: TierValidateRequest):
    """Check a tier list before it is saved to the catalog."""
    errors = validate_tiers(payload.tiers)
    return TierValidateOut(
        valid=not errors,
        errors=errors,
        warnings=discount_warnings(payload.tiers),
    )

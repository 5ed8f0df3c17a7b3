"""Quote pricing endpoints with Redis caching"""
import json
import hashlib
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from rentquote.schemas.quote import (
    LineCalcRequest,
    Quote,
    QuoteLine,
    QuoteNumberOut,
    QuoteRequest,
    TotalsOut,
    TotalsRequest,
)
from rentquote.services.domains import get_profile
from rentquote.services.numbering import format_quote_number
from rentquote.services.pricing import compose_totals, price_line, price_quote
from rentquote.core.enums import EquipmentDomain
from rentquote.core.metrics import cache_hits, cache_misses, tier_fallbacks
from rentquote.core.redis import get_redis
from rentquote.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


def _generate_cache_key(req: QuoteRequest) -> str:
    params_str = json.dumps(req.model_dump(mode="json"), sort_keys=True)
    # Rounding mode changes totals, so it is part of the key
    params_str += f"|round_each={settings.ROUND_EACH_COMPONENT}"
    return f"quote:{hashlib.sha256(params_str.encode()).hexdigest()}"


def _record_cached_fallbacks(quote: Quote) -> None:
    # A cache hit skips the resolver, so its fallbacks are counted here
    domain = str(quote.domain)
    for line in quote.lines:
        if line.tier_fallback_used:
            tier_fallbacks.labels(domain=domain, reason=line.tier_fallback_reason or "unknown").inc()
            logger.warning(
                f"Cached quote line for {line.equipment_name} uses the tier fallback price",
                extra={"domain": domain, "equipment_id": line.equipment_id},
            )


@router.post("/calc", response_model=Quote)
async def calc_quote(req: QuoteRequest):

    cache_key = _generate_cache_key(req)
    redis = get_redis()

    if redis is not None:
        try:
            cached = await redis.get(cache_key)
            if cached:
                cache_hits.labels(cache="quote").inc()
                quote = Quote.model_validate_json(cached)
                _record_cached_fallbacks(quote)
                return quote
            cache_misses.labels(cache="quote").inc()
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    try:
        result = price_quote(req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if redis is not None:
        try:
            await redis.set(
                cache_key,
                result.model_dump_json(),
                ex=settings.QUOTE_CACHE_TTL
            )
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return result


@router.post("/lines/calc", response_model=QuoteLine)
async def calc_line(req: LineCalcRequest):
    try:
        return price_line(req.line, get_profile(req.domain))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/totals", response_model=TotalsOut)
async def calc_totals(req: TotalsRequest):
    try:
        return compose_totals(req.line_totals, req.vat_rate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/number", response_model=QuoteNumberOut)
async def quote_number(
    sequence: int = Query(..., ge=1),
    domain: EquipmentDomain = Query(EquipmentDomain.GENERAL),
    issued_on: Optional[date] = Query(None),
):
    issued_on = issued_on or date.today()
    return QuoteNumberOut(
        domain=domain,
        sequence=sequence,
        issued_on=issued_on,
        quote_number=format_quote_number(sequence, issued_on, domain),
    )

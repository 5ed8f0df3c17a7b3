import pytest
from decimal import Decimal

from rentquote.core.enums import TierFallback
from rentquote.core.metrics import registry
from rentquote.schemas.catalog import PricingTier
from rentquote.services.tiers import (
    TierConfigurationError,
    discount_warnings,
    ensure_valid_tiers,
    resolve,
    tier_matches,
    validate_tiers,
)


def _tier(start, end, price="100.00", discount="0"):
    return PricingTier(
        period_start=start,
        period_end=end,
        price_per_day=Decimal(price),
        discount_percent=Decimal(discount),
    )


def _fallback_count(domain, reason):
    value = registry.get_sample_value(
        "pricing_tier_fallbacks_total", {"domain": domain, "reason": reason}
    )
    return value or 0


class TestResolve:

    @pytest.mark.parametrize("days,price,discount", [
        (1, "100.00", "0"),
        (2, "100.00", "0"),
        (3, "85.71", "14.29"),
        (7, "85.71", "14.29"),
        (8, "64.29", "35.71"),
        (29, "64.29", "35.71"),
        (30, "42.86", "57.14"),
        (365, "42.86", "57.14"),
    ])
    def test_boundaries(self, contiguous_tiers, days, price, discount):
        res = resolve(contiguous_tiers, days)

        assert res.price_per_day == Decimal(price)
        assert res.discount_percent == Decimal(discount)
        assert res.fallback_used is False

    def test_every_day_matches_its_tier(self, contiguous_tiers):
        for days in range(1, 61):
            res = resolve(contiguous_tiers, days)
            assert tier_matches(res.tier, days)

    def test_input_order_does_not_matter(self, contiguous_tiers):
        shuffled = [contiguous_tiers[2], contiguous_tiers[0], contiguous_tiers[3], contiguous_tiers[1]]

        for days in (1, 5, 10, 40):
            assert resolve(shuffled, days).tier == resolve(contiguous_tiers, days).tier

    def test_gap_falls_back_to_first_tier(self, example_tiers):
        before = _fallback_count("general", "no_matching_tier")
        res = resolve(example_tiers, 10)

        assert res.fallback_used is True
        assert res.reason == "no_matching_tier"
        assert res.price_per_day == Decimal("100.00")
        assert res.discount_percent == Decimal("0")
        assert _fallback_count("general", "no_matching_tier") == before + 1

    def test_gap_falls_back_to_last_tier(self, example_tiers):
        res = resolve(example_tiers, 10, TierFallback.LAST, "catalog")

        assert res.fallback_used is True
        assert res.price_per_day == Decimal("42.86")
        assert res.discount_percent == Decimal("57.14")

    def test_no_tiers_uses_default_price(self, app_settings):
        before = _fallback_count("general", "no_tiers")
        res = resolve([], 5)

        assert res.price_per_day == app_settings.FALLBACK_PRICE_PER_DAY
        assert res.discount_percent == Decimal("0")
        assert res.tier is None
        assert res.reason == "no_tiers"
        assert _fallback_count("general", "no_tiers") == before + 1

    def test_fallback_is_logged(self, example_tiers, caplog):
        with caplog.at_level("WARNING"):
            resolve(example_tiers, 12)

        assert "No pricing tier covers 12 days" in caplog.text


class TestValidateTiers:

    def test_contiguous_list_is_valid(self, contiguous_tiers):
        assert validate_tiers(contiguous_tiers) == []
        ensure_valid_tiers(contiguous_tiers)

    def test_gap_reported(self, example_tiers):
        assert validate_tiers(example_tiers) == ["days 8-29 are not covered"]

    def test_empty_list(self):
        assert validate_tiers([]) == ["at least one pricing tier is required"]

    def test_must_start_at_day_one(self):
        errors = validate_tiers([_tier(2, None)])

        assert errors == ["first tier must start at day 1, starts at 2"]

    def test_overlap_reported(self):
        errors = validate_tiers([_tier(1, 5), _tier(4, None)])

        assert errors == ["tiers 1-5 and 4-open overlap"]

    def test_open_tier_must_be_last(self):
        errors = validate_tiers([_tier(1, None), _tier(5, 10)])

        assert "the open-ended tier must be the last tier" in errors

    def test_single_open_tier(self):
        errors = validate_tiers([_tier(1, 2), _tier(3, None), _tier(3, None)])

        assert "only one tier may be open-ended" in errors

    def test_end_before_start(self):
        errors = validate_tiers([_tier(1, 2), _tier(5, 3), _tier(6, None)])

        assert "tier 5-3 ends before it starts" in errors

    def test_ensure_raises_with_all_errors(self, example_tiers):
        with pytest.raises(TierConfigurationError) as exc_info:
            ensure_valid_tiers(example_tiers)

        assert exc_info.value.errors == ["days 8-29 are not covered"]
        assert isinstance(exc_info.value, ValueError)


class TestDiscountWarnings:

    def test_rising_discounts_are_fine(self, contiguous_tiers):
        assert discount_warnings(contiguous_tiers) == []

    def test_dropping_discount_flagged(self):
        tiers = [_tier(1, 2, discount="0"), _tier(3, 7, discount="20"), _tier(8, None, discount="10")]

        assert discount_warnings(tiers) == ["discount drops from 20% to 10% at day 8"]

import pytest

from rentquote.core.metrics import registry


def _installation_only(equipment_payload):
    return {
        "equipment": {**equipment_payload, "id": 2, "name": "Heater"},
        "price_per_day": "0",
        "logistics": {
            "installation": {"include": True, "distance_km": "20", "technician_count": 2},
        },
    }


@pytest.mark.integration
@pytest.mark.asyncio
async def test_calc_quote(test_client, generator_payload):
    response = await test_client.post("/quotes/calc", json={
        "domain": "electrical",
        "client": {"company_name": "Acme Events", "nip": "1234567890"},
        "lines": [
            {
                "equipment": generator_payload,
                "quantity": 2,
                "rental_period_days": 5,
                "price_per_day": "100",
                "selected_additional": [{"id": 10}],
            },
            _installation_only(generator_payload),
        ],
    })
    assert response.status_code == 200
    data = response.json()

    assert data["lines"][0]["base_total"] == "857.10"
    assert data["lines"][0]["additional_cost"] == "100.00"
    assert data["lines"][0]["total_price"] == "957.10"
    assert data["lines"][1]["installation_cost"] == "323.00"
    assert data["total_net"] == "1280.10"
    assert data["total_gross"] == "1574.52"
    assert data["vat_amount"] == "294.42"
    assert data["client"]["company_name"] == "Acme Events"
    assert data["status"] == "draft"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_calc_quote_unknown_add_on(test_client, generator_payload):
    response = await test_client.post("/quotes/calc", json={
        "lines": [{"equipment": generator_payload, "selected_additional": [{"id": 999}]}],
    })
    assert response.status_code == 422
    assert "999" in response.json()["detail"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_calc_quote_reports_fallback(test_client, generator_payload):
    response = await test_client.post("/quotes/calc", json={
        "lines": [{"equipment": generator_payload, "rental_period_days": 10}],
    })
    assert response.status_code == 200
    data = response.json()

    assert data["lines"][0]["tier_fallback_used"] is True
    assert data["lines"][0]["price_per_day"] == "100.00"
    assert data["warnings"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_calc_line_coerces_form_input(test_client, generator_payload):
    response = await test_client.post("/quotes/lines/calc", json={
        "line": {"equipment": generator_payload, "quantity": "abc", "rental_period_days": "0"},
    })
    assert response.status_code == 200
    data = response.json()

    assert data["quantity"] == 1
    assert data["rental_period_days"] == 1
    assert data["total_price"] == "100.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_calc_line_catalog_fallback(test_client, generator_payload):
    response = await test_client.post("/quotes/lines/calc", json={
        "domain": "catalog",
        "line": {"equipment": generator_payload, "rental_period_days": 10},
    })
    assert response.status_code == 200

    assert response.json()["price_per_day"] == "42.86"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_totals(test_client):
    response = await test_client.post("/quotes/totals", json={
        "line_totals": ["957.10", "323.00"],
        "vat_rate": "23",
    })
    assert response.status_code == 200
    assert response.json()["total_gross"] == "1574.52"

    response = await test_client.post("/quotes/totals", json={"line_totals": []})
    assert response.status_code == 200
    assert response.json()["total_net"] == "0.00"

    response = await test_client.post("/quotes/totals", json={"line_totals": ["10.00", "-1.00"]})
    assert response.status_code == 422


@pytest.mark.integration
@pytest.mark.asyncio
async def test_quote_number(test_client):
    response = await test_client.get("/quotes/number", params={
        "sequence": 3, "domain": "public", "issued_on": "2025-08-01",
    })
    assert response.status_code == 200
    assert response.json()["quote_number"] == "PUB/003/08.2025"

    response = await test_client.get("/quotes/number", params={"sequence": 0})
    assert response.status_code == 422


@pytest.mark.integration
@pytest.mark.asyncio
async def test_resolve_tier(test_client, generator_payload):
    tiers = generator_payload["pricing"]

    response = await test_client.post("/catalog/tiers/resolve", json={"tiers": tiers, "days": 5})
    assert response.status_code == 200
    data = response.json()
    assert data["price_per_day"] == "85.71"
    assert data["discount_percent"] == "14.29"
    assert data["fallback_used"] is False

    response = await test_client.post(
        "/catalog/tiers/resolve", params={"domain": "catalog"}, json={"tiers": tiers, "days": 10}
    )
    data = response.json()
    assert data["fallback_used"] is True
    assert data["price_per_day"] == "42.86"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_validate_tiers(test_client, generator_payload):
    response = await test_client.post("/catalog/tiers/validate", json={"tiers": generator_payload["pricing"]})
    assert response.status_code == 200
    data = response.json()

    assert data["valid"] is False
    assert data["errors"] == ["days 8-29 are not covered"]
    assert data["warnings"] == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_transport_calc(test_client):
    response = await test_client.post("/transport/calc", json={
        "cost_per_km": "3.20",
        "distance_km": "25",
        "include_handling_fee": True,
    })
    assert response.status_code == 200
    assert response.json() == {"base_cost": "80.00", "handling_fee": "198.00", "total_cost": "278.00"}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health_and_metrics(test_client, generator_payload):
    response = await test_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    response = await test_client.get("/readiness")
    assert response.json()["ready"] is True

    await test_client.post("/quotes/lines/calc", json={"line": {"equipment": generator_payload}})
    response = await test_client.get("/metrics")
    assert response.status_code == 200
    assert "quote_calculations_total" in response.text
    assert "http_requests_total" in response.text


class _DictRedis:
    """In-memory stand-in for the async Redis client used by the quote cache."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_resolve_tier_money_is_two_decimal(test_client):
    response = await test_client.post("/catalog/tiers/resolve", json={"tiers": [], "days": 3})
    assert response.status_code == 200
    data = response.json()

    assert data["price_per_day"] == "100.00"
    assert data["discount_percent"] == "0.00"
    assert data["reason"] == "no_tiers"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_add_on_snapshot_price_is_two_decimal(test_client, generator_payload):
    generator_payload["additional"][0]["price_per_day"] = "20"

    response = await test_client.post("/quotes/lines/calc", json={
        "line": {"equipment": generator_payload, "selected_additional": [{"id": 10}]},
    })
    assert response.status_code == 200

    assert response.json()["selected_additional"][0]["price_per_day"] == "20.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_out_of_range_amount_rejected(test_client, generator_payload):
    response = await test_client.post("/quotes/lines/calc", json={
        "line": {"equipment": generator_payload, "price_per_day": "1e30"},
    })
    assert response.status_code == 422

    response = await test_client.post("/transport/calc", json={"cost_per_km": "1e30", "distance_km": "10"})
    assert response.status_code == 422


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cached_quote_still_counts_fallbacks(test_client, generator_payload, monkeypatch):
    fake = _DictRedis()
    monkeypatch.setattr("rentquote.api.quotes.get_redis", lambda: fake)
    payload = {"lines": [{"equipment": generator_payload, "rental_period_days": 10}]}
    labels = {"domain": "general", "reason": "no_matching_tier"}
    before = registry.get_sample_value("pricing_tier_fallbacks_total", labels) or 0
    hits_before = registry.get_sample_value("cache_hits_total", {"cache": "quote"}) or 0

    first = await test_client.post("/quotes/calc", json=payload)
    second = await test_client.post("/quotes/calc", json=payload)

    assert first.status_code == second.status_code == 200
    assert second.json() == first.json()
    assert second.json()["lines"][0]["tier_fallback_reason"] == "no_matching_tier"
    assert registry.get_sample_value("cache_hits_total", {"cache": "quote"}) == hits_before + 1
    assert registry.get_sample_value("pricing_tier_fallbacks_total", labels) == before + 2

"""Tests for the partner self-admin endpoints.

Endpoints:
- GET /showroom/{slug}/admin/arbitrage - offers ranked by cost-basis margin
- PUT /showroom/{slug}/admin/offers/{offer_id} - custom sale price in EUR

Reference values (rate 4.3, single-car transport 900 EUR, no extra costs):
- X5 at 25 000 EUR: margin 1 379.27 EUR (6.96 %)
- A6 at 48 046.51 EUR: margin 2 003.05 EUR (5.17 %)
- 320i without custom price: break-even 3 806.18 EUR, margin 0
"""

from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from showroom.api.app import app


def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


ADMIN = "/api/showroom/autohaus-utrecht/admin"


async def setup_partner(http: AsyncClient, partner_payload, rate: float = 4.3) -> dict:
    await http.put("/api/settings", json={"exchange_rate_eur": rate})
    response = await http.post("/api/partners", json=partner_payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCustomPriceEur:
    """Tests for PUT /showroom/{slug}/admin/offers/{offer_id}."""

    @pytest.mark.asyncio
    async def test_stored_as_whole_pln(self, test_db, sample_offers, partner_payload):
        async with client() as http:
            await setup_partner(http, partner_payload)
            response = await http.put(
                f"{ADMIN}/offers/{sample_offers['x5'].id}", json={"custom_price_eur": 25000}
            )
            showroom = await http.get(
                f"/api/showroom/autohaus-utrecht/offers/{sample_offers['x5'].id}"
            )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["custom_price"] == 107500.0
        assert data["calculated_price"] == 107500.0
        assert data["calculated_price_net"] == 87398
        assert showroom.json()["display_price"] == 107500.0

    @pytest.mark.asyncio
    async def test_null_clears_custom_price(self, test_db, sample_offers, partner_payload):
        url = f"{ADMIN}/offers/{sample_offers['x5'].id}"
        async with client() as http:
            await setup_partner(http, partner_payload)
            await http.put(url, json={"custom_price_eur": 25000})
            response = await http.put(url, json={"custom_price_eur": None})

        data = response.json()
        assert data["custom_price"] is None
        assert data["calculated_price"] == 110000  # default 10 % margin

    @pytest.mark.asyncio
    async def test_missing_exchange_rate(self, test_db, sample_offers, partner_payload):
        async with client() as http:
            await setup_partner(http, partner_payload, rate=0)
            response = await http.put(
                f"{ADMIN}/offers/{sample_offers['x5'].id}", json={"custom_price_eur": 25000}
            )

        assert response.status_code == 400
        assert response.json()["detail"] == "Exchange rate is not configured"

    @pytest.mark.asyncio
    async def test_non_positive_price_rejected(self, test_db, sample_offers, partner_payload):
        async with client() as http:
            await setup_partner(http, partner_payload)
            response = await http.put(
                f"{ADMIN}/offers/{sample_offers['x5'].id}", json={"custom_price_eur": 0}
            )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_offer_outside_filters(self, test_db, sample_offers, partner_payload):
        async with client() as http:
            partner = await setup_partner(http, partner_payload)
            await http.post(f"/api/partners/{partner['id']}/filters", json={"brand_name": "BMW"})
            filtered = await http.put(
                f"{ADMIN}/offers/{sample_offers['a6'].id}", json={"custom_price_eur": 50000}
            )
            unknown = await http.put(f"{ADMIN}/offers/{uuid4()}", json={"custom_price_eur": 1})

        assert filtered.status_code == 404
        assert unknown.status_code == 404
        assert unknown.json()["detail"] == "Offer not found"

    @pytest.mark.asyncio
    async def test_inactive_partner(self, test_db, sample_offers, partner_payload):
        partner_payload["is_active"] = False
        async with client() as http:
            await setup_partner(http, partner_payload)
            response = await http.put(
                f"{ADMIN}/offers/{sample_offers['x5'].id}", json={"custom_price_eur": 25000}
            )

        assert response.status_code == 404
        assert response.json()["detail"] == "Partner not found"


class TestCostBasisArbitrage:
    """Tests for GET /showroom/{slug}/admin/arbitrage."""

    @pytest_asyncio.fixture
    async def priced_partner(self, test_db, sample_offers, partner_payload):
        """Partner with EUR custom prices on the X5 and the A6."""
        async with client() as http:
            await setup_partner(http, partner_payload)
            await http.put(
                f"{ADMIN}/offers/{sample_offers['x5'].id}", json={"custom_price_eur": 25000}
            )
            await http.put(
                f"{ADMIN}/offers/{sample_offers['a6'].id}", json={"custom_price_eur": 48046.51}
            )
        return sample_offers

    @pytest.mark.asyncio
    async def test_default_sort_by_margin_percent(self, priced_partner):
        async with client() as http:
            response = await http.get(f"{ADMIN}/arbitrage")

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["partner_slug"] == "autohaus-utrecht"
        assert data["exchange_rate_pln_per_eur"] == 4.3
        assert data["exchange_rate_missing"] is False
        assert data["batch_size"] == 1
        assert data["transport_cost_per_car_eur"] == 900.0

        items = data["items"]
        assert [item["model"] for item in items] == ["X5", "A6", "320i"]
        assert [item["rank"] for item in items] == [1, 2, 3]
        assert [item["breakdown"]["margin_percent"] for item in items] == [6.96, 5.17, 0.0]

    @pytest.mark.asyncio
    async def test_sort_by_margin_eur(self, priced_partner):
        async with client() as http:
            response = await http.get(f"{ADMIN}/arbitrage", params={"sort": "margin_eur_desc"})

        items = response.json()["items"]
        assert [item["model"] for item in items] == ["A6", "X5", "320i"]
        assert [item["breakdown"]["margin_eur"] for item in items] == [2003.05, 1379.27, 0.0]

    @pytest.mark.asyncio
    async def test_break_even_without_custom_price(self, priced_partner):
        async with client() as http:
            response = await http.get(f"{ADMIN}/arbitrage", params={"q": "320i"})

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["custom_price"] is None
        assert items[0]["is_break_even_price"] is True
        assert items[0]["sale_gross_eur"] == 3806.18
        assert items[0]["breakdown"]["total_cost_eur"] == 3225.58
        assert items[0]["breakdown"]["margin_eur"] == 0.0

    @pytest.mark.asyncio
    async def test_batch_size_spreads_transport(self, priced_partner):
        async with client() as http:
            response = await http.get(f"{ADMIN}/arbitrage", params={"batch_size": 3})

        data = response.json()
        assert data["transport_bundles"] == [4]
        assert data["transport_cost_total_eur"] == 2600.0
        assert data["transport_cost_per_car_eur"] == 866.67
        assert all(item["breakdown"]["transport_cost_eur"] == 866.67 for item in data["items"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"batch_size": 0}, {"batch_size": 1001}, {"sort": "x"}])
    async def test_invalid_query(self, test_db, partner_payload, params):
        async with client() as http:
            await setup_partner(http, partner_payload)
            response = await http.get(f"{ADMIN}/arbitrage", params=params)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_partner(self, test_db):
        async with client() as http:
            response = await http.get("/api/showroom/nobody/admin/arbitrage")

        assert response.status_code == 404

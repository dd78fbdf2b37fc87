# backend/tests/routers/test_prices_api.py
"""
Integration tests for the Prices API endpoints.

Tests cover:
- GET /prices/{category}/{symbol}
- POST /prices/refresh

The price service is wired to mock providers by the `client` fixture.
"""

from portfolio_analytics.services.exceptions import ProviderUnavailableError


class TestGetPriceEndpoint:
    """Tests for GET /prices/{category}/{symbol}."""

    def test_stock_quote(self, client, stock_provider):
        stock_provider.add_quote("AAPL", "178.50", change_percent="1.2")

        response = client.get("/prices/stocks/aapl")

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["price"] == "178.5"
        assert data["change"] is None
        assert data["change_percent"] == "1.2"
        assert data["source"] == "yahoo"
        assert "timestamp" in data

    def test_cached_quote(self, client, stock_provider):
        stock_provider.add_quote("AAPL", "178.5")

        client.get("/prices/stocks/AAPL")
        response = client.get("/prices/stocks/AAPL")

        assert response.json()["source"] == "cache"
        assert stock_provider.single_call_count == 1

    def test_crypto_shorthand(self, client, crypto_provider):
        crypto_provider.add_quote("bitcoin", "64000.5")

        response = client.get("/prices/crypto/BTC")

        assert response.status_code == 200
        assert response.json()["symbol"] == "bitcoin"

    def test_gold(self, client, stock_provider):
        stock_provider.add_quote("GC=F", "2350")

        response = client.get("/prices/gold/spot")

        assert response.json()["price"] == "2350"

    def test_unknown_symbol(self, client):
        response = client.get("/prices/stocks/ZZZZ")

        assert response.status_code == 404
        assert response.json() == {
            "error": "NotFoundError",
            "message": "No price available for stocks/ZZZZ",
            "details": None,
        }

    def test_unsupported_category(self, client):
        response = client.get("/prices/real_estate/house")

        assert response.status_code == 404

    def test_provider_down(self, client, stock_provider):
        stock_provider.add_error("AAPL", ProviderUnavailableError(provider="yahoo", reason="down"))

        response = client.get("/prices/stocks/AAPL")

        assert response.status_code == 404


class TestRefreshEndpoint:
    """Tests for POST /prices/refresh."""

    def test_refresh(self, client, stock_provider, crypto_provider):
        stock_provider.add_quote("AAPL", "190")
        crypto_provider.add_quote("ethereum", "3000")

        response = client.post("/prices/refresh", json={
            "assets": [
                {
                    "id": "aapl",
                    "category": "stocks",
                    "symbol": "AAPL",
                    "quantity": "50",
                    "purchase_price": "150",
                    "current_price": "178.5",
                },
                {"id": "eth", "category": "crypto", "quantity": "2", "purchase_price": "2000"},
                {"id": "house", "category": "real_estate", "quantity": "1", "purchase_price": "300000"},
            ],
            "symbols": {"eth": "ETH"},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["refreshed"] == 2
        assert [a["current_price"] for a in data["assets"]] == ["190", "3000", None]
        assert data["assets"][0]["quantity"] == "50"
        assert data["assets"][2]["is_liability"] is False

    def test_nothing_to_refresh(self, client):
        response = client.post("/prices/refresh", json={"assets": [
            {"id": "cash", "category": "cash", "quantity": "100", "purchase_price": "1"},
        ]})

        assert response.json()["refreshed"] == 0

    def test_invalid_asset(self, client):
        response = client.post("/prices/refresh", json={"assets": [
            {"id": "x", "category": "art", "quantity": "1", "purchase_price": "1"},
        ]})

        assert response.status_code == 400

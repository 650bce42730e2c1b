"""Tests for the outbound HTTP clients (FX, IP geolocation, reverse geocode, tiers)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pricing_core.data.default_tiers import DEFAULT_TIERS
from pricing_core.exceptions import CatalogFetchError, LocationLookupError, RateFetchError
from pricing_core.interfaces.geolocation import Coordinates
from pricing_engine.clients.exchange_rates import ExchangeRateClient
from pricing_engine.clients.ip_geolocation import IPGeolocationClient, extract_country
from pricing_engine.clients.reverse_geocode import ReverseGeocodeClient
from pricing_engine.clients.tier_catalog import TierCatalogClient
from tests.mocks.mock_http import fx_payload, make_http_client, make_response, tier_payload

FX_URL = "https://fx.test/latest/USD"


def _fx_client(http: MagicMock, attempts: int = 1) -> ExchangeRateClient:
    return ExchangeRateClient(http, FX_URL, max_attempts=attempts, wait_min=0, wait_max=0)


@pytest.mark.unit
class TestExchangeRateClient:
    """Tests for the FX rate client."""

    @pytest.mark.asyncio
    async def test_fetch_rates(self) -> None:
        """Positive numeric rates are returned with uppercase codes."""
        body = {"rates": {"usd": 1, "NGN": 1520.5, "EUR": 0.92, "BAD": "x", "ZERO": 0}}
        http = make_http_client({FX_URL: make_response(body)})
        rates = await _fx_client(http).fetch_rates()
        assert rates == {"USD": 1.0, "NGN": 1520.5, "EUR": 0.92}

    @pytest.mark.asyncio
    async def test_missing_rates_table(self) -> None:
        """A body without 'rates' is a RateFetchError."""
        http = make_http_client({FX_URL: make_response({"result": "error"})})
        with pytest.raises(RateFetchError, match="no 'rates' table"):
            await _fx_client(http).fetch_rates()

    @pytest.mark.asyncio
    async def test_no_usable_rates(self) -> None:
        """A rates table with nothing positive is a RateFetchError."""
        http = make_http_client({FX_URL: make_response({"rates": {"EUR": -1}})})
        with pytest.raises(RateFetchError, match="no usable rates"):
            await _fx_client(http).fetch_rates()

    @pytest.mark.asyncio
    async def test_non_json(self) -> None:
        """An HTML error page becomes RateFetchError."""
        http = make_http_client({FX_URL: make_response(json_error=ValueError("bad json"))})
        with pytest.raises(RateFetchError, match="not JSON"):
            await _fx_client(http).fetch_rates()

    @pytest.mark.asyncio
    async def test_http_error_propagates(self) -> None:
        """Non-2xx responses surface as httpx.HTTPStatusError without retrying."""
        http = make_http_client({FX_URL: make_response({}, status_code=503)})
        with pytest.raises(httpx.HTTPStatusError):
            await _fx_client(http, attempts=3).fetch_rates()
        assert http.get.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_transport_errors(self) -> None:
        """Connection failures are retried up to max_attempts."""
        http = MagicMock()
        http.get = AsyncMock(
            side_effect=[
                httpx.ConnectError("down"),
                httpx.ReadTimeout("slow"),
                make_response(fx_payload(EUR=0.9)),
            ]
        )
        rates = await _fx_client(http, attempts=3).fetch_rates()
        assert rates["EUR"] == 0.9
        assert http.get.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        """The last transport error is re-raised."""
        http = MagicMock()
        http.get = AsyncMock(side_effect=httpx.ConnectError("down"))
        with pytest.raises(httpx.ConnectError):
            await _fx_client(http, attempts=2).fetch_rates()
        assert http.get.await_count == 2


@pytest.mark.unit
class TestExtractCountry:
    """Tests for provider payload normalization."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"country_code": "ng", "country": "Nigeria"}, ("NG", "Nigeria")),
            ({"country_code": "GB", "country_name": "United Kingdom"}, ("GB", "United Kingdom")),
            ({"country": "KE", "country_name": "Kenya"}, ("KE", "Kenya")),
            ({"country": "IN"}, ("IN", "IN")),
            ({"country_code": "", "country": ""}, None),
            ({"ip": "1.2.3.4"}, None),
        ],
    )
    def test_extract_country(
        self, data: dict[str, object], expected: tuple[str, str] | None
    ) -> None:
        """Both provider shapes are understood."""
        assert extract_country(data) == expected


@pytest.mark.unit
class TestIPGeolocationClient:
    """Tests for a single-provider IP lookup."""

    @pytest.mark.asyncio
    async def test_lookup(self) -> None:
        """A country code maps to its currency and keeps the timezone."""
        url = "https://ip-a.test/json"
        body = {"country_code": "NG", "country": "Nigeria", "timezone": "Africa/Lagos"}
        http = make_http_client({url: make_response(body)})
        signal = await IPGeolocationClient(http).lookup(url)
        assert signal.country_code == "NG"
        assert signal.currency == "NGN"
        assert signal.timezone == "Africa/Lagos"

    @pytest.mark.asyncio
    async def test_unknown_country_maps_to_usd(self) -> None:
        """Countries outside the table fall back to USD."""
        url = "https://ip-a.test/json"
        http = make_http_client({url: make_response({"country_code": "BR"})})
        signal = await IPGeolocationClient(http).lookup(url)
        assert signal.currency == "USD"

    @pytest.mark.asyncio
    async def test_no_country(self) -> None:
        """A payload with no country is a LocationLookupError."""
        url = "https://ip-a.test/json"
        http = make_http_client({url: make_response({"error": True, "reason": "RateLimited"})})
        with pytest.raises(LocationLookupError):
            await IPGeolocationClient(http).lookup(url)

    @pytest.mark.asyncio
    async def test_non_object_payload(self) -> None:
        """A list payload is rejected."""
        url = "https://ip-a.test/json"
        http = make_http_client({url: make_response(["NG"])})
        with pytest.raises(LocationLookupError, match="non-object"):
            await IPGeolocationClient(http).lookup(url)


@pytest.mark.unit
class TestReverseGeocodeClient:
    """Tests for the coordinates-to-country client."""

    @pytest.mark.asyncio
    async def test_lookup(self) -> None:
        """countryCode and countryName are returned; coordinates go as params."""
        url = "https://geo.test/reverse"
        http = make_http_client(
            {url: make_response({"countryCode": "gh", "countryName": "Ghana"})}
        )
        result = await ReverseGeocodeClient(http, url).lookup(Coordinates(5.6, -0.19))
        assert result == ("GH", "Ghana")
        params = http.get.await_args.kwargs["params"]
        assert params == {"latitude": 5.6, "longitude": -0.19, "localityLanguage": "en"}

    @pytest.mark.asyncio
    async def test_missing_country(self) -> None:
        """Open ocean has no country."""
        url = "https://geo.test/reverse"
        http = make_http_client({url: make_response({"countryCode": ""})})
        with pytest.raises(LocationLookupError):
            await ReverseGeocodeClient(http, url).lookup(Coordinates(0, 0))


@pytest.mark.unit
class TestTierCatalogClient:
    """Tests for the backend tier endpoint client."""

    URL = "https://backend.test/api/subscriptions/tiers/"

    @pytest.mark.asyncio
    async def test_fetch_tiers_sends_token(self) -> None:
        """Tiers are parsed and the bearer token is sent."""
        http = make_http_client({self.URL: make_response([tier_payload("starter")])})
        client = TierCatalogClient(http, "https://backend.test/", token="tok")
        tiers = await client.fetch_tiers()
        assert [t.id for t in tiers] == ["starter"]
        headers = http.get.await_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self) -> None:
        """Without a token no Authorization header is sent."""
        http = make_http_client({self.URL: make_response([])})
        await TierCatalogClient(http, "https://backend.test").fetch_tiers()
        assert "Authorization" not in http.get.await_args.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_malformed_entry(self) -> None:
        """One invalid tier fails the whole fetch."""
        bad = tier_payload("broken")
        del bad["basePrice"]
        http = make_http_client({self.URL: make_response([tier_payload(), bad])})
        with pytest.raises(CatalogFetchError):
            await TierCatalogClient(http, "https://backend.test").fetch_tiers()

    @pytest.mark.asyncio
    async def test_save_tier_posts_camel_case(self) -> None:
        """save_tier posts the backend wire format."""
        http = make_http_client()
        await TierCatalogClient(http, "https://backend.test").save_tier(DEFAULT_TIERS[1])
        body = http.post.await_args.kwargs["json"]
        assert body["id"] == "basic"
        assert body["basePrice"] == {"monthly": 9.99, "yearly": 99.99, "quarterly": None}
        assert body["isPopular"] is False

    @pytest.mark.asyncio
    async def test_save_tier_http_error(self) -> None:
        """Backend rejections raise HTTPStatusError."""
        http = make_http_client(post=make_response({}, status_code=400))
        with pytest.raises(httpx.HTTPStatusError):
            await TierCatalogClient(http, "https://backend.test").save_tier(DEFAULT_TIERS[0])

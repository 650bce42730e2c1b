"""Fake HTTP responses and clients for provider tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx


def make_response(
    json_data: object = None,
    *,
    status_code: int = 200,
    json_error: Exception | None = None,
) -> MagicMock:
    """Create a mock httpx.Response.

    ``raise_for_status`` raises ``httpx.HTTPStatusError`` for 4xx/5xx codes;
    ``json_error`` makes ``.json()`` raise instead of returning ``json_data``.
    """
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                f"status {status_code}", request=MagicMock(), response=response
            )
        )
    else:
        response.raise_for_status = MagicMock()
    return response


def make_http_client(
    routes: dict[str, MagicMock | Exception] | None = None,
    *,
    post: MagicMock | Exception | None = None,
) -> MagicMock:
    """Create a mock AsyncClient whose ``get`` answers by URL.

    Unrouted URLs raise ``httpx.ConnectError``. Each route may be a response
    or an exception to raise.
    """
    routes = routes or {}

    async def _get(url: str, **_kwargs: object) -> MagicMock:
        outcome = routes.get(url)
        if outcome is None:
            raise httpx.ConnectError(f"no route for {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    http = MagicMock(spec=httpx.AsyncClient)
    http.get = AsyncMock(side_effect=_get)
    if isinstance(post, Exception):
        http.post = AsyncMock(side_effect=post)
    else:
        http.post = AsyncMock(return_value=post or make_response({}))
    http.aclose = AsyncMock()
    return http


def fx_payload(**rates: float) -> dict[str, object]:
    """An exchangerate-api style body for base USD."""
    return {"base": "USD", "rates": {"USD": 1.0, **rates}}


def tier_payload(
    tier_id: str = "starter",
    *,
    monthly: float = 5.0,
    yearly: float = 50.0,
    **extra: object,
) -> dict[str, object]:
    """A camelCase tier as served by the backend catalog endpoint."""
    payload: dict[str, object] = {
        "id": tier_id,
        "name": tier_id.title(),
        "description": f"{tier_id} plan",
        "basePrice": {"monthly": monthly, "yearly": yearly},
        "features": {
            "job_applications": 25,
            "cv_uploads": 2,
            "email_accounts": 1,
            "ai_requests": 50,
        },
        "isPopular": False,
        "isEnterprise": False,
        "yearlyDiscount": 10,
    }
    payload.update(extra)
    return payload

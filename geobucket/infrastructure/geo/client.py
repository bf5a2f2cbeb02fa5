"""
IP geolocation and exchange-rate lookups.

Thin async wrappers around two public JSON APIs:
- ip-api.com for location and local currency
- exchangerate-api.com for currency rates

Every lookup is best-effort. A network error, bad status or unexpected
payload yields a safe default (USD / UTC / rate 1) instead of an
exception, so pricing pages keep rendering when a provider is down.

Callers may pass their own httpx.AsyncClient (connection reuse, tests
with MockTransport). Otherwise a short-lived client is opened per call.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ...config.settings import get_settings
from ...core.pricing.conversion import best_effort

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE_RATE = 1


class LocationInfo(BaseModel):
    """
    Geolocation provider response.

    Field names follow the provider's camelCase on input; attributes are
    snake_case. Unknown fields are kept as extras.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    region: Optional[str] = None
    region_name: Optional[str] = Field(default=None, alias="regionName")
    city: Optional[str] = None
    district: Optional[str] = None
    zip: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: Optional[str] = None
    offset: Optional[int] = None
    currency: Optional[str] = None
    query: Optional[str] = None


def fallback_location(*args, **kwargs) -> LocationInfo:
    """Location returned when the provider cannot be reached."""
    settings = get_settings()
    return LocationInfo(
        currency=settings.fallback_currency,
        timezone=settings.fallback_timezone,
    )


def fallback_currency(*args, **kwargs) -> str:
    return get_settings().fallback_currency


def fallback_exchange_rate(*args, **kwargs) -> float:
    return DEFAULT_EXCHANGE_RATE


@asynccontextmanager
async def _http_client(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the caller's client as-is, or a fresh one that is closed afterwards."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(timeout=get_settings().http_timeout_seconds) as owned:
        yield owned


async def _fetch_location_payload(
    ip_address: str,
    http_client: Optional[httpx.AsyncClient],
) -> dict:
    settings = get_settings()
    url = f"{settings.geolocation_url.rstrip('/')}/{ip_address}"

    async with _http_client(http_client) as client:
        response = await client.get(url, params={"fields": ",".join(settings.geolocation_fields_list)})
        response.raise_for_status()
        payload = response.json()

    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected geolocation payload: {type(payload).__name__}")

    logger.debug(
        "Fetched location",
        extra={"ip_address": ip_address, "status": payload.get("status")}
    )
    return payload


@best_effort(fallback_location)
async def get_location_info(
    ip_address: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> LocationInfo:
    """Look up location details for an IP address."""
    payload = await _fetch_location_payload(ip_address, http_client)
    return LocationInfo.model_validate(payload)


@best_effort(fallback_currency)
async def get_currency_by_ip(
    ip_address: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Local currency code for an IP address, USD when unknown."""
    payload = await _fetch_location_payload(ip_address, http_client)
    return payload.get("currency") or get_settings().fallback_currency


@best_effort(fallback_exchange_rate)
async def get_exchange_rate(
    from_currency: str,
    to_currency: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> float:
    """
    Rate converting `from_currency` into `to_currency`.

    Returns 1 when the rate is missing or the provider fails, so a
    result of 1 is both the identity rate and the failure value.
    """
    settings = get_settings()
    url = f"{settings.exchange_rate_url.rstrip('/')}/{from_currency}"

    async with _http_client(http_client) as client:
        response = await client.get(url)
        response.raise_for_status()
        rates = response.json().get("rates") or {}

    rate = rates.get(to_currency)
    if not rate:
        logger.warning(
            "Exchange rate missing, using identity rate",
            extra={"from": from_currency, "to": to_currency}
        )
        return DEFAULT_EXCHANGE_RATE

    return rate

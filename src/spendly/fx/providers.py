"""External exchange rate providers.

A provider returns one bulk snapshot of pivot-relative rates
(pivot -> currency). Every failure mode is reported as RateProviderError so
the resolver can fall through to the next tier.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from spendly.config import Settings
from spendly.core.exceptions import RateProviderError

logger = logging.getLogger(__name__)


class RateProvider(Protocol):
    pivot: str

    async def fetch_latest(self) -> dict[str, float]:
        """Return {currency_code: rate} relative to ``pivot``."""
        ...


class OpenExchangeRatesProvider:
    """Open Exchange Rates ``latest.json`` client."""

    def __init__(
        self,
        app_id: str,
        *,
        base_url: str = "https://openexchangerates.org/api",
        pivot: str = "USD",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self.pivot = pivot.upper()
        self.timeout = timeout
        self._client = client

    async def fetch_latest(self) -> dict[str, float]:
        url = f"{self.base_url}/latest.json"
        params = {"app_id": self.app_id, "base": self.pivot}
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise RateProviderError("timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise RateProviderError(
                "http_status", status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise RateProviderError("network", error_type=type(exc).__name__) from exc
        except ValueError as exc:
            raise RateProviderError("malformed_response") from exc

        return parse_rates(payload)


def parse_rates(payload: Any) -> dict[str, float]:
    """Extract a clean {CODE: rate} map from a provider payload.

    Entries that are not positive numbers are dropped. A payload without a
    usable ``rates`` object is an error.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("rates"), dict):
        raise RateProviderError("malformed_response")

    rates: dict[str, float] = {}
    for code, value in payload["rates"].items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value <= 0:
            continue
        rates[str(code).strip().upper()] = float(value)

    if not rates:
        raise RateProviderError("empty_rates")
    return rates


def build_rate_provider(settings: Settings) -> RateProvider | None:
    """Provider configured from settings, or None when no app id is set."""
    if not settings.open_exchange_rates_app_id:
        logger.info("OPEN_EXCHANGE_RATES_APP_ID not set; using static FX rates only")
        return None
    return OpenExchangeRatesProvider(
        settings.open_exchange_rates_app_id,
        base_url=settings.fx_provider_base_url,
        pivot=settings.fx_pivot_currency,
        timeout=settings.fx_provider_timeout_seconds,
    )

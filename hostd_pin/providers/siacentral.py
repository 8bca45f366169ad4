"""SiaCentral market API provider implementation."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

import httpx

from hostd_pin.providers.base import BaseQuoteProvider
from hostd_pin.utils.errors import CurrencyNotFoundError, QuoteUnavailable
from hostd_pin.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.siacentral.com/v2"


class SiaCentralClient(BaseQuoteProvider):
    NAME = "siacentral"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def get_rates(self) -> dict:
        """Return the raw currency -> rate mapping from the market endpoint."""
        url = f"{self.base_url}/market/exchange-rate"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                data = resp.json() or {}
        except Exception as e:
            logger.error(f"SiaCentral request failed: {e}")
            raise QuoteUnavailable(f"failed to get exchange rate: {e}") from e

        if data.get("type", "success") != "success":
            message = data.get("message", "unknown error")
            logger.error(f"SiaCentral API error: {message}")
            raise QuoteUnavailable(f"failed to get exchange rate: {message}")

        rates = data.get("rates")
        if not isinstance(rates, dict):
            raise QuoteUnavailable("invalid response from SiaCentral: missing rates")
        return rates

    async def get_quote(self, currency: str) -> Decimal:
        rates = await self.get_rates()

        value = rates.get(currency.lower())
        if value is None:
            logger.error(
                f"SiaCentral response missing rate for {currency}. "
                f"Available currencies: {sorted(rates.keys())}"
            )
            raise CurrencyNotFoundError(currency)

        try:
            rate = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise QuoteUnavailable(f"invalid rate for {currency}: {value!r}") from e
        if not rate.is_finite():
            raise QuoteUnavailable(f"invalid rate for {currency}: {value!r}")
        return rate

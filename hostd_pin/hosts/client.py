"""hostd settings API client."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from hostd_pin.pricing.conversion import HostPrices
from hostd_pin.utils.errors import EndpointUpdateFailure
from hostd_pin.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class Host:
    """A hostd instance whose prices are managed."""

    address: str  # API address, e.g. http://localhost:9980/api
    password: str

    def __repr__(self) -> str:
        return f"Host(address={self.address!r})"


class HostUpdater(ABC):
    """Pushes price settings to a single host."""

    @abstractmethod
    async def push_price_settings(self, host: Host, prices: HostPrices) -> None:
        """Update the host's prices; raises EndpointUpdateFailure on error."""


class HostdClient(HostUpdater):
    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    async def push_price_settings(self, host: Host, prices: HostPrices) -> None:
        url = f"{host.address.rstrip('/')}/settings"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, auth=httpx.BasicAuth("", host.password)
            ) as client:
                resp = await client.patch(url, json=prices.to_settings())
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = f"{e.response.status_code} {e.response.text.strip()}"
            raise EndpointUpdateFailure(host.address, detail.strip()) from e
        except Exception as e:
            raise EndpointUpdateFailure(host.address, str(e)) from e

        logger.debug("updated host", extra={"host": host.address})
